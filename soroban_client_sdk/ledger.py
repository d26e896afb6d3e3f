"""
Ledger keys and ledger entries needed to locate contract wasm.
"""
import base64
from enum import IntEnum

from .exceptions import XdrDecodeError
from .scval import (
    ContractInstance, ScAddress, ScAddressType, ScVal, ScValType,
    read_sc_address, read_sc_val, write_sc_address, write_sc_val,
)
from .xdr import XdrReader, XdrWriter, decode_contract_id

# Number of uint32 fields in ContractCodeCostInputs
_COST_INPUT_FIELDS = 10


class LedgerEntryType(IntEnum):
    ACCOUNT = 0
    TRUSTLINE = 1
    OFFER = 2
    DATA = 3
    CLAIMABLE_BALANCE = 4
    LIQUIDITY_POOL = 5
    CONTRACT_DATA = 6
    CONTRACT_CODE = 7
    CONFIG_SETTING = 8
    TTL = 9


class ContractDataDurability(IntEnum):
    TEMPORARY = 0
    PERSISTENT = 1


def contract_code_ledger_key(wasm_hash: bytes) -> str:
    """Base64 LedgerKey for the wasm stored under ``wasm_hash``."""
    if len(wasm_hash) != 32:
        raise ValueError(f"Wasm hash must be 32 bytes, got {len(wasm_hash)}")
    writer = XdrWriter()
    writer.write_int32(LedgerEntryType.CONTRACT_CODE)
    writer.write_fixed_opaque(wasm_hash)
    return base64.b64encode(writer.to_bytes()).decode("ascii")


def contract_instance_ledger_key(contract_id: str) -> str:
    """Base64 LedgerKey for the persistent instance entry of a deployed contract."""
    writer = XdrWriter()
    writer.write_int32(LedgerEntryType.CONTRACT_DATA)
    write_sc_address(writer, ScAddress(ScAddressType.CONTRACT, decode_contract_id(contract_id)))
    write_sc_val(writer, ScVal.ledger_key_contract_instance())
    writer.write_int32(ContractDataDurability.PERSISTENT)
    return base64.b64encode(writer.to_bytes()).decode("ascii")


def _read_extension_point(reader: XdrReader) -> None:
    version = reader.read_int32()
    if version != 0:
        raise XdrDecodeError(f"Unsupported extension point version {version}")


def _read_entry_type(reader: XdrReader, expected: LedgerEntryType) -> None:
    entry_type = reader.read_int32()
    if entry_type != expected:
        raise XdrDecodeError(f"Expected {expected.name} ledger entry, got type {entry_type}")


def parse_contract_code_entry(entry_xdr: str) -> bytes:
    """
    Extract the wasm code from a base64 CONTRACT_CODE LedgerEntryData.

    Raises:
        XdrDecodeError: If the entry is malformed or of another type
    """
    reader = XdrReader(base64.b64decode(entry_xdr))
    _read_entry_type(reader, LedgerEntryType.CONTRACT_CODE)

    ext = reader.read_int32()
    if ext == 1:
        _read_extension_point(reader)
        _read_extension_point(reader)
        for _ in range(_COST_INPUT_FIELDS):
            reader.read_uint32()
    elif ext != 0:
        raise XdrDecodeError(f"Unsupported contract code extension {ext}")

    reader.read_fixed_opaque(32)  # hash
    return reader.read_opaque()


def parse_contract_instance_entry(entry_xdr: str) -> ContractInstance:
    """
    Extract the contract instance from a base64 CONTRACT_DATA LedgerEntryData.

    Raises:
        XdrDecodeError: If the entry is malformed or does not hold an instance
    """
    reader = XdrReader(base64.b64decode(entry_xdr))
    _read_entry_type(reader, LedgerEntryType.CONTRACT_DATA)
    _read_extension_point(reader)
    read_sc_address(reader)
    read_sc_val(reader)  # key
    reader.read_int32()  # durability
    val = read_sc_val(reader)
    if val.type != ScValType.CONTRACT_INSTANCE:
        raise XdrDecodeError(f"Contract data entry holds {val.type.name}, not a contract instance")
    return val.value
