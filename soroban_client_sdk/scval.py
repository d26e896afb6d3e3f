"""
Soroban contract values (SCVal) and their XDR encoding.
"""
import base64
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, List, Optional, Tuple

from .exceptions import XdrDecodeError
from .xdr import (
    XdrReader, XdrWriter,
    decode_account_id, decode_contract_id, encode_account_id, encode_contract_id,
)

_U64_MASK = (1 << 64) - 1


class ScValType(IntEnum):
    BOOL = 0
    VOID = 1
    ERROR = 2
    U32 = 3
    I32 = 4
    U64 = 5
    I64 = 6
    TIMEPOINT = 7
    DURATION = 8
    U128 = 9
    I128 = 10
    U256 = 11
    I256 = 12
    BYTES = 13
    STRING = 14
    SYMBOL = 15
    VEC = 16
    MAP = 17
    ADDRESS = 18
    CONTRACT_INSTANCE = 19
    LEDGER_KEY_CONTRACT_INSTANCE = 20
    LEDGER_KEY_NONCE = 21


class ScAddressType(IntEnum):
    ACCOUNT = 0
    CONTRACT = 1


class ScErrorType(IntEnum):
    CONTRACT = 0
    WASM_VM = 1
    CONTEXT = 2
    STORAGE = 3
    OBJECT = 4
    CRYPTO = 5
    EVENTS = 6
    BUDGET = 7
    VALUE = 8
    AUTH = 9


# (bits, signed) for every integer-valued ScVal type
_INT_TYPES = {
    ScValType.U32: (32, False),
    ScValType.I32: (32, True),
    ScValType.U64: (64, False),
    ScValType.I64: (64, True),
    ScValType.TIMEPOINT: (64, False),
    ScValType.DURATION: (64, False),
    ScValType.U128: (128, False),
    ScValType.I128: (128, True),
    ScValType.U256: (256, False),
    ScValType.I256: (256, True),
    ScValType.LEDGER_KEY_NONCE: (64, True),
}


def check_int_range(value: int, bits: int, signed: bool) -> int:
    """
    Ensure ``value`` fits in an integer of the given width.

    Raises:
        ValueError: If the value is out of range or not an integer
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Expected an integer, got {type(value).__name__}")
    if signed:
        low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        low, high = 0, (1 << bits) - 1
    if not low <= value <= high:
        prefix = "i" if signed else "u"
        raise ValueError(f"{value} does not fit in {prefix}{bits}")
    return value


@dataclass(frozen=True)
class ScAddress:
    """An account (G...) or contract (C...) address."""
    type: ScAddressType
    payload: bytes

    @classmethod
    def from_strkey(cls, address: str) -> "ScAddress":
        if address.startswith("G"):
            return cls(ScAddressType.ACCOUNT, decode_account_id(address))
        if address.startswith("C"):
            return cls(ScAddressType.CONTRACT, decode_contract_id(address))
        raise ValueError(f"Unsupported address: {address!r}")

    def to_strkey(self) -> str:
        if self.type == ScAddressType.ACCOUNT:
            return encode_account_id(self.payload)
        return encode_contract_id(self.payload)


@dataclass(frozen=True)
class ScError:
    type: ScErrorType
    code: int


@dataclass(frozen=True)
class ContractInstance:
    """Executable of a deployed contract; ``wasm_hash`` is None for stellar-asset contracts."""
    wasm_hash: Optional[bytes]
    storage: Optional[List[Tuple["ScVal", "ScVal"]]] = None


@dataclass(frozen=True)
class ScVal:
    """
    A tagged contract value.

    ``value`` holds the Python representation for the tag: ``bool``, ``None``,
    ``int``, ``bytes``, ``str``, a list of ScVal (vec), a list of
    ``(key, value)`` pairs (map), ``ScAddress``, ``ScError`` or
    ``ContractInstance``.
    """
    type: ScValType
    value: Any = None

    @classmethod
    def void(cls) -> "ScVal":
        return cls(ScValType.VOID)

    @classmethod
    def symbol(cls, name: str) -> "ScVal":
        return cls(ScValType.SYMBOL, name)

    @classmethod
    def ledger_key_contract_instance(cls) -> "ScVal":
        return cls(ScValType.LEDGER_KEY_CONTRACT_INSTANCE)

    def to_xdr_bytes(self) -> bytes:
        writer = XdrWriter()
        write_sc_val(writer, self)
        return writer.to_bytes()

    def to_xdr(self) -> str:
        return base64.b64encode(self.to_xdr_bytes()).decode("ascii")

    @classmethod
    def from_xdr_bytes(cls, data: bytes) -> "ScVal":
        reader = XdrReader(data)
        value = read_sc_val(reader)
        if not reader.done():
            raise XdrDecodeError(f"{reader.remaining} trailing bytes after ScVal")
        return value

    @classmethod
    def from_xdr(cls, data: str) -> "ScVal":
        return cls.from_xdr_bytes(base64.b64decode(data))


# ---------------------------------------------------------------------------
# XDR encoding
# ---------------------------------------------------------------------------

def write_sc_address(writer: XdrWriter, address: ScAddress) -> None:
    writer.write_int32(int(address.type))
    if address.type == ScAddressType.ACCOUNT:
        writer.write_int32(0)  # PUBLIC_KEY_TYPE_ED25519
    writer.write_fixed_opaque(address.payload)


def read_sc_address(reader: XdrReader) -> ScAddress:
    kind = reader.read_int32()
    if kind == ScAddressType.ACCOUNT:
        key_type = reader.read_int32()
        if key_type != 0:
            raise XdrDecodeError(f"Unsupported public key type {key_type}")
        return ScAddress(ScAddressType.ACCOUNT, reader.read_fixed_opaque(32))
    if kind == ScAddressType.CONTRACT:
        return ScAddress(ScAddressType.CONTRACT, reader.read_fixed_opaque(32))
    raise XdrDecodeError(f"Unsupported ScAddress type {kind}")


def _write_big_int(writer: XdrWriter, value: int, bits: int, signed: bool) -> None:
    check_int_range(value, bits, signed)
    words = bits // 64
    unsigned = value & ((1 << bits) - 1)
    parts = [(unsigned >> (64 * i)) & _U64_MASK for i in reversed(range(words))]
    if signed:
        # Highest part is a signed int64
        high = value >> (64 * (words - 1))
        writer.write_int64(high)
    else:
        writer.write_uint64(parts[0])
    for part in parts[1:]:
        writer.write_uint64(part)


def _read_big_int(reader: XdrReader, bits: int, signed: bool) -> int:
    words = bits // 64
    value = reader.read_int64() if signed else reader.read_uint64()
    for _ in range(words - 1):
        value = (value << 64) | reader.read_uint64()
    return value


def _write_map(writer: XdrWriter, entries: List[Tuple[ScVal, ScVal]]) -> None:
    writer.write_uint32(len(entries))
    for key, val in entries:
        write_sc_val(writer, key)
        write_sc_val(writer, val)


def _read_map(reader: XdrReader) -> List[Tuple[ScVal, ScVal]]:
    return reader.read_array(lambda r: (read_sc_val(r), read_sc_val(r)))


def write_sc_val(writer: XdrWriter, val: ScVal) -> None:
    t = val.type
    writer.write_int32(int(t))
    if t in (ScValType.VOID, ScValType.LEDGER_KEY_CONTRACT_INSTANCE):
        return
    if t == ScValType.BOOL:
        writer.write_bool(bool(val.value))
    elif t == ScValType.ERROR:
        writer.write_int32(int(val.value.type))
        if val.value.type == ScErrorType.CONTRACT:
            writer.write_uint32(val.value.code)
        else:
            writer.write_int32(val.value.code)
    elif t in _INT_TYPES:
        bits, signed = _INT_TYPES[t]
        if bits == 32:
            check_int_range(val.value, bits, signed)
            (writer.write_int32 if signed else writer.write_uint32)(val.value)
        elif bits == 64:
            check_int_range(val.value, bits, signed)
            (writer.write_int64 if signed else writer.write_uint64)(val.value)
        else:
            _write_big_int(writer, val.value, bits, signed)
    elif t == ScValType.BYTES:
        writer.write_opaque(bytes(val.value))
    elif t in (ScValType.STRING, ScValType.SYMBOL):
        writer.write_string(val.value)
    elif t == ScValType.VEC:
        writer.write_optional(val.value, lambda w, items: w.write_array(items, write_sc_val))
    elif t == ScValType.MAP:
        writer.write_optional(val.value, _write_map)
    elif t == ScValType.ADDRESS:
        write_sc_address(writer, val.value)
    elif t == ScValType.CONTRACT_INSTANCE:
        instance = val.value
        if instance.wasm_hash is None:
            writer.write_int32(1)  # CONTRACT_EXECUTABLE_STELLAR_ASSET
        else:
            writer.write_int32(0)  # CONTRACT_EXECUTABLE_WASM
            writer.write_fixed_opaque(instance.wasm_hash)
        writer.write_optional(instance.storage, _write_map)
    else:
        raise ValueError(f"Cannot encode ScVal of type {t!r}")


def read_sc_val(reader: XdrReader) -> ScVal:
    raw_type = reader.read_int32()
    try:
        t = ScValType(raw_type)
    except ValueError:
        raise XdrDecodeError(f"Unknown ScVal type {raw_type}")

    if t in (ScValType.VOID, ScValType.LEDGER_KEY_CONTRACT_INSTANCE):
        return ScVal(t)
    if t == ScValType.BOOL:
        return ScVal(t, reader.read_bool())
    if t == ScValType.ERROR:
        raw_error_type = reader.read_int32()
        try:
            error_type = ScErrorType(raw_error_type)
        except ValueError:
            raise XdrDecodeError(f"Unknown ScError type {raw_error_type}")
        code = reader.read_uint32() if error_type == ScErrorType.CONTRACT else reader.read_int32()
        return ScVal(t, ScError(error_type, code))
    if t in _INT_TYPES:
        bits, signed = _INT_TYPES[t]
        if bits == 32:
            return ScVal(t, reader.read_int32() if signed else reader.read_uint32())
        if bits == 64:
            return ScVal(t, reader.read_int64() if signed else reader.read_uint64())
        return ScVal(t, _read_big_int(reader, bits, signed))
    if t == ScValType.BYTES:
        return ScVal(t, reader.read_opaque())
    if t in (ScValType.STRING, ScValType.SYMBOL):
        return ScVal(t, reader.read_string())
    if t == ScValType.VEC:
        return ScVal(t, reader.read_optional(lambda r: r.read_array(read_sc_val)))
    if t == ScValType.MAP:
        return ScVal(t, reader.read_optional(_read_map))
    if t == ScValType.ADDRESS:
        return ScVal(t, read_sc_address(reader))
    # CONTRACT_INSTANCE
    executable = reader.read_int32()
    if executable == 0:
        wasm_hash = reader.read_fixed_opaque(32)
    elif executable == 1:
        wasm_hash = None
    else:
        raise XdrDecodeError(f"Unknown contract executable type {executable}")
    return ScVal(t, ContractInstance(wasm_hash, reader.read_optional(_read_map)))
