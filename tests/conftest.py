"""
Pytest fixtures for the Soroban client SDK tests.
"""
import pytest

from soroban_client_sdk import ClientOptions, ContractSpec
from soroban_client_sdk.spec import (
    SpecType, SpecTypeDef, SpecFunction, SpecFunctionInput, SpecStruct, SpecStructField,
    SpecUnion, SpecUnionCase, SpecEnumCase, SpecErrorEnum, encode_spec_entries,
)
from soroban_client_sdk.wasm import WASM_MAGIC, WASM_VERSION, CONTRACT_SPEC_SECTION, build_custom_section
from soroban_client_sdk.xdr import encode_account_id, encode_contract_id

# Constants for testing
TEST_RPC_URL = "https://rpc.example.com"
TEST_NETWORK_PASSPHRASE = "Test SDF Network ; September 2015"
TEST_CONTRACT_ID = encode_contract_id(bytes(range(32)))
TEST_ACCOUNT = encode_account_id(bytes(range(32, 64)))
TEST_ACCOUNT_2 = encode_account_id(bytes(range(64, 96)))
TEST_WASM_HASH = bytes.fromhex("ab" * 32)

# Type section with a single `() -> ()` function type
WASM_TYPE_SECTION = b"\x01\x04\x01\x60\x00\x00"


def ty(spec_type: SpecType, *inner: SpecTypeDef, **kwargs) -> SpecTypeDef:
    """Shorthand for building spec type references."""
    return SpecTypeDef(spec_type, tuple(inner), **kwargs)


def token_spec_entries():
    """Entries of a small token contract used throughout the tests."""
    address = ty(SpecType.ADDRESS)
    return [
        SpecErrorEnum(
            name="Error",
            cases=(
                SpecEnumCase(name="NotAllowed", value=1, doc="Caller is not allowed"),
                SpecEnumCase(name="InsufficientBalance", value=2, doc="Balance too low"),
            ),
        ),
        SpecStruct(
            name="Point",
            fields=(
                SpecStructField(name="x", type=ty(SpecType.I32)),
                SpecStructField(name="y", type=ty(SpecType.I32)),
            ),
        ),
        SpecUnion(
            name="Action",
            cases=(
                SpecUnionCase(name="Stop"),
                SpecUnionCase(name="Move", types=(ty(SpecType.I32),)),
            ),
        ),
        SpecFunction(
            name="hello",
            inputs=(SpecFunctionInput(name="to", type=ty(SpecType.SYMBOL)),),
            outputs=(ty(SpecType.VEC, ty(SpecType.SYMBOL)),),
            doc="Say hello",
        ),
        SpecFunction(name="decimals", outputs=(ty(SpecType.U32),)),
        SpecFunction(
            name="balance",
            inputs=(SpecFunctionInput(name="id", type=address),),
            outputs=(ty(SpecType.I128),),
        ),
        SpecFunction(
            name="transfer",
            inputs=(
                SpecFunctionInput(name="from", type=address),
                SpecFunctionInput(name="to", type=address),
                SpecFunctionInput(name="amount", type=ty(SpecType.I128)),
            ),
            outputs=(ty(SpecType.RESULT, ty(SpecType.VOID), ty(SpecType.UDT, name="Error")),),
        ),
        SpecFunction(
            name="locate",
            inputs=(SpecFunctionInput(name="action", type=ty(SpecType.UDT, name="Action")),),
            outputs=(ty(SpecType.UDT, name="Point"),),
        ),
    ]


def build_wasm(*sections: bytes) -> bytes:
    """Assemble a wasm binary from already encoded sections."""
    return WASM_MAGIC + WASM_VERSION + b"".join(sections)


def build_contract_wasm(entries=None) -> bytes:
    """Build a wasm binary whose contractspecv0 section holds ``entries``."""
    payload = encode_spec_entries(token_spec_entries() if entries is None else entries)
    return build_wasm(WASM_TYPE_SECTION, build_custom_section(CONTRACT_SPEC_SECTION, payload))


@pytest.fixture
def token_entries():
    return token_spec_entries()


@pytest.fixture
def token_spec(token_entries):
    return ContractSpec(token_entries)


@pytest.fixture
def token_wasm():
    return build_contract_wasm()


@pytest.fixture
def client_options():
    return ClientOptions(
        rpc_url=TEST_RPC_URL,
        contract_id=TEST_CONTRACT_ID,
        network_passphrase=TEST_NETWORK_PASSPHRASE,
        public_key=TEST_ACCOUNT,
    )
