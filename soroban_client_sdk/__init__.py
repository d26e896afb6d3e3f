"""
Soroban client SDK - generate Python clients from Soroban contract specs.
"""
from .client import ContractClient, TransactionAssembler
from .assembled_transaction import AssembledTransaction
from .config import NetworkConfig
from .models import ClientOptions, MethodOptions, AssembledTransactionOptions, ErrorType, merge_options
from .rpc import SorobanServer
from .scval import ScVal, ScValType, ScAddress
from .spec import ContractSpec, process_spec_entry_stream
from .wasm import WasmModule, CONTRACT_SPEC_SECTION
from .exceptions import (
    SorobanClientError, InvalidConfigurationError, SpecNotFoundError,
    DuplicateFunctionError, FunctionNotFoundError, WasmDecodeError, XdrDecodeError,
    ContractError, RpcError, RpcConnectionError, RpcResponseError, ContractNotFoundError,
)
from .version import __version__

__all__ = [
    "ContractClient",
    "TransactionAssembler",
    "AssembledTransaction",
    "NetworkConfig",
    "ClientOptions",
    "MethodOptions",
    "AssembledTransactionOptions",
    "ErrorType",
    "merge_options",
    "SorobanServer",
    "ScVal",
    "ScValType",
    "ScAddress",
    "ContractSpec",
    "process_spec_entry_stream",
    "WasmModule",
    "CONTRACT_SPEC_SECTION",
    "SorobanClientError",
    "InvalidConfigurationError",
    "SpecNotFoundError",
    "DuplicateFunctionError",
    "FunctionNotFoundError",
    "WasmDecodeError",
    "XdrDecodeError",
    "ContractError",
    "RpcError",
    "RpcConnectionError",
    "RpcResponseError",
    "ContractNotFoundError",
    "__version__",
]
