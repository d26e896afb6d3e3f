"""
Exceptions for the Soroban client SDK.
"""
from typing import Optional


class SorobanClientError(Exception):
    """Base exception for all SDK errors."""
    pass


class InvalidConfigurationError(SorobanClientError, TypeError):
    """Raised when a required option (rpc_url, contract_id) is missing."""
    pass


class SpecNotFoundError(SorobanClientError):
    """Raised when a wasm binary carries no contract spec section."""
    pass


class DuplicateFunctionError(SorobanClientError):
    """Raised when a contract spec declares the same function name twice."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Contract spec declares function '{name}' more than once")


class FunctionNotFoundError(SorobanClientError, KeyError):
    """Raised when a function name is not part of the contract spec."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"No such function: {self.name}"


class WasmDecodeError(SorobanClientError, ValueError):
    """Raised when a wasm binary cannot be parsed."""
    pass


class XdrDecodeError(SorobanClientError, ValueError):
    """Raised when an XDR buffer is malformed or uses an unknown discriminant."""
    pass


class ContractError(SorobanClientError):
    """Raised when a contract call returned one of its declared error codes."""

    def __init__(self, code: int, message: Optional[str] = None):
        self.code = code
        self.message = message or f"Contract error {code}"
        super().__init__(self.message)


class RpcError(SorobanClientError):
    """Base exception for Soroban RPC failures."""
    pass


class RpcConnectionError(RpcError):
    """Raised when the RPC endpoint cannot be reached."""
    pass


class RpcResponseError(RpcError):
    """Raised when the RPC endpoint answers with a JSON-RPC error object."""

    def __init__(self, message: str, code: Optional[int] = None):
        self.code = code
        super().__init__(message)


class ContractNotFoundError(RpcError):
    """Raised when no wasm is stored for a hash or contract id."""
    pass
