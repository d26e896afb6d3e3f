"""
Data models for the Soroban client SDK.
"""
from typing import Any, Callable, Dict, List, Mapping, Optional, Union
from pydantic import BaseModel, Field

BASE_FEE = "100"
DEFAULT_TIMEOUT = 10


class ErrorType(BaseModel):
    """Message attached to a contract error code"""
    message: str


class ClientOptions(BaseModel):
    """Options shared by every call made through a ContractClient"""
    rpc_url: Optional[str] = Field(None, alias="rpcUrl")
    contract_id: Optional[str] = Field(None, alias="contractId")
    network_passphrase: Optional[str] = Field(None, alias="networkPassphrase")
    public_key: Optional[str] = Field(None, alias="publicKey")
    sign_transaction: Optional[Callable[..., Any]] = Field(None, alias="signTransaction")
    allow_http: bool = Field(False, alias="allowHttp")
    error_types: Optional[Dict[int, ErrorType]] = Field(None, alias="errorTypes")

    class Config:
        populate_by_name = True


class MethodOptions(BaseModel):
    """Per-call overrides"""
    fee: str = BASE_FEE
    timeout_in_seconds: int = Field(DEFAULT_TIMEOUT, alias="timeoutInSeconds")
    simulate: bool = True

    class Config:
        populate_by_name = True


class AssembledTransactionOptions(ClientOptions, MethodOptions):
    """Everything an AssembledTransaction needs: client and method options plus the call itself"""
    method: str
    args: Optional[List[Any]] = None
    parse_result_xdr: Optional[Callable[[Any], Any]] = Field(None, alias="parseResultXdr")

    class Config:
        populate_by_name = True


# camelCase alias -> field name, so mapping layers may use either spelling
_FIELD_NAMES = {
    field.alias or name: name for name, field in AssembledTransactionOptions.model_fields.items()
}


def _explicit_fields(layer: Union[BaseModel, Mapping[str, Any], None]) -> Dict[str, Any]:
    if layer is None:
        return {}
    if isinstance(layer, BaseModel):
        return {name: getattr(layer, name) for name in layer.model_fields_set}
    return {_FIELD_NAMES.get(key, key): value for key, value in layer.items()}


def merge_options(
    *layers: Union[BaseModel, Mapping[str, Any], None],
    **computed: Any
) -> AssembledTransactionOptions:
    """
    Merge option layers into one AssembledTransactionOptions.

    Layers are applied in order, then ``computed``; a later layer wins on
    every field it set explicitly. Fields a model layer left at their
    defaults never override an earlier layer. Fields outside the
    AssembledTransactionOptions schema are dropped.

    Args:
        *layers: Option models or mappings keyed by field name or alias, in increasing
            precedence (None entries are skipped)
        **computed: Highest-precedence field values, by field name

    Returns:
        The merged options
    """
    known = AssembledTransactionOptions.model_fields
    merged: Dict[str, Any] = {}
    for layer in layers:
        merged.update(_explicit_fields(layer))
    merged.update(computed)
    return AssembledTransactionOptions(**{k: v for k, v in merged.items() if k in known})
