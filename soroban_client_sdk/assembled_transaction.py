"""
AssembledTransaction - the deferred call handle returned by generated contract methods.

The handle bundles everything needed to later assemble, simulate, sign and
submit a contract invocation: method name, encoded arguments, merged options,
the contract's error table and a result decoder. Simulation, signing and
submission are left to the caller's transaction tooling; this class keeps
the state and (de)serializes it.
"""
import json
import logging
from typing import Any, Dict, List, Mapping, Optional

from .models import AssembledTransactionOptions, ErrorType
from .scval import ScVal

logger = logging.getLogger(__name__)


class AssembledTransaction:
    """
    A contract invocation that has been prepared but not executed.

    Args:
        options: Fully merged options for the call
    """

    def __init__(self, options: AssembledTransactionOptions):
        self.options = options
        # Populated by transaction tooling, carried through to_json/from_json
        self.tx: Optional[str] = None
        self.simulation_result: Optional[Dict[str, Any]] = None
        self.simulation_transaction_data: Optional[str] = None

    @classmethod
    async def build(cls, options: AssembledTransactionOptions) -> "AssembledTransaction":
        """
        Create a handle for a contract call.

        Args:
            options: Merged client, method and call options

        Returns:
            The deferred call handle
        """
        tx = cls(options)
        logger.debug(
            f"Built transaction for {options.method} on {options.contract_id} "
            f"with {len(options.args or [])} args"
        )
        return tx

    @property
    def method(self) -> str:
        return self.options.method

    @property
    def args(self) -> Optional[List[ScVal]]:
        return self.options.args

    @property
    def error_types(self) -> Dict[int, ErrorType]:
        return self.options.error_types or {}

    def error_message(self, code: int) -> Optional[str]:
        """Look up the message the contract declares for an error code."""
        error_type = self.error_types.get(code)
        return error_type.message if error_type else None

    def parse_result(self, raw: Any) -> Any:
        """
        Decode a raw return value with the handle's result decoder.

        Raises:
            ValueError: If the handle has no result decoder
        """
        if self.options.parse_result_xdr is None:
            raise ValueError(f"No result decoder configured for {self.method}")
        return self.options.parse_result_xdr(raw)

    @property
    def result(self) -> Any:
        """
        Native return value taken from the stored simulation result.

        Raises:
            ValueError: If the transaction has not been simulated
        """
        if not self.simulation_result or "retval" not in self.simulation_result:
            raise ValueError("Transaction has not been simulated; no result available")
        return self.parse_result(ScVal.from_xdr(self.simulation_result["retval"]))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method,
            "args": [arg.to_xdr() for arg in self.args] if self.args is not None else None,
            "tx": self.tx,
            "simulation_result": self.simulation_result,
            "simulation_transaction_data": self.simulation_transaction_data,
        }

    def to_json(self) -> str:
        """Serialize the handle so it can be rehydrated with ContractClient.tx_from_json."""
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(
        cls,
        options: AssembledTransactionOptions,
        fields: Mapping[str, Any],
    ) -> "AssembledTransaction":
        """
        Rebuild a handle from serialized fields.

        Args:
            options: Options for the call, including method and result decoder
            fields: Remaining fields produced by to_json (``method`` removed)

        Returns:
            The restored handle

        Raises:
            XdrDecodeError: If serialized arguments are malformed
        """
        encoded_args = fields.get("args")
        if encoded_args is not None:
            options = options.model_copy(update={"args": [ScVal.from_xdr(a) for a in encoded_args]})

        tx = cls(options)
        tx.tx = fields.get("tx")
        tx.simulation_result = fields.get("simulation_result")
        tx.simulation_transaction_data = fields.get("simulation_transaction_data")
        return tx
