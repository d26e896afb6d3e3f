"""
SorobanServer - JSON-RPC client for a Soroban RPC endpoint.
"""
import base64
import itertools
import logging
import os
import urllib.parse
from typing import Any, Dict, List, Optional, Union

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .exceptions import ContractNotFoundError, RpcConnectionError, RpcResponseError
from .ledger import (
    contract_code_ledger_key,
    contract_instance_ledger_key,
    parse_contract_code_entry,
    parse_contract_instance_entry,
)

logger = logging.getLogger(__name__)


class SorobanServer:
    """
    Client for a Soroban RPC server.

    Only the calls needed to locate contract code are covered, together
    with a few health and network calls.
    """

    def __init__(
        self,
        server_url: str,
        allow_http: bool = False,
        timeout: Optional[int] = None,
        retry_count: int = 3,
        headers: Optional[Dict[str, str]] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the server client

        Args:
            server_url: Soroban RPC endpoint URL (e.g., "https://soroban-testnet.stellar.org")
            allow_http: Allow a plain http:// URL (local development only)
            timeout: Timeout for HTTP requests in seconds (default: $SOROBAN_RPC_TIMEOUT or 30)
            retry_count: Number of retries for failed HTTP requests
            headers: Extra HTTP headers sent with every request
            logger: Optional logger instance to use for debug/info logging

        Raises:
            ValueError: If the URL is not https and allow_http is False
        """
        parsed = urllib.parse.urlparse(server_url)
        if parsed.scheme not in ("http", "https"):
            raise ValueError(f"Invalid RPC URL: {server_url}")
        if parsed.scheme != "https" and not allow_http:
            raise ValueError(
                f"RPC URL must use https:// for security (got: {parsed.scheme}://). "
                "Pass allow_http=True to allow plain HTTP for development."
            )

        self.server_url = server_url
        self.allow_http = allow_http
        self.timeout = timeout or int(os.environ.get("SOROBAN_RPC_TIMEOUT", "30"))
        self.logger = logger or logging.getLogger(__name__)
        self._ids = itertools.count(1)

        # Setup HTTP session with retries
        self.session = requests.Session()
        if headers:
            self.session.headers.update(headers)
        retries = Retry(
            total=retry_count,
            backoff_factor=0.5,
            status_forcelist=[500, 502, 503, 504],
            # JSON-RPC is POST only; the calls made here are read-only
            allowed_methods=["POST"],
            raise_on_status=False,
            connect=retry_count,
            read=retry_count,
        )
        adapter = HTTPAdapter(max_retries=retries)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def _rpc_call(self, method: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "getLedgerEntries")
            params: RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            RpcConnectionError: If the request fails at the HTTP level
            RpcResponseError: If the server returns an error object or invalid JSON
        """
        payload: Dict[str, Any] = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
        }
        if params is not None:
            payload["params"] = params

        self.logger.debug(f"RPC request {method} to {self.server_url}")
        try:
            response = self.session.post(self.server_url, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            self.logger.error(f"RPC request {method} failed: {e}")
            raise RpcConnectionError(f"RPC request {method} failed: {str(e)}") from e

        try:
            data = response.json()
        except ValueError as e:
            self.logger.error(f"Invalid JSON response from RPC server: {e}")
            raise RpcResponseError(f"Invalid JSON response from RPC server: {str(e)}")

        if "error" in data:
            error = data["error"] or {}
            message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            code = error.get("code") if isinstance(error, dict) else None
            self.logger.warning(f"RPC {method} returned error {code}: {message}")
            raise RpcResponseError(f"RPC error: {message}", code)

        return data.get("result")

    # ------------------------------------------------------------------ Probes

    def get_health(self) -> Dict[str, Any]:
        return self._rpc_call("getHealth")

    def get_network(self) -> Dict[str, Any]:
        return self._rpc_call("getNetwork")

    def get_latest_ledger(self) -> Dict[str, Any]:
        return self._rpc_call("getLatestLedger")

    # ------------------------------------------------------------------ Ledger entries

    def get_ledger_entries(self, keys: List[str]) -> Dict[str, Any]:
        """
        Fetch ledger entries by key.

        Args:
            keys: Base64 encoded LedgerKey values

        Returns:
            The raw ``getLedgerEntries`` result (``entries`` and ``latestLedger``)
        """
        return self._rpc_call("getLedgerEntries", {"keys": keys}) or {}

    def _get_single_entry_xdr(self, key: str, what: str) -> str:
        result = self.get_ledger_entries([key])
        entries = result.get("entries") or []
        if not entries or not entries[0].get("xdr"):
            raise ContractNotFoundError(f"Could not obtain {what} from server")
        return entries[0]["xdr"]

    def get_contract_wasm_by_hash(self, wasm_hash: Union[bytes, str], format: str = "hex") -> bytes:
        """
        Fetch the wasm binary stored under a hash.

        Args:
            wasm_hash: 32-byte hash, raw or encoded as a string
            format: Encoding of a string hash, "hex" or "base64"

        Returns:
            The wasm binary

        Raises:
            ValueError: If the hash is malformed or the format unknown
            ContractNotFoundError: If no code is stored under the hash
            RpcError: If the RPC call fails
        """
        if isinstance(wasm_hash, str):
            if format == "hex":
                raw_hash = bytes.fromhex(wasm_hash)
            elif format == "base64":
                raw_hash = base64.b64decode(wasm_hash)
            else:
                raise ValueError(f"Unsupported hash format: {format}")
        else:
            raw_hash = bytes(wasm_hash)

        entry_xdr = self._get_single_entry_xdr(
            contract_code_ledger_key(raw_hash), f"contract wasm for hash {raw_hash.hex()}"
        )
        code = parse_contract_code_entry(entry_xdr)
        self.logger.debug(f"Fetched {len(code)} bytes of wasm for hash {raw_hash.hex()}")
        return code

    def get_contract_wasm_by_contract_id(self, contract_id: str) -> bytes:
        """
        Fetch the wasm binary currently deployed under a contract id.

        Args:
            contract_id: C... contract strkey

        Returns:
            The wasm binary

        Raises:
            ValueError: If the contract id is malformed
            ContractNotFoundError: If the contract or its code cannot be found,
                or the contract is a stellar-asset contract
            RpcError: If the RPC call fails
        """
        entry_xdr = self._get_single_entry_xdr(
            contract_instance_ledger_key(contract_id), f"contract instance for {contract_id}"
        )
        instance = parse_contract_instance_entry(entry_xdr)
        if instance.wasm_hash is None:
            raise ContractNotFoundError(f"Contract {contract_id} is a stellar asset contract and has no wasm")
        return self.get_contract_wasm_by_hash(instance.wasm_hash)

    def close(self) -> None:
        self.session.close()
