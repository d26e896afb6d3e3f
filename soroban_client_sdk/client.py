"""
ContractClient - generates one callable per function of a contract spec.
"""
import asyncio
import json
import logging
from typing import Any, Callable, Dict, FrozenSet, Mapping, Optional, Protocol, Union

from .assembled_transaction import AssembledTransaction
from .exceptions import DuplicateFunctionError, InvalidConfigurationError, SpecNotFoundError
from .models import AssembledTransactionOptions, ClientOptions, ErrorType, MethodOptions, merge_options
from .rpc import SorobanServer
from .spec import ContractSpec, SpecFunction, process_spec_entry_stream
from .wasm import CONTRACT_SPEC_SECTION, WasmModule, validate_module

logger = logging.getLogger(__name__)

MethodOverrides = Union[MethodOptions, Mapping[str, Any], None]


def build_error_types(spec: ContractSpec) -> Dict[int, ErrorType]:
    """
    Map every contract error code to its documentation.

    Cases are folded in spec order, so a repeated code keeps the last message.
    """
    error_types: Dict[int, ErrorType] = {}
    for case in spec.error_cases():
        error_types[case.value] = ErrorType(message=case.doc)
    return error_types


class TransactionAssembler(Protocol):
    """Protocol for the facility that turns merged options into call handles"""

    def build(self, options: AssembledTransactionOptions) -> Any:
        """Create a call handle; may return an awaitable"""
        ...

    def from_json(self, options: AssembledTransactionOptions, fields: Mapping[str, Any]) -> Any:
        """Restore a call handle from serialized fields"""
        ...


class ContractClient:
    """
    Client exposing every function of a contract as a method.

    Each generated method returns whatever the assembler's ``build`` returns;
    with the default AssembledTransaction that is a coroutine resolving to
    the call handle:

        client = await ContractClient.from_options(options)
        tx = await client.transfer({"from": alice, "to": bob, "amount": 10})
        tx = await client.decimals()          # no inputs: only method options

    Methods are also reachable through ``get(name)``, which is the only way to
    reach a contract function whose name collides with an attribute of this
    class (``spec``, ``options``, ``get``...).
    """

    def __init__(
        self,
        spec: ContractSpec,
        options: ClientOptions,
        assembler: TransactionAssembler = AssembledTransaction
    ):
        """
        Generate a method for every function in the contract spec.

        Args:
            spec: Interface description of the contract
            options: Client options, stored as given
            assembler: Facility that builds and rehydrates call handles

        Raises:
            DuplicateFunctionError: If the contract declares a function name twice
        """
        self.spec = spec
        self.options = options
        self._assembler = assembler
        self._methods: Dict[str, Callable[..., Any]] = {}

        for func in spec.funcs():
            if func.name in self._methods:
                raise DuplicateFunctionError(func.name)
            self._methods[func.name] = self._generate_method(func)

        logger.debug(f"Generated {len(self._methods)} contract methods: {sorted(self._methods)}")

    def _generate_method(self, func: SpecFunction) -> Callable[..., Any]:
        method = func.name
        spec = self.spec
        options = self.options
        assembler = self._assembler

        def assemble_transaction(
            args: Optional[Mapping[str, Any]] = None,
            method_options: MethodOverrides = None
        ) -> Any:
            return assembler.build(merge_options(
                options,
                method_options,
                method=method,
                args=spec.func_args_to_sc_vals(method, args) if args is not None else None,
                error_types=build_error_types(spec),
                parse_result_xdr=lambda result: spec.func_res_to_native(method, result),
            ))

        if func.inputs:
            generated = assemble_transaction
        else:
            def generated(method_options: MethodOverrides = None) -> Any:
                return assemble_transaction(None, method_options)

        generated.__name__ = method
        generated.__qualname__ = f"{type(self).__name__}.{method}"
        generated.__doc__ = func.doc or None
        return generated

    # ------------------------------------------------------------------ Generated surface

    def __getattr__(self, name: str) -> Callable[..., Any]:
        # Only reached when normal attribute lookup fails
        methods = self.__dict__.get("_methods")
        if methods is not None and name in methods:
            return methods[name]
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __dir__(self):
        return sorted(set(super().__dir__()) | set(self._methods))

    def __contains__(self, name: object) -> bool:
        return name in self._methods

    def get(self, name: str) -> Optional[Callable[..., Any]]:
        """Return the generated method for a contract function, or None"""
        return self._methods.get(name)

    def names(self) -> FrozenSet[str]:
        """Names of all generated methods"""
        return frozenset(self._methods)

    def __repr__(self) -> str:
        return f"<ContractClient {self.options.contract_id or '(no contract id)'}: {len(self._methods)} methods>"

    # ------------------------------------------------------------------ Factories

    @classmethod
    async def from_wasm_hash(
        cls,
        wasm_hash: Union[bytes, str],
        options: ClientOptions,
        format: str = "hex",
        assembler: TransactionAssembler = AssembledTransaction
    ) -> "ContractClient":
        """
        Build a client from the hash of an installed wasm binary.

        Args:
            wasm_hash: Hash of the wasm, raw or encoded as ``format``
            options: Client options; must contain rpc_url
            format: "hex" or "base64", for string hashes
            assembler: Facility that builds and rehydrates call handles

        Returns:
            The generated client

        Raises:
            InvalidConfigurationError: If options has no rpc_url
        """
        if not options or not options.rpc_url:
            raise InvalidConfigurationError("options must contain rpc_url")

        server = SorobanServer(options.rpc_url, allow_http=options.allow_http)
        try:
            wasm = await asyncio.to_thread(server.get_contract_wasm_by_hash, wasm_hash, format)
        finally:
            server.close()
        return await cls.from_wasm(wasm, options, assembler=assembler)

    @classmethod
    async def from_wasm(
        cls,
        wasm: bytes,
        options: ClientOptions,
        assembler: TransactionAssembler = AssembledTransaction
    ) -> "ContractClient":
        """
        Build a client from a wasm binary carrying a contract spec section.

        Args:
            wasm: The contract's wasm binary
            options: Client options
            assembler: Facility that builds and rehydrates call handles

        Returns:
            The generated client

        Raises:
            wasmtime.WasmtimeError: If the binary is not a valid wasm module
            SpecNotFoundError: If the binary has no contract spec section
            WasmDecodeError: If the binary cannot be parsed
            XdrDecodeError: If the contractspecv0 section cannot be decoded
        """
        validate_module(wasm)
        module = WasmModule(wasm)
        sections = module.custom_sections(CONTRACT_SPEC_SECTION)
        if not sections:
            raise SpecNotFoundError("Could not obtain contract spec from wasm")
        if len(sections) > 1:
            logger.debug(f"Wasm has {len(sections)} {CONTRACT_SPEC_SECTION} sections, using the first")

        spec = ContractSpec(process_spec_entry_stream(sections[0]))
        return cls(spec, options, assembler=assembler)

    @classmethod
    async def from_options(
        cls,
        options: ClientOptions,
        assembler: TransactionAssembler = AssembledTransaction
    ) -> "ContractClient":
        """
        Build a client for a deployed contract, fetching its wasm over RPC.

        Args:
            options: Client options; must contain rpc_url and contract_id
            assembler: Facility that builds and rehydrates call handles

        Returns:
            The generated client

        Raises:
            InvalidConfigurationError: If rpc_url or contract_id is missing
        """
        if not options or not options.rpc_url or not options.contract_id:
            raise InvalidConfigurationError("options must contain rpc_url and contract_id")

        server = SorobanServer(options.rpc_url, allow_http=options.allow_http)
        try:
            wasm = await asyncio.to_thread(server.get_contract_wasm_by_contract_id, options.contract_id)
        finally:
            server.close()
        return await cls.from_wasm(wasm, options, assembler=assembler)

    # ------------------------------------------------------------------ Rehydration

    def tx_from_json(self, json_str: str) -> Any:
        """
        Restore a call handle serialized with ``AssembledTransaction.to_json``.

        Args:
            json_str: Serialized handle

        Returns:
            The handle, rebuilt with this client's options and result decoder

        Raises:
            json.JSONDecodeError: If the input is not valid JSON
            KeyError: If the input has no method name
        """
        fields = json.loads(json_str)
        method = fields.pop("method")
        spec = self.spec
        options = merge_options(
            self.options,
            method=method,
            parse_result_xdr=lambda result: spec.func_res_to_native(method, result),
        )
        return self._assembler.from_json(options, fields)
