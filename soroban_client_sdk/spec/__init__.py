"""
Contract spec support: entry decoding and the ContractSpec query/conversion type.
"""
from .entries import (
    SpecType, SpecEntryKind, SpecTypeDef, SpecEntry,
    SpecFunction, SpecFunctionInput, SpecStruct, SpecStructField,
    SpecUnion, SpecUnionCase, SpecEnum, SpecEnumCase, SpecErrorEnum,
    SpecEvent, SpecEventParam,
    process_spec_entry_stream, decode_spec_entry, encode_spec_entries,
)
from .contract_spec import ContractSpec

__all__ = [
    "ContractSpec",
    "SpecType",
    "SpecEntryKind",
    "SpecTypeDef",
    "SpecEntry",
    "SpecFunction",
    "SpecFunctionInput",
    "SpecStruct",
    "SpecStructField",
    "SpecUnion",
    "SpecUnionCase",
    "SpecEnum",
    "SpecEnumCase",
    "SpecErrorEnum",
    "SpecEvent",
    "SpecEventParam",
    "process_spec_entry_stream",
    "decode_spec_entry",
    "encode_spec_entries",
]
