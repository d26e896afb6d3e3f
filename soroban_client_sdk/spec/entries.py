"""
Contract spec entries (SCSpecEntry) and the entry-stream codec.

A contract's ``contractspecv0`` wasm section is a plain concatenation of XDR
encoded spec entries with no count prefix; entries are read until the
buffer is exhausted.
"""
import base64
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Tuple, Union

from ..exceptions import XdrDecodeError
from ..xdr import XdrReader, XdrWriter


class SpecType(IntEnum):
    VAL = 0
    BOOL = 1
    VOID = 2
    ERROR = 3
    U32 = 4
    I32 = 5
    U64 = 6
    I64 = 7
    TIMEPOINT = 8
    DURATION = 9
    U128 = 10
    I128 = 11
    U256 = 12
    I256 = 13
    BYTES = 14
    STRING = 16
    SYMBOL = 17
    ADDRESS = 19
    MUXED_ADDRESS = 20
    OPTION = 1000
    RESULT = 1001
    VEC = 1002
    MAP = 1004
    TUPLE = 1005
    BYTES_N = 1006
    UDT = 2000


class SpecEntryKind(IntEnum):
    FUNCTION_V0 = 0
    UDT_STRUCT_V0 = 1
    UDT_UNION_V0 = 2
    UDT_ENUM_V0 = 3
    UDT_ERROR_ENUM_V0 = 4
    EVENT_V0 = 5


@dataclass(frozen=True)
class SpecTypeDef:
    """
    A type reference inside the contract spec.

    ``inner`` holds nested types: ``(value,)`` for option, ``(ok, error)``
    for result, ``(element,)`` for vec, ``(key, value)`` for map and the
    element types of a tuple. ``n`` is the length of ``BytesN`` and ``name``
    the referenced user-defined type.
    """
    type: SpecType
    inner: Tuple["SpecTypeDef", ...] = ()
    n: Optional[int] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class SpecFunctionInput:
    name: str
    type: SpecTypeDef
    doc: str = ""


@dataclass(frozen=True)
class SpecFunction:
    name: str
    inputs: Tuple[SpecFunctionInput, ...] = ()
    outputs: Tuple[SpecTypeDef, ...] = ()
    doc: str = ""
    kind = SpecEntryKind.FUNCTION_V0


@dataclass(frozen=True)
class SpecStructField:
    name: str
    type: SpecTypeDef
    doc: str = ""


@dataclass(frozen=True)
class SpecStruct:
    name: str
    fields: Tuple[SpecStructField, ...] = ()
    doc: str = ""
    lib: str = ""
    kind = SpecEntryKind.UDT_STRUCT_V0


@dataclass(frozen=True)
class SpecUnionCase:
    """A union case; void cases carry no types."""
    name: str
    types: Optional[Tuple[SpecTypeDef, ...]] = None
    doc: str = ""

    @property
    def is_void(self) -> bool:
        return self.types is None


@dataclass(frozen=True)
class SpecUnion:
    name: str
    cases: Tuple[SpecUnionCase, ...] = ()
    doc: str = ""
    lib: str = ""
    kind = SpecEntryKind.UDT_UNION_V0


@dataclass(frozen=True)
class SpecEnumCase:
    name: str
    value: int
    doc: str = ""


@dataclass(frozen=True)
class SpecEnum:
    name: str
    cases: Tuple[SpecEnumCase, ...] = ()
    doc: str = ""
    lib: str = ""
    kind = SpecEntryKind.UDT_ENUM_V0


@dataclass(frozen=True)
class SpecErrorEnum:
    name: str
    cases: Tuple[SpecEnumCase, ...] = ()
    doc: str = ""
    lib: str = ""
    kind = SpecEntryKind.UDT_ERROR_ENUM_V0


@dataclass(frozen=True)
class SpecEventParam:
    name: str
    type: SpecTypeDef
    location: int = 0
    doc: str = ""


@dataclass(frozen=True)
class SpecEvent:
    name: str
    prefix_topics: Tuple[str, ...] = ()
    params: Tuple[SpecEventParam, ...] = ()
    data_format: int = 0
    doc: str = ""
    lib: str = ""
    kind = SpecEntryKind.EVENT_V0


SpecEntry = Union[SpecFunction, SpecStruct, SpecUnion, SpecEnum, SpecErrorEnum, SpecEvent]


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def read_type_def(reader: XdrReader) -> SpecTypeDef:
    raw = reader.read_int32()
    try:
        t = SpecType(raw)
    except ValueError:
        raise XdrDecodeError(f"Unknown spec type {raw}")

    if t in (SpecType.OPTION, SpecType.VEC):
        return SpecTypeDef(t, (read_type_def(reader),))
    if t in (SpecType.RESULT, SpecType.MAP):
        first = read_type_def(reader)
        return SpecTypeDef(t, (first, read_type_def(reader)))
    if t == SpecType.TUPLE:
        return SpecTypeDef(t, tuple(reader.read_array(read_type_def)))
    if t == SpecType.BYTES_N:
        return SpecTypeDef(t, n=reader.read_uint32())
    if t == SpecType.UDT:
        return SpecTypeDef(t, name=reader.read_string())
    return SpecTypeDef(t)


def _read_enum_case(reader: XdrReader) -> SpecEnumCase:
    doc = reader.read_string()
    name = reader.read_string()
    return SpecEnumCase(name=name, value=reader.read_uint32(), doc=doc)


def _read_union_case(reader: XdrReader) -> SpecUnionCase:
    kind = reader.read_int32()
    doc = reader.read_string()
    name = reader.read_string()
    if kind == 0:
        return SpecUnionCase(name=name, doc=doc)
    if kind == 1:
        return SpecUnionCase(name=name, types=tuple(reader.read_array(read_type_def)), doc=doc)
    raise XdrDecodeError(f"Unknown union case kind {kind}")


def _read_named_field(reader: XdrReader):
    doc = reader.read_string()
    name = reader.read_string()
    return doc, name, read_type_def(reader)


def read_spec_entry(reader: XdrReader) -> SpecEntry:
    """Decode a single SCSpecEntry."""
    raw_kind = reader.read_int32()
    try:
        kind = SpecEntryKind(raw_kind)
    except ValueError:
        raise XdrDecodeError(f"Unknown spec entry kind {raw_kind}")

    if kind == SpecEntryKind.FUNCTION_V0:
        doc = reader.read_string()
        name = reader.read_string()
        inputs = tuple(
            SpecFunctionInput(name=n, type=t, doc=d)
            for d, n, t in reader.read_array(_read_named_field)
        )
        outputs = tuple(reader.read_array(read_type_def))
        return SpecFunction(name=name, inputs=inputs, outputs=outputs, doc=doc)

    doc = reader.read_string()
    lib = reader.read_string()
    name = reader.read_string()

    if kind == SpecEntryKind.UDT_STRUCT_V0:
        fields = tuple(
            SpecStructField(name=n, type=t, doc=d)
            for d, n, t in reader.read_array(_read_named_field)
        )
        return SpecStruct(name=name, fields=fields, doc=doc, lib=lib)
    if kind == SpecEntryKind.UDT_UNION_V0:
        return SpecUnion(name=name, cases=tuple(reader.read_array(_read_union_case)), doc=doc, lib=lib)
    if kind == SpecEntryKind.UDT_ENUM_V0:
        return SpecEnum(name=name, cases=tuple(reader.read_array(_read_enum_case)), doc=doc, lib=lib)
    if kind == SpecEntryKind.UDT_ERROR_ENUM_V0:
        return SpecErrorEnum(name=name, cases=tuple(reader.read_array(_read_enum_case)), doc=doc, lib=lib)

    # EVENT_V0
    prefix_topics = tuple(reader.read_array(lambda r: r.read_string()))

    def _read_param(r: XdrReader) -> SpecEventParam:
        param_doc, param_name, param_type = _read_named_field(r)
        return SpecEventParam(name=param_name, type=param_type, location=r.read_int32(), doc=param_doc)

    params = tuple(reader.read_array(_read_param))
    return SpecEvent(
        name=name, prefix_topics=prefix_topics, params=params,
        data_format=reader.read_int32(), doc=doc, lib=lib,
    )


def process_spec_entry_stream(data: bytes) -> List[SpecEntry]:
    """
    Decode a buffer of back-to-back SCSpecEntry values.

    Args:
        data: Contents of a ``contractspecv0`` custom section

    Returns:
        Entries in the order they appear in the buffer

    Raises:
        XdrDecodeError: If an entry is truncated or uses an unknown discriminant
    """
    reader = XdrReader(data)
    entries = []
    while not reader.done():
        entries.append(read_spec_entry(reader))
    return entries


def decode_spec_entry(data: Union[bytes, str]) -> SpecEntry:
    """Decode exactly one entry from raw XDR bytes or base64 text."""
    raw = base64.b64decode(data) if isinstance(data, str) else data
    reader = XdrReader(raw)
    entry = read_spec_entry(reader)
    if not reader.done():
        raise XdrDecodeError(f"{reader.remaining} trailing bytes after spec entry")
    return entry


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

def write_type_def(writer: XdrWriter, type_def: SpecTypeDef) -> None:
    writer.write_int32(int(type_def.type))
    if type_def.type == SpecType.TUPLE:
        writer.write_array(list(type_def.inner), write_type_def)
    elif type_def.type == SpecType.BYTES_N:
        writer.write_uint32(type_def.n or 0)
    elif type_def.type == SpecType.UDT:
        writer.write_string(type_def.name or "")
    else:
        for inner in type_def.inner:
            write_type_def(writer, inner)


def _write_named_field(writer: XdrWriter, item) -> None:
    writer.write_string(item.doc)
    writer.write_string(item.name)
    write_type_def(writer, item.type)


def _write_enum_case(writer: XdrWriter, case: SpecEnumCase) -> None:
    writer.write_string(case.doc)
    writer.write_string(case.name)
    writer.write_uint32(case.value)


def _write_union_case(writer: XdrWriter, case: SpecUnionCase) -> None:
    writer.write_int32(0 if case.is_void else 1)
    writer.write_string(case.doc)
    writer.write_string(case.name)
    if not case.is_void:
        writer.write_array(list(case.types), write_type_def)


def write_spec_entry(writer: XdrWriter, entry: SpecEntry) -> None:
    writer.write_int32(int(entry.kind))
    if isinstance(entry, SpecFunction):
        writer.write_string(entry.doc)
        writer.write_string(entry.name)
        writer.write_array(list(entry.inputs), _write_named_field)
        writer.write_array(list(entry.outputs), write_type_def)
        return

    writer.write_string(entry.doc)
    writer.write_string(entry.lib)
    writer.write_string(entry.name)
    if isinstance(entry, SpecStruct):
        writer.write_array(list(entry.fields), _write_named_field)
    elif isinstance(entry, SpecUnion):
        writer.write_array(list(entry.cases), _write_union_case)
    elif isinstance(entry, (SpecEnum, SpecErrorEnum)):
        writer.write_array(list(entry.cases), _write_enum_case)
    else:
        writer.write_array(list(entry.prefix_topics), lambda w, s: w.write_string(s))

        def _write_param(w: XdrWriter, param: SpecEventParam) -> None:
            _write_named_field(w, param)
            w.write_int32(param.location)

        writer.write_array(list(entry.params), _write_param)
        writer.write_int32(entry.data_format)


def encode_spec_entries(entries: List[SpecEntry]) -> bytes:
    """Encode entries back to back, as stored in a ``contractspecv0`` section."""
    writer = XdrWriter()
    for entry in entries:
        write_spec_entry(writer, entry)
    return writer.to_bytes()
