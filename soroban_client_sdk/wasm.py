"""
Minimal WebAssembly binary reader.

Walks the section table of a wasm module and exposes its custom sections.
Contracts embed their interface description in the custom section named
``contractspecv0``.
"""
import logging
from typing import List, Tuple

import wasmtime

from .exceptions import WasmDecodeError

logger = logging.getLogger(__name__)

WASM_MAGIC = b"\x00asm"
WASM_VERSION = b"\x01\x00\x00\x00"
CUSTOM_SECTION_ID = 0
MAX_SECTION_ID = 12

CONTRACT_SPEC_SECTION = "contractspecv0"
CONTRACT_META_SECTION = "contractmetav0"
CONTRACT_ENV_META_SECTION = "contractenvmetav0"


def read_leb128_u32(data: bytes, offset: int) -> Tuple[int, int]:
    """
    Decode an unsigned LEB128 value of at most 32 bits.

    Args:
        data: Buffer to read from
        offset: Position of the first byte

    Returns:
        Tuple of (value, offset just past the encoded value)

    Raises:
        WasmDecodeError: If the value is truncated or longer than five bytes
    """
    result = 0
    shift = 0
    for i in range(5):
        if offset >= len(data):
            raise WasmDecodeError(f"Truncated LEB128 value at offset {offset}")
        byte = data[offset]
        offset += 1
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return result, offset
        shift += 7
    raise WasmDecodeError(f"LEB128 value too long at offset {offset - 5}")


def encode_leb128_u32(value: int) -> bytes:
    """Encode an unsigned integer as LEB128."""
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


class WasmModule:
    """
    A parsed wasm module, inspected but never instantiated.

    Args:
        data: The complete wasm binary

    Raises:
        WasmDecodeError: If the header or the section table is malformed
    """

    def __init__(self, data: bytes):
        self._data = bytes(data)
        self._sections: List[Tuple[int, int, int]] = []
        self._custom: List[Tuple[str, bytes]] = []
        self._parse()

    def _parse(self) -> None:
        data = self._data
        if len(data) < 8:
            raise WasmDecodeError("Wasm binary is shorter than its header")
        if data[:4] != WASM_MAGIC:
            raise WasmDecodeError("Not a wasm binary: bad magic number")
        if data[4:8] != WASM_VERSION:
            raise WasmDecodeError(f"Unsupported wasm version: {data[4:8].hex()}")

        offset = 8
        while offset < len(data):
            section_id = data[offset]
            if section_id > MAX_SECTION_ID:
                raise WasmDecodeError(f"Unknown wasm section id {section_id} at offset {offset}")
            size, start = read_leb128_u32(data, offset + 1)
            end = start + size
            if end > len(data):
                raise WasmDecodeError(
                    f"Section {section_id} at offset {offset} overruns the binary"
                )
            self._sections.append((section_id, start, end))
            if section_id == CUSTOM_SECTION_ID:
                name_len, name_start = read_leb128_u32(data, start)
                name_end = name_start + name_len
                if name_end > end:
                    raise WasmDecodeError(f"Custom section name overruns section at offset {offset}")
                try:
                    name = data[name_start:name_end].decode("utf-8")
                except UnicodeDecodeError as e:
                    raise WasmDecodeError(f"Invalid custom section name: {e}")
                self._custom.append((name, data[name_end:end]))
            offset = end

        logger.debug(f"Parsed wasm module: {len(self._sections)} sections, {len(self._custom)} custom")

    @property
    def section_ids(self) -> List[int]:
        return [section_id for section_id, _, _ in self._sections]

    def custom_section_names(self) -> List[str]:
        return [name for name, _ in self._custom]

    def custom_sections(self, name: str) -> List[bytes]:
        """
        Return the payloads of every custom section called ``name``, in file order.
        """
        return [payload for section_name, payload in self._custom if section_name == name]


def validate_module(data: bytes) -> None:
    """
    Validate a wasm binary the way the engine would before compiling it.

    Raises:
        wasmtime.WasmtimeError: If the module does not validate
    """
    wasmtime.Module.validate(wasmtime.Engine(), bytes(data))


def build_custom_section(name: str, payload: bytes) -> bytes:
    """Encode a custom section (id, size, name, payload) for embedding in a module."""
    encoded_name = name.encode("utf-8")
    body = encode_leb128_u32(len(encoded_name)) + encoded_name + payload
    return bytes([CUSTOM_SECTION_ID]) + encode_leb128_u32(len(body)) + body
