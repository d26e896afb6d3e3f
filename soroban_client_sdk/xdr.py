"""
XDR (RFC 4506) primitives and strkey helpers.

Only the subset needed to read contract specs and ledger entries is covered:
fixed-width integers, booleans, fixed and variable opaque data, strings,
optionals and variable-length arrays.
"""
import base64
import struct
from typing import Any, Callable, List, Optional, TypeVar

from .exceptions import XdrDecodeError

T = TypeVar('T')

# Strkey version bytes (already shifted into the top five bits)
VERSION_BYTE_ACCOUNT_ID = 6 << 3
VERSION_BYTE_CONTRACT = 2 << 3


def _pad_length(n: int) -> int:
    return (4 - n % 4) % 4


class XdrReader:
    """
    Sequential reader over an XDR encoded buffer.

    Args:
        data: Raw XDR bytes
    """

    def __init__(self, data: bytes):
        self._data = bytes(data)
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def done(self) -> bool:
        return self._pos >= len(self._data)

    def _take(self, n: int) -> bytes:
        if n < 0 or self._pos + n > len(self._data):
            raise XdrDecodeError(
                f"Unexpected end of XDR data: wanted {n} bytes at offset {self._pos}, "
                f"{self.remaining} available"
            )
        chunk = self._data[self._pos:self._pos + n]
        self._pos += n
        return chunk

    def read_int32(self) -> int:
        return struct.unpack(">i", self._take(4))[0]

    def read_uint32(self) -> int:
        return struct.unpack(">I", self._take(4))[0]

    def read_int64(self) -> int:
        return struct.unpack(">q", self._take(8))[0]

    def read_uint64(self) -> int:
        return struct.unpack(">Q", self._take(8))[0]

    def read_bool(self) -> bool:
        value = self.read_int32()
        if value not in (0, 1):
            raise XdrDecodeError(f"Invalid XDR boolean: {value}")
        return value == 1

    def read_fixed_opaque(self, n: int) -> bytes:
        value = self._take(n)
        self._take(_pad_length(n))
        return value

    def read_opaque(self, max_length: Optional[int] = None) -> bytes:
        length = self.read_uint32()
        if max_length is not None and length > max_length:
            raise XdrDecodeError(f"Opaque length {length} exceeds limit {max_length}")
        return self.read_fixed_opaque(length)

    def read_string(self, max_length: Optional[int] = None) -> str:
        raw = self.read_opaque(max_length)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise XdrDecodeError(f"Invalid UTF-8 in XDR string: {e}")

    def read_optional(self, read_fn: Callable[["XdrReader"], T]) -> Optional[T]:
        if self.read_bool():
            return read_fn(self)
        return None

    def read_array(self, read_fn: Callable[["XdrReader"], T]) -> List[T]:
        count = self.read_uint32()
        # Every element occupies at least four bytes
        if count * 4 > self.remaining:
            raise XdrDecodeError(f"Array length {count} exceeds remaining data")
        return [read_fn(self) for _ in range(count)]


class XdrWriter:
    """Append-only XDR encoder, the mirror of XdrReader."""

    def __init__(self):
        self._chunks: List[bytes] = []

    def to_bytes(self) -> bytes:
        return b"".join(self._chunks)

    def write_int32(self, value: int) -> None:
        self._chunks.append(struct.pack(">i", value))

    def write_uint32(self, value: int) -> None:
        self._chunks.append(struct.pack(">I", value))

    def write_int64(self, value: int) -> None:
        self._chunks.append(struct.pack(">q", value))

    def write_uint64(self, value: int) -> None:
        self._chunks.append(struct.pack(">Q", value))

    def write_bool(self, value: bool) -> None:
        self.write_int32(1 if value else 0)

    def write_fixed_opaque(self, value: bytes) -> None:
        self._chunks.append(bytes(value))
        self._chunks.append(b"\x00" * _pad_length(len(value)))

    def write_opaque(self, value: bytes) -> None:
        self.write_uint32(len(value))
        self.write_fixed_opaque(value)

    def write_string(self, value: str) -> None:
        self.write_opaque(value.encode("utf-8"))

    def write_optional(self, value: Optional[Any], write_fn: Callable[["XdrWriter", Any], None]) -> None:
        self.write_bool(value is not None)
        if value is not None:
            write_fn(self, value)

    def write_array(self, values: List[Any], write_fn: Callable[["XdrWriter", Any], None]) -> None:
        self.write_uint32(len(values))
        for value in values:
            write_fn(self, value)


# ---------------------------------------------------------------------------
# Strkey (base32 + CRC16-XModem) helpers
# ---------------------------------------------------------------------------

def _crc16_xmodem(data: bytes) -> int:
    crc = 0
    for byte in data:
        crc ^= byte << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = ((crc << 1) ^ 0x1021) & 0xFFFF
            else:
                crc = (crc << 1) & 0xFFFF
    return crc


def _encode_strkey(version_byte: int, payload: bytes) -> str:
    body = bytes([version_byte]) + payload
    checksum = struct.pack("<H", _crc16_xmodem(body))
    return base64.b32encode(body + checksum).decode("ascii").rstrip("=")


def _decode_strkey(version_byte: int, value: str) -> bytes:
    if not isinstance(value, str) or len(value) != 56:
        raise ValueError(f"Invalid strkey length: {value!r}")
    try:
        raw = base64.b32decode(value)
    except (ValueError, TypeError) as e:
        raise ValueError(f"Invalid strkey encoding: {value!r}") from e

    body, checksum = raw[:-2], raw[-2:]
    if body[0] != version_byte:
        raise ValueError(f"Invalid strkey version byte for {value!r}")
    if struct.pack("<H", _crc16_xmodem(body)) != checksum:
        raise ValueError(f"Invalid strkey checksum for {value!r}")
    return body[1:]


def encode_contract_id(contract_hash: bytes) -> str:
    """Encode a 32-byte contract hash as a C... strkey."""
    return _encode_strkey(VERSION_BYTE_CONTRACT, contract_hash)


def decode_contract_id(contract_id: str) -> bytes:
    """
    Decode a C... strkey into its 32-byte contract hash.

    Raises:
        ValueError: If the strkey is malformed or not a contract id
    """
    return _decode_strkey(VERSION_BYTE_CONTRACT, contract_id)


def encode_account_id(public_key: bytes) -> str:
    """Encode a 32-byte ed25519 public key as a G... strkey."""
    return _encode_strkey(VERSION_BYTE_ACCOUNT_ID, public_key)


def decode_account_id(account_id: str) -> bytes:
    """Decode a G... strkey into its 32-byte ed25519 public key."""
    return _decode_strkey(VERSION_BYTE_ACCOUNT_ID, account_id)
