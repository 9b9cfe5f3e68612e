"""On-disk layout of block files: tags, headers and the addresses found while walking them.

A block file starts with a 16-byte header. Blocks follow one another; each
block header holds the size of its content and a 32-byte tag. A block's content
is a run of parts with the same kind of header. A part's content is a run of
structures; each one starts with a 4-byte total size (header included) and a
32-byte tag. All integers are little-endian.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from blocstore.errors import ErrorCode, FileError

TAG_SIZE = 32

FILE_TYPE = 0x41544144434F4C42  # "BLOCDATA"
FILE_KIND = 0x3432333065676164  # "dage0324"

_FILE_HEADER = struct.Struct("<QQ")
_BLOCK_HEADER = struct.Struct(f"<Q{TAG_SIZE}s")
_STRUCT_HEADER = struct.Struct(f"<I{TAG_SIZE}s")

FILE_HEADER_SIZE = _FILE_HEADER.size
BLOCK_HEADER_SIZE = _BLOCK_HEADER.size
STRUCT_HEADER_SIZE = _STRUCT_HEADER.size


def encode_tag(name: str) -> bytes:
    """Return ``name`` as a 32-byte tag: UTF-8, cut to 32 bytes or padded with NULs."""
    if not name:
        raise ValueError("a tag name must not be empty")
    raw = name.encode("utf-8")[:TAG_SIZE]
    return raw.ljust(TAG_SIZE, b"\0")


def decode_tag(raw: bytes) -> str:
    """Return the text of a tag, up to its first NUL byte."""
    return bytes(raw[:TAG_SIZE]).split(b"\0", 1)[0].decode("utf-8", "replace")


def _tag_or_blank(name: str) -> bytes:
    return encode_tag(name) if name else bytes(TAG_SIZE)


def _unpack(layout: struct.Struct, data: bytes, what: str) -> tuple:
    if len(data) < layout.size:
        raise FileError(
            ErrorCode.READ_FAILED,
            f"{what} needs {layout.size} bytes, got {len(data)}",
        )
    return layout.unpack_from(data)


def _pack(layout: struct.Struct, what: str, *values: object) -> bytes:
    try:
        return layout.pack(*values)
    except struct.error as exc:
        raise ValueError(f"cannot pack {what}: {exc}") from exc


@dataclass(frozen=True)
class FileHeader:
    """The header that opens every block file."""

    type: int = FILE_TYPE
    kind: int = FILE_KIND

    def pack(self) -> bytes:
        return _pack(_FILE_HEADER, "file header", self.type, self.kind)

    @classmethod
    def unpack(cls, data: bytes) -> "FileHeader":
        type_, kind = _unpack(_FILE_HEADER, data, "file header")
        return cls(type_, kind)


@dataclass
class BlockHeader:
    """Header of a block or of a part: content size and tag name."""

    size: int = 0
    name: str = ""

    def pack(self) -> bytes:
        return _pack(_BLOCK_HEADER, "block header", self.size, _tag_or_blank(self.name))

    @classmethod
    def unpack(cls, data: bytes) -> "BlockHeader":
        size, tag = _unpack(_BLOCK_HEADER, data, "block header")
        return cls(size, decode_tag(tag))


@dataclass
class StructHeader:
    """Header of a structure: total size, header included, and tag name."""

    size: int = STRUCT_HEADER_SIZE
    name: str = ""

    @property
    def payload_size(self) -> int:
        """Number of bytes that follow the header."""
        return self.size - STRUCT_HEADER_SIZE

    def pack(self) -> bytes:
        return _pack(_STRUCT_HEADER, "structure header", self.size, _tag_or_blank(self.name))

    @classmethod
    def unpack(cls, data: bytes) -> "StructHeader":
        size, tag = _unpack(_STRUCT_HEADER, data, "structure header")
        return cls(size, decode_tag(tag))


@dataclass
class Address:
    """Offsets of a block or part found in a file.

    ``start`` is where its header begins, ``end`` where the header ends,
    ``content_end`` where its content ends and ``limit`` the end of the
    enclosing block.
    """

    start: int = 0
    end: int = 0
    content_end: int = 0
    limit: int = 0