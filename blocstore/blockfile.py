"""Block files: named blocks holding named parts holding tagged structures."""

from __future__ import annotations

import os
import struct
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import BinaryIO

from blocstore.blockformat import (
    BLOCK_HEADER_SIZE,
    FILE_HEADER_SIZE,
    STRUCT_HEADER_SIZE,
    Address,
    BlockHeader,
    FileHeader,
    StructHeader,
    decode_tag,
    encode_tag,
)
from blocstore.errors import ErrorCode, FileError
from blocstore.fileops import extend, insert_bytes, shrink

_BLOCK_SIZE_FIELD = struct.Struct("<Q")
_STRUCT_SIZE_FIELD = struct.Struct("<I")
_MAX_STRUCT_SIZE = 2**32 - 1

_NOT_FOUND_CODES = (ErrorCode.STRUCT_NOT_FOUND, ErrorCode.STRUCT_RANK_OUT_OF_RANGE)


def _tag(name: str, code: ErrorCode) -> str:
    """Return ``name`` as it reads back once stored in a tag."""
    if not name:
        raise FileError(code)
    return decode_tag(encode_tag(name))


class BlockFile:
    """A file of blocks, each holding parts, each holding tagged structures.

    Block names are unique in the file, part names unique in their block;
    several structures of a part may share a name and are then told apart by
    their rank, counted from 0 in file order.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        text = os.fspath(path)
        if not text:
            raise FileError(ErrorCode.NO_FILE_NAME)
        self.path = text

    def __repr__(self) -> str:
        return f"BlockFile({self.path!r})"

    # ----- opening -------------------------------------------------------

    @contextmanager
    def _open(self, mode: str = "rb") -> Iterator[BinaryIO]:
        code = ErrorCode.OPEN_FAILED if mode == "rb" else ErrorCode.OPEN_READ_WRITE_FAILED
        try:
            handle = open(self.path, mode)
        except OSError as exc:
            raise FileError(code, str(exc)) from exc
        with handle:
            data = handle.read(FILE_HEADER_SIZE)
            if len(data) < FILE_HEADER_SIZE:
                raise FileError(ErrorCode.HEADER_READ_FAILED, self.path)
            if FileHeader.unpack(data) != FileHeader():
                raise FileError(ErrorCode.NOT_A_BLOCK_FILE, self.path)
            yield handle

    # ----- walking -------------------------------------------------------

    @staticmethod
    def _blocks(handle: BinaryIO) -> Iterator[tuple[str, Address]]:
        position = FILE_HEADER_SIZE
        while True:
            handle.seek(position)
            data = handle.read(BLOCK_HEADER_SIZE)
            if len(data) < BLOCK_HEADER_SIZE:
                return
            header = BlockHeader.unpack(data)
            end = position + BLOCK_HEADER_SIZE
            address = Address(position, end, end + header.size, 0)
            yield header.name, address
            position = address.content_end

    @staticmethod
    def _parts(handle: BinaryIO, block: Address) -> Iterator[tuple[str, Address]]:
        position = block.end
        while position < block.content_end:
            handle.seek(position)
            data = handle.read(BLOCK_HEADER_SIZE)
            if len(data) < BLOCK_HEADER_SIZE:
                raise FileError(ErrorCode.SEEK_READ_FAILED, f"part header at {position}")
            header = BlockHeader.unpack(data)
            end = position + BLOCK_HEADER_SIZE
            address = Address(position, end, end + header.size, block.content_end)
            yield header.name, address
            position = address.content_end

    @staticmethod
    def _structs(handle: BinaryIO, part: Address) -> Iterator[tuple[int, StructHeader]]:
        position = part.end
        while position < part.content_end:
            handle.seek(position)
            data = handle.read(STRUCT_HEADER_SIZE)
            if len(data) < STRUCT_HEADER_SIZE:
                raise FileError(ErrorCode.SEEK_READ_FAILED, f"structure header at {position}")
            header = StructHeader.unpack(data)
            if header.size < STRUCT_HEADER_SIZE:
                raise FileError(ErrorCode.READ_FAILED, f"corrupt structure size at {position}")
            yield position, header
            position += header.size

    def _find_block(self, handle: BinaryIO, name: str) -> Address:
        for found, address in self._blocks(handle):
            if found == name:
                return address
        raise FileError(ErrorCode.BLOCK_NOT_FOUND, name)

    def _find_part(self, handle: BinaryIO, block: Address, name: str) -> Address:
        for found, address in self._parts(handle, block):
            if found == name:
                return address
        raise FileError(ErrorCode.PART_NOT_FOUND, name)

    def _locate(self, handle: BinaryIO, block: str, part: str) -> tuple[Address, Address]:
        block_address = self._find_block(handle, _tag(block, ErrorCode.EMPTY_BLOCK_NAME))
        part_address = self._find_part(
            handle, block_address, _tag(part, ErrorCode.EMPTY_PART_NAME)
        )
        return block_address, part_address

    def _find_struct(
        self, handle: BinaryIO, part: Address, name: str, rank: int
    ) -> tuple[int, StructHeader]:
        if rank < 0:
            raise FileError(ErrorCode.INDEX_ERROR, str(rank))
        seen = 0
        for offset, header in self._structs(handle, part):
            if header.name == name:
                if seen == rank:
                    return offset, header
                seen += 1
        if seen:
            raise FileError(ErrorCode.STRUCT_RANK_OUT_OF_RANGE, f"{name} rank {rank} of {seen}")
        raise FileError(ErrorCode.STRUCT_NOT_FOUND, name)

    @staticmethod
    def _read_payload(handle: BinaryIO, offset: int, header: StructHeader) -> bytes:
        handle.seek(offset + STRUCT_HEADER_SIZE)
        payload = handle.read(header.payload_size)
        if len(payload) < header.payload_size:
            raise FileError(ErrorCode.READ_FAILED, f"structure at {offset} is incomplete")
        return payload

    @staticmethod
    def _add_to_size(handle: BinaryIO, offset: int, delta: int) -> None:
        handle.seek(offset)
        data = handle.read(_BLOCK_SIZE_FIELD.size)
        if len(data) < _BLOCK_SIZE_FIELD.size:
            raise FileError(ErrorCode.SEEK_READ_FAILED, f"size field at {offset}")
        (size,) = _BLOCK_SIZE_FIELD.unpack(data)
        handle.seek(offset)
        handle.write(_BLOCK_SIZE_FIELD.pack(max(size + delta, 0)))
        handle.flush()

    @staticmethod
    def _struct_bytes(name: str, payload: bytes) -> bytes:
        payload = bytes(payload)
        total = STRUCT_HEADER_SIZE + len(payload)
        if total > _MAX_STRUCT_SIZE:
            raise ValueError(f"structure of {total} bytes is too large")
        return StructHeader(total, name).pack() + payload

    # ----- creation ------------------------------------------------------

    def create(self) -> None:
        """Create the file with its header only, replacing any existing file."""
        try:
            with open(self.path, "wb") as handle:
                handle.write(FileHeader().pack())
        except OSError as exc:
            raise FileError(ErrorCode.WRITE_FAILED, str(exc)) from exc

    def create_with_part(self, block: str, part: str) -> None:
        """Create the file with one block holding one empty part."""
        _tag(block, ErrorCode.EMPTY_BLOCK_NAME)
        _tag(part, ErrorCode.EMPTY_PART_NAME)
        self.create()
        self.create_block(block)
        self.create_part(block, part)

    def create_block(self, block: str) -> None:
        """Append an empty block; its name must not be taken yet."""
        name = _tag(block, ErrorCode.EMPTY_BLOCK_NAME)
        with self._open("r+b") as handle:
            if any(found == name for found, _ in self._blocks(handle)):
                raise FileError(ErrorCode.BLOCK_EXISTS, name)
            handle.seek(0, os.SEEK_END)
            handle.write(BlockHeader(0, block).pack())

    def create_part(self, block: str, part: str) -> None:
        """Add an empty part at the end of ``block``."""
        block_name = _tag(block, ErrorCode.EMPTY_BLOCK_NAME)
        part_name = _tag(part, ErrorCode.EMPTY_PART_NAME)
        with self._open("r+b") as handle:
            block_address = self._find_block(handle, block_name)
            if any(found == part_name for found, _ in self._parts(handle, block_address)):
                raise FileError(ErrorCode.PART_EXISTS, part_name)
            insert_bytes(handle, block_address.content_end, BlockHeader(0, part).pack())
            self._add_to_size(handle, block_address.start, BLOCK_HEADER_SIZE)

    def add_struct(self, block: str, part: str, name: str, payload: bytes) -> None:
        """Append a structure named ``name`` holding ``payload`` at the end of a part."""
        struct_name = _tag(name, ErrorCode.EMPTY_STRUCT_NAME)
        with self._open("r+b") as handle:
            block_address, part_address = self._locate(handle, block, part)
            self._append_struct(handle, block_address, part_address, struct_name, payload)

    def _append_struct(
        self,
        handle: BinaryIO,
        block_address: Address,
        part_address: Address,
        name: str,
        payload: bytes,
    ) -> None:
        data = self._struct_bytes(name, payload)
        insert_bytes(handle, part_address.content_end, data)
        self._add_to_size(handle, part_address.start, len(data))
        self._add_to_size(handle, block_address.start, len(data))

    # ----- structures ----------------------------------------------------

    def read_struct(self, block: str, part: str, name: str, rank: int = 0) -> bytes:
        """Return the payload of the ``rank``-th structure named ``name`` in a part."""
        struct_name = _tag(name, ErrorCode.EMPTY_STRUCT_NAME)
        with self._open() as handle:
            _, part_address = self._locate(handle, block, part)
            offset, header = self._find_struct(handle, part_address, struct_name, rank)
            return self._read_payload(handle, offset, header)

    def modify_struct(
        self,
        block: str,
        part: str,
        name: str,
        rank: int,
        payload: bytes,
        create_missing: bool = False,
    ) -> None:
        """Replace the payload of a structure, resizing it if needed.

        When the structure does not exist and ``create_missing`` is true, it is
        appended to the part instead.
        """
        struct_name = _tag(name, ErrorCode.EMPTY_STRUCT_NAME)
        data = self._struct_bytes(struct_name, payload)
        with self._open("r+b") as handle:
            block_address, part_address = self._locate(handle, block, part)
            try:
                offset, header = self._find_struct(handle, part_address, struct_name, rank)
            except FileError as error:
                if create_missing and error.code in _NOT_FOUND_CODES:
                    self._append_struct(handle, block_address, part_address, struct_name, payload)
                    return
                raise
            delta = len(data) - header.size
            if delta < 0:
                shrink(handle, offset, -delta)
            elif delta > 0:
                extend(handle, offset, delta)
            handle.seek(offset)
            # Keep the stored tag bytes; only size and payload change.
            handle.write(_STRUCT_SIZE_FIELD.pack(len(data)))
            handle.seek(offset + STRUCT_HEADER_SIZE)
            handle.write(data[STRUCT_HEADER_SIZE:])
            handle.flush()
            if delta:
                self._add_to_size(handle, part_address.start, delta)
                self._add_to_size(handle, block_address.start, delta)

    def iter_structs(self, block: str, part: str, name: str) -> Iterator[bytes]:
        """Yield, in file order, the payload of every structure named ``name`` in a part."""
        struct_name = _tag(name, ErrorCode.EMPTY_STRUCT_NAME)
        with self._open() as handle:
            _, part_address = self._locate(handle, block, part)
            for offset, header in self._structs(handle, part_address):
                if header.name == struct_name:
                    yield self._read_payload(handle, offset, header)

    def find_struct(
        self, block: str, part: str, predicate: Callable[[str, bytes], bool]
    ) -> int | None:
        """Return the position, among all structures of a part, of the first one
        for which ``predicate(name, payload)`` is true, or None."""
        with self._open() as handle:
            _, part_address = self._locate(handle, block, part)
            for index, (offset, header) in enumerate(self._structs(handle, part_address)):
                if predicate(header.name, self._read_payload(handle, offset, header)):
                    return index
        return None

    # ----- inspection ----------------------------------------------------

    def first_block(self) -> str:
        """Return the name of the first block of the file."""
        with self._open() as handle:
            for name, _ in self._blocks(handle):
                return name
        raise FileError(ErrorCode.BLOCK_NOT_FOUND, "the file holds no block")

    def block_exists(self, block: str) -> bool:
        """Tell whether a block of that name exists."""
        if not block:
            return False
        name = _tag(block, ErrorCode.EMPTY_BLOCK_NAME)
        with self._open() as handle:
            return any(found == name for found, _ in self._blocks(handle))

    def block_size(self, block: str) -> int:
        """Return the size of a block, header included; 0 if there is no such block."""
        if not block:
            return 0
        name = _tag(block, ErrorCode.EMPTY_BLOCK_NAME)
        with self._open() as handle:
            for found, address in self._blocks(handle):
                if found == name:
                    return address.content_end - address.start
        return 0

    def part_size(self, block: str, part: str) -> int:
        """Return the size of a part, header included."""
        with self._open() as handle:
            _, part_address = self._locate(handle, block, part)
            return part_address.content_end - part_address.start

    def list_blocks(self) -> list[str]:
        """Return the names of all blocks in file order."""
        with self._open() as handle:
            names = [name for name, _ in self._blocks(handle)]
        if not names:
            raise FileError(ErrorCode.BLOCK_NOT_FOUND, "the file holds no block")
        return names

    def list_parts(self, block: str) -> list[str]:
        """Return the names of the parts of ``block`` in file order."""
        name = _tag(block, ErrorCode.EMPTY_BLOCK_NAME)
        with self._open() as handle:
            block_address = self._find_block(handle, name)
            names = [found for found, _ in self._parts(handle, block_address)]
        if not names:
            raise FileError(ErrorCode.PART_NOT_FOUND, f"block {name} holds no part")
        return names