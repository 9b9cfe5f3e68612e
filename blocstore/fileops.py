"""Low-level byte moves inside an open binary file: insert, shrink, extend, copy."""

from __future__ import annotations

import os
from typing import BinaryIO

from blocstore.errors import ErrorCode, FileError

_CHUNK = 65535


def _file_size(handle: BinaryIO) -> int:
    handle.flush()
    handle.seek(0, os.SEEK_END)
    return handle.tell()


def _copy_within(handle: BinaryIO, source: int, target: int, length: int) -> None:
    """Copy ``length`` bytes from ``source`` to ``target`` in chunks."""
    if length <= 0 or source == target:
        return
    if target > source:
        offsets = range(length, 0, -_CHUNK)
        spans = ((max(end - _CHUNK, 0), end) for end in offsets)
    else:
        spans = ((start, min(start + _CHUNK, length)) for start in range(0, length, _CHUNK))
    for start, end in spans:
        handle.seek(source + start)
        chunk = handle.read(end - start)
        if len(chunk) != end - start:
            raise FileError(ErrorCode.DIRECT_READ_FAILED, f"at offset {source + start}")
        handle.seek(target + start)
        handle.write(chunk)


def extend(handle: BinaryIO, position: int, size: int) -> None:
    """Open a gap of ``size`` bytes at ``position``, moving the rest of the file up.

    The file grows by ``size`` bytes; the gap keeps whatever bytes were there.
    """
    if size < 0:
        raise FileError(ErrorCode.INVALID_EXPANSION, str(size))
    total = _file_size(handle)
    if position < 0 or position > total:
        raise FileError(ErrorCode.UNKNOWN_POSITION, f"position {position} in a file of {total} bytes")
    if size == 0:
        return
    _copy_within(handle, position, position + size, total - position)
    if _file_size(handle) < total + size:
        handle.truncate(total + size)
    handle.flush()


def shrink(handle: BinaryIO, position: int, size: int) -> None:
    """Remove ``size`` bytes at ``position``; the file becomes ``size`` bytes shorter."""
    if size < 0:
        raise FileError(ErrorCode.INVALID_EXPANSION, str(size))
    total = _file_size(handle)
    if position < 0 or position + size > total:
        raise FileError(
            ErrorCode.UNKNOWN_POSITION,
            f"cannot remove {size} bytes at {position} from a file of {total} bytes",
        )
    _copy_within(handle, position + size, position, total - position - size)
    handle.truncate(total - size)
    handle.flush()


def insert_bytes(handle: BinaryIO, position: int, data: bytes) -> int:
    """Insert ``data`` at ``position``; past the end of the file it is appended.

    Returns the offset at which the data was written.
    """
    total = _file_size(handle)
    if position < 0:
        raise FileError(ErrorCode.UNKNOWN_POSITION, str(position))
    if position < total:
        extend(handle, position, len(data))
    else:
        position = total
    handle.seek(position)
    try:
        handle.write(data)
        handle.flush()
    except OSError as exc:
        raise FileError(ErrorCode.SEEK_WRITE_FAILED, str(exc)) from exc
    return position


def resize(path: str | os.PathLike[str], delta: int, grow: bool = True) -> int:
    """Grow or shrink the file at ``path`` by ``delta`` bytes and return its new size.

    Shrinking by the whole size or more leaves a single byte.
    """
    try:
        size = os.path.getsize(path)
        if grow:
            size += delta
        elif size > delta:
            size -= delta
        else:
            size = 1
        os.truncate(path, size)
    except OSError as exc:
        raise FileError(ErrorCode.RESIZE_FAILED, str(exc)) from exc
    return size


def integrate_file(
    handle: BinaryIO,
    source_path: str | os.PathLike[str],
    start: int,
    length: int,
    position: int,
) -> None:
    """Copy ``length`` bytes of ``source_path`` from ``start`` into ``handle`` at ``position``.

    The target is overwritten in place; make room first with :func:`extend`.
    """
    if not os.fspath(source_path):
        raise FileError(ErrorCode.NO_FILE_NAME)
    try:
        source = open(source_path, "rb")
    except OSError as exc:
        raise FileError(ErrorCode.OPEN_FAILED, str(exc)) from exc
    with source:
        copied = 0
        while copied < length:
            wanted = min(_CHUNK, length - copied)
            source.seek(start + copied)
            chunk = source.read(wanted)
            if len(chunk) != wanted:
                raise FileError(ErrorCode.DIRECT_READ_FAILED, f"at offset {start + copied}")
            handle.seek(position + copied)
            try:
                handle.write(chunk)
            except OSError as exc:
                raise FileError(ErrorCode.SEEK_WRITE_FAILED, str(exc)) from exc
            copied += wanted
    handle.flush()