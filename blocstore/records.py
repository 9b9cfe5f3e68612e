"""Files of fixed-size binary records and files of text lines."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import BinaryIO

from blocstore.errors import ErrorCode, FileError
from blocstore.fileops import insert_bytes, shrink


def _check_path(path: str | os.PathLike[str]) -> str:
    text = os.fspath(path)
    if not text:
        raise FileError(ErrorCode.NO_FILE_NAME)
    return text


class RecordFile:
    """A binary file made of records that all have the same size."""

    def __init__(self, path: str | os.PathLike[str], record_size: int) -> None:
        if record_size <= 0:
            raise FileError(ErrorCode.ZERO_RECORD_SIZE)
        self.path = _check_path(path)
        self.record_size = record_size

    def __repr__(self) -> str:
        return f"RecordFile({self.path!r}, {self.record_size})"

    @contextmanager
    def _open(self, mode: str, code: ErrorCode = ErrorCode.OPEN_FAILED) -> Iterator[BinaryIO]:
        try:
            handle = open(self.path, mode)
        except OSError as exc:
            raise FileError(code, str(exc)) from exc
        with handle:
            yield handle

    def _check_record(self, record: bytes) -> bytes:
        record = bytes(record)
        if len(record) != self.record_size:
            raise ValueError(
                f"record of {len(record)} bytes, expected {self.record_size}"
            )
        return record

    def _check_index(self, index: int) -> int:
        count = len(self)
        if index < 0:
            index += count
        if index < 0:
            raise FileError(ErrorCode.INDEX_ERROR, str(index))
        if index >= count:
            raise FileError(ErrorCode.END_OF_FILE, f"record {index} of {count}")
        return index

    def create_empty(self) -> None:
        """Create the file, or empty it if it exists."""
        with self._open("wb"):
            pass

    def exists(self) -> bool:
        return os.path.exists(self.path)

    def size(self) -> int:
        """Size of the file in bytes."""
        try:
            return os.path.getsize(self.path)
        except OSError as exc:
            raise FileError(ErrorCode.OPEN_FAILED, str(exc)) from exc

    def is_empty(self) -> bool:
        return self.size() == 0

    def append(self, record: bytes) -> None:
        """Add a record at the end of the file, creating it if needed."""
        record = self._check_record(record)
        with self._open("ab", ErrorCode.APPEND_FAILED) as handle:
            handle.write(record)

    def write(self, records: Iterable[bytes]) -> None:
        """Replace the whole content of the file by ``records``."""
        checked = [self._check_record(record) for record in records]
        with self._open("wb", ErrorCode.WRITE_FAILED) as handle:
            handle.writelines(checked)

    def read(self, index: int) -> bytes:
        """Return the record at ``index`` (negative indexes count from the end)."""
        if index < 0:
            index += len(self)
            if index < 0:
                raise FileError(ErrorCode.INDEX_ERROR, str(index))
        with self._open("rb") as handle:
            handle.seek(index * self.record_size)
            data = handle.read(self.record_size)
        if not data:
            raise FileError(ErrorCode.END_OF_FILE, f"record {index}")
        if len(data) < self.record_size:
            raise FileError(ErrorCode.READ_FAILED, f"record {index} is incomplete")
        return data

    def __iter__(self) -> Iterator[bytes]:
        """Yield every complete record in order; a trailing partial one is ignored."""
        with self._open("rb") as handle:
            while len(data := handle.read(self.record_size)) == self.record_size:
                yield data

    def __len__(self) -> int:
        return self.size() // self.record_size

    def overwrite(self, index: int, record: bytes) -> None:
        """Replace the record at ``index`` in place."""
        record = self._check_record(record)
        index = self._check_index(index)
        with self._open("r+b", ErrorCode.OPEN_READ_WRITE_FAILED) as handle:
            handle.seek(index * self.record_size)
            handle.write(record)

    def insert(self, index: int, record: bytes) -> None:
        """Insert a record before ``index``; past the end it is appended."""
        record = self._check_record(record)
        if index < 0:
            raise FileError(ErrorCode.INDEX_ERROR, str(index))
        with self._open("r+b", ErrorCode.OPEN_READ_WRITE_FAILED) as handle:
            insert_bytes(handle, index * self.record_size, record)

    def delete(self, index: int) -> None:
        """Remove the record at ``index``; the following records move down."""
        index = self._check_index(index)
        with self._open("r+b", ErrorCode.OPEN_READ_WRITE_FAILED) as handle:
            shrink(handle, index * self.record_size, self.record_size)

    def _field(self, record: bytes, offset: int, length: int | None) -> str:
        end = self.record_size if length is None else offset + length
        return record[offset:end].split(b"\0", 1)[0].decode("utf-8", "replace")

    def _check_field(self, offset: int, length: int | None) -> None:
        end = self.record_size if length is None else offset + length
        if offset < 0 or end > self.record_size or end < offset:
            raise ValueError(f"field {offset}:{end} outside a record of {self.record_size} bytes")

    def list_strings(self, offset: int = 0, length: int | None = None) -> list[str]:
        """Return the NUL-terminated text field at ``offset`` of every record."""
        self._check_field(offset, length)
        strings = [self._field(record, offset, length) for record in self]
        if not strings:
            raise FileError(ErrorCode.BLOCK_NOT_FOUND, "the file holds no record")
        return strings

    def find_string(self, text: str, offset: int = 0, length: int | None = None) -> int | None:
        """Return the index of the first record whose text field equals ``text``, or None."""
        if not text:
            raise FileError(ErrorCode.EMPTY_SEARCH_TEXT)
        self._check_field(offset, length)
        for index, record in enumerate(self):
            if self._field(record, offset, length) == text:
                return index
        return None

    def rename(self, new_path: str | os.PathLike[str]) -> None:
        """Move the file to ``new_path``, which must not exist yet."""
        new_path = _check_path(new_path)
        if not self.exists():
            raise FileError(ErrorCode.NO_FILE_NAME, f"{self.path} does not exist")
        if os.path.exists(new_path):
            raise FileError(ErrorCode.FILE_EXISTS, new_path)
        os.rename(self.path, new_path)
        self.path = new_path

    def remove(self) -> None:
        """Delete the file if it exists."""
        if self.exists():
            os.remove(self.path)


class TextFile:
    """A text file handled line by line; line numbers start at 1."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = _check_path(path)

    def __repr__(self) -> str:
        return f"TextFile({self.path!r})"

    def _lines(self) -> list[str]:
        try:
            with open(self.path, encoding="utf-8", newline="") as handle:
                content = handle.read()
        except OSError as exc:
            raise FileError(ErrorCode.OPEN_FAILED, str(exc)) from exc
        lines = content.split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        return lines

    def _store(self, lines: list[str]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        fd, temporary = tempfile.mkstemp(suffix=".tmp", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
                handle.writelines(f"{line}\n" for line in lines)
            os.replace(temporary, self.path)
        except OSError as exc:
            if os.path.exists(temporary):
                os.remove(temporary)
            raise FileError(ErrorCode.RESIZE_FAILED, str(exc)) from exc

    @staticmethod
    def _slot(lines: list[str], number: int) -> int:
        if number < 1:
            raise FileError(ErrorCode.INDEX_ERROR, str(number))
        if number > len(lines):
            raise FileError(ErrorCode.END_OF_FILE, f"line {number} of {len(lines)}")
        return number - 1

    def create_empty(self) -> None:
        """Create the file, or empty it if it exists."""
        try:
            with open(self.path, "w", encoding="utf-8"):
                pass
        except OSError as exc:
            raise FileError(ErrorCode.OPEN_FAILED, str(exc)) from exc

    def append_line(self, text: str) -> None:
        """Add a line at the end of the file."""
        if not text:
            raise FileError(ErrorCode.LINE_WRITE_FAILED, "empty line")
        try:
            with open(self.path, "a", encoding="utf-8", newline="") as handle:
                handle.write(f"{text}\n")
        except OSError as exc:
            raise FileError(ErrorCode.APPEND_FAILED, str(exc)) from exc

    def read_line(self, number: int) -> str:
        """Return line ``number`` without its newline."""
        lines = self._lines()
        return lines[self._slot(lines, number)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._lines())

    def replace_line(self, number: int, text: str) -> None:
        """Replace line ``number`` by ``text``."""
        if not text:
            raise FileError(ErrorCode.EMPTY_LINE)
        lines = self._lines()
        lines[self._slot(lines, number)] = text
        self._store(lines)

    def insert_line(self, number: int, text: str) -> None:
        """Insert ``text`` so that it becomes line ``number``; past the end it is appended."""
        if not text:
            raise FileError(ErrorCode.LINE_WRITE_FAILED, "empty line")
        if number < 1:
            raise FileError(ErrorCode.INDEX_ERROR, str(number))
        lines = self._lines()
        lines.insert(number - 1, text)
        self._store(lines)

    def delete_line(self, number: int) -> None:
        """Remove line ``number``."""
        lines = self._lines()
        del lines[self._slot(lines, number)]
        self._store(lines)