"""Error codes reported by the file layers and the exception that carries them."""

from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    """Numeric error codes with a short description each."""

    description: str

    def __new__(cls, value: int, description: str) -> "ErrorCode":
        member = int.__new__(cls, value)
        member._value_ = value
        member.description = description
        return member

    # Generic file errors.
    OPEN_FAILED = (1100, "cannot open the file")
    WRITE_FAILED = (1101, "cannot write to the file")
    APPEND_FAILED = (1102, "cannot append to the file")
    NULL_RECORD = (1103, "no record or text buffer given")
    ZERO_RECORD_SIZE = (1104, "record size is zero")
    NO_FILE_NAME = (1105, "the file has no name")
    READ_FAILED = (1106, "cannot read the file")
    NOT_OPEN = (1107, "the file is not open")
    END_OF_FILE = (1108, "end of file reached")
    LINE_READ_FAILED = (1109, "cannot read the text line")
    LINE_WRITE_FAILED = (1110, "cannot write the text line")
    INDEX_ERROR = (1111, "bad index for direct read")
    VIRTUAL_CALL = (1112, "operation not provided by this file kind")
    NOT_POSITIONED = (1113, "the file must be open and positioned on the record")
    NOT_OPEN_FOR_READ = (1114, "the file is not open for reading")
    OPEN_READ_WRITE_FAILED = (1115, "cannot open the file for reading and writing")
    UNKNOWN_POSITION = (1116, "position in the file is unknown")
    EMPTY_LINE = (1117, "the text line is empty")
    REWIND_FAILED = (1118, "cannot return to the start of the file")
    DELETE_FAILED = (1119, "cannot delete the file")
    DIRECT_READ_FAILED = (1120, "direct read failed")
    RESIZE_FAILED = (1121, "cannot resize the file")
    FILE_EXISTS = (1122, "the file already exists")
    RECORD_WRITE_FAILED = (1123, "cannot write the binary record")
    INVALID_FILE_SIZE = (1124, "invalid file size")
    SEEK_WRITE_FAILED = (1125, "cannot write at the requested position")
    INVALID_EXPANSION = (1126, "invalid expansion size")
    PATH_NOT_FOUND = (1127, "directory does not exist")
    SEEK_READ_FAILED = (1128, "cannot read at the requested position")
    EMPTY_SEARCH_TEXT = (1129, "the search text is empty")

    # Block file errors.
    UNKNOWN_FILE = (1301, "unknown file")
    HEADER_READ_FAILED = (1302, "cannot read the file header")
    NOT_A_BLOCK_FILE = (1303, "not the expected block file")
    NO_TAG_FOUND = (1304, "no tag found")
    EMPTY_BLOCK_NAME = (1305, "the block name is empty")
    EMPTY_PART_NAME = (1306, "the part name is empty")
    EMPTY_STRUCT_NAME = (1307, "the structure name is empty")
    PART_OUT_OF_BOUNDS = (1309, "the part address lies beyond the end of its block")
    NULL_BLOCK_ADDRESS = (1310, "block address is null")
    BLOCK_EXISTS = (1311, "the block already exists")
    BLOCK_NOT_FOUND = (1312, "the block does not exist")
    STRUCT_RANK_OUT_OF_RANGE = (1313, "structure rank beyond the number of structures")
    PART_EXISTS = (1314, "the part already exists")
    PART_NOT_FOUND = (1315, "the part does not exist")
    STRUCT_NOT_FOUND = (1316, "the structure does not exist")


class FileError(Exception):
    """Raised when a file operation fails; carries an :class:`ErrorCode`."""

    def __init__(self, code: ErrorCode | int, detail: str | None = None) -> None:
        self.code = ErrorCode(code)
        self.detail = detail
        message = f"[{int(self.code)}] {self.code.description}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)