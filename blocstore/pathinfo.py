"""Splitting and building file paths as directory, name and extension."""

from __future__ import annotations

from dataclasses import dataclass, replace

_SEPARATORS = "/\\"


def _strip_trailing_separator(directory: str) -> str:
    if directory and directory[-1] in _SEPARATORS:
        return directory[:-1]
    return directory


def _split_extension(name: str) -> tuple[str, str | None]:
    stem, dot, extension = name.rpartition(".")
    if not dot:
        return name, None
    return stem, extension


@dataclass(frozen=True)
class FileName:
    """A file described by its directory, base name and extension."""

    directory: str = ""
    name: str = ""
    extension: str = ""

    def full_path(self) -> str:
        """Return ``directory/name.extension``; the dot is left out with no extension."""
        if not self.name:
            return f"{self.directory}/"
        path = f"{self.directory}/{self.name}"
        if self.extension:
            path = f"{path}.{self.extension}"
        return path

    def with_directory(self, directory: str) -> "FileName":
        """Return a copy in another directory."""
        return replace(self, directory=_strip_trailing_separator(directory))

    def with_name(self, name: str) -> "FileName":
        """Return a copy with another base name."""
        return replace(self, name=name)

    def with_extension(self, extension: str) -> "FileName":
        """Return a copy with another extension."""
        return replace(self, extension=extension)


def describe(directory: str, name: str, extension: str = "") -> FileName:
    """Build a :class:`FileName`.

    One trailing separator is dropped from ``directory``. When ``name`` holds a
    dot, the text after the last dot is the extension and ``extension`` is
    ignored.
    """
    directory = _strip_trailing_separator(directory)
    stem, found = _split_extension(name)
    if found is not None:
        return FileName(directory, stem, found)
    return FileName(directory, name, extension)


def describe_full(path: str) -> FileName:
    """Split a full path at its last separator and its name at the last dot."""
    position = max(path.rfind("/"), path.rfind("\\"))
    if position < 0:
        raise ValueError(f"path {path!r} has no directory separator")
    stem, found = _split_extension(path[position + 1:])
    return FileName(path[:position], stem, found or "")