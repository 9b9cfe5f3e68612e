"""An ordered list of strings with search, replace, split and join helpers."""

from __future__ import annotations

from collections.abc import Iterable, Iterator


class StringList:
    """Ordered collection of strings."""

    def __init__(self, items: Iterable[str] | None = None) -> None:
        self._items: list[str] = list(items) if items is not None else []

    def extend(self, items: Iterable[str]) -> None:
        """Append every string of ``items`` in order."""
        self._items.extend(items)

    def __contains__(self, value: object) -> bool:
        return value in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"StringList({self._items!r})"

    def index_of(self, value: str) -> int:
        """Return the position of the first ``value``; raise ValueError if absent."""
        try:
            return self._items.index(value)
        except ValueError:
            raise ValueError(f"{value!r} is not in the list") from None

    def remove(self, value: str) -> None:
        """Remove the first occurrence of ``value``; do nothing if it is absent."""
        try:
            self._items.remove(value)
        except ValueError:
            pass

    def replace(self, old: str, new: str) -> None:
        """Replace every occurrence of ``old`` by ``new`` in every string."""
        if not old:
            raise ValueError("the text to replace must not be empty")
        self._items = [item.replace(old, new) for item in self._items]

    def split(self, text: str, separator: str) -> None:
        """Append the pieces of ``text`` cut at each ``separator``.

        An empty ``text`` adds nothing.
        """
        if not separator:
            raise ValueError("the separator must not be empty")
        if text:
            self._items.extend(text.split(separator))

    def join(self, separator: str = " ") -> str:
        """Return the strings joined by ``separator`` (a space by default)."""
        return separator.join(self._items)

    def clear(self) -> None:
        """Remove every string."""
        self._items.clear()