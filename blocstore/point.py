"""A mutable two-dimensional point."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Point:
    """A point with floating-point coordinates, at the origin by default."""

    x: float = 0.0
    y: float = 0.0

    def set(self, x: float, y: float) -> None:
        """Move the point to the given coordinates."""
        self.x = float(x)
        self.y = float(y)

    def set_from(self, other: "Point") -> None:
        """Copy the coordinates of another point."""
        self.x = other.x
        self.y = other.y

    def reset(self) -> None:
        """Move the point back to the origin."""
        self.x = 0.0
        self.y = 0.0

    def as_tuple(self) -> tuple[float, float]:
        """Return the coordinates as ``(x, y)``."""
        return (self.x, self.y)