"""Immutable 2D vector used for positions, velocities and forces."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True)
class Vector2D:
    """Value-type 2D vector. Every operator returns a new instance."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: "Vector2D") -> "Vector2D":
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2D") -> "Vector2D":
        return Vector2D(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Vector2D":
        return Vector2D(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "Vector2D":
        return Vector2D(self.x / scalar, self.y / scalar)

    def __neg__(self) -> "Vector2D":
        return Vector2D(-self.x, -self.y)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y)

    @property
    def magnitude_squared(self) -> float:
        return self.x * self.x + self.y * self.y

    @property
    def normalized(self) -> "Vector2D":
        """Unit vector in the same direction; the zero vector maps to itself."""

        mag = self.magnitude
        if mag > 0.0:
            return Vector2D(self.x / mag, self.y / mag)
        return Vector2D(0.0, 0.0)

    def dot(self, other: "Vector2D") -> float:
        return self.x * other.x + self.y * other.y

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)

    @staticmethod
    def distance(a: "Vector2D", b: "Vector2D") -> float:
        return (a - b).magnitude

    @staticmethod
    def distance_squared(a: "Vector2D", b: "Vector2D") -> float:
        return (a - b).magnitude_squared

    @classmethod
    def from_polar(cls, radius: float, angle: float) -> "Vector2D":
        return cls(radius * math.cos(angle), radius * math.sin(angle))

    def __str__(self) -> str:
        return f"({self.x:.2f}, {self.y:.2f})"


__all__ = ["Vector2D"]
