"""Vector mathematics for the flight model and pointer mapping.

This module provides the 3D vectors used for positions, velocities and
forces, and the 2D vectors used for screen-space cursor positions.

World convention: +Y is up. Body convention: forward is +Z, up is +Y and
right is +X (right = up x forward).

Typical usage example:
    from aerotrack.physics.vectors import Vector3

    velocity = Vector3(0.0, 0.0, 80.0)
    position = position + velocity * dt
"""

import math
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

# Below this squared length a vector is treated as having no direction
EPSILON_SQUARED = 1e-12


@dataclass
class Vector3:
    """3D vector with common operations.

    Attributes:
        x: X component (body right).
        y: Y component (altitude, up-down).
        z: Z component (body forward).

    Examples:
        >>> v = Vector3(0.0, 0.0, 80.0) + Vector3.up() * 5.0
        >>> print(v)
        Vector3(x=0.00, y=5.00, z=80.00)
    """

    x: float
    y: float
    z: float

    def __add__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> "Vector3":
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    def __rmul__(self, scalar: float) -> "Vector3":
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> "Vector3":
        """Divide vector by scalar.

        Raises:
            ZeroDivisionError: If scalar is zero.
        """
        if scalar == 0:
            raise ZeroDivisionError("Cannot divide vector by zero")
        return Vector3(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> "Vector3":
        return Vector3(-self.x, -self.y, -self.z)

    def magnitude(self) -> float:
        """Calculate the length of the vector.

        Examples:
            >>> Vector3(3.0, 4.0, 0.0).magnitude()
            5.0
        """
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def magnitude_squared(self) -> float:
        """Calculate the squared length (no sqrt)."""
        return self.x * self.x + self.y * self.y + self.z * self.z

    def is_zero(self) -> bool:
        """Check whether the vector is too short to carry a direction."""
        return self.magnitude_squared() < EPSILON_SQUARED

    def normalized(self) -> "Vector3":
        """Return a unit vector in the same direction.

        Raises:
            ValueError: If magnitude is zero.
        """
        mag = self.magnitude()
        if mag == 0:
            raise ValueError("Cannot normalize zero vector")
        return self / mag

    def normalized_or(self, fallback: "Vector3") -> "Vector3":
        """Return a unit vector, or ``fallback`` when the vector has no direction.

        Used in the per-tick path, where raising is not an option.

        Args:
            fallback: Vector returned for (near) zero-length input.

        Returns:
            Normalized vector or the fallback.
        """
        if self.is_zero():
            return fallback
        return self / self.magnitude()

    def dot(self, other: "Vector3") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: "Vector3") -> "Vector3":
        """Calculate cross product with another vector.

        Examples:
            >>> Vector3.up().cross(Vector3.forward())
            Vector3(x=1.0, y=0.0, z=0.0)
        """
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def angle_to(self, other: "Vector3") -> float:
        """Unsigned angle between two vectors in degrees.

        Returns 0.0 if either vector has no direction.
        """
        denom = math.sqrt(self.magnitude_squared() * other.magnitude_squared())
        if denom < EPSILON_SQUARED:
            return 0.0
        cos_angle = max(-1.0, min(1.0, self.dot(other) / denom))
        return math.degrees(math.acos(cos_angle))

    def project_on_plane(self, normal: "Vector3") -> "Vector3":
        """Remove the component along ``normal`` (assumed unit length)."""
        return self - normal * self.dot(normal)

    def lerp(self, other: "Vector3", t: float) -> "Vector3":
        """Linear interpolation between this vector and another."""
        return self + (other - self) * t

    def to_array(self) -> npt.NDArray[np.float64]:
        """Convert to numpy array [x, y, z]."""
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    @classmethod
    def zero(cls) -> "Vector3":
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def right(cls) -> "Vector3":
        """Body right axis (1, 0, 0)."""
        return cls(1.0, 0.0, 0.0)

    @classmethod
    def up(cls) -> "Vector3":
        """World and body up axis (0, 1, 0)."""
        return cls(0.0, 1.0, 0.0)

    @classmethod
    def forward(cls) -> "Vector3":
        """Body forward axis (0, 0, 1)."""
        return cls(0.0, 0.0, 1.0)

    def __str__(self) -> str:
        return f"Vector3(x={self.x:.2f}, y={self.y:.2f}, z={self.z:.2f})"

    def __repr__(self) -> str:
        return f"Vector3(x={self.x}, y={self.y}, z={self.z})"


@dataclass
class Vector2:
    """2D screen-space vector.

    Screen coordinates follow pygame: x grows to the right, y grows downward.

    Attributes:
        x: Horizontal component (pixels).
        y: Vertical component (pixels, downward).
    """

    x: float
    y: float

    def __add__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Vector2":
        return Vector2(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: float) -> "Vector2":
        return self.__mul__(scalar)

    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    def distance_to(self, other: "Vector2") -> float:
        return (self - other).magnitude()

    def clamp_magnitude(self, max_length: float) -> "Vector2":
        """Scale the vector down so its length does not exceed ``max_length``."""
        mag = self.magnitude()
        if mag <= max_length or mag == 0.0:
            return Vector2(self.x, self.y)
        return self * (max_length / mag)

    def move_towards(self, target: "Vector2", max_step: float) -> "Vector2":
        """Move toward ``target`` by at most ``max_step`` without overshooting.

        Examples:
            >>> Vector2(10.0, 0.0).move_towards(Vector2(0.0, 0.0), 4.0)
            Vector2(x=6.0, y=0.0)
        """
        delta = target - self
        distance = delta.magnitude()
        if distance <= max_step or distance == 0.0:
            return Vector2(target.x, target.y)
        return self + delta * (max_step / distance)

    @classmethod
    def zero(cls) -> "Vector2":
        return cls(0.0, 0.0)

    def __repr__(self) -> str:
        return f"Vector2(x={self.x}, y={self.y})"
