"""Unit quaternions for body orientation.

Orientations are stored as Hamilton quaternions (w, x, y, z) that rotate
body-frame vectors into the world frame. The attitude controller relies on
``look_rotation`` to build a target frame and on ``rotate_towards`` to move
toward it by a bounded angle along the shortest arc.

Angles at this module's surface are in degrees.

Typical usage example:
    from aerotrack.physics.quaternion import Quaternion
    from aerotrack.physics.vectors import Vector3

    target = Quaternion.look_rotation(Vector3(0.0, 0.2, 1.0), Vector3.up())
    orientation = orientation.rotate_towards(target, max_degrees=1.5)
"""

import math
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from aerotrack.physics.vectors import Vector3

# Quaternion dot products above this are treated as the same orientation
_PARALLEL_DOT = 0.9999995


@dataclass
class Quaternion:
    """Rotation quaternion.

    Attributes:
        w: Scalar part.
        x: Vector part, X component.
        y: Vector part, Y component.
        z: Vector part, Z component.

    Examples:
        >>> q = Quaternion.from_axis_angle(Vector3.up(), 90.0)
        >>> print(q.rotate(Vector3.forward()))  # forward swings to +X
        Vector3(x=1.00, y=0.00, z=0.00)
    """

    w: float
    x: float
    y: float
    z: float

    @classmethod
    def identity(cls) -> "Quaternion":
        return cls(1.0, 0.0, 0.0, 0.0)

    @classmethod
    def from_axis_angle(cls, axis: Vector3, degrees: float) -> "Quaternion":
        """Create a rotation of ``degrees`` about ``axis`` (right-hand rule).

        A zero-length axis yields the identity rotation.
        """
        if axis.is_zero():
            return cls.identity()
        unit = axis.normalized()
        half = math.radians(degrees) * 0.5
        s = math.sin(half)
        return cls(math.cos(half), unit.x * s, unit.y * s, unit.z * s)

    @classmethod
    def from_to_rotation(cls, from_dir: Vector3, to_dir: Vector3) -> "Quaternion":
        """Shortest-arc rotation taking ``from_dir`` onto ``to_dir``.

        For exactly opposite vectors any perpendicular axis is valid; one is
        picked deterministically.
        """
        a = from_dir.normalized_or(Vector3.forward())
        b = to_dir.normalized_or(Vector3.forward())
        d = a.dot(b)

        if d < -_PARALLEL_DOT:
            axis = Vector3.right().cross(a)
            if axis.is_zero():
                axis = Vector3.up().cross(a)
            return cls.from_axis_angle(axis, 180.0)

        c = a.cross(b)
        return cls(1.0 + d, c.x, c.y, c.z).normalized()

    @classmethod
    def look_rotation(cls, forward: Vector3, up: Vector3 | None = None) -> "Quaternion":
        """Orientation whose forward axis is ``forward`` and whose up is closest to ``up``.

        If ``up`` is parallel to ``forward`` a fallback up is chosen so the
        result is always a valid rotation.

        Args:
            forward: Desired body forward (+Z) direction.
            up: Desired body up (+Y) hint. Defaults to world up.

        Returns:
            Unit quaternion.
        """
        f = forward.normalized_or(Vector3.forward())
        hint = up if up is not None else Vector3.up()

        r = hint.cross(f)
        if r.is_zero():
            # Up hint is parallel to forward; borrow another reference axis
            r = Vector3.forward().cross(f) if abs(f.y) > 0.5 else Vector3.up().cross(f)
            if r.is_zero():
                r = Vector3.right()
        r = r.normalized()
        u = f.cross(r)

        basis = np.column_stack((r.to_array(), u.to_array(), f.to_array()))
        return cls.from_rotation_matrix(basis)

    @classmethod
    def from_rotation_matrix(cls, m: npt.NDArray[np.float64]) -> "Quaternion":
        """Convert a 3x3 rotation matrix to a quaternion (Shepperd's method)."""
        trace = float(np.trace(m))
        if trace > 0.0:
            s = math.sqrt(trace + 1.0) * 2.0
            w = 0.25 * s
            x = (m[2, 1] - m[1, 2]) / s
            y = (m[0, 2] - m[2, 0]) / s
            z = (m[1, 0] - m[0, 1]) / s
        elif m[0, 0] > m[1, 1] and m[0, 0] > m[2, 2]:
            s = math.sqrt(1.0 + m[0, 0] - m[1, 1] - m[2, 2]) * 2.0
            w = (m[2, 1] - m[1, 2]) / s
            x = 0.25 * s
            y = (m[0, 1] + m[1, 0]) / s
            z = (m[0, 2] + m[2, 0]) / s
        elif m[1, 1] > m[2, 2]:
            s = math.sqrt(1.0 + m[1, 1] - m[0, 0] - m[2, 2]) * 2.0
            w = (m[0, 2] - m[2, 0]) / s
            x = (m[0, 1] + m[1, 0]) / s
            y = 0.25 * s
            z = (m[1, 2] + m[2, 1]) / s
        else:
            s = math.sqrt(1.0 + m[2, 2] - m[0, 0] - m[1, 1]) * 2.0
            w = (m[1, 0] - m[0, 1]) / s
            x = (m[0, 2] + m[2, 0]) / s
            y = (m[1, 2] + m[2, 1]) / s
            z = 0.25 * s
        return cls(float(w), float(x), float(y), float(z)).normalized()

    def __mul__(self, other: "Quaternion") -> "Quaternion":
        """Hamilton product: ``(a * b).rotate(v) == a.rotate(b.rotate(v))``."""
        return Quaternion(
            self.w * other.w - self.x * other.x - self.y * other.y - self.z * other.z,
            self.w * other.x + self.x * other.w + self.y * other.z - self.z * other.y,
            self.w * other.y - self.x * other.z + self.y * other.w + self.z * other.x,
            self.w * other.z + self.x * other.y - self.y * other.x + self.z * other.w,
        )

    def norm(self) -> float:
        return math.sqrt(self.w * self.w + self.x * self.x + self.y * self.y + self.z * self.z)

    def normalized(self) -> "Quaternion":
        """Return the unit quaternion; a degenerate quaternion becomes identity."""
        n = self.norm()
        if n < 1e-12:
            return Quaternion.identity()
        return Quaternion(self.w / n, self.x / n, self.y / n, self.z / n)

    def conjugate(self) -> "Quaternion":
        return Quaternion(self.w, -self.x, -self.y, -self.z)

    def inverse(self) -> "Quaternion":
        """Inverse rotation (the conjugate, for unit quaternions)."""
        return self.normalized().conjugate()

    def dot(self, other: "Quaternion") -> float:
        return self.w * other.w + self.x * other.x + self.y * other.y + self.z * other.z

    def rotate(self, v: Vector3) -> Vector3:
        """Rotate a vector from body frame into world frame."""
        qv = Vector3(self.x, self.y, self.z)
        t = qv.cross(v) * 2.0
        return v + t * self.w + qv.cross(t)

    def inverse_rotate(self, v: Vector3) -> Vector3:
        """Rotate a vector from world frame into body frame."""
        return self.conjugate().rotate(v)

    def forward(self) -> Vector3:
        return self.rotate(Vector3.forward())

    def up(self) -> Vector3:
        return self.rotate(Vector3.up())

    def right(self) -> Vector3:
        return self.rotate(Vector3.right())

    def angle_to(self, other: "Quaternion") -> float:
        """Smallest rotation angle between two orientations, in degrees."""
        d = min(1.0, abs(self.normalized().dot(other.normalized())))
        return math.degrees(2.0 * math.acos(d))

    def to_angle_axis(self) -> tuple[float, Vector3]:
        """Decompose into (angle in [0, 180] degrees, unit axis).

        The identity rotation reports axis +X and angle 0.
        """
        q = self.normalized()
        if q.w < 0.0:
            q = Quaternion(-q.w, -q.x, -q.y, -q.z)
        angle = math.degrees(2.0 * math.acos(min(1.0, q.w)))
        s = math.sqrt(max(0.0, 1.0 - q.w * q.w))
        if s < 1e-9:
            return 0.0, Vector3.right()
        return angle, Vector3(q.x / s, q.y / s, q.z / s)

    def slerp(self, other: "Quaternion", t: float) -> "Quaternion":
        """Spherical interpolation along the shortest arc, ``t`` clamped to [0, 1]."""
        t = max(0.0, min(1.0, t))
        a = self.normalized()
        b = other.normalized()
        d = a.dot(b)
        if d < 0.0:
            b = Quaternion(-b.w, -b.x, -b.y, -b.z)
            d = -d

        if d > _PARALLEL_DOT:
            # Nearly identical; linear blend is exact enough
            return Quaternion(
                a.w + (b.w - a.w) * t,
                a.x + (b.x - a.x) * t,
                a.y + (b.y - a.y) * t,
                a.z + (b.z - a.z) * t,
            ).normalized()

        theta = math.acos(d)
        sin_theta = math.sin(theta)
        wa = math.sin((1.0 - t) * theta) / sin_theta
        wb = math.sin(t * theta) / sin_theta
        return Quaternion(
            a.w * wa + b.w * wb,
            a.x * wa + b.x * wb,
            a.y * wa + b.y * wb,
            a.z * wa + b.z * wb,
        ).normalized()

    def rotate_towards(self, target: "Quaternion", max_degrees: float) -> "Quaternion":
        """Rotate toward ``target`` by at most ``max_degrees``.

        Never overshoots; a non-positive step returns the current orientation.

        Args:
            target: Orientation to move toward.
            max_degrees: Largest allowed rotation this call.

        Returns:
            New unit quaternion.
        """
        current = self.normalized()
        if max_degrees <= 0.0:
            return current
        angle = current.angle_to(target)
        if angle <= max_degrees:
            return target.normalized()
        return current.slerp(target, max_degrees / angle)

    def __repr__(self) -> str:
        return f"Quaternion(w={self.w}, x={self.x}, y={self.y}, z={self.z})"
