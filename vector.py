# vector.py
"""
Two-dimensional vector maths for particle kinematics.

Vectors here are small mutable records. Particles own their vectors and
rewrite them in place every time a slot is recycled, so the in-place
operations are confined to that single owner; everything that crosses an
ownership boundary goes through the pure variants (`clone`,
`scaled_to_length`).
"""
import math
from dataclasses import dataclass

# --- Data Contracts ---
#
# class Vector:
#   - length(self) -> float:
#     - Outputs: Euclidean magnitude sqrt(x^2 + y^2).
#
#   - scale_to_length(self, target: float) -> Vector:
#     - Side Effects: Rescales x and y in place.
#     - Outputs: self, for chaining.
#     - Invariants: self.length() == abs(target) within float tolerance.
#     - Raises: DegenerateVectorError if the magnitude is zero. The vector
#       is left unchanged in that case.


class DegenerateVectorError(ValueError):
    """Raised when a zero-length vector has no direction to rescale."""


@dataclass
class Vector:
    """A 2D point or displacement."""
    x: float = 0.0
    y: float = 0.0

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y)

    def clone(self) -> "Vector":
        return Vector(self.x, self.y)

    def scale_to_length(self, target: float) -> "Vector":
        """
        Normalizes this vector and multiplies it by target, in place.

        Returns:
            Vector: self, so calls can be chained.

        Raises:
            DegenerateVectorError: If the vector has zero length.
        """
        magnitude = self.length()
        if magnitude == 0.0:
            raise DegenerateVectorError(
                f"Cannot scale zero-length vector ({self.x}, {self.y}) to length {target}."
            )
        self.x = self.x / magnitude * target
        self.y = self.y / magnitude * target
        return self

    def scaled_to_length(self, target: float) -> "Vector":
        """Pure counterpart of scale_to_length; the receiver is not modified."""
        return self.clone().scale_to_length(target)
