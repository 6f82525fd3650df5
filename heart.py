# heart.py
"""
The parametric heart curve particles are emitted from.

The curve is used twice: once at startup to trace the outline of the
particle sprite, and on every spawn to pick an emission point and an
outward direction.
"""
import logging
import math
from typing import Optional, Tuple

import numpy as np

from constants import HEART_TRACE_STEP
from vector import Vector

# --- Data Contracts ---
#
# class HeartCurve:
#   - __init__(self, seed: Optional[int] = None):
#     - Side Effects: Creates a dedicated numpy Generator from the seed.
#
#   - point_on_curve(t: float) -> Vector:
#     - Inputs: t in [-pi, pi].
#     - Invariants: point_on_curve(-pi) == point_on_curve(pi).
#
#   - emission_direction(point: Vector, speed: float) -> Vector:
#     - Outputs: A new vector of length speed pointing away from the
#       curve centre. point is not modified.
#
#   - trace(step: float) -> np.ndarray:
#     - Outputs: Array of shape (M, 2), the closed outline from -pi to pi.


class HeartCurve:
    """
    Samples points and outward directions on the heart curve.
    """
    def __init__(self, seed: Optional[int] = None):
        # All randomness comes from a single seeded generator.
        self.rng = np.random.default_rng(seed)
        logging.debug(f"HeartCurve initialized with seed {seed}.")

    @staticmethod
    def point_on_curve(t: float) -> Vector:
        return Vector(
            160 * math.sin(t) ** 3,
            130 * math.cos(t) - 50 * math.cos(2 * t) - 20 * math.cos(3 * t) - 10 * math.cos(4 * t) + 25,
        )

    def random_emission_point(self) -> Vector:
        """Picks a point on the curve with t uniform in [-pi, pi)."""
        t = self.rng.uniform(-math.pi, math.pi)
        return self.point_on_curve(t)

    @staticmethod
    def emission_direction(point: Vector, speed: float) -> Vector:
        """Radial velocity of magnitude speed, outward from the curve centre."""
        return point.scaled_to_length(speed)

    def random_emission(self, speed: float) -> Tuple[Vector, Vector]:
        """Returns an emission point and its outward velocity."""
        point = self.random_emission_point()
        return point, self.emission_direction(point, speed)

    @staticmethod
    def trace(step: float = HEART_TRACE_STEP) -> np.ndarray:
        """
        Samples the outline from -pi to pi in increments of step.

        The final sample is at pi exactly so the outline closes on its
        starting point.
        """
        t = np.append(np.arange(-np.pi, np.pi, step), np.pi)
        x = 160 * np.sin(t) ** 3
        y = 130 * np.cos(t) - 50 * np.cos(2 * t) - 20 * np.cos(3 * t) - 10 * np.cos(4 * t) + 25
        return np.column_stack((x, y))
