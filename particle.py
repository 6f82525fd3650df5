# particle.py
"""
Manages the state of all particles in the effect.

This module defines the ParticleConfig record, the Particle slot and the
ParticlePool, a fixed-capacity ring buffer of recycled Particle slots.
Slots are allocated once when the pool is built and are reinitialized in
place on every spawn; nothing is allocated per particle afterwards.
"""
import logging
from dataclasses import dataclass, fields
from itertools import chain
from typing import Any, Dict, Iterable, Iterator

from vector import Vector

# --- Data Contracts ---
#
# class ParticleConfig (frozen):
#   - max_particles: int >= 1, number of slots in the pool.
#   - lifetime: float > 0, seconds a particle stays active.
#   - emission_speed: float >= 0, initial speed in px/s.
#   - deceleration: float <= 0, acceleration as a multiple of the initial
#     velocity.
#   - sprite_size: int >= 1, full-grown sprite size in px.
#
# class ParticlePool:
#   - __init__(self, config: ParticleConfig):
#     - Side Effects: Allocates config.max_particles Particle slots.
#     - Invariants:
#       - 0 <= count <= capacity.
#       - Active slots are first_active, first_active + 1, ... count slots
#         around the ring; first_free == (first_active + count) % capacity.
#       - Active particles are ordered oldest first.
#
#   - add(self, x, y, dx, dy) -> Particle:
#     - Side Effects: Reinitializes the slot at first_free. On a full pool
#       the oldest particle is overwritten (drop-oldest); never blocks,
#       never grows.
#
#   - update(self, dt: float) -> None:
#     - Side Effects: Advances every active particle, then expires particles
#       from the oldest end while age >= lifetime.


def ease_out_cubic(t: float) -> float:
    """Cubic ease-out: 0 at t=0, 1 at t=1, fast early growth."""
    t -= 1.0
    return t * t * t + 1.0


@dataclass(frozen=True)
class ParticleConfig:
    """
    Immutable tuning values for the particle engine.
    """
    max_particles: int = 500
    lifetime: float = 2.0
    emission_speed: float = 100.0
    deceleration: float = -0.75
    sprite_size: int = 30

    def __post_init__(self):
        problems = []
        # bool is an int subclass, and a float count cannot size the pool.
        for name in ("max_particles", "sprite_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                problems.append(f"{name} must be an integer (got {value!r})")
        for name in ("lifetime", "emission_speed", "deceleration"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                problems.append(f"{name} must be a number (got {value!r})")
        if problems:
            self._fail(problems)

        if self.max_particles < 1:
            problems.append(f"max_particles must be at least 1 (got {self.max_particles})")
        if self.lifetime <= 0:
            problems.append(f"lifetime must be positive (got {self.lifetime})")
        if self.emission_speed < 0:
            problems.append(f"emission_speed must not be negative (got {self.emission_speed})")
        if self.deceleration > 0:
            problems.append(f"deceleration must not be positive (got {self.deceleration})")
        if self.sprite_size < 1:
            problems.append(f"sprite_size must be at least 1 (got {self.sprite_size})")
        if problems:
            self._fail(problems)

    @staticmethod
    def _fail(problems) -> None:
        msg = "Configuration error: " + "; ".join(problems) + "."
        logging.critical(msg)
        raise ValueError(msg)

    @property
    def emission_rate(self) -> float:
        """Particles per second that keep the pool near capacity at equilibrium."""
        return self.max_particles / self.lifetime

    @classmethod
    def from_dict(cls, params: Dict[str, Any]) -> "ParticleConfig":
        """
        Builds a config from the `particles` section of config.json.

        Missing keys keep their defaults. Unknown keys are ignored with a
        warning so that typos do not pass silently.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(params) - known)
        if unknown:
            logging.warning(f"Ignoring unknown particle settings: {', '.join(unknown)}.")
        config = cls(**{key: value for key, value in params.items() if key in known})
        logging.info(
            f"Particle config: {config.max_particles} particles, "
            f"{config.lifetime}s lifetime, {config.emission_rate:.1f} particles/s."
        )
        return config


class Particle:
    """
    A single recycled particle slot.
    """
    def __init__(self, deceleration: float):
        self.deceleration = deceleration
        self.position = Vector()
        self.velocity = Vector()
        self.acceleration = Vector()
        self.age = 0.0

    def initialize(self, x: float, y: float, dx: float, dy: float) -> None:
        """Overwrites all state; used for the first spawn and every recycle."""
        self.position.x = x
        self.position.y = y
        self.velocity.x = dx
        self.velocity.y = dy
        # Fixed at spawn, not recomputed from the current velocity.
        self.acceleration.x = dx * self.deceleration
        self.acceleration.y = dy * self.deceleration
        self.age = 0.0

    def update(self, dt: float) -> None:
        """
        Semi-implicit Euler step. The position advances with the velocity
        from before this step's acceleration is applied.
        """
        self.position.x += self.velocity.x * dt
        self.position.y += self.velocity.y * dt
        self.velocity.x += self.acceleration.x * dt
        self.velocity.y += self.acceleration.y * dt
        self.age += dt

    def is_expired(self, lifetime: float) -> bool:
        return self.age >= lifetime

    def draw(self, surface, sprite, lifetime: float, base_size: float) -> None:
        """
        Draws the sprite centred on the particle, growing along an ease-out
        curve towards base_size and fading linearly over the lifetime.
        """
        u = min(self.age / lifetime, 1.0)
        size = base_size * ease_out_cubic(u)
        surface.draw_sprite(
            sprite,
            self.position.x - size / 2,
            self.position.y - size / 2,
            size,
            size,
            1.0 - u,
        )


class ParticlePool:
    """
    A fixed-capacity ring buffer of particles with drop-oldest overwrite.

    An explicit count distinguishes a full ring from an empty one, since
    both have first_active == first_free.
    """
    def __init__(self, config: ParticleConfig):
        """
        Allocates every particle slot up front.

        Args:
            config (ParticleConfig): Engine tuning values.
        """
        self.capacity = config.max_particles
        self.lifetime = config.lifetime
        self.sprite_size = config.sprite_size
        self.particles = [Particle(config.deceleration) for _ in range(self.capacity)]
        self.first_active = 0
        self.first_free = 0
        self.count = 0

        logging.info(f"ParticlePool initialized with {self.capacity} slots.")

    def __len__(self) -> int:
        return self.count

    def is_empty(self) -> bool:
        return self.count == 0

    def is_full(self) -> bool:
        return self.count == self.capacity

    def add(self, x: float, y: float, dx: float, dy: float) -> Particle:
        """
        Spawns a particle in the next free slot, overwriting the oldest
        particle when the pool is full.

        Returns:
            Particle: The slot that was (re)initialized.
        """
        particle = self.particles[self.first_free]
        particle.initialize(x, y, dx, dy)

        self.first_free = (self.first_free + 1) % self.capacity
        if self.count == self.capacity:
            self.first_active = (self.first_active + 1) % self.capacity
        else:
            self.count += 1
        return particle

    def _active_indices(self) -> Iterable[int]:
        """Active slot indices, oldest first, as one or two linear ranges."""
        end = self.first_active + self.count
        if end <= self.capacity:
            return range(self.first_active, end)
        return chain(range(self.first_active, self.capacity), range(0, end - self.capacity))

    def active(self) -> Iterator[Particle]:
        """Iterates over the active particles, oldest first."""
        for i in self._active_indices():
            yield self.particles[i]

    def update(self, dt: float) -> None:
        """
        Advances every active particle by dt seconds and retires the ones
        that have outlived the configured lifetime.
        """
        for i in self._active_indices():
            self.particles[i].update(dt)

        # Spawn order is age order, so expired particles sit at the front.
        while self.count > 0 and self.particles[self.first_active].is_expired(self.lifetime):
            self.first_active = (self.first_active + 1) % self.capacity
            self.count -= 1

    def draw(self, surface, sprite) -> None:
        """Draws active particles oldest first, so newer ones end up on top."""
        for i in self._active_indices():
            self.particles[i].draw(surface, sprite, self.lifetime, self.sprite_size)
