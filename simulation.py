# simulation.py
"""
Drives the particle effect over time.

This module defines the AnimationDriver, which on every scheduled frame
measures the elapsed time, emits new particles from the heart curve at the
configured rate, advances the pool and asks it to draw. All work runs on a
single cooperative thread: ticks and pointer events are serialized by the
host's event ordering, so the pool needs no locking.
"""
import enum
import logging
import math
import time
from typing import Callable, Hashable, Optional

from constants import LOG_THROTTLE_FRAMES
from heart import HeartCurve
from particle import ParticleConfig, ParticlePool

# --- Data Contracts ---
#
# class AnimationDriver:
#   - __init__(self, pool, curve, surface, scheduler, sprite, config, clock):
#     - Inputs:
#       - pool: ParticlePool to spawn into and advance.
#       - curve: HeartCurve for emission points and directions.
#       - surface: Drawing surface with width, height, clear() and
#         draw_sprite(sprite, x, y, width, height, opacity).
#       - scheduler: Object with schedule_next_frame(callback) -> token and
#         cancel(token). Callbacks receive a timestamp in seconds, or None.
#       - sprite: Opaque sprite handle passed through to the surface.
#       - config: ParticleConfig.
#       - clock: Callable returning seconds; read when a tick carries no
#         timestamp.
#     - Outputs: None
#
#   - tick(self, timestamp: Optional[float] = None) -> None:
#     - Side Effects: Spawns floor(emission_rate * dt) particles, clears the
#       surface, updates and draws the pool, schedules the next tick.
#     - Invariants: The first tick uses dt = 0. No tick runs once stopped.
#
#   - stop(self) -> None:
#     - Side Effects: Cancels the pending tick. Idempotent.


class DriverState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class AnimationDriver:
    """
    Time-stepped loop that keeps the particle pool populated and rendered.
    """
    def __init__(
        self,
        pool: ParticlePool,
        curve: HeartCurve,
        surface,
        scheduler,
        sprite,
        config: ParticleConfig,
        clock: Callable[[], float] = time.monotonic,
        log_throttle_frames: int = LOG_THROTTLE_FRAMES,
    ):
        self.pool = pool
        self.curve = curve
        self.surface = surface
        self.scheduler = scheduler
        self.sprite = sprite
        self.config = config
        self.clock = clock
        self.log_throttle_frames = max(1, log_throttle_frames)

        self.emission_rate = config.emission_rate
        self.state = DriverState.IDLE
        self.frame_count = 0
        self._last_time: Optional[float] = None
        self._pending: Optional[Hashable] = None

        logging.info(
            f"AnimationDriver initialized: emitting {self.emission_rate:.1f} particles/s "
            f"at {config.emission_speed} px/s."
        )

    @property
    def running(self) -> bool:
        return self.state is DriverState.RUNNING

    def start(self) -> None:
        """Schedules the first tick."""
        if self.state is DriverState.STOPPED:
            raise RuntimeError("AnimationDriver cannot be restarted after stop().")
        if self.state is DriverState.RUNNING:
            logging.warning("AnimationDriver.start() called while already running. Ignoring.")
            return
        self.state = DriverState.RUNNING
        self._schedule()
        logging.info("Animation started.")

    def stop(self) -> None:
        """Cancels the pending tick. Further ticks and pointer events are ignored."""
        if self.state is DriverState.STOPPED:
            return
        if self._pending is not None:
            self.scheduler.cancel(self._pending)
            self._pending = None
        self.state = DriverState.STOPPED
        logging.info(f"Animation stopped after {self.frame_count} frames.")

    def _schedule(self) -> None:
        self._pending = self.scheduler.schedule_next_frame(self.tick)

    def _elapsed(self, timestamp: Optional[float]) -> float:
        now = self.clock() if timestamp is None else timestamp
        if self._last_time is None:
            self._last_time = now
            return 0.0
        dt = now - self._last_time
        self._last_time = now
        if dt < 0:
            logging.warning(f"Clock went backwards by {-dt:.4f}s. Using dt = 0.")
            return 0.0
        return dt

    def spawn_count(self, dt: float) -> int:
        """
        Number of particles to emit for a frame of dt seconds.

        Capped at the pool capacity; anything beyond it would only
        overwrite particles spawned in the same frame.
        """
        return min(math.floor(self.emission_rate * dt), self.pool.capacity)

    def emit(self, count: int) -> None:
        """Adds count particles on the heart, centred on the surface."""
        center_x = self.surface.width / 2
        center_y = self.surface.height / 2
        for _ in range(count):
            point, direction = self.curve.random_emission(self.config.emission_speed)
            # The surface's y axis points down.
            self.pool.add(center_x + point.x, center_y - point.y, direction.x, -direction.y)

    def tick(self, timestamp: Optional[float] = None) -> None:
        """
        Advances the effect by one frame.

        Args:
            timestamp (Optional[float]): Frame time in seconds. When None the
                driver reads its own clock.
        """
        if self.state is not DriverState.RUNNING:
            return
        self._pending = None

        dt = self._elapsed(timestamp)
        self.emit(self.spawn_count(dt))

        self.surface.clear()
        self.pool.update(dt)
        self.pool.draw(self.surface, self.sprite)

        self.frame_count += 1
        # Hot loops must throttle logs
        if self.frame_count % self.log_throttle_frames == 0:
            logging.debug(
                f"Frame {self.frame_count} | dt: {dt:.4f}s | "
                f"active particles: {len(self.pool)}/{self.pool.capacity}"
            )

        if self.state is DriverState.RUNNING:
            self._schedule()

    def on_pointer_down(self, x: float, y: float) -> None:
        """Spawns one particle at a click position, outside the emission rate."""
        if self.state is DriverState.STOPPED:
            logging.debug(f"Ignoring pointer event at ({x}, {y}) after stop.")
            return
        _, direction = self.curve.random_emission(self.config.emission_speed)
        self.pool.add(x, y, direction.x, -direction.y)
        logging.debug(f"Pointer burst at ({x}, {y}).")
