import os

# Pygame must not try to open a real window during tests.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from heart import HeartCurve
from particle import ParticleConfig, ParticlePool


class FakeSprite:
    def __init__(self, size=30):
        self.size = size

    def get_width(self):
        return self.size


class FakeSurface:
    def __init__(self, width=800, height=600):
        self.width = width
        self.height = height
        self.clears = 0
        self.calls = []

    def clear(self):
        self.clears += 1
        self.calls = []

    def draw_sprite(self, sprite, x, y, width, height, opacity):
        self.calls.append((sprite, x, y, width, height, opacity))


class FakeScheduler:
    def __init__(self):
        self.pending = {}
        self.cancelled = []
        self._next = 0

    def schedule_next_frame(self, callback):
        self._next += 1
        self.pending[self._next] = callback
        return self._next

    def cancel(self, token):
        self.cancelled.append(token)
        self.pending.pop(token, None)

    def fire(self, timestamp=None):
        due, self.pending = self.pending, {}
        for callback in due.values():
            callback(timestamp)
        return len(due)


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def sprite():
    return FakeSprite()


@pytest.fixture
def surface():
    return FakeSurface()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config():
    return ParticleConfig(max_particles=500, lifetime=2.0, emission_speed=100.0, deceleration=-0.75, sprite_size=30)


@pytest.fixture
def curve():
    return HeartCurve(seed=1234)


@pytest.fixture
def make_pool():
    def _make(capacity=3, lifetime=1.0, deceleration=-0.75):
        return ParticlePool(ParticleConfig(max_particles=capacity, lifetime=lifetime, deceleration=deceleration))
    return _make
