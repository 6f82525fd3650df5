import pytest

from particle import Particle, ParticleConfig, ease_out_cubic
from vector import Vector


def test_initialize_sets_acceleration_from_velocity():
    p = Particle(deceleration=-0.75)
    p.initialize(10.0, 20.0, 4.0, -8.0)
    assert p.position == Vector(10.0, 20.0)
    assert p.velocity == Vector(4.0, -8.0)
    assert p.acceleration == Vector(-3.0, 6.0)
    assert p.age == 0.0


def test_initialize_fully_overwrites_recycled_slot():
    p = Particle(deceleration=-0.5)
    p.initialize(1.0, 1.0, 10.0, 10.0)
    p.update(0.7)
    p.initialize(0.0, 0.0, 2.0, 0.0)
    assert p.position == Vector(0.0, 0.0)
    assert p.velocity == Vector(2.0, 0.0)
    assert p.acceleration == Vector(-1.0, 0.0)
    assert p.age == 0.0


def test_update_with_zero_dt_changes_nothing():
    p = Particle(deceleration=-0.75)
    p.initialize(5.0, 6.0, 7.0, 8.0)
    p.update(0.0)
    assert p.position == Vector(5.0, 6.0)
    assert p.velocity == Vector(7.0, 8.0)
    assert p.age == 0.0


def test_straight_line_motion_without_acceleration():
    p = Particle(deceleration=0.0)
    p.initialize(1.0, 2.0, 3.0, -4.0)
    p.update(0.5)
    assert p.position == Vector(1.0 + 3.0 * 0.5, 2.0 - 4.0 * 0.5)
    assert p.velocity == Vector(3.0, -4.0)


def test_position_uses_velocity_from_before_the_step():
    p = Particle(deceleration=-1.0)
    p.initialize(0.0, 0.0, 10.0, 0.0)
    p.update(0.5)
    # Position moves with the old velocity of 10, velocity then drops to 5.
    assert p.position.x == pytest.approx(5.0)
    assert p.velocity.x == pytest.approx(5.0)
    p.update(0.5)
    assert p.position.x == pytest.approx(7.5)
    assert p.velocity.x == pytest.approx(0.0)


def test_acceleration_is_constant_after_spawn():
    p = Particle(deceleration=-0.75)
    p.initialize(0.0, 0.0, 100.0, 0.0)
    for _ in range(5):
        p.update(0.1)
    assert p.acceleration == Vector(-75.0, 0.0)


def test_age_strictly_increases():
    p = Particle(deceleration=-0.75)
    p.initialize(0.0, 0.0, 1.0, 1.0)
    ages = []
    for _ in range(4):
        p.update(0.25)
        ages.append(p.age)
    assert ages == sorted(set(ages))
    assert p.is_expired(1.0)
    assert not p.is_expired(1.5)


@pytest.mark.parametrize("t, expected", [(0.0, 0.0), (1.0, 1.0), (0.5, 0.875)])
def test_ease_out_cubic(t, expected):
    assert ease_out_cubic(t) == pytest.approx(expected)


def test_ease_out_cubic_is_monotonic():
    values = [ease_out_cubic(i / 20) for i in range(21)]
    assert values == sorted(values)


def test_draw_grows_and_fades(surface, sprite):
    p = Particle(deceleration=-0.75)
    p.initialize(100.0, 50.0, 0.0, 0.0)
    p.age = 1.0
    p.draw(surface, sprite, lifetime=2.0, base_size=30)

    drawn_sprite, x, y, width, height, opacity = surface.calls[0]
    size = 30 * 0.875
    assert drawn_sprite is sprite
    assert (width, height) == pytest.approx((size, size))
    assert (x, y) == pytest.approx((100.0 - size / 2, 50.0 - size / 2))
    assert opacity == pytest.approx(0.5)


def test_draw_at_birth_is_invisible_point(surface, sprite):
    p = Particle(deceleration=-0.75)
    p.initialize(10.0, 10.0, 1.0, 1.0)
    p.draw(surface, sprite, lifetime=2.0, base_size=30)
    _, x, y, width, height, opacity = surface.calls[0]
    assert width == 0.0
    assert opacity == 1.0
    assert (x, y) == (10.0, 10.0)


class TestParticleConfig:
    def test_defaults(self):
        config = ParticleConfig()
        assert config.max_particles == 500
        assert config.lifetime == 2.0
        assert config.emission_speed == 100.0
        assert config.deceleration == -0.75
        assert config.sprite_size == 30

    def test_emission_rate(self):
        assert ParticleConfig(max_particles=500, lifetime=2).emission_rate == 250.0

    def test_is_immutable(self):
        config = ParticleConfig()
        with pytest.raises(AttributeError):
            config.max_particles = 10

    @pytest.mark.parametrize("field, value", [
        ("max_particles", 0),
        ("lifetime", 0.0),
        ("lifetime", -1.0),
        ("emission_speed", -5.0),
        ("deceleration", 0.5),
        ("sprite_size", 0),
        ("max_particles", 500.5),
        ("max_particles", 500.0),
        ("max_particles", True),
        ("sprite_size", 30.0),
        ("lifetime", "2"),
        ("deceleration", False),
    ])
    def test_rejects_invalid_values(self, field, value):
        with pytest.raises(ValueError, match=field):
            ParticleConfig(**{field: value})

    def test_from_dict_uses_defaults_for_missing_keys(self):
        config = ParticleConfig.from_dict({"max_particles": 10, "lifetime": 0.5})
        assert config.max_particles == 10
        assert config.lifetime == 0.5
        assert config.emission_speed == 100.0

    def test_from_dict_ignores_unknown_keys(self, caplog):
        config = ParticleConfig.from_dict({"max_particles": 10, "colour": "pink"})
        assert config.max_particles == 10
        assert "colour" in caplog.text

    def test_from_dict_rejects_float_count_before_pool_is_built(self, caplog):
        with pytest.raises(ValueError, match="max_particles must be an integer"):
            ParticleConfig.from_dict({"max_particles": 500.0})
        assert "Configuration error" in caplog.text


def test_draw_size_comes_from_base_size_not_sprite(surface):
    p = Particle(deceleration=-0.75)
    p.initialize(0.0, 0.0, 0.0, 0.0)
    p.age = 2.0
    p.draw(surface, sprite=object(), lifetime=2.0, base_size=12)
    _, _, _, width, height, opacity = surface.calls[0]
    assert (width, height) == (12.0, 12.0)
    assert opacity == 0.0
