import math
from dataclasses import replace

import numpy as np
import pytest

from blackhole_sim.core.config import ENGINE_CFG
from blackhole_sim.core.engine import SimulationEngine
from blackhole_sim.core.vector import Vector2D


WIDTH, HEIGHT = 1000, 800
QUIET_CFG = replace(ENGINE_CFG, spawn_probability=0.0)


def make_engine(cfg=ENGINE_CFG, seed=1234, **kwargs):
    return SimulationEngine(WIDTH, HEIGHT, cfg=cfg, rng=np.random.default_rng(seed), **kwargs)


def test_constructor_centers_body_and_seeds_quarter_of_cap():
    engine = make_engine()
    body = engine.central_body
    assert body.position == Vector2D(500.0, 400.0)
    assert body.mass == ENGINE_CFG.reference_mass
    assert engine.max_particles == 200
    assert engine.particle_count == 50
    assert not engine.is_running
    assert engine.time_acceleration == 1.0
    assert engine.spawn_bounds == (WIDTH, HEIGHT)


def test_seeded_particles_are_in_spawn_annulus():
    engine = make_engine()
    body = engine.central_body
    inner = 2 * body.event_horizon_radius
    outer = inner + 0.4 * min(WIDTH, HEIGHT)
    for particle in engine.get_alive_particles():
        distance = Vector2D.distance(particle.position, body.position)
        assert inner <= distance < outer
        assert 2 <= particle.size < 6
        assert 10.0 <= particle.max_life_time < 30.0
        assert 1e19 <= particle.mass < 1.1e20
        assert particle.color in ENGINE_CFG.palette


@pytest.mark.parametrize("value, expected", [(-5, 0.1), (50, 10.0), (2.5, 2.5), (0.1, 0.1)])
def test_set_time_acceleration_clamps(value, expected):
    engine = make_engine()
    engine.set_time_acceleration(value)
    assert engine.time_acceleration == pytest.approx(expected)


@pytest.mark.parametrize("value, expected", [(0, 10), (5000, 1000), (300, 300)])
def test_set_max_particles_clamps(value, expected):
    engine = make_engine()
    engine.set_max_particles(value)
    assert engine.max_particles == expected


def test_lowering_cap_does_not_evict():
    engine = make_engine()
    engine.set_max_particles(10)
    assert engine.particle_count == 50
    assert engine.add_particle(Vector2D(10.0, 10.0), Vector2D(0.0, 0.0)) is None
    assert engine.spawn_orbiting_particle() is None
    assert len(engine) == 50


def test_insertions_never_exceed_cap():
    engine = make_engine()
    engine.clear_particles()
    engine.set_max_particles(10)
    for _ in range(15):
        engine.add_particle(Vector2D(10.0, 10.0), Vector2D(0.0, 0.0))
    for _ in range(15):
        engine.spawn_orbiting_particle(WIDTH, HEIGHT)
    assert len(engine) == 10
    assert engine.spawn_orbiting_particles(5) == 0


def test_orbiting_spawn_speed_and_tangent_velocity():
    engine = make_engine(seed=7)
    engine.clear_particles()
    particle = engine.spawn_orbiting_particle(WIDTH, HEIGHT)
    assert particle is not None

    body = engine.central_body
    radius = particle.position - body.position
    distance = radius.magnitude
    speed = particle.velocity.magnitude
    base = math.sqrt(ENGINE_CFG.gravitational_constant * 5.972e24 / distance) * 0.7
    assert 0.8 * base <= speed <= 1.2 * base
    assert abs(particle.velocity.dot(radius)) <= 1e-9 * speed * distance


def test_orbiting_spawn_defaults_to_spawn_bounds():
    engine = make_engine()
    engine.clear_particles()
    engine.set_spawn_bounds(100, 50)
    body = engine.central_body
    inner = 2 * body.event_horizon_radius
    for _ in range(20):
        particle = engine.spawn_orbiting_particle()
        distance = Vector2D.distance(particle.position, body.position)
        assert inner <= distance < inner + 0.4 * 50


def test_update_is_noop_when_stopped():
    engine = make_engine()
    before = [(p.position, p.velocity, p.life_time) for p in engine.get_alive_particles()]
    engine.update(0.5)
    after = [(p.position, p.velocity, p.life_time) for p in engine.get_alive_particles()]
    assert before == after
    assert engine.central_body.rotation_angle == 0.0
    assert engine.particle_count == 50
    assert engine.sim_time == 0.0


def test_update_scales_time_and_spins_body():
    engine = make_engine(cfg=QUIET_CFG)
    engine.set_time_acceleration(2.0)
    engine.start()
    engine.update(0.1)
    assert engine.central_body.rotation_angle == pytest.approx(0.4)
    assert engine.sim_time == pytest.approx(0.2)


def test_update_removes_absorbed_particles():
    events = []
    engine = make_engine(cfg=QUIET_CFG, on_event=events.append)
    engine.clear_particles()
    body = engine.central_body
    doomed = engine.add_particle(body.position + Vector2D(1.0, 0.0), Vector2D(0.0, 0.0))
    engine.start()
    engine.update(0.01)
    assert engine.particle_count == 0
    assert doomed.life_time == 0.0
    assert engine.stats.absorbed == 1
    assert [e.kind for e in events][-1] == "absorbed"
    assert list(engine.get_alive_particles()) == []


def test_update_removes_expired_particles():
    engine = make_engine(cfg=QUIET_CFG)
    engine.clear_particles()
    body = engine.central_body
    particle = engine.add_particle(body.position + Vector2D(300.0, 0.0), Vector2D(0.0, 0.0))
    particle.life_time = 0.05
    engine.start()
    engine.update(0.1)
    assert len(engine) == 0
    assert engine.stats.expired == 1
    assert engine.stats.absorbed == 0


def test_update_replenishes_when_spawn_always_fires():
    engine = make_engine(cfg=replace(ENGINE_CFG, spawn_probability=1.0))
    engine.clear_particles()
    engine.start()
    engine.update(0.01)
    assert len(engine) == 1


def test_update_never_spawns_at_capacity():
    engine = make_engine(cfg=replace(ENGINE_CFG, spawn_probability=1.0, default_max_particles=40))
    engine.set_max_particles(10)
    engine.start()
    count = len(engine)
    engine.update(0.001)
    assert len(engine) <= count


def test_seeded_engines_are_reproducible():
    a = make_engine(seed=99)
    b = make_engine(seed=99)
    for engine in (a, b):
        engine.start()
        for _ in range(20):
            engine.update(1 / 60)
    assert [p.position for p in a.get_alive_particles()] == [p.position for p in b.get_alive_particles()]


def test_reset_clears_and_stops():
    engine = make_engine()
    engine.set_time_acceleration(5.0)
    engine.start()
    engine.update(0.1)
    body = engine.central_body
    engine.reset()
    assert len(engine) == 0
    assert engine.time_acceleration == 1.0
    assert not engine.is_running
    assert engine.central_body is body
    assert engine.stats.spawned == 0
    assert engine.sim_time == 0.0


def test_clear_particles_keeps_run_state():
    engine = make_engine()
    engine.set_time_acceleration(3.0)
    engine.start()
    engine.clear_particles()
    assert engine.particle_count == 0
    assert engine.is_running
    assert engine.time_acceleration == 3.0


def test_start_stop_toggle():
    engine = make_engine()
    engine.start()
    assert engine.is_running
    engine.stop()
    assert not engine.is_running
    assert engine.toggle() is True
    assert engine.toggle() is False


def test_alive_particles_is_lazy_and_restartable():
    engine = make_engine()
    first = engine.get_alive_particles()
    assert not isinstance(first, list)
    assert len(list(first)) == 50
    assert len(list(engine.get_alive_particles())) == 50


def test_alive_particles_view_can_be_iterated_twice():
    engine = make_engine()
    alive = engine.get_alive_particles()
    assert len(list(alive)) == 50
    assert len(list(alive)) == 50
    assert len(alive) == 50

    engine.start()
    engine.update(0.016)
    assert len(list(alive)) == engine.particle_count
    engine.clear_particles()
    assert list(alive) == []


def test_spawn_events_reported():
    events = []
    engine = make_engine(on_event=events.append)
    assert len(events) == 50
    assert {e.kind for e in events} == {"spawned"}
    assert engine.stats.spawned == 50
