"""Simulation engine: owns the central body and the particle population."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Iterator

import numpy as np

from .config import ENGINE_CFG, Color, EngineCfg
from .model import CentralBody, Particle
from .physics import clamp, orbital_speed
from .vector import Vector2D


logger = logging.getLogger(__name__)


@dataclass
class EngineStats:
    """Cumulative particle transitions since construction or the last reset."""

    spawned: int = 0
    absorbed: int = 0
    expired: int = 0

    def clear(self) -> None:
        self.spawned = 0
        self.absorbed = 0
        self.expired = 0


@dataclass(frozen=True)
class ParticleEvent:
    time: float
    kind: str  # "spawned" | "absorbed" | "expired"
    position: Vector2D
    particle: Particle


EventCallback = Callable[[ParticleEvent], None]


class AliveParticles:
    """Re-iterable view over an engine's living particles.

    Each pass filters the engine's current collection, so the same view can
    be iterated again after further updates.
    """

    def __init__(self, engine: SimulationEngine) -> None:
        self._engine = engine

    def __iter__(self) -> Iterator[Particle]:
        return (p for p in self._engine._particles if p.is_alive)

    def __len__(self) -> int:
        return self._engine.particle_count


class SimulationEngine:
    """Fixed-ruleset update loop over a bounded particle population.

    The engine never raises on bad input: rates and caps are clamped and
    insertions beyond the cap are dropped.
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        cfg: EngineCfg = ENGINE_CFG,
        rng: np.random.Generator | None = None,
        on_event: EventCallback | None = None,
    ) -> None:
        self._cfg = cfg
        self._rng = rng if rng is not None else np.random.default_rng()
        self._on_event = on_event
        self._particles: list[Particle] = []
        self._time_acceleration = cfg.default_time_acceleration
        self._max_particles = cfg.default_max_particles
        self._running = False
        self._spawn_bounds = (int(width), int(height))
        self.stats = EngineStats()
        self.sim_time = 0.0

        center = Vector2D(width / 2.0, height / 2.0)
        self._central_body = CentralBody(center, cfg.reference_mass, cfg)

        self.spawn_orbiting_particles(self._max_particles // 4, width, height)
        logger.debug(
            "Engine created: horizon=%.1f disk=%.1f seeded=%d",
            self._central_body.event_horizon_radius,
            self._central_body.accretion_disk_radius,
            len(self._particles),
        )

    # -- queries -----------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def time_acceleration(self) -> float:
        return self._time_acceleration

    @property
    def max_particles(self) -> int:
        return self._max_particles

    @property
    def particle_count(self) -> int:
        return sum(1 for p in self._particles if p.is_alive)

    @property
    def central_body(self) -> CentralBody:
        return self._central_body

    @property
    def spawn_bounds(self) -> tuple[int, int]:
        return self._spawn_bounds

    def get_alive_particles(self) -> AliveParticles:
        """Lazy view of the particles still alive, in insertion order."""

        return AliveParticles(self)

    def __len__(self) -> int:
        return len(self._particles)

    # -- commands ----------------------------------------------------------

    def start(self) -> None:
        self._running = True

    def stop(self) -> None:
        self._running = False

    def toggle(self) -> bool:
        self._running = not self._running
        return self._running

    def set_time_acceleration(self, value: float) -> None:
        cfg = self._cfg
        self._time_acceleration = clamp(
            float(value), cfg.min_time_acceleration, cfg.max_time_acceleration
        )

    def set_max_particles(self, value: int) -> None:
        # Existing particles above a lowered cap are kept; only insertions are gated.
        cfg = self._cfg
        self._max_particles = int(clamp(int(value), cfg.min_particles, cfg.max_particles))
        logger.debug("Particle cap set to %d", self._max_particles)

    def set_spawn_bounds(self, width: int, height: int) -> None:
        self._spawn_bounds = (int(width), int(height))

    def _at_capacity(self) -> bool:
        return len(self._particles) >= self._max_particles

    def _random_color(self) -> Color:
        palette = self._cfg.palette
        return palette[int(self._rng.integers(len(palette)))]

    def add_particle(self, position: Vector2D, velocity: Vector2D) -> Particle | None:
        """Insert a particle with random mass, colour, size and lifetime.

        Returns the new particle, or ``None`` when the population is full.
        """

        if self._at_capacity():
            return None

        cfg = self._cfg
        rng = self._rng
        mass = float(rng.uniform(*cfg.mass_range))
        size = int(rng.integers(*cfg.size_range))
        life_time = float(rng.uniform(*cfg.lifetime_range))
        particle = Particle(
            position, velocity, mass, self._random_color(), size, life_time, cfg=cfg
        )
        self._particles.append(particle)
        self.stats.spawned += 1
        self._emit("spawned", particle)
        return particle

    def spawn_orbiting_particle(
        self, width: int | None = None, height: int | None = None
    ) -> Particle | None:
        """Place a particle on a near-circular (elliptical) orbit.

        The launch speed is ``sqrt(G M / r) * 0.7`` scaled by a random jitter
        and points along ``(-sin, cos)`` of the spawn angle, tangent to the
        radius. ``width``/``height`` default to the engine's spawn bounds.
        """

        if self._at_capacity():
            return None

        if width is None or height is None:
            width, height = self._spawn_bounds
        cfg = self._cfg
        rng = self._rng
        body = self._central_body

        inner = body.event_horizon_radius * cfg.spawn_inner_factor
        distance = inner + float(rng.random()) * min(width, height) * cfg.spawn_distance_fraction
        angle = float(rng.random()) * 2.0 * math.pi
        position = body.position + Vector2D.from_polar(distance, angle)

        speed = orbital_speed(body.mass, distance, cfg)
        speed *= float(rng.uniform(*cfg.orbit_jitter_range))
        velocity = Vector2D(-speed * math.sin(angle), speed * math.cos(angle))

        return self.add_particle(position, velocity)

    def spawn_orbiting_particles(
        self, count: int, width: int | None = None, height: int | None = None
    ) -> int:
        """Spawn up to ``count`` orbiting particles; returns how many were added."""

        added = 0
        for _ in range(max(0, count)):
            if self.spawn_orbiting_particle(width, height) is None:
                break
            added += 1
        if added:
            logger.debug("Spawned %d orbiting particles (%d total)", added, len(self._particles))
        return added

    def update(self, dt: float) -> None:
        """Advance the simulation by ``dt`` wall-clock seconds when running."""

        if not self._running:
            return

        scaled_dt = dt * self._time_acceleration
        self.sim_time += scaled_dt
        body = self._central_body
        body.advance(scaled_dt)

        survivors: list[Particle] = []
        for particle in self._particles:
            particle.step(scaled_dt, body.position, body.mass, body.event_horizon_radius)
            if particle.is_alive:
                survivors.append(particle)
            elif particle.absorbed:
                self.stats.absorbed += 1
                self._emit("absorbed", particle)
            else:
                self.stats.expired += 1
                self._emit("expired", particle)
        self._particles = survivors

        if not self._at_capacity() and self._rng.random() < self._cfg.spawn_probability:
            self.spawn_orbiting_particle()

    def reset(self) -> None:
        """Drop all particles, restore 1x time and stop. The body is kept."""

        self._particles.clear()
        self._time_acceleration = self._cfg.default_time_acceleration
        self._running = False
        self.stats.clear()
        self.sim_time = 0.0
        logger.debug("Engine reset")

    def clear_particles(self) -> None:
        self._particles.clear()
        logger.debug("Particles cleared")

    def _emit(self, kind: str, particle: Particle) -> None:
        if self._on_event is not None:
            self._on_event(ParticleEvent(self.sim_time, kind, particle.position, particle))


__all__ = ["AliveParticles", "EngineStats", "EventCallback", "ParticleEvent", "SimulationEngine"]
