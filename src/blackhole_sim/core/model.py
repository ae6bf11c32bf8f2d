"""Data models for the black hole simulation state."""
from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from .config import ENGINE_CFG, Color, EngineCfg
from .physics import gravitational_force, proximity_color, schwarzschild_radius
from .vector import Vector2D


TWO_PI = 2.0 * math.pi


@dataclass
class CentralBody:
    """The single attractor. Radii are derived from the mass once."""

    position: Vector2D
    mass: float
    cfg: EngineCfg = field(default=ENGINE_CFG, repr=False)
    schwarzschild_radius: float = field(init=False)
    event_horizon_radius: float = field(init=False)
    accretion_disk_radius: float = field(init=False)
    photon_sphere_radius: float = field(init=False)
    rotation_angle: float = field(init=False, default=0.0)

    def __post_init__(self) -> None:
        cfg = self.cfg
        self.schwarzschild_radius = schwarzschild_radius(self.mass, cfg)
        self.event_horizon_radius = max(
            cfg.min_event_horizon, self.schwarzschild_radius * cfg.event_horizon_factor
        )
        self.accretion_disk_radius = self.event_horizon_radius * cfg.accretion_disk_factor
        self.photon_sphere_radius = self.event_horizon_radius * cfg.photon_sphere_factor

    def advance(self, dt: float) -> None:
        """Spin the accretion disk. Cosmetic only."""

        self.rotation_angle = (self.rotation_angle + dt * self.cfg.rotation_speed) % TWO_PI

    def contains_in_event_horizon(self, point: Vector2D) -> bool:
        return Vector2D.distance(self.position, point) <= self.event_horizon_radius

    def contains_in_accretion_disk(self, point: Vector2D) -> bool:
        distance = Vector2D.distance(self.position, point)
        return self.event_horizon_radius < distance <= self.accretion_disk_radius

    def contains_in_photon_sphere(self, point: Vector2D) -> bool:
        return Vector2D.distance(self.position, point) <= self.photon_sphere_radius


class TrailBuffer:
    """Fixed-capacity ring buffer of recent positions."""

    def __init__(self, start: Vector2D, length: int) -> None:
        length = max(1, int(length))
        self._points = np.empty((length, 2), dtype=float)
        self._points[:] = start.as_tuple()
        self._write_index = 0

    def __len__(self) -> int:
        return len(self._points)

    def __getitem__(self, index: int) -> Vector2D:
        x, y = self._points[index]
        return Vector2D(float(x), float(y))

    @property
    def write_index(self) -> int:
        return self._write_index

    def push(self, point: Vector2D) -> None:
        self._points[self._write_index] = point.as_tuple()
        self._write_index = (self._write_index + 1) % len(self._points)

    def ordered(self) -> np.ndarray:
        """Copy of the buffer as an ``(n, 2)`` array, oldest point first."""

        return np.roll(self._points, -self._write_index, axis=0)

    def recent(self, count: int) -> list[Vector2D]:
        """Up to ``count`` most recent points, newest first."""

        length = len(self._points)
        count = max(0, min(count, length))
        indices = (self._write_index - 1 - np.arange(count)) % length
        return [Vector2D(float(x), float(y)) for x, y in self._points[indices]]


class Particle:
    """A test mass orbiting the central body with a fading trail."""

    def __init__(
        self,
        position: Vector2D,
        velocity: Vector2D,
        mass: float,
        color: Color,
        size: int = 3,
        life_time: float = 10.0,
        *,
        cfg: EngineCfg = ENGINE_CFG,
    ) -> None:
        self.position = position
        self.velocity = velocity
        self.mass = mass
        self.color = color
        self.size = size
        self.life_time = life_time
        self.max_life_time = life_time
        self.absorbed = False
        self.trail = TrailBuffer(position, cfg.trail_length)
        self._cfg = cfg

    def __repr__(self) -> str:
        return (
            f"Particle(position={self.position}, velocity={self.velocity}, "
            f"life_time={self.life_time:.2f})"
        )

    @property
    def is_alive(self) -> bool:
        return self.life_time > 0.0

    @property
    def life_ratio(self) -> float:
        if self.max_life_time <= 0.0:
            return 0.0
        return self.life_time / self.max_life_time

    def step(
        self,
        dt: float,
        body_position: Vector2D,
        body_mass: float,
        event_horizon_radius: float,
    ) -> None:
        """Advance one semi-implicit Euler step under the body's gravity.

        Crossing the event horizon consumes the particle before it moves, so
        its position, velocity and trail are left untouched on that step.
        """

        if not self.is_alive:
            return

        direction = body_position - self.position
        distance = direction.magnitude
        if distance <= event_horizon_radius:
            self.life_time = 0.0
            self.absorbed = True
            return

        force = gravitational_force(direction, body_mass, self.mass, self._cfg)
        self.velocity = self.velocity + force / self.mass * dt
        self.position = self.position + self.velocity * dt
        self.trail.push(self.position)

        self.life_time = max(0.0, self.life_time - dt)
        self.color = proximity_color(
            distance, event_horizon_radius, self.life_time, self.max_life_time, self._cfg
        )


__all__ = ["CentralBody", "Particle", "TrailBuffer"]
