"""Physics helpers for the black hole simulation."""
from __future__ import annotations

import math

from .config import ENGINE_CFG, Color, EngineCfg
from .vector import Vector2D


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp *value* between *lo* and *hi*."""

    return max(lo, min(hi, value))


def schwarzschild_radius(mass: float, cfg: EngineCfg = ENGINE_CFG) -> float:
    """Schwarzschild radius ``2GM/c^2`` scaled up to screen units."""

    c2 = cfg.speed_of_light * cfg.speed_of_light
    return 2.0 * cfg.physical_g * mass / c2 * cfg.schwarzschild_scale


def gravitational_force(
    direction: Vector2D,
    body_mass: float,
    particle_mass: float,
    cfg: EngineCfg = ENGINE_CFG,
) -> Vector2D:
    """Force on a particle given the vector ``direction`` pointing at the body.

    The ``+ 1`` in the denominator keeps the force finite as the distance goes
    to zero. A zero ``direction`` yields a zero force.
    """

    distance_sq = direction.magnitude_squared
    magnitude = cfg.gravitational_constant * body_mass * particle_mass / (distance_sq + 1.0)
    return direction.normalized * magnitude


def orbital_speed(body_mass: float, distance: float, cfg: EngineCfg = ENGINE_CFG) -> float:
    """Sub-circular launch speed ``sqrt(G M / r) * factor`` used for spawning."""

    if distance <= 0.0:
        return 0.0
    return math.sqrt(cfg.gravitational_constant * body_mass / distance) * cfg.orbit_speed_factor


def proximity_factor(distance: float, event_horizon_radius: float, cfg: EngineCfg = ENGINE_CFG) -> float:
    """0 far away, rising to 1 at the event horizon."""

    span = event_horizon_radius * cfg.proximity_span
    if span <= 0.0:
        return 0.0
    return max(0.0, 1.0 - (distance - event_horizon_radius) / span)


def proximity_color(
    distance: float,
    event_horizon_radius: float,
    life_time: float,
    max_life_time: float,
    cfg: EngineCfg = ENGINE_CFG,
) -> Color:
    """Red shift close to the horizon, orange nearby, faded blue elsewhere."""

    proximity = proximity_factor(distance, event_horizon_radius, cfg)
    if proximity > cfg.red_shift_threshold:
        return (255, int(255 * min(proximity, 1.0)), 0, 255)
    if proximity > cfg.orange_threshold:
        return (255, int(128 * (1.0 - proximity)), 0, 255)
    ratio = life_time / max_life_time if max_life_time > 0.0 else 0.0
    alpha = clamp(ratio, cfg.min_alpha, 1.0)
    return (*cfg.base_color, int(255 * alpha))


__all__ = [
    "clamp",
    "gravitational_force",
    "orbital_speed",
    "proximity_color",
    "proximity_factor",
    "schwarzschild_radius",
]
