from __future__ import annotations

import math
from typing import Iterable, TYPE_CHECKING

import pygame

from .assets import Color

if TYPE_CHECKING:  # pragma: no cover
    from blackhole_sim.core.config import RenderCfg
    from blackhole_sim.core.model import CentralBody, Particle


Point = tuple[int, int]


def generate_starfield(num_stars: int, *, size: tuple[int, int]) -> list[tuple[Point, int]]:
    """Fixed, evenly scattered background stars: ``((x, y), radius)``."""

    width, height = size
    if width <= 0 or height <= 0:
        return []
    return [
        (((i * 73) % width, (i * 127) % height), (i % 3) + 1)
        for i in range(num_stars)
    ]


def draw_starfield(
    surface: pygame.Surface,
    starfield: Iterable[tuple[Point, int]],
    offset: Point,
    *,
    color: tuple[int, int, int],
) -> None:
    ox, oy = offset
    for (x, y), radius in starfield:
        pygame.draw.circle(surface, color, (ox + x, oy + y), radius)


def _to_screen(x: float, y: float, offset: Point) -> Point:
    return (int(x) + offset[0], int(y) + offset[1])


def draw_black_hole(
    surface: pygame.Surface,
    body: CentralBody,
    offset: Point,
    *,
    render_cfg: RenderCfg,
) -> None:
    """Accretion rings, a highlight spinning with ``rotation_angle``, then the horizon."""

    center = _to_screen(body.position.x, body.position.y, offset)
    overlay = pygame.Surface(surface.get_size(), pygame.SRCALPHA)

    rings = max(1, render_cfg.disk_rings)
    for ring in range(rings, 0, -1):
        radius = int(body.accretion_disk_radius * ring / rings)
        if radius > 0:
            pygame.draw.circle(overlay, render_cfg.disk_ring_color, center, radius)

    # Two opposite hot spots sweep around the mid disk.
    spot_orbit = (body.accretion_disk_radius + body.photon_sphere_radius) / 2.0
    spot_radius = max(2, int(body.event_horizon_radius * 0.4))
    for phase in (0.0, math.pi):
        angle = body.rotation_angle + phase
        spot = (
            center[0] + int(spot_orbit * math.cos(angle)),
            center[1] + int(spot_orbit * math.sin(angle)),
        )
        pygame.draw.circle(overlay, render_cfg.disk_highlight_color, spot, spot_radius)

    pygame.draw.circle(
        overlay, render_cfg.photon_sphere_color, center, int(body.photon_sphere_radius), 2
    )
    pygame.draw.circle(overlay, render_cfg.horizon_color, center, int(body.event_horizon_radius))
    surface.blit(overlay, (0, 0))

    core_radius = int(body.event_horizon_radius * render_cfg.core_radius_factor)
    pygame.draw.circle(surface, render_cfg.core_color, center, core_radius)


def _faded(color: Color, factor: float) -> Color:
    r, g, b = color[0], color[1], color[2]
    alpha = color[3] if len(color) > 3 else 255
    return (r, g, b, max(0, min(255, int(alpha * factor))))


def draw_particles(
    surface: pygame.Surface,
    particles: Iterable[Particle],
    offset: Point,
    *,
    render_cfg: RenderCfg,
) -> None:
    """Particles with a sparse trail of every other recent position."""

    overlay = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
    depth = render_cfg.trail_draw_depth
    for particle in particles:
        pos = _to_screen(particle.position.x, particle.position.y, offset)
        pygame.draw.circle(overlay, particle.color, pos, particle.size)

        recent = particle.trail.recent(depth)
        for i in range(1, len(recent), 2):
            point = recent[i]
            fade = (1.0 - i / depth) * render_cfg.trail_alpha_factor
            pygame.draw.circle(
                overlay, _faded(particle.color, fade), _to_screen(point.x, point.y, offset), 1
            )
    surface.blit(overlay, (0, 0))
