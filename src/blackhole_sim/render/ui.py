from __future__ import annotations

from typing import Sequence, TYPE_CHECKING

import pygame

from .assets import get_text_surface

if TYPE_CHECKING:  # pragma: no cover
    from blackhole_sim.core.config import RenderCfg
    from blackhole_sim.core.engine import SimulationEngine


HELP_LINES: tuple[str, ...] = (
    "SPACE - Play/Pause",
    "R - Reset",
    "C - Clear particles",
    "A - Add 10 particles",
    "UP/DOWN - Time speed",
    "[ / ] - Particle cap",
    "Click - Add particle",
)

FEATURE_LINES: tuple[str, ...] = (
    "Gravitational physics",
    "Event horizon",
    "Accretion disk",
    "Real-time simulation",
)


def status_lines(engine: SimulationEngine) -> list[tuple[str, bool]]:
    """Panel rows as ``(text, emphasised)`` pairs."""

    body = engine.central_body
    stats = engine.stats
    return [
        (f"Status: {'Running' if engine.is_running else 'Paused'}", True),
        (f"Particles: {engine.particle_count}/{engine.max_particles}", True),
        (f"Time: {engine.time_acceleration:.1f}x", True),
        (f"Mass: {body.mass:.1E} kg", False),
        (f"Horizon: {body.event_horizon_radius:.0f}", False),
        (f"Absorbed: {stats.absorbed}  Expired: {stats.expired}", False),
    ]


def draw_control_panel(
    surface: pygame.Surface,
    engine: SimulationEngine,
    *,
    title_font: pygame.font.Font,
    body_font: pygame.font.Font,
    render_cfg: RenderCfg,
) -> None:
    width = render_cfg.control_panel_width
    pygame.draw.rect(surface, render_cfg.panel_color, (0, 0, width, surface.get_height()))

    y = 10
    for text, emphasised in status_lines(engine):
        font = title_font if emphasised else body_font
        color = render_cfg.text_color if emphasised else render_cfg.dim_text_color
        surface.blit(get_text_surface(font, text, color), (10, y))
        y += font.get_linesize() + 6

    y += 20
    y = _blit_section(surface, "Controls:", HELP_LINES, y, title_font, body_font, render_cfg)
    y += 10
    _blit_section(
        surface, "Features:", [f"- {line}" for line in FEATURE_LINES], y, title_font, body_font, render_cfg
    )


def _blit_section(
    surface: pygame.Surface,
    title: str,
    lines: Sequence[str],
    y: int,
    title_font: pygame.font.Font,
    body_font: pygame.font.Font,
    render_cfg: RenderCfg,
) -> int:
    surface.blit(get_text_surface(title_font, title, render_cfg.text_color), (10, y))
    y += title_font.get_linesize() + 2
    for line in lines:
        surface.blit(get_text_surface(body_font, line, render_cfg.dim_text_color), (10, y))
        y += body_font.get_linesize() + 2
    return y
