"""Configuration dataclasses for the black hole simulation."""
from __future__ import annotations

from dataclasses import dataclass, field


Color = tuple[int, int, int, int]


@dataclass(frozen=True)
class EngineCfg:
    # Scaled for on-screen orbits of a few hundred pixels, not physical units.
    gravitational_constant: float = 6.674e-11 * 1e-8
    physical_g: float = 6.674e-11
    speed_of_light: float = 299_792_458.0
    schwarzschild_scale: float = 5e3
    reference_mass: float = 5.972e24
    min_event_horizon: float = 20.0
    event_horizon_factor: float = 0.5
    accretion_disk_factor: float = 8.0
    photon_sphere_factor: float = 1.5
    rotation_speed: float = 2.0
    trail_length: int = 50
    default_max_particles: int = 200
    min_particles: int = 10
    max_particles: int = 1000
    min_time_acceleration: float = 0.1
    max_time_acceleration: float = 10.0
    default_time_acceleration: float = 1.0
    mass_range: tuple[float, float] = (1e19, 1.1e20)
    size_range: tuple[int, int] = (2, 6)
    lifetime_range: tuple[float, float] = (10.0, 30.0)
    orbit_speed_factor: float = 0.7
    orbit_jitter_range: tuple[float, float] = (0.8, 1.2)
    spawn_inner_factor: float = 2.0
    spawn_distance_fraction: float = 0.4
    spawn_probability: float = 0.02
    red_shift_threshold: float = 0.8
    orange_threshold: float = 0.5
    proximity_span: float = 3.0
    min_alpha: float = 0.3
    base_color: tuple[int, int, int] = (100, 150, 255)
    palette: tuple[Color, ...] = field(
        default_factory=lambda: (
            (100, 150, 255, 255),
            (150, 255, 150, 255),
            (255, 150, 100, 255),
            (255, 100, 255, 255),
            (100, 255, 255, 255),
            (255, 255, 100, 255),
        )
    )


@dataclass(frozen=True)
class RenderCfg:
    screen_width: int = 1200
    screen_height: int = 800
    simulation_width: int = 1000
    simulation_height: int = 800
    control_panel_width: int = 200
    target_fps: int = 60
    max_frame_dt: float = 0.1
    caption: str = "Black Hole Simulator"
    background_color: tuple[int, int, int] = (0, 0, 0)
    panel_color: tuple[int, int, int] = (30, 30, 30)
    text_color: tuple[int, int, int] = (255, 255, 255)
    dim_text_color: tuple[int, int, int] = (200, 200, 200)
    star_count: int = 100
    star_color: tuple[int, int, int] = (255, 255, 255)
    disk_rings: int = 8
    disk_ring_color: Color = (255, 90, 15, 80)
    disk_highlight_color: Color = (255, 220, 140, 120)
    photon_sphere_color: Color = (255, 240, 200, 60)
    horizon_color: Color = (255, 200, 0, 100)
    core_color: tuple[int, int, int] = (0, 0, 0)
    core_radius_factor: float = 0.8
    trail_draw_depth: int = 20
    trail_alpha_factor: float = 0.5
    time_acceleration_step: float = 0.1
    particle_cap_step: int = 10
    spawn_batch_size: int = 10
    font_names: tuple[str, ...] = ("dejavusans", "arial", "helvetica")
    title_font_size: int = 16
    body_font_size: int = 12
    log_every_frames: int = 30


ENGINE_CFG = EngineCfg()
RENDER_CFG = RenderCfg()


__all__ = ["Color", "ENGINE_CFG", "RENDER_CFG", "EngineCfg", "RenderCfg"]
