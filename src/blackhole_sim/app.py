"""
Black Hole Simulator - interactive pygame shell
================================================

Opens a window with a control panel on the left and the simulation area on
the right, maps keyboard and mouse input onto the engine commands and draws the
engine state every frame.
"""
from __future__ import annotations

import argparse
import logging
import sys

import numpy as np
import pygame

from blackhole_sim.core.config import ENGINE_CFG, RENDER_CFG
from blackhole_sim.core.engine import SimulationEngine
from blackhole_sim.core.logging_utils import RunLogger
from blackhole_sim.core.timekeeping import FrameTimer
from blackhole_sim.core.vector import Vector2D
from blackhole_sim.render import (
    draw_black_hole,
    draw_control_panel,
    draw_particles,
    draw_starfield,
    generate_starfield,
    load_font,
)


logger = logging.getLogger(__name__)

PANEL_WIDTH = RENDER_CFG.control_panel_width
SIM_WIDTH = RENDER_CFG.simulation_width
SIM_HEIGHT = RENDER_CFG.simulation_height


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Interactive black hole particle simulator.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible spawning")
    parser.add_argument(
        "--max-particles",
        type=int,
        default=ENGINE_CFG.default_max_particles,
        help="Initial particle cap (clamped to 10..1000)",
    )
    parser.add_argument("--log-run", action="store_true", help="Record a run under data/runs/")
    parser.add_argument("--runs-dir", default="data/runs", help="Root directory for run logs")
    parser.add_argument("--log-level", default="WARNING", help="Python logging level")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    pygame.init()
    pygame.display.set_caption(RENDER_CFG.caption)
    screen = pygame.display.set_mode((RENDER_CFG.screen_width, RENDER_CFG.screen_height))
    sim_surface = pygame.Surface((SIM_WIDTH, SIM_HEIGHT))
    clock = pygame.time.Clock()
    title_font = load_font(RENDER_CFG.font_names, RENDER_CFG.title_font_size)
    body_font = load_font(RENDER_CFG.font_names, RENDER_CFG.body_font_size)
    starfield = generate_starfield(RENDER_CFG.star_count, size=(SIM_WIDTH, SIM_HEIGHT))

    rng = np.random.default_rng(args.seed)
    run_logger: RunLogger | None = None
    frame_counter = 0

    def make_engine() -> SimulationEngine:
        on_event = run_logger.log_particle_event if run_logger is not None else None
        new_engine = SimulationEngine(SIM_WIDTH, SIM_HEIGHT, rng=rng, on_event=on_event)
        new_engine.set_max_particles(args.max_particles)
        return new_engine

    def open_run_logger() -> None:
        nonlocal run_logger
        close_run_logger()
        run_logger = RunLogger(args.runs_dir)
        run_logger.write_meta({
            "seed": args.seed,
            "max_particles": args.max_particles,
            "reference_mass": ENGINE_CFG.reference_mass,
            "gravitational_constant": ENGINE_CFG.gravitational_constant,
            "spawn_probability": ENGINE_CFG.spawn_probability,
            "simulation_size": [SIM_WIDTH, SIM_HEIGHT],
        })
        logger.info("Logging run to %s", run_logger.run_dir)

    def close_run_logger() -> None:
        nonlocal run_logger
        if run_logger is not None:
            run_logger.close()
            run_logger = None

    def log_state() -> None:
        if run_logger is None:
            return
        stats = engine.stats
        run_logger.log_ts([
            engine.sim_time,
            engine.particle_count,
            engine.max_particles,
            engine.time_acceleration,
            stats.spawned,
            stats.absorbed,
            stats.expired,
        ])

    def quit_app() -> None:
        close_run_logger()
        pygame.quit()
        sys.exit()

    if args.log_run:
        open_run_logger()
    engine = make_engine()
    timer = FrameTimer(max_dt=RENDER_CFG.max_frame_dt)

    while True:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                quit_app()
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    quit_app()
                elif event.key == pygame.K_SPACE:
                    engine.toggle()
                    timer.restart()
                elif event.key == pygame.K_r:
                    engine.reset()
                    if args.log_run:
                        open_run_logger()
                    engine = make_engine()
                    frame_counter = 0
                elif event.key == pygame.K_c:
                    engine.clear_particles()
                elif event.key == pygame.K_a:
                    engine.spawn_orbiting_particles(RENDER_CFG.spawn_batch_size, SIM_WIDTH, SIM_HEIGHT)
                elif event.key == pygame.K_LEFTBRACKET:
                    engine.set_max_particles(engine.max_particles - RENDER_CFG.particle_cap_step)
                    args.max_particles = engine.max_particles
                elif event.key == pygame.K_RIGHTBRACKET:
                    engine.set_max_particles(engine.max_particles + RENDER_CFG.particle_cap_step)
                    args.max_particles = engine.max_particles
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                mx, my = event.pos
                if mx > PANEL_WIDTH:
                    engine.add_particle(Vector2D(mx - PANEL_WIDTH, my), Vector2D(0.0, 0.0))

        keys = pygame.key.get_pressed()
        if keys[pygame.K_UP]:
            engine.set_time_acceleration(engine.time_acceleration + RENDER_CFG.time_acceleration_step)
        if keys[pygame.K_DOWN]:
            engine.set_time_acceleration(engine.time_acceleration - RENDER_CFG.time_acceleration_step)

        dt = timer.tick()
        if engine.is_running:
            engine.update(dt)
            frame_counter += 1
            if frame_counter % RENDER_CFG.log_every_frames == 0:
                log_state()

        screen.fill(RENDER_CFG.background_color)
        sim_surface.fill(RENDER_CFG.background_color)
        draw_starfield(sim_surface, starfield, (0, 0), color=RENDER_CFG.star_color)
        draw_black_hole(sim_surface, engine.central_body, (0, 0), render_cfg=RENDER_CFG)
        draw_particles(sim_surface, engine.get_alive_particles(), (0, 0), render_cfg=RENDER_CFG)
        screen.blit(sim_surface, (PANEL_WIDTH, 0))
        draw_control_panel(
            screen,
            engine,
            title_font=title_font,
            body_font=body_font,
            render_cfg=RENDER_CFG,
        )

        pygame.display.flip()
        clock.tick(RENDER_CFG.target_fps)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        pygame.quit()
