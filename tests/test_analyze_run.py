from dataclasses import replace

import numpy as np
import pytest

from blackhole_sim import analyze_run
from blackhole_sim.core.config import ENGINE_CFG
from blackhole_sim.core.engine import SimulationEngine
from blackhole_sim.core.logging_utils import RunLogger


def record_run(root, steps=120):
    logger = RunLogger(root, run_id="sample")
    logger.write_meta({"simulation_size": [600, 600]})
    cfg = replace(ENGINE_CFG, spawn_probability=0.5)
    engine = SimulationEngine(
        600, 600, cfg=cfg, rng=np.random.default_rng(11), on_event=logger.log_particle_event
    )
    engine.set_time_acceleration(10.0)
    engine.start()
    for step in range(steps):
        engine.update(1 / 30)
        if step % 10 == 0:
            stats = engine.stats
            logger.log_ts([
                engine.sim_time,
                engine.particle_count,
                engine.max_particles,
                engine.time_acceleration,
                stats.spawned,
                stats.absorbed,
                stats.expired,
            ])
    logger.close()
    return logger.run_dir, engine


def test_loaders_read_logged_run(tmp_path):
    run_dir, engine = record_run(tmp_path)
    ts = analyze_run.load_timeseries(run_dir / analyze_run.TIMESERIES_FILENAME)
    events = analyze_run.load_events(run_dir / analyze_run.EVENTS_FILENAME)

    assert ts["t"].size == 12
    assert ts["particles"][-1] <= ts["max_particles"][-1]
    summary = analyze_run.summarize_events(events)
    assert summary["spawned"] == engine.stats.spawned
    assert summary["absorbed"] == engine.stats.absorbed
    assert summary["expired"] == engine.stats.expired
    assert isinstance(events[0]["details"], dict)


def test_absorption_rate():
    events = [{"t": 1.0, "type": "absorbed"}, {"t": 2.0, "type": "spawned"}]
    assert analyze_run.absorption_rate(events, 4.0) == pytest.approx(0.25)
    assert analyze_run.absorption_rate(events, 0.0) is None


def test_main_writes_figures_for_last_run(tmp_path, capsys):
    run_dir, _ = record_run(tmp_path)
    analyze_run.main(["--runs-dir", str(tmp_path)])
    assert (run_dir / "figs" / "population.png").exists()
    assert (run_dir / "figs" / "events.png").exists()
    out = capsys.readouterr().out
    assert "Run: sample" in out
    assert "absorbed" in out


def test_main_errors_without_runs(tmp_path):
    with pytest.raises(SystemExit):
        analyze_run.main(["--runs-dir", str(tmp_path)])
