import csv
import json

import numpy as np

from blackhole_sim.core.engine import SimulationEngine
from blackhole_sim.core.logging_utils import RunLogger


def test_run_logger_creates_run_directory(tmp_path):
    with RunLogger(tmp_path, run_id="demo") as logger:
        logger.write_meta({"seed": 1})
    assert logger.run_dir == tmp_path / "demo"
    assert (tmp_path / "last_run.txt").read_text(encoding="utf-8") == "demo"
    assert json.loads(logger.meta_path.read_text(encoding="utf-8")) == {"seed": 1}
    header = logger.timeseries_path.read_text().splitlines()[0]
    assert header == ",".join(RunLogger.TIMESERIES_HEADER)


def test_run_ids_do_not_collide(tmp_path):
    first = RunLogger(tmp_path, run_id="demo")
    second = RunLogger(tmp_path, run_id="demo")
    first.close()
    second.close()
    assert second.run_id == "demo_1"


def test_timeseries_buffered_until_threshold(tmp_path):
    logger = RunLogger(tmp_path, run_id="ts", timeseries_flush_threshold=3)
    logger.log_ts([0.0, 5, 200, 1.0, 5, 0, 0])
    logger.log_ts([0.5, 6, 200, 1.0, 6, 0, 0])
    assert len(logger.timeseries_path.read_text().splitlines()) == 1
    logger.log_ts([1.0, 7, 200, 1.0, 7, 0, 0])
    assert len(logger.timeseries_path.read_text().splitlines()) == 4
    logger.close()
    logger.close()


def test_particle_events_round_trip_through_csv(tmp_path):
    logger = RunLogger(tmp_path, run_id="events")
    engine = SimulationEngine(
        400, 400, rng=np.random.default_rng(3), on_event=logger.log_particle_event
    )
    logger.close()

    with logger.events_path.open(newline="") as fh:
        rows = list(csv.DictReader(fh))
    assert len(rows) == len(engine)
    assert {row["type"] for row in rows} == {"spawned"}
    details = json.loads(rows[0]["details"])
    assert set(details) == {"mass", "size", "life_time", "max_life_time"}


def test_event_fields_with_commas_and_quotes_survive_csv(tmp_path):
    details = json.dumps({"note": 'a "quoted", comma'})
    with RunLogger(tmp_path, run_id="quoting") as logger:
        logger.log_event([1.5, "absorbed", 10, 20.25, details])

    with logger.events_path.open(newline="") as fh:
        rows = list(csv.DictReader(fh))
    assert rows == [
        {"t": "1.5", "type": "absorbed", "x": "10", "y": "20.25", "details": details}
    ]
    assert json.loads(rows[0]["details"]) == {"note": 'a "quoted", comma'}
