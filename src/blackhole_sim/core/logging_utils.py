"""Run logging for the black hole simulator."""
from __future__ import annotations

import csv
import json
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from .engine import ParticleEvent


def _cell(value: object) -> object:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"{value:.10g}"
    return value


class _CsvTable:
    """One CSV file with a header and rows buffered up to ``threshold``."""

    def __init__(self, path: Path, header: Sequence[str], threshold: int) -> None:
        self.path = path
        self._fh = path.open("w", newline="", encoding="utf-8")
        self._writer = csv.writer(self._fh, lineterminator="\n")
        self._writer.writerow(header)
        self._fh.flush()
        self._rows: list[list[object]] = []
        self._threshold = max(1, threshold)

    def append(self, values: Sequence[object]) -> None:
        self._rows.append([_cell(v) for v in values])
        if len(self._rows) >= self._threshold:
            self.flush()

    def flush(self) -> None:
        if self._rows:
            self._writer.writerows(self._rows)
            self._fh.flush()
            self._rows.clear()

    def close(self) -> None:
        self.flush()
        self._fh.close()


class RunLogger:
    """Writes a run directory: population timeseries, particle events and metadata.

    ``last_run.txt`` in the root directory names the most recent run so the
    analysis tool can pick it up without arguments.
    """

    TIMESERIES_HEADER = [
        "t",
        "particles",
        "max_particles",
        "time_acceleration",
        "spawned",
        "absorbed",
        "expired",
    ]
    EVENTS_HEADER = ["t", "type", "x", "y", "details"]

    def __init__(
        self,
        root_dir: str | Path = "data/runs",
        run_id: Optional[str] = None,
        *,
        timeseries_flush_threshold: int = 200,
        events_flush_threshold: int = 50,
    ) -> None:
        self.root_dir = Path(root_dir)
        self.root_dir.mkdir(parents=True, exist_ok=True)

        self.run_id = self._free_run_id(run_id)
        self.run_dir = self.root_dir / self.run_id
        self.run_dir.mkdir(parents=True, exist_ok=False)

        self.meta_path = self.run_dir / "meta.json"
        self._timeseries = _CsvTable(
            self.run_dir / "timeseries.csv", self.TIMESERIES_HEADER, timeseries_flush_threshold
        )
        self._events = _CsvTable(
            self.run_dir / "events.csv", self.EVENTS_HEADER, events_flush_threshold
        )
        self._closed = False

        (self.root_dir / "last_run.txt").write_text(self.run_id, encoding="utf-8")

    def _free_run_id(self, run_id: Optional[str]) -> str:
        # Explicit ids get "_1", "_2"...; generated ones get "_01", "_02"...
        base = run_id or datetime.now().strftime("%Y%m%d_%H%M%S") + "_run"
        pattern = "{}_{}" if run_id else "{}_{:02d}"
        candidate = base
        suffix = 1
        while (self.root_dir / candidate).exists():
            candidate = pattern.format(base, suffix)
            suffix += 1
        return candidate

    @property
    def timeseries_path(self) -> Path:
        return self._timeseries.path

    @property
    def events_path(self) -> Path:
        return self._events.path

    def write_meta(self, meta: dict) -> None:
        with self.meta_path.open("w", encoding="utf-8") as fh:
            json.dump(meta, fh, indent=2, sort_keys=True)

    def log_ts(self, values: Sequence[float]) -> None:
        self._timeseries.append(values)

    def log_event(self, values: Sequence[object]) -> None:
        self._events.append(values)

    def log_particle_event(self, event: ParticleEvent) -> None:
        """Engine ``on_event`` hook: one row per spawn/absorb/expire."""

        particle = event.particle
        details = {
            "mass": particle.mass,
            "size": particle.size,
            "life_time": round(particle.life_time, 4),
            "max_life_time": round(particle.max_life_time, 4),
        }
        self.log_event([
            event.time,
            event.kind,
            event.position.x,
            event.position.y,
            json.dumps(details),
        ])

    def close(self) -> None:
        if self._closed:
            return
        self._timeseries.close()
        self._events.close()
        self._closed = True

    def __enter__(self) -> "RunLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self.close()
        return None


__all__ = ["RunLogger"]
