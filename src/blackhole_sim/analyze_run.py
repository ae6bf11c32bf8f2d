"""Analyze a recorded simulator run and generate population figures."""
from __future__ import annotations

import argparse
import csv
import json
from pathlib import Path
from typing import Dict, List

import numpy as np

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt


TIMESERIES_FILENAME = "timeseries.csv"
EVENTS_FILENAME = "events.csv"
META_FILENAME = "meta.json"
FIGS_SUBDIR = "figs"
EVENT_KINDS = ("spawned", "absorbed", "expired")


def load_timeseries(path: Path) -> Dict[str, np.ndarray]:
    with path.open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        columns: Dict[str, List[float]] = {name: [] for name in reader.fieldnames or []}
        for row in reader:
            for key, value in row.items():
                if key is None:
                    continue
                columns.setdefault(key, []).append(float(value))
    return {key: np.asarray(values) for key, values in columns.items()}


def load_events(path: Path) -> List[dict]:
    with path.open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        events: List[dict] = []
        for row in reader:
            if not row:
                continue
            event = {
                "t": float(row["t"]),
                "type": row["type"],
                "x": float(row["x"]),
                "y": float(row["y"]),
            }
            details_raw = row.get("details", "")
            if details_raw:
                try:
                    event["details"] = json.loads(details_raw)
                except json.JSONDecodeError:
                    event["details"] = details_raw
            events.append(event)
    return events


def ensure_fig_dir(run_dir: Path) -> Path:
    fig_dir = run_dir / FIGS_SUBDIR
    fig_dir.mkdir(parents=True, exist_ok=True)
    return fig_dir


def summarize_events(events: List[dict]) -> Dict[str, int]:
    summary: Dict[str, int] = {kind: 0 for kind in EVENT_KINDS}
    for event in events:
        if event["type"] in summary:
            summary[event["type"]] += 1
    return summary


def absorption_rate(events: List[dict], duration: float) -> float | None:
    """Absorptions per simulated second, ``None`` for an empty run."""

    if duration <= 0.0:
        return None
    absorbed = sum(1 for event in events if event["type"] == "absorbed")
    return absorbed / duration


def run_duration(ts: Dict[str, np.ndarray], events: List[dict]) -> float:
    times = [float(ts["t"][-1])] if ts.get("t") is not None and ts["t"].size else []
    times.extend(event["t"] for event in events)
    return max(times, default=0.0)


def plot_population(fig_dir: Path, ts: Dict[str, np.ndarray]) -> None:
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(ts["t"], ts["particles"], color="#4dabf7", label="Particles")
    ax.plot(ts["t"], ts["max_particles"], color="#868e96", linestyle="--", label="Cap")
    ax.set_xlabel("t [sim s]")
    ax.set_ylabel("count")
    ax.set_title("Particle population")
    ax.grid(True, alpha=0.3)
    ax.legend()
    fig.tight_layout()
    fig.savefig(fig_dir / "population.png", dpi=150)
    plt.close(fig)


def plot_events(fig_dir: Path, events: List[dict], center: tuple[float, float] | None) -> None:
    colors = {"spawned": "#94d82d", "absorbed": "#d9480f", "expired": "#9775fa"}
    fig, ax = plt.subplots(figsize=(6, 6))
    for kind in EVENT_KINDS:
        xs = [event["x"] for event in events if event["type"] == kind]
        ys = [event["y"] for event in events if event["type"] == kind]
        if xs:
            ax.scatter(xs, ys, s=6, color=colors[kind], alpha=0.6, label=kind.capitalize())
    if center is not None:
        ax.scatter([center[0]], [center[1]], color="black", s=60, label="Black hole")
    ax.set_aspect("equal", "box")
    ax.invert_yaxis()
    ax.set_xlabel("x [px]")
    ax.set_ylabel("y [px]")
    ax.set_title("Where particles spawn, fall in and fade out")
    handles, _ = ax.get_legend_handles_labels()
    if handles:
        ax.legend()
    fig.tight_layout()
    fig.savefig(fig_dir / "events.png", dpi=150)
    plt.close(fig)


def print_summary(
    run_dir: Path,
    duration: float,
    ts: Dict[str, np.ndarray],
    event_summary: Dict[str, int],
    rate: float | None,
) -> None:
    print(f"Run: {run_dir.name}")
    print(f" Simulated time: {duration:.2f} s")
    population = ts.get("particles", np.array([]))
    if population.size:
        print(f" Population: peak {int(population.max())}, mean {population.mean():.1f}")
    else:
        print(" Population: no samples")
    if rate is not None:
        print(f" Absorption rate: {rate:.3f} /s")
    print(
        " Events:" +
        ",".join(f" {kind}: {count}" for kind, count in event_summary.items())
    )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Analyze a logged run and write figures.")
    parser.add_argument("run_dir", nargs="?", help="Path to a specific run directory")
    parser.add_argument("--runs-dir", default="data/runs", help="Root directory for run logs")
    args = parser.parse_args(argv)

    base_runs_dir = Path(args.runs_dir)
    if args.run_dir:
        run_path = Path(args.run_dir)
        if not run_path.is_dir():
            run_path = base_runs_dir / args.run_dir
    else:
        last_run_file = base_runs_dir / "last_run.txt"
        if not last_run_file.exists():
            parser.error("No run given and last_run.txt is missing.")
        run_id = last_run_file.read_text(encoding="utf-8").strip()
        run_path = base_runs_dir / run_id

    if not run_path.is_dir():
        parser.error(f"Run directory not found: {run_path}")

    meta_path = run_path / META_FILENAME
    ts_path = run_path / TIMESERIES_FILENAME
    ev_path = run_path / EVENTS_FILENAME

    if not meta_path.exists() or not ts_path.exists() or not ev_path.exists():
        parser.error("Run directory is missing meta/timeseries/events files.")

    with meta_path.open("r", encoding="utf-8") as fh:
        meta = json.load(fh)

    ts = load_timeseries(ts_path)
    events = load_events(ev_path)
    fig_dir = ensure_fig_dir(run_path)

    size = meta.get("simulation_size")
    center = (size[0] / 2.0, size[1] / 2.0) if size else None

    duration = run_duration(ts, events)
    event_summary = summarize_events(events)
    rate = absorption_rate(events, duration)

    if ts.get("t") is not None and ts["t"].size:
        plot_population(fig_dir, ts)
    plot_events(fig_dir, events, center)

    print_summary(run_path, duration, ts, event_summary, rate)


if __name__ == "__main__":
    main()
