"""Typer CLI timing the grid stencil against the all-pairs force sum."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
import os
from pathlib import Path
from time import perf_counter
from typing import Annotated, Literal, Optional, Protocol

import polars as pl
import typer

from examples.gravitation import model as gravitation

app = typer.Typer(add_completion=False)


class RunnerP(Protocol):
    def __call__(self, agents: int, steps: int, seed: int | None = None) -> None: ...


@dataclass(slots=True)
class Backend:
    name: Literal["grid", "bruteforce"]
    runner: RunnerP


BACKENDS: dict[str, Backend] = {
    "grid": Backend(
        name="grid",
        runner=lambda agents, steps, seed=None: gravitation.simulate(
            agents=agents, steps=steps, seed=seed, backend="grid"
        ),
    ),
    "bruteforce": Backend(
        name="bruteforce",
        runner=lambda agents, steps, seed=None: gravitation.simulate(
            agents=agents, steps=steps, seed=seed, backend="bruteforce"
        ),
    ),
}


def _parse_agents(value: str) -> list[int]:
    value = value.strip()
    if ":" in value:
        parts = value.split(":")
        if len(parts) != 3:
            raise typer.BadParameter("Ranges must use start:stop:step format")
        try:
            start, stop, step = (int(part) for part in parts)
        except ValueError as exc:
            raise typer.BadParameter("Range values must be integers") from exc
        if step <= 0:
            raise typer.BadParameter("Step must be positive")
        if start < 0 or stop <= 0:
            raise typer.BadParameter("Range endpoints must be positive")
        if start > stop:
            raise typer.BadParameter("Range start must be <= stop")
        counts = list(range(start, stop + step, step))
        if counts[-1] > stop:
            counts.pop()
        return counts
    try:
        agents = int(value)
    except ValueError as exc:
        raise typer.BadParameter("Agent count must be an integer") from exc
    if agents <= 0:
        raise typer.BadParameter("Agent count must be positive")
    return [agents]


def _parse_backends(value: str) -> list[str]:
    """Parse the backends option into a list of backend keys.

    Accepts "all", a single backend name, or a comma-separated list.
    """
    value = value.strip()
    if value == "all":
        return list(BACKENDS.keys())
    parts = [part.strip() for part in value.split(",") if part.strip()]
    if not parts:
        raise typer.BadParameter("Backend selection must not be empty")
    unknown = [p for p in parts if p not in BACKENDS]
    if unknown:
        raise typer.BadParameter(f"Unknown backend selection: {', '.join(unknown)}")
    return list(dict.fromkeys(parts))


@app.command()
def run(
    backends: Annotated[
        str,
        typer.Option(
            help="Backends to benchmark: grid, bruteforce, or all",
            callback=_parse_backends,
        ),
    ] = "all",
    agents: Annotated[
        str,
        typer.Option(
            help="Agent count or range (start:stop:step)", callback=_parse_agents
        ),
    ] = "1000:5000:1000",
    steps: Annotated[int, typer.Option(min=0, help="Number of steps per run.")] = 10,
    repeats: Annotated[int, typer.Option(help="Repeats per configuration.", min=1)] = 1,
    seed: Annotated[int, typer.Option(help="Optional RNG seed.")] = 42,
    save: Annotated[bool, typer.Option(help="Persist benchmark CSV results.")] = True,
    results_dir: Annotated[
        Optional[Path],
        typer.Option(
            help=(
                "Base directory for benchmark outputs. A timestamped subdirectory "
                "is created with the CSV file. Defaults to the module's results directory."
            ),
        ),
    ] = None,
) -> None:
    """Run the gravitation model with each backend and report runtimes."""
    if isinstance(backends, str):
        backends = _parse_backends(backends)
    if isinstance(agents, str):
        agents = _parse_agents(agents)
    if results_dir is None:
        results_dir = Path(__file__).resolve().parent / "results"

    runtime_typechecking = os.environ.get("TORUSGRID_RUNTIME_TYPECHECKING", "")
    if runtime_typechecking and runtime_typechecking.lower() not in {"0", "false"}:
        typer.secho(
            "Warning: TORUSGRID_RUNTIME_TYPECHECKING is enabled; benchmarks may run significantly slower.",
            fg=typer.colors.YELLOW,
        )
    rows: list[dict[str, object]] = []
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    for agents_count in agents:
        for repeat_idx in range(repeats):
            run_seed = seed + repeat_idx
            for name in backends:
                backend = BACKENDS[name]
                start = perf_counter()
                backend.runner(agents_count, steps, run_seed)
                runtime = perf_counter() - start
                rows.append(
                    {
                        "backend": backend.name,
                        "agents": agents_count,
                        "steps": steps,
                        "seed": run_seed,
                        "repeat_idx": repeat_idx,
                        "runtime_seconds": runtime,
                        "timestamp": timestamp,
                    }
                )
                typer.echo(
                    f"Completed {backend.name} agents={agents_count} steps={steps} seed={run_seed} repeat={repeat_idx} in {runtime:.3f}s"
                )
    typer.echo("Finished benchmarking")

    if not rows:
        typer.echo("No benchmark data collected.")
        return
    df = pl.DataFrame(rows)
    summary = (
        df.group_by("backend", "agents")
        .agg(pl.col("runtime_seconds").mean().alias("mean_runtime_seconds"))
        .sort("agents", "backend")
    )
    typer.echo(f"{summary}")
    if save:
        timestamp_dir = (results_dir / timestamp).resolve()
        timestamp_dir.mkdir(parents=True, exist_ok=True)
        csv_path = timestamp_dir / f"gravitation_perf_{timestamp}.csv"
        df.write_csv(csv_path)
        typer.echo(f"Saved results to {csv_path}")


if __name__ == "__main__":
    app()
