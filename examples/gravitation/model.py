"""Gravitation model driven by torusgrid, with a Typer CLI."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from time import perf_counter
from typing import Annotated, Literal

import numpy as np
import polars as pl
import typer

from torusgrid import GridConfig, GridEngine, StencilConfig, TorusBoundary
from torusgrid.concrete._bruteforce import pairwise_forces_bruteforce
from torusgrid.config import DEFAULT_STATE_LABELS

WORLD_SIZE = (10240.0, 8000.0)

# 10240 / 128 = 80 cells, 8000 / 125 = 64 cells
GRID_CONFIG = GridConfig(width=80, height=64, capacity=8, cell_size=(128.0, 125.0))

DT = 0.1


@dataclass
class SimulationResult:
    """Final agent frame plus per-step diagnostics."""

    agents: pl.DataFrame
    metrics: pl.DataFrame


class GravitationModel:
    """Agents attracting each other through the grid stencil.

    Parameters
    ----------
    agents : int
        Number of agents.
    seed : int | None, optional
        Seed of the initial-state generator.
    backend : {"grid", "bruteforce"}, optional
        Force computation, by default "grid". "bruteforce" sums over all
        pairs and exists for comparison.
    radius : int, optional
        Stencil radius in cells, by default 1
    """

    labels = list(DEFAULT_STATE_LABELS)

    def __init__(
        self,
        agents: int,
        *,
        seed: int | None = None,
        backend: Literal["grid", "bruteforce"] = "grid",
        radius: int = 1,
    ) -> None:
        self.random = np.random.default_rng(seed)
        self.backend = backend
        self.radius = radius
        self.stencil = StencilConfig.from_labels(self.labels)
        self.engine = GridEngine(
            GRID_CONFIG,
            stencil=self.stencil,
            n_agents=agents,
            state_dims=len(self.labels),
        )
        self.boundaries = [
            TorusBoundary("pos_x", 0.0, WORLD_SIZE[0]),
            TorusBoundary("pos_y", 0.0, WORLD_SIZE[1]),
        ]
        self.agents = pl.DataFrame(
            {
                "pos_x": self.random.uniform(0.0, WORLD_SIZE[0], agents),
                "pos_y": self.random.uniform(0.0, WORLD_SIZE[1], agents),
                "vel_x": self.random.normal(0.0, 1.0, agents),
                "vel_y": self.random.normal(0.0, 1.0, agents),
                "size": np.full(agents, 5.0),
            }
        )
        self.steps = 0
        self._metrics: list[dict[str, float]] = []

    def forces(self) -> pl.DataFrame:
        """Force on every agent as a frame with columns fx, fy."""
        if self.backend == "grid":
            result = self.engine.interact_frame(self.agents, self.labels, self.radius)
            return result.select(
                pl.col("vel_x").alias("fx"), pl.col("vel_y").alias("fy")
            )
        forces = pairwise_forces_bruteforce(
            self.agents.select("pos_x", "pos_y").to_numpy(),
            self.agents["size"].to_numpy(),
            self.stencil.softening,
        )
        return pl.DataFrame({"fx": forces[:, 0], "fy": forces[:, 1]})

    def step(self) -> None:
        forces = self.forces()
        self.agents = (
            pl.concat([self.agents, forces], how="horizontal")
            .with_columns(
                (pl.col("vel_x") + pl.col("fx") * DT).alias("vel_x"),
                (pl.col("vel_y") + pl.col("fy") * DT).alias("vel_y"),
            )
            .with_columns(
                (pl.col("pos_x") + pl.col("vel_x") * DT).alias("pos_x"),
                (pl.col("pos_y") + pl.col("vel_y") * DT).alias("pos_y"),
            )
            .drop("fx", "fy")
            .with_columns([boundary.expr() for boundary in self.boundaries])
        )
        self.steps += 1
        self._metrics.append(
            {
                "step": self.steps,
                "mean_speed": float(
                    self.agents.select(
                        (pl.col("vel_x") ** 2 + pl.col("vel_y") ** 2).sqrt().mean()
                    ).item()
                    or 0.0
                ),
            }
        )

    def run(self, steps: int) -> None:
        for _ in range(steps):
            self.step()

    @property
    def metrics(self) -> pl.DataFrame:
        return pl.DataFrame(
            self._metrics, schema={"step": pl.Int64, "mean_speed": pl.Float64}
        )


def simulate(
    agents: int,
    steps: int,
    seed: int | None = None,
    backend: Literal["grid", "bruteforce"] = "grid",
) -> SimulationResult:
    model = GravitationModel(agents, seed=seed, backend=backend)
    model.run(steps)
    return SimulationResult(agents=model.agents, metrics=model.metrics)


app = typer.Typer(add_completion=False)


@app.command()
def run(
    agents: Annotated[int, typer.Option(help="Number of agents to simulate.")] = 1000,
    steps: Annotated[int, typer.Option(help="Number of model steps to run.")] = 100,
    seed: Annotated[int | None, typer.Option(help="Optional RNG seed.")] = None,
    backend: Annotated[
        str, typer.Option(help="Force computation: grid or bruteforce.")
    ] = "grid",
    results_dir: Annotated[
        Path | None,
        typer.Option(help="Directory to write the final agent frame into as CSV."),
    ] = None,
) -> None:
    if backend not in ("grid", "bruteforce"):
        raise typer.BadParameter("backend must be 'grid' or 'bruteforce'")
    typer.echo(
        f"Running gravitation model ({backend}) with {agents} agents for {steps} steps"
    )
    start_time = perf_counter()
    result = simulate(agents=agents, steps=steps, seed=seed, backend=backend)
    typer.echo(f"Simulation complete in {perf_counter() - start_time:.2f} seconds")
    typer.echo(f"Metrics in the final 5 steps: {result.metrics.tail(5)}")

    if results_dir is not None:
        results_dir.mkdir(parents=True, exist_ok=True)
        csv_path = results_dir / "agents.csv"
        result.agents.write_csv(csv_path)
        typer.echo(f"Saved final agent state to {csv_path}")


if __name__ == "__main__":
    app()
