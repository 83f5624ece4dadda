"""Experiment lifecycle CLI commands.

Provides list, info, complete, destroy and validate commands operating
on the experiments defined in the configured load path.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich.console import Console
from rich.table import Table

from experiment_playground.config import PlaygroundConfig, load_config
from experiment_playground.errors import DefinitionError
from experiment_playground.experiment import Experiment, ExperimentState
from experiment_playground.playground import Playground
from experiment_playground.store import MemoryStore

console = Console()

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to playground YAML configuration"),
]

_STATE_STYLES = {
    ExperimentState.ACTIVE: "green",
    ExperimentState.COMPLETED: "blue",
    ExperimentState.UNPERSISTED: "yellow",
    ExperimentState.UNKNOWN: "red",
}


def _build_playground(config_path: Path | None) -> Playground:
    """Load configuration and build the playground, exiting on error."""
    try:
        config = load_config(config_path) if config_path else PlaygroundConfig()
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        raise typer.Exit(1) from e
    return Playground.from_config(config)


def _get_experiment(playground: Playground, experiment_id: str) -> Experiment:
    try:
        return playground.experiment(experiment_id)
    except DefinitionError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from e


def _format_time(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S") if value else "-"


def _format_state(state: ExperimentState) -> str:
    style = _STATE_STYLES[state]
    return f"[{style}]{state.value}[/{style}]"


def list_experiments(config: ConfigOption = None) -> None:
    """List all experiments defined in the load path.

    Examples:
        playground list
        playground list --config playground.yaml
    """
    playground = _build_playground(config)
    try:
        experiments = playground.load_experiments()
    except DefinitionError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from e

    if not experiments:
        console.print(f"[yellow]No experiments found in {playground.load_path}[/yellow]")
        return

    table = Table(title="Experiments")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Created")
    table.add_column("Completed")
    table.add_column("State")

    for experiment_id in sorted(experiments):
        experiment = experiments[experiment_id]
        table.add_row(
            experiment.id,
            experiment.name,
            experiment.type,
            _format_time(experiment.created_at),
            _format_time(experiment.completed_at),
            _format_state(experiment.state()),
        )

    console.print(table)


def info(
    experiment_id: Annotated[str, typer.Argument(help="Experiment ID")],
    config: ConfigOption = None,
) -> None:
    """Show details of one experiment."""
    playground = _build_playground(config)
    experiment = _get_experiment(playground, experiment_id)

    console.print(f"[bold]{experiment.name}[/bold] ({experiment.id})")
    console.print(f"  Type:        {experiment.type}")
    console.print(f"  Description: {experiment.description() or '-'}")
    console.print(f"  Namespace:   {experiment.namespace}")
    console.print(f"  Created:     {_format_time(experiment.created_at)}")
    console.print(f"  Completed:   {_format_time(experiment.completed_at)}")
    console.print(f"  State:       {_format_state(experiment.state())}")
    if experiment.options:
        console.print(f"  Options:     {experiment.options}")


def complete(
    experiment_id: Annotated[str, typer.Argument(help="Experiment ID")],
    config: ConfigOption = None,
) -> None:
    """Mark an experiment completed."""
    playground = _build_playground(config)
    experiment = _get_experiment(playground, experiment_id)
    if not experiment.complete():
        console.print(f"[red]Failed to complete {experiment.id}: store unavailable[/red]")
        raise typer.Exit(1)
    console.print(
        f"[green]Completed {experiment.id} at {_format_time(experiment.completed_at)}[/green]"
    )


def destroy(
    experiment_id: Annotated[str, typer.Argument(help="Experiment ID")],
    config: ConfigOption = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Do not ask for confirmation"),
    ] = False,
) -> None:
    """Delete all persisted data of an experiment."""
    playground = _build_playground(config)
    experiment = _get_experiment(playground, experiment_id)
    if not yes and not typer.confirm(f"Destroy all data for {experiment.id}?"):
        raise typer.Exit(1)
    if not experiment.destroy():
        console.print(f"[red]Failed to destroy {experiment.id}: store unavailable[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Destroyed {experiment.id}[/green]")


def validate(
    unit_path: Annotated[Path, typer.Argument(help="Path to definition unit YAML")],
) -> None:
    """Validate a definition unit without touching the shared store.

    Units it requires are looked up next to it.
    """
    if not unit_path.exists():
        console.print(f"[red]Definition unit not found: {unit_path}[/red]")
        raise typer.Exit(1)

    playground = Playground(MemoryStore(), load_path=unit_path.parent)
    try:
        experiment = playground.load(unit_path)
    except DefinitionError as e:
        console.print(f"[red]Invalid definition: {e}[/red]")
        if e.__cause__ is not None:
            console.print(f"[red]  Caused by: {e.__cause__!r}[/red]")
        raise typer.Exit(1) from e

    console.print(
        f"[green]Definition is valid: {experiment.id} "
        f"({experiment.type}, {experiment.name!r})[/green]"
    )
