"""Experiment Playground CLI - Main entry point."""

import logging

import typer
from typing_extensions import Annotated

app = typer.Typer(
    name="playground",
    help="Experiment Playground - inspect and manage experiment lifecycles",
    add_completion=True,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        from experiment_playground.cli.commands import console
        console.print("[bold]Experiment Playground[/bold] v0.1.0")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show lifecycle log messages"),
    ] = False,
) -> None:
    """Experiment Playground CLI."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Import commands after app is defined to avoid circular imports
from experiment_playground.cli.commands import (  # noqa: E402
    complete,
    destroy,
    info,
    list_experiments,
    validate,
)

app.command(name="list", help="List experiments and their lifecycle state")(list_experiments)
app.command(name="info", help="Show details of one experiment")(info)
app.command(name="complete", help="Mark an experiment completed")(complete)
app.command(name="destroy", help="Delete all persisted data of an experiment")(destroy)
app.command(name="validate", help="Validate a definition unit")(validate)


if __name__ == "__main__":
    app()
