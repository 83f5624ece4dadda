"""Command line interface.

Components:
    - app: Typer app with list, info, complete, destroy and validate

Example:
    $ playground list --config playground.yaml
    $ playground complete signup_button --config playground.yaml
"""

from experiment_playground.cli.main import app

__all__ = [
    "app",
]
