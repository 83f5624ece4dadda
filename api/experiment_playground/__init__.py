"""Experiment playground.

Declare A/B tests in YAML definition units, load them at startup and
track each experiment's lifecycle in a shared key-value store.

Submodules:
    playground: Registry of experiments sharing a namespace and store
    definition: Definition unit loader
    experiment: Experiment base class and built-in types
    store: Store adapters (Redis, in-memory)
    identity: Per-call identity context
    config: YAML configuration
    cli: Typer command line interface
"""

from experiment_playground.errors import (
    CircularDependencyError,
    DefinitionError,
    DuplicateDefinitionError,
    IdentityResolutionError,
    MissingDefinitionError,
    StoreUnavailableError,
    UnknownExperimentTypeError,
)
from experiment_playground.experiment import AbTest, Experiment, ExperimentState
from experiment_playground.identity import use_context
from experiment_playground.playground import Playground

__all__: list[str] = [
    "Playground",
    "Experiment",
    "ExperimentState",
    "AbTest",
    "use_context",
    "DefinitionError",
    "DuplicateDefinitionError",
    "CircularDependencyError",
    "MissingDefinitionError",
    "IdentityResolutionError",
    "StoreUnavailableError",
    "UnknownExperimentTypeError",
]
