"""Experiment types.

Components:
    - Experiment: Base class holding the shared lifecycle
    - ExperimentState: Lifecycle states reported by Experiment.state()
    - AbTest: Hash-assigned A/B test (type tag "ab_test")
    - register_type / resolve_type: Type tag registry

Importing this package registers the built-in types.
"""

from experiment_playground.experiment.ab_test import AbTest
from experiment_playground.experiment.base import Experiment, ExperimentState
from experiment_playground.experiment.types import (
    normalize_type,
    register_type,
    registered_types,
    resolve_type,
    type_tag,
)

__all__ = [
    "Experiment",
    "ExperimentState",
    "AbTest",
    "register_type",
    "resolve_type",
    "registered_types",
    "normalize_type",
    "type_tag",
]
