"""Experiment type registry.

Maps snake_case type tags ("ab_test") to experiment classes. Each
concrete experiment kind registers itself with @register_type when its
module is imported.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, TypeVar

from experiment_playground.errors import UnknownExperimentTypeError

if TYPE_CHECKING:
    from experiment_playground.experiment.base import Experiment

E = TypeVar("E", bound="type[Experiment]")

_REGISTRY: dict[str, type[Experiment]] = {}


def type_tag(cls: type) -> str:
    """Snake-case tag for a class name.

    Examples:
        >>> type_tag(AbTest)
        'ab_test'
        >>> type_tag(HTTPFlag)
        'http_flag'
    """
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", cls.__name__)
    name = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", name)
    return name.lower()


def normalize_type(tag: str) -> str:
    """Normalize a user supplied tag ("AB-Test", "ab test") to snake_case."""
    return re.sub(r"[\s\-/]+", "_", str(tag).strip()).lower()


def register_type(cls: E) -> E:
    """Class decorator registering an experiment class under its tag."""
    tag = type_tag(cls)
    existing = _REGISTRY.get(tag)
    if existing is not None and existing is not cls:
        msg = f"Experiment type {tag!r} already registered by {existing.__qualname__}"
        raise ValueError(msg)
    _REGISTRY[tag] = cls
    return cls


def resolve_type(tag: str) -> type[Experiment]:
    """Look up the experiment class for a type tag.

    Raises:
        UnknownExperimentTypeError: If no class is registered for the tag.
    """
    normalized = normalize_type(tag)
    try:
        return _REGISTRY[normalized]
    except KeyError:
        known = ", ".join(sorted(_REGISTRY)) or "none"
        msg = f"Unknown experiment type {tag!r} (known types: {known})"
        raise UnknownExperimentTypeError(msg) from None


def registered_types() -> list[str]:
    """Sorted list of registered type tags."""
    return sorted(_REGISTRY)
