"""Definition unit loading.

A definition unit is a YAML file declaring exactly one experiment:

    name: Signup Button
    type: ab_test
    requires: [pricing_banner]
    description: Big green signup button
    alternatives: [red, green]
    complete_if: myapp.rules:enough_signups

The file is parsed with yaml.safe_load, so no code from the unit runs.
The loader turns it into an explicit (name, type, options, configure)
tuple and hands that to a DefinitionBuilder bound to the playground and
the experiment id. The builder's only capability is define().

Callables (identify, complete_if) are referenced as "module:attribute"
import paths. A complete_if callable receives the experiment as its only
argument.
"""

from __future__ import annotations

import functools
import importlib
import re
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from experiment_playground.errors import (
    CircularDependencyError,
    DefinitionError,
    DuplicateDefinitionError,
    MissingDefinitionError,
)
from experiment_playground.experiment import resolve_type

if TYPE_CHECKING:
    from experiment_playground.experiment import Experiment
    from experiment_playground.playground import Playground

    Configurator = Callable[[Experiment], Any]

# Keys consumed by the loader itself; everything else configures the experiment
_RESERVED_KEYS = frozenset({"id", "name", "type", "options", "requires"})

# Definition keys whose values are import paths to callables
_CALLABLE_KEYS = frozenset({"identify", "complete_if"})


def experiment_id_for(value: str | Path) -> str:
    """Normalize a unit file name (or explicit id) to an experiment id.

    Examples:
        >>> experiment_id_for(Path("experiments/Signup Button.yaml"))
        'signup_button'
        >>> experiment_id_for("price-options")
        'price_options'
    """
    stem = Path(value).stem if isinstance(value, Path) else str(value)
    return re.sub(r"\W", "_", stem.lower())


def resolve_callable(path: str) -> Callable[..., Any]:
    """Import a callable from a "package.module:attribute" path.

    Raises:
        ValueError: If the path is malformed or does not name a callable.
        ImportError: If the module cannot be imported.
    """
    if callable(path):
        return path
    module_name, sep, attr_path = str(path).partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"Expected 'module:attribute' import path, got {path!r}")
    target: Any = importlib.import_module(module_name)
    for attr in attr_path.split("."):
        try:
            target = getattr(target, attr)
        except AttributeError:
            raise ValueError(f"{module_name!r} has no attribute {attr_path!r}") from None
    if not callable(target):
        raise ValueError(f"{path!r} is not callable")
    return target


class DefinitionBuilder:
    """Evaluation context for one definition unit.

    Bound to a playground and the id the unit must define. Exposes a
    single capability, define().
    """

    def __init__(self, playground: Playground, experiment_id: str) -> None:
        self._playground = playground
        self._experiment_id = experiment_id

    @property
    def experiment_id(self) -> str:
        return self._experiment_id

    def define(
        self,
        name: str,
        type: str,
        options: Mapping[str, Any] | None = None,
        configure: Configurator | None = None,
    ) -> Experiment:
        """Create, configure, save and register the experiment.

        Raises:
            DuplicateDefinitionError: If the id is already registered.
            UnknownExperimentTypeError: If type has no registered class.
        """
        experiments = self._playground.experiments
        if self._experiment_id in experiments:
            raise DuplicateDefinitionError(
                f"Experiment {self._experiment_id} already defined in playground",
                self._experiment_id,
            )
        cls = resolve_type(type)
        experiment = cls(
            self._playground, self._experiment_id, name, dict(options or {})
        )
        if configure is not None:
            configure(experiment)
        experiment.save()
        experiments[self._experiment_id] = experiment
        return experiment


def configurator_for(settings: Mapping[str, Any]) -> Configurator:
    """Build a configure(experiment) function from definition keys.

    Each key is applied by calling the experiment's method of the same
    name. Unknown keys raise ValueError.
    """

    def configure(experiment: Experiment) -> None:
        unknown = set(settings) - experiment.DEFINITION_KEYS
        if unknown:
            msg = (
                f"Unknown definition keys for {experiment.type}: {sorted(unknown)}. "
                f"Allowed: {sorted(experiment.DEFINITION_KEYS)}"
            )
            raise ValueError(msg)
        for key, value in settings.items():
            if key in _CALLABLE_KEYS:
                value = resolve_callable(value)
                if key == "complete_if":
                    value = functools.partial(value, experiment)
            getattr(experiment, key)(value)

    return configure


def parse_unit(
    path: Path, experiment_id: str | None = None
) -> tuple[str, dict[str, Any]]:
    """Read a unit file, returning (experiment id, parsed mapping).

    Raises:
        FileNotFoundError: If the unit does not exist.
        MissingDefinitionError: If the unit is empty or not a mapping.
    """
    if not path.exists():
        raise FileNotFoundError(f"Definition unit not found: {path}")
    with open(path) as f:
        data = yaml.safe_load(f)
    fallback_id = experiment_id_for(experiment_id) if experiment_id else experiment_id_for(path)
    if not isinstance(data, dict):
        raise MissingDefinitionError(
            f"Expected {path} to define experiment {fallback_id}", fallback_id, path
        )
    if experiment_id is None and data.get("id"):
        experiment_id = str(data["id"])
    return experiment_id_for(experiment_id) if experiment_id else fallback_id, data


def load_definition(
    playground: Playground,
    load_stack: list[Path],
    path: str | Path,
    experiment_id: str | None = None,
) -> Experiment:
    """Load one definition unit into the playground.

    Args:
        playground: Playground receiving the experiment.
        load_stack: Units currently being loaded, outermost first. Shared
            across nested loads to detect circular requires.
        path: Path to the YAML unit.
        experiment_id: Explicit id; defaults to the unit's ``id`` key or
            its normalized base name.

    Returns:
        The registered experiment.

    Raises:
        CircularDependencyError: If path is already being loaded.
        MissingDefinitionError: If the unit defines no experiment.
        DefinitionError: Wrapping any other failure, including one in a
            required unit, chained to the cause.
    """
    path = Path(path).resolve()
    current_id = experiment_id_for(experiment_id) if experiment_id else experiment_id_for(path)
    if path in load_stack:
        raise CircularDependencyError([*load_stack, path], current_id)
    load_stack.append(path)
    try:
        current_id, data = parse_unit(path, experiment_id)
        requires = data.get("requires") or []
        if isinstance(requires, str):
            requires = [requires]
        for required in requires:
            playground.experiment(experiment_id_for(str(required)), load_stack)

        if "name" not in data or "type" not in data:
            raise MissingDefinitionError(
                f"Expected {path} to define experiment {current_id} (name and type are required)",
                current_id,
                path,
            )

        settings = {k: v for k, v in data.items() if k not in _RESERVED_KEYS}
        builder = DefinitionBuilder(playground, current_id)
        builder.define(
            str(data["name"]),
            str(data["type"]),
            data.get("options"),
            configurator_for(settings),
        )

        experiment = playground.experiments.get(current_id)
        if experiment is None:
            raise MissingDefinitionError(
                f"Expected {path} to define experiment {current_id}", current_id, path
            )
        return experiment
    except DefinitionError as e:
        if e.experiment_id == current_id or isinstance(e, CircularDependencyError):
            raise
        # Failure in a required unit; report it against the unit being loaded
        raise DefinitionError(
            f"Failed to load experiment {current_id} from {path}: {e}", current_id, path
        ) from e
    except Exception as e:
        raise DefinitionError(
            f"Failed to load experiment {current_id} from {path}: {e}", current_id, path
        ) from e
    finally:
        load_stack.pop()
