"""Playground: the registry of experiments sharing a namespace and store.

Example:
    >>> from experiment_playground import Playground
    >>> from experiment_playground.store import MemoryStore
    >>> playground = Playground(MemoryStore(), load_path="experiments")
    >>> playground.load_experiments()
    {'signup_button': <AbTest id='signup_button' name='Signup Button'>}
    >>> playground.experiment("signup_button").is_active()
    True
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from experiment_playground.definition import (
    DefinitionBuilder,
    experiment_id_for,
    load_definition,
)
from experiment_playground.errors import DefinitionError
from experiment_playground.store import MemoryStore, RedisStore, StoreProtocol

if TYPE_CHECKING:
    from experiment_playground.config import PlaygroundConfig
    from experiment_playground.experiment import Experiment

DEFAULT_NAMESPACE = "playground"
DEFAULT_LOAD_PATH = Path("experiments")
UNIT_SUFFIXES = (".yaml", ".yml")


class Playground:
    """Owns all experiments sharing one namespace and one store.

    Attributes:
        namespace: Prefix for every store key.
        store: Store adapter shared by all experiments.
        load_path: Directory containing definition units.
        logger: Logger used by experiments for lifecycle messages.
        experiments: Mapping of experiment id to Experiment.
    """

    def __init__(
        self,
        store: StoreProtocol,
        namespace: str = DEFAULT_NAMESPACE,
        load_path: str | Path = DEFAULT_LOAD_PATH,
        logger: logging.Logger | None = None,
    ) -> None:
        self.store = store
        self.namespace = namespace
        self.load_path = Path(load_path)
        self.logger = logger or logging.getLogger("experiment_playground")
        self.experiments: dict[str, Experiment] = {}
        self._load_stack: list[Path] = []
        self._loaded_units: set[Path] = set()

    @classmethod
    def from_config(
        cls, config: PlaygroundConfig, logger: logging.Logger | None = None
    ) -> Playground:
        """Build a playground and its store from configuration."""
        store: StoreProtocol
        if config.store == "memory":
            store = MemoryStore()
        else:
            store = RedisStore.from_url(config.redis_url, config.socket_timeout)
        return cls(
            store,
            namespace=config.namespace,
            load_path=config.load_path,
            logger=logger,
        )

    def define(
        self,
        experiment_id: str,
        name: str,
        type: str,
        options: Mapping[str, Any] | None = None,
        configure: Callable[[Experiment], Any] | None = None,
    ) -> Experiment:
        """Define an experiment from code rather than a unit file.

        Raises:
            DuplicateDefinitionError: If the id is already registered.
        """
        builder = DefinitionBuilder(self, experiment_id_for(experiment_id))
        return builder.define(name, type, options, configure)

    def load(
        self,
        path: str | Path,
        experiment_id: str | None = None,
        load_stack: list[Path] | None = None,
    ) -> Experiment:
        """Load a single definition unit.

        load_stack is the stack of the load that required this unit, if any.
        """
        stack = self._load_stack if load_stack is None else load_stack
        experiment = load_definition(self, stack, path, experiment_id)
        self._loaded_units.add(Path(path).resolve())
        return experiment

    def unit_path(self, experiment_id: str) -> Path | None:
        """Definition unit for an id in load_path, if one exists."""
        for suffix in UNIT_SUFFIXES:
            candidate = self.load_path / f"{experiment_id}{suffix}"
            if candidate.exists():
                return candidate
        return None

    def experiment(
        self, experiment_id: str, load_stack: list[Path] | None = None
    ) -> Experiment:
        """Return an experiment, loading its unit from load_path if needed.

        Raises:
            DefinitionError: If the experiment is not defined and no unit
                exists for it.
        """
        experiment_id = experiment_id_for(experiment_id)
        experiment = self.experiments.get(experiment_id)
        if experiment is not None:
            return experiment
        path = self.unit_path(experiment_id)
        if path is None:
            raise DefinitionError(
                f"No experiment {experiment_id} (no definition in {self.load_path})",
                experiment_id,
            )
        return self.load(path, experiment_id, load_stack)

    def unit_paths(self) -> list[Path]:
        """All definition units in load_path, sorted by name."""
        if not self.load_path.is_dir():
            return []
        return sorted(
            p for p in self.load_path.iterdir() if p.is_file() and p.suffix in UNIT_SUFFIXES
        )

    def load_experiments(self) -> dict[str, Experiment]:
        """Load every unit in load_path not already loaded.

        Units pulled in earlier through ``requires`` are skipped.
        """
        for path in self.unit_paths():
            if path.resolve() in self._loaded_units:
                continue
            if experiment_id_for(path) not in self.experiments:
                self.load(path)
        return self.experiments

    def reload(self) -> dict[str, Experiment]:
        """Forget all experiments and load them again from load_path."""
        self.experiments.clear()
        self._loaded_units.clear()
        self.logger.info("reloading experiments from %s", self.load_path)
        return self.load_experiments()
