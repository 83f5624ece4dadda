"""Exception types raised by the playground.

Loader failures all derive from DefinitionError, which is a NameError
carrying the experiment id and the definition unit path. Store outages
are signalled by StoreUnavailableError inside the store adapters only;
experiments turn them into logged no-ops.
"""

from __future__ import annotations

from pathlib import Path


class DefinitionError(NameError):
    """An experiment definition could not be loaded.

    Attributes:
        experiment_id: Id of the experiment being defined.
        path: Definition unit path (None for programmatic definitions).
    """

    def __init__(
        self,
        message: str,
        experiment_id: str | None = None,
        path: Path | str | None = None,
    ) -> None:
        super().__init__(message)
        self.experiment_id = experiment_id
        self.path = Path(path) if path is not None else None


class DuplicateDefinitionError(DefinitionError):
    """Experiment id already defined in the playground."""


class CircularDependencyError(DefinitionError):
    """A definition unit transitively requires itself."""

    def __init__(
        self,
        chain: list[Path],
        experiment_id: str | None = None,
    ) -> None:
        self.chain = list(chain)
        message = "Circular dependency detected: " + "=>".join(
            str(p) for p in self.chain
        )
        super().__init__(message, experiment_id, self.chain[-1])


class MissingDefinitionError(DefinitionError):
    """A unit was evaluated but did not define its experiment."""


class UnknownExperimentTypeError(LookupError):
    """No experiment class registered for a type tag."""


class IdentityResolutionError(RuntimeError):
    """No identity could be obtained for the current context."""


class StoreUnavailableError(ConnectionError):
    """The backing key-value store cannot be reached."""
