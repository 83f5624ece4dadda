"""Experiment base class and lifecycle state machine.

Every experiment type derives from Experiment. The base class owns the
lifecycle shared by all types:

    UNPERSISTED --save()--> ACTIVE --complete()--> COMPLETED
         ^                                            |
         +------------------destroy()-----------------+

Timestamps live in the shared store as integer epoch seconds under
``<namespace>:<id>:created_at`` and ``<namespace>:<id>:completed_at``.
Both are written with set-if-absent, so concurrent processes converge on
the first accepted write. completed_at is read from the store on every
call, so a completion or destroy by another process is seen at once.

An unreachable store never raises out of a lifecycle call: the operation
is logged and returns False (writes) or None/False (reads).
"""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

from experiment_playground.errors import StoreUnavailableError
from experiment_playground.experiment.types import type_tag
from experiment_playground.identity import current_context, default_identify

if TYPE_CHECKING:
    import logging

    from experiment_playground.playground import Playground
    from experiment_playground.store import StoreProtocol

T = TypeVar("T")


class ExperimentState(str, Enum):
    """Lifecycle state as reported by the store."""

    UNPERSISTED = "unpersisted"
    ACTIVE = "active"
    COMPLETED = "completed"
    # Store unreachable; state cannot be determined
    UNKNOWN = "unknown"


def _now() -> int:
    return int(time.time())


def _from_epoch(value: str | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromtimestamp(int(value), tz=timezone.utc)


class Experiment:
    """Base class for all experiment types.

    Subclasses register with @register_type and add their own definition
    methods (listed in DEFINITION_KEYS) and participant tracking. After
    any state change that could finish the experiment they call
    _check_completion().

    Example:
        >>> experiment = playground.define(
        ...     "signup_button", "Signup Button", "ab_test",
        ...     configure=lambda e: e.description("Big green button"),
        ... )
        >>> experiment.type
        'ab_test'
        >>> experiment.is_active()
        True

    Attributes:
        name: Human readable experiment name.
        options: Opaque options supplied at definition time.
    """

    # Keys a definition unit may set on this experiment type
    DEFINITION_KEYS: ClassVar[frozenset[str]] = frozenset(
        {"description", "identify", "complete_if"}
    )

    def __init__(
        self,
        playground: Playground,
        experiment_id: str,
        name: str,
        options: dict[str, Any] | None = None,
    ) -> None:
        self._playground = playground
        self._id = str(experiment_id)
        self.name = name
        self.options: dict[str, Any] = dict(options or {})
        self._namespace = f"{playground.namespace}:{self._id}"
        self._identify_fn: Callable[[Any], Any] = default_identify
        self._complete_fn: Callable[[], Any] | None = None
        self._description: str | None = None
        self._created_at: datetime | None = None
        self._completed_at: datetime | None = None

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self._id!r} name={self.name!r}>"

    @property
    def id(self) -> str:
        """Unique identifier within the playground."""
        return self._id

    @property
    def namespace(self) -> str:
        """Key prefix for everything this experiment stores."""
        return self._namespace

    @property
    def type(self) -> str:
        """Type tag of this experiment (e.g. 'ab_test')."""
        return type_tag(type(self))

    @property
    def playground(self) -> Playground:
        return self._playground

    @property
    def logger(self) -> logging.Logger:
        return self._playground.logger

    # -- Definition --

    def identify(self, fn: Callable[[Any], Any] | None = None) -> None:
        """Use fn(context) instead of the default identity resolver.

        Raises:
            ValueError: If fn is missing or not callable.
        """
        if fn is None or not callable(fn):
            raise ValueError("identify requires a callable")
        self._identify_fn = fn

    def description(self, text: str | None = None) -> str | None:
        """Set (when text is given) and return the description."""
        if text is not None:
            self._description = text
        return self._description

    def complete_if(self, fn: Callable[[], Any] | None = None) -> None:
        """Install the completion predicate.

        The predicate takes no arguments and is evaluated by
        _check_completion(); a truthy result completes the experiment.

        Raises:
            ValueError: If fn is missing or not callable.
            RuntimeError: If a predicate is already installed.
        """
        if fn is None or not callable(fn):
            raise ValueError("complete_if requires a callable")
        if self._complete_fn is not None:
            raise RuntimeError(f"complete_if already called on experiment {self._id}")
        self._complete_fn = fn

    # -- Lifecycle --

    @property
    def created_at(self) -> datetime | None:
        """Creation time as accepted by the store, once saved."""
        return self._created_at

    @property
    def completed_at(self) -> datetime | None:
        """Completion time, or None while active or if the store is down."""

        def read(store: StoreProtocol) -> datetime | None:
            self._completed_at = _from_epoch(store.get(self.key("completed_at")))
            return self._completed_at

        return self._with_store("read completion of", read, None, quiet=True)

    def is_active(self) -> bool:
        """True while not completed. False when the store is down."""
        return self._with_store(
            "check",
            lambda store: not store.exists(self.key("completed_at")),
            False,
            quiet=True,
        )

    def state(self) -> ExperimentState:
        """Lifecycle state, reporting UNKNOWN instead of inactive on outage."""

        def read(store: StoreProtocol) -> ExperimentState:
            if store.exists(self.key("completed_at")):
                return ExperimentState.COMPLETED
            if store.exists(self.key("created_at")):
                return ExperimentState.ACTIVE
            return ExperimentState.UNPERSISTED

        return self._with_store("read state of", read, ExperimentState.UNKNOWN, quiet=True)

    def save(self) -> bool:
        """Persist the creation time unless another writer already did.

        Returns:
            True if the store was reachable, False otherwise.
        """

        def write(store: StoreProtocol) -> bool:
            key = self.key("created_at")
            store.set_if_absent(key, _now())
            self._created_at = _from_epoch(store.get(key))
            return True

        return self._with_store("save", write, False)

    def complete(self) -> bool:
        """Mark the experiment completed. Idempotent.

        Returns:
            True if the store was reachable, False otherwise.
        """

        def write(store: StoreProtocol) -> bool:
            key = self.key("completed_at")
            if store.set_if_absent(key, _now()):
                self.logger.info(
                    "completed experiment %s", self._id, extra={"experiment_id": self._id}
                )
            else:
                self.logger.debug(
                    "experiment %s already completed", self._id, extra={"experiment_id": self._id}
                )
            self._completed_at = _from_epoch(store.get(key))
            return True

        return self._with_store("complete", write, False)

    def destroy(self) -> bool:
        """Remove all persisted data, returning to UNPERSISTED.

        Returns:
            True if the store was reachable, False otherwise.
        """

        def delete(store: StoreProtocol) -> bool:
            store.delete(*self._persisted_keys())
            self._created_at = None
            self._completed_at = None
            return True

        return self._with_store("destroy", delete, False)

    # -- Helpers for subclasses --

    def key(self, suffix: str | None = None) -> str:
        """Store key in this experiment's namespace.

        Examples:
            >>> experiment.key()
            'playground:green_button'
            >>> experiment.key("participants")
            'playground:green_button:participants'
        """
        return f"{self._namespace}:{suffix}" if suffix else self._namespace

    def _persisted_keys(self) -> list[str]:
        """Keys removed by destroy(). Subclasses extend this."""
        return [self.key("created_at"), self.key("completed_at")]

    def _identity(self) -> Any:
        """Identity of the subject in the current context.

        Raises:
            IdentityResolutionError: From the default resolver when no
                usable context is set.
        """
        return self._identify_fn(current_context())

    def _check_completion(self) -> bool:
        """Complete the experiment if the completion predicate holds.

        Predicate errors are logged and swallowed so a failing check never
        breaks the caller.

        Returns:
            True if this call completed the experiment.
        """
        if self._complete_fn is None:
            return False
        try:
            done = self._complete_fn()
        except Exception:
            self.logger.warning(
                "completion check failed for experiment %s",
                self._id,
                exc_info=True,
                extra={"experiment_id": self._id},
            )
            return False
        if not done:
            return False
        return self.complete()

    def _with_store(
        self,
        action: str,
        fn: Callable[[StoreProtocol], T],
        default: T,
        quiet: bool = False,
    ) -> T:
        """Run fn against the store, degrading to default when unreachable."""
        store = self._playground.store
        try:
            if store.connected:
                return fn(store)
            reason = "store not connected"
        except StoreUnavailableError as e:
            reason = str(e)
        log = self.logger.debug if quiet else self.logger.warning
        log(
            "failed to %s experiment %s - %s",
            action,
            self._id,
            reason,
            extra={"experiment_id": self._id},
        )
        return default
