"""Identity resolution for experiment participants.

The host application sets the current context (typically a request or
session object) for the duration of a call. Experiments ask the context
for a stable identity to bucket the subject.

Example:
    >>> class Request:
    ...     def __init__(self, user_id):
    ...         self.user_id = user_id
    ...     def experiment_identity(self):
    ...         return self.user_id
    >>> with use_context(Request("user_42")):
    ...     default_identify(current_context())
    'user_42'
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Protocol, runtime_checkable

from experiment_playground.errors import IdentityResolutionError

_current_context: ContextVar[Any] = ContextVar("experiment_context", default=None)


@runtime_checkable
class IdentityProvider(Protocol):
    """Context object able to identify the current subject."""

    def experiment_identity(self) -> Any:
        """Return a stable identity for the current subject."""
        ...


def current_context() -> Any:
    """Context set by the host application, or None."""
    return _current_context.get()


def set_context(context: Any) -> None:
    """Set the current context for this thread/task."""
    _current_context.set(context)


@contextmanager
def use_context(context: Any) -> Iterator[Any]:
    """Set the current context for the duration of a with block."""
    token = _current_context.set(context)
    try:
        yield context
    finally:
        _current_context.reset(token)


def default_identify(context: Any) -> Any:
    """Resolve an identity from context.experiment_identity().

    Raises:
        IdentityResolutionError: If there is no context, the context has
            no experiment_identity accessor, or it returns an empty value.
    """
    if context is None:
        raise IdentityResolutionError("No experiment context set")
    accessor = getattr(context, "experiment_identity", None)
    if not callable(accessor):
        raise IdentityResolutionError(
            f"Context {type(context).__name__} does not provide experiment_identity"
        )
    identity = accessor()
    if identity is None or identity == "":
        raise IdentityResolutionError("Context experiment_identity returned no identity")
    return identity
