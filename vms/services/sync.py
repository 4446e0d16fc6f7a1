"""Local view state kept in step with a remote collection.

``ViewState`` holds the copy of a list or record that a page renders. Reads
replace it wholesale; writes go through ``mutate`` which applies the local
change first (so the page reflects the action straight away), then performs
the remote write, and restores the previous value if the write fails.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Generic, Hashable, TypeVar

from flask import current_app, has_app_context

T = TypeVar("T")

Listener = Callable[[Any], None]

_fallback_logger = logging.getLogger(__name__)


def _logger() -> logging.Logger:
    return current_app.logger if has_app_context() else _fallback_logger


class MutationState(Enum):
    PENDING = "pending"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class MutationInProgress(RuntimeError):
    """A write for the same entity has not settled yet."""

    def __init__(self, key: Hashable):
        super().__init__(f"A change to {key!r} is already in progress")
        self.key = key


@dataclass
class Mutation:
    key: Hashable
    state: MutationState = MutationState.PENDING
    result: Any = None
    error: Exception | None = None

    @property
    def committed(self) -> bool:
        return self.state is MutationState.COMMITTED

    @property
    def rolled_back(self) -> bool:
        return self.state is MutationState.ROLLED_BACK


@dataclass
class ViewState(Generic[T]):
    value: T
    name: str = "view"
    loaded: bool = False
    last_error: Exception | None = None
    _pending: dict[Hashable, Mutation] = field(default_factory=dict, repr=False)
    _listeners: list[Listener] = field(default_factory=list, repr=False)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(value)`` on every change; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, value: T) -> None:
        self.value = value
        for listener in list(self._listeners):
            listener(value)

    def load(self, query: Callable[[], T]) -> bool:
        """Replace the local copy with ``query()``; keep it untouched on failure."""
        try:
            value = query()
        except Exception as exc:
            self.last_error = exc
            _logger().warning(f"Failed to load {self.name}: {exc}")
            return False
        self.last_error = None
        self.loaded = True
        self._set(value)
        return True

    def is_pending(self, key: Hashable) -> bool:
        return key in self._pending

    def mutate(
        self,
        key: Hashable,
        local_update: Callable[[T], T],
        remote_write: Callable[[], Any],
    ) -> Mutation:
        """Apply ``local_update`` now, then ``remote_write``; roll back if it raises.

        Errors from ``remote_write`` are captured on the returned mutation
        rather than raised, so callers decide how to tell the user.
        """
        if key in self._pending:
            raise MutationInProgress(key)

        mutation = Mutation(key=key)
        self._pending[key] = mutation
        snapshot = self.value
        try:
            self._set(local_update(snapshot))
            try:
                mutation.result = remote_write()
            except Exception as exc:
                mutation.error = exc
                mutation.state = MutationState.ROLLED_BACK
                self._set(snapshot)
                _logger().error(f"Rolled back change to {self.name} ({key}): {exc}")
            else:
                mutation.state = MutationState.COMMITTED
        finally:
            self._pending.pop(key, None)
        return mutation


__all__ = ["Mutation", "MutationInProgress", "MutationState", "ViewState"]
