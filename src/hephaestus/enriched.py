"""Errors that carry labeled state snapshots and a history of prior errors."""

from __future__ import annotations

import copy
from dataclasses import dataclass
import time
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, TypeVar

from hephaestus.errors import CheckedError, kinds_of
from hephaestus.option import Option, absent, present

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    ErrorKind = type[BaseException] | str

E = TypeVar("E", bound="EnrichedError")

DEFAULT_LABEL = "default"


@dataclass(frozen=True)
class StateSnapshot:
    """A value saved on an error, with the time it was saved."""

    timestamp: float
    value: Any


def matches_kind(error: BaseException, kind: ErrorKind) -> bool:
    """Return True when *error* is of *kind*.

    A class matches by ``isinstance``; a string matches the kind identifier of
    the error's class or any of its bases.
    """
    if isinstance(kind, type):
        return isinstance(error, kind)
    return kind in kinds_of(error)


def _owned_copy(value: Any) -> Any:
    try:
        return copy.deepcopy(value)
    except Exception:
        # Uncopyable or hostile values (locks, proxies, very deep nesting)
        # are kept by reference; saving state never raises.
        return value


class EnrichedError(CheckedError):
    """Error with a causal history and labeled state snapshots.

    Constructing with a *cause* chains it (``__cause__``) and records it as the
    first history entry. Mutators return ``self`` so calls can be chained::

        raise (
            EnrichedError("sync failed", cause=exc)
            .save_state({"batch": batch_id}, "input")
            .add_to_history(previous)
        )

    Instances are mutated in place and are not safe for concurrent mutation.
    """

    kind = "hephaestus.EnrichedError"

    def __init__(
        self,
        message: str = "",
        code: int = 0,
        cause: BaseException | None = None,
        *,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.code = code
        self._states: dict[str, StateSnapshot] = {}
        self._history: list[BaseException] = []
        if cause is not None:
            self.__cause__ = cause
            self.add_to_history(cause)

    @property
    def cause(self) -> BaseException | None:
        """The error this one was constructed from, if any."""
        return self.__cause__

    # --- State snapshots ---

    def save_state(self: E, value: Any, label: str = DEFAULT_LABEL) -> E:
        """Store a copy of *value* under *label*, replacing any previous entry."""
        # Overwriting keeps the label at its original position.
        self._states[label] = StateSnapshot(
            timestamp=time.time(), value=_owned_copy(value)
        )
        return self

    def get_state(self, label: str = DEFAULT_LABEL) -> Option[Any]:
        snapshot = self._states.get(label)
        if snapshot is None:
            return absent()
        return present(snapshot.value)

    def get_all_states(self) -> Mapping[str, StateSnapshot]:
        """Read-only view of every saved state, in insertion order."""
        return MappingProxyType(dict(self._states))

    # --- Error history ---

    def add_to_history(self: E, error: BaseException) -> E:
        self._history.append(error)
        return self

    def with_history(self: E, errors: Iterable[BaseException]) -> E:
        """Append each error in order, as repeated :meth:`add_to_history`."""
        for error in errors:
            self.add_to_history(error)
        return self

    def get_history(self) -> tuple[BaseException, ...]:
        """Recorded errors, oldest first."""
        return tuple(self._history)

    def get_last_error(self) -> Option[BaseException]:
        if not self._history:
            return absent()
        return present(self._history[-1])

    def has_error_of_kind(self, kind: ErrorKind) -> bool:
        return any(matches_kind(error, kind) for error in self._history)

    def get_errors_of_kind(self, kind: ErrorKind) -> list[BaseException]:
        return [error for error in self._history if matches_kind(error, kind)]

    def clear_history(self: E) -> E:
        """Drop every saved state and recorded error."""
        self._states.clear()
        self._history.clear()
        return self
