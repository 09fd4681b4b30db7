"""Option: an immutable present/absent container.

``Option`` has exactly two variants, :class:`Present` and :class:`Absent`.
``Present(None)`` is still a present value; absence is only ever spelled
``Absent``. Combinators never mutate, they return new instances, and they
never catch exceptions raised by the callables passed to them.

Both variants are dataclasses, so structural pattern matching works too::

    match opt:
        case Present(value):
            ...
        case Absent():
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from hephaestus.errors import EmptyUnwrapError

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")


class Option(ABC, Generic[T]):
    """Base class for the two Option variants."""

    @staticmethod
    def present(value: T) -> Option[T]:
        """Wrap *value* in :class:`Present`."""
        return Present(value)

    @staticmethod
    def absent() -> Option[Any]:
        """Return the shared :class:`Absent` instance."""
        return _ABSENT

    @staticmethod
    def from_nullable(value: T | None) -> Option[T]:
        """``Absent`` for ``None``, ``Present(value)`` for anything else."""
        return _ABSENT if value is None else Present(value)

    @abstractmethod
    def is_present(self) -> bool:
        """True for :class:`Present`."""

    @abstractmethod
    def is_absent(self) -> bool:
        """True for :class:`Absent`."""

    @abstractmethod
    def unwrap(self) -> T:
        """Return the wrapped value.

        Raises:
            EmptyUnwrapError: If called on :class:`Absent`.
        """

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        """Return the wrapped value, or *default* when absent."""

    @abstractmethod
    def get_or_else_with(self, supplier: Callable[[], T]) -> T:
        """Like :meth:`get_or_else`, but only calls *supplier* when absent."""

    @abstractmethod
    def map(self, fn: Callable[[T], U]) -> Option[U]:
        """Apply *fn* to a present value; absent stays absent."""

    @abstractmethod
    def filter(self, predicate: Callable[[T], bool]) -> Option[T]:
        """Keep a present value only when *predicate* holds for it."""

    @abstractmethod
    def match(self, on_present: Callable[[T], R], on_absent: Callable[[], R]) -> R:
        """Call exactly one of the two branches and return its result."""


@dataclass(frozen=True)
class Present(Option[T]):
    """A present value."""

    value: T

    def is_present(self) -> bool:
        return True

    def is_absent(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def get_or_else(self, default: T) -> T:
        del default
        return self.value

    def get_or_else_with(self, supplier: Callable[[], T]) -> T:
        del supplier
        return self.value

    def map(self, fn: Callable[[T], U]) -> Option[U]:
        return Present(fn(self.value))

    def filter(self, predicate: Callable[[T], bool]) -> Option[T]:
        return self if predicate(self.value) else _ABSENT

    def match(self, on_present: Callable[[T], R], on_absent: Callable[[], R]) -> R:
        del on_absent
        return on_present(self.value)


@dataclass(frozen=True)
class Absent(Option[Any]):
    """The absence of a value."""

    def is_present(self) -> bool:
        return False

    def is_absent(self) -> bool:
        return True

    def unwrap(self) -> Any:
        raise EmptyUnwrapError("Called unwrap on an absent value")

    def get_or_else(self, default: T) -> T:
        return default

    def get_or_else_with(self, supplier: Callable[[], T]) -> T:
        return supplier()

    def map(self, fn: Callable[[Any], U]) -> Option[U]:
        del fn
        return self

    def filter(self, predicate: Callable[[Any], bool]) -> Option[Any]:
        del predicate
        return self

    def match(self, on_present: Callable[[Any], R], on_absent: Callable[[], R]) -> R:
        del on_present
        return on_absent()


_ABSENT: Absent = Absent()


def present(value: T) -> Option[T]:
    """Module-level shorthand for :meth:`Option.present`."""
    return Present(value)


def absent() -> Option[Any]:
    """Module-level shorthand for :meth:`Option.absent`."""
    return _ABSENT


def from_nullable(value: T | None) -> Option[T]:
    """Module-level shorthand for :meth:`Option.from_nullable`."""
    return Option.from_nullable(value)
