"""Exception hierarchy for Hephaestus."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from collections.abc import Iterator


def _qualified_name(cls: type) -> str:
    module = cls.__module__
    if module == "builtins":
        return cls.__qualname__
    return f"{module}.{cls.__qualname__}"


def error_kind(exc: BaseException | type[BaseException]) -> str:
    """Return the stable kind identifier for an exception or exception type.

    Library errors carry an explicit ``kind`` class attribute; everything else
    falls back to the fully-qualified class name (builtins stay unqualified,
    e.g. ``"ValueError"``).
    """
    cls = exc if isinstance(exc, type) else type(exc)
    kind = cls.__dict__.get("kind")
    if isinstance(kind, str):
        return kind
    return _qualified_name(cls)


def kinds_of(exc: BaseException | type[BaseException]) -> list[str]:
    """Kinds of the exception's class and its bases, nearest first."""
    cls = exc if isinstance(exc, type) else type(exc)
    return [
        error_kind(base)
        for base in cls.__mro__
        if isinstance(base, type) and issubclass(base, BaseException)
    ]


class HephaestusError(Exception):
    """Base exception for all Hephaestus errors."""

    kind: ClassVar[str] = "hephaestus.HephaestusError"

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        # Subclasses get their own identifier unless they declare one.
        if "kind" not in cls.__dict__:
            cls.kind = _qualified_name(cls)

    def __init__(self, message: str = "", *, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint

    def __str__(self) -> str:
        """Return the message, followed by the hint when one is set."""
        msg = super().__str__()
        return f"{msg}. {self.hint}" if self.hint else msg


class EmptyUnwrapError(HephaestusError):
    """``unwrap()`` was called on an absent Option."""

    kind = "hephaestus.EmptyUnwrapError"


class ConfigurationError(HephaestusError):
    """Configuration validation or resolution failed."""

    kind = "hephaestus.ConfigurationError"


class PatternFileError(HephaestusError):
    """The exception patterns file is missing or malformed."""

    kind = "hephaestus.PatternFileError"


class CheckedError(HephaestusError):
    """An expected, recoverable failure.

    ``with_checked_handling`` swallows these (and only these) after logging.
    """

    kind = "hephaestus.CheckedError"


class RetriesExhaustedError(HephaestusError):
    """Every attempt of a retried operation failed.

    ``errors`` holds the error from each attempt, oldest first. The last one is
    also the chained ``__cause__``.
    """

    kind = "hephaestus.RetriesExhaustedError"

    def __init__(
        self,
        attempts: int,
        errors: tuple[Exception, ...] | list[Exception] = (),
        *,
        hint: str | None = None,
    ) -> None:
        super().__init__(f"All {attempts} attempts failed", hint=hint)
        self.attempts = attempts
        self.errors = tuple(errors)
        if self.errors:
            self.__cause__ = self.errors[-1]

    @property
    def cause(self) -> BaseException | None:
        """The error raised by the final attempt."""
        return self.__cause__


def walk_exception_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield *exc* and its ``__cause__``/``__context__`` chain, cycle-safe."""
    seen: set[int] = set()
    stack: list[BaseException] = [exc]
    while stack:
        cur = stack.pop()
        if id(cur) in seen:
            continue
        seen.add(id(cur))
        yield cur

        cause = cur.__cause__
        if isinstance(cause, BaseException):
            stack.append(cause)
        context = cur.__context__
        if isinstance(context, BaseException):
            stack.append(context)
