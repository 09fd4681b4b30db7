"""Human-readable messages for caught errors, keyed by error kind.

The patterns file is a JSON object mapping an error kind (see
:func:`hephaestus.errors.error_kind`) to a message/description pair::

    {
        "ValueError": {
            "message": "Invalid Value",
            "description": "A value had the right type but an unusable content."
        }
    }

``hephaestus init`` generates a starting file from the exception classes an
application defines.
"""

from __future__ import annotations

import inspect
import json
import logging
from pathlib import Path
import re
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from hephaestus.errors import PatternFileError, error_kind, kinds_of
from hephaestus.option import Option, absent, present

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

T = TypeVar("T")

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE = "Unexpected error"
DEFAULT_DESCRIPTION = "A general error has occurred."
DEFAULT_PATTERNS_FILE = "exceptions.json"


class ErrorPattern(BaseModel):
    """Message and description shown for one error kind."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    message: str
    description: str


_PATTERNS_ADAPTER = TypeAdapter(dict[str, ErrorPattern])


def load_patterns(path: str | Path) -> dict[str, ErrorPattern]:
    """Read and validate a patterns file.

    Raises:
        PatternFileError: If the file is missing, unreadable, not JSON, or not
            shaped as ``{kind: {message, description}}``.
    """
    p = Path(path)
    if not p.is_file():
        raise PatternFileError(
            f"Exception patterns file not found: {p}",
            hint="Run `hephaestus init` to generate one.",
        )
    try:
        raw = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise PatternFileError(
            f"Invalid exception patterns file: {p}: {exc}"
        ) from exc
    try:
        return _PATTERNS_ADAPTER.validate_json(raw)
    except ValidationError as exc:
        raise PatternFileError(
            f"Invalid exception patterns file: {p}",
            hint=f"{exc.error_count()} validation error(s); first: "
            f"{exc.errors()[0]['msg']}",
        ) from exc


class PatternMatcher:
    """Look up and format error patterns."""

    def __init__(
        self,
        patterns: Mapping[str, ErrorPattern] | None = None,
        *,
        default_message: str = DEFAULT_MESSAGE,
        default_description: str = DEFAULT_DESCRIPTION,
    ) -> None:
        self._patterns: dict[str, ErrorPattern] = dict(patterns or {})
        self.default = ErrorPattern(
            message=default_message, description=default_description
        )

    @classmethod
    def from_file(
        cls, path: str | Path, *, default_message: str = DEFAULT_MESSAGE
    ) -> PatternMatcher:
        patterns = load_patterns(path)
        logger.debug("Loaded %d exception patterns from %s", len(patterns), path)
        return cls(patterns, default_message=default_message)

    @property
    def patterns(self) -> Mapping[str, ErrorPattern]:
        return dict(self._patterns)

    def lookup(
        self, error: BaseException | type[BaseException]
    ) -> Option[ErrorPattern]:
        """Find the pattern for the error's own kind, then its nearest base."""
        for kind in kinds_of(error):
            pattern = self._patterns.get(kind)
            if pattern is not None:
                return present(pattern)
        return absent()

    def pattern_for(self, error: BaseException) -> ErrorPattern:
        return self.lookup(error).get_or_else(self.default)

    def format(self, error: BaseException) -> str:
        """Render ``"<message>: <error>"`` followed by the description."""
        pattern = self.pattern_for(error)
        return f"{pattern.message}: {error}\n{pattern.description}"


def with_matched_errors(
    func: Callable[..., T],
    patterns_file: str | Path = DEFAULT_PATTERNS_FILE,
    default_message: str = DEFAULT_MESSAGE,
    *args: Any,
    **kwargs: Any,
) -> T | str:
    """Call *func*; if it raises, return the formatted error text instead.

    The patterns file is loaded before *func* runs, so a missing or invalid
    file raises :class:`PatternFileError` even when *func* would succeed.
    """
    matcher = PatternMatcher.from_file(
        patterns_file, default_message=default_message
    )
    try:
        return func(*args, **kwargs)
    except Exception as exc:
        logger.debug("Matched %s against exception patterns", error_kind(exc))
        return matcher.format(exc)


# --- Pattern generation (used by ``hephaestus init``) ---

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_KIND_SUFFIXES = (" Exception", " Error")


def humanize_class_name(name: str) -> str:
    """``"InvalidArgumentError"`` -> ``"Invalid Argument"``."""
    message = _CAMEL_BOUNDARY.sub(" ", name).strip()
    for suffix in _KIND_SUFFIXES:
        if message.endswith(suffix):
            return message[: -len(suffix)]
    return message


def describe_class(cls: type[BaseException]) -> ErrorPattern:
    message = humanize_class_name(cls.__name__)
    # Only the class's own docstring; inherited ones describe the base.
    doc = cls.__dict__.get("__doc__")
    description = ""
    if isinstance(doc, str):
        cleaned = inspect.cleandoc(doc)
        description = cleaned.splitlines()[0].strip() if cleaned else ""
    return ErrorPattern(
        message=message,
        description=description or f"Represents a {message} error condition.",
    )


def build_patterns(classes: Iterable[type[BaseException]]) -> dict[str, ErrorPattern]:
    """Build a patterns mapping for *classes*, sorted by kind."""
    patterns = {error_kind(cls): describe_class(cls) for cls in classes}
    return dict(sorted(patterns.items()))


def dump_patterns(patterns: Mapping[str, ErrorPattern]) -> str:
    payload = {kind: pattern.model_dump() for kind, pattern in patterns.items()}
    return json.dumps(payload, indent=4, ensure_ascii=False)


def write_patterns(path: str | Path, patterns: Mapping[str, ErrorPattern]) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(dump_patterns(patterns) + "\n", encoding="utf-8")
    return p
