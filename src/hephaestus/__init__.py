"""Hephaestus: Option types, enriched errors and bounded retries.

Public API:
    - Option / present() / absent(): Present-or-absent values with combinators
    - EnrichedError: Errors with state snapshots and a history of prior errors
    - RetryPolicy / make_retrier(): Fixed-delay bounded retries
    - PatternMatcher / with_matched_errors(): Human-readable error messages
    - with_checked_handling(): Swallow expected CheckedErrors
"""

from __future__ import annotations

import logging

from hephaestus.checked import with_checked_handling
from hephaestus.config import Config
from hephaestus.enriched import EnrichedError, StateSnapshot
from hephaestus.errors import (
    CheckedError,
    ConfigurationError,
    EmptyUnwrapError,
    HephaestusError,
    PatternFileError,
    RetriesExhaustedError,
    error_kind,
)
from hephaestus.factory import OptionFactory
from hephaestus.http import ErrorHandler, HttpError, HttpResponse
from hephaestus.option import Absent, Option, Present, absent, from_nullable, present
from hephaestus.patterns import ErrorPattern, PatternMatcher, with_matched_errors
from hephaestus.retry import RetryPolicy, make_retrier, retry_call

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("hephaestus-py")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("hephaestus").addHandler(logging.NullHandler())

__all__ = [
    "Absent",
    "CheckedError",
    "Config",
    "ConfigurationError",
    "EmptyUnwrapError",
    "EnrichedError",
    "ErrorHandler",
    "ErrorPattern",
    "HephaestusError",
    "HttpError",
    "HttpResponse",
    "Option",
    "OptionFactory",
    "PatternFileError",
    "PatternMatcher",
    "Present",
    "RetriesExhaustedError",
    "RetryPolicy",
    "StateSnapshot",
    "absent",
    "error_kind",
    "from_nullable",
    "make_retrier",
    "present",
    "retry_call",
    "with_checked_handling",
    "with_matched_errors",
]
