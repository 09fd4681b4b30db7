"""Framework-agnostic translation of errors into HTTP responses.

Web integrations catch exceptions at their outer boundary, hand them to
:class:`ErrorHandler`, and send the returned :class:`HttpResponse` using
whatever response type their framework provides.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import logging
from typing import TYPE_CHECKING, Any

from hephaestus.enriched import EnrichedError
from hephaestus.errors import error_kind, walk_exception_chain

if TYPE_CHECKING:
    from collections.abc import Mapping

    from hephaestus.config import Config

INTERNAL_SERVER_ERROR = 500


@dataclass(frozen=True)
class HttpResponse:
    """Status, headers and serialized body of an error response."""

    status: int
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""

    def json(self) -> Any:
        return json.loads(self.body) if self.body else None


def describe_error(error: BaseException) -> dict[str, Any]:
    """Summarize an error as ``{class, message, code}``."""
    code = getattr(error, "code", 0)
    return {
        "class": error_kind(error),
        "message": getattr(error, "message", None) or str(error),
        "code": code if isinstance(code, int) else 0,
    }


class HttpError(EnrichedError):
    """An :class:`EnrichedError` that knows its HTTP status and headers."""

    kind = "hephaestus.HttpError"

    def __init__(
        self,
        message: str = "",
        status_code: int = INTERNAL_SERVER_ERROR,
        headers: Mapping[str, str] | None = None,
        code: int = 0,
        cause: BaseException | None = None,
        *,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, code, cause, hint=hint)
        self.status_code = status_code
        self.headers: dict[str, str] = dict(headers or {})
        self._response: HttpResponse | None = None

    def set_response(self, response: HttpResponse) -> HttpError:
        """Use *response* verbatim instead of the generated one."""
        self._response = response
        return self

    def to_payload(self, *, include_states: bool = False) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "message": self.message,
            "code": self.code,
            "status": self.status_code,
            "exception_history": [describe_error(e) for e in self.get_history()],
        }
        if include_states:
            payload["states"] = {
                label: {"timestamp": snap.timestamp, "state": snap.value}
                for label, snap in self.get_all_states().items()
            }
        return payload

    def to_response(self, *, include_states: bool = False) -> HttpResponse:
        if self._response is not None:
            return self._response
        body = json.dumps(
            self.to_payload(include_states=include_states), indent=4, default=repr
        )
        return HttpResponse(
            status=self.status_code,
            headers={"Content-Type": "application/json", **self.headers},
            body=body,
        )


class ErrorHandler:
    """Convert any exception into an :class:`HttpResponse`, logging its history.

    Non-HTTP errors become a 500 :class:`HttpError` that keeps the original
    message and code and records the original error as its cause.
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        *,
        debug: bool = False,
        logging_enabled: bool = True,
    ) -> None:
        self.logger = logger or logging.getLogger("hephaestus")
        self.debug = debug
        self.logging_enabled = logging_enabled

    @classmethod
    def from_config(cls, config: Config) -> ErrorHandler:
        return cls(
            logging.getLogger(config.log_channel),
            debug=config.debug,
            logging_enabled=config.logging_enabled,
        )

    def convert(self, error: BaseException) -> HttpError:
        if isinstance(error, HttpError):
            return error
        code = getattr(error, "code", 0)
        return HttpError(
            getattr(error, "message", None) or str(error),
            INTERNAL_SERVER_ERROR,
            code=code if isinstance(code, int) else 0,
            cause=error,
        )

    def handle(self, error: BaseException) -> HttpResponse:
        http_error = self.convert(error)
        if self.logging_enabled:
            self._log(http_error)
        return http_error.to_response(include_states=self.debug)

    def _log(self, error: HttpError) -> None:
        context = {
            "exception_class": error_kind(error),
            "status_code": error.status_code,
            "history": [describe_error(e) for e in error.get_history()],
            "chain": [error_kind(e) for e in walk_exception_chain(error)],
        }
        self.logger.error(error.message or str(error), extra={"hephaestus": context})
