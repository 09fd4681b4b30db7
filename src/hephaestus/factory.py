"""OptionFactory: build Options at application boundaries."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, ValidationError

from hephaestus.errors import RetriesExhaustedError
from hephaestus.http import INTERNAL_SERVER_ERROR, HttpError
from hephaestus.option import Option, absent, present
from hephaestus.retry import RetryPolicy, make_retrier

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from hephaestus.config import Config

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

logger = logging.getLogger(__name__)


class OptionFactory:
    """Construct :class:`Option` values from nullable values, lookups,
    validated input and retried calls.
    """

    def __init__(
        self,
        max_retries: int = 3,
        retry_delay_s: float = 1.0,
        *,
        sleep: Callable[[float], object] = time.sleep,
    ) -> None:
        self.policy = RetryPolicy(max_attempts=max_retries, delay_s=retry_delay_s)
        self._retrier = make_retrier(self.policy, sleep=sleep)

    @classmethod
    def from_config(
        cls, config: Config, *, sleep: Callable[[float], object] = time.sleep
    ) -> OptionFactory:
        return cls(config.max_retries, config.retry_delay_s, sleep=sleep)

    def from_nullable(self, value: T | None) -> Option[T]:
        return Option.from_nullable(value)

    def from_mapping_key(self, mapping: Mapping[Any, T], key: Any) -> Option[T]:
        """``Present`` when *key* exists, even if its value is ``None``."""
        if key in mapping:
            return present(mapping[key])
        return absent()

    def from_validated(self, model: type[M], data: Any) -> Option[M]:
        """Validate *data* against a pydantic *model*; invalid input is absent."""
        try:
            return present(model.model_validate(data))
        except ValidationError as exc:
            logger.debug(
                "Validation of %s failed with %d error(s)",
                model.__name__,
                exc.error_count(),
            )
            return absent()

    def from_callable(
        self, func: Callable[..., T], *args: Any, **kwargs: Any
    ) -> Option[T]:
        """Call *func* under the retry policy and wrap its result.

        Raises:
            HttpError: A 500 error whose history holds every attempt's error,
                chained from the underlying :class:`RetriesExhaustedError`.
        """
        try:
            return present(self._retrier(lambda: func(*args, **kwargs)))
        except RetriesExhaustedError as exc:
            raise HttpError(
                f"Operation failed after {exc.attempts} attempts",
                INTERNAL_SERVER_ERROR,
            ).with_history(exc.errors) from exc
