"""Run callables that may raise expected, recoverable errors."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from hephaestus.errors import CheckedError

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")

logger = logging.getLogger(__name__)


def with_checked_handling(
    func: Callable[..., T], *args: Any, **kwargs: Any
) -> T | None:
    """Call ``func(*args, **kwargs)``, turning a :class:`CheckedError` into ``None``.

    The handled error is logged at WARNING. Any other exception propagates.
    """
    try:
        return func(*args, **kwargs)
    except CheckedError as exc:
        logger.warning("Handled checked error: %s", exc)
        return None
