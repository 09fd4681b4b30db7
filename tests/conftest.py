"""Pytest configuration and fixtures.

Provides environment isolation, logging configuration and shared test
doubles. Fixtures here are autouse unless noted.
"""

from __future__ import annotations

from contextlib import suppress
from dataclasses import dataclass, field
import logging
import os

import pytest

# =============================================================================
# Test Doubles
# =============================================================================


@dataclass
class FakeSleep:
    """Recording stand-in for ``time.sleep``.

    Captures every requested delay instead of blocking, so retry tests can
    assert on how many delays happened and how long they were.
    """

    delays: list[float] = field(default_factory=list)

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)

    @property
    def calls(self) -> int:
        return len(self.delays)

    @property
    def total(self) -> float:
        return sum(self.delays)


@dataclass
class FlakyOperation:
    """Zero-argument operation that fails a fixed number of times, then succeeds.

    ``fail_times=None`` never succeeds. Each failure raises a fresh error whose
    message carries the attempt number.
    """

    fail_times: int | None = 0
    result: object = "ok"
    error_type: type[Exception] = RuntimeError
    calls: int = 0
    raised: list[Exception] = field(default_factory=list)

    def __call__(self) -> object:
        self.calls += 1
        if self.fail_times is None or self.calls <= self.fail_times:
            err = self.error_type(f"failure {self.calls}")
            self.raised.append(err)
            raise err
        return self.result


@pytest.fixture
def fake_sleep() -> FakeSleep:
    """A fresh recording sleep (not autouse)."""
    return FakeSleep()


@pytest.fixture
def flaky() -> type[FlakyOperation]:
    """The FlakyOperation class, for building operations inline (not autouse)."""
    return FlakyOperation


# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "hephaestus.config.load_dotenv",
            lambda *_args, **_kwargs: False,
            raising=False,
        )


@pytest.fixture(autouse=True)
def isolate_hephaestus_env(request, monkeypatch):
    """Clear HEPHAESTUS_* variables so host settings never leak into tests.

    Opt-out: @pytest.mark.allow_env_pollution
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return
    for key in list(os.environ.keys()):
        if key.startswith("HEPHAESTUS_"):
            monkeypatch.delenv(key, raising=False)


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Suppress noisy third-party loggers."""
    logging.getLogger("urllib3").setLevel(logging.WARNING)
