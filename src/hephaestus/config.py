"""Configuration: frozen Config resolved from defaults, environment and overrides."""

from __future__ import annotations

from dataclasses import dataclass, fields
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from hephaestus.errors import ConfigurationError
from hephaestus.retry import RetryPolicy

ENV_PREFIX = "HEPHAESTUS_"

# Environment names that differ from the field name.
_ENV_ALIASES: dict[str, str] = {
    "retry_delay": "retry_delay_s",
}


def _coerce_bool(v: str) -> bool:
    """Convert string to boolean using common conventions."""
    return v.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Config:
    """Immutable settings for retries, pattern lookup and error logging.

    Example:
        config = Config.from_env(max_retries=5)
        factory = OptionFactory.from_config(config)
    """

    max_retries: int = 3
    #: Seconds between attempts; fractional values are allowed.
    retry_delay_s: float = 1.0
    patterns_file: Path = Path("exceptions.json")
    logging_enabled: bool = True
    #: Logger name used by ``ErrorHandler``.
    log_channel: str = "hephaestus"
    #: Include saved states in HTTP error payloads.
    debug: bool = False

    def __post_init__(self) -> None:
        """Normalize paths and validate numeric fields."""
        if not isinstance(self.patterns_file, Path):
            object.__setattr__(self, "patterns_file", Path(self.patterns_file))

        if isinstance(self.max_retries, bool) or not isinstance(self.max_retries, int):
            raise ConfigurationError(
                f"max_retries must be an integer, got {self.max_retries!r}",
                hint="Set HEPHAESTUS_MAX_RETRIES to a whole number such as 3.",
            )
        if self.max_retries < 1:
            raise ConfigurationError(
                f"max_retries must be ≥ 1, got {self.max_retries}",
                hint="This is the total number of attempts, including the first.",
            )
        if isinstance(self.retry_delay_s, bool) or not isinstance(
            self.retry_delay_s, (int, float)
        ):
            raise ConfigurationError(
                f"retry_delay_s must be a number, got {self.retry_delay_s!r}",
                hint="Set HEPHAESTUS_RETRY_DELAY to seconds, e.g. 0.5.",
            )
        if self.retry_delay_s < 0:
            raise ConfigurationError(
                f"retry_delay_s must be ≥ 0, got {self.retry_delay_s}",
                hint="Use 0 to retry immediately.",
            )
        if not self.log_channel.strip():
            raise ConfigurationError(
                "log_channel must be a non-empty logger name",
                hint="The default channel is 'hephaestus'.",
            )

    @classmethod
    def from_env(cls, *, load_dotenv_file: bool = True, **overrides: Any) -> Config:
        """Resolve configuration: defaults < ``HEPHAESTUS_*`` env < *overrides*."""
        if load_dotenv_file:
            load_dotenv()
        values = dict(load_env())
        values.update(overrides)
        unknown = set(values) - {f.name for f in fields(cls)}
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration field(s): {', '.join(sorted(unknown))}",
                hint=f"Valid fields: {', '.join(f.name for f in fields(cls))}",
            )
        return cls(**values)

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(max_attempts=self.max_retries, delay_s=self.retry_delay_s)


def load_env() -> dict[str, Any]:
    """Read ``HEPHAESTUS_*`` variables into typed configuration values.

    Unknown ``HEPHAESTUS_*`` names are ignored here so unrelated tooling
    variables never break resolution.
    """
    types = {f.name: f.type for f in fields(Config)}
    config: dict[str, Any] = {}
    for key, raw in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        name = key[len(ENV_PREFIX) :].lower()
        name = _ENV_ALIASES.get(name, name)
        if name not in types:
            continue
        config[name] = _coerce_env_value(name, raw, types[name])
    return config


def _coerce_env_value(name: str, raw: str, annotation: Any) -> Any:
    # Annotations are strings under ``from __future__ import annotations``.
    target = annotation if isinstance(annotation, str) else annotation.__name__
    try:
        if target == "bool":
            return _coerce_bool(raw)
        if target == "int":
            return int(raw.strip())
        if target == "float":
            return float(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(
            f"Invalid value for {ENV_PREFIX}{name.upper()}: {raw!r}",
            hint=f"Expected a {target}.",
        ) from exc
    return raw.strip()
