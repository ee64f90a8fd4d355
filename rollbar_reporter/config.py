from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Union

from .exceptions import ConfigurationError
from .models import Level

# https://docs.rollbar.com/reference/create-item
DEFAULT_ENDPOINT = "https://api.rollbar.com/api/1/item/"
DEFAULT_TIMEOUT = 5.0


@dataclass(slots=True)
class ReporterConfig:
    """Runtime configuration for a reporting Client."""

    access_token: str = field(repr=False)
    environment: str
    endpoint: str = DEFAULT_ENDPOINT
    timeout: float = DEFAULT_TIMEOUT
    default_level: Union[Level, str] = Level.ERROR
    enable_console_fallback: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.access_token, str) or not self.access_token.strip():
            raise ConfigurationError("access_token must be a non-empty string")
        if not isinstance(self.environment, str) or not self.environment.strip():
            raise ConfigurationError("environment must be a non-empty string")
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be > 0")
        if not self.endpoint:
            raise ConfigurationError("endpoint must not be empty")
        self.endpoint = self.endpoint.rstrip("/") + "/"
        self.default_level = Level.parse(self.default_level)

    @classmethod
    def from_env(cls, **overrides: Any) -> "ReporterConfig":
        """
        Build a config from environment variables.

        Reads ROLLBAR_ACCESS_TOKEN, ROLLBAR_ENVIRONMENT (falling back to ENV,
        then "production"), ROLLBAR_ENDPOINT and ROLLBAR_TIMEOUT. Keyword
        arguments that are not None take precedence over the environment.
        """
        values: dict[str, Any] = {
            "access_token": os.environ.get("ROLLBAR_ACCESS_TOKEN", ""),
            "environment": os.environ.get("ROLLBAR_ENVIRONMENT") or os.environ.get("ENV", "production"),
        }
        endpoint = os.environ.get("ROLLBAR_ENDPOINT")
        if endpoint:
            values["endpoint"] = endpoint
        timeout = os.environ.get("ROLLBAR_TIMEOUT")
        if timeout:
            try:
                values["timeout"] = float(timeout)
            except ValueError as exc:
                raise ConfigurationError(f"ROLLBAR_TIMEOUT must be a number, got {timeout!r}") from exc

        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
