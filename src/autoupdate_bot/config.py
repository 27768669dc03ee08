"""Runtime settings resolved from the environment."""

import os
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

DEFAULT_API_ENDPOINT = "https://api.gemnasium.com/v1"
DEFAULT_MAX_DURATION = 3600

ENV_API_ENDPOINT = "GEMNASIUM_API_ENDPOINT"
ENV_API_KEY = "GEMNASIUM_TOKEN"
ENV_PROJECT_SLUG = "GEMNASIUM_PROJECT_SLUG"
ENV_MAX_DURATION = "AUTOUPDATE_MAX_DURATION"


class ConfigurationError(Exception):
    """Raised when settings are missing or malformed."""


class AutoUpdateSettings(BaseModel):
    model_config = ConfigDict(frozen=False)

    api_endpoint: str = DEFAULT_API_ENDPOINT
    api_key: str | None = Field(default=None, repr=False)
    project_slug: str | None = None
    max_duration: float = Field(default=DEFAULT_MAX_DURATION, gt=0)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AutoUpdateSettings":
        """Build settings from environment variables, ignoring empty values.

        Raises:
            ConfigurationError: If a value fails validation.
        """
        env = os.environ if environ is None else environ
        values: dict[str, str] = {}
        for field_name, var in (
            ("api_endpoint", ENV_API_ENDPOINT),
            ("api_key", ENV_API_KEY),
            ("project_slug", ENV_PROJECT_SLUG),
            ("max_duration", ENV_MAX_DURATION),
        ):
            value = env.get(var, "").strip()
            if value:
                values[field_name] = value
        try:
            return cls.model_validate(values)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid environment configuration: {exc}") from exc

    def safe_dump(self) -> dict:
        """Settings without secrets, suitable for printing."""
        return self.model_dump(exclude={"api_key"})
