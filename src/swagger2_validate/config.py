"""Runtime settings, read from the environment."""

import os

from pydantic import BaseModel

DEFAULT_LOG_LEVEL = "WARNING"


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    """Settings shared by the compiler and the CLI."""

    log_level: str = DEFAULT_LOG_LEVEL
    check_formats: bool = True  # enforce `format` (date-time, email, ...) where jsonschema can

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            log_level=os.getenv("SWAGGER2_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
            check_formats=_env_flag("SWAGGER2_CHECK_FORMATS", True),
        )
