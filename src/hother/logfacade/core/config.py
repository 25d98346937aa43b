"""
Logger settings loadable from the environment.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hother.logfacade.core.engine import OutputFormat


class LoggerSettings(BaseSettings):
    """
    Declarative logger settings.

    Fields not passed explicitly are read from ``LOG_<FIELD NAME>``
    environment variables, e.g. ``LOG_LEVEL`` or ``LOG_REPORT_CALLER``.

    The level is kept as a name: an unknown name does not fail validation
    but falls back to warn with a warning once the settings are applied.

    Example:
        settings = LoggerSettings.from_env()
        logger = Logger(with_settings(settings))
    """

    model_config = SettingsConfigDict(env_prefix="LOG_", frozen=True, extra="ignore")

    level: str = Field(default="warn", description="Minimum level name")
    report_caller: bool = Field(default=True, description="Attach file and function fields")
    output_format: OutputFormat = Field(default=OutputFormat.JSON, description="Record encoding")
    sort_keys: bool = Field(default=False, description="Sort keys in written records")

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("output_format", mode="before")
    @classmethod
    def normalize_output_format(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @classmethod
    def from_env(cls, prefix: str = "LOG_") -> "LoggerSettings":
        """
        Load settings from environment variables with a custom prefix.

        Each field is read from ``<prefix><FIELD NAME>``. Unset variables keep
        their defaults.

        Args:
            prefix: Variable name prefix

        Raises:
            pydantic.ValidationError: If a boolean or the output format is invalid
        """
        return cls(_env_prefix=prefix)
