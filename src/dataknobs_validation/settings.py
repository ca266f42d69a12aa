"""Engine-wide settings and defaults management."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from typing import Any

from .exceptions import SchemaConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_ENV_PREFIX = "DATAKNOBS_VALIDATION_"

DEFAULT_DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S.%fZ",
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M:%S",
)


@dataclass(frozen=True)
class ValidationSettings:
    """Defaults shared by every validator built while these settings are active.

    Attributes:
        integer_epsilon: Largest distance from the nearest integer that still
            counts as integral for ``NumberValidator.integer()``
        email_pattern: Pattern used by ``StringValidator.email()``
        phone_pattern: Pattern used by ``StringValidator.phone_number()``
        postal_code_pattern: Pattern used by ``StringValidator.postal_code()``
        date_formats: ``strptime`` formats tried, in order, when coercing
            strings to dates (ISO 8601 is always tried last)
    """

    integer_epsilon: float = 1e-9
    email_pattern: str = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
    phone_pattern: str = r"^\d{3}-\d{3}-\d{4}$"
    postal_code_pattern: str = r"^\d{5}$"
    date_formats: tuple[str, ...] = DEFAULT_DATE_FORMATS

    def __post_init__(self) -> None:
        if self.integer_epsilon < 0:
            raise SchemaConfigurationError(
                f"integer_epsilon cannot be negative: {self.integer_epsilon}",
                context={"integer_epsilon": self.integer_epsilon},
            )
        for name in ("email_pattern", "phone_pattern", "postal_code_pattern"):
            pattern = getattr(self, name)
            try:
                re.compile(pattern)
            except re.error as e:
                raise SchemaConfigurationError(
                    f"Invalid regular expression for {name}: {e}",
                    context={name: pattern},
                ) from e

    def with_overrides(self, **overrides: Any) -> ValidationSettings:
        """Create a copy with the given attributes replaced.

        Args:
            **overrides: Attribute values to replace

        Returns:
            New ValidationSettings instance
        """
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise SchemaConfigurationError(
                f"Unknown settings: {', '.join(sorted(unknown))}",
                context={"unknown": sorted(unknown)},
            )
        return replace(self, **overrides)

    @classmethod
    def from_env(
        cls,
        prefix: str = DEFAULT_ENV_PREFIX,
        environ: Mapping[str, str] | None = None,
    ) -> ValidationSettings:
        """Build settings from environment variables.

        Recognized variables (shown with the default prefix):

        - ``DATAKNOBS_VALIDATION_INTEGER_EPSILON``
        - ``DATAKNOBS_VALIDATION_EMAIL_PATTERN``
        - ``DATAKNOBS_VALIDATION_PHONE_PATTERN``
        - ``DATAKNOBS_VALIDATION_POSTAL_CODE_PATTERN``
        - ``DATAKNOBS_VALIDATION_DATE_FORMATS`` (comma separated)

        Args:
            prefix: Environment variable prefix
            environ: Mapping to read instead of ``os.environ``

        Returns:
            ValidationSettings with environment overrides applied
        """
        env = os.environ if environ is None else environ
        overrides: dict[str, Any] = {}

        for settings_field in fields(cls):
            raw = env.get(f"{prefix}{settings_field.name.upper()}")
            if raw is None:
                continue
            overrides[settings_field.name] = cls._parse_value(settings_field.name, raw)

        if overrides:
            logger.debug(f"Settings overridden from environment: {sorted(overrides)}")
        return cls(**overrides)

    @staticmethod
    def _parse_value(name: str, raw: str) -> Any:
        if name == "integer_epsilon":
            try:
                return float(raw)
            except ValueError as e:
                raise SchemaConfigurationError(
                    f"Invalid value for {name}: {raw!r}",
                    context={name: raw},
                ) from e
        if name == "date_formats":
            formats = tuple(part.strip() for part in raw.split(",") if part.strip())
            if not formats:
                raise SchemaConfigurationError(
                    f"{name} requires at least one format",
                    context={name: raw},
                )
            return formats
        return raw


_settings = ValidationSettings()


def get_settings() -> ValidationSettings:
    """Get the settings used by newly constructed validators."""
    return _settings


def configure(settings: ValidationSettings | None = None, **overrides: Any) -> ValidationSettings:
    """Replace the process-wide settings.

    Validators capture the settings in force when they are constructed, so
    configure before building schemas.

    Args:
        settings: Settings to install (defaults to the current settings)
        **overrides: Individual attributes to replace

    Returns:
        The installed settings
    """
    global _settings
    base = settings if settings is not None else _settings
    _settings = base.with_overrides(**overrides) if overrides else base
    logger.debug(f"Validation settings configured: {_settings}")
    return _settings


def reset_settings() -> ValidationSettings:
    """Restore the default settings."""
    global _settings
    _settings = ValidationSettings()
    return _settings
