"""
Configuration management for MONGO_INDEX_COPY.

Settings can be passed directly or picked up from environment variables.
The copy functions build a default IndexCopyConfig per call when none is
given, so environment changes are seen on the next copy.
"""

import os
from enum import Enum

from .constants import METRICS_ENABLED_ENV, UNKNOWN_FIELDS_ENV
from .exceptions import ConfigurationError


class UnknownFieldPolicy(str, Enum):
    """What to do with descriptor fields the reconstructor does not recognise."""

    IGNORE = "ignore"
    STRICT = "strict"


class IndexCopyConfig:
    """
    Index copy configuration.

    Example:
        # Using environment variables
        config = IndexCopyConfig()

        # Or using direct parameters
        config = IndexCopyConfig(unknown_field_policy="strict", metrics_enabled=False)
        copy_all_indexes(source, destination, config=config)
    """

    def __init__(
        self,
        unknown_field_policy: UnknownFieldPolicy | str | None = None,
        metrics_enabled: bool | None = None,
    ):
        """
        Initialize configuration.

        Args:
            unknown_field_policy: "ignore" or "strict" (defaults to
                MONGO_INDEX_COPY_UNKNOWN_FIELDS or "ignore")
            metrics_enabled: Record copy metrics (defaults to
                MONGO_INDEX_COPY_METRICS_ENABLED or true)

        Raises:
            ConfigurationError: If the unknown-field policy is not recognised
        """
        raw_policy = unknown_field_policy or os.getenv(UNKNOWN_FIELDS_ENV, "ignore")
        self.unknown_field_policy = self._parse_policy(raw_policy)
        if metrics_enabled is None:
            metrics_enabled = os.getenv(METRICS_ENABLED_ENV, "true").lower() == "true"
        self.metrics_enabled = metrics_enabled

    @staticmethod
    def _parse_policy(raw_policy: UnknownFieldPolicy | str) -> UnknownFieldPolicy:
        if isinstance(raw_policy, UnknownFieldPolicy):
            return raw_policy
        try:
            return UnknownFieldPolicy(str(raw_policy).strip().lower())
        except ValueError as e:
            allowed = ", ".join(p.value for p in UnknownFieldPolicy)
            raise ConfigurationError(
                f"unknown_field_policy must be one of: {allowed}",
                config_key="unknown_field_policy",
                config_value=raw_policy,
            ) from e

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigurationError: If a value has the wrong type
        """
        if not isinstance(self.unknown_field_policy, UnknownFieldPolicy):
            raise ConfigurationError(
                "unknown_field_policy must be an UnknownFieldPolicy",
                config_key="unknown_field_policy",
                config_value=self.unknown_field_policy,
            )
        if not isinstance(self.metrics_enabled, bool):
            raise ConfigurationError(
                "metrics_enabled must be a boolean",
                config_key="metrics_enabled",
                config_value=self.metrics_enabled,
            )

    def __repr__(self) -> str:
        return (
            f"IndexCopyConfig(unknown_field_policy={self.unknown_field_policy.value!r}, "
            f"metrics_enabled={self.metrics_enabled!r})"
        )
