"""
Store configuration.

The table name and connection settings are passed explicitly to the access
layer instead of being read from process globals at import time.
"""

import os
from dataclasses import dataclass

from .constants import DEFAULT_MAX_WORKERS, DEFAULT_TABLE_NAME, LOCAL_REGION
from .exceptions import ConfigurationError
from .utils import validate_table_name


@dataclass(frozen=True)
class StoreConfig:
    """Connection and concurrency settings for a single table."""

    table_name: str = DEFAULT_TABLE_NAME
    region: str | None = None
    profile: str | None = None
    endpoint_url: str | None = None
    max_workers: int = DEFAULT_MAX_WORKERS

    def __post_init__(self) -> None:
        try:
            validate_table_name(self.table_name)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        if self.max_workers < 1:
            raise ConfigurationError("max_workers must be at least 1")

    @property
    def effective_region(self) -> str | None:
        """Region to use; a local endpoint without a region gets a placeholder."""
        if self.region is None and self.endpoint_url:
            return LOCAL_REGION
        return self.region

    @classmethod
    def from_env(cls) -> "StoreConfig":
        """
        Load configuration from environment variables.

        Reads STORE_TABLE (falling back to AWS_COINS_TABLE_NAME), AWS_REGION,
        AWS_PROFILE, MOCK_DYNAMODB_ENDPOINT and STORE_MAX_WORKERS.

        Raises:
            ConfigurationError: If a value is present but invalid
        """
        table_name = (
            os.getenv("STORE_TABLE") or os.getenv("AWS_COINS_TABLE_NAME") or DEFAULT_TABLE_NAME
        )

        raw_workers = os.getenv("STORE_MAX_WORKERS") or str(DEFAULT_MAX_WORKERS)
        try:
            max_workers = int(raw_workers)
        except ValueError as e:
            raise ConfigurationError(
                f"STORE_MAX_WORKERS must be an integer, got '{raw_workers}'"
            ) from e

        return cls(
            table_name=table_name,
            region=os.getenv("AWS_REGION") or None,
            profile=os.getenv("AWS_PROFILE") or None,
            endpoint_url=os.getenv("MOCK_DYNAMODB_ENDPOINT") or None,
            max_workers=max_workers,
        )
