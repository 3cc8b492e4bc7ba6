"""
Custom exceptions for batched store operations.

Errors raised by the store client itself (botocore ``ClientError`` and
friends) are not wrapped; only the failures synthesized by this layer live here.
"""

from typing import Any


class StoreError(Exception):
    """Base exception for store operations."""

    pass


class ThrottledWriteError(StoreError):
    """Write requests throttled: retry budget exhausted with items still unprocessed."""

    def __init__(self, unprocessed: list[dict[str, Any]]):
        self.unprocessed = unprocessed
        super().__init__(f"Write requests throttled ({len(unprocessed)} item(s) unprocessed)")


class BatchGetExhaustedError(StoreError):
    """Not all batch-get requests could be processed within the retry budget."""

    def __init__(self, keys: list[dict[str, Any]]):
        self.keys = keys
        super().__init__(
            f"Not all batchGet requests could be processed ({len(keys)} key(s) outstanding)"
        )


class ConfigurationError(StoreError):
    """Invalid store configuration."""

    pass


class ItemFileError(StoreError):
    """Input file with items or keys is missing or invalid."""

    pass


class TableNotFoundError(StoreError):
    """DynamoDB table does not exist."""

    pass


class TableAlreadyExistsError(StoreError):
    """DynamoDB table already exists."""

    pass
