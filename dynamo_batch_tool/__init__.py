"""Batched, retrying access layer over a DynamoDB PK/SK table."""

from dynamo_batch_tool.store.config import StoreConfig
from dynamo_batch_tool.store.core.access import BatchedStoreAccess
from dynamo_batch_tool.store.core.client import StoreClient
from dynamo_batch_tool.store.exceptions import (
    BatchGetExhaustedError,
    StoreError,
    ThrottledWriteError,
)

__all__ = [
    "BatchGetExhaustedError",
    "BatchedStoreAccess",
    "StoreClient",
    "StoreConfig",
    "StoreError",
    "ThrottledWriteError",
]
