"""
BatchedStoreAccess: a single entry point over the store operations.
"""

import random
import time
from collections.abc import Callable, Iterator, Sequence
from typing import Any

from ..config import StoreConfig
from ..constants import BATCH_GET_STEP, BATCH_WRITE_STEP, DEFAULT_GET_RETRIES, DEFAULT_WATERMARK
from ..models import DeleteOutcome, Item, Key, Page, WriteOutcome
from . import batch_operations, delete_operations, range_operations
from .client import StoreClient


class BatchedStoreAccess:
    """Batching, deduplication, pagination and retries over one table."""

    def __init__(
        self,
        config: StoreConfig | None = None,
        client: StoreClient | None = None,
        sleep: Callable[[float], None] = time.sleep,
        rand: Callable[[], float] = random.random,
    ):
        """
        Initialize the access layer.

        Args:
            config: Store configuration (defaults to StoreConfig.from_env())
            client: Prebuilt store client (built from config when omitted)
            sleep: Sleep function used between write retries
            rand: Source of uniform floats in [0, 1) for write jitter
        """
        if config is None:
            config = client.config if client is not None else StoreConfig.from_env()
        self.config = config
        self.client = client if client is not None else StoreClient(config)
        self._sleep = sleep
        self._rand = rand

    def get(self, key: Key, **params: Any) -> Item | None:
        return self.client.get(key, **params)

    def put(self, item: Item, **params: Any) -> dict[str, Any]:
        return self.client.put(item, **params)

    def batch_write(
        self,
        items: Sequence[Item],
        fail_on_error: bool,
        chunk_size: int = BATCH_WRITE_STEP,
    ) -> WriteOutcome:
        return batch_operations.batch_write(
            self.client,
            items,
            fail_on_error,
            chunk_size=chunk_size,
            max_workers=self.config.max_workers,
            sleep=self._sleep,
            rand=self._rand,
        )

    def batch_get(
        self,
        keys: Sequence[Key],
        retries_left: int = DEFAULT_GET_RETRIES,
        chunk_size: int = BATCH_GET_STEP,
    ) -> list[Item]:
        return batch_operations.batch_get(
            self.client,
            keys,
            retries_left,
            chunk_size=chunk_size,
            max_workers=self.config.max_workers,
        )

    def iter_pages(self, pk: str, last_key: Any = DEFAULT_WATERMARK) -> Iterator[Page]:
        return range_operations.iter_pages(self.client, pk, last_key)

    def get_historical_values(self, pk: str, last_key: Any = DEFAULT_WATERMARK) -> list[Item]:
        return range_operations.get_historical_values(self.client, pk, last_key)

    def delete_all(self, keys: Sequence[Key]) -> DeleteOutcome:
        return delete_operations.delete_all(
            self.client, keys, max_workers=self.config.max_workers
        )

    def get_secrets(self, key: Key | None = None) -> Item | None:
        return self.client.get_secrets(key)
