"""
Chunked batch write and batch get operations.

Both operations split their input into chunks no larger than the native
DynamoDB limits, prune duplicate keys within each chunk and submit the chunks
concurrently. They retry differently:

- writes retry each chunk independently with exponential backoff and jitter,
  resubmitting only the items the store left unprocessed;
- reads recurse over the whole call with the unprocessed keys of every chunk,
  without sleeping, until the retry budget runs out.
"""

import random
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor

from ..constants import (
    BATCH_GET_STEP,
    BATCH_WRITE_STEP,
    DEFAULT_GET_RETRIES,
    DEFAULT_MAX_WORKERS,
    MAX_WRITE_RETRIES,
    WRITE_BACKOFF_BASE_MS,
)
from ..exceptions import BatchGetExhaustedError, ThrottledWriteError
from ..logging_config import get_logger
from ..models import Item, Key, WriteOutcome
from ..utils import chunked, remove_duplicate_keys
from .client import StoreClient

logger = get_logger(__name__)


def backoff_seconds(retry_count: int, rand: Callable[[], float] = random.random) -> float:
    """
    Compute the wait before the next write attempt.

    The base wait is ``2**retry_count * 10`` ms with a jitter drawn from
    ``[-wait/2, +wait/2)``.

    Args:
        retry_count: Number of retries already made for this chunk
        rand: Source of uniform floats in [0, 1)

    Returns:
        Wait time in seconds
    """
    wait = 2**retry_count * WRITE_BACKOFF_BASE_MS
    jitter = rand() * wait - wait / 2
    return (wait + jitter) / 1000


def _write_chunk(
    client: StoreClient,
    items: list[Item],
    fail_on_error: bool,
    sleep: Callable[[float], None],
    rand: Callable[[], float],
) -> list[Item]:
    """
    Drive a single chunk through the write retry loop.

    Returns:
        Items dropped after the retry budget ran out (empty on success)

    Raises:
        ThrottledWriteError: If fail_on_error=True and items remain unprocessed
    """
    pending = items
    retry_count = 0

    while True:
        result = client.batch_write(pending)
        if not result.unprocessed:
            return []

        if retry_count < MAX_WRITE_RETRIES:
            delay = backoff_seconds(retry_count, rand)
            logger.debug(
                f"{len(result.unprocessed)} unprocessed item(s), "
                f"retry {retry_count + 1}/{MAX_WRITE_RETRIES} in {delay:.3f}s"
            )
            sleep(delay)
            pending = result.unprocessed
            retry_count += 1
            continue

        if fail_on_error:
            logger.error(f"Write requests throttled, {len(result.unprocessed)} item(s) unprocessed")
            raise ThrottledWriteError(result.unprocessed)

        logger.warning(f"Dropping {len(result.unprocessed)} unprocessed item(s) after retries")
        return result.unprocessed


def batch_write(
    client: StoreClient,
    items: Sequence[Item],
    fail_on_error: bool,
    chunk_size: int = BATCH_WRITE_STEP,
    max_workers: int = DEFAULT_MAX_WORKERS,
    sleep: Callable[[float], None] = time.sleep,
    rand: Callable[[], float] = random.random,
) -> WriteOutcome:
    """
    Write items in chunks of at most 25, retrying unprocessed items with backoff.

    Duplicate keys are pruned within each chunk (first occurrence wins);
    duplicates that land in different chunks are both written.

    Every chunk runs to completion before this returns, even when another
    chunk has already failed.

    Args:
        client: Store client
        items: Items to write (each with PK and SK)
        fail_on_error: Raise when items stay unprocessed; otherwise drop them
        chunk_size: Requested chunk size (capped at the native limit of 25)
        max_workers: Maximum chunks in flight at once
        sleep: Sleep function used between retries
        rand: Source of uniform floats in [0, 1) for jitter

    Returns:
        WriteOutcome describing submitted, pruned and dropped items (dropped
        items are the caller's own dicts)

    Raises:
        ThrottledWriteError: If fail_on_error=True and any chunk exhausted its
            retries; carries the unprocessed items of every failed chunk, as
            they were passed in
    """
    step = max(1, min(chunk_size, BATCH_WRITE_STEP))
    outcome = WriteOutcome()

    chunks: list[list[Item]] = []
    for chunk in chunked(items, step):
        unique = remove_duplicate_keys(chunk)
        outcome.pruned += len(chunk) - len(unique)
        outcome.submitted += len(unique)
        chunks.append(unique)
    outcome.chunks = len(chunks)

    if not chunks:
        return outcome

    logger.info(f"Writing {outcome.submitted} item(s) in {len(chunks)} chunk(s)")
    if outcome.pruned:
        logger.info(f"Pruned {outcome.pruned} duplicate item(s)")

    with ThreadPoolExecutor(max_workers=min(max_workers, len(chunks))) as executor:
        futures = [
            executor.submit(_write_chunk, client, chunk, fail_on_error, sleep, rand)
            for chunk in chunks
        ]

    throttled: list[Item] = []
    first_error: BaseException | None = None
    for future in futures:
        error = future.exception()
        if error is None:
            outcome.dropped.extend(future.result())
        elif isinstance(error, ThrottledWriteError):
            throttled.extend(error.unprocessed)
        elif first_error is None:
            first_error = error

    if first_error is not None:
        raise first_error
    if throttled:
        raise ThrottledWriteError(throttled)
    return outcome


def batch_get(
    client: StoreClient,
    keys: Sequence[Key],
    retries_left: int = DEFAULT_GET_RETRIES,
    chunk_size: int = BATCH_GET_STEP,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> list[Item]:
    """
    Fetch keys in chunks of at most 100, recursing on unprocessed keys.

    Items come back in chunk order, with items resolved by a retry pass
    appended at the end; order relative to the input is not guaranteed.
    Missing items are simply absent from the result.

    Args:
        client: Store client
        keys: Keys to fetch
        retries_left: Passes remaining, including this one
        chunk_size: Requested chunk size (capped at the native limit of 100)
        max_workers: Maximum chunks in flight at once

    Returns:
        Items found

    Raises:
        BatchGetExhaustedError: If keys are still unprocessed when the retry
            budget reaches zero
    """
    if retries_left <= 0:
        logger.error(f"Unprocessed batch get keys after retries: {list(keys)}")
        raise BatchGetExhaustedError(list(keys))

    step = max(1, min(chunk_size, BATCH_GET_STEP))
    chunks = [remove_duplicate_keys(chunk) for chunk in chunked(keys, step)]
    if not chunks:
        return []

    logger.debug(
        f"Fetching {len(keys)} key(s) in {len(chunks)} chunk(s), {retries_left} pass(es) left"
    )

    with ThreadPoolExecutor(max_workers=min(max_workers, len(chunks))) as executor:
        results = list(executor.map(client.batch_get, chunks))

    items: list[Item] = []
    unprocessed: list[Key] = []
    for result in results:
        items.extend(result.processed)
        unprocessed.extend(result.unprocessed)

    if unprocessed:
        logger.debug(f"Retrying {len(unprocessed)} unprocessed key(s)")
        items.extend(
            batch_get(
                client,
                unprocessed,
                retries_left - 1,
                chunk_size=chunk_size,
                max_workers=max_workers,
            )
        )

    return items
