"""
Concurrent single-item deletes.
"""

from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

from ..constants import DEFAULT_MAX_WORKERS
from ..logging_config import get_logger
from ..models import DeleteOutcome, Key
from ..utils import is_complete_key, key_of
from .client import StoreClient

logger = get_logger(__name__)


def delete_all(
    client: StoreClient,
    keys: Sequence[Key],
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> DeleteOutcome:
    """
    Delete every well-formed key concurrently.

    Keys without a PK or without an SK are skipped and reported in the
    outcome, never raised. An SK of 0 is a valid key. Deletes are trusted once
    the store acknowledges them; nothing is read back.

    Args:
        client: Store client
        keys: Keys to delete
        max_workers: Maximum deletes in flight at once

    Returns:
        DeleteOutcome with deleted and skipped keys
    """
    outcome = DeleteOutcome()
    for key in keys:
        if is_complete_key(key):
            outcome.deleted.append(key_of(key))
        else:
            outcome.skipped.append(key)

    if outcome.skipped:
        logger.debug(f"Skipping {len(outcome.skipped)} malformed key(s): {outcome.skipped}")

    if outcome.deleted:
        logger.info(f"Deleting {len(outcome.deleted)} item(s)")
        with ThreadPoolExecutor(max_workers=min(max_workers, len(outcome.deleted))) as executor:
            # Consume the iterator so store errors propagate
            list(executor.map(client.delete, outcome.deleted))

    return outcome
