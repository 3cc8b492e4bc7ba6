"""
Range queries over a single partition.
"""

from collections.abc import Iterator
from typing import Any

from ..constants import ATTR_SK, DEFAULT_WATERMARK
from ..exceptions import StoreError
from ..logging_config import get_logger
from ..models import Item, Page
from .client import StoreClient

logger = get_logger(__name__)

KEY_CONDITION = "PK = :pk AND SK > :sk"


def iter_pages(client: StoreClient, pk: str, last_key: Any = DEFAULT_WATERMARK) -> Iterator[Page]:
    """
    Yield pages of items in a partition with SK greater than a watermark.

    Each query asks for every item above the current watermark; the watermark
    then advances to the SK of the store's last evaluated key. Iteration stops
    when the store reports no last evaluated key.

    Args:
        client: Store client
        pk: Partition key
        last_key: Exclusive lower bound for SK (defaults below any real SK)

    Yields:
        Pages in ascending SK order

    Raises:
        StoreError: If the store returns a watermark that does not advance
    """
    while True:
        result = client.query(
            key_condition_expression=KEY_CONDITION,
            expression_attribute_values={":pk": pk, ":sk": last_key},
        )
        next_key = (result.get("LastEvaluatedKey") or {}).get(ATTR_SK)
        yield Page(items=result.get("Items", []), next_watermark=next_key)

        if next_key is None:
            return
        if next_key <= last_key:
            raise StoreError(
                f"Query for '{pk}' returned non-increasing watermark {next_key} after {last_key}"
            )
        logger.debug(f"Partition '{pk}': advancing watermark to {next_key}")
        last_key = next_key


def get_historical_values(
    client: StoreClient, pk: str, last_key: Any = DEFAULT_WATERMARK
) -> list[Item]:
    """
    Return every item in a partition with SK greater than last_key, ascending by SK.

    An empty partition returns an empty list.
    """
    items: list[Item] = []
    for page in iter_pages(client, pk, last_key):
        items.extend(page.items)
    return items
