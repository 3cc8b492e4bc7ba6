"""
Single item and partition history commands.
"""

import json
from decimal import Decimal
from typing import Any

import click
from botocore.exceptions import BotoCoreError, ClientError

from ..config import StoreConfig
from ..constants import ATTR_PK, ATTR_SK, DEFAULT_TABLE_NAME, DEFAULT_WATERMARK
from ..core.access import BatchedStoreAccess
from ..exceptions import StoreError
from ..logging_config import get_logger, setup_logging
from ..utils import is_complete_key, output_json, output_text, to_json
from .common import fail, number_callback

logger = get_logger(__name__)


@click.command("put")
@click.argument("item_json")
@click.option(
    "--table",
    envvar="STORE_TABLE",
    default=DEFAULT_TABLE_NAME,
    help="DynamoDB table name",
)
@click.option("--region", envvar="AWS_REGION", help="AWS region")
@click.option("--profile", envvar="AWS_PROFILE", help="AWS profile")
@click.option("--endpoint-url", envvar="MOCK_DYNAMODB_ENDPOINT", help="DynamoDB endpoint override")
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def put_command(
    ctx: click.Context,
    item_json: str,
    table: str,
    region: str | None,
    profile: str | None,
    endpoint_url: str | None,
    text: bool,
    verbose: int,
) -> None:
    """Store a single item, replacing any item with the same key.

    Examples:

    \b
        # Put an item
        dynamo-batch-tool store put '{"PK": "btc", "SK": 1700000000, "price": 37000.5}'

    \b
    Output Format:
        Returns JSON:
        {"PK": "btc", "SK": 1700000000, "stored": true}
    """
    setup_logging(verbose)

    try:
        item = json.loads(item_json, parse_float=Decimal)
    except json.JSONDecodeError as e:
        fail(ctx, text, f"Invalid item JSON: {e}", "Pass the item as a JSON object", 2)
        return

    if not isinstance(item, dict) or not is_complete_key(item):
        fail(ctx, text, "Item must be a JSON object with PK and SK", "Add PK and SK", 2)
        return

    try:
        logger.info(f"Putting item {item[ATTR_PK]}/{item[ATTR_SK]}")
        logger.debug(f"Table: {table}, Region: {region}")

        config = StoreConfig(table, region, profile, endpoint_url)
        BatchedStoreAccess(config).put(item)

        if text:
            output_text(f"✅ Stored {item[ATTR_PK]} {to_json(item[ATTR_SK])}")
        else:
            output_json({ATTR_PK: item[ATTR_PK], ATTR_SK: item[ATTR_SK], "stored": True})

    except StoreError as e:
        fail(ctx, text, str(e), "Check table configuration", 3)
    except (ClientError, BotoCoreError) as e:
        fail(ctx, text, str(e), "Check table exists and AWS credentials", 3)


@click.command("get")
@click.argument("pk")
@click.argument("sk", callback=number_callback)
@click.option(
    "--table",
    envvar="STORE_TABLE",
    default=DEFAULT_TABLE_NAME,
    help="DynamoDB table name",
)
@click.option("--region", envvar="AWS_REGION", help="AWS region")
@click.option("--profile", envvar="AWS_PROFILE", help="AWS profile")
@click.option("--endpoint-url", envvar="MOCK_DYNAMODB_ENDPOINT", help="DynamoDB endpoint override")
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def get_command(
    ctx: click.Context,
    pk: str,
    sk: Any,
    table: str,
    region: str | None,
    profile: str | None,
    endpoint_url: str | None,
    text: bool,
    verbose: int,
) -> None:
    """Retrieve a single item by PK and SK.

    Exit codes:
    - 0: Item found
    - 1: Item not found
    - 3: AWS error (table not found, permissions, etc.)

    Examples:

    \b
        # Get an item
        dynamo-batch-tool store get btc 1700000000

    \b
    Output Format:
        Returns the stored item as JSON
    """
    setup_logging(verbose)

    try:
        logger.info(f"Getting item {pk}/{sk}")
        logger.debug(f"Table: {table}, Region: {region}")

        config = StoreConfig(table, region, profile, endpoint_url)
        item = BatchedStoreAccess(config).get({ATTR_PK: pk, ATTR_SK: sk})

        if item is None:
            fail(ctx, text, f"Item '{pk}' / {sk} not found", "Check PK and SK", 1)
            return

        if text:
            for name, value in item.items():
                output_text(f"{name} = {to_json(value)}")
        else:
            output_json(item)

    except StoreError as e:
        fail(ctx, text, str(e), "Check table configuration", 3)
    except (ClientError, BotoCoreError) as e:
        fail(ctx, text, str(e), "Check table exists and AWS credentials", 3)


@click.command("history")
@click.argument("pk")
@click.option(
    "--after",
    callback=number_callback,
    default=str(DEFAULT_WATERMARK),
    help="Only return items with SK greater than this value",
)
@click.option(
    "--table",
    envvar="STORE_TABLE",
    default=DEFAULT_TABLE_NAME,
    help="DynamoDB table name",
)
@click.option("--region", envvar="AWS_REGION", help="AWS region")
@click.option("--profile", envvar="AWS_PROFILE", help="AWS profile")
@click.option("--endpoint-url", envvar="MOCK_DYNAMODB_ENDPOINT", help="DynamoDB endpoint override")
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def history_command(
    ctx: click.Context,
    pk: str,
    after: Any,
    table: str,
    region: str | None,
    profile: str | None,
    endpoint_url: str | None,
    text: bool,
    verbose: int,
) -> None:
    """List every item of a partition in ascending SK order.

    Follows the store's pagination until the whole partition (above --after)
    has been read.

    Examples:

    \b
        # Full history of a partition
        dynamo-batch-tool store history btc

    \b
        # Only items newer than a timestamp
        dynamo-batch-tool store history btc --after 1700000000

    \b
    Output Format:
        Returns JSON:
        {"PK": "btc", "count": 5, "items": [...]}
    """
    setup_logging(verbose)

    try:
        logger.info(f"Reading history of '{pk}' after {after}")
        logger.debug(f"Table: {table}, Region: {region}")

        config = StoreConfig(table, region, profile, endpoint_url)
        items = BatchedStoreAccess(config).get_historical_values(pk, after)

        if text:
            if not items:
                output_text(f"No items found in '{pk}' after {after}")
            else:
                output_text(f"Found {len(items)} item(s):")
                for item in items:
                    output_text(f"  {to_json(item.get(ATTR_SK))}")
        else:
            output_json({ATTR_PK: pk, "count": len(items), "items": items})

    except StoreError as e:
        fail(ctx, text, str(e), "Check table configuration", 3)
    except (ClientError, BotoCoreError) as e:
        fail(ctx, text, str(e), "Check table exists and AWS credentials", 3)
