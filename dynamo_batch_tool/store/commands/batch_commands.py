"""
Batch write, batch get and bulk delete commands.
"""

import click
from botocore.exceptions import BotoCoreError, ClientError

from ..config import StoreConfig
from ..constants import DEFAULT_GET_RETRIES, DEFAULT_MAX_WORKERS, DEFAULT_TABLE_NAME
from ..core.access import BatchedStoreAccess
from ..exceptions import BatchGetExhaustedError, ItemFileError, StoreError, ThrottledWriteError
from ..logging_config import get_logger, setup_logging
from ..utils import load_records_file, output_json, output_text, to_json
from .common import fail

logger = get_logger(__name__)


@click.command("batch-write")
@click.option(
    "--file",
    "-f",
    "file_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Path to JSON file containing an array of items",
)
@click.option(
    "--fail-on-error",
    is_flag=True,
    help="Exit with an error if items stay unprocessed after retries",
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
@click.option(
    "--max-workers",
    envvar="STORE_MAX_WORKERS",
    type=int,
    default=DEFAULT_MAX_WORKERS,
    help="Maximum chunks in flight",
)
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def batch_write_command(
    ctx: click.Context,
    file_path: str,
    fail_on_error: bool,
    table: str,
    region: str | None,
    profile: str | None,
    endpoint_url: str | None,
    max_workers: int,
    text: bool,
    verbose: int,
) -> None:
    """Write many items in chunks of 25 with retries.

    Items sharing the same PK and SK within a chunk of 25 are written once
    (first occurrence wins). Unprocessed items are retried with exponential
    backoff; without --fail-on-error, items still unprocessed afterwards are
    dropped and reported in the output.

    Examples:

    \b
        # Write items from a file
        dynamo-batch-tool store batch-write -f items.json

    \b
        # Fail if the store keeps throttling
        dynamo-batch-tool store batch-write -f items.json --fail-on-error

    \b
    Output Format:
        Returns JSON:
        {"chunks": 3, "submitted": 60, "pruned": 0, "dropped": 0, "succeeded": true}
    """
    setup_logging(verbose)

    try:
        items = load_records_file(file_path)
        logger.info(f"Writing {len(items)} item(s) from '{file_path}'")
        logger.debug(f"Table: {table}, Region: {region}, Fail on error: {fail_on_error}")

        config = StoreConfig(table, region, profile, endpoint_url, max_workers)
        outcome = BatchedStoreAccess(config).batch_write(items, fail_on_error)

        if text:
            output_text(f"✅ Wrote {outcome.submitted} item(s) in {outcome.chunks} chunk(s)")
            if outcome.pruned:
                output_text(f"Pruned duplicates: {outcome.pruned}")
            if outcome.dropped:
                output_text(f"⚠️  Dropped unprocessed: {len(outcome.dropped)}")
        else:
            output_json(outcome.to_dict())

    except ItemFileError as e:
        fail(ctx, text, str(e), "Provide a JSON array of items with PK and SK", 2)
    except ThrottledWriteError as e:
        fail(ctx, text, str(e), "Retry later or increase table write capacity", 1)
    except StoreError as e:
        fail(ctx, text, str(e), "Check table configuration", 3)
    except (ClientError, BotoCoreError) as e:
        fail(ctx, text, str(e), "Check table exists and AWS credentials", 3)


@click.command("batch-get")
@click.option(
    "--file",
    "-f",
    "file_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Path to JSON file containing an array of keys",
)
@click.option(
    "--retries",
    type=click.IntRange(min=1),
    default=DEFAULT_GET_RETRIES,
    help="Number of passes over unprocessed keys",
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
@click.option(
    "--max-workers",
    envvar="STORE_MAX_WORKERS",
    type=int,
    default=DEFAULT_MAX_WORKERS,
    help="Maximum chunks in flight",
)
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def batch_get_command(
    ctx: click.Context,
    file_path: str,
    retries: int,
    table: str,
    region: str | None,
    profile: str | None,
    endpoint_url: str | None,
    max_workers: int,
    text: bool,
    verbose: int,
) -> None:
    """Fetch many items by key in chunks of 100.

    Keys the store leaves unprocessed are fetched again, up to --retries
    passes in total. Keys that do not exist are absent from the output.

    Examples:

    \b
        # Fetch items
        dynamo-batch-tool store batch-get -f keys.json

    \b
        # Extract values with jq
        dynamo-batch-tool store batch-get -f keys.json | jq '.items[].value'

    \b
    Output Format:
        Returns JSON:
        {"count": 2, "items": [{"PK": "a", "SK": 1, ...}, ...]}
    """
    setup_logging(verbose)

    try:
        keys = load_records_file(file_path)
        logger.info(f"Fetching {len(keys)} key(s) from '{file_path}'")
        logger.debug(f"Table: {table}, Region: {region}, Retries: {retries}")

        config = StoreConfig(table, region, profile, endpoint_url, max_workers)
        items = BatchedStoreAccess(config).batch_get(keys, retries)

        if text:
            output_text(f"Found {len(items)} item(s):")
            for item in items:
                output_text(f"  {item.get('PK')} {to_json(item.get('SK'))}")
        else:
            output_json({"count": len(items), "items": items})

    except ItemFileError as e:
        fail(ctx, text, str(e), "Provide a JSON array of keys with PK and SK", 2)
    except BatchGetExhaustedError as e:
        fail(ctx, text, str(e), "Retry later or increase --retries", 1)
    except StoreError as e:
        fail(ctx, text, str(e), "Check table configuration", 3)
    except (ClientError, BotoCoreError) as e:
        fail(ctx, text, str(e), "Check table exists and AWS credentials", 3)


@click.command("delete")
@click.option(
    "--file",
    "-f",
    "file_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Path to JSON file containing an array of keys",
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
@click.option(
    "--max-workers",
    envvar="STORE_MAX_WORKERS",
    type=int,
    default=DEFAULT_MAX_WORKERS,
    help="Maximum deletes in flight",
)
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def delete_command(
    ctx: click.Context,
    file_path: str,
    table: str,
    region: str | None,
    profile: str | None,
    endpoint_url: str | None,
    max_workers: int,
    text: bool,
    verbose: int,
) -> None:
    """Delete items by key.

    Keys without a PK or SK are skipped (an SK of 0 is valid).
    Deleting a key that does not exist succeeds.

    Examples:

    \b
        # Delete items
        dynamo-batch-tool store delete -f keys.json

    \b
    Output Format:
        Returns JSON:
        {"deleted": 2, "skipped": 1}
    """
    setup_logging(verbose)

    try:
        keys = load_records_file(file_path)
        logger.info(f"Deleting {len(keys)} key(s) from '{file_path}'")
        logger.debug(f"Table: {table}, Region: {region}")

        config = StoreConfig(table, region, profile, endpoint_url, max_workers)
        outcome = BatchedStoreAccess(config).delete_all(keys)

        if text:
            output_text(f"✅ Deleted {len(outcome.deleted)} item(s)")
            if outcome.skipped:
                output_text(f"⚠️  Skipped malformed keys: {len(outcome.skipped)}")
        else:
            output_json(outcome.to_dict())

    except ItemFileError as e:
        fail(ctx, text, str(e), "Provide a JSON array of keys with PK and SK", 2)
    except StoreError as e:
        fail(ctx, text, str(e), "Check table configuration", 3)
    except (ClientError, BotoCoreError) as e:
        fail(ctx, text, str(e), "Check table exists and AWS credentials", 3)
