"""
Table management commands for the store.
"""

from typing import Literal

import click
from botocore.exceptions import BotoCoreError, ClientError

from ..config import StoreConfig
from ..constants import DEFAULT_TABLE_NAME
from ..core.table_operations import create_table, drop_table
from ..exceptions import StoreError, TableAlreadyExistsError, TableNotFoundError
from ..logging_config import get_logger, setup_logging
from ..utils import output_json, output_text
from .common import fail

logger = get_logger(__name__)


@click.command("create-table")
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
    "--billing",
    type=click.Choice(["on-demand", "provisioned"]),
    default="on-demand",
    help="Billing mode (default: on-demand)",
)
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def create_table_command(
    ctx: click.Context,
    table: str,
    region: str | None,
    profile: str | None,
    endpoint_url: str | None,
    billing: str,
    text: bool,
    verbose: int,
) -> None:
    """Create the DynamoDB table for the store.

    Creates a table with a string partition key (PK) and a numeric sort
    key (SK).

    Examples:

    \b
        # Create table with default name
        dynamo-batch-tool store create-table

    \b
        # Create table against a local endpoint
        dynamo-batch-tool store create-table --endpoint-url http://localhost:8000

    \b
    Output Format:
        Returns JSON with table details:
        {"table": "...", "status": "CREATING", "arn": "..."}
    """
    setup_logging(verbose)

    try:
        logger.info(f"Creating table '{table}'")
        logger.debug(f"Region: {region}, Billing: {billing}")

        billing_mode: Literal["PAY_PER_REQUEST", "PROVISIONED"] = (
            "PAY_PER_REQUEST" if billing == "on-demand" else "PROVISIONED"
        )
        config = StoreConfig(table, region, profile, endpoint_url)
        table_desc = create_table(config, billing_mode)

        if text:
            output_text(f"✅ Table '{table}' created successfully")
            output_text(f"Status: {table_desc['TableStatus']}")
            output_text(f"ARN: {table_desc['TableArn']}")
        else:
            output_json(
                {
                    "table": table,
                    "status": table_desc["TableStatus"],
                    "arn": table_desc["TableArn"],
                }
            )

    except TableAlreadyExistsError as e:
        fail(ctx, text, str(e), "Use a different table name or drop the existing table", 1)
    except StoreError as e:
        fail(ctx, text, str(e), "Check table configuration", 3)
    except (ClientError, BotoCoreError) as e:
        fail(ctx, text, str(e), "Check AWS credentials and permissions", 3)


@click.command("drop-table")
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
    "--approve",
    is_flag=True,
    help="Required flag to confirm table deletion",
)
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def drop_table_command(
    ctx: click.Context,
    table: str,
    region: str | None,
    profile: str | None,
    endpoint_url: str | None,
    approve: bool,
    text: bool,
    verbose: int,
) -> None:
    """Drop the DynamoDB table and every item in it.

    Requires --approve.

    Examples:

    \b
        # Drop the table
        dynamo-batch-tool store drop-table --approve

    \b
    Output Format:
        Returns JSON:
        {"table": "...", "status": "DELETING"}
    """
    setup_logging(verbose)

    if not approve:
        fail(ctx, text, "Table deletion requires --approve", "Re-run with --approve", 2)
        return

    try:
        logger.info(f"Dropping table '{table}'")
        logger.debug(f"Region: {region}")

        config = StoreConfig(table, region, profile, endpoint_url)
        table_desc = drop_table(config)

        if text:
            output_text(f"✅ Table '{table}' is being deleted")
        else:
            output_json({"table": table, "status": table_desc["TableStatus"]})

    except TableNotFoundError as e:
        fail(ctx, text, str(e), "Check the table name and region", 1)
    except StoreError as e:
        fail(ctx, text, str(e), "Check table configuration", 3)
    except (ClientError, BotoCoreError) as e:
        fail(ctx, text, str(e), "Check AWS credentials and permissions", 3)
