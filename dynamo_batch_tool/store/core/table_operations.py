"""
Table management operations for the store.
"""

from typing import Any, Literal

from botocore.exceptions import ClientError

from ..config import StoreConfig
from ..constants import ATTR_PK, ATTR_SK
from ..exceptions import TableAlreadyExistsError, TableNotFoundError
from .client import build_dynamodb_client


def create_table(
    config: StoreConfig,
    billing_mode: Literal["PAY_PER_REQUEST", "PROVISIONED"] = "PAY_PER_REQUEST",
    dynamodb_client: Any | None = None,
) -> dict[str, Any]:
    """
    Create the store table with a string PK and a numeric SK.

    Args:
        config: Store configuration
        billing_mode: Billing mode (PAY_PER_REQUEST or PROVISIONED)
        dynamodb_client: Prebuilt boto3 DynamoDB client (optional)

    Returns:
        Table description

    Raises:
        TableAlreadyExistsError: If table already exists
    """
    dynamodb = dynamodb_client or build_dynamodb_client(config)

    kwargs: dict[str, Any] = {
        "TableName": config.table_name,
        "KeySchema": [
            {"AttributeName": ATTR_PK, "KeyType": "HASH"},  # Partition key
            {"AttributeName": ATTR_SK, "KeyType": "RANGE"},  # Sort key
        ],
        "AttributeDefinitions": [
            {"AttributeName": ATTR_PK, "AttributeType": "S"},
            {"AttributeName": ATTR_SK, "AttributeType": "N"},
        ],
        "BillingMode": billing_mode,
        "Tags": [{"Key": "ManagedBy", "Value": "dynamo-batch-tool"}],
    }
    if billing_mode == "PROVISIONED":
        kwargs["ProvisionedThroughput"] = {"ReadCapacityUnits": 5, "WriteCapacityUnits": 5}

    try:
        response = dynamodb.create_table(**kwargs)
        return response["TableDescription"]  # type: ignore[no-any-return]
    except ClientError as e:
        if e.response["Error"]["Code"] == "ResourceInUseException":
            raise TableAlreadyExistsError(f"Table '{config.table_name}' already exists")
        raise


def drop_table(config: StoreConfig, dynamodb_client: Any | None = None) -> dict[str, Any]:
    """
    Drop the store table.

    Raises:
        TableNotFoundError: If table does not exist
    """
    dynamodb = dynamodb_client or build_dynamodb_client(config)

    try:
        response = dynamodb.delete_table(TableName=config.table_name)
        return response["TableDescription"]  # type: ignore[no-any-return]
    except ClientError as e:
        if e.response["Error"]["Code"] == "ResourceNotFoundException":
            raise TableNotFoundError(f"Table '{config.table_name}' not found")
        raise
