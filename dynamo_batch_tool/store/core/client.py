"""
DynamoDB store client wrapper.

Wraps the low-level boto3 DynamoDB client, which is safe to share between
worker threads, and converts between Python values and DynamoDB attribute
values. Errors raised by boto3/botocore propagate unchanged.
"""

from decimal import Decimal
from typing import Any

import boto3
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer

from ..config import StoreConfig
from ..constants import ATTR_PK, ATTR_SK, DEFAULT_SECRETS_PK, SECRETS_TABLE_NAME
from ..logging_config import get_logger
from ..models import BatchResult, Item, Key

logger = get_logger(__name__)


def build_dynamodb_client(config: StoreConfig) -> Any:
    """Build a low-level boto3 DynamoDB client from the store configuration."""
    session = boto3.Session(profile_name=config.profile, region_name=config.effective_region)
    return session.client("dynamodb", endpoint_url=config.endpoint_url)


def _to_decimal(value: Any) -> Any:
    """Recursively convert floats to Decimal; DynamoDB numbers reject float."""
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: _to_decimal(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_decimal(v) for v in value]
    return value


class StoreClient:
    """Single-table DynamoDB client exposing item, query and native batch primitives."""

    def __init__(self, config: StoreConfig, dynamodb_client: Any | None = None):
        """
        Initialize store client.

        Args:
            config: Store configuration (table, region, profile, endpoint)
            dynamodb_client: Prebuilt boto3 DynamoDB client (optional, built from
                config when omitted)
        """
        if dynamodb_client is None:
            dynamodb_client = build_dynamodb_client(config)
        self.client = dynamodb_client
        self.config = config
        self.table_name = config.table_name
        self._serializer = TypeSerializer()
        self._deserializer = TypeDeserializer()

    def serialize(self, item: dict[str, Any]) -> dict[str, Any]:
        return {k: self._serializer.serialize(_to_decimal(v)) for k, v in item.items()}

    def deserialize(self, item: dict[str, Any]) -> dict[str, Any]:
        return {k: self._deserializer.deserialize(v) for k, v in item.items()}

    def _prepare_params(self, params: dict[str, Any]) -> dict[str, Any]:
        """Serialize attribute values and keys found in passthrough request params."""
        prepared = dict(params)
        if "ExpressionAttributeValues" in prepared:
            prepared["ExpressionAttributeValues"] = self.serialize(
                prepared["ExpressionAttributeValues"]
            )
        if "ExclusiveStartKey" in prepared:
            prepared["ExclusiveStartKey"] = self.serialize(prepared["ExclusiveStartKey"])
        return prepared

    @staticmethod
    def _key_tuple(item: Item) -> tuple[Any, Any]:
        # SK as Decimal, the form the store echoes back
        return item[ATTR_PK], _to_decimal(item[ATTR_SK])

    def get(self, key: Key, **params: Any) -> Item | None:
        """
        Get item by key.

        Args:
            key: Key to retrieve
            **params: Extra GetItem parameters (e.g. ConsistentRead, TableName)

        Returns:
            Item if found, None otherwise
        """
        request = {"TableName": self.table_name, **self._prepare_params(params)}
        response = self.client.get_item(Key=self.serialize(key), **request)
        item = response.get("Item")
        return self.deserialize(item) if item else None

    def put(self, item: Item, **params: Any) -> dict[str, Any]:
        """
        Put item, replacing any existing item with the same key.

        Args:
            item: Item to put
            **params: Extra PutItem parameters (e.g. ConditionExpression)

        Returns:
            Response from DynamoDB
        """
        request = {"TableName": self.table_name, **self._prepare_params(params)}
        response = self.client.put_item(Item=self.serialize(item), **request)
        return response  # type: ignore[no-any-return]

    def query(
        self,
        key_condition_expression: str,
        expression_attribute_values: dict[str, Any],
        **params: Any,
    ) -> dict[str, Any]:
        """
        Run a single query request (one page).

        Args:
            key_condition_expression: Key condition expression string
            expression_attribute_values: Values referenced by the expression
            **params: Extra Query parameters (e.g. Limit, ScanIndexForward)

        Returns:
            Dictionary with "Items" and, when more pages exist, "LastEvaluatedKey"
        """
        request = {
            "TableName": self.table_name,
            **self._prepare_params(params),
            "KeyConditionExpression": key_condition_expression,
            "ExpressionAttributeValues": self.serialize(expression_attribute_values),
        }
        response = self.client.query(**request)

        result: dict[str, Any] = {
            "Items": [self.deserialize(item) for item in response.get("Items", [])]
        }
        if response.get("LastEvaluatedKey"):
            result["LastEvaluatedKey"] = self.deserialize(response["LastEvaluatedKey"])
        return result

    def delete(self, key: Key, **params: Any) -> dict[str, Any]:
        """
        Delete item by key. Deleting a missing item succeeds.

        Args:
            key: Key to delete
            **params: Extra DeleteItem parameters (e.g. ConditionExpression)

        Returns:
            Response from DynamoDB
        """
        request = {"TableName": self.table_name, **self._prepare_params(params)}
        response = self.client.delete_item(Key=self.serialize(key), **request)
        return response  # type: ignore[no-any-return]

    def batch_write(self, items: list[Item]) -> BatchResult:
        """
        Submit items as one native BatchWriteItem call of put requests.

        The caller is responsible for chunking and deduplication.

        Returns:
            BatchResult splitting the given items (as passed in, not the
            store's deserialized copies) into accepted and unprocessed
        """
        if not items:
            return BatchResult()

        requests = [{"PutRequest": {"Item": self.serialize(item)}} for item in items]
        response = self.client.batch_write_item(RequestItems={self.table_name: requests})

        pending = {
            self._key_tuple(self.deserialize(request["PutRequest"]["Item"]))
            for request in response.get("UnprocessedItems", {}).get(self.table_name, [])
            if "PutRequest" in request
        }
        result = BatchResult()
        for item in items:
            if self._key_tuple(item) in pending:
                result.unprocessed.append(item)
            else:
                result.processed.append(item)
        return result

    def batch_get(self, keys: list[Key]) -> BatchResult:
        """
        Fetch keys with one native BatchGetItem call.

        The caller is responsible for chunking and deduplication.

        Returns:
            BatchResult with the items found and the keys left unprocessed
        """
        if not keys:
            return BatchResult()

        response = self.client.batch_get_item(
            RequestItems={self.table_name: {"Keys": [self.serialize(key) for key in keys]}}
        )

        processed = [
            self.deserialize(item)
            for item in response.get("Responses", {}).get(self.table_name, [])
        ]
        unprocessed = [
            self.deserialize(key)
            for key in response.get("UnprocessedKeys", {}).get(self.table_name, {}).get("Keys", [])
        ]
        return BatchResult(processed=processed, unprocessed=unprocessed)

    def get_secrets(
        self, key: Key | None = None, table_name: str = SECRETS_TABLE_NAME
    ) -> Item | None:
        """
        Read a secrets item from the shared secrets table.

        Args:
            key: Secrets key (defaults to the lambda secrets partition)
            table_name: Secrets table name

        Returns:
            Secrets item if found, None otherwise
        """
        if key is None:
            key = {ATTR_PK: DEFAULT_SECRETS_PK}
        logger.debug(f"Reading secrets from table '{table_name}'")
        return self.get(key, TableName=table_name)
