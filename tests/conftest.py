"""
Shared fixtures for unit tests.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any

import pytest

from dynamo_batch_tool.store.config import StoreConfig
from dynamo_batch_tool.store.models import BatchResult


class FakeStoreClient:
    """
    In-memory stand-in for StoreClient.

    Stores items keyed by (PK, SK) and records every native call. Partial
    success is scripted through ``write_unprocessed`` / ``get_unprocessed``
    callables returning the subset the store should leave unprocessed.
    """

    def __init__(
        self,
        page_size: int = 100,
        write_unprocessed: Callable[[list[dict[str, Any]]], list[dict[str, Any]]] | None = None,
        get_unprocessed: Callable[[list[dict[str, Any]]], list[dict[str, Any]]] | None = None,
    ):
        self.config = StoreConfig(table_name="test-table", max_workers=4)
        self.table_name = self.config.table_name
        self.page_size = page_size
        self.write_unprocessed = write_unprocessed
        self.get_unprocessed = get_unprocessed
        self.items: dict[tuple[Any, Any], dict[str, Any]] = {}
        self.write_calls: list[list[dict[str, Any]]] = []
        self.get_calls: list[list[dict[str, Any]]] = []
        self.query_calls: list[dict[str, Any]] = []
        self.delete_calls: list[dict[str, Any]] = []
        self._lock = threading.Lock()

    def get(self, key: dict[str, Any], **params: Any) -> dict[str, Any] | None:
        return self.items.get((key["PK"], key["SK"]))

    def put(self, item: dict[str, Any], **params: Any) -> dict[str, Any]:
        self.items[(item["PK"], item["SK"])] = dict(item)
        return {}

    def query(
        self,
        key_condition_expression: str,
        expression_attribute_values: dict[str, Any],
        **params: Any,
    ) -> dict[str, Any]:
        self.query_calls.append(dict(expression_attribute_values))
        pk = expression_attribute_values[":pk"]
        after = expression_attribute_values[":sk"]
        matching = sorted(
            (item for (p, s), item in self.items.items() if p == pk and s > after),
            key=lambda item: item["SK"],
        )
        page = matching[: self.page_size]
        result: dict[str, Any] = {"Items": page}
        if len(matching) > self.page_size:
            result["LastEvaluatedKey"] = {"PK": pk, "SK": page[-1]["SK"]}
        return result

    def delete(self, key: dict[str, Any], **params: Any) -> dict[str, Any]:
        with self._lock:
            self.delete_calls.append(dict(key))
            self.items.pop((key["PK"], key["SK"]), None)
        return {}

    def batch_write(self, items: list[dict[str, Any]]) -> BatchResult:
        with self._lock:
            self.write_calls.append(list(items))
        unprocessed = self.write_unprocessed(items) if self.write_unprocessed else []
        pending = {(i["PK"], i["SK"]) for i in unprocessed}
        processed = [i for i in items if (i["PK"], i["SK"]) not in pending]
        with self._lock:
            for item in processed:
                self.items[(item["PK"], item["SK"])] = dict(item)
        return BatchResult(processed=processed, unprocessed=unprocessed)

    def batch_get(self, keys: list[dict[str, Any]]) -> BatchResult:
        with self._lock:
            self.get_calls.append(list(keys))
        unprocessed = self.get_unprocessed(keys) if self.get_unprocessed else []
        pending = {(k["PK"], k["SK"]) for k in unprocessed}
        processed = [
            self.items[(k["PK"], k["SK"])]
            for k in keys
            if (k["PK"], k["SK"]) not in pending and (k["PK"], k["SK"]) in self.items
        ]
        return BatchResult(processed=processed, unprocessed=unprocessed)


@pytest.fixture
def fake_client() -> FakeStoreClient:
    """Yields an empty in-memory store client."""
    return FakeStoreClient()


def make_items(count: int, pk: str = "coin") -> list[dict[str, Any]]:
    return [{"PK": pk, "SK": i, "value": i * 10} for i in range(count)]
