"""
Unit tests for the BatchedStoreAccess facade.
"""

from unittest.mock import MagicMock, patch

import pytest
from conftest import FakeStoreClient, make_items

from dynamo_batch_tool import BatchedStoreAccess, StoreConfig, ThrottledWriteError


def test_uses_client_config_when_no_config_given(fake_client: FakeStoreClient):
    store = BatchedStoreAccess(client=fake_client)

    assert store.config is fake_client.config
    assert store.client is fake_client


def test_builds_store_client_from_config():
    config = StoreConfig(table_name="prices", region="eu-west-1")

    with patch("dynamo_batch_tool.store.core.client.boto3.Session"):
        store = BatchedStoreAccess(config)

    assert store.client.table_name == "prices"


def test_reads_config_from_env_by_default(monkeypatch):
    monkeypatch.setenv("STORE_TABLE", "from-env")

    with patch("dynamo_batch_tool.store.core.client.boto3.Session"):
        store = BatchedStoreAccess()

    assert store.config.table_name == "from-env"


def test_round_trip_through_facade(fake_client: FakeStoreClient):
    store = BatchedStoreAccess(client=fake_client)
    items = make_items(30, pk="btc")

    outcome = store.batch_write(items, fail_on_error=True)
    fetched = store.batch_get([{"PK": "btc", "SK": sk} for sk in range(30)])
    history = store.get_historical_values("btc", last_key=24)
    deleted = store.delete_all([{"PK": "btc", "SK": 0}])

    assert outcome.submitted == 30
    assert sorted(item["SK"] for item in fetched) == list(range(30))
    assert [item["SK"] for item in history] == [25, 26, 27, 28, 29]
    assert deleted.deleted == [{"PK": "btc", "SK": 0}]
    assert store.get({"PK": "btc", "SK": 0}) is None


def test_injected_sleep_is_used_for_write_retries():
    client = FakeStoreClient(write_unprocessed=lambda items: items)
    sleep = MagicMock()
    store = BatchedStoreAccess(client=client, sleep=sleep, rand=lambda: 0.5)

    outcome = store.batch_write(make_items(2), fail_on_error=False)

    assert sleep.call_count == 6
    assert len(outcome.dropped) == 2


def test_fail_on_error_surfaces_throttling():
    client = FakeStoreClient(write_unprocessed=lambda items: items)
    store = BatchedStoreAccess(client=client, sleep=lambda s: None)

    with pytest.raises(ThrottledWriteError) as exc_info:
        store.batch_write(make_items(2), fail_on_error=True)

    assert len(exc_info.value.unprocessed) == 2


def test_get_secrets_delegates_to_client():
    client = MagicMock()
    client.get_secrets.return_value = {"PK": "lambda-secrets"}
    store = BatchedStoreAccess(config=StoreConfig(), client=client)

    assert store.get_secrets() == {"PK": "lambda-secrets"}
    client.get_secrets.assert_called_once_with(None)
