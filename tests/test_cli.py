"""
Unit tests for the store CLI commands.

BatchedStoreAccess and the table operations are patched, so no AWS calls
are made.
"""

import json
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError
from click.testing import CliRunner

from dynamo_batch_tool.cli import main
from dynamo_batch_tool.store.exceptions import (
    BatchGetExhaustedError,
    TableAlreadyExistsError,
    ThrottledWriteError,
)
from dynamo_batch_tool.store.models import DeleteOutcome, WriteOutcome

BATCH = "dynamo_batch_tool.store.commands.batch_commands.BatchedStoreAccess"
ITEM = "dynamo_batch_tool.store.commands.item_commands.BatchedStoreAccess"


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def items_file(tmp_path):
    path = tmp_path / "items.json"
    path.write_text(json.dumps([{"PK": "btc", "SK": 1, "price": 1.5}, {"PK": "btc", "SK": 2}]))
    return str(path)


def test_batch_write_outputs_outcome(runner: CliRunner, items_file: str):
    with patch(BATCH) as access_cls:
        access_cls.return_value.batch_write.return_value = WriteOutcome(
            chunks=1, submitted=2, pruned=0
        )
        result = runner.invoke(main, ["store", "batch-write", "-f", items_file, "--table", "prices"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {
        "chunks": 1,
        "submitted": 2,
        "pruned": 0,
        "dropped": 0,
        "succeeded": True,
    }
    config = access_cls.call_args.args[0]
    assert config.table_name == "prices"
    items, fail_on_error = access_cls.return_value.batch_write.call_args.args
    assert items[0]["price"] == Decimal("1.5")
    assert fail_on_error is False


def test_batch_write_throttled_exits_1(runner: CliRunner, items_file: str):
    with patch(BATCH) as access_cls:
        access_cls.return_value.batch_write.side_effect = ThrottledWriteError([{"PK": "btc"}])
        result = runner.invoke(main, ["store", "batch-write", "-f", items_file, "--fail-on-error"])

    assert result.exit_code == 1
    assert "Write requests throttled" in result.output
    assert access_cls.return_value.batch_write.call_args.args[1] is True


def test_batch_write_rejects_invalid_file(runner: CliRunner, tmp_path):
    path = tmp_path / "bad.json"
    path.write_text('{"PK": "btc"}')

    with patch(BATCH) as access_cls:
        result = runner.invoke(main, ["store", "batch-write", "-f", str(path)])

    assert result.exit_code == 2
    access_cls.return_value.batch_write.assert_not_called()


def test_batch_write_aws_error_exits_3(runner: CliRunner, items_file: str):
    with patch(BATCH) as access_cls:
        access_cls.return_value.batch_write.side_effect = ClientError(
            {"Error": {"Code": "ResourceNotFoundException", "Message": "no table"}},
            "BatchWriteItem",
        )
        result = runner.invoke(main, ["store", "batch-write", "-f", items_file, "--text"])

    assert result.exit_code == 3
    assert "Error" in result.output


def test_batch_get_outputs_items(runner: CliRunner, items_file: str):
    with patch(BATCH) as access_cls:
        access_cls.return_value.batch_get.return_value = [
            {"PK": "btc", "SK": Decimal("1"), "price": Decimal("1.5")}
        ]
        result = runner.invoke(main, ["store", "batch-get", "-f", items_file, "--retries", "5"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {
        "count": 1,
        "items": [{"PK": "btc", "SK": 1, "price": 1.5}],
    }
    assert access_cls.return_value.batch_get.call_args.args[1] == 5


def test_batch_get_exhausted_exits_1(runner: CliRunner, items_file: str):
    with patch(BATCH) as access_cls:
        access_cls.return_value.batch_get.side_effect = BatchGetExhaustedError([{"PK": "btc"}])
        result = runner.invoke(main, ["store", "batch-get", "-f", items_file])

    assert result.exit_code == 1


def test_delete_outputs_counts(runner: CliRunner, items_file: str):
    with patch(BATCH) as access_cls:
        access_cls.return_value.delete_all.return_value = DeleteOutcome(
            deleted=[{"PK": "btc", "SK": 1}], skipped=[{"PK": "btc"}]
        )
        result = runner.invoke(main, ["store", "delete", "-f", items_file])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"deleted": 1, "skipped": 1}


def test_put_stores_item(runner: CliRunner):
    with patch(ITEM) as access_cls:
        result = runner.invoke(main, ["store", "put", '{"PK": "btc", "SK": 7, "price": 2.5}'])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"PK": "btc", "SK": 7, "stored": True}
    access_cls.return_value.put.assert_called_once_with(
        {"PK": "btc", "SK": 7, "price": Decimal("2.5")}
    )


@pytest.mark.parametrize("payload", ["not json", '{"PK": "btc"}', "[1]"])
def test_put_rejects_invalid_item(runner: CliRunner, payload: str):
    with patch(ITEM) as access_cls:
        result = runner.invoke(main, ["store", "put", payload])

    assert result.exit_code == 2
    access_cls.return_value.put.assert_not_called()


def test_get_found(runner: CliRunner):
    with patch(ITEM) as access_cls:
        access_cls.return_value.get.return_value = {"PK": "btc", "SK": Decimal("0")}
        result = runner.invoke(main, ["store", "get", "btc", "0"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"PK": "btc", "SK": 0}
    access_cls.return_value.get.assert_called_once_with({"PK": "btc", "SK": 0})


def test_get_missing_exits_1(runner: CliRunner):
    with patch(ITEM) as access_cls:
        access_cls.return_value.get.return_value = None
        result = runner.invoke(main, ["store", "get", "btc", "1"])

    assert result.exit_code == 1


def test_get_rejects_non_numeric_sort_key(runner: CliRunner):
    with patch(ITEM):
        result = runner.invoke(main, ["store", "get", "btc", "latest"])

    assert result.exit_code == 2


def test_history_outputs_items(runner: CliRunner):
    with patch(ITEM) as access_cls:
        access_cls.return_value.get_historical_values.return_value = [
            {"PK": "btc", "SK": Decimal("5")},
            {"PK": "btc", "SK": Decimal("8")},
        ]
        result = runner.invoke(main, ["store", "history", "btc", "--after", "3"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["count"] == 2
    access_cls.return_value.get_historical_values.assert_called_once_with("btc", 3)


def test_history_defaults_to_full_partition(runner: CliRunner):
    with patch(ITEM) as access_cls:
        access_cls.return_value.get_historical_values.return_value = []
        result = runner.invoke(main, ["store", "history", "btc", "--text"])

    assert result.exit_code == 0, result.output
    assert "No items found" in result.output
    access_cls.return_value.get_historical_values.assert_called_once_with("btc", -1)


def test_create_table(runner: CliRunner):
    with patch("dynamo_batch_tool.store.commands.table_commands.create_table") as create:
        create.return_value = {"TableStatus": "CREATING", "TableArn": "arn:aws:dynamodb:prices"}
        result = runner.invoke(main, ["store", "create-table", "--table", "prices"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {
        "table": "prices",
        "status": "CREATING",
        "arn": "arn:aws:dynamodb:prices",
    }
    config, billing_mode = create.call_args.args
    assert config.table_name == "prices"
    assert billing_mode == "PAY_PER_REQUEST"


def test_create_table_already_exists(runner: CliRunner):
    with patch("dynamo_batch_tool.store.commands.table_commands.create_table") as create:
        create.side_effect = TableAlreadyExistsError("Table 'prices' already exists")
        result = runner.invoke(main, ["store", "create-table", "--table", "prices"])

    assert result.exit_code == 1


def test_drop_table_requires_approve(runner: CliRunner):
    with patch("dynamo_batch_tool.store.commands.table_commands.drop_table") as drop:
        result = runner.invoke(main, ["store", "drop-table"])

    assert result.exit_code == 2
    drop.assert_not_called()


def test_drop_table(runner: CliRunner):
    with patch("dynamo_batch_tool.store.commands.table_commands.drop_table") as drop:
        drop.return_value = {"TableStatus": "DELETING"}
        result = runner.invoke(main, ["store", "drop-table", "--approve", "--table", "prices"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"table": "prices", "status": "DELETING"}
