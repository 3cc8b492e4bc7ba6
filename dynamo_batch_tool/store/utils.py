"""
Utility functions for batched store operations.
"""

import json
from collections.abc import Iterator, Sequence
from decimal import Decimal
from typing import Any, TypeVar

from .constants import ATTR_PK, ATTR_SK
from .exceptions import ItemFileError

T = TypeVar("T")


def chunked(items: Sequence[T], size: int) -> Iterator[list[T]]:
    """
    Split a sequence into consecutive chunks.

    Args:
        items: Sequence to split
        size: Maximum chunk size (must be >= 1)

    Yields:
        Lists of at most ``size`` elements, in input order
    """
    if size < 1:
        raise ValueError("Chunk size must be at least 1")
    for i in range(0, len(items), size):
        yield list(items[i : i + size])


def remove_duplicate_keys(items: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Remove entries sharing the same (PK, SK) pair, keeping the first occurrence.

    Args:
        items: Items or keys exposing PK and SK

    Returns:
        New list preserving input order with each (PK, SK) exactly once
    """
    result: list[dict[str, Any]] = []
    for index, item in enumerate(items):
        # Quadratic, but chunks never exceed 100 entries
        if not any(_same_key(checked, item) for checked in items[:index]):
            result.append(item)
    return result


def _same_key(a: dict[str, Any], b: dict[str, Any]) -> bool:
    return a.get(ATTR_PK) == b.get(ATTR_PK) and a.get(ATTR_SK) == b.get(ATTR_SK)


def is_complete_key(key: dict[str, Any]) -> bool:
    """
    Check that a key carries both a partition key and a sort key.

    A sort key of 0 is a valid key; only a missing or None SK is rejected.
    """
    return bool(key.get(ATTR_PK)) and key.get(ATTR_SK) is not None


def key_of(item: dict[str, Any]) -> dict[str, Any]:
    """Extract the (PK, SK) key from an item."""
    return {ATTR_PK: item[ATTR_PK], ATTR_SK: item[ATTR_SK]}


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(data: Any) -> str:
    """Serialize store data (which may contain Decimals and sets) to JSON."""
    return json.dumps(data, default=_json_default)


def output_json(data: Any, quiet: bool = False) -> None:
    """
    Output JSON to stdout.

    Args:
        data: Data to output as JSON
        quiet: If True, suppress output
    """
    if not quiet:
        print(to_json(data))


def output_text(message: str, quiet: bool = False) -> None:
    """
    Output text to stdout.

    Args:
        message: Message to output
        quiet: If True, suppress output
    """
    if not quiet:
        print(message)


def error_json(error: str, solution: str, exit_code: int) -> dict[str, Any]:
    """
    Format error as JSON.

    Args:
        error: Error message
        solution: Solution suggestion
        exit_code: Exit code

    Returns:
        Error dictionary
    """
    return {"error": error, "solution": solution, "exit_code": exit_code}


def error_text(error: str, solution: str) -> str:
    """
    Format error as human-readable text.

    Args:
        error: Error message
        solution: Solution suggestion

    Returns:
        Formatted error message
    """
    return f"❌ Error: {error}\n\n💡 Solution: {solution}"


def validate_table_name(table_name: str) -> bool:
    """
    Validate DynamoDB table name.

    Args:
        table_name: Table name to validate

    Returns:
        True if valid

    Raises:
        ValueError: If table name is invalid
    """
    if not table_name:
        raise ValueError("Table name cannot be empty")
    if len(table_name) < 3 or len(table_name) > 255:
        raise ValueError("Table name must be between 3 and 255 characters")
    if not all(c.isalnum() or c in "-_." for c in table_name):
        raise ValueError(
            "Table name can only contain alphanumeric characters, hyphens, underscores, and periods"
        )
    return True


def parse_number(text: str) -> int | Decimal:
    """
    Parse a sort key given on the command line.

    Returns:
        int for integral input, Decimal otherwise

    Raises:
        ValueError: If text is not a number
    """
    try:
        return int(text)
    except ValueError:
        pass
    try:
        value = Decimal(text)
    except ArithmeticError as e:
        raise ValueError(f"'{text}' is not a number") from e
    if not value.is_finite():
        raise ValueError(f"'{text}' is not a finite number")
    return value


def load_records_file(file_path: str) -> list[dict[str, Any]]:
    """
    Load a JSON array of items or keys from a file.

    Numbers with a fractional part are loaded as Decimal so they can be
    written to DynamoDB unchanged.

    Args:
        file_path: Path to JSON file

    Returns:
        List of records

    Raises:
        ItemFileError: If the file cannot be read or is not an array of objects
    """
    try:
        with open(file_path) as f:
            data = json.load(f, parse_float=Decimal)
    except json.JSONDecodeError as e:
        raise ItemFileError(f"Invalid JSON in '{file_path}': {e}")
    except OSError as e:
        raise ItemFileError(f"Cannot read '{file_path}': {e}")

    if not isinstance(data, list) or not all(isinstance(record, dict) for record in data):
        raise ItemFileError(f"'{file_path}' must contain a JSON array of objects")
    return data
