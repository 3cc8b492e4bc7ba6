"""
Type models for batched store operations.
"""

from dataclasses import dataclass, field
from typing import Any

Item = dict[str, Any]
Key = dict[str, Any]


@dataclass
class BatchResult:
    """Partial-success result of a single native batch call."""

    processed: list[Item] = field(default_factory=list)
    unprocessed: list[Item] = field(default_factory=list)


@dataclass
class Page:
    """One page of a range query; next_watermark is None at the end of the range."""

    items: list[Item]
    next_watermark: Any = None


@dataclass
class WriteOutcome:
    """Summary of a chunked batch write."""

    chunks: int = 0
    submitted: int = 0
    pruned: int = 0
    dropped: list[Item] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.dropped

    def to_dict(self) -> dict[str, Any]:
        return {
            "chunks": self.chunks,
            "submitted": self.submitted,
            "pruned": self.pruned,
            "dropped": len(self.dropped),
            "succeeded": self.succeeded,
        }


@dataclass
class DeleteOutcome:
    """Keys a delete was issued for, and malformed keys that were skipped."""

    deleted: list[Key] = field(default_factory=list)
    skipped: list[Key] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"deleted": len(self.deleted), "skipped": len(self.skipped)}
