"""
Base classes for the Runkeeper fetcher: record sinks and fetch results.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Union

Records = Union[List[Dict[str, Any]], Dict[str, Any]]


@dataclass
class FetchResult:
    """Result of a single data set fetch."""

    service: str
    data_type: str
    data: List[Dict[str, Any]]
    timestamp: datetime
    success: bool
    error: Optional[str] = None

    @property
    def filename(self) -> str:
        """Generate standard filename for this result."""
        ts = self.timestamp.strftime("%Y_%m_%d_%H_%M")
        return f"{ts}_{self.service}_{self.data_type}.jsonl"

    @property
    def item_count(self) -> int:
        """Return number of items fetched."""
        return len(self.data)


@dataclass
class FetchOutcome:
    """Terminal state of one resource type fetch."""

    resource: str
    pages: int = 0
    items: int = 0
    error: Optional[Exception] = None

    @property
    def success(self) -> bool:
        return self.error is None


class RecordSink(ABC):
    """Boundary that receives fetched records for the ingestion pipeline."""

    @abstractmethod
    def push(self, records: Records) -> None:
        """
        Forward one page (a list of items) or one object unchanged.

        Args:
            records: The records to forward.
        """
        pass


class PipelineSink(RecordSink):
    """Forwards every page to the host pipeline's push function."""

    def __init__(self, push_record_fn: Callable[[Records], Any]):
        self._push = push_record_fn

    def push(self, records: Records) -> None:
        self._push(records)


@dataclass
class CollectingSink(RecordSink):
    """Keeps every forwarded record in memory, in order."""

    records: List[Dict[str, Any]] = field(default_factory=list)
    calls: int = 0

    def push(self, records: Records) -> None:
        self.calls += 1
        if isinstance(records, list):
            self.records.extend(records)
        else:
            self.records.append(records)
