"""Abstract base class for paged record sources.

A source is a read-only, offset/limit window over one record family. Its
bound fetch_page method is what a PollingPaginator polls.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Generic, TypeVar

RecordT = TypeVar("RecordT")


class RecordSource(ABC, Generic[RecordT]):
    """Abstract base class for paged record sources."""

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Return a short name for logs (e.g., "feedbacks_by_company")."""
        ...

    @abstractmethod
    async def fetch_page(self, offset: int, limit: int) -> Sequence[RecordT]:
        """Fetch up to limit records starting at offset.

        Args:
            offset: Number of records to skip (>= 0).
            limit: Maximum number of records to return (> 0).

        Returns:
            Records in source order. Fewer than limit means the last page.

        Raises:
            SourceError: On transport or remote execution failure.
        """
        ...
