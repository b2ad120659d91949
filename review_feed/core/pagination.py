"""Pagination utilities.

Pages are 1-indexed; offsets are 0-indexed record positions.
"""

from dataclasses import dataclass

FIRST_PAGE = 1


def clamp_page(page: int) -> int:
    """Clamp a page number to the first page.

    Args:
        page: Requested page number (may be zero or negative).

    Returns:
        The page number, never below 1.
    """
    return max(FIRST_PAGE, page)


@dataclass(frozen=True)
class PageRequest:
    """A page window into a paged read operation.

    Attributes:
        page: Page number (1-indexed).
        per_page: Number of records per page.
    """

    page: int
    per_page: int

    @classmethod
    def clamped(cls, page: int, per_page: int) -> "PageRequest":
        """Build a request with the page clamped to the first page."""
        return cls(page=clamp_page(page), per_page=per_page)

    @property
    def offset(self) -> int:
        """Number of records to skip (0 for page 1)."""
        return (self.page - 1) * self.per_page

    @property
    def limit(self) -> int:
        """Maximum number of records to return (same as per_page)."""
        return self.per_page
