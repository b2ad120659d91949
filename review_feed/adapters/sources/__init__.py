"""Record sources for the review contract.

This module provides:
- RecordSource base class
- NearRpcClient for contract view calls
- One source per paged view method
- Factory function to get a source by family name
"""

from review_feed.adapters.sources.base import RecordSource
from review_feed.adapters.sources.near_rpc import NearRpcClient
from review_feed.adapters.sources.review_contract import (
    CompanyFeedbackSource,
    CompanySource,
    ContractRecordSource,
    FeedbackSource,
    ParentFeedbackSource,
    UserFeedbackSource,
    contract_page_index,
)

# Families filtered by an id take it as their second constructor argument.
_UNFILTERED: dict[str, type[ContractRecordSource]] = {
    "feedbacks": FeedbackSource,
    "companies": CompanySource,
}
_FILTERED: dict[str, type[ContractRecordSource]] = {
    "by_user": UserFeedbackSource,
    "by_parent": ParentFeedbackSource,
    "by_company": CompanyFeedbackSource,
}

FAMILIES: tuple[str, ...] = (*_UNFILTERED, *_FILTERED)


def get_record_source(
    family: str, client: NearRpcClient, filter_id: int | None = None
) -> ContractRecordSource:
    """Get a record source instance by family name.

    Args:
        family: One of FAMILIES. Case-insensitive.
        client: RPC client bound to the review contract.
        filter_id: User, parent feedback, or company id for the by_* families.

    Returns:
        Source whose fetch_page can drive a PollingPaginator.

    Raises:
        ValueError: If the family is unknown, or filter_id is missing for a
            filtered family (or given for an unfiltered one).
    """
    key = family.lower()
    if key in _UNFILTERED:
        if filter_id is not None:
            raise ValueError(f"Family '{family}' does not take a filter id")
        return _UNFILTERED[key](client)
    if key in _FILTERED:
        if filter_id is None:
            raise ValueError(f"Family '{family}' requires a filter id")
        return _FILTERED[key](client, filter_id)  # type: ignore[call-arg]
    known = ", ".join(FAMILIES)
    raise ValueError(f"Unknown record family: '{family}'. Known families: {known}")


__all__ = [
    "CompanyFeedbackSource",
    "CompanySource",
    "ContractRecordSource",
    "contract_page_index",
    "FAMILIES",
    "FeedbackSource",
    "get_record_source",
    "NearRpcClient",
    "ParentFeedbackSource",
    "RecordSource",
    "UserFeedbackSource",
]
