"""Paged record sources backed by the review contract's view methods.

Every paged view method on the contract takes (page, size) and returns
items.skip(page * size).take(size), newest first. `page` there is a 0-based
page index, so sources translate the paginator's record offset into it.
"""

from collections.abc import Sequence
from typing import Any, ClassVar, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from review_feed.adapters.sources.base import RecordSource
from review_feed.adapters.sources.near_rpc import NearRpcClient
from review_feed.core.errors import ResponseFormatError
from review_feed.schemas.review import Company, Feedback

logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=BaseModel)


def contract_page_index(offset: int, limit: int) -> int:
    """Convert a record offset to the contract's 0-based page index.

    Args:
        offset: Records to skip; must be a multiple of limit.
        limit: Page size (> 0).

    Returns:
        offset // limit.

    Raises:
        ValueError: If offset is negative, limit is not positive, or the
            window is not aligned to a page boundary.
    """
    if limit <= 0:
        raise ValueError(f"limit must be positive, got {limit}")
    if offset < 0:
        raise ValueError(f"offset must be non-negative, got {offset}")
    if offset % limit:
        raise ValueError(
            f"offset {offset} is not aligned to page size {limit}; "
            "the contract only serves whole pages"
        )
    return offset // limit


class ContractRecordSource(RecordSource[ModelT]):
    """Base for sources that call one paged view method.

    Subclasses set `view_method`, `record_model`, and, for filtered
    families, override `filter_args()`.
    """

    view_method: ClassVar[str]
    record_model: ClassVar[type[BaseModel]]

    def __init__(self, client: NearRpcClient) -> None:
        self._client = client

    @property
    def source_name(self) -> str:
        return self.view_method

    def filter_args(self) -> dict[str, Any]:
        return {}

    async def fetch_page(self, offset: int, limit: int) -> Sequence[ModelT]:
        page = contract_page_index(offset, limit)
        args = {**self.filter_args(), "page": page, "size": limit}
        raw = await self._client.view(self.view_method, args)

        if not isinstance(raw, list):
            raise ResponseFormatError(
                f"Expected a list from {self.view_method}, got {type(raw).__name__}",
                method=self.view_method,
            )
        try:
            records = [self.record_model.model_validate(item) for item in raw]
        except ValidationError as e:
            raise ResponseFormatError(
                f"Malformed record from {self.view_method}: {e}",
                method=self.view_method,
            ) from e

        logger.debug(
            "contract_page_fetched",
            method=self.view_method,
            offset=offset,
            limit=limit,
            count=len(records),
        )
        return records  # type: ignore[return-value]


class FeedbackSource(ContractRecordSource[Feedback]):
    """All feedbacks, newest first."""

    view_method = "get_feedbacks"
    record_model = Feedback


class UserFeedbackSource(ContractRecordSource[Feedback]):
    """Active feedbacks written by one user."""

    view_method = "get_feedbacks_by_user_id_paging"
    record_model = Feedback

    def __init__(self, client: NearRpcClient, user_id: int) -> None:
        super().__init__(client)
        self.user_id = user_id

    def filter_args(self) -> dict[str, Any]:
        return {"user_id": self.user_id}


class ParentFeedbackSource(ContractRecordSource[Feedback]):
    """Active replies to one feedback."""

    view_method = "get_feedbacks_by_parent_id_paging"
    record_model = Feedback

    def __init__(self, client: NearRpcClient, parent_id: int) -> None:
        super().__init__(client)
        self.parent_id = parent_id

    def filter_args(self) -> dict[str, Any]:
        return {"parent_id": self.parent_id}


class CompanyFeedbackSource(ContractRecordSource[Feedback]):
    """Active feedbacks about one company."""

    view_method = "get_feedbacks_by_company_id_paging"
    record_model = Feedback

    def __init__(self, client: NearRpcClient, company_id: int) -> None:
        super().__init__(client)
        self.company_id = company_id

    def filter_args(self) -> dict[str, Any]:
        return {"company_id": self.company_id}


class CompanySource(ContractRecordSource[Company]):
    """Active companies, most recently updated first."""

    view_method = "get_companies_paging"
    record_model = Company
