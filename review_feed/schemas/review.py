"""Record schemas returned by the review contract's view methods.

Field names follow the contract's JSON serialization. Timestamps are NEAR
block timestamps in nanoseconds since the Unix epoch.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

_NANOS_PER_SECOND = 1_000_000_000


def nanos_to_datetime(nanos: int) -> datetime:
    """Convert a block timestamp (ns since epoch) to an aware UTC datetime."""
    seconds, remainder = divmod(nanos, _NANOS_PER_SECOND)
    return datetime.fromtimestamp(seconds, tz=UTC).replace(
        microsecond=remainder // 1000
    )


class Feedback(BaseModel):
    """A review left by a user about a company, or a reply to another review.

    Attributes:
        id: Feedback id.
        parent_id: Id of the feedback this replies to (0 for top level).
        user_id: Author's user id.
        company_id: Reviewed company id.
        content: Review text.
        reaction: 0 like, 1 dislike, 2 ban.
        rating: Star rating.
        create_at: Creation block timestamp (ns).
        update_at: Last update block timestamp (ns).
        activate: False once moderated out.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int = Field(ge=0)
    parent_id: int = Field(default=0, ge=0)
    user_id: int = Field(default=0, ge=0)
    company_id: int = Field(default=0, ge=0)
    content: str
    reaction: int = Field(default=0, ge=0)
    rating: int = Field(default=0, ge=0)
    up_vote: int = Field(default=0, ge=0)
    down_vote: int = Field(default=0, ge=0)
    report_vote: int = Field(default=0, ge=0)
    create_at: int = Field(ge=0)
    update_at: int = Field(default=0, ge=0)
    activate: bool = True

    @property
    def created_at(self) -> datetime:
        return nanos_to_datetime(self.create_at)


class Company(BaseModel):
    """A reviewed company."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int = Field(ge=0)
    name: str
    rating: int = Field(default=0, ge=0)
    rating_count: int = Field(default=0, ge=0)
    company_type: str = ""
    size: str = ""
    address: str = ""
    create_at: int = Field(default=0, ge=0)
    update_at: int = Field(default=0, ge=0)
    activate: bool = True

    @property
    def created_at(self) -> datetime:
        return nanos_to_datetime(self.create_at)
