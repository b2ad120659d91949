"""Pydantic schemas for records read from the review contract."""

from review_feed.schemas.review import Company, Feedback, nanos_to_datetime

__all__ = [
    "Company",
    "Feedback",
    "nanos_to_datetime",
]
