"""
Shared Schema Building Blocks

- CamelModel: snake_case attributes in Python, camelCase keys on the wire
- Page: the paginated list envelope used by every list endpoint
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """
    Base model for all API schemas.

    alias_generator turns total_count into totalCount when serializing.
    populate_by_name lets both spellings through on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Page(CamelModel, Generic[T]):
    """
    One page of results.

    totalPages is ceil(totalCount / limit), so an empty result has
    zero pages.
    """

    data: list[T] = Field(..., description="Items on this page")
    total_count: int = Field(..., ge=0, description="Number of matching items")
    total_pages: int = Field(..., ge=0, description="Number of pages")
    current_page: int = Field(..., ge=1, description="Page number returned")
