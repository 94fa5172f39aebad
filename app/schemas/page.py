"""Pagination request and response wrappers used by the store queries."""

from __future__ import annotations

import math
from enum import StrEnum
from typing import Generic, List, TypeVar

from fastapi_pagination import Params
from pydantic import BaseModel, Field, computed_field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class SortOrder(StrEnum):
    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def parse(cls, value: str | None, default: "SortOrder") -> "SortOrder":
        if not value:
            return default
        return cls.DESC if value.strip().upper().startswith("DESC") else cls.ASC


class Pageable(BaseModel):
    """1-indexed page request."""

    page_number: int = Field(default=1, ge=1)
    page_size: int = Field(default=50, ge=1)
    sort: SortOrder = SortOrder.DESC

    @property
    def offset(self) -> int:
        return (self.page_number - 1) * self.page_size

    @classmethod
    def from_params(
        cls, params: Params, sort: str | None = None, default: SortOrder = SortOrder.DESC
    ) -> "Pageable":
        """Build from fastapi-pagination query params."""
        return cls(
            page_number=params.page,
            page_size=params.size,
            sort=SortOrder.parse(sort, default),
        )


class Page(BaseModel, Generic[T]):
    page: int
    page_size: int
    sort: SortOrder = SortOrder.DESC
    total_elements: int
    content: List[T]

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "arbitrary_types_allowed": True,
    }

    @computed_field(alias="totalPages")
    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total_elements / self.page_size)

    @classmethod
    def of(cls, pageable: Pageable, total: int, content: List[T]) -> "Page[T]":
        return cls(
            page=pageable.page_number,
            page_size=pageable.page_size,
            sort=pageable.sort,
            total_elements=total,
            content=content,
        )

    def with_content(self, content: List) -> "Page":
        """Same paging metadata, different content (e.g. mapped to read models)."""
        return self.model_copy(update={"content": content})
