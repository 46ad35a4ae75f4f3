from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .thought import Thought

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Envelope used by every journal backend endpoint; ``code == 0`` is success."""

    code: int
    msg: str = ""
    data: T | None = None

    @property
    def is_success(self) -> bool:
        return self.code == 0


class Pagination(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    page: int
    page_size: int
    total: int
    total_pages: int

    @property
    def has_more(self) -> bool:
        return self.page < self.total_pages


class PaginatedThoughts(BaseModel):
    data: list[Thought]
    pagination: Pagination

    @property
    def has_more(self) -> bool:
        return self.pagination.has_more


class EmptyData(BaseModel):
    pass
