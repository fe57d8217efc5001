"""Envelope shared by all paginated list responses."""

from typing import Generic, List, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class PageMeta(BaseModel):
    current_page: int
    per_page: int
    total: int
    last_page: int


class Page(BaseModel, Generic[T]):
    data: List[T]
    meta: PageMeta
