"""Response Envelope — the {success, message, data, meta} shape every endpoint returns."""

from typing import Generic, TypeVar

from pydantic import BaseModel

DataT = TypeVar("DataT")


class PageMetaOut(BaseModel):
    page: int
    limit: int
    total: int
    prev_page: int | None
    next_page: int | None


class ApiResponse(BaseModel, Generic[DataT]):
    success: bool = True
    message: str
    data: DataT | None = None


class PagedResponse(ApiResponse[DataT], Generic[DataT]):
    meta: PageMetaOut
