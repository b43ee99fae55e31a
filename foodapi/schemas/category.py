from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CategoryPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str | None = None
    slug: str | None = None
    description: str | None = None
    image: str | None = None
    is_active: bool | int | str | None = None
    sort_order: int | str | None = None

    def supplied(self) -> dict[str, Any]:
        data = self.model_dump(exclude_unset=True)
        data.update(self.model_extra or {})
        return data


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: str | None = None
    description: str = ""
    image: str | None = None
    is_active: bool = True
    sort_order: int = 0


class CategoryChanges(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    slug: str | None = None
    description: str | None = None
    image: str | None = None
    is_active: bool | None = None
    sort_order: int | None = None


class CategoryResponse(BaseModel):
    id: int
    name: str
    slug: str
    description: str | None = None
    image: str | None = None
    is_active: bool
    sort_order: int = 0
    product_count: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CategoryListResponse(BaseModel):
    success: bool = True
    count: int
    data: list[CategoryResponse]


class CategoryDetailResponse(BaseModel):
    success: bool = True
    message: str | None = None
    data: CategoryResponse
