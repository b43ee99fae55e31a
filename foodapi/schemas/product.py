from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class ProductType(str, Enum):
    VEG = "veg"
    NON_VEG = "non-veg"


class ProductStatus(str, Enum):
    ACTIVE = "active"
    UNAVAILABLE = "unavailable"


# Wire shape: a JSON body or the fields of a multipart form.
# Form fields always arrive as strings; JSON may carry real booleans/lists.
class ProductPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str | None = None
    description: str | None = None
    price: float | int | str | None = None
    original_price: float | int | str | None = None
    category_id: int | str | None = None
    image: str | None = None
    type: str | None = None
    tags: list[Any] | str | None = None
    prep_time: str | None = None
    ingredients: list[Any] | str | None = None
    is_available: bool | int | str | None = None
    is_popular: bool | int | str | None = None
    is_featured: bool | int | str | None = None
    slug: str | None = None

    def supplied(self) -> dict[str, Any]:
        """Fields present in the request, unknown ones included."""
        data = self.model_dump(exclude_unset=True)
        data.update(self.model_extra or {})
        return data


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    price: float = Field(..., gt=0)
    original_price: float | None = Field(None, gt=0)
    category_id: int
    image: str = Field(..., min_length=1)
    type: ProductType
    tags: list[str] = []
    prep_time: str = "15-20 min"
    ingredients: list[str] = []
    is_available: bool = True
    is_popular: bool = False
    is_featured: bool = False
    slug: str | None = None


class ProductChanges(BaseModel):
    """Validated partial update; only set fields are written."""
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    price: float | None = Field(None, gt=0)
    original_price: float | None = Field(None, gt=0)
    category_id: int | None = None
    image: str | None = None
    type: ProductType | None = None
    tags: list[str] | None = None
    prep_time: str | None = None
    ingredients: list[str] | None = None
    is_available: bool | None = None
    is_popular: bool | None = None
    is_featured: bool | None = None
    slug: str | None = None


class ProductResponse(BaseModel):
    id: int
    name: str
    slug: str | None = None
    description: str | None = None
    price: float
    original_price: float | None = None
    category_id: int | None = None
    category_name: str | None = None
    category_slug: str | None = None
    image: str | None = None
    type: str
    tags: list[str] = []
    prep_time: str | None = None
    ingredients: list[str] = []
    is_available: bool
    is_popular: bool
    is_featured: bool
    rating: float | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("tags", "ingredients", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return [] if value is None else value

    @computed_field
    @property
    def status(self) -> ProductStatus:
        return ProductStatus.ACTIVE if self.is_available else ProductStatus.UNAVAILABLE


class ProductListResponse(BaseModel):
    success: bool = True
    count: int
    data: list[ProductResponse]


class ProductDetailResponse(BaseModel):
    success: bool = True
    message: str | None = None
    data: ProductResponse
