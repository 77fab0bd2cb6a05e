from datetime import datetime
from typing import Optional, List, Literal
from urllib.parse import urlparse
from pydantic import BaseModel, Field, NonNegativeInt, field_validator, model_validator
from pydantic.alias_generators import to_camel

SortField = Literal["price", "createdAt", "areaSqft", "bedrooms", "bathrooms"]
SortOrder = Literal["asc", "desc"]

# offset((page-1)*limit)이 DB 정수 범위를 넘지 않도록 제한
MAX_PAGE = 1_000_000

# 명시적 null로 비울 수 있는 필드
_NULLABLE_UPDATE_FIELDS = {"description"}


def _check_image_urls(urls: List[str]) -> List[str]:
    for url in urls:
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("Each image must be a valid URL")
    return urls


def _check_amenities(names: List[str]) -> List[str]:
    cleaned = [name.strip() for name in names]
    for name in cleaned:
        if not name:
            raise ValueError("Amenity cannot be empty")
        if len(name) > 100:
            raise ValueError("Amenity must not exceed 100 characters")
    return cleaned


class ApartmentCreate(BaseModel):
    unit_name: str = Field(min_length=1, max_length=100)
    unit_number: str = Field(min_length=1, max_length=50)
    project: str = Field(min_length=1, max_length=100)
    price: float = Field(gt=0)
    bedrooms: int = Field(ge=0, le=20)
    bathrooms: int = Field(ge=0, le=20)
    area_sqft: int = Field(gt=0)
    location: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    images: List[str] = Field(default_factory=list)
    amenities: List[str] = Field(default_factory=list)
    is_available: bool = True

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        str_strip_whitespace = True
        extra = "forbid"

    @field_validator("images")
    @classmethod
    def validate_images(cls, v):
        return _check_image_urls(v)

    @field_validator("amenities")
    @classmethod
    def validate_amenities(cls, v):
        return _check_amenities(v)


class ApartmentUpdate(BaseModel):
    unit_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    unit_number: Optional[str] = Field(default=None, min_length=1, max_length=50)
    project: Optional[str] = Field(default=None, min_length=1, max_length=100)
    price: Optional[float] = Field(default=None, gt=0)
    bedrooms: Optional[int] = Field(default=None, ge=0, le=20)
    bathrooms: Optional[int] = Field(default=None, ge=0, le=20)
    area_sqft: Optional[int] = Field(default=None, gt=0)
    location: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    images: Optional[List[str]] = None
    amenities: Optional[List[str]] = None
    is_available: Optional[bool] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        str_strip_whitespace = True
        extra = "forbid"

    @field_validator("images")
    @classmethod
    def validate_images(cls, v):
        return v if v is None else _check_image_urls(v)

    @field_validator("amenities")
    @classmethod
    def validate_amenities(cls, v):
        return v if v is None else _check_amenities(v)

    @model_validator(mode="after")
    def check_fields_present(self):
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update")
        for name in self.model_fields_set - _NULLABLE_UPDATE_FIELDS:
            if getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null")
        return self

    def changes(self) -> dict:
        """클라이언트가 보낸 필드만 반환 (snake_case)."""
        return self.model_dump(exclude_unset=True)


class ApartmentFilters(BaseModel):
    search: Optional[str] = None
    min_price: Optional[float] = Field(default=None, ge=0)
    max_price: Optional[float] = Field(default=None, ge=0)
    min_area: Optional[float] = Field(default=None, ge=0)
    max_area: Optional[float] = Field(default=None, ge=0)
    bedrooms: Optional[List[NonNegativeInt]] = None
    bathrooms: Optional[List[NonNegativeInt]] = None
    locations: Optional[List[str]] = None
    amenities: Optional[List[str]] = None
    is_available: Optional[bool] = None
    page: int = Field(default=1, ge=1, le=MAX_PAGE)
    limit: int = Field(default=10, ge=1, le=100)
    sort_by: SortField = "createdAt"
    sort_order: SortOrder = "desc"

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        str_strip_whitespace = True
        extra = "forbid"

    @model_validator(mode="after")
    def check_ranges(self):
        if self.min_price is not None and self.max_price is not None and self.max_price < self.min_price:
            raise ValueError("Maximum price must be greater than minimum price")
        if self.min_area is not None and self.max_area is not None and self.max_area < self.min_area:
            raise ValueError("Maximum area must be greater than minimum area")
        return self


class ApartmentResponse(BaseModel):
    id: str
    unit_name: str
    unit_number: str
    project: str
    price: float
    bedrooms: int
    bathrooms: int
    area_sqft: int
    location: str
    description: Optional[str] = None
    images: List[str]
    amenities: List[str]
    is_available: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        alias_generator = to_camel
        from_attributes = True
        populate_by_name = True


class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ApartmentPage(BaseModel):
    data: List[ApartmentResponse]
    pagination: PaginationMeta

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ApartmentListResponse(ApartmentPage):
    success: bool = True


class ApartmentEnvelope(BaseModel):
    success: bool = True
    data: ApartmentResponse
    message: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class LocationsResponse(BaseModel):
    success: bool = True
    data: List[str]


class QuickSearchResponse(BaseModel):
    success: bool = True
    data: List[ApartmentResponse]


class MessageResponse(BaseModel):
    success: bool = True
    message: str
