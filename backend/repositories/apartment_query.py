"""매물 목록 조회 조건 구성.

필터를 WHERE 조건 / ORDER BY / OFFSET·LIMIT 으로 변환하고,
동시에 이 요청이 캐시 가능한 "기본 목록"(필터 없이 페이지/정렬만 있는 요청)인지 판단합니다.
"""
import math
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import or_, asc, desc

from models.apartment import Apartment, ApartmentAmenity
from schemas.apartment import ApartmentFilters, PaginationMeta

# 정렬 허용 컬럼 (API 필드명 -> 컬럼)
_ALLOWED_SORT = {
    "price": Apartment.price,
    "createdAt": Apartment.created_at,
    "areaSqft": Apartment.area_sqft,
    "bedrooms": Apartment.bedrooms,
    "bathrooms": Apartment.bathrooms,
}

_SEARCH_COLUMNS = (
    Apartment.unit_name,
    Apartment.unit_number,
    Apartment.project,
    Apartment.location,
)


@dataclass
class ListingQuery:
    conditions: list[Any] = field(default_factory=list)
    order_by: list[Any] = field(default_factory=list)
    offset: int = 0
    limit: int = 10
    is_default: bool = True


def is_default_listing(filters: ApartmentFilters) -> bool:
    """페이지/정렬 외의 조건이 하나도 없으면 True."""
    return not (
        filters.search
        or filters.min_price is not None
        or filters.max_price is not None
        or filters.min_area is not None
        or filters.max_area is not None
        or filters.bedrooms
        or filters.bathrooms
        or filters.locations
        or filters.amenities
        or filters.is_available is not None
    )


def search_condition(token: str):
    """텍스트 검색: 네 컬럼 중 하나라도 포함하면 매칭 (대소문자 무시)."""
    return or_(*(col.icontains(token, autoescape=True) for col in _SEARCH_COLUMNS))


def build_listing_query(filters: ApartmentFilters) -> ListingQuery:
    conds = []

    if filters.search:
        conds.append(search_condition(filters.search))

    # numeric ranges (inclusive)
    if filters.min_price is not None:
        conds.append(Apartment.price >= filters.min_price)
    if filters.max_price is not None:
        conds.append(Apartment.price <= filters.max_price)
    if filters.min_area is not None:
        conds.append(Apartment.area_sqft >= filters.min_area)
    if filters.max_area is not None:
        conds.append(Apartment.area_sqft <= filters.max_area)

    if filters.bedrooms:
        conds.append(Apartment.bedrooms.in_(filters.bedrooms))
    if filters.bathrooms:
        conds.append(Apartment.bathrooms.in_(filters.bathrooms))
    if filters.locations:
        conds.append(Apartment.location.in_(filters.locations))

    # 편의시설은 요청한 항목을 모두 가진 매물만 (ALL 매칭)
    for amenity in dict.fromkeys(filters.amenities or []):
        conds.append(Apartment.amenity_links.any(ApartmentAmenity.name == amenity))

    # 명시하지 않으면 입주 가능 매물만
    available = filters.is_available if filters.is_available is not None else True
    conds.append(Apartment.is_available == available)

    col = _ALLOWED_SORT.get(filters.sort_by, Apartment.created_at)
    direction = asc if filters.sort_order == "asc" else desc
    # id는 동일 값 정렬 시 페이지 경계를 고정하기 위한 보조 키
    order_by = [direction(col), direction(Apartment.id)]

    return ListingQuery(
        conditions=conds,
        order_by=order_by,
        offset=(filters.page - 1) * filters.limit,
        limit=filters.limit,
        is_default=is_default_listing(filters),
    )


def build_pagination(page: int, limit: int, total: int) -> PaginationMeta:
    total_pages = math.ceil(total / limit) if limit else 0
    return PaginationMeta(
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )
