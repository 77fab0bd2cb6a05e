"""매물 API 라우터."""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from core.cache import APICache, get_cache
from core.database import get_async_db
from core.errors import AppError
from repositories import ApartmentRepository
from schemas import (
    ApartmentCreate,
    ApartmentUpdate,
    ApartmentFilters,
    ApartmentListResponse,
    ApartmentEnvelope,
    LocationsResponse,
    QuickSearchResponse,
    MessageResponse,
)
from services import ApartmentService

router = APIRouter()


def get_apartment_service(
    db: AsyncSession = Depends(get_async_db),
    cache: APICache = Depends(get_cache),
) -> ApartmentService:
    return ApartmentService(ApartmentRepository(db), cache)


@router.post("", response_model=ApartmentEnvelope, status_code=201)
async def create_apartment(data: ApartmentCreate, service: ApartmentService = Depends(get_apartment_service)):
    apartment = await service.create_apartment(data)
    return ApartmentEnvelope(data=apartment, message="Apartment created successfully")


@router.get("/locations", response_model=LocationsResponse)
async def get_popular_locations(service: ApartmentService = Depends(get_apartment_service)):
    """등록된 지역 목록 (알파벳순)."""
    return LocationsResponse(data=await service.get_popular_locations())


@router.post("/search", response_model=ApartmentListResponse)
async def search_apartments(
    filters: Optional[ApartmentFilters] = None,
    service: ApartmentService = Depends(get_apartment_service),
):
    """필터/검색/정렬/페이지네이션. 바디 없이 호출하면 기본 목록."""
    page = await service.list_apartments(filters or ApartmentFilters())
    return ApartmentListResponse(data=page.data, pagination=page.pagination)


@router.get("/quick-search", response_model=QuickSearchResponse)
async def quick_search(
    q: str = Query(..., min_length=1, max_length=100),
    limit: int = Query(10, ge=1, le=50),
    service: ApartmentService = Depends(get_apartment_service),
):
    """단지명/호수/프로젝트/지역 텍스트 빠른 검색."""
    return QuickSearchResponse(data=await service.search_apartments(q.strip(), limit))


@router.get("/{apartment_id}", response_model=ApartmentEnvelope)
async def get_apartment(apartment_id: str, service: ApartmentService = Depends(get_apartment_service)):
    return ApartmentEnvelope(data=await service.get_apartment(apartment_id))


@router.put("/{apartment_id}", response_model=ApartmentEnvelope)
async def update_apartment(
    apartment_id: str,
    data: ApartmentUpdate,
    service: ApartmentService = Depends(get_apartment_service),
):
    apartment = await service.update_apartment(apartment_id, data)
    return ApartmentEnvelope(data=apartment, message="Apartment updated successfully")


@router.delete("/{apartment_id}", response_model=MessageResponse)
async def delete_apartment(apartment_id: str, service: ApartmentService = Depends(get_apartment_service)):
    deleted = await service.delete_apartment(apartment_id)
    if not deleted:
        raise AppError.not_found("Apartment", apartment_id)
    return MessageResponse(message="Apartment deleted successfully")
