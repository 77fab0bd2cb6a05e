"""매물 조회/등록 서비스.

읽기 경로는 cache-aside 입니다.
- 상세: entity:{id}
- 기본 목록(필터 없음): listing:{page}:{limit}:{sortBy}:{sortOrder}, "listing" 태그로 묶어서 저장
- 지역 목록: popular_locations (3600초 고정)

필터가 하나라도 있는 목록 요청은 캐시를 읽지도 쓰지도 않습니다.
쓰기(등록/수정/삭제) 후에는 상세 키와 모든 기본 목록 캐시를 지우고,
지역 구성이 바뀔 수 있으면 지역 목록 캐시도 지웁니다.
캐시 장애는 로그만 남기고 DB 조회로 진행합니다 (fail-open).
"""
import json
import logging
from typing import Any, Callable, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError

from core.cache import APICache
from core.errors import AppError, ErrorKind, classify_db_error
from repositories.apartment_query import build_listing_query, build_pagination, ListingQuery
from repositories.apartment_repository import ApartmentRepository
from schemas.apartment import (
    ApartmentCreate,
    ApartmentUpdate,
    ApartmentFilters,
    ApartmentResponse,
    ApartmentPage,
)

logger = logging.getLogger(__name__)

LISTING_TAG = "listing"
LOCATIONS_CACHE_KEY = "popular_locations"
LOCATIONS_CACHE_TTL = 3600


def entity_cache_key(apartment_id: str) -> str:
    return f"entity:{apartment_id}"


def listing_cache_key(filters: ApartmentFilters) -> str:
    return f"listing:{filters.page}:{filters.limit}:{filters.sort_by}:{filters.sort_order}"


def _load_locations(raw: str) -> list[str]:
    value = json.loads(raw)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError("cached locations is not a list of strings")
    return value


class ApartmentService:
    def __init__(self, repo: ApartmentRepository, cache: APICache, cache_ttl: Optional[float] = None):
        self.repo = repo
        self.cache = cache
        self.cache_ttl = cache.default_ttl if cache_ttl is None else cache_ttl

    # ---------- 조회 ----------

    async def list_apartments(self, filters: Optional[ApartmentFilters] = None) -> ApartmentPage:
        """필터/검색/페이지네이션 목록. 기본 목록만 캐시합니다."""
        filters = filters or ApartmentFilters()
        query = build_listing_query(filters)
        logger.debug(f"매물 목록 조회: {filters.model_dump(exclude_none=True)}")

        if not query.is_default:
            return await self._fetch_page(filters, query)

        cache_key = listing_cache_key(filters)
        cached = self._cache_get(cache_key, ApartmentPage.model_validate_json)
        if cached is not None:
            return cached

        async with self.cache.lock_for(cache_key):
            cached = self._cache_get(cache_key, ApartmentPage.model_validate_json)
            if cached is not None:
                return cached

            page = await self._fetch_page(filters, query)
            # 마지막 페이지를 넘는 요청은 캐시하지 않음 (클라이언트가 키를 무한히 늘릴 수 있음)
            if filters.page <= max(page.pagination.total_pages, 1):
                self._cache_set(cache_key, page.model_dump_json(by_alias=True), self.cache_ttl, tags=[LISTING_TAG])
            return page

    async def get_apartment(self, apartment_id: str) -> ApartmentResponse:
        cache_key = entity_cache_key(apartment_id)
        cached = self._cache_get(cache_key, ApartmentResponse.model_validate_json)
        if cached is not None:
            return cached

        async with self.cache.lock_for(cache_key):
            cached = self._cache_get(cache_key, ApartmentResponse.model_validate_json)
            if cached is not None:
                return cached

            try:
                apartment = await self.repo.get(apartment_id)
            except SQLAlchemyError as e:
                raise self._store_failure("get", e, apartment_id=apartment_id) from e

            if apartment is None:
                raise AppError.not_found("Apartment", apartment_id)

            response = ApartmentResponse.model_validate(apartment)
            self._cache_set(cache_key, response.model_dump_json(by_alias=True), self.cache_ttl)
            return response

    async def get_popular_locations(self) -> list[str]:
        """지역 목록 (지역명 알파벳순). 매물 수는 정렬에 쓰지 않습니다."""
        cached = self._cache_get(LOCATIONS_CACHE_KEY, _load_locations)
        if cached is not None:
            return cached

        async with self.cache.lock_for(LOCATIONS_CACHE_KEY):
            cached = self._cache_get(LOCATIONS_CACHE_KEY, _load_locations)
            if cached is not None:
                return cached

            try:
                rows = await self.repo.distinct_locations()
            except SQLAlchemyError as e:
                raise self._store_failure("locations", e) from e

            locations = [location for location, _ in rows]
            self._cache_set(LOCATIONS_CACHE_KEY, json.dumps(locations), LOCATIONS_CACHE_TTL)
            logger.debug(f"지역 목록 캐시 저장: {len(locations)}개")
            return locations

    async def search_apartments(self, query: str, limit: int = 10) -> list[ApartmentResponse]:
        """텍스트 빠른 검색 (최신순, 캐시 없음)."""
        try:
            apartments = await self.repo.search(query, limit)
        except SQLAlchemyError as e:
            raise self._store_failure("search", e, query=query, limit=limit) from e
        return [ApartmentResponse.model_validate(a) for a in apartments]

    # ---------- 쓰기 ----------

    async def create_apartment(self, data: ApartmentCreate) -> ApartmentResponse:
        try:
            apartment = await self.repo.create(data.model_dump())
        except SQLAlchemyError as e:
            raise self._store_failure("create", e, project=data.project, unit_number=data.unit_number) from e

        # 새 지역이 생겼을 수 있음
        self._invalidate(apartment.id, invalidate_locations=True)
        logger.info(f"매물 등록: {apartment.id} ({apartment.project} {apartment.unit_number})")
        return ApartmentResponse.model_validate(apartment)

    async def update_apartment(self, apartment_id: str, data: ApartmentUpdate) -> ApartmentResponse:
        changes = data.changes()
        try:
            apartment = await self.repo.get(apartment_id)
            if apartment is None:
                raise AppError.not_found("Apartment", apartment_id)
            apartment = await self.repo.update(apartment, changes)
        except SQLAlchemyError as e:
            raise self._store_failure("update", e, apartment_id=apartment_id) from e

        self._invalidate(apartment_id, invalidate_locations="location" in changes)
        logger.info(f"매물 수정: {apartment_id} fields={list(changes.keys())}")
        return ApartmentResponse.model_validate(apartment)

    async def delete_apartment(self, apartment_id: str) -> bool:
        try:
            deleted = await self.repo.delete(apartment_id)
        except SQLAlchemyError as e:
            raise self._store_failure("delete", e, apartment_id=apartment_id) from e

        # 매물이 빠지면 지역 구성이 바뀔 수 있음
        self._invalidate(apartment_id, invalidate_locations=True)
        if deleted:
            logger.info(f"매물 삭제: {apartment_id}")
        return deleted

    # ---------- 내부 ----------

    async def _fetch_page(self, filters: ApartmentFilters, query: ListingQuery) -> ApartmentPage:
        try:
            apartments, total = await self.repo.find_page(query)
        except SQLAlchemyError as e:
            raise self._store_failure("list", e, filters=filters.model_dump(exclude_none=True)) from e

        return ApartmentPage(
            data=[ApartmentResponse.model_validate(a) for a in apartments],
            pagination=build_pagination(filters.page, filters.limit, total),
        )

    def _invalidate(self, apartment_id: str, invalidate_locations: bool = False) -> None:
        """상세/목록(/지역) 캐시 무효화. 실패해도 쓰기 작업은 성공으로 둡니다."""
        try:
            self.cache.delete(entity_cache_key(apartment_id))
            if invalidate_locations:
                self.cache.delete(LOCATIONS_CACHE_KEY)
            removed = self.cache.invalidate_tag(LISTING_TAG)
            logger.debug(f"캐시 무효화: apartment={apartment_id}, listing={removed}, locations={invalidate_locations}")
        except Exception as e:
            logger.warning(f"캐시 무효화 실패 (apartment={apartment_id}): {e}")

    def _cache_get(self, key: str, loader: Callable[[str], Any]) -> Optional[Any]:
        try:
            raw = self.cache.get(key)
            if raw is None:
                logger.debug(f"Cache miss: {key}")
                return None
            value = loader(raw)
        except Exception as e:
            logger.warning(f"캐시 조회 실패 ({key}), DB 조회로 진행: {e}")
            self._cache_discard(key)
            return None
        logger.debug(f"Cache hit: {key}")
        return value

    def _cache_set(self, key: str, raw: str, ttl: float, tags: Optional[Iterable[str]] = None) -> None:
        try:
            self.cache.set(key, raw, ttl=ttl, tags=tags)
            logger.debug(f"Cache set: {key} (ttl={ttl})")
        except Exception as e:
            logger.warning(f"캐시 저장 실패 ({key}): {e}")

    def _cache_discard(self, key: str) -> None:
        try:
            self.cache.delete(key)
        except Exception as e:
            logger.warning(f"손상된 캐시 삭제 실패 ({key}): {e}")

    def _store_failure(self, operation: str, exc: SQLAlchemyError, **context: Any) -> AppError:
        error = classify_db_error(exc)
        if error.kind in (ErrorKind.STORAGE, ErrorKind.INTERNAL):
            logger.error(f"매물 {operation} 실패 {context}: {exc}")
        else:
            logger.warning(f"매물 {operation} 거부 [{error.kind.value}] {context}: {error.message}")
        return error
