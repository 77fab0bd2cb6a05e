"""매물 저장소 (SQLAlchemy 비동기 세션).

SQLAlchemy 예외는 그대로 올려보내고, 분류는 서비스 계층에서 합니다.
"""
from typing import Optional

from sqlalchemy import func, select, desc
from sqlalchemy.ext.asyncio import AsyncSession

from core.timezone import now_utc
from models.apartment import Apartment
from repositories.apartment_query import ListingQuery, search_condition


class ApartmentRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_page(self, query: ListingQuery) -> tuple[list[Apartment], int]:
        """페이지 행과 전체 건수를 한 번의 쿼리로 조회.

        전체 건수는 COUNT(*) OVER () 윈도우 컬럼으로 함께 받습니다.
        마지막 페이지를 넘어 행이 없을 때만 건수를 따로 셉니다.
        """
        stmt = (
            select(Apartment, func.count().over().label("total"))
            .where(*query.conditions)
            .order_by(*query.order_by)
            .offset(query.offset)
            .limit(query.limit)
        )
        rows = (await self.db.execute(stmt)).all()
        if rows:
            return [row[0] for row in rows], int(rows[0][1])

        if query.offset == 0:
            return [], 0
        count_stmt = select(func.count()).select_from(Apartment).where(*query.conditions)
        total = (await self.db.execute(count_stmt)).scalar_one()
        return [], int(total)

    async def get(self, apartment_id: str) -> Optional[Apartment]:
        result = await self.db.execute(select(Apartment).where(Apartment.id == apartment_id))
        return result.scalar_one_or_none()

    async def create(self, fields: dict) -> Apartment:
        amenities = fields.pop("amenities", [])
        apartment = Apartment(**fields)
        apartment.set_amenities(amenities)
        self.db.add(apartment)
        await self._commit()
        return apartment

    async def update(self, apartment: Apartment, changes: dict) -> Apartment:
        for name, value in changes.items():
            if name == "amenities":
                apartment.set_amenities(value)
            else:
                setattr(apartment, name, value)
        apartment.updated_at = now_utc()
        await self._commit()
        return apartment

    async def delete(self, apartment_id: str) -> bool:
        apartment = await self.get(apartment_id)
        if apartment is None:
            return False
        await self.db.delete(apartment)
        await self._commit()
        return True

    async def distinct_locations(self) -> list[tuple[str, int]]:
        """지역별 매물 수 (지역명 오름차순)."""
        stmt = (
            select(Apartment.location, func.count(Apartment.id))
            .group_by(Apartment.location)
            .order_by(Apartment.location.asc())
        )
        rows = (await self.db.execute(stmt)).all()
        return [(location, count) for location, count in rows]

    async def search(self, token: str, limit: int = 10) -> list[Apartment]:
        stmt = (
            select(Apartment)
            .where(search_condition(token))
            .order_by(desc(Apartment.created_at), desc(Apartment.id))
            .limit(limit)
        )
        return list((await self.db.execute(stmt)).scalars().all())

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
