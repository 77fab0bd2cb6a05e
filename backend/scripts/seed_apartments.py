#!/usr/bin/env python3
"""샘플 매물 데이터를 DB에 로드하는 스크립트

기존 매물은 모두 삭제한 뒤 다시 넣습니다.
    python scripts/seed_apartments.py
"""

import sys
import asyncio
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import func, select

from core.config import get_settings
from core.database import build_async_engine, build_session_maker, create_tables
from models.apartment import Apartment

IMG_TOWER = "https://images.unsplash.com/photo-1600596542815-ffad4c1539a9?w=800"
IMG_INTERIOR = "https://images.unsplash.com/photo-1600607687939-ce8a6c25118c?w=800"
IMG_LIVING = "https://images.unsplash.com/photo-1600607687920-4e2a09cf159d?w=800"
IMG_KITCHEN = "https://images.unsplash.com/photo-1600566752355-35792bedcfea?w=800"
IMG_VILLA = "https://images.unsplash.com/photo-1613490493576-7fde63acd811?w=800"
IMG_POOL = "https://images.unsplash.com/photo-1600607687644-c7171b42498b?w=800"
IMG_STUDIO = "https://images.unsplash.com/photo-1522708323590-d24dbb6b0267?w=800"

SAMPLE_APARTMENTS = [
    # Marina Heights
    {
        "unit_name": "Sky Penthouse Apartment", "unit_number": "AP-001", "project": "Marina Heights",
        "price": 2500000, "bedrooms": 4, "bathrooms": 3, "area_sqft": 3500, "location": "Dubai Marina",
        "description": "Penthouse apartment with panoramic views of the Arabian Gulf and a private terrace.",
        "images": [IMG_TOWER, IMG_INTERIOR],
        "amenities": ["Swimming Pool", "Gym", "Concierge", "Parking", "Balcony", "Sea View"],
        "is_available": True,
    },
    {
        "unit_name": "Marina View Apartment", "unit_number": "AP-002", "project": "Marina Heights",
        "price": 1800000, "bedrooms": 3, "bathrooms": 2, "area_sqft": 2200, "location": "Dubai Marina",
        "description": "Modern apartment with marina views and contemporary finishes.",
        "images": [IMG_LIVING, IMG_KITCHEN],
        "amenities": ["Swimming Pool", "Gym", "Concierge", "Parking", "Balcony", "Marina View"],
        "is_available": True,
    },
    {
        "unit_name": "Executive Apartment", "unit_number": "AP-003", "project": "Marina Heights",
        "price": 1200000, "bedrooms": 2, "bathrooms": 2, "area_sqft": 1500, "location": "Dubai Marina",
        "description": "Executive apartment with modern amenities and excellent connectivity.",
        "images": [IMG_LIVING],
        "amenities": ["Swimming Pool", "Gym", "Concierge", "Parking", "City View"],
        "is_available": False,
    },
    # Palm Jumeirah Villas
    {
        "unit_name": "Ocean Villa", "unit_number": "VILLA-001", "project": "Palm Jumeirah Villas",
        "price": 5000000, "bedrooms": 5, "bathrooms": 4, "area_sqft": 5000, "location": "Palm Jumeirah",
        "description": "Villa on the Palm with private beach access and ocean views.",
        "images": [IMG_VILLA, IMG_POOL],
        "amenities": ["Private Beach", "Swimming Pool", "Garden", "Parking", "Security", "Beach Access"],
        "is_available": True,
    },
    {
        "unit_name": "Garden Villa", "unit_number": "VILLA-003", "project": "Palm Jumeirah Villas",
        "price": 3800000, "bedrooms": 4, "bathrooms": 3, "area_sqft": 3800, "location": "Palm Jumeirah",
        "description": "Spacious villa with private garden in a prime location.",
        "images": [IMG_LIVING, IMG_KITCHEN],
        "amenities": ["Private Garden", "Swimming Pool", "Parking", "Security", "Gym"],
        "is_available": False,
    },
    # Dubai Hills
    {
        "unit_name": "Golf View Apartment", "unit_number": "AP-101", "project": "Dubai Hills",
        "price": 1800000, "bedrooms": 3, "bathrooms": 3, "area_sqft": 1800, "location": "Dubai Hills Estate",
        "description": "Apartment with golf course views and premium finishes throughout.",
        "images": [IMG_TOWER, IMG_INTERIOR],
        "amenities": ["Golf Course View", "Swimming Pool", "Gym", "Concierge", "Parking", "Garden"],
        "is_available": False,
    },
    {
        "unit_name": "Garden Apartment", "unit_number": "AP-102", "project": "Dubai Hills",
        "price": 1400000, "bedrooms": 2, "bathrooms": 2, "area_sqft": 1200, "location": "Dubai Hills Estate",
        "description": "Apartment with garden views and family-friendly amenities.",
        "images": [IMG_LIVING, IMG_KITCHEN],
        "amenities": ["Garden View", "Swimming Pool", "Gym", "Parking", "Playground"],
        "is_available": True,
    },
    # 업무지구
    {
        "unit_name": "Executive Suite", "unit_number": "EX-301", "project": "Business Bay Towers",
        "price": 1200000, "bedrooms": 2, "bathrooms": 2, "area_sqft": 1200, "location": "Business Bay",
        "description": "Executive apartment close to the business districts.",
        "images": [IMG_LIVING, IMG_KITCHEN],
        "amenities": ["Gym", "Concierge", "Parking", "Business Center", "City View"],
        "is_available": True,
    },
    {
        "unit_name": "Corporate Apartment", "unit_number": "CA-205", "project": "DIFC Towers",
        "price": 950000, "bedrooms": 2, "bathrooms": 2, "area_sqft": 1100, "location": "DIFC",
        "description": "Corporate apartment in the heart of the financial centre.",
        "images": [IMG_LIVING],
        "amenities": ["Gym", "Concierge", "Parking", "Business Center", "High-Speed Internet"],
        "is_available": True,
    },
    # 가족형
    {
        "unit_name": "Family Villa", "unit_number": "FV-089", "project": "Arabian Ranches",
        "price": 2200000, "bedrooms": 4, "bathrooms": 3, "area_sqft": 2800, "location": "Arabian Ranches",
        "description": "Family home in a gated community with schools nearby.",
        "images": [IMG_VILLA, IMG_POOL],
        "amenities": ["Garden", "Swimming Pool", "Gym", "Parking", "Security", "Playground"],
        "is_available": True,
    },
    {
        "unit_name": "Cozy Family Home", "unit_number": "CF-108", "project": "Jumeirah Village",
        "price": 750000, "bedrooms": 2, "bathrooms": 2, "area_sqft": 950, "location": "Jumeirah Village Circle",
        "description": "Comfortable apartment in a family-friendly community.",
        "images": [IMG_LIVING, IMG_KITCHEN],
        "amenities": ["Swimming Pool", "Gym", "Playground", "Parking", "Garden"],
        "is_available": True,
    },
    # 스튜디오
    {
        "unit_name": "Modern Studio", "unit_number": "ST-205", "project": "Downtown Living",
        "price": 450000, "bedrooms": 1, "bathrooms": 1, "area_sqft": 650, "location": "Downtown Dubai",
        "description": "Studio apartment in Downtown Dubai.",
        "images": [IMG_STUDIO],
        "amenities": ["Gym", "Concierge", "Parking", "City View"],
        "is_available": True,
    },
    {
        "unit_name": "Compact Studio", "unit_number": "CS-156", "project": "City Center",
        "price": 350000, "bedrooms": 1, "bathrooms": 1, "area_sqft": 450, "location": "Deira",
        "description": "Affordable studio apartment in Deira.",
        "images": [IMG_STUDIO],
        "amenities": ["Concierge", "Parking", "City View"],
        "is_available": True,
    },
    {
        "unit_name": "Urban Studio", "unit_number": "US-301", "project": "JBR Towers",
        "price": 550000, "bedrooms": 1, "bathrooms": 1, "area_sqft": 750, "location": "JBR",
        "description": "Urban studio with beach access.",
        "images": [IMG_STUDIO],
        "amenities": ["Beach Access", "Gym", "Concierge", "Parking", "Sea View"],
        "is_available": True,
    },
    {
        "unit_name": "Mansion", "unit_number": "MN-001", "project": "Palm Jumeirah",
        "price": 8000000, "bedrooms": 6, "bathrooms": 5, "area_sqft": 6000, "location": "Palm Jumeirah",
        "description": "Mansion on Palm Jumeirah with private beach.",
        "images": [IMG_VILLA, IMG_POOL],
        "amenities": ["Private Beach", "Swimming Pool", "Garden", "Parking", "Security", "Maid Room"],
        "is_available": False,
    },
]


async def seed(session) -> int:
    """기존 매물 삭제 후 샘플 매물 등록"""
    existing = (await session.execute(select(Apartment))).scalars().all()
    for apartment in existing:
        await session.delete(apartment)
    await session.flush()
    print(f"  기존 매물 {len(existing)}개 삭제")

    count = 0
    for row in SAMPLE_APARTMENTS:
        fields = dict(row)
        amenities = fields.pop("amenities")
        apartment = Apartment(**fields)
        apartment.set_amenities(amenities)
        session.add(apartment)
        count += 1

        if count % 5 == 0:
            print(f"  {count}/{len(SAMPLE_APARTMENTS)}개 처리 중...")

    return count


async def print_stats(session) -> None:
    total = (await session.execute(select(func.count(Apartment.id)))).scalar_one()
    available = (await session.execute(
        select(func.count(Apartment.id)).where(Apartment.is_available.is_(True))
    )).scalar_one()
    luxury = (await session.execute(
        select(func.count(Apartment.id)).where(Apartment.price >= 2000000)
    )).scalar_one()
    studios = (await session.execute(
        select(func.count(Apartment.id)).where(Apartment.bedrooms == 1)
    )).scalar_one()

    print("\n통계:")
    print(f"  전체: {total}")
    print(f"  입주 가능: {available}")
    print(f"  2M 이상: {luxury}")
    print(f"  스튜디오: {studios}")


async def main():
    settings = get_settings()
    engine = build_async_engine(settings.async_database_url)

    # 테이블 생성
    await create_tables(engine)

    session_maker = build_session_maker(engine)
    async with session_maker() as session:
        try:
            print(f"샘플 매물 로드 중: {len(SAMPLE_APARTMENTS)}개")
            count = await seed(session)
            await session.commit()
            print(f"\n총 {count}개 매물 저장 완료!")
            await print_stats(session)
        except Exception as e:
            await session.rollback()
            print(f"오류 발생: {e}")
            raise

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
