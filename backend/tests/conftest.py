"""pytest 설정 및 fixtures."""
import os

# 앱 import 전에 설정해야 get_settings()에 반영됨
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "test"

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from core.database import build_async_engine, build_session_maker, create_tables
from main import app


# 테스트용 인메모리 SQLite DB
SQLALCHEMY_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def db_session():
    """각 테스트마다 새로운 인메모리 DB 세션."""
    engine = build_async_engine(SQLALCHEMY_DATABASE_URL)
    await create_tables(engine)
    session_maker = build_session_maker(engine)

    async with session_maker() as session:
        yield session

    await engine.dispose()


@pytest.fixture(scope="function")
def client():
    """테스트 클라이언트.

    lifespan이 테스트마다 새 엔진/캐시를 만들기 때문에 DB와 캐시가 테스트 간에 공유되지 않습니다.
    """
    with TestClient(app) as c:
        yield c


@pytest.fixture
def apartment_payload():
    """매물 등록 요청 바디."""
    def _make(**overrides):
        payload = {
            "unitName": "Sky Penthouse Apartment",
            "unitNumber": "AP-001",
            "project": "Marina Heights",
            "price": 2500000,
            "bedrooms": 4,
            "bathrooms": 3,
            "areaSqft": 3500,
            "location": "Dubai Marina",
            "description": "Penthouse with sea views.",
            "images": ["https://images.example.com/ap-001.jpg"],
            "amenities": ["Swimming Pool", "Gym"],
        }
        payload.update(overrides)
        return payload
    return _make
