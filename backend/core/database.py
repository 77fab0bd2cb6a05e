from fastapi import Request
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker

Base = declarative_base()


def build_async_engine(url: str) -> AsyncEngine:
    """URL에 맞는 비동기 엔진 생성.

    sqlite(aiosqlite)는 테스트/로컬 개발용이며, 인메모리 DB가 커넥션마다
    새로 만들어지지 않도록 단일 커넥션(StaticPool)을 사용합니다.
    """
    if url.startswith("sqlite"):
        return create_async_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_async_engine(
        url,
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,
        pool_recycle=1800,
    )


def build_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_tables(engine: AsyncEngine) -> None:
    # 모델 등록을 위해 import
    import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_async_db(request: Request):
    """비동기 DB 세션 의존성."""
    session_maker = request.app.state.session_maker
    async with session_maker() as session:
        try:
            yield session
        finally:
            await session.close()
