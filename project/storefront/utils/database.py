# storefront/utils/database.py

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine, AsyncSession
from sqlalchemy.orm import declarative_base

# ────────────── Base для моделей ──────────────
Base = declarative_base()  # базовый класс для всех моделей SQLAlchemy


# ────────────── Движок и фабрика сессий ──────────────
def create_engine(database_url: str) -> AsyncEngine:
    return create_async_engine(
        database_url,
        echo=False,           # True можно включить для отладки SQL
        pool_pre_ping=True,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


# ────────────── Инициализация базы данных ──────────────
async def init_db(engine: AsyncEngine):
    """Создаёт все таблицы в базе данных (если ещё не созданы)."""
    from storefront.models import order  # noqa: F401  регистрирует модель в Base.metadata

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
