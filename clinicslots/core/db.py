from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from .config import settings
from .base import Base

engine = create_async_engine(settings.DATABASE_URL, pool_pre_ping=True)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

async def get_session():
    async with SessionLocal() as s:
        yield s

async def init_models():
    # In "migrations" mode the schema is owned elsewhere.
    if settings.DB_MANAGE == "create_all":
        import clinicslots.models  # noqa: F401  registers every table on Base.metadata
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
