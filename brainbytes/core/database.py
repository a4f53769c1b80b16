from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base

from brainbytes.core.config import settings

DATABASE_URL = settings.DATABASE_URL

# SQLAlchemy's async engine needs the asyncpg driver in the URL
if DATABASE_URL and DATABASE_URL.startswith("postgresql://"):
    DATABASE_URL = DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://", 1)

engine = create_async_engine(DATABASE_URL, echo=settings.DB_ECHO)

AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)

# Base class for the models
Base = declarative_base()

async def init_db():
    """Create the tables (development convenience, no migrations)."""
    # Register the models on Base.metadata
    from brainbytes.models import chat, profile  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
