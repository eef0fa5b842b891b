"""
Database session management with SQLAlchemy async
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from core.config import settings
from models.ingestion_run import IngestionRun
import logging

logger = logging.getLogger(__name__)


def build_engine(database_url: str = settings.DATABASE_URL) -> AsyncEngine:
    """Create the shared engine; its pool is shared by ingestion tasks and request handlers"""
    kwargs = {"echo": False, "future": True}
    if database_url.startswith("postgresql"):
        kwargs.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_pre_ping=True,
        )
    return create_async_engine(database_url, **kwargs)


def build_session_maker(bind: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False
    )


# Create async engine
engine = build_engine()

# Create session factory
async_session_maker = build_session_maker(engine)


async def get_session() -> AsyncSession:
    """Get database session"""
    async with async_session_maker() as session:
        yield session


async def init_audit_table(bind: AsyncEngine = engine) -> None:
    """Create the ingestion_runs table if missing; dataset tables are created by runs"""
    async with bind.begin() as conn:
        await conn.run_sync(IngestionRun.__table__.create, checkfirst=True)
