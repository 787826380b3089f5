# Database connection setup
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from .config import get_settings
from .core.models import BaseModel

# Get settings
settings = get_settings()


def _connect_args(database_url: str) -> dict:
    # asyncpg cancels statements running longer than command_timeout
    if database_url.startswith("postgresql+asyncpg"):
        return {"command_timeout": settings.database_command_timeout}
    return {}


# Create async engine using settings
engine = create_async_engine(
    settings.database_url,
    echo=settings.database_echo,
    connect_args=_connect_args(settings.database_url),
)

# Session factory
AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db_session():
    """Get database session, rolling back anything left uncommitted on error."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def create_tables():
    """Create all tables."""
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)
