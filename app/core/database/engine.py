"""
Database engine configuration and session management.

Current: SQLite (async with aiosqlite)
Future: PostgreSQL (switch to asyncpg)

The engine is owned by a `Database` handle created by the application
factory (`app.main.create_app`) and stored on `app.state.db`. Routes never
import an engine directly; they receive a session through `get_db`.
"""
from collections.abc import AsyncGenerator
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from app.core import config
from app.utils import get_logger


log = get_logger(__name__)


class Database:
    """
    Engine plus session factory for one database URL.
    
    Usage:
        db = Database("sqlite+aiosqlite:///./data.db")
        await db.init()
        async with db.session() as session:
            ...
        await db.dispose()
    """

    def __init__(self, url: str | None = None, echo: bool = False):
        self.url = url or config.SQLALCHEMY_DATABASE_URL
        self.engine: AsyncEngine = create_async_engine(
            self.url,
            # NullPool for SQLite to avoid connection pool issues
            # For PostgreSQL, remove poolclass or use QueuePool
            poolclass=NullPool if self.url.startswith("sqlite") else None,
            echo=echo,
            future=True,
        )
        self.session = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )

    async def init(self) -> None:
        """
        Create all tables.
        Call this on application startup.
        """
        from app.core.database.base import Base
        
        # Import all models to ensure they're registered with SQLAlchemy
        from app.features.permissions.models import Permission, Role  # noqa: F401
        from app.features.users.models import User, Person  # noqa: F401
        from app.features.contacts.models import Contact  # noqa: F401
        from app.features.applications.models import Application  # noqa: F401
        
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        log.info("Database tables ready")

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for getting async database sessions.
    
    Usage in FastAPI routes:
        @router.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db)):
            result = await db.execute(select(Item))
            return result.scalars().all()
    """
    database: Database = request.app.state.db
    async with database.session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
