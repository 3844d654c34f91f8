from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import text
from .config import get_settings


class Base(DeclarativeBase):
    pass


engine = create_async_engine(get_settings().database_url, echo=False)
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncSession:
    async with async_session() as session:
        yield session


async def init_db():
    # Make sure every mapped table is registered on Base.metadata.
    from .models import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        # create_all() does not add indexes to tables that already exist,
        # so older SQLite dev DBs get them here.
        if conn.dialect.name == "sqlite":
            await conn.execute(text("CREATE UNIQUE INDEX IF NOT EXISTS ix_users_email ON users (email)"))
            await conn.execute(text("CREATE UNIQUE INDEX IF NOT EXISTS ix_threads_share_token ON threads (share_token)"))
            await conn.execute(text("CREATE INDEX IF NOT EXISTS ix_threads_owner_user_id ON threads (owner_user_id)"))
            await conn.execute(text("CREATE INDEX IF NOT EXISTS ix_messages_thread_id ON messages (thread_id)"))
