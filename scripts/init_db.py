"""Create database tables for onboarding submissions."""

import asyncio

from sqlalchemy.ext.asyncio import create_async_engine

from src.config import settings
from src.models import Base


async def init():
    """Create all tables that do not exist yet."""
    engine = create_async_engine(settings.database_url)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    await engine.dispose()
    for table in Base.metadata.sorted_tables:
        print(f"  + Table: {table.name}")


if __name__ == "__main__":
    asyncio.run(init())
