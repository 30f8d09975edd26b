"""
数据库初始化脚本

创建所有表，并为没有时间线的世界补建默认时间线
"""

import asyncio
from typing import Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from lorekeeper.db import base
from lorekeeper.db.base import get_database_url, create_engine_for_url
from lorekeeper.db.models import Base
from lorekeeper.db.dao import WorldDAO, CampaignDAO, ContinuityDAO
from lorekeeper.db.session import get_session

DEFAULT_CONTINUITY_NAME = "Default Timeline"


async def create_tables(engine: Optional[AsyncEngine] = None):
    """创建所有表（传入引擎时复用，不负责释放）"""
    own_engine = engine is None
    if own_engine:
        engine = create_engine_for_url(get_database_url(async_mode=True))

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if own_engine:
        await engine.dispose()


async def migrate_default_timelines(session: AsyncSession) -> int:
    """
    为没有任何时间线的世界创建默认时间线，
    并把该世界中未指定时间线的战役挂到默认时间线上

    重复执行无副作用

    Returns:
        补建时间线的世界数量
    """
    migrated = 0

    for world in await WorldDAO.list_all(session):
        if await ContinuityDAO.list_by_world(session, world.id):
            continue

        continuity = await ContinuityDAO.create(session, world_id=world.id, name=DEFAULT_CONTINUITY_NAME)
        attached = await CampaignDAO.attach_orphans(session, world.id, continuity.id)
        migrated += 1

        logger.info(f"🧭 Default timeline {continuity.id} created for world {world.id} ({attached} campaign(s) attached)")

    return migrated


async def main():
    """主函数"""
    print("🚀 Starting database initialization...")
    print(f"Database URL: {get_database_url(async_mode=True)}")

    try:
        print("\n📦 Step 1: Creating tables...")
        await base.init_db()
        await create_tables(base.async_engine)
        print("✅ All tables created")

        print("\n📦 Step 2: Migrating default timelines...")
        async with get_session() as session:
            migrated = await migrate_default_timelines(session)
        print(f"✅ {migrated} world(s) migrated")

        print("\n✅ Database initialization completed successfully!")

    except Exception as e:
        print(f"\n❌ Database initialization failed: {e}")
        raise

    finally:
        await base.close_db()


if __name__ == "__main__":
    asyncio.run(main())
