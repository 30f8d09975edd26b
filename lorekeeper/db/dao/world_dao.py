"""
世界数据访问对象
"""

from typing import Optional, List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lorekeeper.db.models.world import World
from lorekeeper.utils.id_generator import generate_world_id


class WorldDAO:
    """世界 DAO"""

    @staticmethod
    async def create(session: AsyncSession, name: str, world_id: Optional[str] = None) -> World:
        """创建世界"""
        world = World(id=world_id or generate_world_id(), name=name)

        session.add(world)
        await session.flush()

        return world

    @staticmethod
    async def exists(session: AsyncSession, world_id: str) -> bool:
        """检查世界是否存在"""
        result = await session.execute(
            select(World.id).where(World.id == world_id)
        )
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def list_all(session: AsyncSession) -> List[World]:
        """获取全部世界（迁移脚本使用）"""
        result = await session.execute(select(World).order_by(World.created_at))
        return list(result.scalars().all())
