"""
时间线数据访问对象
"""

from typing import Optional, List
from sqlalchemy import select, update, delete, and_
from sqlalchemy.ext.asyncio import AsyncSession

from lorekeeper.db.models.continuity import Continuity
from lorekeeper.db.models.entity import Entity
from lorekeeper.db.models.drift import EntityDrift
from lorekeeper.utils.id_generator import generate_continuity_id


class ContinuityDAO:
    """时间线 DAO"""

    @staticmethod
    async def create(
        session: AsyncSession,
        world_id: str,
        name: str,
        description: str = "",
        branched_from_id: Optional[str] = None,
        branch_point_event_id: Optional[str] = None
    ) -> Continuity:
        """
        创建时间线

        Args:
            session: 数据库会话
            world_id: 所属世界ID
            name: 时间线名称
            description: 时间线描述
            branched_from_id: 分支来源时间线ID（与分支点事件同时出现）
            branch_point_event_id: 分支点事件ID

        Returns:
            Continuity: 新创建的时间线
        """
        continuity = Continuity(
            id=generate_continuity_id(),
            world_id=world_id,
            name=name,
            description=description,
            branched_from_id=branched_from_id,
            branch_point_event_id=branch_point_event_id,
        )

        session.add(continuity)
        await session.flush()

        return continuity

    @staticmethod
    async def get_by_id(session: AsyncSession, continuity_id: str) -> Optional[Continuity]:
        """根据ID获取时间线"""
        result = await session.execute(
            select(Continuity).where(Continuity.id == continuity_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def exists(session: AsyncSession, continuity_id: str) -> bool:
        """检查时间线是否存在"""
        result = await session.execute(
            select(Continuity.id).where(Continuity.id == continuity_id)
        )
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def list_by_world(session: AsyncSession, world_id: str) -> List[Continuity]:
        """获取世界下的全部时间线，按名称排序"""
        result = await session.execute(
            select(Continuity)
            .where(Continuity.world_id == world_id)
            .order_by(Continuity.name, Continuity.created_at)
        )
        return list(result.scalars().all())

    @staticmethod
    async def update(
        session: AsyncSession,
        continuity_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None
    ) -> Optional[Continuity]:
        """更新时间线名称和描述（分支信息不可修改）"""
        continuity = await ContinuityDAO.get_by_id(session, continuity_id)
        if not continuity:
            return None

        if name is not None:
            continuity.name = name
        if description is not None:
            continuity.description = description

        await session.flush()
        return continuity

    @staticmethod
    async def delete(session: AsyncSession, continuity_id: str) -> bool:
        """
        删除时间线

        同时删除：
        - 该时间线下的漂移记录
        - 该时间线事件自身的漂移记录
        - 该时间线下的全部事件
        从它分出的子时间线保留，分支信息一并清空

        Returns:
            时间线是否存在
        """
        if not await ContinuityDAO.exists(session, continuity_id):
            return False

        event_ids = select(Entity.id).where(Entity.continuity_id == continuity_id)

        await session.execute(
            delete(EntityDrift).where(EntityDrift.continuity_id == continuity_id)
        )
        await session.execute(
            delete(EntityDrift).where(EntityDrift.entity_id.in_(event_ids))
        )

        # 子时间线变为根时间线
        await session.execute(
            update(Continuity)
            .where(Continuity.branched_from_id == continuity_id)
            .values(branched_from_id=None, branch_point_event_id=None)
        )

        await session.execute(
            delete(Entity).where(
                and_(
                    Entity.continuity_id == continuity_id,
                    Entity.type == "event"
                )
            )
        )
        await session.execute(
            delete(Continuity).where(Continuity.id == continuity_id)
        )

        return True
