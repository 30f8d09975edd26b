"""
漂移记录数据访问对象

(entity_id, continuity_id, field) 三元组唯一，重复检测时原地更新
"""

from typing import Optional, List
from sqlalchemy import select, update, delete, and_
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import datetime

from lorekeeper.db.models.drift import EntityDrift
from lorekeeper.utils.id_generator import generate_drift_id


class DriftDAO:
    """漂移记录 DAO"""

    @staticmethod
    async def save(
        session: AsyncSession,
        entity_id: str,
        continuity_id: str,
        field: str,
        event_derived_value: str,
        current_value: str,
        detected_at: Optional[datetime] = None
    ) -> EntityDrift:
        """
        保存漂移记录

        如果三元组已存在则覆盖推导值、当前值和检测时间，并清空解决时间（保留原ID）；
        否则创建新记录。使用 INSERT ... ON CONFLICT DO UPDATE

        Args:
            session: 数据库会话
            entity_id: 实体ID
            continuity_id: 时间线ID
            field: 字段名
            event_derived_value: 事件推导值
            current_value: 当前值
            detected_at: 检测时间（默认当前时间）

        Returns:
            EntityDrift: 保存后的漂移记录
        """
        detected_at = detected_at or datetime.utcnow()

        # 单条语句完成插入或覆盖，并发检测同一三元组时以最后一次写入为准
        insert = postgresql_insert if session.get_bind().dialect.name == "postgresql" else sqlite_insert
        stmt = insert(EntityDrift).values(
            id=generate_drift_id(),
            entity_id=entity_id,
            continuity_id=continuity_id,
            field=field,
            event_derived_value=event_derived_value,
            current_value=current_value,
            detected_at=detected_at,
            resolved_at=None,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[EntityDrift.entity_id, EntityDrift.continuity_id, EntityDrift.field],
            set_={
                "event_derived_value": stmt.excluded.event_derived_value,
                "current_value": stmt.excluded.current_value,
                "detected_at": stmt.excluded.detected_at,
                "resolved_at": None,
            }
        )
        await session.execute(stmt)

        return await DriftDAO.get_by_match(session, entity_id, continuity_id, field)

    @staticmethod
    async def get_by_id(session: AsyncSession, drift_id: str) -> Optional[EntityDrift]:
        """根据ID获取漂移记录"""
        result = await session.execute(
            select(EntityDrift).where(EntityDrift.id == drift_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_match(
        session: AsyncSession,
        entity_id: str,
        continuity_id: str,
        field: str
    ) -> Optional[EntityDrift]:
        """
        根据 (实体, 时间线, 字段) 获取漂移记录（无论是否已解决）

        总是从数据库刷新，覆盖会话中已加载的旧状态
        """
        result = await session.execute(
            select(EntityDrift).where(
                and_(
                    EntityDrift.entity_id == entity_id,
                    EntityDrift.continuity_id == continuity_id,
                    EntityDrift.field == field
                )
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def find_by_entity(session: AsyncSession, entity_id: str) -> List[EntityDrift]:
        """获取实体的全部漂移记录（含已解决），按检测时间倒序"""
        result = await session.execute(
            select(EntityDrift)
            .where(EntityDrift.entity_id == entity_id)
            .order_by(EntityDrift.detected_at.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def find_by_continuity(session: AsyncSession, continuity_id: str) -> List[EntityDrift]:
        """获取时间线的全部漂移记录（含已解决），按检测时间倒序"""
        result = await session.execute(
            select(EntityDrift)
            .where(EntityDrift.continuity_id == continuity_id)
            .order_by(EntityDrift.detected_at.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def find_unresolved(
        session: AsyncSession,
        entity_id: Optional[str] = None,
        continuity_id: Optional[str] = None
    ) -> List[EntityDrift]:
        """
        获取未解决的漂移记录

        Args:
            session: 数据库会话
            entity_id: 按实体筛选（可选）
            continuity_id: 按时间线筛选（可选）

        Returns:
            未解决的漂移记录，按检测时间倒序
        """
        query = select(EntityDrift).where(EntityDrift.resolved_at.is_(None))

        if entity_id:
            query = query.where(EntityDrift.entity_id == entity_id)
        if continuity_id:
            query = query.where(EntityDrift.continuity_id == continuity_id)

        result = await session.execute(query.order_by(EntityDrift.detected_at.desc()))
        return list(result.scalars().all())

    @staticmethod
    async def resolve(session: AsyncSession, drift_id: str) -> bool:
        """
        手动解决漂移（GM 确认并接受该漂移）

        已解决的记录保留原解决时间

        Returns:
            记录是否存在
        """
        drift = await DriftDAO.get_by_id(session, drift_id)
        if not drift:
            return False

        if not drift.is_resolved:
            drift.resolved_at = datetime.utcnow()
            await session.flush()
        return True

    @staticmethod
    async def resolve_by_match(
        session: AsyncSession,
        entity_id: str,
        continuity_id: str,
        field: str
    ) -> bool:
        """
        解决三元组对应的未解决漂移

        Returns:
            是否确实关闭了一条未解决记录（没有未解决记录时为 False）
        """
        result = await session.execute(
            update(EntityDrift)
            .where(
                and_(
                    EntityDrift.entity_id == entity_id,
                    EntityDrift.continuity_id == continuity_id,
                    EntityDrift.field == field,
                    EntityDrift.resolved_at.is_(None)
                )
            )
            .values(resolved_at=datetime.utcnow())
        )
        return (result.rowcount or 0) > 0

    @staticmethod
    async def delete_by_entity(session: AsyncSession, entity_id: str) -> int:
        """删除实体的全部漂移记录（实体删除时调用），返回删除条数"""
        result = await session.execute(
            delete(EntityDrift).where(EntityDrift.entity_id == entity_id)
        )
        return result.rowcount or 0

    @staticmethod
    async def delete_by_continuity(session: AsyncSession, continuity_id: str) -> int:
        """删除时间线的全部漂移记录（时间线删除时调用），返回删除条数"""
        result = await session.execute(
            delete(EntityDrift).where(EntityDrift.continuity_id == continuity_id)
        )
        return result.rowcount or 0
