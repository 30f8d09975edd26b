"""
实体数据访问对象

事件也是实体（type = 'event'），通过本 DAO 读写
"""

from typing import Optional, List, Any, Dict
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from lorekeeper.db.models.entity import Entity
from lorekeeper.utils.id_generator import generate_entity_id

# 直接映射到数据表列的字段，其余字段存放在 type_specific_fields
COLUMN_FIELDS = ("name", "description", "secrets")


class EntityDAO:
    """实体 DAO"""

    @staticmethod
    async def create(
        session: AsyncSession,
        entity_type: str,
        world_id: str,
        name: str,
        description: str = "",
        secrets: str = "",
        tags: Optional[List[str]] = None,
        campaign_id: Optional[str] = None,
        continuity_id: Optional[str] = None,
        type_specific_fields: Optional[Dict[str, Any]] = None
    ) -> Entity:
        """
        创建实体

        Args:
            session: 数据库会话
            entity_type: 实体类型
            world_id: 所属世界ID
            name: 名称
            description: 描述
            secrets: GM 秘密
            tags: 标签
            campaign_id: 所属战役ID
            continuity_id: 所属时间线ID（事件必填）
            type_specific_fields: 类型专属字段

        Returns:
            Entity: 新创建的实体
        """
        entity = Entity(
            id=generate_entity_id(entity_type),
            type=entity_type,
            world_id=world_id,
            campaign_id=campaign_id,
            continuity_id=continuity_id,
            name=name,
            description=description,
            secrets=secrets,
            tags=list(tags or []),
            type_specific_fields=dict(type_specific_fields or {}),
        )

        session.add(entity)
        await session.flush()

        return entity

    @staticmethod
    async def get_by_id(session: AsyncSession, entity_id: str) -> Optional[Entity]:
        """根据ID获取实体"""
        result = await session.execute(
            select(Entity).where(Entity.id == entity_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def find_events_by_world(
        session: AsyncSession,
        world_id: str,
        limit: int = 10000,
        offset: int = 0
    ) -> List[Entity]:
        """
        获取世界下的全部事件

        按创建时间排序，保证分组时的扫描顺序稳定
        """
        result = await session.execute(
            select(Entity)
            .where(
                and_(
                    Entity.world_id == world_id,
                    Entity.type == "event"
                )
            )
            .order_by(Entity.created_at, Entity.id)
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    @staticmethod
    async def find_events_by_continuity(
        session: AsyncSession,
        continuity_id: str,
        limit: int = 10000
    ) -> List[Entity]:
        """获取时间线下的全部事件"""
        result = await session.execute(
            select(Entity)
            .where(
                and_(
                    Entity.continuity_id == continuity_id,
                    Entity.type == "event"
                )
            )
            .order_by(Entity.created_at, Entity.id)
            .limit(limit)
        )
        return list(result.scalars().all())

    @staticmethod
    async def delete(session: AsyncSession, entity_id: str) -> bool:
        """删除实体"""
        entity = await EntityDAO.get_by_id(session, entity_id)
        if not entity:
            return False

        await session.delete(entity)
        await session.flush()
        return True

    @staticmethod
    def get_field_value(entity: Entity, field: str) -> Any:
        """读取字段值（列字段或类型专属字段）"""
        if field in COLUMN_FIELDS:
            return getattr(entity, field)
        return (entity.type_specific_fields or {}).get(field)

    @staticmethod
    def set_field(entity: Entity, field: str, value: Any) -> bool:
        """
        写入字段值

        列字段直接赋值，其他字段写入 type_specific_fields。
        JSON 列整体重新赋值，保证变更被追踪。

        Returns:
            值是否发生变化
        """
        if field in COLUMN_FIELDS and value is None:
            value = ""

        if EntityDAO.get_field_value(entity, field) == value:
            return False

        if field in COLUMN_FIELDS:
            setattr(entity, field, value)
        else:
            fields = dict(entity.type_specific_fields or {})
            if value is None:
                fields.pop(field, None)
            else:
                fields[field] = value
            entity.type_specific_fields = fields
        return True
