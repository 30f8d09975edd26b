"""
实体表 ORM 模型

角色、地点、势力、团次、笔记和事件共用一张表，
类型专属字段存放在 type_specific_fields（JSON）中
"""

from typing import Optional

from sqlalchemy import Column, String, Text, JSON, TIMESTAMP, ForeignKey, Index, CheckConstraint
from datetime import datetime

from lorekeeper.db.base import Base

# 事件类型专属字段键名（与前端存储格式保持一致）
IN_WORLD_TIME_KEY = "inWorldTime"
OUTCOMES_KEY = "outcomes"


class Entity(Base):
    """实体表"""
    __tablename__ = "entities"

    # 主键
    id = Column(String(64), primary_key=True, comment="实体ID")

    # 类型
    type = Column(String(20), nullable=False, comment="实体类型")

    # 外键
    world_id = Column(String(64), ForeignKey("worlds.id", ondelete="CASCADE"), nullable=False, comment="所属世界")
    campaign_id = Column(String(64), ForeignKey("campaigns.id", ondelete="SET NULL"), nullable=True, comment="所属战役")
    continuity_id = Column(
        String(64), ForeignKey("continuities.id", ondelete="CASCADE"), nullable=True,
        comment="所属时间线（仅事件，创建后不可变）"
    )

    # 基本信息
    name = Column(String(256), nullable=False, comment="名称")
    description = Column(Text, nullable=False, default="", comment="描述")
    secrets = Column(Text, nullable=False, default="", comment="GM 秘密")
    tags = Column(JSON, nullable=False, default=list, comment="标签列表")

    # 类型专属字段（事件：inWorldTime / outcomes / locationID ...）
    type_specific_fields = Column(JSON, nullable=False, default=dict, comment="类型专属字段")

    # 时间戳
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, comment="创建时间")
    modified_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow, comment="更新时间")

    # 约束和索引
    __table_args__ = (
        CheckConstraint(
            "type IN ('character', 'location', 'faction', 'session', 'note', 'event')",
            name="ck_entity_type"
        ),
        CheckConstraint(
            "type != 'event' OR continuity_id IS NOT NULL",
            name="ck_event_continuity"
        ),
        Index('idx_entities_world_type', 'world_id', 'type'),
        Index('idx_entities_campaign', 'campaign_id'),
        Index('idx_entities_continuity', 'continuity_id'),
    )

    @property
    def in_world_time(self) -> Optional[str]:
        """事件的世界内时间（排序键，与创建时间无关）"""
        value = (self.type_specific_fields or {}).get(IN_WORLD_TIME_KEY)
        return value if isinstance(value, str) and value else None

    @property
    def outcomes_text(self) -> Optional[str]:
        """事件结果的序列化文本"""
        value = (self.type_specific_fields or {}).get(OUTCOMES_KEY)
        return value if isinstance(value, str) else None
