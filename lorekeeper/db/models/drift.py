"""
实体漂移表 ORM 模型
"""

from sqlalchemy import Column, String, Text, TIMESTAMP, ForeignKey, Index, UniqueConstraint, text
from datetime import datetime

from lorekeeper.db.base import Base


class EntityDrift(Base):
    """实体漂移表（事件推导值与当前值不一致的记录）"""
    __tablename__ = "entity_drifts"

    # 主键
    id = Column(String(64), primary_key=True, comment="漂移ID")

    # 外键
    entity_id = Column(String(64), ForeignKey("entities.id", ondelete="CASCADE"), nullable=False, comment="实体ID")
    continuity_id = Column(String(64), ForeignKey("continuities.id", ondelete="CASCADE"), nullable=False, comment="时间线ID")

    # 漂移内容
    field = Column(String(128), nullable=False, comment="字段名")
    event_derived_value = Column(Text, nullable=False, comment="事件推导出的最新值")
    current_value = Column(Text, nullable=False, comment="检测时的当前值")

    # 时间戳
    detected_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, comment="检测时间")
    resolved_at = Column(TIMESTAMP, nullable=True, comment="解决时间（NULL 表示未解决）")

    # 约束和索引
    __table_args__ = (
        UniqueConstraint('entity_id', 'continuity_id', 'field', name='uk_entity_continuity_field'),
        Index('idx_entity_drifts_entity', 'entity_id'),
        Index('idx_entity_drifts_continuity', 'continuity_id'),
        Index(
            'idx_entity_drifts_unresolved', 'resolved_at',
            postgresql_where=text('resolved_at IS NULL'),
            sqlite_where=text('resolved_at IS NULL'),
        ),
    )

    @property
    def is_resolved(self) -> bool:
        return self.resolved_at is not None
