"""
时间线（Continuity）表 ORM 模型
"""

from sqlalchemy import Column, String, Text, TIMESTAMP, ForeignKey, Index, CheckConstraint
from datetime import datetime

from lorekeeper.db.base import Base


class Continuity(Base):
    """时间线表（世界内的一条历史分支）"""
    __tablename__ = "continuities"

    # 主键
    id = Column(String(64), primary_key=True, comment="时间线ID")

    # 外键
    world_id = Column(String(64), ForeignKey("worlds.id", ondelete="CASCADE"), nullable=False, comment="所属世界")

    # 基本信息
    name = Column(String(256), nullable=False, comment="时间线名称")
    description = Column(Text, nullable=False, default="", comment="时间线描述")

    # 分支信息（要么都为空，要么都有值）
    branched_from_id = Column(String(64), ForeignKey("continuities.id"), nullable=True, comment="分支来源时间线ID")
    branch_point_event_id = Column(String(64), nullable=True, comment="分支点事件ID")

    # 时间戳
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, comment="创建时间")
    modified_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow, comment="更新时间")

    # 约束和索引
    __table_args__ = (
        CheckConstraint(
            "(branched_from_id IS NULL) = (branch_point_event_id IS NULL)",
            name="ck_continuity_branch_pair"
        ),
        Index('idx_continuities_world', 'world_id'),
        Index('idx_continuities_branched_from', 'branched_from_id'),
    )

    @property
    def is_branch(self) -> bool:
        return self.branched_from_id is not None
