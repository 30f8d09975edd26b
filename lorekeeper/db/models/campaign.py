"""
战役表 ORM 模型
"""

from sqlalchemy import Column, String, TIMESTAMP, ForeignKey, Index
from datetime import datetime

from lorekeeper.db.base import Base


class Campaign(Base):
    """战役表（只保留时间线规则需要的字段）"""
    __tablename__ = "campaigns"

    # 主键
    id = Column(String(64), primary_key=True, comment="战役ID")

    # 外键
    world_id = Column(String(64), ForeignKey("worlds.id", ondelete="CASCADE"), nullable=False, comment="所属世界")
    continuity_id = Column(String(64), ForeignKey("continuities.id"), nullable=True, comment="使用的时间线")

    # 基本信息
    name = Column(String(256), nullable=False, comment="战役名称")

    # 时间戳
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, comment="创建时间")
    modified_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow, comment="更新时间")

    # 索引
    __table_args__ = (
        Index('idx_campaigns_world', 'world_id'),
        Index('idx_campaigns_continuity', 'continuity_id'),
    )
