"""
世界表 ORM 模型
"""

from sqlalchemy import Column, String, TIMESTAMP
from datetime import datetime

from lorekeeper.db.base import Base


class World(Base):
    """世界表"""
    __tablename__ = "worlds"

    # 主键
    id = Column(String(64), primary_key=True, comment="世界ID")

    # 基本信息
    name = Column(String(256), nullable=False, comment="世界名称")

    # 时间戳
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, comment="创建时间")
    modified_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow, comment="更新时间")
