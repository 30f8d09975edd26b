"""
数据库 ORM 模型

导出所有 SQLAlchemy 模型类
"""

from lorekeeper.db.base import Base

# 导入所有模型（确保 Base 知道所有表）
from .world import World
from .continuity import Continuity
from .campaign import Campaign
from .entity import Entity
from .drift import EntityDrift

__all__ = [
    # Base
    "Base",

    # Models
    "World",
    "Continuity",
    "Campaign",
    "Entity",
    "EntityDrift",
]
