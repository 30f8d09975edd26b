"""
数据访问对象（DAO）层

封装数据库操作，提供给服务层使用
"""

from .world_dao import WorldDAO
from .campaign_dao import CampaignDAO
from .continuity_dao import ContinuityDAO
from .entity_dao import EntityDAO
from .drift_dao import DriftDAO

__all__ = [
    "WorldDAO",
    "CampaignDAO",
    "ContinuityDAO",
    "EntityDAO",
    "DriftDAO",
]
