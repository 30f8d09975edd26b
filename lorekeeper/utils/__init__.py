"""
工具模块
"""

from .id_generator import (
    generate_ulid,
    generate_world_id,
    generate_campaign_id,
    generate_continuity_id,
    generate_entity_id,
    generate_drift_id,
)
from .logger_config import setup_logging, component_logger

__all__ = [
    # ID 生成器
    "generate_ulid",
    "generate_world_id",
    "generate_campaign_id",
    "generate_continuity_id",
    "generate_entity_id",
    "generate_drift_id",

    # 日志
    "setup_logging",
    "component_logger",
]
