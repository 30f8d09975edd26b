"""
ID 生成器

提供各种实体的唯一 ID 生成功能
"""

import ulid

# 实体类型 -> ID 前缀
ENTITY_ID_PREFIXES = {
    "character": "char",
    "location": "loc",
    "faction": "fac",
    "session": "sess",
    "note": "note",
    "event": "evt",
}


def generate_ulid() -> str:
    """
    生成 ULID（Universally Unique Lexicographically Sortable Identifier）

    特点：
    - 128-bit 兼容性
    - 按时间排序
    - 规范化的字符串表示（26个字符）

    Returns:
        ULID 字符串
    """
    return str(ulid.new())


def generate_world_id() -> str:
    """
    生成世界 ID

    格式：world_<ulid>
    """
    return f"world_{generate_ulid()}"


def generate_campaign_id() -> str:
    """
    生成战役 ID

    格式：camp_<ulid>
    """
    return f"camp_{generate_ulid()}"


def generate_continuity_id() -> str:
    """
    生成时间线 ID

    格式：cont_<ulid>
    示例：cont_01ARZ3NDEKTSV4RRFFQ69G5FAV
    """
    return f"cont_{generate_ulid()}"


def generate_entity_id(entity_type: str) -> str:
    """
    生成实体 ID

    格式：<类型前缀>_<ulid>，事件为 evt_<ulid>，角色为 char_<ulid>

    Args:
        entity_type: 实体类型

    Returns:
        实体 ID
    """
    prefix = ENTITY_ID_PREFIXES.get(entity_type, "ent")
    return f"{prefix}_{generate_ulid()}"


def generate_drift_id() -> str:
    """
    生成漂移记录 ID

    格式：drift_<ulid>
    """
    return f"drift_{generate_ulid()}"
