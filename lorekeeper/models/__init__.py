"""
数据模型模块

导出所有 Pydantic 数据模型，用于 API 请求/响应验证
"""

# 通用响应
from .response import ApiResponse, ErrorResponse

# 事件结果编解码
from .outcome import (
    EventOutcome, OutcomeParseResult,
    parse_event_outcomes, parse_event_outcomes_with_diagnostics, serialize_event_outcomes
)

# 时间线模块
from .continuity import ContinuityCreate, ContinuityUpdate, ContinuityBranch, ContinuityResponse

# 实体模块
from .entity import EntityType, EntityUpdate, EntityResponse

# 事件模块
from .event import EventCreate, EventUpdate, PropagationResult

# 漂移模块
from .drift import FieldChange, DriftCheckInput, DriftCheckResult, DriftResponse

__all__ = [
    # 通用
    "ApiResponse",
    "ErrorResponse",

    # 事件结果
    "EventOutcome",
    "OutcomeParseResult",
    "parse_event_outcomes",
    "parse_event_outcomes_with_diagnostics",
    "serialize_event_outcomes",

    # 时间线
    "ContinuityCreate",
    "ContinuityUpdate",
    "ContinuityBranch",
    "ContinuityResponse",

    # 实体
    "EntityType",
    "EntityUpdate",
    "EntityResponse",

    # 事件
    "EventCreate",
    "EventUpdate",
    "PropagationResult",

    # 漂移
    "FieldChange",
    "DriftCheckInput",
    "DriftCheckResult",
    "DriftResponse",
]
