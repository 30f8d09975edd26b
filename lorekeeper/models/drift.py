"""
漂移检测相关数据模型
"""

from typing import Optional, List
from pydantic import BaseModel, Field
from datetime import datetime


class FieldChange(BaseModel):
    """一次字段变更（新值已序列化为字符串）"""
    field: str = Field(..., description="字段名")
    new_value: str = Field(..., description="变更后的值")


class DriftCheckInput(BaseModel):
    """漂移检测输入"""
    entity_id: str = Field(..., description="被编辑的实体ID")
    world_id: str = Field(..., description="所属世界ID")
    changed_fields: List[FieldChange] = Field(default_factory=list, description="变更的字段")


class DriftCheckResult(BaseModel):
    """漂移检测结果"""
    drifts_detected: int = Field(0, description="新增或刷新的漂移数")
    drifts_resolved: int = Field(0, description="自动解决的漂移数")


class DriftResponse(BaseModel):
    """漂移记录响应"""
    id: str = Field(..., description="漂移ID")
    entity_id: str = Field(..., description="实体ID")
    continuity_id: str = Field(..., description="时间线ID")
    field: str = Field(..., description="字段名")
    event_derived_value: str = Field(..., description="事件推导值")
    current_value: str = Field(..., description="实体当前值")
    detected_at: datetime = Field(..., description="检测时间")
    resolved_at: Optional[datetime] = Field(None, description="解决时间（未解决为空）")

    class Config:
        from_attributes = True
