"""
事件相关数据模型
"""

from typing import Optional, List
from pydantic import BaseModel, Field

from .outcome import EventOutcome


class EventCreate(BaseModel):
    """创建事件请求"""
    world_id: str = Field(..., description="所属世界ID")
    continuity_id: str = Field(..., description="所属时间线ID（创建后不可修改）")
    campaign_id: Optional[str] = Field(None, description="所属战役ID")
    name: str = Field(..., description="事件名称")
    description: str = Field("", description="事件描述")
    secrets: str = Field("", description="GM 秘密")
    tags: List[str] = Field(default_factory=list, description="标签")
    in_world_time: Optional[str] = Field(None, description="世界内时间（排序键）")
    real_world_anchor: Optional[str] = Field(None, description="现实时间锚点")
    involved_entity_ids: List[str] = Field(default_factory=list, description="涉及的实体ID")
    location_id: Optional[str] = Field(None, description="发生地点ID")
    outcomes: List[EventOutcome] = Field(default_factory=list, description="事件结果")


class EventUpdate(BaseModel):
    """更新事件请求（时间线不可修改）"""
    name: Optional[str] = Field(None, description="事件名称")
    description: Optional[str] = Field(None, description="事件描述")
    secrets: Optional[str] = Field(None, description="GM 秘密")
    tags: Optional[List[str]] = Field(None, description="标签")
    in_world_time: Optional[str] = Field(None, description="世界内时间")
    real_world_anchor: Optional[str] = Field(None, description="现实时间锚点")
    involved_entity_ids: Optional[List[str]] = Field(None, description="涉及的实体ID")
    location_id: Optional[str] = Field(None, description="发生地点ID")
    outcomes: Optional[List[EventOutcome]] = Field(None, description="事件结果")


class PropagationResult(BaseModel):
    """结果传播汇总"""
    entities_updated: List[str] = Field(default_factory=list, description="被更新的实体ID")
    fields_changed: int = Field(0, description="实际变化的字段数")
    drifts_detected: int = Field(0, description="检测到的漂移数")
    drifts_resolved: int = Field(0, description="自动解决的漂移数")
    warnings: List[str] = Field(default_factory=list, description="警告信息")
