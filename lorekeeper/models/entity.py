"""
实体相关数据模型
"""

from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field
from datetime import datetime
from enum import Enum


class EntityType(str, Enum):
    """实体类型"""
    CHARACTER = "character"
    LOCATION = "location"
    FACTION = "faction"
    SESSION = "session"
    NOTE = "note"
    EVENT = "event"


class EntityUpdate(BaseModel):
    """
    更新实体请求

    name / description / secrets / tags 为通用字段，
    fields 中的键写入类型专属字段（值为 null 表示清除）
    """
    name: Optional[str] = Field(None, description="名称")
    description: Optional[str] = Field(None, description="描述")
    secrets: Optional[str] = Field(None, description="GM 秘密")
    tags: Optional[List[str]] = Field(None, description="标签")
    fields: Optional[Dict[str, Any]] = Field(None, description="类型专属字段")


class EntityResponse(BaseModel):
    """实体响应"""
    id: str = Field(..., description="实体ID")
    type: EntityType = Field(..., description="实体类型")
    world_id: str = Field(..., description="所属世界ID")
    campaign_id: Optional[str] = Field(None, description="所属战役ID")
    continuity_id: Optional[str] = Field(None, description="所属时间线ID")
    name: str = Field(..., description="名称")
    description: str = Field("", description="描述")
    secrets: str = Field("", description="GM 秘密")
    tags: List[str] = Field(default_factory=list, description="标签")
    type_specific_fields: Dict[str, Any] = Field(default_factory=dict, description="类型专属字段")
    created_at: datetime = Field(..., description="创建时间")
    modified_at: datetime = Field(..., description="更新时间")

    class Config:
        from_attributes = True
