"""
时间线相关数据模型
"""

from typing import Optional
from pydantic import BaseModel, Field, model_validator
from datetime import datetime


class ContinuityCreate(BaseModel):
    """创建时间线请求"""
    world_id: str = Field(..., description="所属世界ID")
    name: str = Field(..., description="时间线名称")
    description: str = Field("", description="时间线描述")
    branched_from_id: Optional[str] = Field(None, description="分支来源时间线ID")
    branch_point_event_id: Optional[str] = Field(None, description="分支点事件ID")

    @model_validator(mode="after")
    def check_branch_pair(self):
        # 分支来源和分支点要么都有，要么都没有
        if (self.branched_from_id is None) != (self.branch_point_event_id is None):
            raise ValueError("branched_from_id and branch_point_event_id must be set together")
        return self


class ContinuityUpdate(BaseModel):
    """更新时间线请求（只允许修改名称和描述）"""
    name: Optional[str] = Field(None, description="时间线名称")
    description: Optional[str] = Field(None, description="时间线描述")


class ContinuityBranch(BaseModel):
    """从已有时间线分支的请求"""
    name: str = Field(..., description="新时间线名称")
    description: str = Field("", description="新时间线描述")
    branch_point_event_id: str = Field(..., description="分支点事件ID")


class ContinuityResponse(BaseModel):
    """时间线响应"""
    id: str = Field(..., description="时间线ID")
    world_id: str = Field(..., description="所属世界ID")
    name: str = Field(..., description="时间线名称")
    description: str = Field("", description="时间线描述")
    branched_from_id: Optional[str] = Field(None, description="分支来源时间线ID")
    branch_point_event_id: Optional[str] = Field(None, description="分支点事件ID")
    is_branch: bool = Field(False, description="是否为分支时间线")
    created_at: datetime = Field(..., description="创建时间")
    modified_at: datetime = Field(..., description="更新时间")

    class Config:
        from_attributes = True
