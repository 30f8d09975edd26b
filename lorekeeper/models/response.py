"""
统一响应模型
"""

from typing import Any, Generic, TypeVar, Optional
from pydantic import BaseModel, Field


T = TypeVar('T')


class ApiResponse(BaseModel, Generic[T]):
    """统一API响应格式"""
    success: bool = Field(True, description="请求是否成功")
    data: Optional[T] = Field(None, description="响应数据")
    message: Optional[str] = Field(None, description="响应消息")
    error: Optional[dict] = Field(None, description="错误信息（code / message）")

    class Config:
        json_schema_extra = {
            "example": {
                "success": True,
                "data": {"drifts_detected": 1, "drifts_resolved": 0},
                "message": "Entity updated"
            }
        }


class ErrorResponse(BaseModel):
    """错误响应"""
    success: bool = Field(False, description="请求失败")
    code: int = Field(..., description="HTTP 状态码")
    message: str = Field(..., description="错误信息")
    error: Optional[Any] = Field(None, description="错误详情")

    class Config:
        json_schema_extra = {
            "example": {
                "success": False,
                "code": 404,
                "message": "Continuity not found",
                "error": {
                    "code": "CONTINUITY_NOT_FOUND",
                    "message": "时间线不存在"
                }
            }
        }
