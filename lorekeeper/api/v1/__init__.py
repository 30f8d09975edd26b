"""
API v1 路由汇总
"""

from fastapi import APIRouter

from .continuity import router as continuity_router
from .event import router as event_router
from .entity import router as entity_router
from .drift import router as drift_router

# 创建 v1 API 路由
api_router = APIRouter()

# 注册子路由
api_router.include_router(continuity_router, tags=["Continuity"])
api_router.include_router(event_router, tags=["Event"])
api_router.include_router(entity_router, tags=["Entity"])
api_router.include_router(drift_router, tags=["Drift"])
