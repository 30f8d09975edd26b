"""
漂移模块路由
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from lorekeeper.models import ApiResponse
from lorekeeper.api.deps import get_db_session, raise_for_result
from lorekeeper.services.drift_service import drift_service

router = APIRouter()


@router.get("/drifts", response_model=ApiResponse)
async def list_drifts(
    entity_id: Optional[str] = Query(None, description="实体ID"),
    continuity_id: Optional[str] = Query(None, description="时间线ID"),
    unresolved_only: bool = Query(True, description="只返回未解决的漂移"),
    session: AsyncSession = Depends(get_db_session)
):
    """查询漂移记录"""
    result = await drift_service.list_drifts(session, entity_id, continuity_id, unresolved_only)
    return raise_for_result(result)


@router.post("/drifts/{drift_id}/resolve", response_model=ApiResponse)
async def resolve_drift(
    drift_id: str,
    session: AsyncSession = Depends(get_db_session)
):
    """手动解决漂移"""
    result = await drift_service.resolve_drift(session, drift_id)
    return raise_for_result(result)
