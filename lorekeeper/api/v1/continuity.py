"""
时间线模块路由
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lorekeeper.models import ApiResponse, ContinuityCreate, ContinuityUpdate, ContinuityBranch
from lorekeeper.api.deps import get_db_session, raise_for_result
from lorekeeper.services.continuity_service import continuity_service

router = APIRouter()


@router.post("/continuity", response_model=ApiResponse)
async def create_continuity(
    data: ContinuityCreate,
    session: AsyncSession = Depends(get_db_session)
):
    """
    创建时间线

    - 分支来源和分支点事件必须同时提供或同时省略
    """
    result = await continuity_service.create_continuity(session, data)
    return raise_for_result(result)


@router.get("/continuity/{continuity_id}", response_model=ApiResponse)
async def get_continuity(
    continuity_id: str,
    session: AsyncSession = Depends(get_db_session)
):
    """获取时间线详情"""
    result = await continuity_service.get_continuity(session, continuity_id)
    return raise_for_result(result)


@router.get("/world/{world_id}/continuities", response_model=ApiResponse)
async def list_continuities(
    world_id: str,
    session: AsyncSession = Depends(get_db_session)
):
    """获取世界下的全部时间线"""
    result = await continuity_service.list_continuities(session, world_id)
    return raise_for_result(result)


@router.patch("/continuity/{continuity_id}", response_model=ApiResponse)
async def update_continuity(
    continuity_id: str,
    data: ContinuityUpdate,
    session: AsyncSession = Depends(get_db_session)
):
    """更新时间线名称和描述"""
    result = await continuity_service.update_continuity(session, continuity_id, data)
    return raise_for_result(result)


@router.post("/continuity/{continuity_id}/branch", response_model=ApiResponse)
async def branch_continuity(
    continuity_id: str,
    data: ContinuityBranch,
    session: AsyncSession = Depends(get_db_session)
):
    """
    从时间线的某个事件处分支

    - 分支点必须是该时间线中带世界内时间的事件
    - 不复制事件和漂移记录
    """
    result = await continuity_service.branch_continuity(session, continuity_id, data)
    return raise_for_result(result)


@router.delete("/continuity/{continuity_id}", response_model=ApiResponse)
async def delete_continuity(
    continuity_id: str,
    session: AsyncSession = Depends(get_db_session)
):
    """
    删除时间线

    - 仍有战役使用时返回 409
    - 同时删除该时间线的事件和漂移记录
    """
    result = await continuity_service.delete_continuity(session, continuity_id)
    return raise_for_result(result)
