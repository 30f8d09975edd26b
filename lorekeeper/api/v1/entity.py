"""
实体模块路由
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lorekeeper.models import ApiResponse, EntityUpdate
from lorekeeper.api.deps import get_db_session, raise_for_result
from lorekeeper.services.entity_service import entity_service

router = APIRouter()


@router.patch("/entity/{entity_id}", response_model=ApiResponse)
async def update_entity(
    entity_id: str,
    data: EntityUpdate,
    session: AsyncSession = Depends(get_db_session)
):
    """
    更新实体字段

    - 编辑总是生效
    - 响应中附带漂移检测结果
    """
    result = await entity_service.update_entity(session, entity_id, data)
    return raise_for_result(result)


@router.delete("/entity/{entity_id}", response_model=ApiResponse)
async def delete_entity(
    entity_id: str,
    session: AsyncSession = Depends(get_db_session)
):
    """删除实体及其漂移记录"""
    result = await entity_service.delete_entity(session, entity_id)
    return raise_for_result(result)
