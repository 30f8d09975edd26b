"""
事件模块路由
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lorekeeper.models import ApiResponse, EventCreate, EventUpdate
from lorekeeper.api.deps import get_db_session, raise_for_result
from lorekeeper.services.event_service import event_service

router = APIRouter()


@router.post("/event", response_model=ApiResponse)
async def create_event(
    data: EventCreate,
    session: AsyncSession = Depends(get_db_session)
):
    """
    创建事件

    - 结果会按世界内时间写回被引用的实体
    - 返回传播汇总（更新的实体、警告、漂移统计）
    """
    result = await event_service.create_event(session, data)
    return raise_for_result(result)


@router.patch("/event/{event_id}", response_model=ApiResponse)
async def update_event(
    event_id: str,
    data: EventUpdate,
    session: AsyncSession = Depends(get_db_session)
):
    """更新事件（时间线不可修改）"""
    result = await event_service.update_event(session, event_id, data)
    return raise_for_result(result)
