"""
API 依赖注入 - 数据库连接、错误码映射
"""

from typing import AsyncIterator
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from lorekeeper.config import settings
from lorekeeper.db.base import get_db
from lorekeeper.models import ApiResponse

# 业务错误码 -> HTTP 状态码（未列出的按 400 处理）
ERROR_STATUS_CODES = {
    "WORLD_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "CONTINUITY_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "EVENT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "ENTITY_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "DRIFT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "CONTINUITY_IN_USE": status.HTTP_409_CONFLICT,
}


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """
    获取数据库会话（依赖注入用）

    Yields:
        AsyncSession: 数据库会话
    """
    if not settings.DATABASE_ENABLED:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database is not enabled"
        )

    async for session in get_db():
        yield session


def raise_for_result(result: ApiResponse) -> ApiResponse:
    """
    服务返回失败时抛出 HTTPException

    抛出异常会让请求会话回滚
    """
    if result.success:
        return result

    code = (result.error or {}).get("code")
    raise HTTPException(
        status_code=ERROR_STATUS_CODES.get(code, status.HTTP_400_BAD_REQUEST),
        detail=result.error
    )
