"""
漂移服务

处理漂移记录的查询和手动解决
"""

from typing import Optional
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from lorekeeper.models import ApiResponse, DriftResponse
from lorekeeper.db.dao import DriftDAO


class DriftService:
    """漂移服务"""

    @staticmethod
    async def list_drifts(
        session: AsyncSession,
        entity_id: Optional[str] = None,
        continuity_id: Optional[str] = None,
        unresolved_only: bool = True
    ) -> ApiResponse:
        """
        查询漂移记录

        - unresolved_only：只返回未解决的漂移（可同时按实体和时间线筛选）
        - 否则按实体查询全部记录；没有实体时按时间线查询；都没有时返回全部未解决记录

        Args:
            session: 数据库会话
            entity_id: 实体ID
            continuity_id: 时间线ID
            unresolved_only: 是否只返回未解决的漂移

        Returns:
            API响应，包含漂移列表
        """
        if unresolved_only:
            drifts = await DriftDAO.find_unresolved(session, entity_id=entity_id, continuity_id=continuity_id)
        elif entity_id:
            drifts = await DriftDAO.find_by_entity(session, entity_id)
        elif continuity_id:
            drifts = await DriftDAO.find_by_continuity(session, continuity_id)
        else:
            drifts = await DriftDAO.find_unresolved(session)

        return ApiResponse(
            success=True,
            data={
                "drifts": [
                    DriftResponse.model_validate(drift).model_dump(mode="json") for drift in drifts
                ],
                "total": len(drifts),
            }
        )

    @staticmethod
    async def resolve_drift(session: AsyncSession, drift_id: str) -> ApiResponse:
        """
        手动解决漂移（GM 接受当前值）

        已解决的漂移再次解决时直接返回成功
        """
        if not drift_id or not drift_id.strip():
            return ApiResponse(
                success=False,
                message="Drift ID is required",
                error={"code": "VALIDATION_ERROR", "message": "漂移ID不能为空"}
            )

        found = await DriftDAO.resolve(session, drift_id)
        if not found:
            return ApiResponse(
                success=False,
                message="Drift not found",
                error={"code": "DRIFT_NOT_FOUND", "message": "漂移记录不存在"}
            )

        logger.info(f"✅ Drift {drift_id} resolved manually")
        return ApiResponse(
            success=True,
            message="Drift resolved",
            data={"drift_id": drift_id}
        )


# 全局实例
drift_service = DriftService()
