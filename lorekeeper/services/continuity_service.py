"""
时间线服务

处理时间线的创建、查询、更新、分支和删除
"""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from lorekeeper.models import (
    ApiResponse, ContinuityCreate, ContinuityUpdate, ContinuityBranch, ContinuityResponse
)
from lorekeeper.db.dao import WorldDAO, CampaignDAO, ContinuityDAO, EntityDAO
from lorekeeper.db.models.continuity import Continuity


def _continuity_data(continuity: Continuity) -> dict:
    return ContinuityResponse.model_validate(continuity).model_dump(mode="json")


def _not_found(continuity_id: str) -> ApiResponse:
    return ApiResponse(
        success=False,
        message=f"Continuity not found: {continuity_id}",
        error={"code": "CONTINUITY_NOT_FOUND", "message": "时间线不存在"}
    )


def _name_required() -> ApiResponse:
    return ApiResponse(
        success=False,
        message="Name is required",
        error={"code": "VALIDATION_ERROR", "message": "时间线名称不能为空"}
    )


class ContinuityService:
    """时间线服务"""

    @staticmethod
    async def create_continuity(session: AsyncSession, data: ContinuityCreate) -> ApiResponse:
        """
        创建时间线

        Args:
            session: 数据库会话
            data: 创建请求（可带分支来源和分支点）

        Returns:
            API响应，包含新创建的时间线
        """
        if not data.name.strip():
            return _name_required()

        if not await WorldDAO.exists(session, data.world_id):
            return ApiResponse(
                success=False,
                message=f"World not found: {data.world_id}",
                error={"code": "WORLD_NOT_FOUND", "message": "世界不存在"}
            )

        if data.branched_from_id and not await ContinuityDAO.exists(session, data.branched_from_id):
            return _not_found(data.branched_from_id)

        continuity = await ContinuityDAO.create(
            session,
            world_id=data.world_id,
            name=data.name.strip(),
            description=data.description,
            branched_from_id=data.branched_from_id,
            branch_point_event_id=data.branch_point_event_id,
        )

        logger.info(f"🧭 Continuity created: {continuity.id} ({continuity.name})")
        return ApiResponse(
            success=True,
            message="Continuity created",
            data=_continuity_data(continuity)
        )

    @staticmethod
    async def get_continuity(session: AsyncSession, continuity_id: str) -> ApiResponse:
        """获取时间线详情"""
        continuity = await ContinuityDAO.get_by_id(session, continuity_id)
        if not continuity:
            return _not_found(continuity_id)

        return ApiResponse(success=True, data=_continuity_data(continuity))

    @staticmethod
    async def list_continuities(session: AsyncSession, world_id: str) -> ApiResponse:
        """获取世界下的全部时间线"""
        continuities = await ContinuityDAO.list_by_world(session, world_id)

        return ApiResponse(
            success=True,
            data={
                "continuities": [_continuity_data(c) for c in continuities],
                "total": len(continuities),
            }
        )

    @staticmethod
    async def update_continuity(
        session: AsyncSession,
        continuity_id: str,
        data: ContinuityUpdate
    ) -> ApiResponse:
        """更新时间线名称和描述"""
        if data.name is not None and not data.name.strip():
            return _name_required()

        continuity = await ContinuityDAO.update(
            session,
            continuity_id,
            name=data.name.strip() if data.name is not None else None,
            description=data.description,
        )
        if not continuity:
            return _not_found(continuity_id)

        return ApiResponse(
            success=True,
            message="Continuity updated",
            data=_continuity_data(continuity)
        )

    @staticmethod
    async def branch_continuity(
        session: AsyncSession,
        source_continuity_id: str,
        data: ContinuityBranch
    ) -> ApiResponse:
        """
        从已有时间线的某个事件处分支

        分支点事件必须存在、类型为事件、属于来源时间线且有世界内时间。
        新时间线不复制任何事件和漂移记录。

        Args:
            session: 数据库会话
            source_continuity_id: 来源时间线ID
            data: 分支请求

        Returns:
            API响应，包含新时间线
        """
        if not data.name.strip():
            return _name_required()

        source = await ContinuityDAO.get_by_id(session, source_continuity_id)
        if not source:
            return _not_found(source_continuity_id)

        event = await EntityDAO.get_by_id(session, data.branch_point_event_id)
        if not event:
            return ApiResponse(
                success=False,
                message=f"Event not found: {data.branch_point_event_id}",
                error={"code": "EVENT_NOT_FOUND", "message": "分支点事件不存在"}
            )

        if event.type != "event":
            return ApiResponse(
                success=False,
                message="Branch point must be an event",
                error={"code": "VALIDATION_ERROR", "message": "分支点必须是事件"}
            )

        if event.continuity_id != source.id:
            return ApiResponse(
                success=False,
                message="Branch point event does not belong to the source continuity",
                error={"code": "VALIDATION_ERROR", "message": "分支点事件不属于来源时间线"}
            )

        if not event.in_world_time:
            return ApiResponse(
                success=False,
                message="Branch point event has no in-world time",
                error={"code": "VALIDATION_ERROR", "message": "分支点事件缺少世界内时间"}
            )

        continuity = await ContinuityDAO.create(
            session,
            world_id=source.world_id,
            name=data.name.strip(),
            description=data.description,
            branched_from_id=source.id,
            branch_point_event_id=event.id,
        )

        logger.info(f"🌿 Continuity {continuity.id} branched from {source.id} at {event.id}")
        return ApiResponse(
            success=True,
            message="Continuity branched",
            data=_continuity_data(continuity)
        )

    @staticmethod
    async def delete_continuity(session: AsyncSession, continuity_id: str) -> ApiResponse:
        """
        删除时间线

        有战役引用时拒绝删除；否则连同事件和漂移记录一并删除
        """
        if not await ContinuityDAO.exists(session, continuity_id):
            return _not_found(continuity_id)

        campaign_count = await CampaignDAO.count_by_continuity(session, continuity_id)
        if campaign_count > 0:
            return ApiResponse(
                success=False,
                message=f"Cannot delete continuity: {campaign_count} campaign(s) still reference it",
                error={"code": "CONTINUITY_IN_USE", "message": "仍有战役使用该时间线"}
            )

        await ContinuityDAO.delete(session, continuity_id)

        logger.info(f"🗑️  Continuity deleted: {continuity_id}")
        return ApiResponse(success=True, message="Continuity deleted")


# 全局实例
continuity_service = ContinuityService()
