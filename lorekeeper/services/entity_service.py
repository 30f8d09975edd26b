"""
实体服务

GM 直接编辑实体字段的入口。编辑总是生效，
随后对变化的字段执行漂移检测，检测结果仅作提示。
"""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from lorekeeper.models import ApiResponse, EntityResponse, EntityUpdate
from lorekeeper.models.drift import DriftCheckInput, FieldChange
from lorekeeper.db.dao import EntityDAO, DriftDAO
from lorekeeper.db.dao.entity_dao import COLUMN_FIELDS
from lorekeeper.services.drift_detector import drift_detector, stringify_field_value


class EntityService:
    """实体服务"""

    @staticmethod
    async def update_entity(session: AsyncSession, entity_id: str, data: EntityUpdate) -> ApiResponse:
        """
        更新实体字段并检测漂移

        Args:
            session: 数据库会话
            entity_id: 实体ID
            data: 更新请求

        Returns:
            API响应，包含更新后的实体、变化字段和漂移检测结果
        """
        entity = await EntityDAO.get_by_id(session, entity_id)
        if not entity:
            return ApiResponse(
                success=False,
                message=f"Entity not found: {entity_id}",
                error={"code": "ENTITY_NOT_FOUND", "message": "实体不存在"}
            )

        if entity.type == "event":
            return ApiResponse(
                success=False,
                message="Events must be edited through the event endpoints",
                error={"code": "VALIDATION_ERROR", "message": "事件请通过事件接口修改"}
            )

        if data.name is not None and not data.name.strip():
            return ApiResponse(
                success=False,
                message="Name is required",
                error={"code": "VALIDATION_ERROR", "message": "实体名称不能为空"}
            )

        reserved = sorted(set(data.fields or {}) & (set(COLUMN_FIELDS) | {"tags"}))
        if reserved:
            return ApiResponse(
                success=False,
                message=f"Use the top-level properties for: {', '.join(reserved)}",
                error={"code": "VALIDATION_ERROR", "message": "通用字段不能放在 fields 中"}
            )

        changes = []

        for field in COLUMN_FIELDS:
            value = getattr(data, field)
            if value is None:
                continue
            if field == "name":
                value = value.strip()
            if EntityDAO.set_field(entity, field, value):
                changes.append(FieldChange(field=field, new_value=value))

        if data.tags is not None and list(data.tags) != list(entity.tags or []):
            entity.tags = list(data.tags)
            changes.append(FieldChange(field="tags", new_value=stringify_field_value(data.tags)))

        for field, value in (data.fields or {}).items():
            if EntityDAO.set_field(entity, field, value):
                changes.append(FieldChange(field=field, new_value=stringify_field_value(value)))

        await session.flush()

        result = None
        if changes:
            result = await drift_detector.check_for_drifts(
                session,
                DriftCheckInput(entity_id=entity.id, world_id=entity.world_id, changed_fields=changes)
            )
            if result.drifts_detected or result.drifts_resolved:
                logger.info(
                    f"🔀 Entity {entity.id} updated: {result.drifts_detected} drift(s) detected, "
                    f"{result.drifts_resolved} resolved"
                )

        return ApiResponse(
            success=True,
            message="Entity updated",
            data={
                "entity": EntityResponse.model_validate(entity).model_dump(mode="json"),
                "changed_fields": [change.field for change in changes],
                "drift_check": result.model_dump() if result else None,
            }
        )

    @staticmethod
    async def delete_entity(session: AsyncSession, entity_id: str) -> ApiResponse:
        """删除实体，同时清除它的全部漂移记录"""
        entity = await EntityDAO.get_by_id(session, entity_id)
        if not entity:
            return ApiResponse(
                success=False,
                message=f"Entity not found: {entity_id}",
                error={"code": "ENTITY_NOT_FOUND", "message": "实体不存在"}
            )

        purged = await DriftDAO.delete_by_entity(session, entity_id)
        await EntityDAO.delete(session, entity_id)

        logger.info(f"🗑️  Entity deleted: {entity_id} ({purged} drift record(s) purged)")
        return ApiResponse(
            success=True,
            message="Entity deleted",
            data={"entity_id": entity_id, "drifts_purged": purged}
        )


# 全局实例
entity_service = EntityService()
