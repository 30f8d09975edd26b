"""
事件服务

事件是 type = 'event' 的实体，固定属于一条时间线。
创建事件或修改结果 / 世界内时间后会触发结果传播。
"""

from typing import Any, Dict

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from lorekeeper.models import ApiResponse, EntityResponse, EventCreate, EventUpdate
from lorekeeper.models.outcome import parse_event_outcomes, serialize_event_outcomes
from lorekeeper.db.dao import WorldDAO, ContinuityDAO, EntityDAO
from lorekeeper.db.models.entity import IN_WORLD_TIME_KEY, OUTCOMES_KEY
from lorekeeper.services.outcome_propagator import outcome_propagator

# 请求字段 -> 类型专属字段键名
EVENT_FIELD_KEYS = {
    "in_world_time": IN_WORLD_TIME_KEY,
    "real_world_anchor": "realWorldAnchor",
    "involved_entity_ids": "involvedEntityIDs",
    "location_id": "locationID",
}

# 改变后需要重新传播的键
PROPAGATING_KEYS = (IN_WORLD_TIME_KEY, OUTCOMES_KEY)


def _event_fields(data: Any, exclude_unset: bool) -> Dict[str, Any]:
    """把请求中的事件字段转换为类型专属字段"""
    values = data.model_dump(exclude_unset=exclude_unset)
    fields = {
        key: values[name] for name, key in EVENT_FIELD_KEYS.items() if name in values
    }
    if "outcomes" in values and data.outcomes is not None:
        fields[OUTCOMES_KEY] = serialize_event_outcomes(data.outcomes)
    return fields


class EventService:
    """事件服务"""

    @staticmethod
    async def create_event(session: AsyncSession, data: EventCreate) -> ApiResponse:
        """
        创建事件并传播其结果

        Args:
            session: 数据库会话
            data: 创建请求

        Returns:
            API响应，包含事件和传播汇总
        """
        if not data.name.strip():
            return ApiResponse(
                success=False,
                message="Name is required",
                error={"code": "VALIDATION_ERROR", "message": "事件名称不能为空"}
            )

        if not await WorldDAO.exists(session, data.world_id):
            return ApiResponse(
                success=False,
                message=f"World not found: {data.world_id}",
                error={"code": "WORLD_NOT_FOUND", "message": "世界不存在"}
            )

        continuity = await ContinuityDAO.get_by_id(session, data.continuity_id)
        if not continuity:
            return ApiResponse(
                success=False,
                message=f"Continuity not found: {data.continuity_id}",
                error={"code": "CONTINUITY_NOT_FOUND", "message": "时间线不存在"}
            )

        if continuity.world_id != data.world_id:
            return ApiResponse(
                success=False,
                message="Continuity belongs to another world",
                error={"code": "VALIDATION_ERROR", "message": "时间线不属于该世界"}
            )

        type_specific_fields = {
            key: value for key, value in _event_fields(data, exclude_unset=False).items()
            if value is not None
        }
        if not data.outcomes:
            type_specific_fields.pop(OUTCOMES_KEY, None)

        event = await EntityDAO.create(
            session,
            entity_type="event",
            world_id=data.world_id,
            name=data.name.strip(),
            description=data.description,
            secrets=data.secrets,
            tags=data.tags,
            campaign_id=data.campaign_id,
            continuity_id=data.continuity_id,
            type_specific_fields=type_specific_fields,
        )

        propagation = await outcome_propagator.propagate(session, event)

        logger.info(f"📅 Event created: {event.id} in {event.continuity_id}")
        return ApiResponse(
            success=True,
            message="Event created",
            data={
                "event": EntityResponse.model_validate(event).model_dump(mode="json"),
                "propagation": propagation.model_dump(),
            }
        )

    @staticmethod
    async def update_event(session: AsyncSession, event_id: str, data: EventUpdate) -> ApiResponse:
        """
        更新事件

        时间线不可修改；世界内时间或结果变化后重新传播，
        原有结果涉及的字段一并重新检测漂移
        """
        event = await EntityDAO.get_by_id(session, event_id)
        if not event or event.type != "event":
            return ApiResponse(
                success=False,
                message=f"Event not found: {event_id}",
                error={"code": "EVENT_NOT_FOUND", "message": "事件不存在"}
            )

        if data.name is not None and not data.name.strip():
            return ApiResponse(
                success=False,
                message="Name is required",
                error={"code": "VALIDATION_ERROR", "message": "事件名称不能为空"}
            )

        # 修改前的结果涉及的字段，被移除的结果也需要重新检测漂移
        previous_pairs = [
            (outcome.entity_id, outcome.field) for outcome in parse_event_outcomes(event.outcomes_text)
        ]

        changed = []
        for field in ("name", "description", "secrets"):
            value = getattr(data, field)
            if value is not None and EntityDAO.set_field(event, field, value.strip() if field == "name" else value):
                changed.append(field)

        if data.tags is not None and list(data.tags) != list(event.tags or []):
            event.tags = list(data.tags)
            changed.append("tags")

        for key, value in _event_fields(data, exclude_unset=True).items():
            if EntityDAO.set_field(event, key, value):
                changed.append(key)

        await session.flush()

        propagation = None
        if any(key in changed for key in PROPAGATING_KEYS):
            propagation = await outcome_propagator.propagate(session, event, previous_pairs)

        logger.info(f"📝 Event updated: {event.id} ({', '.join(changed) or 'no changes'})")
        return ApiResponse(
            success=True,
            message="Event updated",
            data={
                "event": EntityResponse.model_validate(event).model_dump(mode="json"),
                "changed_fields": changed,
                "propagation": propagation.model_dump() if propagation else None,
            }
        )


# 全局实例
event_service = EventService()
