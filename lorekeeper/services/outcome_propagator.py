"""
事件结果传播服务

事件创建或结果被修改后，把每个受影响的 (实体, 字段) 在该时间线中
inWorldTime 最新的结果值写回实体，再对这些字段执行漂移检测
"""

from typing import Dict, Iterable, List, Optional, Tuple

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from lorekeeper.config.settings import settings
from lorekeeper.db.dao import EntityDAO
from lorekeeper.db.models.entity import Entity
from lorekeeper.models.drift import DriftCheckInput, FieldChange
from lorekeeper.models.event import PropagationResult
from lorekeeper.models.outcome import parse_event_outcomes_with_diagnostics
from lorekeeper.services.drift_detector import (
    DriftDetector,
    drift_detector,
    find_latest_derived_value,
    stringify_field_value,
)
from lorekeeper.utils.logger_config import component_logger


class OutcomePropagator:
    """事件结果传播器"""

    def __init__(self, detector: Optional[DriftDetector] = None):
        self.detector = detector or drift_detector

    @staticmethod
    def _check_target(event: Entity, target: Optional[Entity], field: str, value: Optional[str]) -> Optional[str]:
        """检查结果能否写入目标实体，不能时返回原因"""
        if target is None:
            return "Referenced entity not found"
        if target.world_id != event.world_id:
            return "Referenced entity belongs to another world"
        if target.type == "event":
            return "Outcomes cannot target events"
        if field == "tags":
            return "'tags' cannot be set by an outcome"
        if field == "name" and value is not None and not value.strip():
            return "Entity name cannot be empty"
        return None

    @component_logger("propagation")
    async def propagate(
        self,
        session: AsyncSession,
        event: Entity,
        previous_pairs: Iterable[Tuple[str, str]] = ()
    ) -> PropagationResult:
        """
        传播事件结果

        每个受影响的 (实体, 字段) 无论值是否变化都会重新执行漂移检测，
        使已与事件推导值重新一致的漂移记录得以关闭。

        Args:
            session: 数据库会话
            event: 已写入数据库的事件
            previous_pairs: 事件修改前结果涉及的 (实体ID, 字段)，被移除的结果也要重新检测

        Returns:
            PropagationResult: 更新的实体、变化字段数、漂移统计和警告
        """
        parsed = parse_event_outcomes_with_diagnostics(event.outcomes_text)
        warnings: List[str] = []
        if parsed.dropped:
            warnings.append(f"{parsed.dropped} malformed outcome(s) ignored")

        # 去重并保持顺序
        outcome_pairs = list(dict.fromkeys((outcome.entity_id, outcome.field) for outcome in parsed.outcomes))
        pairs = list(dict.fromkeys(outcome_pairs + list(previous_pairs)))

        if not pairs:
            for warning in warnings:
                logger.warning(f"⚠️  Event {event.id}: {warning}")
            return PropagationResult(warnings=warnings)

        events = await EntityDAO.find_events_by_continuity(
            session, event.continuity_id, limit=settings.DRIFT_EVENT_SCAN_LIMIT
        )

        changes: Dict[str, List[FieldChange]] = {}
        checks: Dict[str, List[FieldChange]] = {}
        targets: Dict[str, Entity] = {}

        for entity_id, field in pairs:
            is_outcome = (entity_id, field) in outcome_pairs
            winning_value = find_latest_derived_value(events, entity_id, field)
            if winning_value is None and is_outcome:
                warnings.append(f"{entity_id}.{field}: No events with in-world time found for this entity field")

            target = await EntityDAO.get_by_id(session, entity_id)
            reason = self._check_target(event, target, field, winning_value)
            if reason:
                if is_outcome and winning_value is not None:
                    warnings.append(f"{entity_id}.{field}: {reason}")
                continue

            targets[target.id] = target
            if winning_value is not None and EntityDAO.set_field(target, field, winning_value):
                changes.setdefault(target.id, []).append(FieldChange(field=field, new_value=winning_value))

            current = stringify_field_value(EntityDAO.get_field_value(target, field))
            checks.setdefault(target.id, []).append(FieldChange(field=field, new_value=current))

        for warning in warnings:
            logger.warning(f"⚠️  Event {event.id}: {warning}")

        if not checks:
            return PropagationResult(warnings=warnings)

        await session.flush()

        detected = 0
        resolved = 0
        for entity_id, checked_fields in checks.items():
            check = await self.detector.check_for_drifts(
                session,
                DriftCheckInput(
                    entity_id=entity_id,
                    world_id=targets[entity_id].world_id,
                    changed_fields=checked_fields,
                )
            )
            detected += check.drifts_detected
            resolved += check.drifts_resolved

        fields_changed = sum(len(fields) for fields in changes.values())
        logger.info(
            f"📣 Event {event.id} propagated {fields_changed} field(s) to {len(changes)} entit(ies), "
            f"re-checked {len(checks)} entit(ies)"
        )

        return PropagationResult(
            entities_updated=list(changes.keys()),
            fields_changed=fields_changed,
            drifts_detected=detected,
            drifts_resolved=resolved,
            warnings=warnings,
        )


# 全局实例
outcome_propagator = OutcomePropagator()
