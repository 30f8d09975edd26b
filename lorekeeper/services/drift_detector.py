"""
漂移检测服务

当 GM 直接编辑实体字段时，按时间线分别比较：
- 该时间线中 inWorldTime 最新的事件结果推导出的值
- 编辑后的当前值
不一致则记录漂移，重新一致则自动解决。检测从不阻止编辑。
"""

import json
from typing import Any, Dict, List, Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from lorekeeper.config.settings import settings
from lorekeeper.db.dao import EntityDAO, DriftDAO
from lorekeeper.db.models.entity import Entity
from lorekeeper.models.drift import DriftCheckInput, DriftCheckResult
from lorekeeper.models.outcome import parse_event_outcomes
from lorekeeper.utils.logger_config import component_logger


def stringify_field_value(value: Any) -> str:
    """
    把字段值转换为可比较的字符串

    None 视为空字符串，列表（标签等）以逗号连接
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return ",".join(str(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False, sort_keys=True)
    return str(value)


def group_events_by_continuity(events: List[Entity]) -> Dict[str, List[Entity]]:
    """按时间线分组事件（保持首次出现的顺序）"""
    groups: Dict[str, List[Entity]] = {}
    for event in events:
        if not event.continuity_id:
            continue
        groups.setdefault(event.continuity_id, []).append(event)
    return groups


def find_latest_derived_value(events: List[Entity], entity_id: str, field: str) -> Optional[str]:
    """
    计算事件推导值

    在给定事件中找出 inWorldTime 最大、且针对 (entity_id, field) 的结果。
    inWorldTime 按字符串比较；没有 inWorldTime 的事件跳过；
    时间相同时以扫描顺序中后出现的结果为准。

    Args:
        events: 同一时间线的事件
        entity_id: 实体ID
        field: 字段名

    Returns:
        推导值；没有任何匹配结果时返回 None
    """
    latest_time: Optional[str] = None
    latest_value: Optional[str] = None

    for event in events:
        event_time = event.in_world_time
        if not event_time:
            continue

        for outcome in parse_event_outcomes(event.outcomes_text):
            if outcome.entity_id != entity_id or outcome.field != field:
                continue
            if latest_time is None or event_time >= latest_time:
                latest_time = event_time
                latest_value = outcome.to_value

    return latest_value


class DriftDetector:
    """漂移检测器"""

    def __init__(self, event_scan_limit: Optional[int] = None):
        self.event_scan_limit = event_scan_limit or settings.DRIFT_EVENT_SCAN_LIMIT

    @component_logger("drift")
    async def check_for_drifts(self, session: AsyncSession, check: DriftCheckInput) -> DriftCheckResult:
        """
        检测实体字段变更与各时间线事件推导值之间的漂移

        每条漂移记录的写入在独立的 SAVEPOINT 中执行，
        写入失败只跳过该记录，不影响调用方的事务。

        Args:
            session: 数据库会话
            check: 检测输入（实体、世界、变更字段）

        Returns:
            DriftCheckResult: 检测到和自动解决的漂移数量
        """
        if not check.changed_fields:
            return DriftCheckResult()

        try:
            async with session.begin_nested():
                events = await EntityDAO.find_events_by_world(
                    session, check.world_id, limit=self.event_scan_limit
                )
        except SQLAlchemyError as e:
            logger.error(f"❌ Failed to load events for world {check.world_id}: {e}")
            return DriftCheckResult()

        if len(events) >= self.event_scan_limit:
            logger.warning(
                f"⚠️  World {check.world_id} reached the event scan limit ({self.event_scan_limit}), "
                f"later events are ignored"
            )

        groups = group_events_by_continuity(events)
        detected = 0
        resolved = 0

        for change in check.changed_fields:
            for continuity_id, continuity_events in groups.items():
                derived = find_latest_derived_value(continuity_events, check.entity_id, change.field)

                try:
                    async with session.begin_nested():
                        if derived is None:
                            # 该时间线没有相关事件：清理残留的未解决漂移，不计数
                            await DriftDAO.resolve_by_match(
                                session, check.entity_id, continuity_id, change.field
                            )
                            action = None
                        elif derived != change.new_value:
                            await DriftDAO.save(
                                session,
                                entity_id=check.entity_id,
                                continuity_id=continuity_id,
                                field=change.field,
                                event_derived_value=derived,
                                current_value=change.new_value,
                            )
                            action = "detected"
                        else:
                            closed = await DriftDAO.resolve_by_match(
                                session, check.entity_id, continuity_id, change.field
                            )
                            action = "resolved" if closed else None
                except SQLAlchemyError as e:
                    logger.warning(
                        f"⚠️  Drift write skipped ({check.entity_id}, {continuity_id}, {change.field}): {e}"
                    )
                    continue

                if action == "detected":
                    detected += 1
                    logger.info(
                        f"🔀 Drift on {check.entity_id}.{change.field} in {continuity_id}: "
                        f"events say {derived!r}, entity has {change.new_value!r}"
                    )
                elif action == "resolved":
                    resolved += 1
                    logger.info(f"✅ Drift resolved on {check.entity_id}.{change.field} in {continuity_id}")

        logger.debug(
            f"Drift check for {check.entity_id}: {detected} detected, {resolved} resolved "
            f"across {len(groups)} continuities"
        )
        return DriftCheckResult(drifts_detected=detected, drifts_resolved=resolved)


# 全局实例
drift_detector = DriftDetector()
