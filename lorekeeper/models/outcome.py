"""
事件结果（EventOutcome）模型与编解码

事件的 outcomes 以 JSON 数组文本存储在 type_specific_fields 中，
键名使用 camelCase（entityID / field / fromValue / toValue / description）。
解析是全函数：任何非法输入都返回空列表，不抛异常。
"""

import json
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class EventOutcome(BaseModel):
    """事件结果：某实体的某字段在该事件后变为 to_value"""
    entity_id: str = Field(..., alias="entityID", description="目标实体ID")
    field: str = Field(..., description="字段名")
    from_value: Optional[str] = Field(None, alias="fromValue", description="变更前的值（仅供展示）")
    to_value: str = Field(..., alias="toValue", description="变更后的值")
    description: Optional[str] = Field(None, description="变更说明")

    class Config:
        populate_by_name = True
        frozen = True


class OutcomeParseResult(BaseModel):
    """带诊断信息的解析结果"""
    outcomes: List[EventOutcome] = Field(default_factory=list, description="解析成功的结果")
    dropped: int = Field(0, description="被丢弃的数组元素数量")


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _to_outcome(item: Any) -> Optional[EventOutcome]:
    """把单个数组元素转换为 EventOutcome，不合法时返回 None"""
    if not isinstance(item, dict):
        return None

    entity_id = item.get("entityID")
    field = item.get("field")
    to_value = item.get("toValue")
    if not (isinstance(entity_id, str) and isinstance(field, str) and isinstance(to_value, str)):
        return None

    return EventOutcome(
        entity_id=entity_id,
        field=field,
        from_value=_optional_str(item.get("fromValue")),
        to_value=to_value,
        description=_optional_str(item.get("description")),
    )


def parse_event_outcomes_with_diagnostics(text: Optional[str]) -> OutcomeParseResult:
    """
    解析事件结果文本，并统计丢弃的元素数量

    非 JSON、非数组的输入视为零个元素
    """
    if not text or not isinstance(text, str):
        return OutcomeParseResult()

    try:
        payload = json.loads(text)
    except (ValueError, RecursionError):
        return OutcomeParseResult()

    if not isinstance(payload, list):
        return OutcomeParseResult()

    outcomes = []
    dropped = 0
    for item in payload:
        outcome = _to_outcome(item)
        if outcome is None:
            dropped += 1
        else:
            outcomes.append(outcome)

    return OutcomeParseResult(outcomes=outcomes, dropped=dropped)


def parse_event_outcomes(text: Optional[str]) -> List[EventOutcome]:
    """
    解析事件结果文本

    Args:
        text: JSON 数组文本（可为空）

    Returns:
        合法的事件结果列表；空输入、非法 JSON、非数组都返回 []
    """
    return parse_event_outcomes_with_diagnostics(text).outcomes


def serialize_event_outcomes(outcomes: List[EventOutcome]) -> str:
    """序列化事件结果（保持顺序，省略为空的可选键）"""
    return json.dumps(
        [outcome.model_dump(by_alias=True, exclude_none=True) for outcome in outcomes],
        ensure_ascii=False
    )
