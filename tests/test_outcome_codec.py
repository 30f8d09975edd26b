"""
事件结果编解码测试
"""

import json

import pytest

from lorekeeper.models.outcome import (
    EventOutcome,
    parse_event_outcomes,
    parse_event_outcomes_with_diagnostics,
    serialize_event_outcomes,
)


class TestParseEventOutcomes:

    @pytest.mark.parametrize("text", [None, "", "not json", "{", '{"entityID": "a"}', "42", "null", '"text"'])
    def test_invalid_input_returns_empty_list(self, text):
        """空输入、非 JSON、非数组都返回空列表"""
        assert parse_event_outcomes(text) == []

    def test_non_string_input_returns_empty_list(self):
        """非字符串输入不抛异常"""
        assert parse_event_outcomes(b'[{"entityID": "a"}]') == []
        assert parse_event_outcomes(123) == []

    def test_deeply_nested_json_returns_empty_list(self):
        """超深嵌套的 JSON 不抛异常"""
        assert parse_event_outcomes("[" * 100000 + "]" * 100000) == []

    def test_mixed_array_keeps_only_valid_elements(self):
        """混合数组只保留合法元素"""
        text = json.dumps([
            {"entityID": "char_1", "field": "title", "toValue": "King"},
            {"entityID": "char_1", "field": "title"},
            {"entityID": 7, "field": "title", "toValue": "King"},
            {"entityID": "char_2", "field": "status", "toValue": 3},
            "garbage",
            None,
            [1, 2],
            {"entityID": "char_3", "field": "status", "toValue": "dead", "description": "fell"},
        ])

        outcomes = parse_event_outcomes(text)

        assert [o.entity_id for o in outcomes] == ["char_1", "char_3"]
        assert outcomes[1].description == "fell"

    def test_optional_fields_dropped_when_not_strings(self):
        """可选字段不是字符串时忽略"""
        text = json.dumps([
            {"entityID": "a", "field": "f", "toValue": "v", "fromValue": 5, "description": ["x"]}
        ])

        outcome, = parse_event_outcomes(text)

        assert outcome.from_value is None
        assert outcome.description is None

    def test_empty_strings_are_valid_values(self):
        """空字符串是合法的值"""
        outcome, = parse_event_outcomes('[{"entityID": "a", "field": "f", "toValue": ""}]')
        assert outcome.to_value == ""


class TestSerializeEventOutcomes:

    def test_round_trip_preserves_order_and_values(self):
        """序列化后再解析得到相同的列表"""
        outcomes = [
            EventOutcome(entity_id="b", field="title", to_value="Queen", from_value="Princess"),
            EventOutcome(entity_id="a", field="status", to_value="外放", description="流放"),
        ]

        assert parse_event_outcomes(serialize_event_outcomes(outcomes)) == outcomes

    def test_uses_camel_case_keys_and_omits_missing_optionals(self):
        """使用 camelCase 键名，省略为空的可选键"""
        text = serialize_event_outcomes([EventOutcome(entity_id="a", field="f", to_value="v")])

        assert json.loads(text) == [{"entityID": "a", "field": "f", "toValue": "v"}]

    def test_empty_list(self):
        assert serialize_event_outcomes([]) == "[]"


class TestParseWithDiagnostics:

    def test_counts_dropped_elements(self):
        """统计被丢弃的元素"""
        text = json.dumps([
            {"entityID": "a", "field": "f", "toValue": "v"},
            {"entityID": "a"},
            17,
        ])

        result = parse_event_outcomes_with_diagnostics(text)

        assert len(result.outcomes) == 1
        assert result.dropped == 2

    @pytest.mark.parametrize("text", [None, "garbage", '{"a": 1}'])
    def test_non_array_counts_as_zero_elements(self, text):
        """非数组输入视为零个元素"""
        result = parse_event_outcomes_with_diagnostics(text)

        assert result.outcomes == []
        assert result.dropped == 0
