"""
实体服务测试（漂移检测的触发点）
"""

from lorekeeper.db.dao import DriftDAO, EntityDAO
from lorekeeper.models import EntityUpdate
from lorekeeper.services.entity_service import entity_service


class TestUpdateEntity:

    async def test_edit_always_applies_and_reports_drift(
        self, session, continuity, make_entity, make_event
    ):
        """编辑总是生效，漂移只作为结果返回"""
        king = await make_entity("Aldric", title="King")
        await make_event(continuity, "Y1", [(king.id, "title", "King")])

        result = await entity_service.update_entity(
            session, king.id, EntityUpdate(fields={"title": "Emperor"})
        )

        assert result.success
        assert king.type_specific_fields["title"] == "Emperor"
        assert result.data["changed_fields"] == ["title"]
        assert result.data["drift_check"] == {"drifts_detected": 1, "drifts_resolved": 0}

    async def test_column_fields_are_checked(self, session, continuity, make_entity, make_event):
        """name / description / secrets 同样参与检测"""
        entity = await make_entity("Aldric")
        await make_event(continuity, "Y1", [(entity.id, "name", "Aldric the Bold")])

        result = await entity_service.update_entity(
            session, entity.id, EntityUpdate(name="Aldric the Bold", secrets="spy")
        )

        assert result.data["changed_fields"] == ["name", "secrets"]
        assert result.data["drift_check"]["drifts_detected"] == 0
        assert entity.name == "Aldric the Bold"

    async def test_tags_compared_as_joined_string(self, session, continuity, make_entity, make_event):
        entity = await make_entity()
        await make_event(continuity, "Y1", [(entity.id, "tags", "brave,old")])

        result = await entity_service.update_entity(session, entity.id, EntityUpdate(tags=["brave", "old"]))

        assert result.data["changed_fields"] == ["tags"]
        assert result.data["drift_check"]["drifts_detected"] == 0
        assert entity.tags == ["brave", "old"]

    async def test_cleared_field_compares_as_empty(self, session, continuity, make_entity, make_event):
        """清除字段时按空字符串比较"""
        entity = await make_entity(title="King")
        await make_event(continuity, "Y1", [(entity.id, "title", "King")])

        result = await entity_service.update_entity(session, entity.id, EntityUpdate(fields={"title": None}))

        assert "title" not in entity.type_specific_fields
        drift, = await DriftDAO.find_unresolved(session, entity_id=entity.id)
        assert drift.current_value == ""
        assert result.data["drift_check"]["drifts_detected"] == 1

    async def test_unchanged_values_skip_detection(self, session, make_entity):
        entity = await make_entity("Aldric", title="King")

        result = await entity_service.update_entity(
            session, entity.id, EntityUpdate(name="Aldric", fields={"title": "King"})
        )

        assert result.data["changed_fields"] == []
        assert result.data["drift_check"] is None

    async def test_events_are_rejected(self, session, continuity, make_event):
        event = await make_event(continuity, "Y1")

        result = await entity_service.update_entity(session, event.id, EntityUpdate(name="x"))

        assert result.error["code"] == "VALIDATION_ERROR"

    async def test_reserved_keys_in_fields_rejected(self, session, make_entity):
        entity = await make_entity()

        result = await entity_service.update_entity(session, entity.id, EntityUpdate(fields={"name": "x"}))

        assert result.error["code"] == "VALIDATION_ERROR"

    async def test_blank_name_rejected(self, session, make_entity):
        entity = await make_entity()

        result = await entity_service.update_entity(session, entity.id, EntityUpdate(name=" "))

        assert result.error["code"] == "VALIDATION_ERROR"

    async def test_missing_entity(self, session):
        result = await entity_service.update_entity(session, "char_missing", EntityUpdate(name="x"))

        assert result.error["code"] == "ENTITY_NOT_FOUND"


class TestDeleteEntity:

    async def test_delete_purges_drifts(self, session, continuity, make_entity):
        entity = await make_entity()
        await DriftDAO.save(session, entity.id, continuity.id, "title", "King", "Emperor")

        result = await entity_service.delete_entity(session, entity.id)

        assert result.data["drifts_purged"] == 1
        assert await EntityDAO.get_by_id(session, entity.id) is None
        assert await DriftDAO.find_by_entity(session, entity.id) == []

    async def test_delete_missing(self, session):
        result = await entity_service.delete_entity(session, "char_missing")

        assert result.error["code"] == "ENTITY_NOT_FOUND"
