"""
时间线服务测试
"""

import pytest
from pydantic import ValidationError

from lorekeeper.db.dao import CampaignDAO, ContinuityDAO, DriftDAO, EntityDAO
from lorekeeper.models import ContinuityCreate, ContinuityUpdate, ContinuityBranch
from lorekeeper.services.continuity_service import continuity_service


class TestCreateContinuity:

    async def test_create(self, session, world):
        result = await continuity_service.create_continuity(
            session, ContinuityCreate(world_id=world.id, name="  Main  ", description="canon")
        )

        assert result.success
        assert result.data["name"] == "Main"
        assert result.data["id"].startswith("cont_")
        assert result.data["branched_from_id"] is None

    async def test_blank_name_rejected(self, session, world):
        result = await continuity_service.create_continuity(
            session, ContinuityCreate(world_id=world.id, name="   ")
        )

        assert not result.success
        assert result.error["code"] == "VALIDATION_ERROR"

    async def test_unknown_world(self, session):
        result = await continuity_service.create_continuity(
            session, ContinuityCreate(world_id="world_missing", name="Main")
        )

        assert result.error["code"] == "WORLD_NOT_FOUND"

    async def test_unknown_branch_source(self, session, world):
        result = await continuity_service.create_continuity(
            session,
            ContinuityCreate(
                world_id=world.id, name="Alt",
                branched_from_id="cont_missing", branch_point_event_id="evt_x"
            )
        )

        assert result.error["code"] == "CONTINUITY_NOT_FOUND"

    def test_branch_fields_must_be_set_together(self):
        """分支来源和分支点必须同时出现"""
        with pytest.raises(ValidationError):
            ContinuityCreate(world_id="w", name="Alt", branched_from_id="cont_1")
        with pytest.raises(ValidationError):
            ContinuityCreate(world_id="w", name="Alt", branch_point_event_id="evt_1")


class TestReadAndUpdate:

    async def test_get_and_list(self, session, world, continuity):
        await ContinuityDAO.create(session, world.id, "Alternate")

        got = await continuity_service.get_continuity(session, continuity.id)
        listed = await continuity_service.list_continuities(session, world.id)

        assert got.data["name"] == "Main"
        assert listed.data["total"] == 2
        assert [c["name"] for c in listed.data["continuities"]] == ["Alternate", "Main"]

    async def test_get_missing(self, session):
        result = await continuity_service.get_continuity(session, "cont_missing")

        assert result.error["code"] == "CONTINUITY_NOT_FOUND"

    async def test_update_name_and_description(self, session, continuity):
        result = await continuity_service.update_continuity(
            session, continuity.id, ContinuityUpdate(name="Prime", description="the real one")
        )

        assert result.success
        assert result.data["name"] == "Prime"
        assert result.data["description"] == "the real one"

    async def test_update_rejects_blank_name(self, session, continuity):
        result = await continuity_service.update_continuity(
            session, continuity.id, ContinuityUpdate(name="")
        )

        assert result.error["code"] == "VALIDATION_ERROR"
        assert continuity.name == "Main"


class TestBranchContinuity:

    async def test_branch_at_event(self, session, world, continuity, make_event):
        """分支记录来源时间线和分支点，不复制事件"""
        event = await make_event(continuity, "Y100")

        result = await continuity_service.branch_continuity(
            session, continuity.id, ContinuityBranch(name="What if", branch_point_event_id=event.id)
        )

        assert result.success
        assert result.data["world_id"] == world.id
        assert result.data["branched_from_id"] == continuity.id
        assert result.data["is_branch"] is True
        assert result.data["branch_point_event_id"] == event.id
        assert await EntityDAO.find_events_by_continuity(session, result.data["id"]) == []

    async def test_source_must_exist(self, session, continuity, make_event):
        event = await make_event(continuity, "Y100")

        result = await continuity_service.branch_continuity(
            session, "cont_missing", ContinuityBranch(name="Alt", branch_point_event_id=event.id)
        )

        assert result.error["code"] == "CONTINUITY_NOT_FOUND"

    async def test_event_must_exist(self, session, continuity):
        result = await continuity_service.branch_continuity(
            session, continuity.id, ContinuityBranch(name="Alt", branch_point_event_id="evt_missing")
        )

        assert result.error["code"] == "EVENT_NOT_FOUND"

    async def test_branch_point_must_be_an_event(self, session, continuity, make_entity):
        character = await make_entity()

        result = await continuity_service.branch_continuity(
            session, continuity.id, ContinuityBranch(name="Alt", branch_point_event_id=character.id)
        )

        assert result.error["code"] == "VALIDATION_ERROR"

    async def test_event_must_belong_to_source(self, session, world, continuity, make_event):
        other = await ContinuityDAO.create(session, world.id, "Other")
        event = await make_event(other, "Y100")

        result = await continuity_service.branch_continuity(
            session, continuity.id, ContinuityBranch(name="Alt", branch_point_event_id=event.id)
        )

        assert result.error["code"] == "VALIDATION_ERROR"

    async def test_event_needs_in_world_time(self, session, continuity, make_event):
        event = await make_event(continuity)

        result = await continuity_service.branch_continuity(
            session, continuity.id, ContinuityBranch(name="Alt", branch_point_event_id=event.id)
        )

        assert result.error["code"] == "VALIDATION_ERROR"

    async def test_name_required(self, session, continuity, make_event):
        event = await make_event(continuity, "Y100")

        result = await continuity_service.branch_continuity(
            session, continuity.id, ContinuityBranch(name=" ", branch_point_event_id=event.id)
        )

        assert result.error["code"] == "VALIDATION_ERROR"


class TestDeleteContinuity:

    async def test_refused_while_campaign_uses_it(self, session, world, continuity):
        await CampaignDAO.create(session, world.id, "Campaign", continuity_id=continuity.id)

        result = await continuity_service.delete_continuity(session, continuity.id)

        assert result.error["code"] == "CONTINUITY_IN_USE"
        assert await ContinuityDAO.exists(session, continuity.id)

    async def test_missing(self, session):
        result = await continuity_service.delete_continuity(session, "cont_missing")

        assert result.error["code"] == "CONTINUITY_NOT_FOUND"

    async def test_cascades_events_and_drifts(self, session, world, continuity, make_entity, make_event):
        """删除时间线时删除其事件和漂移记录，子时间线变为根时间线"""
        other = await ContinuityDAO.create(session, world.id, "Other")
        entity = await make_entity()
        event = await make_event(continuity, "Y1", [(entity.id, "title", "King")])
        child = await ContinuityDAO.create(
            session, world.id, "Child", branched_from_id=continuity.id, branch_point_event_id=event.id
        )
        await DriftDAO.save(session, entity.id, continuity.id, "title", "King", "Emperor")
        kept = await DriftDAO.save(session, entity.id, other.id, "title", "Exile", "Emperor")

        result = await continuity_service.delete_continuity(session, continuity.id)

        assert result.success
        assert not await ContinuityDAO.exists(session, continuity.id)
        assert await EntityDAO.get_by_id(session, event.id) is None
        assert await EntityDAO.get_by_id(session, entity.id) is not None
        assert [d.id for d in await DriftDAO.find_by_entity(session, entity.id)] == [kept.id]

        child = await ContinuityDAO.get_by_id(session, child.id)
        assert child.branched_from_id is None
        assert child.branch_point_event_id is None
