"""
HTTP 接口测试
"""

import httpx
import pytest

from lorekeeper.app import app
from lorekeeper.api.deps import get_db_session
from lorekeeper.config import settings
from lorekeeper.db.dao import CampaignDAO

API = settings.API_V1_PREFIX


@pytest.fixture
async def client(session):
    async def override_session():
        yield session

    app.dependency_overrides[get_db_session] = override_session
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


class TestRootRoutes:

    async def test_root(self, client):
        response = await client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert "database" in response.json()["services"]


class TestContinuityRoutes:

    async def test_create_get_update_list(self, client, world):
        created = await client.post(f"{API}/continuity", json={"world_id": world.id, "name": "Main"})
        assert created.status_code == 200
        continuity_id = created.json()["data"]["id"]

        fetched = await client.get(f"{API}/continuity/{continuity_id}")
        assert fetched.json()["data"]["name"] == "Main"

        updated = await client.patch(f"{API}/continuity/{continuity_id}", json={"name": "Prime"})
        assert updated.json()["data"]["name"] == "Prime"

        listed = await client.get(f"{API}/world/{world.id}/continuities")
        assert listed.json()["data"]["total"] == 1

    async def test_unpaired_branch_fields_are_422(self, client, world):
        response = await client.post(
            f"{API}/continuity",
            json={"world_id": world.id, "name": "Alt", "branched_from_id": "cont_1"}
        )

        assert response.status_code == 422

    async def test_missing_is_404(self, client):
        response = await client.get(f"{API}/continuity/cont_missing")

        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "CONTINUITY_NOT_FOUND"

    async def test_branch(self, client, continuity, make_event):
        event = await make_event(continuity, "Y100")

        response = await client.post(
            f"{API}/continuity/{continuity.id}/branch",
            json={"name": "What if", "branch_point_event_id": event.id}
        )

        assert response.status_code == 200
        assert response.json()["data"]["branched_from_id"] == continuity.id

    async def test_branch_validation_is_400(self, client, continuity, make_event):
        event = await make_event(continuity)

        response = await client.post(
            f"{API}/continuity/{continuity.id}/branch",
            json={"name": "What if", "branch_point_event_id": event.id}
        )

        assert response.status_code == 400

    async def test_delete_in_use_is_409(self, client, session, world, continuity):
        await CampaignDAO.create(session, world.id, "Campaign", continuity_id=continuity.id)

        response = await client.delete(f"{API}/continuity/{continuity.id}")

        assert response.status_code == 409

    async def test_delete(self, client, continuity):
        response = await client.delete(f"{API}/continuity/{continuity.id}")

        assert response.status_code == 200
        assert (await client.get(f"{API}/continuity/{continuity.id}")).status_code == 404


class TestEventEntityDriftRoutes:

    async def test_drift_round_trip(self, client, world, continuity, make_entity):
        """创建事件、直接编辑产生漂移、手动解决"""
        king = await make_entity("Aldric")

        created = await client.post(f"{API}/event", json={
            "world_id": world.id,
            "continuity_id": continuity.id,
            "name": "Abdication",
            "in_world_time": "Y105-06",
            "outcomes": [{"entityID": king.id, "field": "title", "toValue": "Former King"}],
        })
        assert created.status_code == 200
        assert created.json()["data"]["propagation"]["entities_updated"] == [king.id]

        edited = await client.patch(f"{API}/entity/{king.id}", json={"fields": {"title": "Emperor"}})
        assert edited.status_code == 200
        assert edited.json()["data"]["drift_check"]["drifts_detected"] == 1

        drifts = (await client.get(f"{API}/drifts", params={"entity_id": king.id})).json()["data"]["drifts"]
        assert len(drifts) == 1
        assert drifts[0]["event_derived_value"] == "Former King"
        assert drifts[0]["current_value"] == "Emperor"

        resolved = await client.post(f"{API}/drifts/{drifts[0]['id']}/resolve")
        assert resolved.status_code == 200

        remaining = await client.get(f"{API}/drifts", params={"entity_id": king.id})
        assert remaining.json()["data"]["total"] == 0
        audit = await client.get(f"{API}/drifts", params={"entity_id": king.id, "unresolved_only": "false"})
        assert audit.json()["data"]["total"] == 1

    async def test_update_event(self, client, continuity, make_event):
        event = await make_event(continuity, "Y1")

        response = await client.patch(f"{API}/event/{event.id}", json={"name": "Renamed"})

        assert response.status_code == 200
        assert response.json()["data"]["event"]["name"] == "Renamed"

    async def test_resolve_missing_drift_is_404(self, client):
        response = await client.post(f"{API}/drifts/drift_missing/resolve")

        assert response.status_code == 404

    async def test_delete_entity(self, client, make_entity):
        entity = await make_entity()

        response = await client.delete(f"{API}/entity/{entity.id}")

        assert response.status_code == 200
        assert (await client.delete(f"{API}/entity/{entity.id}")).status_code == 404
