"""
测试公共夹具

每个测试使用独立的内存 SQLite 数据库
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker

from lorekeeper.db.base import create_engine_for_url
from lorekeeper.db.models import Base
from lorekeeper.db.models.entity import IN_WORLD_TIME_KEY, OUTCOMES_KEY
from lorekeeper.db.dao import WorldDAO, ContinuityDAO, EntityDAO
from lorekeeper.models.outcome import EventOutcome, serialize_event_outcomes


@pytest.fixture
async def engine():
    engine = create_engine_for_url("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session(engine):
    factory = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
async def world(session):
    return await WorldDAO.create(session, "Aldoria")


@pytest.fixture
async def continuity(session, world):
    return await ContinuityDAO.create(session, world.id, "Main")


@pytest.fixture
def make_entity(session, world):
    """创建普通实体（默认角色）"""
    async def _make(name="Aldric", entity_type="character", **fields):
        return await EntityDAO.create(
            session, entity_type, world.id, name, type_specific_fields=fields
        )
    return _make


@pytest.fixture
def make_event(session, world):
    """
    创建事件

    outcomes 为 (entity_id, field, to_value) 元组列表
    """
    async def _make(continuity, in_world_time=None, outcomes=(), name="Event"):
        fields = {}
        if in_world_time is not None:
            fields[IN_WORLD_TIME_KEY] = in_world_time
        if outcomes:
            fields[OUTCOMES_KEY] = serialize_event_outcomes([
                EventOutcome(entity_id=entity_id, field=field, to_value=to_value)
                for entity_id, field, to_value in outcomes
            ])
        return await EntityDAO.create(
            session, "event", world.id, name,
            continuity_id=continuity.id, type_specific_fields=fields
        )
    return _make
