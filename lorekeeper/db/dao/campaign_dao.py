"""
战役数据访问对象
"""

from typing import Optional
from sqlalchemy import select, update, func, and_
from sqlalchemy.ext.asyncio import AsyncSession

from lorekeeper.db.models.campaign import Campaign
from lorekeeper.utils.id_generator import generate_campaign_id


class CampaignDAO:
    """战役 DAO"""

    @staticmethod
    async def create(
        session: AsyncSession,
        world_id: str,
        name: str,
        continuity_id: Optional[str] = None
    ) -> Campaign:
        """创建战役"""
        campaign = Campaign(
            id=generate_campaign_id(),
            world_id=world_id,
            name=name,
            continuity_id=continuity_id,
        )

        session.add(campaign)
        await session.flush()

        return campaign

    @staticmethod
    async def get_by_id(session: AsyncSession, campaign_id: str) -> Optional[Campaign]:
        """根据ID获取战役"""
        result = await session.execute(
            select(Campaign).where(Campaign.id == campaign_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def count_by_continuity(session: AsyncSession, continuity_id: str) -> int:
        """统计引用该时间线的战役数量"""
        result = await session.execute(
            select(func.count()).select_from(Campaign).where(Campaign.continuity_id == continuity_id)
        )
        return result.scalar() or 0

    @staticmethod
    async def attach_orphans(session: AsyncSession, world_id: str, continuity_id: str) -> int:
        """
        把世界下未指定时间线的战役挂到指定时间线

        Returns:
            更新的战役数量
        """
        result = await session.execute(
            update(Campaign)
            .where(
                and_(
                    Campaign.world_id == world_id,
                    Campaign.continuity_id.is_(None)
                )
            )
            .values(continuity_id=continuity_id)
        )
        return result.rowcount or 0
