"""
Campaign repository for database operations.
"""

from typing import Protocol

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from campaign_tasks.campaigns.models import Campaign


class CampaignRepositoryProtocol(Protocol):
    """Protocol for campaign repository operations."""

    async def get_by_id(self, campaign_id: int) -> Campaign | None:
        """Get campaign by ID."""
        ...

    async def mark_started(self, campaign_id: int) -> bool:
        """Set the started flag of a campaign."""
        ...


class CampaignRepository:
    """Repository for campaign database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async database session.
        """
        self._session = session

    async def get_by_id(self, campaign_id: int) -> Campaign | None:
        """Get campaign by ID.

        Args:
            campaign_id: Campaign identifier.

        Returns:
            Campaign if found, None otherwise.
        """
        stmt = select(Campaign).where(Campaign.id == campaign_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def mark_started(self, campaign_id: int) -> bool:
        """Set ``is_started`` on a campaign.

        Args:
            campaign_id: Campaign identifier.

        Returns:
            True if a row was updated, False if the campaign does not exist.
        """
        stmt = (
            update(Campaign)
            .where(Campaign.id == campaign_id)
            .values(is_started=True)
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return (result.rowcount or 0) > 0
