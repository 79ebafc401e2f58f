"""
Campaign store backed by the SQL database.
"""

from typing import Any, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from campaign_tasks.campaigns.repository import CampaignRepository, CampaignRepositoryProtocol
from campaign_tasks.shared.database import DatabaseManager, get_database_manager
from campaign_tasks.shared.logging import get_logger

logger = get_logger(__name__)

RepositoryFactory = Callable[[AsyncSession], CampaignRepositoryProtocol]


class SqlCampaignStore:
    """Writes campaign state, one scoped session per call."""

    def __init__(
        self,
        db_manager: DatabaseManager | None = None,
        repository_factory: RepositoryFactory = CampaignRepository,
    ) -> None:
        self._db_manager = db_manager or get_database_manager()
        self._repository_factory = repository_factory

    async def mark_campaign_started(self, campaign_id: Any) -> None:
        async with self._db_manager.session() as session:
            updated = await self._repository_factory(session).mark_started(campaign_id)

        if not updated:
            logger.warning(
                "Campaign start flag not updated; campaign missing",
                extra={"campaign_id": str(campaign_id)},
            )
