"""
Campaign cache warm-up.

Refreshes the assignment cache, the contact cache and the opt-out set of a
campaign at the same time. The contact load is best effort; the other two
report failure to the caller.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from campaign_tasks.shared.exceptions import SuppressedWarmupError
from campaign_tasks.shared.logging import get_logger
from campaign_tasks.tasks.interfaces import CacheLayer
from campaign_tasks.tasks.schemas import CacheRefreshRequest

logger = get_logger(__name__)


@dataclass(frozen=True)
class CacheWarmResult:
    campaign_id: object
    contacts_error: SuppressedWarmupError | None = None

    @property
    def contacts_loaded(self) -> bool:
        return self.contacts_error is None


class CacheWarmer:
    """Concurrent refresh of the three cached views of a campaign."""

    def __init__(self, cache: CacheLayer) -> None:
        self._cache = cache

    async def warm(self, request: CacheRefreshRequest) -> CacheWarmResult:
        """Refresh all campaign data into cache, clearing any corruption.

        Args:
            request: Campaign and organization to refresh.

        Returns:
            Result carrying the swallowed contact-load error, if any.

        Raises:
            Exception: Whatever the assignment or opt-out refresh raised, after
                all three branches have settled.
        """
        campaign = request.campaign
        organization = request.organization

        assignments, contacts_error, opt_outs = await asyncio.gather(
            self._cache.update_campaign_assignment_cache(campaign.id),
            self._load_contacts(request),
            self._cache.load_opt_outs_many(organization.id),
            return_exceptions=True,
        )

        for outcome in (assignments, opt_outs):
            if isinstance(outcome, BaseException):
                logger.error(
                    "Campaign cache warm-up failed",
                    extra={"campaign_id": str(campaign.id), "error": str(outcome)},
                )
                raise outcome

        # Cancellation of the contact branch is not a load failure.
        if isinstance(contacts_error, BaseException) and not isinstance(
            contacts_error, SuppressedWarmupError
        ):
            raise contacts_error

        logger.info(
            "Campaign cache warm-up finished",
            extra={
                "campaign_id": str(campaign.id),
                "organization_id": str(organization.id),
                "contacts_loaded": contacts_error is None,
            },
        )
        return CacheWarmResult(campaign_id=campaign.id, contacts_error=contacts_error)

    async def _load_contacts(
        self,
        request: CacheRefreshRequest,
    ) -> SuppressedWarmupError | None:
        campaign = request.campaign
        try:
            await self._cache.load_contacts_many(
                campaign,
                request.organization,
                request.context_vars or {},
            )
        except Exception as exc:
            error = SuppressedWarmupError(campaign.id, exc)
            logger.error(
                "ERROR contact load_many",
                extra={"campaign_id": str(campaign.id), "error": str(exc)},
                exc_info=exc,
            )
            return error

        logger.info("FINISHED contact load_many", extra={"campaign_id": str(campaign.id)})
        return None
