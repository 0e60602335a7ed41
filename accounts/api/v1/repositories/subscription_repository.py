import logging
from functools import lru_cache
from typing import Dict, List, Mapping, Optional, Protocol
from uuid import UUID

from sqlalchemy.future import select
from sqlalchemy.ext.asyncio import AsyncSession

from accounts.api.v1.models import Subscription
from accounts.core.repositories import BaseRepository

logger = logging.getLogger(__name__)


class BillingGateway(Protocol):
    """Cancels a subscription at the billing provider identified by `Subscription.gateway`."""

    async def cancel(self, subscription: Subscription) -> None:
        ...


class SubscriptionRepository(BaseRepository):
    def __init__(self, gateways: Optional[Mapping[str, BillingGateway]] = None):
        super().__init__(Subscription)
        self.gateways: Dict[str, BillingGateway] = dict(gateways or {})

    def register_gateway(self, name: str, gateway: BillingGateway):
        self.gateways[name] = gateway

    async def for_user(self, db: AsyncSession, user_id: UUID) -> List[Subscription]:
        result = await db.execute(select(self.model).where(self.model.user_id == user_id))
        return list(result.scalars().all())

    async def cancel_and_delete(self, db: AsyncSession, subscription: Subscription):
        """Cancel at the billing provider while still active, then remove the local record."""
        if subscription.active:
            await self._cancel_at_gateway(subscription)

        subscription.cancelled = True
        await db.delete(subscription)
        await db.commit()

    async def _cancel_at_gateway(self, subscription: Subscription):
        gateway = self.gateways.get(subscription.gateway)
        if gateway is not None:
            await gateway.cancel(subscription)
        elif subscription.gateway != "none":
            logger.warning(
                "No billing gateway registered for '%s'; removing subscription %s locally only",
                subscription.gateway,
                subscription.id,
            )


@lru_cache()
def get_subscription_repository() -> SubscriptionRepository:
    return SubscriptionRepository()
