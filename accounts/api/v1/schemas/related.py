from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from accounts.api.v1.models import ProviderName
from accounts.core.schemas import BaseSchema


class SocialProfileRead(BaseSchema):
    id: UUID
    service_name: ProviderName
    user_service_id: str
    username: Optional[str] = None


class NotificationRead(BaseSchema):
    id: UUID
    type: str
    data: Optional[Dict[str, Any]] = None
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class SubscriptionRead(BaseSchema):
    id: UUID
    gateway: str
    gateway_id: Optional[str] = None
    plan_id: Optional[str] = None
    cancelled: bool
    ends_at: Optional[datetime] = None
