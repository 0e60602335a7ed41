from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import Field

from accounts.core.schemas.base import BaseSchema


class ApiResponse(BaseSchema):
    status_code: int
    error: Optional[str] = None
    detail: Optional[str] = None
    data: Optional[Any] = None
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
