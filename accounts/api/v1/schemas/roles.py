from typing import Dict, Optional
from uuid import UUID

from accounts.core.schemas import BaseSchema


class RoleBase(BaseSchema):
    name: str
    description: Optional[str] = None


class RoleCreate(RoleBase):
    default: bool = False
    permissions: Dict[str, bool] = {}


class Role(RoleBase):
    id: UUID
    default: bool


class RoleWithPermissions(Role):
    permissions: Dict[str, bool] = {}
