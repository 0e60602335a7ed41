from .roles import Role, RoleCreate, RoleWithPermissions
from .related import NotificationRead, SocialProfileRead, SubscriptionRead
from .users import (
    PermissionNames,
    RoleIds,
    UserCreate,
    UserIds,
    UserRead,
    UserUpdate,
    UserWithRoles,
)

__all__ = [
    "NotificationRead",
    "PermissionNames",
    "Role",
    "RoleCreate",
    "RoleIds",
    "RoleWithPermissions",
    "SocialProfileRead",
    "SubscriptionRead",
    "UserCreate",
    "UserIds",
    "UserRead",
    "UserUpdate",
    "UserWithRoles",
]
