from .syncs_permissions import SyncsPermissions
from .role_repository import RoleRepository, get_role_repository
from .user_roles_repository import UserRolesRepository, get_user_roles_repository
from .social_profile_repository import SocialProfileRepository, get_social_profile_repository
from .notification_repository import NotificationRepository, get_notification_repository
from .subscription_repository import BillingGateway, SubscriptionRepository, get_subscription_repository
from .user_repository import UserRepository, get_user_repository

__all__ = [
    "BillingGateway",
    "NotificationRepository",
    "RoleRepository",
    "SocialProfileRepository",
    "SubscriptionRepository",
    "SyncsPermissions",
    "UserRepository",
    "UserRolesRepository",
    "get_notification_repository",
    "get_role_repository",
    "get_social_profile_repository",
    "get_subscription_repository",
    "get_user_repository",
    "get_user_roles_repository",
]
