from .roles import Role
from .users import User
from .user_role import UserRole
from .social_profile import SocialProfile, ProviderName
from .notification import Notification
from .subscription import Subscription


__all__ = [
    "Notification",
    "ProviderName",
    "Role",
    "SocialProfile",
    "Subscription",
    "User",
    "UserRole",
]
