import logging

from accounts.api.v1.routers import roles, users
from accounts.core.config import settings

logger = logging.getLogger(__name__)


def bootstrap_app(app):
    prefix = settings.API_V1_STR

    app.include_router(roles.router, prefix=prefix, tags=["Roles"])
    app.include_router(users.router, prefix=prefix, tags=["Users"])
    logger.info("Routers registered under %s", prefix)
