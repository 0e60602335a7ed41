import logging
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from accounts.api.v1.models import User as UserModel
from accounts.api.v1.repositories.notification_repository import NotificationRepository, get_notification_repository
from accounts.api.v1.repositories.role_repository import RoleRepository, get_role_repository
from accounts.api.v1.repositories.social_profile_repository import SocialProfileRepository, get_social_profile_repository
from accounts.api.v1.repositories.subscription_repository import SubscriptionRepository, get_subscription_repository
from accounts.api.v1.repositories.syncs_permissions import SyncsPermissions
from accounts.api.v1.repositories.user_roles_repository import UserRolesRepository, get_user_roles_repository
from accounts.core.config import settings
from accounts.core.events import EventSink, UserCreated, UsersDeleted, get_event_dispatcher
from accounts.core.helpers import coerce_uuid, coerce_uuids
from accounts.core.models import ModelNotFoundError
from accounts.core.repositories import (
    BaseRepository,
    FileEntryRepository,
    PermanentlyDeleteEntries,
    get_file_repository,
    get_permanently_delete_entries,
)
from accounts.core.security import generate_api_token, get_password_hash

logger = logging.getLogger(__name__)

ROLE_MODES = ("attach", "sync", "detach")

# Relationships that find_or_fail can eager load
LOADABLE_RELATIONS = ("roles", "social_profiles", "notifications", "subscriptions")

# Accepted as relations by callers, but stored as columns and always loaded
COLUMN_RELATIONS = ("permissions",)


class UserRepository(SyncsPermissions, BaseRepository):
    """
    Account management on top of the users table: creation with default role
    assignment, updates, cascading bulk deletion and role/permission syncing.
    """

    def __init__(
        self,
        role_repository: RoleRepository,
        user_roles_repository: UserRolesRepository,
        social_profile_repository: SocialProfileRepository,
        notification_repository: NotificationRepository,
        subscription_repository: SubscriptionRepository,
        file_repository: FileEntryRepository,
        delete_entries: PermanentlyDeleteEntries,
        events: EventSink,
    ):
        super().__init__(UserModel)
        self.role_repository = role_repository
        self.user_roles_repository = user_roles_repository
        self.social_profile_repository = social_profile_repository
        self.notification_repository = notification_repository
        self.subscription_repository = subscription_repository
        self.file_repository = file_repository
        self.delete_entries = delete_entries
        self.events = events

    async def find_or_fail(self, db: AsyncSession, user_id: Any, relations: Sequence[str] = ()) -> UserModel:
        """
        Retrieve a user by ID with the requested relations eagerly loaded.

        Raises:
            ModelNotFoundError: no user has the given id.
            ValueError: a requested relation does not exist.
        """
        unknown = [
            relation for relation in relations
            if relation not in LOADABLE_RELATIONS and relation not in COLUMN_RELATIONS
        ]
        if unknown:
            raise ValueError(f"Unknown user relation(s): {', '.join(unknown)}")

        key = coerce_uuid(user_id)
        if key is None:
            raise ModelNotFoundError(self.model.__name__, user_id)

        query = (
            select(self.model)
            .where(self.model.id == key)
            .execution_options(populate_existing=True)
        )
        for relation in relations:
            if relation in LOADABLE_RELATIONS:
                query = query.options(selectinload(getattr(self.model, relation)))

        result = await db.execute(query)
        user = result.scalars().first()
        if user is None:
            raise ModelNotFoundError(self.model.__name__, user_id)
        return user

    async def get_by_email(self, db: AsyncSession, email: str) -> Optional[UserModel]:
        result = await db.execute(select(self.model).where(self.model.email == email))
        return result.scalars().first()

    async def first_or_create(self, db: AsyncSession, params: Mapping[str, Any]) -> UserModel:
        """Return the user matching params["email"], creating it when missing."""
        user = await self.get_by_email(db, params["email"])

        if user is None:
            user = await self.create(db, params)

        return user

    async def create(self, db: AsyncSession, params: Mapping[str, Any]) -> UserModel:
        params = dict(params)
        params["api_token"] = generate_api_token()

        user = self.model(**self.format_params(params))
        db.add(user)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise ValueError(f"Creating {self.model.__name__}: an error occurred. {str(e)}")

        user_id, email = user.id, user.email

        try:
            roles = params.get("roles")
            if roles is None:
                await self.assign_default_role(db, user)
            elif not await self.attach_roles(db, user, roles) and roles:
                # None of the requested roles exist
                await self.assign_default_role(db, user)

            permissions = params.get("permissions")
            if permissions:
                await self.sync_permissions(db, user, permissions)
        except Exception:
            # No half-configured account may be left behind
            logger.warning("Assigning roles/permissions to %s failed; removing the new user", email)
            await db.rollback()
            await self.user_roles_repository.detach(db, user_id)
            await db.execute(
                delete(self.model).where(self.model.id == user_id).execution_options(synchronize_session=False)
            )
            await db.commit()
            db.expunge(user)
            raise

        await db.refresh(user, attribute_names=["roles"])
        logger.info("Created user %s", email)
        await self.events.publish(UserCreated(user))

        return user

    async def update(self, db: AsyncSession, user: UserModel, params: Mapping[str, Any]) -> UserModel:
        for key, value in self.format_params(params, "update").items():
            setattr(user, key, value)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ValueError(f'Updating {self.model.__name__}: an error occurred. Check the data.')

        await self.attach_roles(db, user, params.get("roles") or [], "sync")

        await self.sync_permissions(db, user, params.get("permissions") or [])

        await db.refresh(user, attribute_names=["roles", "permissions"])
        return user

    async def delete_multiple(self, db: AsyncSession, ids: Iterable[Any]) -> int:
        """
        Delete the users with the given ids and everything that belongs to them.

        Users are removed one at a time; a failure stops the batch with the
        earlier users already gone. Ids that match no user are ignored.
        """
        keys = coerce_uuids(ids)
        result = await db.execute(
            select(self.model).where(self.model.id.in_(keys)).options(selectinload(self.model.roles))
        )
        users = list(result.scalars().all())

        for user in users:
            await self._delete_with_relations(db, user)

        await self.events.publish(UsersDeleted(users))
        logger.info("Deleted %d of %d requested users", len(users), len(keys))

        return len(users)

    async def _delete_with_relations(self, db: AsyncSession, user: UserModel):
        user_id = user.id

        await self.social_profile_repository.delete_for_user(db, user_id)
        await self.user_roles_repository.detach(db, user_id)
        await self.notification_repository.delete_for_user(db, user_id)

        for subscription in await self.subscription_repository.for_user(db, user_id):
            await self.subscription_repository.cancel_and_delete(db, subscription)

        # Ownership links go away with the user row
        entry_ids = await self.file_repository.owned_entry_ids(db, user_id)

        await db.delete(user)
        await db.commit()

        await self.delete_entries.execute(db, entry_ids)

    def format_params(self, params: Mapping[str, Any], type: str = "create") -> Dict[str, Any]:
        """
        Prepare given params for writing to the users table.

        Absent (or None) fields fall back to their defaults. `email` and
        `password` are only written on creation.
        """
        def value(key, default=None):
            given = params.get(key)
            return default if given is None else given

        formatted = {
            "first_name": value("first_name"),
            "last_name": value("last_name"),
            "language": value("language", settings.APP_LOCALE),
            "country": value("country"),
            "timezone": value("timezone"),
            "confirmed": bool(value("confirmed", True)),
            "confirmation_code": value("confirmation_code"),
        }

        if params.get("api_token") is not None:
            formatted["api_token"] = params["api_token"]

        if "available_space" in params:
            space = params["available_space"]
            formatted["available_space"] = None if space is None else int(space)

        if type == "create":
            formatted["email"] = params["email"]
            password = params.get("password")
            formatted["password"] = get_password_hash(password) if password is not None else None

        return formatted

    async def attach_roles(self, db: AsyncSession, user: UserModel, role_ids: Iterable[Any], mode: str = "sync") -> int:
        """
        Apply the given roles to the user using attach, sync or detach semantics.

        Role ids that do not reference a stored role are dropped first.
        Returns the number of pivot rows affected.
        """
        if mode not in ROLE_MODES:
            raise ValueError(f"Unsupported role mode '{mode}', expected one of {', '.join(ROLE_MODES)}")

        role_ids = list(role_ids or [])
        if not role_ids and mode == "attach":
            return 0

        existing = await self.role_repository.existing_ids(db, role_ids)
        count = await getattr(self.user_roles_repository, mode)(db, user.id, existing)

        await db.refresh(user, attribute_names=["roles"])
        return count

    async def detach_roles(self, db: AsyncSession, user: UserModel, role_ids: Iterable[Any]) -> int:
        count = await self.user_roles_repository.detach(db, user.id, list(role_ids or []))
        await db.refresh(user, attribute_names=["roles"])
        return count

    async def assign_default_role(self, db: AsyncSession, user: UserModel):
        default_role = await self.role_repository.get_default_role(db)

        if default_role:
            await self.user_roles_repository.attach(db, user.id, [default_role.id])


@lru_cache()
def get_user_repository() -> UserRepository:
    return UserRepository(
        role_repository=get_role_repository(),
        user_roles_repository=get_user_roles_repository(),
        social_profile_repository=get_social_profile_repository(),
        notification_repository=get_notification_repository(),
        subscription_repository=get_subscription_repository(),
        file_repository=get_file_repository(),
        delete_entries=get_permanently_delete_entries(),
        events=get_event_dispatcher(),
    )
