from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from accounts.db.session import get_session
from accounts.api.v1.repositories import UserRepository, get_user_repository
from accounts.api.v1.schemas import (
    NotificationRead,
    PermissionNames,
    RoleIds,
    SocialProfileRead,
    SubscriptionRead,
    UserCreate,
    UserIds,
    UserUpdate,
    UserWithRoles,
)
from accounts.core.schemas import ApiResponse
from accounts.core.security import verify_api_key

prefix = "/users"
router = APIRouter(prefix=prefix, dependencies=[Depends(verify_api_key)])


RELATED_SCHEMAS = {
    "social_profiles": SocialProfileRead,
    "notifications": NotificationRead,
    "subscriptions": SubscriptionRead,
}


@router.get("/{user_id}", response_model=ApiResponse)
async def read_user(
        user_id: UUID,
        db: Annotated[AsyncSession, Depends(get_session)],
        user_repository: Annotated[UserRepository, Depends(get_user_repository)],
        with_: Annotated[Optional[str], Query(alias="with", description="Comma separated relations to load.")] = None
):
    """Get a user by ID, including roles and any relations listed in `with`."""
    requested = [relation.strip() for relation in (with_ or "").split(",") if relation.strip()]
    relations = list(dict.fromkeys(["roles", *requested]))

    user = await user_repository.find_or_fail(db, user_id, relations)

    data = UserWithRoles.model_validate(user).model_dump()
    for relation in relations:
        if relation in RELATED_SCHEMAS:
            data[relation] = [RELATED_SCHEMAS[relation].model_validate(item) for item in getattr(user, relation)]
    return ApiResponse(status_code=status.HTTP_200_OK, data=data)


@router.post("", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
        user: UserCreate,
        db: Annotated[AsyncSession, Depends(get_session)],
        user_repository: Annotated[UserRepository, Depends(get_user_repository)]
):
    """Create a user; without explicit roles the default role is assigned."""
    created = await user_repository.create(db, user.model_dump(exclude_unset=True))
    return ApiResponse(
        status_code=status.HTTP_201_CREATED,
        detail="User created successfully.",
        data=UserWithRoles.model_validate(created),
    )


@router.put("/{user_id}", response_model=ApiResponse)
async def update_user(
        user_id: UUID,
        user: UserUpdate,
        db: Annotated[AsyncSession, Depends(get_session)],
        user_repository: Annotated[UserRepository, Depends(get_user_repository)]
):
    """Overwrite a user's profile, roles and permissions."""
    db_user = await user_repository.find_or_fail(db, user_id)
    updated = await user_repository.update(db, db_user, user.model_dump(exclude_unset=True))
    return ApiResponse(status_code=status.HTTP_200_OK, data=UserWithRoles.model_validate(updated))


@router.post("/delete-multiple", response_model=ApiResponse)
async def delete_users(
        request: UserIds,
        db: Annotated[AsyncSession, Depends(get_session)],
        user_repository: Annotated[UserRepository, Depends(get_user_repository)]
):
    """Delete several users with their roles, profiles, subscriptions and files."""
    deleted = await user_repository.delete_multiple(db, request.ids)
    return ApiResponse(status_code=status.HTTP_200_OK, detail="Users deleted.", data={"deleted": deleted})


@router.post("/{user_id}/roles/attach", response_model=ApiResponse)
async def attach_roles(
        user_id: UUID,
        request: RoleIds,
        db: Annotated[AsyncSession, Depends(get_session)],
        user_repository: Annotated[UserRepository, Depends(get_user_repository)]
):
    """Attach roles to a user, keeping the ones already assigned."""
    user = await user_repository.find_or_fail(db, user_id, ["roles"])
    await user_repository.attach_roles(db, user, request.roles, "attach")
    return ApiResponse(status_code=status.HTTP_200_OK, data=UserWithRoles.model_validate(user))


@router.post("/{user_id}/roles/detach", response_model=ApiResponse)
async def detach_roles(
        user_id: UUID,
        request: RoleIds,
        db: Annotated[AsyncSession, Depends(get_session)],
        user_repository: Annotated[UserRepository, Depends(get_user_repository)]
):
    """Detach roles from a user."""
    user = await user_repository.find_or_fail(db, user_id, ["roles"])
    await user_repository.detach_roles(db, user, request.roles)
    return ApiResponse(status_code=status.HTTP_200_OK, data=UserWithRoles.model_validate(user))


@router.post("/{user_id}/permissions/add", response_model=ApiResponse)
async def add_permissions(
        user_id: UUID,
        request: PermissionNames,
        db: Annotated[AsyncSession, Depends(get_session)],
        user_repository: Annotated[UserRepository, Depends(get_user_repository)]
):
    """Grant permissions directly to a user."""
    user = await user_repository.find_or_fail(db, user_id, ["roles"])
    await user_repository.add_permissions(db, user, request.permissions)
    return ApiResponse(status_code=status.HTTP_200_OK, data=UserWithRoles.model_validate(user))


@router.post("/{user_id}/permissions/remove", response_model=ApiResponse)
async def remove_permissions(
        user_id: UUID,
        request: PermissionNames,
        db: Annotated[AsyncSession, Depends(get_session)],
        user_repository: Annotated[UserRepository, Depends(get_user_repository)]
):
    """Revoke permissions granted directly to a user."""
    user = await user_repository.find_or_fail(db, user_id, ["roles"])
    await user_repository.remove_permissions(db, user, request.permissions)
    return ApiResponse(status_code=status.HTTP_200_OK, data=UserWithRoles.model_validate(user))
