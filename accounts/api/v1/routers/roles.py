from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from accounts.db.session import get_session
from accounts.core.schemas import ApiResponse
from accounts.core.security import verify_api_key
from accounts.api.v1.schemas import RoleCreate, RoleWithPermissions
from accounts.api.v1.repositories import RoleRepository, get_role_repository

prefix = "/roles"
router = APIRouter(prefix=prefix, dependencies=[Depends(verify_api_key)])


@router.get("", response_model=ApiResponse)
async def list_roles(
        db: Annotated[AsyncSession, Depends(get_session)],
        role_repository: Annotated[RoleRepository, Depends(get_role_repository)],
        skip: Annotated[int, Query(ge=0)] = 0,
        limit: Annotated[int, Query(ge=1, le=100)] = 20
):
    """List roles, oldest first."""
    roles = await role_repository.get_all(db, skip, limit, RoleWithPermissions)
    return ApiResponse(status_code=status.HTTP_200_OK, data=roles)


@router.get("/{role_id}", response_model=ApiResponse)
async def read_role(
        role_id: UUID,
        db: Annotated[AsyncSession, Depends(get_session)],
        role_repository: Annotated[RoleRepository, Depends(get_role_repository)]
):
    """Get a role by ID, including permissions."""
    role = await role_repository.get_by_id(db, role_id, RoleWithPermissions)
    if not role:
        raise HTTPException(status_code=404, detail="Role not found")
    return ApiResponse(status_code=status.HTTP_200_OK, data=role)


@router.post("", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def create_role(
        role: RoleCreate,
        db: Annotated[AsyncSession, Depends(get_session)],
        role_repository: Annotated[RoleRepository, Depends(get_role_repository)]
):
    """Create a new role and return it."""
    values = role.model_dump()
    values["permissions"] = role_repository.normalize_permissions(values["permissions"])
    created = await role_repository.create(db, values, RoleWithPermissions)
    return ApiResponse(status_code=status.HTTP_201_CREATED, data=created)
