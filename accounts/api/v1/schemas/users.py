"""
Pydantic schemas for the User entity.

Request schemas are dumped with `exclude_unset=True` before reaching the
repository, so a field left out of a request is treated as absent.
"""

import re
from datetime import datetime
from typing import Dict, List, Optional, Union
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import EmailStr, Field, field_validator

from accounts.api.v1.schemas.roles import Role
from accounts.core.schemas import BaseSchema


# --- Constants & reusable validators ------------------------------------------------

# BCP-47-ish minimal regex: language[-REGION], e.g., "en", "en-US", "pt-BR"
_LOCALE_RE = re.compile(r"^[a-zA-Z]{2,8}(-[a-zA-Z0-9]{2,8})?$")


def validate_locale_string(locale: Optional[str]) -> Optional[str]:
    if not locale:
        return locale
    if not _LOCALE_RE.match(locale):
        raise ValueError("Invalid locale format. Example valid values: 'en', 'en-US', 'pt-BR'")
    return locale


def validate_timezone_string(tz: Optional[str]) -> Optional[str]:
    if not tz:
        return tz
    try:
        ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError("Invalid timezone. Provide a valid TZ database name, e.g. 'UTC', 'America/Sao_Paulo'")
    return tz


# --- Schemas ------------------------------------------------------------------------


class UserFields(BaseSchema):
    """Profile fields shared by create and update requests."""
    first_name: Optional[str] = Field(None, max_length=255)
    last_name: Optional[str] = Field(None, max_length=255)
    language: Optional[str] = Field(None, max_length=10, description="User locale, e.g., 'en', 'pt-BR'.")
    country: Optional[str] = Field(None, max_length=100)
    timezone: Optional[str] = Field(None, max_length=64, description="Timezone, e.g., 'UTC' or 'America/Sao_Paulo'.")
    confirmed: Optional[bool] = None
    confirmation_code: Optional[str] = None
    available_space: Optional[int] = Field(None, ge=0, description="Storage quota in bytes; null for unlimited.")
    roles: Optional[List[UUID]] = None
    permissions: Optional[Union[List[str], Dict[str, bool]]] = None

    @field_validator("language")
    def _check_language(cls, v):
        return validate_locale_string(v)

    @field_validator("timezone")
    def _check_timezone(cls, v):
        return validate_timezone_string(v)


class UserCreate(UserFields):
    email: EmailStr
    password: Optional[str] = Field(None, min_length=8, max_length=72, description="Plain password (hashed before storage).")


class UserUpdate(UserFields):
    pass


class UserRead(BaseSchema):
    """Output/response model returned to clients."""
    id: UUID
    email: EmailStr
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    language: Optional[str] = None
    country: Optional[str] = None
    timezone: Optional[str] = None
    confirmed: bool
    available_space: Optional[int] = None
    permissions: Dict[str, bool] = {}
    created_at: Optional[datetime] = None


class UserWithRoles(UserRead):
    roles: List[Role] = []


class UserIds(BaseSchema):
    ids: List[UUID]


class RoleIds(BaseSchema):
    roles: List[UUID]


class PermissionNames(BaseSchema):
    permissions: List[str]
