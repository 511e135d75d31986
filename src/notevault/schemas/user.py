"""Pydantic schemas for login, the current user, and admin user management.

Learn: The frontend speaks camelCase (isAdmin, createdAt). The alias
generator maps our snake_case fields onto that wire format, and
populate_by_name lets requests use either spelling. Read schemas never
include the password hash.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ─── Auth ──────────────────────────────────────────────

class Credentials(CamelModel):
    email: str = ""
    password: str = ""


class MeRead(CamelModel):
    user_id: int
    email: str
    is_admin: bool


# ─── Admin ─────────────────────────────────────────────

class AdminUserCreate(CamelModel):
    email: str = ""
    password: str = ""
    is_admin: bool = False


class AdminFlagUpdate(CamelModel):
    is_admin: bool


class UserRead(CamelModel):
    id: int
    email: str
    is_admin: bool
    created_at: datetime
