"""
Pydantic schemas for roles and permissions.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator


# ============================================================================
# Permission Schemas
# ============================================================================

class PermissionResponse(BaseModel):
    """Schema for permission response."""
    id: int
    name: str
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class PermissionListResponse(BaseModel):
    data: List[PermissionResponse]
    count: int


# ============================================================================
# Role Schemas
# ============================================================================

class RoleBase(BaseModel):
    """Base role schema."""
    name: str = Field(..., min_length=1, max_length=50, description="Unique role name")
    description: Optional[str] = Field(None, max_length=1000, description="Role description")


def _clean_role_name(v: str) -> str:
    """Strip surrounding whitespace and reject blank names."""
    v = v.strip()
    if not v:
        raise ValueError('Role name must not be blank')
    return v


class RoleCreate(RoleBase):
    """Schema for creating a new role."""

    @field_validator('name')
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return _clean_role_name(v)


class RoleUpdate(BaseModel):
    """
    Schema for updating a role.

    `name` may be omitted but not set to null; it is cleaned like on create.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=1000)

    @field_validator('name')
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError('Role name must not be null')
        return _clean_role_name(v)


class RoleResponse(RoleBase):
    """Schema for role response."""
    id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RoleWithPermissions(RoleResponse):
    """Schema for role with permissions."""
    permissions: List[PermissionResponse] = []

    model_config = ConfigDict(from_attributes=True)


class RoleListResponse(BaseModel):
    data: List[RoleWithPermissions]
    count: int


class RoleMessage(BaseModel):
    """Envelope returned by role mutations."""
    message: str
    data: RoleWithPermissions


# ============================================================================
# Assignment Schemas
# ============================================================================

class RolePermissionIds(BaseModel):
    """Body of POST/PUT /roles/{id}/permissions."""
    permission_ids: List[int] = Field(..., alias="permissionIds", description="Permission IDs")

    model_config = ConfigDict(populate_by_name=True)
