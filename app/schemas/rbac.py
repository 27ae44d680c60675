"""Schemas for roles, menus, buttons and permission grants."""

from pydantic import BaseModel, ConfigDict, Field


class RoleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    description: str = ""


class RoleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str


class MenuCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    path: str = ""
    icon: str = ""
    parent_id: int | None = None
    sequence: int = Field(default=0, description="Display order among siblings (ascending)")
    memo: str = ""


class MenuOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    path: str
    icon: str
    parent_id: int | None = None
    sequence: int
    memo: str


class MenuNode(MenuOut):
    """A menu in the resolved left-menu tree."""

    children: list["MenuNode"] = Field(default_factory=list)


class ButtonCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    code: str = Field(..., min_length=1, max_length=128, description="Action identifier, unique within the menu")


class ButtonOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    menu_id: int
    name: str
    code: str


class RolePermissionsUpdate(BaseModel):
    """Full replacement of a role's grants (not a diff)."""

    menu_ids: list[int] = Field(default_factory=list)
    button_ids: list[int] = Field(default_factory=list)


class RolePermissionsResponse(BaseModel):
    role_id: int
    menu_ids: list[int]
    button_ids: list[int]


class UserRolesUpdate(BaseModel):
    """Full replacement of a user's role set (not a diff)."""

    role_ids: list[int] = Field(default_factory=list)


class UserRolesResponse(BaseModel):
    user_id: int
    role_ids: list[int]
