"""
API request and response models for LinkDeck REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in catalog/models.py and
auth/models.py, which own the internal domain representation. Route handlers
map between the two.
"""

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

from catalog.models import INT64_MAX, INT64_MIN, Link, LinkGroup

# Integers the store can hold; anything larger is a 400, not a driver error.
StoredInt = Annotated[int, Field(ge=INT64_MIN, le=INT64_MAX)]

# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class LoginRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    username: str = Field(min_length=1, max_length=255)
    # 72 bytes is bcrypt's input limit; cap well below any truncation surprise.
    password: str = Field(min_length=1, max_length=72)


class LoginResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str
    username: str


class ChangePasswordRequest(BaseModel):
    old_password: str = Field(min_length=1, max_length=72)
    new_password: str = Field(min_length=6, max_length=72)


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


# ---------------------------------------------------------------------------
# Catalog requests
# ---------------------------------------------------------------------------


class LinkGroupRequest(BaseModel):
    """Body for POST /admin/link-groups and PUT /admin/link-groups/{id}."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=255)
    sort_order: StoredInt = 0


class LinkRequest(BaseModel):
    """Body for POST /admin/links and PUT /admin/links/{id}."""

    model_config = ConfigDict(str_strip_whitespace=True)

    group_id: StoredInt
    name: str = Field(min_length=1, max_length=255)
    url: str = Field(min_length=1, max_length=2048)
    icon: Optional[str] = Field(default=None, max_length=2048)
    sort_order: StoredInt = 0


# ---------------------------------------------------------------------------
# Catalog responses
# ---------------------------------------------------------------------------


class LinkResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    group_id: int
    name: str
    url: str
    icon: Optional[str] = None
    sort_order: int
    created_at: str
    updated_at: str

    @classmethod
    def from_link(cls, link: Link) -> "LinkResponse":
        return cls(
            id=link.id,
            group_id=link.group_id,
            name=link.name,
            url=link.url,
            icon=link.icon,
            sort_order=link.sort_order,
            created_at=link.created_at,
            updated_at=link.updated_at,
        )


class LinkGroupResponse(BaseModel):
    """A group with its links. links is always present, [] when empty."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    sort_order: int
    created_at: str
    updated_at: str
    links: list[LinkResponse] = Field(default_factory=list)

    @classmethod
    def from_group(cls, group: LinkGroup) -> "LinkGroupResponse":
        return cls(
            id=group.id,
            name=group.name,
            sort_order=group.sort_order,
            created_at=group.created_at,
            updated_at=group.updated_at,
            links=[LinkResponse.from_link(link) for link in group.links or []],
        )


class WriteResponse(BaseModel):
    """Acknowledgement for create/update/delete: the affected id plus a message."""

    model_config = ConfigDict(frozen=True)

    id: int
    message: str


class ImportResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    groups_created: int
    groups_replaced: int
    links_imported: int


# ---------------------------------------------------------------------------
# Errors / health
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]
