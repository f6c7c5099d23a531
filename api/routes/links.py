"""
api/routes/links.py -- Link group and link routes for the LinkDeck REST API.

Routes:
  GET    /api/links                          -- public listing (PUBLIC_LINKS policy)
  GET    /api/admin/link-groups              -- admin listing
  POST   /api/admin/link-groups              -- create group
  PUT    /api/admin/link-groups/{group_id}   -- update group
  DELETE /api/admin/link-groups/{group_id}   -- delete group and its links
  GET    /api/admin/link-groups/{group_id}/links -- links of one group
  POST   /api/admin/links                    -- create link
  PUT    /api/admin/links/{link_id}          -- update link (may move it to another group)
  DELETE /api/admin/links/{link_id}          -- delete link

Listings return groups by ascending sort_order, each with its links by
ascending sort_order; an empty group is listed with "links": [].

Unknown ids raise NotFoundError (404). A link may only point at an existing
group; that check runs before the write so the client gets a 404 rather than
a storage error.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request

from api.models import LinkGroupRequest, LinkGroupResponse, LinkRequest, LinkResponse, WriteResponse
from auth.dependencies import get_current_user
from catalog.models import INT64_MAX, Link
from catalog.store import LinkStore
from core.config import get_settings
from core.errors import NotFoundError

# Listings decide their own auth policy (see each handler).
listing_router = APIRouter()

# Every other catalog route requires a bearer token.
router = APIRouter(dependencies=[Depends(get_current_user)])

# Row ids are positive and must fit a SQLite INTEGER; others fail validation (400).
RowId = Annotated[int, Path(ge=1, le=INT64_MAX)]


def _store(request: Request) -> LinkStore:
    return request.app.state.link_store


def _group_not_found(group_id: int) -> NotFoundError:
    return NotFoundError(f"Link group {group_id} not found.", code="group_not_found")


def _list_all(request: Request) -> list[LinkGroupResponse]:
    return [LinkGroupResponse.from_group(g) for g in _store(request).list_groups()]


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------


@listing_router.get("/links", response_model=list[LinkGroupResponse])
def list_public_links(request: Request) -> list[LinkGroupResponse]:
    """Return every group with its links for the home page.

    Public unless PUBLIC_LINKS=false, in which case a bearer token is required.
    """
    if not get_settings().public_links:
        get_current_user(request)
    return _list_all(request)


@listing_router.get("/admin/link-groups", response_model=list[LinkGroupResponse])
def list_link_groups(request: Request) -> list[LinkGroupResponse]:
    """Return every group with its links for the admin UI.

    With ADMIN_LISTING_EMPTY_WITHOUT_AUTH=true, a request that carries no
    Authorization header at all gets [] instead of 401. A header that is
    present but invalid is still rejected.
    """
    if get_settings().admin_listing_empty_without_auth and "authorization" not in request.headers:
        return []
    get_current_user(request)
    return _list_all(request)


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------


@router.post("/admin/link-groups", response_model=WriteResponse, status_code=201)
def create_link_group(request: Request, body: LinkGroupRequest) -> WriteResponse:
    group_id = _store(request).create_group(body.name, body.sort_order)
    return WriteResponse(id=group_id, message="Link group created successfully")


@router.put("/admin/link-groups/{group_id}", response_model=WriteResponse)
def update_link_group(request: Request, group_id: RowId, body: LinkGroupRequest) -> WriteResponse:
    if not _store(request).update_group(group_id, body.name, body.sort_order):
        raise _group_not_found(group_id)
    return WriteResponse(id=group_id, message="Link group updated successfully")


@router.delete("/admin/link-groups/{group_id}", response_model=WriteResponse)
def delete_link_group(request: Request, group_id: RowId) -> WriteResponse:
    """Delete a group. Its links go with it."""
    if not _store(request).delete_group(group_id):
        raise _group_not_found(group_id)
    return WriteResponse(id=group_id, message="Link group deleted successfully")


@router.get("/admin/link-groups/{group_id}/links", response_model=list[LinkResponse])
def list_group_links(request: Request, group_id: RowId) -> list[LinkResponse]:
    store = _store(request)
    if store.get_group(group_id) is None:
        raise _group_not_found(group_id)
    return [LinkResponse.from_link(link) for link in store.get_links(group_id)]


# ---------------------------------------------------------------------------
# Links
# ---------------------------------------------------------------------------


def _link_from_body(body: LinkRequest) -> Link:
    return Link(
        group_id=body.group_id,
        name=body.name,
        url=body.url,
        icon=body.icon or None,
        sort_order=body.sort_order,
    )


@router.post("/admin/links", response_model=WriteResponse, status_code=201)
def create_link(request: Request, body: LinkRequest) -> WriteResponse:
    store = _store(request)
    if store.get_group(body.group_id) is None:
        raise _group_not_found(body.group_id)
    link_id = store.create_link(_link_from_body(body))
    return WriteResponse(id=link_id, message="Link created successfully")


@router.put("/admin/links/{link_id}", response_model=WriteResponse)
def update_link(request: Request, link_id: RowId, body: LinkRequest) -> WriteResponse:
    store = _store(request)
    if store.get_link(link_id) is None:
        raise NotFoundError(f"Link {link_id} not found.", code="link_not_found")
    if store.get_group(body.group_id) is None:
        raise _group_not_found(body.group_id)
    if not store.update_link(link_id, _link_from_body(body)):
        # Deleted between the two checks
        raise NotFoundError(f"Link {link_id} not found.", code="link_not_found")
    return WriteResponse(id=link_id, message="Link updated successfully")


@router.delete("/admin/links/{link_id}", response_model=WriteResponse)
def delete_link(request: Request, link_id: RowId) -> WriteResponse:
    if not _store(request).delete_link(link_id):
        raise NotFoundError(f"Link {link_id} not found.", code="link_not_found")
    return WriteResponse(id=link_id, message="Link deleted successfully")
