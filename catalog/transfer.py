"""
catalog/transfer.py -- Catalog export and transactional bulk import.

Pipeline:
  export:  LinkStore.list_groups() -> export_catalog() -> ExportDocument
           -> document_to_dict() -> JSON attachment
  import:  uploaded bytes -> parse_document() -> ExportDocument
           -> import_document(store, doc) -> ImportResult

Import semantics (replace-by-name merge):
  Groups are matched to the catalog by name, not by id. A matching group keeps
  its id, takes the incoming sort_order and loses ALL of its current links
  before the incoming ones are inserted. Unmatched names become new groups.
  Link ids in the document are never reused; every imported link gets a fresh
  id under the resolved group.

  The whole document is applied inside one transaction. Any failure rolls the
  catalog back to exactly its pre-import state.

Layer rule: no imports from api/ or web/. Errors are reported with
core.errors exceptions; the route layer maps them to HTTP statuses.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from catalog.models import INT64_MAX, INT64_MIN, ExportDocument, ExportGroup, ExportLink, ImportResult, Link
from catalog.store import LinkStore
from core.errors import InvalidInputError, StorageError

logger = logging.getLogger("linkdeck.transfer")

EXPORT_FILENAME = "link-deck-export.json"


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


def export_catalog(store: LinkStore) -> ExportDocument:
    """Snapshot every group and link with ids preserved and timestamps stripped."""
    try:
        groups = store.list_groups()
    except SQLAlchemyError as exc:
        raise StorageError("Failed to export data.") from exc
    return ExportDocument(
        link_groups=[
            ExportGroup(
                id=g.id,
                name=g.name,
                sort_order=g.sort_order,
                links=[
                    ExportLink(
                        id=link.id,
                        group_id=link.group_id,
                        name=link.name,
                        url=link.url,
                        icon=link.icon,
                        sort_order=link.sort_order,
                    )
                    for link in g.links
                ],
            )
            for g in groups
        ]
    )


def document_to_dict(doc: ExportDocument) -> dict[str, Any]:
    """Serialize an export document to plain JSON-ready data."""
    return asdict(doc)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _optional_int(value: Any, where: str, field_name: str) -> int | None:
    if value is None:
        return None
    # bool is an int subclass; true/false is never a valid id or sort order
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"{where}: '{field_name}' must be an integer.")
    if not INT64_MIN <= value <= INT64_MAX:
        raise InvalidInputError(f"{where}: '{field_name}' is out of range.")
    return value


def _required_str(obj: dict, where: str, field_name: str) -> str:
    value = obj.get(field_name)
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"{where}: '{field_name}' is required and must be a non-empty string.")
    # Same normalization as the API request bodies (str_strip_whitespace)
    return value.strip()


def _parse_link(obj: Any, where: str) -> ExportLink:
    if not isinstance(obj, dict):
        raise InvalidInputError(f"{where}: expected an object.")
    icon = obj.get("icon")
    if icon is not None and not isinstance(icon, str):
        raise InvalidInputError(f"{where}: 'icon' must be a string or null.")
    if icon is not None:
        icon = icon.strip() or None
    return ExportLink(
        id=_optional_int(obj.get("id"), where, "id"),
        group_id=_optional_int(obj.get("group_id"), where, "group_id"),
        name=_required_str(obj, where, "name"),
        url=_required_str(obj, where, "url"),
        icon=icon,
        sort_order=_optional_int(obj.get("sort_order"), where, "sort_order") or 0,
    )


def _parse_group(obj: Any, where: str) -> ExportGroup:
    if not isinstance(obj, dict):
        raise InvalidInputError(f"{where}: expected an object.")
    links_raw = obj.get("links")
    if links_raw is None:
        links_raw = []
    if not isinstance(links_raw, list):
        raise InvalidInputError(f"{where}: 'links' must be a list.")
    return ExportGroup(
        id=_optional_int(obj.get("id"), where, "id"),
        name=_required_str(obj, where, "name"),
        sort_order=_optional_int(obj.get("sort_order"), where, "sort_order") or 0,
        links=[_parse_link(item, f"{where} link {i}") for i, item in enumerate(links_raw)],
    )


def parse_document(raw: bytes | str) -> ExportDocument:
    """Parse an uploaded export file.

    Expected shape: {"link_groups": [{"name", "sort_order", "links": [...]}]}.
    Group and link ids are optional. Raises InvalidInputError for non-UTF-8
    input, invalid JSON, or an entry missing a required field.
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise InvalidInputError("Import file must be UTF-8 encoded JSON.") from exc
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidInputError("Invalid JSON format.", detail=str(exc)) from exc

    if not isinstance(data, dict):
        raise InvalidInputError("Import document must be a JSON object.")
    groups_raw = data.get("link_groups")
    if groups_raw is None:
        groups_raw = []
    if not isinstance(groups_raw, list):
        raise InvalidInputError("'link_groups' must be a list.")
    return ExportDocument(link_groups=[_parse_group(item, f"group {i}") for i, item in enumerate(groups_raw)])


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------


def import_document(store: LinkStore, doc: ExportDocument) -> ImportResult:
    """Merge a document into the catalog inside a single transaction.

    Steps, all on one connection:
      1. Index existing groups by name (first in listing order wins when the
         catalog already holds duplicate names).
      2. Per incoming group: reuse + overwrite sort_order + wipe links, or
         create. Record document id -> resolved id. Insert its links.
      3. Commit. Any exception rolls back every statement of this call.

    A name repeated inside the document resolves to the same group; the later
    occurrence replaces the links of the earlier one.

    Raises StorageError when the store fails; nothing is applied in that case.
    """
    result = ImportResult()
    try:
        with store.transaction() as conn:
            existing_by_name: dict[str, int] = {}
            for group in store.list_groups(conn=conn):
                existing_by_name.setdefault(group.name, group.id)

            for incoming in doc.link_groups:
                group_id = existing_by_name.get(incoming.name)
                if group_id is not None:
                    store.update_group(group_id, incoming.name, incoming.sort_order, conn=conn)
                    store.delete_links_in_group(group_id, conn=conn)
                    result.groups_replaced += 1
                else:
                    group_id = store.create_group(incoming.name, incoming.sort_order, conn=conn)
                    existing_by_name[incoming.name] = group_id
                    result.groups_created += 1

                if incoming.id is not None:
                    result.group_id_map[incoming.id] = group_id

                for link in incoming.links:
                    store.create_link(
                        Link(
                            group_id=group_id,
                            name=link.name,
                            url=link.url,
                            icon=link.icon,
                            sort_order=link.sort_order,
                        ),
                        conn=conn,
                    )
                    result.links_imported += 1
    except SQLAlchemyError as exc:
        logger.error("Import rolled back: %s", exc)
        raise StorageError("Failed to import data; no changes were applied.") from exc

    logger.info(
        "Import committed: %d groups created, %d replaced, %d links",
        result.groups_created,
        result.groups_replaced,
        result.links_imported,
    )
    return result
