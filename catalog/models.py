"""
catalog/models.py -- Domain dataclasses for the link catalog.

These are pure data containers with zero logic. Ordering, cascading deletes
and the import merge live in catalog/store.py and catalog/transfer.py.

Two families:
  LinkGroup / Link           -- live entities as stored, with timestamps.
  Export* dataclasses        -- the transfer format: ids kept, timestamps
                                stripped. Used only for export/import.
"""

from dataclasses import dataclass, field
from typing import Optional

# Range of a SQLite INTEGER column (signed 64-bit). Values outside it cannot
# be stored, so every id and sort_order accepted from outside is checked
# against these bounds.
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


@dataclass
class Link:
    """A bookmark inside a group.

    id is None before the record is written to the database.
    """

    group_id: int
    name: str
    url: str
    sort_order: int = 0
    icon: Optional[str] = None
    id: Optional[int] = None
    created_at: str = ""  # ISO 8601, set by store on insert
    updated_at: str = ""


@dataclass
class LinkGroup:
    """A named, ordered collection of links.

    links is always a list -- empty for a group with no links, never None.
    """

    name: str
    sort_order: int = 0
    id: Optional[int] = None
    created_at: str = ""
    updated_at: str = ""
    links: list[Link] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Transfer format
# ---------------------------------------------------------------------------


@dataclass
class ExportLink:
    name: str
    url: str
    sort_order: int = 0
    icon: Optional[str] = None
    id: Optional[int] = None
    group_id: Optional[int] = None


@dataclass
class ExportGroup:
    name: str
    sort_order: int = 0
    id: Optional[int] = None
    links: list[ExportLink] = field(default_factory=list)


@dataclass
class ExportDocument:
    """Snapshot of the whole catalog, as written by export and read by import."""

    link_groups: list[ExportGroup] = field(default_factory=list)


@dataclass
class ImportResult:
    """Outcome of a committed import.

    group_id_map maps each group id found in the document to the id actually
    used in this catalog (an existing group's id, or a freshly assigned one).
    Groups without an id in the document are not in the map.
    """

    groups_created: int = 0
    groups_replaced: int = 0
    links_imported: int = 0
    group_id_map: dict[int, int] = field(default_factory=dict)
