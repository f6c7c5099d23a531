"""
catalog/store.py -- SQLAlchemy-backed persistence layer for link groups and links.

Uses SQLAlchemy Core (not ORM) so the dataclasses in catalog/models.py remain
the authoritative domain representation. Swapping SQLite for PostgreSQL is a
connection string change, not a rewrite.

Pattern: Repository + Data Mapper. LinkStore is the repository; the _row_to_*
functions are the mappers. Route handlers never touch SQL directly.

Transactions:
  Every write method accepts an optional `conn`. Without one, the method runs
  in its own short transaction (engine.begin()). With one, it joins the
  caller's transaction and leaves commit/rollback to the caller -- this is how
  catalog/transfer.py runs a whole import atomically:

      with store.transaction() as conn:
          gid = store.create_group("Work", 0, conn=conn)
          store.create_link(Link(group_id=gid, ...), conn=conn)

Ordering:
  Groups and links are listed by ascending sort_order. sort_order is not
  unique; id is the tie-break so listings are stable on every engine.

Security: all queries use bound parameters. No f-strings in SQL.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, ForeignKey, Integer, MetaData, String, Table, Text, create_engine, event, select
from sqlalchemy.engine import Connection, Engine

from catalog.models import Link, LinkGroup
from core.config import get_settings

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_groups = Table(
    "link_groups",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
    Column("sort_order", Integer, nullable=False, server_default="0"),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)

_links = Table(
    "links",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("group_id", Integer, ForeignKey("link_groups.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("name", String(255), nullable=False),
    Column("url", Text, nullable=False),
    Column("icon", Text),
    Column("sort_order", Integer, nullable=False, server_default="0"),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)


# ---------------------------------------------------------------------------
# Connection setup
# ---------------------------------------------------------------------------


def _sqlite_pragmas(dbapi_conn, connection_record) -> None:
    """Enable WAL journaling and foreign key enforcement.

    SQLite ships with foreign keys off, and PRAGMAs are per-connection, so
    ON DELETE CASCADE only works if every pooled connection switches it on.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")
    dbapi_conn.execute("PRAGMA foreign_keys=ON")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class LinkStore:
    def __init__(self, db_url: Optional[str] = None) -> None:
        db_url = db_url or get_settings().database_url
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            # FastAPI runs sync handlers in a thread pool, so a pooled
            # connection may be used from a thread other than its creator.
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _sqlite_pragmas)
        metadata.create_all(self.engine)

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """Open a transaction that commits on clean exit and rolls back on error."""
        with self.engine.begin() as conn:
            yield conn

    @contextmanager
    def _scope(self, conn: Optional[Connection]) -> Iterator[Connection]:
        if conn is not None:
            yield conn
            return
        with self.engine.begin() as own:
            yield own

    # ------------------------------------------------------------------
    # Groups
    # ------------------------------------------------------------------

    def list_groups(self, conn: Optional[Connection] = None) -> list[LinkGroup]:
        """Return every group with its links, both ordered by sort_order.

        Two queries regardless of catalog size: all groups, then all links
        bucketed by group_id. Every group carries a list, empty if it has no
        links.
        """
        with self._scope(conn) as c:
            group_rows = c.execute(_groups.select().order_by(_groups.c.sort_order, _groups.c.id)).fetchall()
            link_rows = c.execute(_links.select().order_by(_links.c.sort_order, _links.c.id)).fetchall()

        groups = [_row_to_group(r) for r in group_rows]
        by_id = {g.id: g for g in groups}
        for row in link_rows:
            group = by_id.get(row.group_id)
            if group is not None:
                group.links.append(_row_to_link(row))
        return groups

    def get_group(self, group_id: int, conn: Optional[Connection] = None) -> Optional[LinkGroup]:
        """Fetch a single group (without its links). Returns None if not found."""
        with self._scope(conn) as c:
            row = c.execute(_groups.select().where(_groups.c.id == group_id)).fetchone()
        return _row_to_group(row) if row is not None else None

    def create_group(self, name: str, sort_order: int = 0, conn: Optional[Connection] = None) -> int:
        """Insert a new group and return its assigned database ID."""
        now = _now_iso()
        with self._scope(conn) as c:
            result = c.execute(
                _groups.insert().values(name=name, sort_order=sort_order, created_at=now, updated_at=now)
            )
            return result.inserted_primary_key[0]

    def update_group(
        self,
        group_id: int,
        name: str,
        sort_order: int,
        conn: Optional[Connection] = None,
    ) -> bool:
        """Overwrite name and sort_order. Returns False if group_id was not found."""
        with self._scope(conn) as c:
            result = c.execute(
                _groups.update()
                .where(_groups.c.id == group_id)
                .values(name=name, sort_order=sort_order, updated_at=_now_iso())
            )
        return result.rowcount > 0

    def delete_group(self, group_id: int, conn: Optional[Connection] = None) -> bool:
        """Delete a group and all of its links in one transaction.

        The links are removed explicitly as well as through the foreign key
        cascade, so no engine configuration can leave orphans behind.
        Returns False if group_id was not found.
        """
        with self._scope(conn) as c:
            c.execute(_links.delete().where(_links.c.group_id == group_id))
            result = c.execute(_groups.delete().where(_groups.c.id == group_id))
        return result.rowcount > 0

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------

    def get_links(self, group_id: int, conn: Optional[Connection] = None) -> list[Link]:
        """Return one group's links ordered by sort_order.

        An unknown group yields an empty list; callers that must distinguish
        the two cases check get_group() first.
        """
        with self._scope(conn) as c:
            rows = c.execute(
                _links.select().where(_links.c.group_id == group_id).order_by(_links.c.sort_order, _links.c.id)
            ).fetchall()
        return [_row_to_link(r) for r in rows]

    def get_link(self, link_id: int, conn: Optional[Connection] = None) -> Optional[Link]:
        """Fetch a single link by ID. Returns None if not found."""
        with self._scope(conn) as c:
            row = c.execute(_links.select().where(_links.c.id == link_id)).fetchone()
        return _row_to_link(row) if row is not None else None

    def create_link(self, link: Link, conn: Optional[Connection] = None) -> int:
        """Insert a new link and return its ID. Any id on the dataclass is ignored.

        Raises sqlalchemy.exc.IntegrityError if group_id does not reference an
        existing group (SQLite with foreign_keys=ON, or any enforcing engine).
        """
        now = _now_iso()
        with self._scope(conn) as c:
            result = c.execute(
                _links.insert().values(
                    group_id=link.group_id,
                    name=link.name,
                    url=link.url,
                    icon=link.icon,
                    sort_order=link.sort_order,
                    created_at=now,
                    updated_at=now,
                )
            )
            return result.inserted_primary_key[0]

    def update_link(self, link_id: int, link: Link, conn: Optional[Connection] = None) -> bool:
        """Overwrite every mutable field of a link, including its group.

        Returns False if link_id was not found.
        """
        with self._scope(conn) as c:
            result = c.execute(
                _links.update()
                .where(_links.c.id == link_id)
                .values(
                    group_id=link.group_id,
                    name=link.name,
                    url=link.url,
                    icon=link.icon,
                    sort_order=link.sort_order,
                    updated_at=_now_iso(),
                )
            )
        return result.rowcount > 0

    def delete_link(self, link_id: int, conn: Optional[Connection] = None) -> bool:
        """Delete one link. Returns False if link_id was not found."""
        with self._scope(conn) as c:
            result = c.execute(_links.delete().where(_links.c.id == link_id))
        return result.rowcount > 0

    def delete_links_in_group(self, group_id: int, conn: Optional[Connection] = None) -> int:
        """Delete every link of a group and return how many were removed."""
        with self._scope(conn) as c:
            result = c.execute(_links.delete().where(_links.c.group_id == group_id))
        return result.rowcount

    def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        with self.engine.connect() as conn:
            return conn.execute(select(1)).scalar() == 1

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_group(row) -> LinkGroup:
    return LinkGroup(
        id=row.id,
        name=row.name,
        sort_order=row.sort_order,
        created_at=row.created_at,
        updated_at=row.updated_at,
        links=[],
    )


def _row_to_link(row) -> Link:
    return Link(
        id=row.id,
        group_id=row.group_id,
        name=row.name,
        url=row.url,
        icon=row.icon,
        sort_order=row.sort_order,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
