"""Read-only access to a WeChat contact database.

Implements the RosterStore protocol from contracts/group_chat.py. The same
database holds the membership tables queried by groupstats.roster, so
roster_path() points at it.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator, Sequence
from pathlib import Path

from contracts.group_chat import ConversationDescriptor
from groupstats.errors import RosterQueryError
from groupstats.roster import DB_TIMEOUT_SECONDS, open_roster_db

from .parser import is_group_username, pick_display_name
from .queries import MAX_IN_PARAMS, get_query

logger = logging.getLogger(__name__)


def _chunks(items: Sequence[str], size: int) -> Iterator[Sequence[str]]:
    for i in range(0, len(items), size):
        yield items[i : i + size]


class WeChatContactStore:
    """Roster store backed by a WeChat contact database.

    Example:
        store = WeChatContactStore(Path("contact.db"))
        groups = [c for c in store.list_conversations() if c.is_group]
        names = store.resolve_display_names([g.username for g in groups])
    """

    def __init__(self, db_path: Path | None, timeout: float = DB_TIMEOUT_SECONDS) -> None:
        self.db_path = db_path
        self.timeout = timeout

    def roster_path(self) -> Path | None:
        """Location of the contact database, None if it is not present."""
        if self.db_path is None or not self.db_path.exists():
            return None
        return self.db_path

    def _lookup(self, query_name: str, usernames: Sequence[str]) -> list[sqlite3.Row]:
        unique = list(dict.fromkeys(usernames))
        if not unique:
            return []
        rows: list[sqlite3.Row] = []
        with open_roster_db(self.db_path, timeout=self.timeout) as conn:
            try:
                for chunk in _chunks(unique, MAX_IN_PARAMS):
                    query = get_query(query_name, param_count=len(chunk))
                    rows.extend(conn.execute(query, tuple(chunk)).fetchall())
            except sqlite3.Error as e:
                raise RosterQueryError(
                    f"Contact lookup failed: {e}", db_path=str(self.db_path), cause=e
                ) from e
        return rows

    def list_conversations(self) -> list[ConversationDescriptor]:
        """All contacts and groups, in contact-table order."""
        with open_roster_db(self.db_path, timeout=self.timeout) as conn:
            try:
                rows = conn.execute(get_query("conversations")).fetchall()
            except sqlite3.Error as e:
                raise RosterQueryError(
                    f"Failed to list conversations: {e}", db_path=str(self.db_path), cause=e
                ) from e
        return [
            ConversationDescriptor(
                username=row["username"], is_group=is_group_username(row["username"])
            )
            for row in rows
            if row["username"]
        ]

    def resolve_display_names(self, usernames: Sequence[str]) -> dict[str, str]:
        """Map usernames to remark, nickname or alias. Unknown usernames are omitted."""
        names: dict[str, str] = {}
        for row in self._lookup("display_names", usernames):
            name = pick_display_name(row)
            if name:
                names[row["username"]] = name
        logger.debug("Resolved %d of %d display names", len(names), len(usernames))
        return names

    def resolve_avatars(self, usernames: Sequence[str]) -> dict[str, str]:
        """Map usernames to small avatar URLs. Contacts without one are omitted."""
        return {
            row["username"]: row["small_head_url"]
            for row in self._lookup("avatars", usernames)
            if row["small_head_url"]
        }
