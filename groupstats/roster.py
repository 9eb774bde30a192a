"""Membership queries against the contact/roster database.

The roster database maps usernames to internal row ids (name2id), records
group membership by row id (chatroom_member) and holds contact details
(contact). Every connection opened here is read-only and scoped to a single
call; open_roster_db closes it on every exit path.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from groupstats.errors import (
    ErrorCode,
    RosterQueryError,
    roster_db_not_found,
)

logger = logging.getLogger(__name__)

DB_TIMEOUT_SECONDS = 5.0

ROOM_ROWID_QUERY = "SELECT rowid FROM name2id WHERE username = ?"

MEMBER_COUNT_QUERY = "SELECT COUNT(*) AS count FROM chatroom_member WHERE room_id = ?"

MEMBER_ROWS_QUERY = """
    SELECT n.username AS username, c.small_head_url AS small_head_url
    FROM chatroom_member m
    JOIN name2id n ON m.member_id = n.rowid
    LEFT JOIN contact c ON n.username = c.username
    WHERE m.room_id = ?
    ORDER BY m.rowid
"""


@dataclass(frozen=True)
class MemberRow:
    """A raw membership row: username (if resolvable) and avatar URL (if any)."""

    username: str | None
    avatar_url: str | None


@contextmanager
def open_roster_db(
    db_path: Path | None, timeout: float = DB_TIMEOUT_SECONDS
) -> Iterator[sqlite3.Connection]:
    """Open the roster database read-only for the duration of a with block.

    Args:
        db_path: Roster database location, None when no roster data exists.
        timeout: SQLite busy timeout in seconds.

    Yields:
        SQLite connection with Row factory.

    Raises:
        RosterUnavailableError: If db_path is None or does not exist.
        RosterQueryError: If the database cannot be opened.
    """
    if db_path is None or not db_path.exists():
        raise roster_db_not_found(str(db_path) if db_path is not None else None)

    try:
        conn = sqlite3.connect(f"file:{db_path}?mode=ro", uri=True, timeout=timeout)
    except sqlite3.Error as e:
        raise RosterQueryError(
            f"Failed to open roster database: {e}", db_path=str(db_path), cause=e
        ) from e

    try:
        conn.row_factory = sqlite3.Row
        yield conn
    finally:
        conn.close()


def resolve_room_rowid(conn: sqlite3.Connection, room_id: str) -> int:
    """Resolve a conversation username to its internal roster row id.

    Raises:
        RosterQueryError: If the conversation is unknown or the query fails.
    """
    try:
        row = conn.execute(ROOM_ROWID_QUERY, (room_id,)).fetchone()
    except sqlite3.Error as e:
        raise RosterQueryError(
            f"Failed to resolve conversation {room_id}: {e}", room_id=room_id, cause=e
        ) from e
    if row is None:
        raise RosterQueryError(
            f"Conversation not found in roster: {room_id}",
            room_id=room_id,
            code=ErrorCode.STO_CONVERSATION_NOT_FOUND,
        )
    return int(row[0])


def fetch_member_count(conn: sqlite3.Connection, room_id: str) -> int:
    """Count membership rows of a conversation.

    Raises:
        RosterQueryError: If the conversation is unknown, the query fails or
            the result is malformed.
    """
    room_rowid = resolve_room_rowid(conn, room_id)
    try:
        row = conn.execute(MEMBER_COUNT_QUERY, (room_rowid,)).fetchone()
    except sqlite3.Error as e:
        raise RosterQueryError(
            f"Failed to count members of {room_id}: {e}", room_id=room_id, cause=e
        ) from e
    if row is None or not isinstance(row["count"], int):
        raise RosterQueryError(f"Malformed member count for {room_id}", room_id=room_id)
    return max(row["count"], 0)


def fetch_member_rows(conn: sqlite3.Connection, room_id: str) -> list[MemberRow]:
    """Get membership rows of a conversation joined to usernames and avatars.

    Rows whose member id has no name2id entry are dropped by the join; rows
    with a NULL username are returned with username=None.

    Raises:
        RosterQueryError: If the conversation is unknown or the query fails.
    """
    room_rowid = resolve_room_rowid(conn, room_id)
    try:
        rows = conn.execute(MEMBER_ROWS_QUERY, (room_rowid,)).fetchall()
    except sqlite3.Error as e:
        raise RosterQueryError(
            f"Failed to list members of {room_id}: {e}", room_id=room_id, cause=e
        ) from e
    logger.debug("Fetched %d membership rows for %s", len(rows), room_id)
    return [MemberRow(row["username"], row["small_head_url"]) for row in rows]
