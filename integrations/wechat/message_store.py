"""Read-only access to a WeChat message database.

Implements the MessageStore protocol from contracts/group_chat.py. Each call
opens its own read-only connection and closes it before returning.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date
from pathlib import Path

from contracts.group_chat import MessageRecord
from groupstats.errors import MessageStoreError, message_db_not_found
from groupstats.roster import DB_TIMEOUT_SECONDS
from groupstats.utils.datetime_utils import window_bounds

from .parser import row_to_message
from .queries import get_query, message_table_name

logger = logging.getLogger(__name__)


class WeChatMessageStore:
    """Message archive backed by a WeChat message database.

    Example:
        store = WeChatMessageStore(Path("message_0.db"))
        records = store.fetch_messages("123@chatroom", start_ts, end_ts)
    """

    def __init__(self, db_path: Path, timeout: float = DB_TIMEOUT_SECONDS) -> None:
        self.db_path = db_path
        self.timeout = timeout

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        db_path_str = str(self.db_path)
        if not self.db_path.exists():
            raise message_db_not_found(db_path_str)

        try:
            conn = sqlite3.connect(
                f"file:{self.db_path}?mode=ro", uri=True, timeout=self.timeout
            )
        except sqlite3.Error as e:
            raise MessageStoreError(
                f"Failed to open message database: {e}", db_path=db_path_str, cause=e
            ) from e

        try:
            conn.row_factory = sqlite3.Row
            yield conn
        except sqlite3.Error as e:
            raise MessageStoreError(
                f"Message query failed: {e}", db_path=db_path_str, cause=e
            ) from e
        finally:
            conn.close()

    @staticmethod
    def _table_for(conn: sqlite3.Connection, room_id: str) -> str | None:
        table = message_table_name(room_id)
        if conn.execute(get_query("table_exists"), (table,)).fetchone() is None:
            logger.debug("No message table for %s", room_id)
            return None
        return table

    def fetch_messages(self, room_id: str, start_ts: int, end_ts: int) -> list[MessageRecord]:
        """Get messages with start_ts <= create_time <= end_ts, oldest first.

        Returns:
            Messages of the conversation; empty if it has no message table.

        Raises:
            MessageStoreError: If the database is missing or the query fails.
        """
        with self._connection() as conn:
            table = self._table_for(conn, room_id)
            if table is None:
                return []
            rows = conn.execute(get_query("messages", table=table), (start_ts, end_ts)).fetchall()
        return [row_to_message(row) for row in rows]

    def _histogram(
        self, query_name: str, room_id: str, start_date: date, end_date: date
    ) -> dict[int, int]:
        start_ts, end_ts = window_bounds(start_date, end_date)
        with self._connection() as conn:
            table = self._table_for(conn, room_id)
            if table is None:
                return {}
            rows = conn.execute(get_query(query_name, table=table), (start_ts, end_ts)).fetchall()
        return {int(row[0]): int(row["count"]) for row in rows if row[0] is not None}

    def media_type_histogram(
        self, room_id: str, start_date: date, end_date: date
    ) -> dict[int, int]:
        """Count messages per type code within the date window."""
        return self._histogram("media_type_histogram", room_id, start_date, end_date)

    def active_hour_histogram(
        self, room_id: str, start_date: date, end_date: date
    ) -> dict[int, int]:
        """Count messages per local hour of day (0-23) within the date window."""
        return self._histogram("active_hour_histogram", room_id, start_date, end_date)
