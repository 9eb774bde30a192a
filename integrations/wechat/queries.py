"""SQL queries for the WeChat message and contact databases.

Messages of each conversation live in their own table named
Msg_<md5(conversation username)>. Table names are derived with
message_table_name() and validated before being formatted into a query;
user values are always passed as parameterized query arguments.
"""

import hashlib
import re

MESSAGE_TABLE_PATTERN = re.compile(r"^Msg_[0-9a-f]{32}$")

# SQLite's default host parameter limit is 999 on older builds
MAX_IN_PARAMS = 500

QUERIES = {
    "table_exists": """
        SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?
    """,
    "messages": """
        SELECT
            m.local_type AS local_type,
            m.create_time AS create_time,
            m.message_content AS message_content,
            n.user_name AS sender_username
        FROM "{table}" m
        LEFT JOIN Name2Id n ON m.real_sender_id = n.rowid
        WHERE m.create_time BETWEEN ? AND ?
        ORDER BY m.create_time, m.local_id
    """,
    "media_type_histogram": """
        SELECT local_type, COUNT(*) AS count
        FROM "{table}"
        WHERE create_time BETWEEN ? AND ?
        GROUP BY local_type
    """,
    "active_hour_histogram": """
        SELECT
            CAST(strftime('%H', create_time, 'unixepoch', 'localtime') AS INTEGER) AS hour,
            COUNT(*) AS count
        FROM "{table}"
        WHERE create_time BETWEEN ? AND ?
        GROUP BY hour
    """,
    "conversations": """
        SELECT username FROM contact ORDER BY rowid
    """,
    "display_names": """
        SELECT username, remark, nick_name, alias
        FROM contact
        WHERE username IN ({placeholders})
    """,
    "avatars": """
        SELECT username, small_head_url
        FROM contact
        WHERE username IN ({placeholders})
    """,
}


def message_table_name(room_id: str) -> str:
    """Name of the per-conversation message table."""
    return "Msg_" + hashlib.md5(room_id.encode("utf-8")).hexdigest()


def get_query(name: str, *, table: str | None = None, param_count: int = 0) -> str:
    """Get a SQL query by name.

    Args:
        name: Query name (key of QUERIES).
        table: Message table name, for per-conversation queries.
        param_count: Number of values bound to an IN (...) clause.

    Returns:
        SQL query string.

    Raises:
        KeyError: If query name not found.
        ValueError: If table is not a valid message table name.
    """
    query = QUERIES[name]
    if "{table}" in query:
        if table is None or not MESSAGE_TABLE_PATTERN.match(table):
            raise ValueError(f"Invalid message table name: {table!r}")
        return query.format(table=table)
    if "{placeholders}" in query:
        return query.format(placeholders=", ".join("?" * max(param_count, 1)))
    return query
