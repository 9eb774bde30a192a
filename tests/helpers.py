"""Shared test helpers: SQLite fixture builders and in-memory collaborators."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path

from contracts.group_chat import (
    ConversationDescriptor,
    MessageRecord,
    RankedWord,
    WordCloudMode,
    WordCloudResult,
)
from integrations.wechat.queries import message_table_name


def local_ts(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> int:
    """Epoch seconds of a local wall-clock time."""
    return int(datetime(year, month, day, hour, minute).timestamp())


def text_message(sender: str | None, ts: int, content: str = "hi", local_type: int = 1):
    return MessageRecord(
        sender_username=sender, create_time=ts, local_type=local_type, display_content=content
    )


# =============================================================================
# SQLite builders
# =============================================================================


@dataclass
class ContactRow:
    username: str
    remark: str | None = None
    nick_name: str | None = None
    alias: str | None = None
    small_head_url: str | None = None


def create_contact_db(
    db_path: Path,
    contacts: Iterable[ContactRow] = (),
    rooms: dict[str, Sequence[str]] | None = None,
) -> Path:
    """Create a contact database with name2id, chatroom_member and contact tables.

    Args:
        db_path: Where to create the database.
        contacts: Rows for the contact table.
        rooms: Room username -> member usernames.
    """
    rooms = rooms or {}
    contacts = list(contacts)
    conn = sqlite3.connect(db_path)
    try:
        conn.execute("CREATE TABLE name2id (username TEXT)")
        conn.execute("CREATE TABLE chatroom_member (room_id INTEGER, member_id INTEGER)")
        conn.execute(
            "CREATE TABLE contact (username TEXT, remark TEXT, nick_name TEXT, "
            "alias TEXT, small_head_url TEXT)"
        )

        rowids: dict[str, int] = {}

        def rowid_for(username: str) -> int:
            if username not in rowids:
                cursor = conn.execute("INSERT INTO name2id (username) VALUES (?)", (username,))
                rowids[username] = int(cursor.lastrowid)
            return rowids[username]

        for contact in contacts:
            rowid_for(contact.username)
            conn.execute(
                "INSERT INTO contact VALUES (?, ?, ?, ?, ?)",
                (
                    contact.username,
                    contact.remark,
                    contact.nick_name,
                    contact.alias,
                    contact.small_head_url,
                ),
            )
        for room, members in rooms.items():
            room_rowid = rowid_for(room)
            for member in members:
                conn.execute(
                    "INSERT INTO chatroom_member VALUES (?, ?)", (room_rowid, rowid_for(member))
                )
        conn.commit()
    finally:
        conn.close()
    return db_path


def create_message_db(
    db_path: Path,
    messages: dict[str, Sequence[tuple[str | None, int, int, str | None]]],
) -> Path:
    """Create a message database with one Msg_<md5> table per conversation.

    Args:
        db_path: Where to create the database.
        messages: Room username -> (sender, create_time, local_type, content) tuples.
    """
    conn = sqlite3.connect(db_path)
    try:
        conn.execute("CREATE TABLE Name2Id (user_name TEXT)")
        sender_ids: dict[str, int] = {}
        for room, rows in messages.items():
            table = message_table_name(room)
            conn.execute(
                f'CREATE TABLE "{table}" (local_id INTEGER PRIMARY KEY AUTOINCREMENT, '
                "local_type INTEGER, create_time INTEGER, real_sender_id INTEGER, "
                "message_content TEXT)"
            )
            for sender, create_time, local_type, content in rows:
                sender_id = None
                if sender is not None:
                    if sender not in sender_ids:
                        cursor = conn.execute(
                            "INSERT INTO Name2Id (user_name) VALUES (?)", (sender,)
                        )
                        sender_ids[sender] = int(cursor.lastrowid)
                    sender_id = sender_ids[sender]
                conn.execute(
                    f'INSERT INTO "{table}" (local_type, create_time, real_sender_id, '
                    "message_content) VALUES (?, ?, ?, ?)",
                    (local_type, create_time, sender_id, content),
                )
        conn.commit()
    finally:
        conn.close()
    return db_path


# =============================================================================
# In-memory collaborators
# =============================================================================


@dataclass
class FakeMessageStore:
    """MessageStore over a list of records, filtering by the requested bounds.

    With ignore_bounds every record is returned, as a store with corrupt
    timestamps would.
    """

    messages: list[MessageRecord] = field(default_factory=list)
    error: Exception | None = None
    ignore_bounds: bool = False
    calls: list[tuple[str, int, int]] = field(default_factory=list)

    def fetch_messages(self, room_id: str, start_ts: int, end_ts: int) -> list[MessageRecord]:
        self.calls.append((room_id, start_ts, end_ts))
        if self.error is not None:
            raise self.error
        if self.ignore_bounds:
            return list(self.messages)
        return [m for m in self.messages if start_ts <= m.create_time <= end_ts]

    def media_type_histogram(self, room_id: str, start_date: date, end_date: date):
        return {1: 10, 3: 2}

    def active_hour_histogram(self, room_id: str, start_date: date, end_date: date):
        return {9: 4, 21: 7}


@dataclass
class FakeRosterStore:
    """RosterStore with fixed answers; roster_path points at a real contact database."""

    db_path: Path | None = None
    conversations: list[ConversationDescriptor] = field(default_factory=list)
    display_names: dict[str, str] = field(default_factory=dict)
    avatars: dict[str, str] = field(default_factory=dict)
    avatar_error: Exception | None = None
    display_name_error: Exception | None = None
    display_name_calls: list[list[str]] = field(default_factory=list)

    def list_conversations(self) -> list[ConversationDescriptor]:
        return list(self.conversations)

    def resolve_display_names(self, usernames: Sequence[str]) -> dict[str, str]:
        self.display_name_calls.append(list(usernames))
        if self.display_name_error is not None:
            raise self.display_name_error
        return {u: self.display_names[u] for u in usernames if u in self.display_names}

    def resolve_avatars(self, usernames: Sequence[str]) -> dict[str, str]:
        if self.avatar_error is not None:
            raise self.avatar_error
        return {u: self.avatars[u] for u in usernames if u in self.avatars}

    def roster_path(self) -> Path | None:
        return self.db_path


@dataclass
class RecordingAnalyzer:
    """TextAnalyzer that counts whitespace tokens and records its inputs."""

    error: Exception | None = None
    analyzed: list[list[str]] = field(default_factory=list)
    params: list[dict[str, object]] = field(default_factory=list)

    def filter_text_messages(self, texts: Sequence[str]) -> list[str]:
        return [t for t in texts if not t.startswith("[")]

    def analyze(
        self,
        texts: Sequence[str],
        mode: WordCloudMode = WordCloudMode.WORD,
        top_n: int = 100,
        min_count: int = 1,
        min_length: int = 2,
    ) -> WordCloudResult:
        self.analyzed.append(list(texts))
        self.params.append(
            {"mode": mode, "top_n": top_n, "min_count": min_count, "min_length": min_length}
        )
        if self.error is not None:
            raise self.error
        counts: dict[str, int] = {}
        for text in texts:
            for word in text.split():
                counts[word] = counts.get(word, 0) + 1
        ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)[:top_n]
        return WordCloudResult(words=[RankedWord(w, c) for w, c in ranked])
