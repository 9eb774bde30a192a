"""Group chat analytics engine.

Answers roster, ranking, time-series, histogram and word-frequency queries
for a single group conversation by joining the message archive with the
roster store.

Every query is best-effort: store and analyzer failures degrade to an empty
result (or 0) instead of propagating. The *_outcome methods expose the
underlying Ok/Unavailable distinction for callers that need it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Any, TypeVar

from contracts.group_chat import WordCloudMode
from groupstats.analytics.aggregator import (
    count_by_day,
    count_by_sender,
    member_text_contents,
)
from groupstats.roster import (
    DB_TIMEOUT_SECONDS,
    fetch_member_count,
    fetch_member_rows,
    open_roster_db,
)
from groupstats.utils.datetime_utils import parse_date_key, window_bounds
from groupstats.utils.error_handling import Ok, Unavailable, attempt

if TYPE_CHECKING:
    import sqlite3

    from contracts.group_chat import MessageRecord, MessageStore, RosterStore, TextAnalyzer

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TOP_N = 100
DEFAULT_MIN_COUNT = 1
DEFAULT_MIN_LENGTH = 2


@dataclass
class GroupMember:
    """A member of a group conversation.

    display_name falls back to username when empty.
    """

    username: str
    display_name: str
    avatar_url: str | None = None

    def __post_init__(self) -> None:
        if not self.display_name:
            self.display_name = self.username

    def to_dict(self) -> dict[str, Any]:
        return {
            "username": self.username,
            "displayName": self.display_name,
            "avatarUrl": self.avatar_url,
        }


@dataclass
class GroupChatInfo:
    """Summary of a group conversation."""

    username: str
    display_name: str
    member_count: int
    avatar_url: str | None = None

    def __post_init__(self) -> None:
        """Validate field constraints."""
        if self.member_count < 0:
            msg = f"member_count must be >= 0, got {self.member_count}"
            raise ValueError(msg)


@dataclass
class GroupMessageRank:
    """Message count of one sender within a window."""

    member: GroupMember
    message_count: int

    def __post_init__(self) -> None:
        """Validate field constraints."""
        if self.message_count < 1:
            msg = f"message_count must be >= 1, got {self.message_count}"
            raise ValueError(msg)


@dataclass
class DailyMessageCount:
    """Messages sent by one member on one local calendar day."""

    date: date
    count: int

    def __post_init__(self) -> None:
        """Validate field constraints."""
        if self.count < 1:
            msg = f"count must be >= 1, got {self.count}"
            raise ValueError(msg)


class GroupAnalyticsEngine:
    """Analytics over the persisted history of group conversations.

    Holds only references to its collaborators; safe to share between
    threads. Each roster lookup opens its own read-only connection and
    closes it before returning.

    Example:
        engine = GroupAnalyticsEngine(message_store, roster_store, WordCloudAnalyzer())
        for rank in engine.rank_members_by_message_count(room_id, start, end):
            print(rank.member.display_name, rank.message_count)
    """

    def __init__(
        self,
        message_store: MessageStore,
        roster_store: RosterStore,
        text_analyzer: TextAnalyzer,
        *,
        roster_timeout: float = DB_TIMEOUT_SECONDS,
        default_top_n: int = DEFAULT_TOP_N,
        min_count: int = DEFAULT_MIN_COUNT,
        min_length: int = DEFAULT_MIN_LENGTH,
    ) -> None:
        """Initialize the engine.

        Args:
            message_store: Message archive.
            roster_store: Contact/roster store.
            text_analyzer: Word-frequency analyzer.
            roster_timeout: SQLite busy timeout for roster connections.
            default_top_n: Words kept by member_word_frequency when top_n is omitted.
            min_count: Minimum occurrences passed to the analyzer.
            min_length: Minimum word length passed to the analyzer.
        """
        self._messages = message_store
        self._roster = roster_store
        self._analyzer = text_analyzer
        self._roster_timeout = roster_timeout
        self._default_top_n = default_top_n
        self._min_count = min_count
        self._min_length = min_length

    # -- roster -------------------------------------------------------------

    def _query_roster(self, query: Callable[[sqlite3.Connection, str], T], room_id: str) -> T:
        with open_roster_db(self._roster.roster_path(), timeout=self._roster_timeout) as conn:
            return query(conn, room_id)

    def list_group_conversations(self) -> list[GroupChatInfo]:
        """List group conversations, largest first.

        Display names fall back to the conversation username, avatars are
        omitted if their lookup fails, and a conversation whose member count
        can't be fetched reports 0.

        Returns:
            Group conversations sorted by member_count descending; ties keep
            the roster store's order.
        """
        conversations = attempt("conversation listing", self._roster.list_conversations)
        groups = [c for c in conversations.value_or([]) if c.is_group]
        if not groups:
            return []

        usernames = [c.username for c in groups]
        display_names = attempt(
            "conversation display names", self._roster.resolve_display_names, usernames
        ).value_or({})
        avatar_urls = attempt(
            "conversation avatars", self._roster.resolve_avatars, usernames
        ).value_or({})

        result = [
            GroupChatInfo(
                username=group.username,
                display_name=display_names.get(group.username) or group.username,
                member_count=self.count_members(group.username),
                avatar_url=avatar_urls.get(group.username),
            )
            for group in groups
        ]
        result.sort(key=lambda info: info.member_count, reverse=True)
        logger.debug("Listed %d group conversations", len(result))
        return result

    def member_count_outcome(self, room_id: str) -> Ok[int] | Unavailable:
        return attempt(
            f"member count for {room_id}", self._query_roster, fetch_member_count, room_id
        )

    def count_members(self, room_id: str) -> int:
        """Number of members in a conversation, 0 if it can't be determined."""
        return self.member_count_outcome(room_id).value_or(0)

    def _load_members(self, room_id: str) -> list[GroupMember]:
        rows = self._query_roster(fetch_member_rows, room_id)

        avatars: dict[str, str | None] = {}
        for row in rows:
            if row.username and row.username not in avatars:
                avatars[row.username] = row.avatar_url or None
        if not avatars:
            return []

        usernames = list(avatars)
        display_names = self._roster.resolve_display_names(usernames)
        return [
            GroupMember(
                username=username,
                display_name=display_names.get(username) or username,
                avatar_url=avatars[username],
            )
            for username in usernames
        ]

    def members_outcome(self, room_id: str) -> Ok[list[GroupMember]] | Unavailable:
        return attempt(f"member list for {room_id}", self._load_members, room_id)

    def list_members(self, room_id: str) -> list[GroupMember]:
        """Members of a conversation with display names and avatars.

        An empty list means no roster data was available; it does not by
        itself mean the group has no members.
        """
        return self.members_outcome(room_id).value_or([])

    # -- message reductions -------------------------------------------------

    def _fetch_window(
        self, room_id: str, start_date: date, end_date: date
    ) -> Ok[list[MessageRecord]] | Unavailable:
        start_ts, end_ts = window_bounds(start_date, end_date)
        return attempt(
            f"messages for {room_id}", self._messages.fetch_messages, room_id, start_ts, end_ts
        )

    def rank_members_by_message_count(
        self, room_id: str, start_date: date, end_date: date
    ) -> list[GroupMessageRank]:
        """Rank senders by number of messages within the window.

        Args:
            room_id: Conversation identifier.
            start_date: First day of the window.
            end_date: Last day of the window (inclusive through 23:59:59).

        Returns:
            One entry per distinct sender, most messages first; ties keep the
            order senders were first seen. Senders missing from the roster
            get their username as display name.
        """
        messages = self._fetch_window(room_id, start_date, end_date).value_or([])
        counts = count_by_sender(messages)
        if not counts:
            return []

        member_map = {member.username: member for member in self.list_members(room_id)}

        ranking = [
            GroupMessageRank(
                member=member_map.get(username) or GroupMember(username, username),
                message_count=count,
            )
            for username, count in counts.items()
        ]
        ranking.sort(key=lambda rank: rank.message_count, reverse=True)
        logger.debug("Ranked %d senders in %s", len(ranking), room_id)
        return ranking

    def member_daily_message_counts(
        self, room_id: str, member_username: str, start_date: date, end_date: date
    ) -> list[DailyMessageCount]:
        """Messages per local calendar day for one member, oldest day first."""
        messages = self._fetch_window(room_id, start_date, end_date).value_or([])
        buckets = count_by_day(messages, member_username)
        result = [DailyMessageCount(parse_date_key(key), count) for key, count in buckets.items()]
        result.sort(key=lambda daily: daily.date)
        return result

    # -- word frequency -----------------------------------------------------

    def _word_frequency(
        self,
        room_id: str,
        member_username: str,
        start_date: date,
        end_date: date,
        top_n: int,
    ) -> dict[str, int]:
        start_ts, end_ts = window_bounds(start_date, end_date)
        messages = self._messages.fetch_messages(room_id, start_ts, end_ts)
        texts = member_text_contents(messages, member_username)
        if not texts:
            return {}

        result = self._analyzer.analyze(
            self._analyzer.filter_text_messages(texts),
            mode=WordCloudMode.WORD,
            top_n=top_n,
            min_count=self._min_count,
            min_length=self._min_length,
        )
        return {item.word: item.count for item in result.words}

    def word_frequency_outcome(
        self,
        room_id: str,
        member_username: str,
        start_date: date,
        end_date: date,
        top_n: int | None = None,
    ) -> Ok[dict[str, int]] | Unavailable:
        return attempt(
            f"word frequency for {member_username} in {room_id}",
            self._word_frequency,
            room_id,
            member_username,
            start_date,
            end_date,
            top_n if top_n is not None else self._default_top_n,
        )

    def member_word_frequency(
        self,
        room_id: str,
        member_username: str,
        start_date: date,
        end_date: date,
        top_n: int | None = None,
    ) -> dict[str, int]:
        """Most frequent words in one member's text messages.

        Args:
            room_id: Conversation identifier.
            member_username: Sender whose messages are analyzed.
            start_date: First day of the window.
            end_date: Last day of the window.
            top_n: Maximum number of words (defaults to 100).

        Returns:
            Mapping of word -> count, at most top_n entries; empty on any failure.
        """
        return self.word_frequency_outcome(
            room_id, member_username, start_date, end_date, top_n
        ).value_or({})

    # -- histograms ---------------------------------------------------------

    def media_type_histogram(
        self, room_id: str, start_date: date, end_date: date
    ) -> dict[int, int]:
        return self._messages.media_type_histogram(room_id, start_date, end_date)

    def active_hour_histogram(
        self, room_id: str, start_date: date, end_date: date
    ) -> dict[int, int]:
        return self._messages.active_hour_histogram(room_id, start_date, end_date)
