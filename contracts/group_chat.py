"""Group chat analytics collaborator interfaces.

The analytics engine codes against these contracts; the SQLite adapters in
integrations/wechat and the word-cloud analyzer in groupstats.analytics
implement them.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Protocol

# Text message type code in the message archive
TEXT_MESSAGE_TYPE = 1


@dataclass(frozen=True)
class ConversationDescriptor:
    """A conversation as listed by the roster store.

    Attributes:
        username: Opaque conversation identifier (room id for groups).
        is_group: Whether this is a group conversation.
    """

    username: str
    is_group: bool


@dataclass(frozen=True)
class MessageRecord:
    """Read-only archived message.

    Attributes:
        sender_username: Username of the sender, None when unknown.
        create_time: Send time in epoch seconds.
        local_type: Message type discriminant from the archive.
        display_content: Human-readable content ("" when none).
    """

    sender_username: str | None
    create_time: int
    local_type: int
    display_content: str = ""

    @property
    def is_text_message(self) -> bool:
        return self.local_type == TEXT_MESSAGE_TYPE


@dataclass
class RankedWord:
    """A word and its occurrence count."""

    word: str
    count: int

    def __post_init__(self) -> None:
        """Validate field constraints."""
        if not self.word:
            raise ValueError("word must be non-empty")
        if self.count < 1:
            msg = f"count must be >= 1, got {self.count}"
            raise ValueError(msg)


@dataclass
class WordCloudResult:
    """Ranked word-frequency output of a text analyzer.

    Attributes:
        words: Ranked words, highest count first.
        total_words: Number of tokens considered before ranking.
        unique_words: Number of distinct tokens considered before ranking.
    """

    words: list[RankedWord] = field(default_factory=list)
    total_words: int = 0
    unique_words: int = 0

    def __post_init__(self) -> None:
        """Validate field constraints."""
        if self.total_words < 0:
            msg = f"total_words must be >= 0, got {self.total_words}"
            raise ValueError(msg)
        if self.unique_words < 0:
            msg = f"unique_words must be >= 0, got {self.unique_words}"
            raise ValueError(msg)


class WordCloudMode(str, Enum):
    """Tokenization mode for word-frequency analysis."""

    WORD = "word"
    CHAR = "char"


class MessageStore(Protocol):
    """Interface for the message archive."""

    def fetch_messages(self, room_id: str, start_ts: int, end_ts: int) -> list[MessageRecord]:
        """Get messages of a conversation with start_ts <= create_time <= end_ts."""
        ...

    def media_type_histogram(
        self, room_id: str, start_date: date, end_date: date
    ) -> dict[int, int]:
        """Count messages per type code within the date window."""
        ...

    def active_hour_histogram(
        self, room_id: str, start_date: date, end_date: date
    ) -> dict[int, int]:
        """Count messages per local hour of day (0-23) within the date window."""
        ...


class RosterStore(Protocol):
    """Interface for the contact/roster store."""

    def list_conversations(self) -> list[ConversationDescriptor]:
        """Get all known conversations."""
        ...

    def resolve_display_names(self, usernames: Sequence[str]) -> dict[str, str]:
        """Map usernames to display names. Unresolved usernames are omitted."""
        ...

    def resolve_avatars(self, usernames: Sequence[str]) -> dict[str, str]:
        """Map usernames to avatar URLs. May raise; callers treat failure as non-fatal."""
        ...

    def roster_path(self) -> Path | None:
        """Location of the roster database, None when no roster data is available."""
        ...


class TextAnalyzer(Protocol):
    """Interface for word-frequency analysis."""

    def filter_text_messages(self, texts: Sequence[str]) -> list[str]:
        """Strip content that should not be analyzed (links, mentions, placeholders)."""
        ...

    def analyze(
        self,
        texts: Sequence[str],
        mode: WordCloudMode = WordCloudMode.WORD,
        top_n: int = 100,
        min_count: int = 1,
        min_length: int = 2,
    ) -> WordCloudResult:
        """Rank words across texts."""
        ...
