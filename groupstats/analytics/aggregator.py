"""Message reductions for group analytics.

Pure functions over MessageRecord sequences: per-sender counts, per-day
buckets and word-frequency text selection. The engine fetches records and
joins the results with roster data.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from typing import TYPE_CHECKING

from groupstats.utils.datetime_utils import local_date_key

if TYPE_CHECKING:
    from contracts.group_chat import MessageRecord

# Opaque legacy discriminant: messages with this type code are analyzed as
# text alongside plain text messages. Its meaning is not documented upstream.
LEGACY_TEXT_SUBTYPE = 244813135921


def count_by_sender(messages: Iterable[MessageRecord]) -> dict[str, int]:
    """Count messages per non-empty sender username.

    Returns:
        Dict of username -> count, in first-encounter order.
    """
    counts: Counter[str] = Counter()
    for message in messages:
        if message.sender_username:
            counts[message.sender_username] += 1
    return dict(counts)


def count_by_day(messages: Iterable[MessageRecord], sender_username: str) -> dict[str, int]:
    """Bucket one sender's messages by local calendar date.

    Messages whose create_time has no local date are skipped.

    Returns:
        Dict of YYYY-MM-DD -> count.
    """
    buckets: dict[str, int] = {}
    for message in messages:
        if message.sender_username != sender_username:
            continue
        key = local_date_key(message.create_time)
        if key is None:
            continue
        buckets[key] = buckets.get(key, 0) + 1
    return buckets


def is_analyzable_text(message: MessageRecord) -> bool:
    return (
        message.is_text_message or message.local_type == LEGACY_TEXT_SUBTYPE
    ) and bool(message.display_content)


def member_text_contents(messages: Iterable[MessageRecord], sender_username: str) -> list[str]:
    """Collect display content of one sender's analyzable text messages."""
    return [
        message.display_content
        for message in messages
        if message.sender_username == sender_username and is_analyzable_text(message)
    ]
