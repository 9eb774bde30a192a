"""Row parsing utilities for the WeChat message database.

Handles:
- Sender prefixes on group message content ("wxid_abc:\\nhello")
- Placeholder text for non-text message types
- Display name selection from contact rows
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from contracts.group_chat import MessageRecord

logger = logging.getLogger(__name__)

MEDIA_TYPE_LABELS: dict[int, str] = {
    3: "[Image]",
    34: "[Voice]",
    42: "[Card]",
    43: "[Video]",
    47: "[Sticker]",
    48: "[Location]",
    49: "[Link]",
    50: "[Call]",
}

SENDER_PREFIX_PATTERN = re.compile(r"^[\w\-@.]+:\n")


def strip_sender_prefix(content: str) -> str:
    """Remove the "username:\\n" prefix group messages carry in their content."""
    return SENDER_PREFIX_PATTERN.sub("", content, count=1)


def display_content_for(local_type: int, content: str | bytes | None) -> str:
    """Human-readable content for a message.

    Text-like messages keep their content; known media types become a
    bracketed placeholder; undecodable binary content becomes "".
    """
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8")
        except UnicodeDecodeError:
            logger.debug("Undecodable content for message type %d", local_type)
            content = ""
    text = strip_sender_prefix(content or "")
    if local_type in MEDIA_TYPE_LABELS:
        return MEDIA_TYPE_LABELS[local_type]
    return text


def row_to_message(row: Mapping[str, Any]) -> MessageRecord:
    """Convert a message query row to a MessageRecord."""
    local_type = int(row["local_type"] or 0)
    return MessageRecord(
        sender_username=row["sender_username"] or None,
        create_time=int(row["create_time"] or 0),
        local_type=local_type,
        display_content=display_content_for(local_type, row["message_content"]),
    )


def pick_display_name(row: Mapping[str, Any]) -> str | None:
    """Best display name from a contact row: remark, then nickname, then alias."""
    for key in ("remark", "nick_name", "alias"):
        value = row[key]
        if value:
            return str(value)
    return None


def is_group_username(username: str) -> bool:
    return username.endswith("@chatroom")

