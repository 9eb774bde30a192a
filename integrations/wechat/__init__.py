"""WeChat database integration.

Provides read-only SQLite-backed implementations of the MessageStore and
RosterStore contracts.

Example:
    from integrations.wechat import WeChatContactStore, WeChatMessageStore

    roster = WeChatContactStore(Path("contact.db"))
    messages = WeChatMessageStore(Path("message_0.db"))
"""

from .contact_store import WeChatContactStore
from .message_store import WeChatMessageStore

__all__ = ["WeChatContactStore", "WeChatMessageStore"]
