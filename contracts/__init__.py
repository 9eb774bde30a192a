"""Contract interfaces for groupstats.

Exports the Protocol interfaces the analytics engine depends on.
Implementations should code against these contracts, not concrete adapters.
"""

from contracts.group_chat import (
    ConversationDescriptor,
    MessageRecord,
    MessageStore,
    RankedWord,
    RosterStore,
    TextAnalyzer,
    WordCloudMode,
    WordCloudResult,
)

__all__ = [
    # Records
    "ConversationDescriptor",
    "MessageRecord",
    "RankedWord",
    "WordCloudResult",
    "WordCloudMode",
    # Collaborators
    "MessageStore",
    "RosterStore",
    "TextAnalyzer",
]
