"""Analytics for group conversations.

Provides:
- Member rosters and conversation listings
- Message-volume rankings and per-member daily counts
- Word-frequency profiles
- Media-type and active-hour histograms
"""

from __future__ import annotations

from groupstats.analytics.aggregator import (
    LEGACY_TEXT_SUBTYPE,
    count_by_day,
    count_by_sender,
    member_text_contents,
)
from groupstats.analytics.engine import (
    DailyMessageCount,
    GroupAnalyticsEngine,
    GroupChatInfo,
    GroupMember,
    GroupMessageRank,
)
from groupstats.analytics.wordcloud import WordCloudAnalyzer

__all__ = [
    # Engine
    "GroupAnalyticsEngine",
    "GroupChatInfo",
    "GroupMember",
    "GroupMessageRank",
    "DailyMessageCount",
    # Reductions
    "LEGACY_TEXT_SUBTYPE",
    "count_by_day",
    "count_by_sender",
    "member_text_contents",
    # Word cloud
    "WordCloudAnalyzer",
]
