"""groupstats - analytics over persisted group chat history.

Usage:
    from groupstats import build_engine

    engine = build_engine()
    for info in engine.list_group_conversations():
        print(info.display_name, info.member_count)
"""

from __future__ import annotations

import logging

from groupstats.analytics import GroupAnalyticsEngine, WordCloudAnalyzer
from groupstats.config import GroupStatsConfig, get_config
from groupstats.errors import ConfigurationError, ErrorCode

__version__ = "1.0.0"

PACKAGE_LOGGERS = ("groupstats", "integrations.wechat")


def build_engine(config: GroupStatsConfig | None = None) -> GroupAnalyticsEngine:
    """Create an engine over the configured WeChat databases.

    The configured logging level is applied to the package loggers; handlers
    are left to the application (see groupstats.utils.setup_logging).

    Args:
        config: Configuration to use. Defaults to get_config().

    Returns:
        GroupAnalyticsEngine wired to the SQLite adapters and WordCloudAnalyzer.

    Raises:
        ConfigurationError: If no message database is configured.
    """
    from integrations.wechat import WeChatContactStore, WeChatMessageStore

    config = config or get_config()
    stores = config.stores
    if stores.message_db_path is None:
        raise ConfigurationError(
            "No message database configured",
            config_key="stores.message_db_path",
            code=ErrorCode.CFG_MISSING,
        )

    for name in PACKAGE_LOGGERS:
        logging.getLogger(name).setLevel(config.logging.level)

    return GroupAnalyticsEngine(
        WeChatMessageStore(stores.message_db_path, timeout=stores.timeout_seconds),
        WeChatContactStore(stores.contact_db_path, timeout=stores.timeout_seconds),
        WordCloudAnalyzer.from_config(config.word_cloud),
        roster_timeout=stores.timeout_seconds,
        default_top_n=config.word_cloud.default_top_n,
        min_count=config.word_cloud.min_count,
        min_length=config.word_cloud.min_length,
    )


__all__ = [
    "GroupAnalyticsEngine",
    "WordCloudAnalyzer",
    "build_engine",
]
