"""End-to-end tests: engine built from config over temporary WeChat databases."""

import logging
from datetime import date

import pytest

from groupstats import PACKAGE_LOGGERS, build_engine
from groupstats.analytics import DailyMessageCount, GroupMember
from groupstats.config import GroupStatsConfig, LoggingConfig, StoreConfig, WordCloudConfig
from groupstats.errors import ConfigurationError, ErrorCode
from tests.helpers import create_message_db, local_ts

ROOM = "team@chatroom"
JAN_1 = date(2024, 1, 1)
JAN_3 = date(2024, 1, 3)


@pytest.fixture
def message_db(tmp_path):
    return create_message_db(
        tmp_path / "message_0.db",
        {
            ROOM: [
                ("alice", local_ts(2024, 1, 1, 10), 1, "alice:\nhello world"),
                ("alice", local_ts(2024, 1, 1, 18), 1, "alice:\nhello there https://x.io"),
                ("bob", local_ts(2024, 1, 2, 9), 1, "bob:\nmorning"),
                ("bob", local_ts(2024, 1, 2, 9, 5), 47, "<emoji/>"),
                ("carol", local_ts(2024, 1, 4, 9), 1, "too late"),
            ]
        },
    )


@pytest.fixture
def config(message_db, contact_db) -> GroupStatsConfig:
    return GroupStatsConfig(
        stores=StoreConfig(message_db_path=message_db, contact_db_path=contact_db),
        word_cloud=WordCloudConfig(extra_stopwords=["there"]),
    )


def test_requires_message_database():
    with pytest.raises(ConfigurationError) as exc_info:
        build_engine(GroupStatsConfig())
    assert exc_info.value.code == ErrorCode.CFG_MISSING
    assert exc_info.value.details["config_key"] == "stores.message_db_path"


def test_uses_global_config_by_default(monkeypatch, tmp_path):
    monkeypatch.setattr("groupstats.config.CONFIG_PATH", tmp_path / "config.json")
    with pytest.raises(ConfigurationError):
        build_engine()


def test_applies_configured_log_level(config):
    config.logging = LoggingConfig(level="DEBUG")
    build_engine(config)
    for name in PACKAGE_LOGGERS:
        assert logging.getLogger(name).level == logging.DEBUG

    config.logging = LoggingConfig(level="ERROR")
    build_engine(config)
    assert logging.getLogger("groupstats.analytics.engine").getEffectiveLevel() == logging.ERROR


def test_list_group_conversations(config):
    groups = build_engine(config).list_group_conversations()

    assert len(groups) == 1
    assert groups[0].username == ROOM
    assert groups[0].display_name == "Team"
    assert groups[0].member_count == 3
    assert groups[0].avatar_url == "https://img/team.jpg"


def test_list_members(config):
    members = build_engine(config).list_members(ROOM)
    assert members == [
        GroupMember("alice", "Alice", "https://img/alice.jpg"),
        GroupMember("bob", "Bobby", None),
        GroupMember("carol", "carol", None),
    ]


def test_rank_members_by_message_count(config):
    ranking = build_engine(config).rank_members_by_message_count(ROOM, JAN_1, JAN_3)
    assert [(r.member.display_name, r.message_count) for r in ranking] == [
        ("Alice", 2),
        ("Bobby", 2),
    ]


def test_member_daily_message_counts(config):
    engine = build_engine(config)
    assert engine.member_daily_message_counts(ROOM, "bob", JAN_1, JAN_3) == [
        DailyMessageCount(date(2024, 1, 2), 2)
    ]


def test_member_word_frequency(config):
    words = build_engine(config).member_word_frequency(ROOM, "alice", JAN_1, JAN_3)
    assert words == {"hello": 2, "world": 1}


def test_histograms(config):
    engine = build_engine(config)
    assert engine.media_type_histogram(ROOM, JAN_1, JAN_3) == {1: 3, 47: 1}
    assert engine.active_hour_histogram(ROOM, JAN_1, JAN_3) == {9: 2, 10: 1, 18: 1}


def test_missing_contact_database_degrades(config, tmp_path):
    config.stores.contact_db_path = tmp_path / "missing.db"
    engine = build_engine(config)

    assert engine.list_group_conversations() == []
    assert engine.list_members(ROOM) == []
    ranking = engine.rank_members_by_message_count(ROOM, JAN_1, JAN_3)
    assert [r.member for r in ranking] == [GroupMember("alice", "alice"), GroupMember("bob", "bob")]
