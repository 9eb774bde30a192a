"""Pytest configuration for groupstats tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from groupstats import PACKAGE_LOGGERS
from groupstats.config import reset_config
from tests.helpers import ContactRow, create_contact_db


@pytest.fixture(autouse=True)
def _isolated_config() -> Iterator[None]:
    """Drop the config singleton around every test."""
    reset_config()
    yield
    reset_config()


@pytest.fixture(autouse=True)
def _restore_package_log_levels() -> Iterator[None]:
    """Undo logger levels applied by build_engine."""
    loggers = [logging.getLogger(name) for name in PACKAGE_LOGGERS]
    levels = [logger.level for logger in loggers]
    yield
    for logger, level in zip(loggers, levels):
        logger.setLevel(level)


@pytest.fixture
def contact_db(tmp_path: Path) -> Path:
    """Contact database with one group of three members and one direct contact.

    carol is a member of the group but has no contact row, so she has no
    display name or avatar.
    """
    return create_contact_db(
        tmp_path / "contact.db",
        contacts=[
            ContactRow("alice", nick_name="Alice", small_head_url="https://img/alice.jpg"),
            ContactRow("bob", remark="Bobby", nick_name="Bob"),
            ContactRow("dave", nick_name="Dave"),
            ContactRow("team@chatroom", nick_name="Team", small_head_url="https://img/team.jpg"),
        ],
        rooms={"team@chatroom": ["alice", "bob", "carol"]},
    )
