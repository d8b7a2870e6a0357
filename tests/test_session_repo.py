"""Tests for the key-value session table."""

import re
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Query

from emiten_store.database.schema import SessionEntry
from emiten_store.database.session_repo import (
    get_session_value,
    lookup_session_entry,
    upsert_session,
)
from emiten_store.errors import WriteError


def test_get_missing_key_returns_none(session):
    assert get_session_value(session, "stockbit_token") is None


def test_upsert_then_get(session):
    rows = upsert_session(session, "stockbit_token", "abc123")

    assert len(rows) == 1
    assert rows[0].updated_at.endswith("Z")
    assert get_session_value(session, "stockbit_token") == "abc123"


def test_upsert_overwrites_value(session):
    upsert_session(session, "stockbit_token", "abc123")
    first_stamp = session.query(SessionEntry).one().updated_at

    upsert_session(session, "stockbit_token", "def456")

    entries = session.query(SessionEntry).all()
    assert len(entries) == 1
    assert entries[0].value == "def456"
    assert entries[0].updated_at >= first_stamp


def test_get_returns_none_on_store_error(session):
    upsert_session(session, "stockbit_token", "abc123")

    with patch.object(Query, "first", side_effect=OperationalError("SELECT", {}, Exception("timeout"))):
        assert get_session_value(session, "stockbit_token") is None
        assert lookup_session_entry(session, "stockbit_token").is_error


def test_upsert_failure_raises_write_error(session):
    with patch.object(session, "execute", side_effect=OperationalError("INSERT", {}, Exception("read-only"))):
        with pytest.raises(WriteError) as exc_info:
            upsert_session(session, "stockbit_token", "abc123")

    assert exc_info.value.details == {"key": "stockbit_token", "table": "session"}


def test_lookup_error_rolls_back_so_session_stays_usable(session):
    with patch.object(session, "rollback", wraps=session.rollback) as rollback:
        with patch.object(Query, "first", side_effect=OperationalError("SELECT", {}, Exception("timeout"))):
            assert get_session_value(session, "stockbit_token") is None

    rollback.assert_called_once()
    upsert_session(session, "stockbit_token", "abc123")
    assert get_session_value(session, "stockbit_token") == "abc123"


def test_updated_at_is_utc_with_milliseconds(session):
    upsert_session(session, "stockbit_token", "abc123")

    row = session.query(SessionEntry).filter(SessionEntry.key == "stockbit_token").one()
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", row.updated_at)
