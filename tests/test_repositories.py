"""Tests for the asyncpg repositories against a mocked connection."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import asyncpg
import pytest

from kinauth.core.exceptions import ConflictError
from kinauth.repositories.family_repo import FamilyRepository
from kinauth.repositories.otp_repo import OtpRepository
from kinauth.repositories.session_repo import SessionRepository
from kinauth.repositories.user_repo import UserRepository

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def pg():
    return AsyncMock(spec=asyncpg.Connection)


async def test_user_create_translates_unique_violation(pg):
    pg.fetchrow.side_effect = asyncpg.UniqueViolationError("duplicate key value violates unique constraint")
    with pytest.raises(ConflictError):
        await UserRepository(pg).create({"email": "a@b.com"})


async def test_user_lookup_miss_returns_none(pg):
    pg.fetchrow.return_value = None
    assert await UserRepository(pg).get_by_contact("a@b.com") is None


async def test_user_update_builds_numbered_placeholders(pg):
    pg.fetchrow.return_value = {"id": "u1", "name": "Amal"}

    row = await UserRepository(pg).update_fields("u1", {"name": "Amal", "gender": "female"})

    sql, *args = pg.fetchrow.call_args.args
    assert "name = $1" in sql
    assert "gender = $2" in sql
    assert "WHERE id = $3" in sql
    assert args == ["Amal", "female", "u1"]
    assert row == {"id": "u1", "name": "Amal"}


async def test_user_update_rejects_unknown_columns(pg):
    with pytest.raises(ValueError):
        await UserRepository(pg).update_fields("u1", {"password_hash": "x"})
    pg.fetchrow.assert_not_called()


async def test_otp_consume_reports_lost_race(pg):
    pg.fetchval.return_value = None
    assert await OtpRepository(pg).consume("otp-1", NOW) is False

    pg.fetchval.return_value = "otp-1"
    assert await OtpRepository(pg).consume("otp-1", NOW) is True
    sql = pg.fetchval.call_args.args[0]
    assert "consumed_at IS NULL" in sql


async def test_session_delete_returns_row_count(pg):
    pg.execute.return_value = "DELETE 1"
    assert await SessionRepository(pg).delete_by_jti("jti-1") == 1

    pg.execute.return_value = "DELETE 0"
    assert await SessionRepository(pg).delete_by_jti("jti-1") == 0


async def test_create_locations_is_one_statement(pg):
    pg.fetch.return_value = [{"id": "l1"}, {"id": "l2"}]

    rows = await FamilyRepository(pg).create_locations(
        "f1", [{"label": "Home", "lat": 1.0}, {"label": "Work", "address": "Tower"}]
    )

    assert rows == [{"id": "l1"}, {"id": "l2"}]
    pg.fetch.assert_awaited_once()
    _, family_id, labels, addresses, lats, lngs = pg.fetch.call_args.args
    assert family_id == "f1"
    assert labels == ["Home", "Work"]
    assert addresses == [None, "Tower"]
    assert lats == [1.0, None]
    assert lngs == [None, None]


async def test_create_locations_skips_empty_list(pg):
    assert await FamilyRepository(pg).create_locations("f1", []) == []
    pg.fetch.assert_not_called()
