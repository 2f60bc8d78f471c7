"""Tests for OTP issuance and verification."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from kinauth.core.exceptions import InvalidOrExpiredCodeException
from kinauth.services.otp_service import OtpService, generate_code
from fakes import RecordingNotifier


def test_generate_code_is_fixed_width_numeric():
    for _ in range(200):
        code = generate_code(6)
        assert len(code) == 6
        assert code.isdigit()


class TestIssue:
    async def test_issue_persists_and_delivers(self, otp_service, db, notifier):
        ttl = await otp_service.issue("a@b.com", "signup")

        assert ttl == 10
        assert len(db.otp_challenges) == 1
        row = db.otp_challenges[0]
        assert row["target"] == "a@b.com"
        assert row["purpose"] == "signup"
        assert row["consumed_at"] is None
        assert notifier.sent == [("a@b.com", row["code"], "signup")]
        remaining = row["expires_at"] - datetime.now(timezone.utc)
        assert timedelta(minutes=9) < remaining <= timedelta(minutes=10)

    async def test_multiple_live_codes_may_coexist(self, otp_service, db):
        await otp_service.issue("a@b.com", "signup")
        await otp_service.issue("a@b.com", "login")
        assert len(db.otp_challenges) == 2

    async def test_delivery_failure_is_not_fatal(self, otp_repo, user_repo, session_service, db):
        service = OtpService(otp_repo, user_repo, session_service, RecordingNotifier(fail=True))
        assert await service.issue("+971500000000", "login") == 10
        assert len(db.otp_challenges) == 1


class TestVerify:
    async def test_code_works_exactly_once(self, otp_service, notifier, db):
        await otp_service.issue("a@b.com", "signup")
        code = notifier.last_code("a@b.com")

        access, refresh, user = await otp_service.verify("a@b.com", code)
        assert user.email == "a@b.com"
        assert user.phone is None
        assert access and refresh
        assert db.otp_challenges[0]["consumed_at"] is not None

        with pytest.raises(InvalidOrExpiredCodeException):
            await otp_service.verify("a@b.com", code)

    async def test_wrong_code(self, otp_service, notifier):
        await otp_service.issue("a@b.com", "signup")
        wrong = "000000" if notifier.last_code("a@b.com") != "000000" else "111111"
        with pytest.raises(InvalidOrExpiredCodeException):
            await otp_service.verify("a@b.com", wrong)

    async def test_code_for_other_target(self, otp_service, notifier):
        await otp_service.issue("a@b.com", "signup")
        with pytest.raises(InvalidOrExpiredCodeException):
            await otp_service.verify("c@d.com", notifier.last_code("a@b.com"))

    async def test_expired_code(self, otp_service, notifier, db):
        await otp_service.issue("a@b.com", "signup")
        db.otp_challenges[0]["expires_at"] = datetime.now(timezone.utc) - timedelta(seconds=1)

        with pytest.raises(InvalidOrExpiredCodeException):
            await otp_service.verify("a@b.com", notifier.last_code("a@b.com"))
        assert db.otp_challenges[0]["consumed_at"] is None

    async def test_phone_target_creates_phone_user(self, otp_service, notifier):
        await otp_service.issue("+971500000000", "signup")
        _, _, user = await otp_service.verify("+971500000000", notifier.last_code("+971500000000"), "Mona")
        assert user.phone == "+971500000000"
        assert user.email is None
        assert user.name == "Mona"

    async def test_existing_user_is_reused(self, otp_service, notifier, user_repo, db):
        existing = await user_repo.create({"email": "a@b.com", "name": "Old Name"})
        await otp_service.issue("a@b.com", "login")

        _, _, user = await otp_service.verify("a@b.com", notifier.last_code("a@b.com"), "New Name")
        assert user.id == existing["id"]
        assert user.name == "Old Name"
        assert len(db.users) == 1

    async def test_verify_creates_session(self, otp_service, notifier, db, token_service):
        await otp_service.issue("a@b.com", "signup")
        _, refresh, user = await otp_service.verify("a@b.com", notifier.last_code("a@b.com"))

        claims = token_service.verify_refresh(refresh)
        assert len(db.sessions) == 1
        assert db.sessions[0]["refresh_jti"] == claims["jti"]
        assert db.sessions[0]["user_id"] == user.id


class TestConcurrency:
    async def test_same_code_verified_twice_concurrently(self, otp_service, notifier, db):
        await otp_service.issue("a@b.com", "signup")
        code = notifier.last_code("a@b.com")

        results = await asyncio.gather(
            otp_service.verify("a@b.com", code),
            otp_service.verify("a@b.com", code),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, Exception)]
        successes = [r for r in results if not isinstance(r, Exception)]
        assert len(successes) == 1
        assert len(failures) == 1
        assert isinstance(failures[0], InvalidOrExpiredCodeException)
        assert len(db.users) == 1
        assert len(db.sessions) == 1

    async def test_concurrent_first_logins_share_one_user(self, otp_service, notifier, db):
        await otp_service.issue("a@b.com", "signup")
        first = notifier.last_code("a@b.com")
        await otp_service.issue("a@b.com", "signup")
        second = notifier.last_code("a@b.com")
        if first == second:
            pytest.skip("both challenges drew the same code")

        (_, _, user_a), (_, _, user_b) = await asyncio.gather(
            otp_service.verify("a@b.com", first),
            otp_service.verify("a@b.com", second),
        )

        assert user_a.id == user_b.id
        assert len(db.users) == 1
        assert len(db.sessions) == 2
