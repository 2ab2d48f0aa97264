from datetime import datetime, timedelta, timezone

import jwt
import pytest

from conftest import SECRET, FakeClock
from smsauth.application.ports.user_repo import UserDto
from smsauth.application.services.token_service import TokenIssuer


def _user():
    return UserDto(id="user-1", phone_number="13800138000", created_at=datetime(2024, 1, 1, tzinfo=timezone.utc))


def test_token_carries_identity_and_24h_expiry():
    clock = FakeClock()
    issuer = TokenIssuer(secret_key=SECRET, clock=clock)
    issued = issuer.issue(_user())

    payload = jwt.decode(issued.token, SECRET, algorithms=["HS256"])
    assert payload["sub"] == "user-1"
    assert payload["phone_number"] == "13800138000"
    assert payload["type"] == "access"
    assert payload["exp"] - payload["iat"] == 24 * 3600
    assert issued.expires_at == clock.now + timedelta(hours=24)


def test_token_is_signed_with_configured_secret():
    issued = TokenIssuer(secret_key=SECRET, clock=FakeClock()).issue(_user())
    with pytest.raises(jwt.InvalidSignatureError):
        jwt.decode(issued.token, "another-secret", algorithms=["HS256"])


def test_same_issue_time_gives_same_token():
    start = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)
    a = TokenIssuer(secret_key=SECRET, clock=FakeClock(start)).issue(_user())
    b = TokenIssuer(secret_key=SECRET, clock=FakeClock(start)).issue(_user())
    assert a.token == b.token


def test_tokens_issued_at_different_times_differ():
    clock = FakeClock(datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc))
    issuer = TokenIssuer(secret_key=SECRET, clock=clock)
    first = issuer.issue(_user())
    clock.advance(1)
    second = issuer.issue(_user())
    assert first.token != second.token


def test_expiry_window_is_configurable():
    clock = FakeClock()
    issuer = TokenIssuer(secret_key=SECRET, expires_in=timedelta(hours=2), clock=clock)
    payload = jwt.decode(issuer.issue(_user()).token, SECRET, algorithms=["HS256"])
    assert payload["exp"] - payload["iat"] == 2 * 3600


def test_empty_secret_is_rejected():
    with pytest.raises(ValueError):
        TokenIssuer(secret_key="")
