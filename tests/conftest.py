from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session

from smsauth.database import build_engine, create_db_and_tables
from smsauth.utils import utcnow

SECRET = "test-secret-key"


class FakeClock:
    def __init__(self, start: Optional[datetime] = None):
        # an hour behind real time so issued tokens decode without iat errors
        self.now = start or (utcnow() - timedelta(hours=1)).replace(microsecond=0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


class FakeNotifier:
    def __init__(self):
        self.sent = []

    def send_code(self, phone_number: str, code: str, expires_in_seconds: int) -> None:
        self.sent.append((phone_number, code, expires_in_seconds))


class FakeAuditLogger:
    def __init__(self):
        self.entries: List[Dict[str, Any]] = []

    def log(self, action: str, phone: str, user_id: Optional[str] = None, success: bool = True, details: Optional[Dict[str, Any]] = None) -> None:
        self.entries.append({"action": action, "phone": phone, "user_id": user_id, "success": success, "details": details or {}})


class FixedCodes:
    """Hands out codes in order, repeating the last one."""

    def __init__(self, *codes: str):
        self.codes = list(codes) or ["123456"]

    def __call__(self) -> str:
        if len(self.codes) > 1:
            return self.codes.pop(0)
        return self.codes[0]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sql_engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    create_db_and_tables(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sql_session(sql_engine):
    with Session(sql_engine) as session:
        yield session
