from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Protocol

from ...utils import as_utc


@dataclass
class CodeRecord:
    id: Optional[int]
    phone_number: str
    code: str
    created_at: datetime
    expires_at: datetime
    used: bool = False

    def is_expired(self, now: datetime) -> bool:
        return as_utc(now) >= as_utc(self.expires_at)

    def is_live(self, now: datetime) -> bool:
        return not self.used and not self.is_expired(now)


class VerificationOutcome(str, Enum):
    """Result of checking a submitted code against the newest record.

    VALID      the code matched a live record, which is now consumed
    EXPIRED    the newest record is past its window (left untouched)
    INCORRECT  a live record exists but the code differs; it stays live
    NOT_FOUND  no record, or the newest one was already consumed
    """

    VALID = "valid"
    EXPIRED = "expired"
    INCORRECT = "incorrect"
    NOT_FOUND = "not_found"


class VerificationCodeRepository(Protocol):
    def issue(self, phone_number: str) -> CodeRecord:
        ...

    def issue_unless_active(self, phone_number: str) -> Optional[CodeRecord]:
        """Issue a code in the same transaction as the live-code check; None if one is live."""
        ...

    def peek_active(self, phone_number: str) -> Optional[CodeRecord]:
        ...

    def verify(self, phone_number: str, code: str) -> VerificationOutcome:
        ...

    def purge_expired(self) -> int:
        ...
