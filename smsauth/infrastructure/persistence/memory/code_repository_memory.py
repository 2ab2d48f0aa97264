import itertools
import secrets
import threading
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

from ....application.ports.code_repo import CodeRecord, VerificationCodeRepository, VerificationOutcome
from ....utils import generate_code, utcnow


class InMemoryVerificationCodeRepository(VerificationCodeRepository):
    """Process-local code store keeping only the newest record per phone."""

    def __init__(
        self,
        ttl_seconds: int = 60,
        code_length: int = 6,
        code_generator: Optional[Callable[[], str]] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._records: Dict[str, CodeRecord] = {}
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self.ttl = timedelta(seconds=ttl_seconds)
        self.code_generator = code_generator or (lambda: generate_code(code_length))
        self.clock = clock

    def _replace(self, phone_number: str, now: datetime) -> CodeRecord:
        record = CodeRecord(
            id=next(self._ids),
            phone_number=phone_number,
            code=self.code_generator(),
            created_at=now,
            expires_at=now + self.ttl,
        )
        self._records[phone_number] = record
        return replace(record)

    def issue(self, phone_number: str) -> CodeRecord:
        now = self.clock()
        with self._lock:
            return self._replace(phone_number, now)

    def issue_unless_active(self, phone_number: str) -> Optional[CodeRecord]:
        now = self.clock()
        with self._lock:
            current = self._records.get(phone_number)
            if current is not None and current.is_live(now):
                return None
            return self._replace(phone_number, now)

    def peek_active(self, phone_number: str) -> Optional[CodeRecord]:
        now = self.clock()
        with self._lock:
            record = self._records.get(phone_number)
            if record is None or not record.is_live(now):
                return None
            return replace(record)

    def verify(self, phone_number: str, code: str) -> VerificationOutcome:
        now = self.clock()
        with self._lock:
            record = self._records.get(phone_number)
            if record is None or record.used:
                return VerificationOutcome.NOT_FOUND
            if record.is_expired(now):
                return VerificationOutcome.EXPIRED
            if not secrets.compare_digest(record.code.encode(), str(code).encode()):
                return VerificationOutcome.INCORRECT
            record.used = True
            return VerificationOutcome.VALID

    def purge_expired(self) -> int:
        now = self.clock()
        with self._lock:
            dead = [phone for phone, rec in self._records.items() if not rec.is_live(now)]
            for phone in dead:
                del self._records[phone]
            return len(dead)
