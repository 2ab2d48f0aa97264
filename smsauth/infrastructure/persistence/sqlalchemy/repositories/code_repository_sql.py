import secrets
from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy import delete, or_, text, update
from sqlmodel import Session, select

from .....db.models import VerificationCode
from .....application.ports.code_repo import CodeRecord, VerificationCodeRepository, VerificationOutcome
from .....utils import as_utc, generate_code, utcnow
from .unit_of_work import unit_of_work


class SqlVerificationCodeRepository(VerificationCodeRepository):
    def __init__(
        self,
        session: Session,
        ttl_seconds: int = 60,
        code_length: int = 6,
        code_generator: Optional[Callable[[], str]] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.session = session
        self.ttl = timedelta(seconds=ttl_seconds)
        self.code_generator = code_generator or (lambda: generate_code(code_length))
        self.clock = clock

    def _to_record(self, row: VerificationCode) -> CodeRecord:
        return CodeRecord(
            id=row.id,
            phone_number=row.phone_number,
            code=row.code,
            created_at=as_utc(row.created_at),
            expires_at=as_utc(row.expires_at),
            used=bool(row.used),
        )

    def _latest(self, phone_number: str) -> Optional[VerificationCode]:
        stmt = (
            select(VerificationCode)
            .where(VerificationCode.phone_number == phone_number)
            .order_by(VerificationCode.id.desc())
            .limit(1)
        )
        return self.session.exec(stmt).first()

    def _lock_phone(self, phone_number: str) -> None:
        # SQLite already holds the write lock from BEGIN IMMEDIATE; Postgres
        # needs one that also covers phones with no row yet.
        if self.session.get_bind().dialect.name == "postgresql":
            self.session.exec(
                text("SELECT pg_advisory_xact_lock(hashtext(:phone))").bindparams(phone=phone_number)
            )

    def _replace(self, phone_number: str, now: datetime) -> CodeRecord:
        row = VerificationCode(
            phone_number=phone_number,
            code=self.code_generator(),
            created_at=now,
            expires_at=now + self.ttl,
        )
        self.session.exec(delete(VerificationCode).where(VerificationCode.phone_number == phone_number))
        self.session.add(row)
        self.session.flush()
        return self._to_record(row)

    def issue(self, phone_number: str) -> CodeRecord:
        now = self.clock()
        with unit_of_work(self.session):
            self._lock_phone(phone_number)
            return self._replace(phone_number, now)

    def issue_unless_active(self, phone_number: str) -> Optional[CodeRecord]:
        now = self.clock()
        with unit_of_work(self.session):
            self._lock_phone(phone_number)
            row = self._latest(phone_number)
            if row is not None and self._to_record(row).is_live(now):
                return None
            return self._replace(phone_number, now)

    def peek_active(self, phone_number: str) -> Optional[CodeRecord]:
        now = self.clock()
        with unit_of_work(self.session):
            row = self._latest(phone_number)
            if row is None:
                return None
            record = self._to_record(row)
        return record if record.is_live(now) else None

    def verify(self, phone_number: str, code: str) -> VerificationOutcome:
        now = self.clock()
        with unit_of_work(self.session):
            row = self._latest(phone_number)
            if row is None or row.used:
                return VerificationOutcome.NOT_FOUND
            if self._to_record(row).is_expired(now):
                return VerificationOutcome.EXPIRED
            if not secrets.compare_digest(row.code.encode(), str(code).encode()):
                return VerificationOutcome.INCORRECT

            # only one concurrent verifier can flip the flag
            result = self.session.exec(
                update(VerificationCode)
                .where(VerificationCode.id == row.id, VerificationCode.used == False)  # noqa: E712
                .values(used=True)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                return VerificationOutcome.NOT_FOUND
        return VerificationOutcome.VALID

    def purge_expired(self) -> int:
        now = self.clock()
        with unit_of_work(self.session):
            result = self.session.exec(
                delete(VerificationCode)
                .where(or_(VerificationCode.expires_at <= now, VerificationCode.used == True))  # noqa: E712
                .execution_options(synchronize_session=False)
            )
            return result.rowcount
