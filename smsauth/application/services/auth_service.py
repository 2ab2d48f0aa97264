import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..ports.user_repo import UserRepository, UserDto
from ..ports.code_repo import VerificationCodeRepository, VerificationOutcome
from ..ports.notifier import CodeNotifier
from ..ports.audit_logger import AuditLogger
from .phone_validator import require_valid_phone
from .token_service import TokenIssuer
from ...exceptions import (
    AuthError,
    CodeExpired,
    DuplicatePhone,
    MissingCode,
    NotRegistered,
    RateLimited,
    TermsNotAccepted,
    WrongCode,
)

logger = logging.getLogger(__name__)


@dataclass
class CodeRequestResult:
    phone_number: str
    expires_in_seconds: int


@dataclass
class LoginResult:
    user_id: str
    phone_number: str
    token: str


@dataclass
class RegisterResult:
    user_id: str
    phone_number: str
    created_at: datetime
    token: str
    created: bool


@dataclass
class AuthService:
    user_repo: UserRepository
    code_repo: VerificationCodeRepository
    token_issuer: TokenIssuer
    notifier: CodeNotifier
    audit_logger: Optional[AuditLogger] = None
    code_ttl_seconds: int = 60

    def request_code(self, phone_number: str) -> CodeRequestResult:
        try:
            require_valid_phone(phone_number)
            record = self.code_repo.issue_unless_active(phone_number)
            if record is None:
                raise RateLimited()
        except AuthError as e:
            self._audit("request_code", phone_number, success=False, reason=e.code)
            raise

        # The code is stored; delivery problems are the notifier's to report.
        try:
            self.notifier.send_code(phone_number, record.code, self.code_ttl_seconds)
        except Exception:
            logger.exception("Failed to hand verification code to notifier")

        self._audit("request_code", phone_number)
        return CodeRequestResult(phone_number=phone_number, expires_in_seconds=self.code_ttl_seconds)

    def login(self, phone_number: str, code: Optional[str]) -> LoginResult:
        try:
            require_valid_phone(phone_number)
            if not code:
                raise MissingCode()

            user = self.user_repo.get_by_phone(phone_number)
            if user is None:
                raise NotRegistered()

            outcome = self.code_repo.verify(phone_number, code)
            if outcome is VerificationOutcome.EXPIRED:
                raise CodeExpired()
            if outcome is not VerificationOutcome.VALID:
                raise WrongCode()
        except AuthError as e:
            self._audit("login", phone_number, success=False, reason=e.code)
            raise

        issued = self.token_issuer.issue(user)
        self._audit("login", phone_number, user_id=user.id)
        return LoginResult(user_id=user.id, phone_number=user.phone_number, token=issued.token)

    def register(self, phone_number: str, code: Optional[str], agree_to_terms: bool) -> RegisterResult:
        try:
            require_valid_phone(phone_number)
            if not agree_to_terms:
                raise TermsNotAccepted()
            if not code:
                raise MissingCode()

            # Registration does not tell an expired code from a wrong one.
            outcome = self.code_repo.verify(phone_number, code)
            if outcome is not VerificationOutcome.VALID:
                raise WrongCode()

            user, created = self._find_or_create(phone_number)
        except AuthError as e:
            self._audit("register", phone_number, success=False, reason=e.code)
            raise

        issued = self.token_issuer.issue(user)
        self._audit("register", phone_number, user_id=user.id, created=created)
        return RegisterResult(
            user_id=user.id,
            phone_number=user.phone_number,
            created_at=user.created_at,
            token=issued.token,
            created=created,
        )

    def purge_expired_codes(self) -> int:
        removed = self.code_repo.purge_expired()
        if removed:
            logger.info(f"Purged {removed} expired or used verification codes")
        return removed

    def _find_or_create(self, phone_number: str) -> tuple[UserDto, bool]:
        user = self.user_repo.get_by_phone(phone_number)
        if user is not None:
            return user, False
        try:
            return self.user_repo.create(phone_number), True
        except DuplicatePhone:
            # A concurrent register created the row first; finish as a login.
            user = self.user_repo.get_by_phone(phone_number)
            if user is None:
                raise
            logger.info("Concurrent registration detected, using existing user")
            return user, False

    def _audit(self, action: str, phone_number, user_id: Optional[str] = None, success: bool = True, **details) -> None:
        if self.audit_logger is None:
            return
        self.audit_logger.log(action, str(phone_number), user_id=user_id, success=success, details=details)
