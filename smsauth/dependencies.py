from datetime import timedelta
from functools import lru_cache

from fastapi import Depends
from sqlmodel import Session

from .application.services.auth_service import AuthService
from .application.services.token_service import TokenIssuer
from .config import settings
from .database import get_session
from .infrastructure.audit.std_logger import StdAuditLogger
from .infrastructure.notify.log_notifier import LogCodeNotifier
from .infrastructure.persistence.sqlalchemy.repositories.code_repository_sql import SqlVerificationCodeRepository
from .infrastructure.persistence.sqlalchemy.repositories.user_repository_sql import SqlUserRepository


@lru_cache()
def get_token_issuer() -> TokenIssuer:
    return TokenIssuer(
        secret_key=settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        expires_in=timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS),
    )


def build_auth_service(session: Session) -> AuthService:
    return AuthService(
        user_repo=SqlUserRepository(session),
        code_repo=SqlVerificationCodeRepository(
            session,
            ttl_seconds=settings.VERIFICATION_CODE_TTL_SECONDS,
            code_length=settings.VERIFICATION_CODE_LENGTH,
        ),
        token_issuer=get_token_issuer(),
        notifier=LogCodeNotifier(),
        audit_logger=StdAuditLogger(),
        code_ttl_seconds=settings.VERIFICATION_CODE_TTL_SECONDS,
    )


def get_auth_service(session: Session = Depends(get_session)) -> AuthService:
    return build_auth_service(session)
