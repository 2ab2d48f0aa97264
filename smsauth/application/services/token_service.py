from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable

import jwt

from ..ports.user_repo import UserDto
from ...utils import utcnow


@dataclass
class IssuedToken:
    token: str
    expires_at: datetime


@dataclass
class TokenIssuer:
    """Signs access tokens for authenticated users.

    The token is a JWT carrying the user id (``sub``) and phone number.
    Expiry is the only way a token stops being valid.
    """

    secret_key: str
    algorithm: str = "HS256"
    expires_in: timedelta = timedelta(hours=24)
    clock: Callable[[], datetime] = field(default=utcnow)

    def __post_init__(self) -> None:
        if not self.secret_key:
            raise ValueError("SECRET_KEY not properly configured")

    def issue(self, user: UserDto) -> IssuedToken:
        issued_at = self.clock().replace(microsecond=0)
        expires_at = issued_at + self.expires_in
        payload = {
            "sub": user.id,
            "phone_number": user.phone_number,
            "iat": issued_at,
            "exp": expires_at,
            "type": "access",
        }
        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        return IssuedToken(token=token, expires_at=expires_at)
