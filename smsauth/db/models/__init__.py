# Models package (re-export feature modules for stable imports)
from .users.user import User
from .auth.verification_code import VerificationCode

__all__ = [
    "User",
    "VerificationCode",
]
