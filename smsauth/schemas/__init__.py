from .auth.auth import (
    VerificationCodeRequest,
    VerificationCodeResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
)

__all__ = [
    "VerificationCodeRequest",
    "VerificationCodeResponse",
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    "RegisterResponse",
]
