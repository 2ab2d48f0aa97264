# smsauth/routers/auth_router.py
import logging

from fastapi import APIRouter, Depends, Response, status

from ..application.services.auth_service import AuthService
from ..dependencies import get_auth_service
from ..exceptions import create_success_response
from ..schemas import (
    VerificationCodeRequest, VerificationCodeResponse,
    LoginRequest, LoginResponse,
    RegisterRequest, RegisterResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/verification-code")
def request_verification_code(body: VerificationCodeRequest, auth: AuthService = Depends(get_auth_service)):
    result = auth.request_code(body.phone_number)
    data = VerificationCodeResponse(phone_number=result.phone_number, expires_in=result.expires_in_seconds)
    return create_success_response(data.model_dump(by_alias=True))


@router.post("/login")
def login(body: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    result = auth.login(body.phone_number, body.verification_code)
    data = LoginResponse(user_id=result.user_id, phone_number=result.phone_number, token=result.token)
    return create_success_response(data.model_dump(by_alias=True))


@router.post("/register")
def register(body: RegisterRequest, response: Response, auth: AuthService = Depends(get_auth_service)):
    result = auth.register(body.phone_number, body.verification_code, body.agree_to_terms)
    if result.created:
        response.status_code = status.HTTP_201_CREATED
    data = RegisterResponse(
        user_id=result.user_id,
        phone_number=result.phone_number,
        created_at=result.created_at,
        token=result.token,
        created=result.created,
    )
    return create_success_response(data.model_dump(mode="json", by_alias=True))
