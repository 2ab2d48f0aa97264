# smsauth/schemas/auth/auth.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# Phone and code are optional here: the auth service reports malformed or
# missing values with its own error kinds.
class VerificationCodeRequest(_CamelModel):
    phone_number: Optional[str] = Field(None, alias="phoneNumber", description="11-digit mobile number")


class VerificationCodeResponse(_CamelModel):
    phone_number: str = Field(..., alias="phoneNumber")
    expires_in: int = Field(..., alias="expiresIn", description="Seconds until the code expires")


class LoginRequest(_CamelModel):
    phone_number: Optional[str] = Field(None, alias="phoneNumber")
    verification_code: Optional[str] = Field(None, alias="verificationCode")


class LoginResponse(_CamelModel):
    user_id: str = Field(..., alias="userId")
    phone_number: str = Field(..., alias="phoneNumber")
    token: str


class RegisterRequest(_CamelModel):
    phone_number: Optional[str] = Field(None, alias="phoneNumber")
    verification_code: Optional[str] = Field(None, alias="verificationCode")
    agree_to_terms: bool = Field(False, alias="agreeToTerms")


class RegisterResponse(_CamelModel):
    user_id: str = Field(..., alias="userId")
    phone_number: str = Field(..., alias="phoneNumber")
    created_at: datetime = Field(..., alias="createdAt")
    token: str
    created: bool
