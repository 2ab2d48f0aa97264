# smsauth/db/models/auth/verification_code.py
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
from datetime import datetime
from typing import Optional

from ....utils import utcnow


class VerificationCode(SQLModel, table=True):
    __tablename__ = "verification_codes"
    id: Optional[int] = Field(default=None, primary_key=True)
    phone_number: str = Field(max_length=11, index=True)
    code: str = Field(max_length=10)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    expires_at: datetime = Field(index=True, sa_type=DateTime(timezone=True))
    used: bool = Field(default=False)
