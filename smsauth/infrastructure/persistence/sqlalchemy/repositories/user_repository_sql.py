from typing import Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from .....db.models import User
from .....application.ports.user_repo import UserRepository, UserDto
from .....exceptions import DuplicatePhone
from .....utils import as_utc
from .unit_of_work import unit_of_work


class SqlUserRepository(UserRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_dto(self, user: User) -> UserDto:
        return UserDto(
            id=user.id,
            phone_number=user.phone_number,
            created_at=as_utc(user.created_at),
        )

    def get_by_phone(self, phone_number: str) -> Optional[UserDto]:
        with unit_of_work(self.session):
            user = self.session.exec(select(User).where(User.phone_number == phone_number)).first()
            return self._to_dto(user) if user else None

    def create(self, phone_number: str) -> UserDto:
        user = User(phone_number=phone_number)
        try:
            with unit_of_work(self.session):
                self.session.add(user)
                self.session.flush()
                dto = self._to_dto(user)
        except IntegrityError:
            # unit_of_work already rolled back; the unique index decided
            raise DuplicatePhone()
        return dto

    def count_by_phone(self, phone_number: str) -> int:
        with unit_of_work(self.session):
            stmt = select(func.count()).select_from(User).where(User.phone_number == phone_number)
            return self.session.exec(stmt).one()
