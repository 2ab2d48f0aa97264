from typing import Protocol, Optional
from datetime import datetime


class UserDto:
    def __init__(self, id: str, phone_number: str, created_at: datetime):
        self.id = id
        self.phone_number = phone_number
        self.created_at = created_at

    def __repr__(self) -> str:
        return f"UserDto(id={self.id!r}, phone_number={self.phone_number!r})"


class UserRepository(Protocol):
    def get_by_phone(self, phone_number: str) -> Optional[UserDto]:
        ...

    def create(self, phone_number: str) -> UserDto:
        """Insert a user; raises DuplicatePhone if the number is taken."""
        ...

    def count_by_phone(self, phone_number: str) -> int:
        ...
