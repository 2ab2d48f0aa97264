import threading
import uuid
from datetime import datetime
from typing import Callable, Dict, Optional

from ....application.ports.user_repo import UserRepository, UserDto
from ....exceptions import DuplicatePhone
from ....utils import utcnow


class InMemoryUserRepository(UserRepository):
    def __init__(self, clock: Callable[[], datetime] = utcnow) -> None:
        self._by_phone: Dict[str, UserDto] = {}
        self._lock = threading.Lock()
        self.clock = clock

    def get_by_phone(self, phone_number: str) -> Optional[UserDto]:
        with self._lock:
            return self._by_phone.get(phone_number)

    def create(self, phone_number: str) -> UserDto:
        with self._lock:
            if phone_number in self._by_phone:
                raise DuplicatePhone()
            user = UserDto(id=str(uuid.uuid4()), phone_number=phone_number, created_at=self.clock())
            self._by_phone[phone_number] = user
            return user

    def count_by_phone(self, phone_number: str) -> int:
        with self._lock:
            return 1 if phone_number in self._by_phone else 0
