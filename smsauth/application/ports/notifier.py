from typing import Protocol


class CodeNotifier(Protocol):
    def send_code(self, phone_number: str, code: str, expires_in_seconds: int) -> None:
        ...
