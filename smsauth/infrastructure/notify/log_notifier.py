import logging

from ...application.ports.notifier import CodeNotifier


class LogCodeNotifier(CodeNotifier):
    """Stand-in for an SMS gateway: writes the code to the application log."""

    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def send_code(self, phone_number: str, code: str, expires_in_seconds: int) -> None:
        self._logger.info(f"Verification code sent to {phone_number}: {code} (valid {expires_in_seconds}s)")
