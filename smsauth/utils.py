import secrets
import string
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp, the form every table stores."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to a naive value read back from a backend that drops offsets (SQLite)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# =========================
# Verification code generation
# =========================
def generate_code(length: int = 6) -> str:
    """Generate a numeric code of ``length`` digits. Leading zeros are kept."""
    return "".join(secrets.choice(string.digits) for _ in range(length))
