from datetime import UTC, datetime
from typing import Optional


def utcnow() -> datetime:
    """Naive UTC now; the store keeps every timestamp as naive UTC."""
    return datetime.now(UTC).replace(tzinfo=None)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
