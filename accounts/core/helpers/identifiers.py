from typing import Any, Iterable, List
from uuid import UUID


def coerce_uuid(value: Any) -> UUID | None:
    """Return `value` as a UUID, or None when it cannot be one."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


def coerce_uuids(values: Iterable[Any] | None) -> List[UUID]:
    """Convert ids to UUIDs keeping input order, dropping duplicates and malformed values."""
    seen = {}
    for value in values or []:
        uuid_value = coerce_uuid(value)
        if uuid_value is not None:
            seen.setdefault(uuid_value, None)
    return list(seen)
