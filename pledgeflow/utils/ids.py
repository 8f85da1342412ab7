from uuid import UUID


def parse_uuid(value) -> str | None:
    """Canonical string form of a UUID, or None if `value` is not one."""
    try:
        return str(UUID(str(value)))
    except (TypeError, ValueError):
        return None
