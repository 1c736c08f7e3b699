from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, matching how DateTime columns are stored"""
    return datetime.now(timezone.utc).replace(tzinfo=None)
