from datetime import UTC, date, datetime


def utc_now():
    return datetime.now(UTC)


def as_utc(value):
    """Normalise a timestamp to an aware UTC ``datetime``.

    Naive datetimes are taken to be UTC already. Dates and ISO strings
    (``2024-05-01`` or ``2024-05-01T10:00:00+02:00``) are accepted too.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    elif isinstance(value, date) and not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
