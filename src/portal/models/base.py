from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return current UTC time as naive datetime (for PostgreSQL TIMESTAMP).

    Columns use TIMESTAMP WITHOUT TIME ZONE; all times are UTC by convention.
    """
    return datetime.now(UTC).replace(tzinfo=None)
