from datetime import datetime, timezone


def timestamp() -> str:
    """UTC wall-clock time as an ISO 8601 string with millisecond precision.

    The fixed width and ``Z`` suffix keep the strings lexically ordered.
    """
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
