""" ISO-8601 dates, the way JavaScript writes them """

import datetime


def format_datetime(value: datetime.datetime) -> str:
    """ Format a datetime as ISO-8601. Aware datetimes are rendered in UTC with the "Z" suffix """
    # Microseconds are kept: truncating them would make the cursor skip rows
    if value.tzinfo is None:
        return value.isoformat()

    return value.astimezone(datetime.timezone.utc).replace(tzinfo=None).isoformat() + 'Z'


def parse_datetime(value: str) -> datetime.datetime:
    """ Parse an ISO-8601 datetime, including the "Z" suffix that JavaScript uses

    Raises:
        ValueError
    """
    if value[-1:] in ('Z', 'z'):
        value = value[:-1] + '+00:00'
    return datetime.datetime.fromisoformat(value)
