from datetime import datetime, timezone
from typing import Optional, Union

import pytz
from dateutil import parser as date_parser


class DateUtils:
    """
    Centralized date/time handling.

    Timestamps are written to the database as ISO-8601 UTC strings and read
    back either as strings (SQLite) or as datetimes (PostgreSQL); every
    read goes through to_iso / parse so callers never see the difference.
    """

    UTC = timezone.utc
    RECEIPT_FORMAT = "%d %b %Y, %I:%M %p"

    @classmethod
    def now_utc(cls) -> datetime:
        """Get current UTC datetime - always use this for database storage"""
        return datetime.now(cls.UTC)

    @classmethod
    def now_iso(cls) -> str:
        return cls.now_utc().isoformat()

    @classmethod
    def parse(cls, value: Union[str, datetime, None]) -> Optional[datetime]:
        """Parse a stored timestamp into an aware UTC datetime."""
        if value is None:
            return None
        dt = value if isinstance(value, datetime) else date_parser.isoparse(str(value))
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=cls.UTC)
        return dt.astimezone(cls.UTC)

    @classmethod
    def to_iso(cls, value: Union[str, datetime, None]) -> Optional[str]:
        dt = cls.parse(value)
        return dt.isoformat() if dt else None

    @classmethod
    def to_local(cls, value: Union[str, datetime], timezone_name: str) -> datetime:
        """Convert a stored UTC timestamp to the given timezone."""
        return cls.parse(value).astimezone(pytz.timezone(timezone_name))

    @classmethod
    def format_for_receipt(cls, value: Union[str, datetime], timezone_name: str) -> str:
        local = cls.to_local(value, timezone_name)
        return f"{local.strftime(cls.RECEIPT_FORMAT)} {local.tzname()}"
