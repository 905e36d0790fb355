from datetime import datetime, tzinfo
from typing import Union

import pytz

UTC = pytz.utc


def get_timezone(name: Union[str, tzinfo, None] = None) -> tzinfo:
    """Resolve an IANA zone name; raises pytz.UnknownTimeZoneError on typos"""
    if name is None:
        return UTC
    if isinstance(name, tzinfo):
        return name
    return pytz.timezone(name)


def format_iso(dt: datetime) -> str:
    """ISO-8601 to the second, keeping the offset when there is one"""
    return dt.replace(microsecond=0).isoformat()


def parse_iso(value: str) -> datetime:
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)
