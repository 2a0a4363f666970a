"""Calendar-date packing for the registration contract."""

from datetime import date, datetime, timezone

from ..execution.errors import TimestampRangeError


YEAR_BASE = 2000
YEAR_MAX = YEAR_BASE + 0xFF


def pack_timestamp(unix_seconds: int) -> int:
    """
    Pack a Unix timestamp into ``day | month << 8 | (year - 2000) << 16``.

    The date is taken in UTC; time of day is dropped. Years outside
    2000..2255 do not fit the 8-bit year field and are rejected.
    """
    try:
        moment = datetime.fromtimestamp(unix_seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise TimestampRangeError(f"timestamp {unix_seconds} is out of range") from e

    if not YEAR_BASE <= moment.year <= YEAR_MAX:
        raise TimestampRangeError(
            f"timestamp {unix_seconds} falls in {moment.year}, "
            f"supported years are {YEAR_BASE}..{YEAR_MAX}"
        )

    return moment.day | (moment.month << 8) | ((moment.year - YEAR_BASE) << 16)


def unpack_timestamp(packed: int) -> date:
    return date(YEAR_BASE + ((packed >> 16) & 0xFF), (packed >> 8) & 0xFF, packed & 0xFF)
