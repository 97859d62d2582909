from datetime import datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo


class SystemClock:
    """Wall clock. Always returns aware UTC datetimes."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def now_ms(self) -> int:
        return int(self.now().timestamp() * 1000)


def day_key(moment: datetime, zone: ZoneInfo) -> str:
    """Calendar date of ``moment`` in ``zone`` as YYYY-MM-DD."""
    return moment.astimezone(zone).date().isoformat()


def next_midnight(moment: datetime, zone: ZoneInfo) -> datetime:
    """The first local 00:00 in ``zone`` strictly after ``moment``.

    Steps one calendar day rather than 24 hours, so days shortened or
    lengthened by a DST change land on the right instant.
    """
    local_date = moment.astimezone(zone).date()
    return datetime.combine(local_date + timedelta(days=1), time(0), tzinfo=zone)


def ms_until_next_midnight(moment: datetime, zone: ZoneInfo) -> int:
    delta = next_midnight(moment, zone) - moment
    # round up, so a timer armed with this delay never wakes before midnight
    return max(0, -(-delta // timedelta(milliseconds=1)))
