from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from scoreboard.services.clock import SystemClock, day_key, ms_until_next_midnight, next_midnight

TAIPEI = ZoneInfo('Asia/Taipei')
NEW_YORK = ZoneInfo('America/New_York')
HOUR_MS = 3600 * 1000


def test_day_key_follows_zone_calendar():
    moment = datetime(2024, 5, 10, 16, 0, tzinfo=timezone.utc)
    assert day_key(moment, TAIPEI) == '2024-05-11'
    assert day_key(moment, NEW_YORK) == '2024-05-10'


def test_next_midnight_is_local_midnight():
    moment = datetime(2024, 5, 10, 1, 30, tzinfo=timezone.utc)
    midnight = next_midnight(moment, TAIPEI)
    assert midnight.astimezone(timezone.utc) == datetime(2024, 5, 10, 16, 0, tzinfo=timezone.utc)


def test_exactly_midnight_targets_following_day():
    moment = datetime(2024, 5, 10, 16, 0, tzinfo=timezone.utc)
    assert ms_until_next_midnight(moment, TAIPEI) == 24 * HOUR_MS


def test_partial_millisecond_rounds_up():
    # 400 microseconds before Taipei midnight
    moment = datetime(2024, 5, 10, 15, 59, 59, 999600, tzinfo=timezone.utc)
    assert ms_until_next_midnight(moment, TAIPEI) == 1
    moment = datetime(2024, 5, 10, 15, 59, 59, 998600, tzinfo=timezone.utc)
    assert ms_until_next_midnight(moment, TAIPEI) == 2


def test_spring_forward_day_is_23_hours():
    # 2024-03-10 00:00 EST
    moment = datetime(2024, 3, 10, 5, 0, tzinfo=timezone.utc)
    assert ms_until_next_midnight(moment, NEW_YORK) == 23 * HOUR_MS


def test_fall_back_day_is_25_hours():
    # 2024-11-03 00:00 EDT
    moment = datetime(2024, 11, 3, 4, 0, tzinfo=timezone.utc)
    assert ms_until_next_midnight(moment, NEW_YORK) == 25 * HOUR_MS


def test_system_clock_is_aware_utc():
    now = SystemClock().now()
    assert now.tzinfo is not None
    assert now.utcoffset().total_seconds() == 0
    assert abs(SystemClock().now_ms() - int(now.timestamp() * 1000)) < 5000
