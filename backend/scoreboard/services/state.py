"""Authoritative per-lane score state for one classroom day.

ScoreState owns the lane levels, the day key they belong to and the lock
flag. Every successful mutation is written through to the injected
key-value store; storage failures are logged and never undo the in-memory
change.
"""
import logging
import threading
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from scoreboard.exceptions import StorageReadError, StorageWriteError
from scoreboard.schemas import SCHEMA_VERSION, ScoreRecord
from .clock import SystemClock, day_key, ms_until_next_midnight

logger = logging.getLogger(__name__)

DEFAULT_LANES = 6
DEFAULT_MAX_LEVEL = 20
DEFAULT_TIMEZONE = 'Asia/Taipei'
DEFAULT_STORAGE_KEY = 'classScoreboard.v1'


def _zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown time zone {name!r}") from exc


class ScoreState:
    def __init__(
        self,
        storage,
        clock=None,
        lanes: int = DEFAULT_LANES,
        max_level: int = DEFAULT_MAX_LEVEL,
        timezone: str = DEFAULT_TIMEZONE,
        storage_key: str = DEFAULT_STORAGE_KEY,
    ):
        if lanes < 1:
            raise ValueError(f"Lane count must be at least 1, got {lanes}")
        if max_level < 0:
            raise ValueError(f"Max level cannot be negative, got {max_level}")
        self.storage = storage
        self.clock = clock or SystemClock()
        self.lanes = lanes
        self.max_level = max_level
        self.timezone = timezone
        self.zone = _zone(timezone)
        self.storage_key = storage_key
        self.levels: List[int] = [0] * lanes
        self.day_key = self.today_key()
        self.last_updated = self.clock.now_ms()
        self.is_locked = False
        self._mutex = threading.RLock()

    # ---- clock ----

    def today_key(self) -> str:
        return day_key(self.clock.now(), self.zone)

    def ms_until_next_midnight(self) -> int:
        return ms_until_next_midnight(self.clock.now(), self.zone)

    # ---- persistence ----

    def to_record(self) -> ScoreRecord:
        return ScoreRecord(
            version=SCHEMA_VERSION,
            timezone=self.timezone,
            day_key=self.day_key,
            levels=list(self.levels),
            max_level=self.max_level,
            last_updated=self.last_updated,
        )

    def save(self) -> bool:
        """Write the current record. Returns False (and logs) on failure.

        Any error raised by the store is treated as a failed write.
        """
        try:
            ok = self.storage.set(self.storage_key, self.to_record().to_json())
            if not ok:
                raise StorageWriteError(self.storage_key, "Store rejected the write")
        except StorageWriteError as exc:
            logger.error(f"[save-failed] {exc}; in-memory scores stay authoritative")
            return False
        except Exception as exc:
            logger.error(
                f"[save-failed] {type(exc).__name__}: {exc} (key={self.storage_key}); "
                "in-memory scores stay authoritative"
            )
            return False
        return True

    def load(self) -> Optional[ScoreRecord]:
        """Read and validate the persisted record.

        Returns None when nothing is stored. Raises StorageReadError when
        the stored blob cannot be read or does not validate.
        """
        raw = self.storage.get(self.storage_key)
        if raw is None:
            return None
        return ScoreRecord.from_json(self.storage_key, raw)

    def _is_adoptable(self, record: ScoreRecord, today: str) -> bool:
        if record.version != SCHEMA_VERSION:
            logger.info(f"[load-discard] version={record.version} expected={SCHEMA_VERSION}")
            return False
        if record.day_key != today:
            logger.info(f"[load-discard] stale day={record.day_key} today={today}")
            return False
        if len(record.levels) != self.lanes:
            logger.info(f"[load-discard] lanes={len(record.levels)} expected={self.lanes}")
            return False
        if any(level > record.max_level for level in record.levels):
            logger.info(f"[load-discard] levels exceed max_level={record.max_level}")
            return False
        return True

    def load_or_initialize(self) -> bool:
        """Adopt today's persisted record, or start a fresh day.

        Returns True only when a stored record for today with the current
        schema version was adopted. Unreadable, stale or mismatched records
        reset the board for a new day and return False.
        """
        with self._mutex:
            today = self.today_key()
            try:
                record = self.load()
            except StorageReadError as exc:
                logger.warning(f"[load-failed] {exc}")
                record = None
            except Exception as exc:
                logger.warning(f"[load-failed] {type(exc).__name__}: {exc} (key={self.storage_key})")
                record = None

            if record is not None and self._is_adoptable(record, today):
                self.levels = list(record.levels)
                self.max_level = record.max_level
                self.timezone = record.timezone
                self.zone = _zone(record.timezone)
                self.day_key = record.day_key
                self.last_updated = record.last_updated
                logger.info(f"[load] adopted day={self.day_key} levels={self.levels}")
                return True

            self.reset_for_new_day()
            return False

    # ---- mutations ----

    def _valid_lane(self, lane) -> bool:
        return isinstance(lane, int) and not isinstance(lane, bool) and 0 <= lane < self.lanes

    def can_increment(self, lane) -> bool:
        return not self.is_locked and self._valid_lane(lane) and self.levels[lane] < self.max_level

    def can_decrement(self, lane) -> bool:
        return not self.is_locked and self._valid_lane(lane) and self.levels[lane] > 0

    def increment(self, lane) -> bool:
        with self._mutex:
            if not self.can_increment(lane):
                return False
            self.levels[lane] += 1
            self.last_updated = self.clock.now_ms()
            self.save()
            return True

    def decrement(self, lane) -> bool:
        with self._mutex:
            if not self.can_decrement(lane):
                return False
            self.levels[lane] -= 1
            self.last_updated = self.clock.now_ms()
            self.save()
            return True

    def reset_today(self) -> None:
        """Zero every lane, keeping the current day key."""
        with self._mutex:
            if self.is_locked:
                return
            self.levels = [0] * self.lanes
            self.last_updated = self.clock.now_ms()
            self.save()

    def reset_for_new_day(self) -> None:
        """Zero every lane and move the day key to today in one step."""
        with self._mutex:
            self.levels = [0] * self.lanes
            self.day_key = self.today_key()
            self.last_updated = self.clock.now_ms()
            self.save()
            logger.info(f"[new-day] day={self.day_key}")

    def toggle_lock(self) -> bool:
        with self._mutex:
            self.is_locked = not self.is_locked
            self.save()
            return self.is_locked

    # ---- presentation ----

    def to_dict(self):
        return {
            'lanes': self.lanes,
            'levels': list(self.levels),
            'max_level': self.max_level,
            'timezone': self.timezone,
            'day_key': self.day_key,
            'last_updated': self.last_updated,
            'is_locked': self.is_locked,
            'controls': [
                {
                    'lane': lane,
                    'can_increment': self.can_increment(lane),
                    'can_decrement': self.can_decrement(lane),
                }
                for lane in range(self.lanes)
            ],
        }
