from __future__ import annotations

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import StorageReadError


SCHEMA_VERSION = 1


class ScoreRecord(BaseModel):
    """Persisted scoreboard record, one JSON blob under one storage key.

    Attribute names are snake_case; the wire format keeps the camelCase keys
    the display has always written (``tz``, ``dateKey``, ``maxLevels``,
    ``lastUpdated``).
    """

    model_config = ConfigDict(populate_by_name=True, strict=True)

    version: int
    timezone: str = Field(alias="tz", min_length=1)
    day_key: str = Field(alias="dateKey", pattern=r"^\d{4}-\d{2}-\d{2}$")
    levels: list[int]
    max_level: int = Field(alias="maxLevels", ge=0)
    last_updated: int = Field(alias="lastUpdated", ge=0)

    @field_validator("timezone")
    @classmethod
    def require_known_zone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown time zone {value!r}") from exc
        return value

    @field_validator("levels")
    @classmethod
    def require_non_negative(cls, value: list[int]) -> list[int]:
        if any(level < 0 for level in value):
            raise ValueError("Levels cannot be negative")
        return value

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, key: str, raw: str) -> "ScoreRecord":
        try:
            return cls.model_validate_json(raw)
        except ValidationError as exc:
            raise StorageReadError(key, f"Invalid score record: {exc.error_count()} error(s)") from exc
