from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class HourStatus(str, Enum):
    YES = "yes"
    NO = "no"
    MAYBE = "maybe"
    FIRST = "first"
    SECOND = "second"
    MFIRST = "mfirst"
    MSECOND = "msecond"


# Hour key ("1".."24") -> status code for one day and one reason code.
DaySchedule = dict[str, str]


@dataclass(frozen=True)
class HouseRecord:
    sub_type: str | None = None
    sub_type_reason: tuple[str, ...] = ()
    start_date: str | None = None
    end_date: str | None = None

    @classmethod
    def from_payload(cls, raw: Any) -> HouseRecord | None:
        if not isinstance(raw, dict):
            return None

        reasons = raw.get("sub_type_reason")
        if not isinstance(reasons, list):
            reasons = []

        return cls(
            sub_type=_non_empty_str(raw.get("sub_type")),
            sub_type_reason=tuple(str(reason) for reason in reasons if reason),
            start_date=_non_empty_str(raw.get("start_date")),
            end_date=_non_empty_str(raw.get("end_date")),
        )

    @property
    def reason_key(self) -> str | None:
        return self.sub_type_reason[0] if self.sub_type_reason else None

    @property
    def has_outage_period(self) -> bool:
        return bool(self.sub_type and (self.start_date or self.end_date))


@dataclass(frozen=True)
class ScheduleContext:
    today_unix: int
    tomorrow_unix: int
    reason_key: str
    preset: dict[str, Any]
    hours_today: DaySchedule | None = None
    hours_tomorrow: DaySchedule | None = None

    @property
    def time_type(self) -> dict[str, str]:
        raw = self.preset.get("time_type")
        return raw if isinstance(raw, dict) else {}


@dataclass(frozen=True)
class PowerRow:
    city: str
    address: str | None
    timestamp: datetime | None
    people_count: float | None
    light_status: int | None
    lat: float | None
    lon: float | None
    raw: str


@dataclass(frozen=True)
class PowerStats:
    region: str
    light_percent: float


@dataclass
class TimeSegment:
    start: str
    end: str
    status: str


@dataclass(frozen=True)
class OutageData:
    schedule_response: dict[str, Any]
    house: HouseRecord | None
    schedule: ScheduleContext | None
    power_stats: PowerStats | None
    requested_at: datetime
    update_timestamp: str


@dataclass(frozen=True)
class Reply:
    text: str
    image: bytes | None = field(default=None, repr=False)


def _non_empty_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
