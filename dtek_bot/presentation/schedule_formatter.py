from __future__ import annotations

from dtek_bot.core.constants import STATUS_ICONS, TIME_TYPE
from dtek_bot.core.dates import day_month_from_unix
from dtek_bot.core.models import DaySchedule, HourStatus, ScheduleContext, TimeSegment
from dtek_bot.parsers.schedule_response import has_any_outage
from dtek_bot.presentation.html_utils import escape_html

HOURS_PER_DAY = 24

# Transition codes split into two half-hour segments: (first half, second half).
_SPLIT_STATUSES: dict[str, tuple[str, str]] = {
    HourStatus.FIRST.value: (HourStatus.NO.value, HourStatus.YES.value),
    HourStatus.SECOND.value: (HourStatus.YES.value, HourStatus.NO.value),
}
_WHOLE_HOUR_STATUSES = frozenset(
    status.value
    for status in (
        HourStatus.YES,
        HourStatus.NO,
        HourStatus.MAYBE,
        HourStatus.MFIRST,
        HourStatus.MSECOND,
    )
)


def _clock(hour: int, minute: int = 0) -> str:
    return f"{hour:02d}:{minute:02d}"


def build_half_hour_slots(hours: DaySchedule) -> list[TimeSegment]:
    """Expand hour codes into segments; hour ``h`` covers ``[h-1, h)``. Unknown codes are skipped."""
    slots: list[TimeSegment] = []

    for hour in range(1, HOURS_PER_DAY + 1):
        status = hours.get(str(hour))
        start, middle, end = _clock(hour - 1), _clock(hour - 1, 30), _clock(hour)

        if status in _SPLIT_STATUSES:
            first_half, second_half = _SPLIT_STATUSES[status]
            slots.append(TimeSegment(start, middle, first_half))
            slots.append(TimeSegment(middle, end, second_half))
        elif status in _WHOLE_HOUR_STATUSES:
            slots.append(TimeSegment(start, end, status))

    return slots


def merge_adjacent_segments(segments: list[TimeSegment]) -> list[TimeSegment]:
    merged: list[TimeSegment] = []

    for segment in segments:
        last = merged[-1] if merged else None
        if last is not None and last.status == segment.status and last.end == segment.start:
            last.end = segment.end
        else:
            merged.append(TimeSegment(segment.start, segment.end, segment.status))

    return merged


def format_segment(segment: TimeSegment, time_type: dict[str, str]) -> str:
    icon = STATUS_ICONS.get(segment.status, "⚪️")
    label = time_type.get(segment.status) or TIME_TYPE.get(segment.status, segment.status)
    return f"{icon} {segment.start} – {segment.end} — {escape_html(label)}"


def format_schedule_text(hours: DaySchedule | None, time_type: dict[str, str] | None) -> str:
    if not hours or not time_type:
        return ""

    merged = merge_adjacent_segments(build_half_hour_slots(hours))
    return "\n".join(format_segment(segment, time_type) for segment in merged)


def _schedule_block(day_unix: int, text: str) -> str:
    return f"<b>🗓 Графік відключень на {day_month_from_unix(day_unix)}:</b>\n{text}"


def build_schedule_blocks(schedule: ScheduleContext | None) -> list[str]:
    if schedule is None:
        return []

    time_type = schedule.time_type
    blocks = [_schedule_block(schedule.today_unix, format_schedule_text(schedule.hours_today, time_type))]

    if has_any_outage(schedule.hours_tomorrow):
        tomorrow_text = format_schedule_text(schedule.hours_tomorrow, time_type)
        blocks.append(_schedule_block(schedule.tomorrow_unix, tomorrow_text))

    return blocks
