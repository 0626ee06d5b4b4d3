from __future__ import annotations

from dtek_bot.core.constants import TIME_TYPE
from dtek_bot.core.models import ScheduleContext, TimeSegment
from dtek_bot.presentation.schedule_formatter import (
    build_half_hour_slots,
    build_schedule_blocks,
    format_schedule_text,
    merge_adjacent_segments,
)
from tests.helpers import REASON_KEY, TODAY_UNIX, TOMORROW_UNIX, build_hours


def _schedule(today: dict[str, str] | None, tomorrow: dict[str, str] | None) -> ScheduleContext:
    return ScheduleContext(
        today_unix=TODAY_UNIX,
        tomorrow_unix=TOMORROW_UNIX,
        reason_key=REASON_KEY,
        preset={"time_type": dict(TIME_TYPE)},
        hours_today=today,
        hours_tomorrow=tomorrow,
    )


def test_transition_hours_split_at_half_past() -> None:
    slots = build_half_hour_slots({"11": "first", "14": "second"})

    assert slots == [
        TimeSegment("10:00", "10:30", "no"),
        TimeSegment("10:30", "11:00", "yes"),
        TimeSegment("13:00", "13:30", "yes"),
        TimeSegment("13:30", "14:00", "no"),
    ]


def test_unknown_codes_are_skipped() -> None:
    assert build_half_hour_slots({"1": "weird", "2": "no"}) == [TimeSegment("01:00", "02:00", "no")]


def test_merge_joins_only_contiguous_equal_segments() -> None:
    segments = [
        TimeSegment("00:00", "01:00", "yes"),
        TimeSegment("01:00", "02:00", "yes"),
        TimeSegment("03:00", "04:00", "yes"),
        TimeSegment("04:00", "05:00", "no"),
    ]

    merged = merge_adjacent_segments(segments)

    assert merged == [
        TimeSegment("00:00", "02:00", "yes"),
        TimeSegment("03:00", "04:00", "yes"),
        TimeSegment("04:00", "05:00", "no"),
    ]
    assert segments[0].end == "01:00"


def test_format_schedule_text_covers_whole_day() -> None:
    hours = build_hours("yes", {10: "no", 11: "first", 14: "second", 16: "maybe"})

    text = format_schedule_text(hours, TIME_TYPE)

    assert text.split("\n") == [
        "🟢 00:00 – 09:00 — Світло є",
        "🔴 09:00 – 10:30 — Світла немає",
        "🟢 10:30 – 13:30 — Світло є",
        "🔴 13:30 – 14:00 — Світла немає",
        "🟢 14:00 – 15:00 — Світло є",
        "🟡 15:00 – 16:00 — Можливе відключення",
        "🟢 16:00 – 24:00 — Світло є",
    ]


def test_format_schedule_text_uses_preset_labels_and_escapes_them() -> None:
    text = format_schedule_text(build_hours("no"), {"no": "<Вимкнено>"})

    assert text == "🔴 00:00 – 24:00 — &lt;Вимкнено&gt;"


def test_format_schedule_text_requires_hours_and_labels() -> None:
    assert format_schedule_text(None, TIME_TYPE) == ""
    assert format_schedule_text({}, TIME_TYPE) == ""
    assert format_schedule_text(build_hours(), {}) == ""


def test_schedule_blocks_skip_tomorrow_without_outages() -> None:
    blocks = build_schedule_blocks(_schedule(build_hours(overrides={5: "no"}), build_hours()))

    assert len(blocks) == 1
    assert blocks[0].startswith("<b>🗓 Графік відключень на 15 червня:</b>\n")


def test_schedule_blocks_include_tomorrow_with_outages() -> None:
    blocks = build_schedule_blocks(_schedule(build_hours(), build_hours(overrides={20: "msecond"})))

    assert len(blocks) == 2
    assert blocks[1].startswith("<b>🗓 Графік відключень на 16 червня:</b>\n")
    assert "🟡 19:00 – 20:00" in blocks[1]


def test_schedule_blocks_empty_without_schedule() -> None:
    assert build_schedule_blocks(None) == []
