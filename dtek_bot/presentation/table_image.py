"""Outage table image: a pure node-tree builder and a Pillow rasterizer.

The builders only compute geometry and colors, so trees can be inspected in
tests without fonts. ``rasterize`` is the single place that touches Pillow.
"""

from __future__ import annotations

import functools
import io
from dataclasses import dataclass
from typing import Callable, Iterator

from PIL import Image, ImageDraw, ImageFont

from dtek_bot.core.errors import RenderError
from dtek_bot.core.models import DaySchedule

IMAGE_WIDTH = 1020
IMAGE_HEIGHT = 820
COMBINED_IMAGE_WIDTH = 1100
COMBINED_IMAGE_HEIGHT = 540

COLS = 6
ROWS_PER_HALF = 2
HOURS_PER_HALF = COLS * ROWS_PER_HALF

TITLE_TEXT = "Графік відключень"
SPLIT_LABEL = "частково"

COLORS = {
    "green": "#22c55e",
    "red": "#ef4444",
    "yellow": "#eab308",
    "bg": "#1a1a2e",
    "divider": "#334155",
    "title": "#e2e8f0",
    "subtitle": "#94a3b8",
    "legend": "#94a3b8",
    "fallback": "#6b7280",
    "text_light": "#ffffff",
}

# Corner flags in Pillow order: top-left, top-right, bottom-right, bottom-left.
TOP_CORNERS = (True, True, False, False)
BOTTOM_CORNERS = (False, False, True, True)


@dataclass(frozen=True)
class SolidStatus:
    bg: str
    label: str
    text_color: str


@dataclass(frozen=True)
class SplitStatus:
    top: str
    bottom: str


_MAYBE = SolidStatus(COLORS["yellow"], "можл.", COLORS["bg"])

STATUS_STYLES: dict[str, SolidStatus | SplitStatus] = {
    "yes": SolidStatus(COLORS["green"], "є", COLORS["text_light"]),
    "no": SolidStatus(COLORS["red"], "немає", COLORS["text_light"]),
    "maybe": _MAYBE,
    "mfirst": _MAYBE,
    "msecond": _MAYBE,
    "first": SplitStatus(top=COLORS["red"], bottom=COLORS["green"]),
    "second": SplitStatus(top=COLORS["green"], bottom=COLORS["red"]),
}
UNKNOWN_STATUS = SolidStatus(COLORS["fallback"], "—", COLORS["text_light"])

LEGEND_ITEMS = (
    SolidStatus(COLORS["green"], "Є світло", COLORS["legend"]),
    SolidStatus(COLORS["red"], "Немає світла", COLORS["legend"]),
    SolidStatus(COLORS["yellow"], "Можливо", COLORS["legend"]),
    SplitStatus(top=COLORS["green"], bottom=COLORS["red"]),
)
LEGEND_SPLIT_LABEL = "Частково"
LEGEND_SWATCH = 20
LEGEND_FONT_SIZE = 20
LEGEND_HEIGHT = 24


@dataclass(frozen=True)
class GridSpec:
    cell: int
    gap: int
    radius: int
    hour_font: int
    label_font: int

    @property
    def width(self) -> int:
        return COLS * self.cell + (COLS - 1) * self.gap

    @property
    def half_height(self) -> int:
        return ROWS_PER_HALF * self.cell + (ROWS_PER_HALF - 1) * self.gap


FULL_GRID = GridSpec(cell=150, gap=12, radius=16, hour_font=40, label_font=22)
COMPACT_GRID = GridSpec(cell=75, gap=6, radius=10, hour_font=20, label_font=12)


@dataclass(frozen=True)
class Node:
    x: int
    y: int
    width: int
    height: int
    role: str = "box"
    fill: str | None = None
    radius: int = 0
    corners: tuple[bool, bool, bool, bool] | None = None
    text: str | None = None
    font_size: int = 0
    color: str = COLORS["text_light"]
    align: str = "center"
    shadow: bool = False
    status: str | None = None
    children: tuple["Node", ...] = ()


def walk(node: Node) -> Iterator[Node]:
    yield node
    for child in node.children:
        yield from walk(child)


def format_time_range(start_hour: int) -> str:
    end_hour = start_hour + 1
    return f"{start_hour:02d}-{end_hour:02d}"


def _text(x: int, y: int, width: int, height: int, text: str, size: int, color: str, **extra) -> Node:
    return Node(x, y, width, height, role="text", text=text, font_size=size, color=color, **extra)


def _cell_texts(x: int, y: int, hour: int, label: str, color: str, spec: GridSpec) -> tuple[Node, ...]:
    block = spec.hour_font + 2 + spec.label_font
    top = y + (spec.cell - block) // 2
    return (
        _text(x, top, spec.cell, spec.hour_font, format_time_range(hour), spec.hour_font, color, shadow=True),
        _text(
            x,
            top + spec.hour_font + 2,
            spec.cell,
            spec.label_font,
            label,
            spec.label_font,
            color,
            shadow=True,
        ),
    )


def build_cell(hour: int, status: str, x: int, y: int, spec: GridSpec) -> Node:
    """Cell for display hour ``hour`` (0-23) with the raw status code."""
    style = STATUS_STYLES.get(status, UNKNOWN_STATUS)

    if isinstance(style, SplitStatus):
        half = spec.cell // 2
        return Node(
            x,
            y,
            spec.cell,
            spec.cell,
            role="cell",
            status=status,
            children=(
                Node(x, y, spec.cell, half, role="half", fill=style.top, radius=spec.radius, corners=TOP_CORNERS),
                Node(
                    x,
                    y + half,
                    spec.cell,
                    spec.cell - half,
                    role="half",
                    fill=style.bottom,
                    radius=spec.radius,
                    corners=BOTTOM_CORNERS,
                ),
                *_cell_texts(x, y, hour, SPLIT_LABEL, COLORS["text_light"], spec),
            ),
        )

    return Node(
        x,
        y,
        spec.cell,
        spec.cell,
        role="cell",
        fill=style.bg,
        radius=spec.radius,
        status=status,
        children=_cell_texts(x, y, hour, style.label, style.text_color, spec),
    )


def build_half_section(hours: DaySchedule, start_hour: int, x: int, y: int, spec: GridSpec) -> Node:
    cells: list[Node] = []
    for row in range(ROWS_PER_HALF):
        for col in range(COLS):
            display_hour = start_hour + row * COLS + col
            # Upstream keys are 1-based: key "h" covers [h-1, h).
            status = hours.get(str(display_hour + 1), "no")
            cells.append(
                build_cell(
                    display_hour,
                    status,
                    x + col * (spec.cell + spec.gap),
                    y + row * (spec.cell + spec.gap),
                    spec,
                )
            )
    return Node(x, y, spec.width, spec.half_height, role="section", children=tuple(cells))


def _divider(center_x: int, y: int, width: int) -> Node:
    return Node(center_x - width // 2, y, width, 2, role="divider", fill=COLORS["divider"])


def build_legend(x: int, y: int, width: int) -> Node:
    slot = width // len(LEGEND_ITEMS)
    swatch_top = y + (LEGEND_HEIGHT - LEGEND_SWATCH) // 2
    items: list[Node] = []

    for index, item in enumerate(LEGEND_ITEMS):
        slot_x = x + index * slot
        if isinstance(item, SplitStatus):
            half = LEGEND_SWATCH // 2
            swatch = Node(
                slot_x,
                swatch_top,
                LEGEND_SWATCH,
                LEGEND_SWATCH,
                children=(
                    Node(slot_x, swatch_top, LEGEND_SWATCH, half, fill=item.top, radius=8, corners=TOP_CORNERS),
                    Node(
                        slot_x,
                        swatch_top + half,
                        LEGEND_SWATCH,
                        LEGEND_SWATCH - half,
                        fill=item.bottom,
                        radius=8,
                        corners=BOTTOM_CORNERS,
                    ),
                ),
            )
            label = LEGEND_SPLIT_LABEL
        else:
            swatch = Node(slot_x, swatch_top, LEGEND_SWATCH, LEGEND_SWATCH, fill=item.bg, radius=8)
            label = item.label

        text_x = slot_x + LEGEND_SWATCH + 12
        items.append(swatch)
        text_width = slot - LEGEND_SWATCH - 12
        items.append(
            _text(text_x, y, text_width, LEGEND_HEIGHT, label, LEGEND_FONT_SIZE, COLORS["legend"], align="left")
        )

    return Node(x, y, width, LEGEND_HEIGHT, role="legend", children=tuple(items))


def build_outage_table(hours: DaySchedule | None, date_label: str | None = None) -> Node:
    hours = hours or {}
    spec = FULL_GRID
    center = IMAGE_WIDTH // 2
    header_height = 40 + (4 + 24 if date_label else 0)
    content_height = header_height + 10 + spec.half_height + 10 + 2 + 10 + spec.half_height + 10 + LEGEND_HEIGHT
    grid_x = (IMAGE_WIDTH - spec.width) // 2

    y = (IMAGE_HEIGHT - content_height) // 2
    children: list[Node] = [_text(0, y, IMAGE_WIDTH, 40, TITLE_TEXT, 40, COLORS["title"])]
    y += 40
    if date_label:
        y += 4
        children.append(_text(0, y, IMAGE_WIDTH, 24, date_label, 24, COLORS["subtitle"]))
        y += 24

    y += 10
    children.append(build_half_section(hours, 0, grid_x, y, spec))
    y += spec.half_height + 10
    children.append(_divider(center, y, int((IMAGE_WIDTH - 32) * 0.9)))
    y += 2 + 10
    children.append(build_half_section(hours, HOURS_PER_HALF, grid_x, y, spec))
    y += spec.half_height + 10
    children.append(build_legend(grid_x, y, spec.width))

    return Node(0, 0, IMAGE_WIDTH, IMAGE_HEIGHT, role="root", fill=COLORS["bg"], children=tuple(children))


def _day_column(hours: DaySchedule, subtitle: str, x: int, y: int, spec: GridSpec) -> Node:
    top = y
    children = [_text(x, y, spec.width, 20, subtitle, 20, COLORS["subtitle"])]
    y += 20 + 6
    children.append(build_half_section(hours, 0, x, y, spec))
    y += spec.half_height + 6
    children.append(_divider(x + spec.width // 2, y, int(spec.width * 0.9)))
    y += 2 + 6
    children.append(build_half_section(hours, HOURS_PER_HALF, x, y, spec))
    y += spec.half_height
    return Node(x, top, spec.width, y - top, role="day", children=tuple(children))


def build_combined_outage_table(
    today_hours: DaySchedule | None,
    today_label: str,
    tomorrow_hours: DaySchedule | None,
    tomorrow_label: str,
) -> Node:
    spec = COMPACT_GRID
    column_gap = 24
    total_width = spec.width * 2 + column_gap * 2 + 2
    column_height = 20 + 6 + spec.half_height + 6 + 2 + 6 + spec.half_height
    content_height = 32 + 10 + column_height + 10 + LEGEND_HEIGHT

    x = (COMBINED_IMAGE_WIDTH - total_width) // 2
    y = (COMBINED_IMAGE_HEIGHT - content_height) // 2
    children: list[Node] = [_text(0, y, COMBINED_IMAGE_WIDTH, 32, TITLE_TEXT, 32, COLORS["title"])]
    y += 32 + 10

    today = _day_column(today_hours or {}, f"Сьогодні — {today_label}", x, y, spec)
    separator_x = x + spec.width + column_gap
    separator = Node(separator_x, y, 2, column_height, role="divider", fill=COLORS["divider"])
    tomorrow_x = separator_x + 2 + column_gap
    tomorrow = _day_column(tomorrow_hours or {}, f"Завтра — {tomorrow_label}", tomorrow_x, y, spec)
    children.extend((today, separator, tomorrow))
    y += column_height + 10

    children.append(build_legend(x, y, total_width))
    return Node(
        0,
        0,
        COMBINED_IMAGE_WIDTH,
        COMBINED_IMAGE_HEIGHT,
        role="root",
        fill=COLORS["bg"],
        children=tuple(children),
    )


FontFactory = Callable[[int], ImageFont.FreeTypeFont]


def truetype_fonts(font_data: bytes) -> FontFactory:
    @functools.lru_cache(maxsize=None)
    def factory(size: int) -> ImageFont.FreeTypeFont:
        return ImageFont.truetype(io.BytesIO(font_data), size=size)

    return factory


def _draw_node(draw: ImageDraw.ImageDraw, node: Node, fonts: FontFactory) -> None:
    if node.fill is not None and node.role != "root":
        box = (node.x, node.y, node.x + node.width - 1, node.y + node.height - 1)
        radius = min(node.radius, node.width // 2, node.height // 2)
        if radius:
            draw.rounded_rectangle(box, radius=radius, fill=node.fill, corners=node.corners)
        else:
            draw.rectangle(box, fill=node.fill)

    if node.text:
        font = fonts(node.font_size)
        if node.align == "left":
            anchor, position = "lm", (node.x, node.y + node.height / 2)
        else:
            anchor, position = "mm", (node.x + node.width / 2, node.y + node.height / 2)
        if node.shadow:
            draw.text((position[0], position[1] + 2), node.text, font=font, fill="#000000", anchor=anchor)
        draw.text(position, node.text, font=font, fill=node.color, anchor=anchor)


def rasterize(root: Node, fonts: FontFactory) -> bytes:
    try:
        image = Image.new("RGB", (root.width, root.height), root.fill or COLORS["bg"])
        draw = ImageDraw.Draw(image)
        for node in walk(root):
            _draw_node(draw, node, fonts)

        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()
    except Exception as exc:
        raise RenderError(f"rasterization failed: {exc}") from exc
