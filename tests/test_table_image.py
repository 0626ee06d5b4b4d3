from __future__ import annotations

import io

import pytest
from PIL import Image, ImageFont

from dtek_bot.core.errors import RenderError
from dtek_bot.presentation.table_image import (
    COLORS,
    COMBINED_IMAGE_HEIGHT,
    COMBINED_IMAGE_WIDTH,
    IMAGE_HEIGHT,
    IMAGE_WIDTH,
    Node,
    build_combined_outage_table,
    build_outage_table,
    format_time_range,
    rasterize,
    walk,
)
from tests.helpers import build_hours


def _default_fonts(size: int) -> ImageFont.FreeTypeFont:
    return ImageFont.load_default(size)


def _cells(root: Node) -> list[Node]:
    return [node for node in walk(root) if node.role == "cell"]


def test_format_time_range() -> None:
    assert format_time_range(0) == "00-01"
    assert format_time_range(23) == "23-24"


def test_outage_table_has_one_cell_per_hour() -> None:
    hours = build_hours("yes", {1: "no", 13: "first", 24: "mfirst"})

    root = build_outage_table(hours, "15 червня")
    cells = _cells(root)

    assert (root.width, root.height) == (IMAGE_WIDTH, IMAGE_HEIGHT)
    assert len(cells) == 24
    assert [cell.status for cell in cells[:2]] == ["no", "yes"]
    assert cells[0].fill == COLORS["red"]
    assert cells[23].fill == COLORS["yellow"]
    assert [node.text for node in walk(root) if node.text == "15 червня"] == ["15 червня"]


def test_split_cell_has_two_colored_halves() -> None:
    root = build_outage_table(build_hours("yes", {13: "first", 14: "second"}))
    cells = _cells(root)

    first, second = cells[12], cells[13]
    first_halves = [child.fill for child in first.children if child.role == "half"]
    second_halves = [child.fill for child in second.children if child.role == "half"]

    assert first.fill is None
    assert first_halves == [COLORS["red"], COLORS["green"]]
    assert second_halves == [COLORS["green"], COLORS["red"]]
    assert [child.text for child in first.children if child.role == "text"] == ["12-13", "частково"]


def test_missing_hours_render_as_outage_and_unknown_as_placeholder() -> None:
    cells = _cells(build_outage_table({"2": "bogus"}))

    assert cells[0].status == "no"
    assert cells[1].fill == COLORS["fallback"]
    assert [child.text for child in cells[1].children] == ["01-02", "—"]


def test_combined_table_has_two_day_columns() -> None:
    root = build_combined_outage_table(build_hours(), "15 червня", build_hours("no"), "16 червня")
    days = [node for node in walk(root) if node.role == "day"]

    assert (root.width, root.height) == (COMBINED_IMAGE_WIDTH, COMBINED_IMAGE_HEIGHT)
    assert len(days) == 2
    assert {cell.status for cell in _cells(days[0])} == {"yes"}
    assert {cell.status for cell in _cells(days[1])} == {"no"}
    assert days[0].children[0].text == "Сьогодні — 15 червня"
    assert days[1].children[0].text == "Завтра — 16 червня"


def test_rasterize_produces_png() -> None:
    root = build_outage_table(build_hours("yes", {5: "second", 9: "no"}), "15 червня")

    png = rasterize(root, _default_fonts)

    with Image.open(io.BytesIO(png)) as image:
        assert image.format == "PNG"
        assert image.size == (IMAGE_WIDTH, IMAGE_HEIGHT)


def test_rasterize_wraps_font_failures() -> None:
    def broken_fonts(size: int) -> ImageFont.FreeTypeFont:
        raise OSError("no font")

    with pytest.raises(RenderError):
        rasterize(build_outage_table(build_hours()), broken_fonts)
