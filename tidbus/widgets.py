"""Layout widgets that draw text and charts onto a draw target."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from itertools import zip_longest
from typing import Protocol

from tidbus.bdf import Font
from tidbus.canvas import DrawTarget
from tidbus.colors import SolidColor, adjusted_color

# Display width with 2px of buffer built in.
WIDTH = 61
SPACE_ADVANCE = 2.0
TEXT_HEIGHT = 8.0
CHART_HEIGHT = 5
CHART_MAX_BAR = 8.0
DEFAULT_STACK_HEIGHT = 5

Point = tuple[float, float]


class _Widget(Protocol):
    def measure(self) -> Point: ...

    def frame_count(self) -> int: ...

    def render(self, target: DrawTarget, point: Point, frame: int) -> None: ...


class TextAlign(Enum):
    """Which way text runs from its starting point."""

    LEFT = "left"
    RIGHT = "right"


def _round(value: float) -> int:
    rounded = math.floor(abs(value) + 0.5)
    return max(0, rounded if value >= 0 else -rounded)


def _trunc_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


def advance(font: Font, char: str) -> float:
    """Horizontal distance the pen moves after drawing ``char``."""
    if char == " ":
        return SPACE_ADVANCE
    glyph = font.glyph(char)
    return float(glyph.width) if glyph is not None else 0.0


def draw_text(
    target: DrawTarget,
    font: Font,
    text: str,
    start: Point,
    color: SolidColor,
    align: TextAlign = TextAlign.LEFT,
) -> None:
    """Draw ``text`` with its first (LEFT) or last (RIGHT) glyph at ``start``."""
    x, y = start
    chars = text if align is TextAlign.LEFT else reversed(text)
    direction = 1.0 if align is TextAlign.LEFT else -1.0
    for char in chars:
        glyph = font.glyph(char)
        if glyph is None:
            raise LookupError(f"Could not get glyph for {char!r}")
        for (px, py), lit in glyph.pixels():
            if lit:
                target.fill_rect(x + px, y + py, 1.0, 1.0, color)
        x += advance(font, char) * direction


@dataclass
class TextWidget:
    """A single line of text in one colour."""

    text: str
    color: str
    font: Font
    when: datetime | None = None

    def measure(self) -> Point:
        return sum(advance(self.font, c) for c in self.text), TEXT_HEIGHT

    def frame_count(self) -> int:
        return 1

    def render(self, target: DrawTarget, point: Point, frame: int = 0) -> None:
        color = adjusted_color(self.color, self.when)
        draw_text(target, self.font, self.text, point, color, TextAlign.LEFT)


@dataclass
class ChartWidget:
    """A bar chart with one-pixel-wide bars."""

    data: list[int]
    height: int = CHART_HEIGHT
    when: datetime | None = None

    def measure(self) -> Point:
        return float(len(self.data)), TEXT_HEIGHT

    def frame_count(self) -> int:
        return 1

    def render(self, target: DrawTarget, point: Point, frame: int = 0) -> None:
        x, y = point
        for value in self.data:
            bar = float(value + 1)
            high = bar > CHART_MAX_BAR
            if high:
                bar = CHART_MAX_BAR
            hex_color = "#0ff" if high else "#eee" if bar > 1.0 else "#555"
            color = adjusted_color(hex_color, self.when)
            target.fill_rect(x, y + self.height - bar, 1.0, bar, color)
            x += 1.0


@dataclass
class HStack:
    """Items laid out left to right, spread across the display width."""

    items: list[_Widget] = field(default_factory=list)
    gap: float = 0.0
    expand: bool = False

    def measure(self) -> Point:
        heights = [_round(item.measure()[1]) for item in self.items]
        return float(WIDTH), float(max(heights, default=DEFAULT_STACK_HEIGHT))

    def frame_count(self) -> int:
        return max((item.frame_count() for item in self.items), default=1)

    def render(self, target: DrawTarget, point: Point, frame: int = 0) -> None:
        if not self.items:
            return
        if len(self.items) == 1:
            self.items[0].render(target, point, frame)
            return

        total = sum(_round(item.measure()[0]) for item in self.items)
        gap_count = len(self.items) - 1
        space_between = _trunc_div(WIDTH - total, gap_count)
        spaces = [float(space_between)] * gap_count
        remainder = WIDTH - (total + gap_count * space_between)
        if remainder > 0:
            spaces[-1] += remainder

        x, y = point
        for item, space in zip_longest(self.items, spaces, fillvalue=0.0):
            item.render(target, (x, y), frame)
            x += item.measure()[0] + space


@dataclass
class VStack:
    """Items laid out top to bottom with a fixed gap."""

    items: list[_Widget] = field(default_factory=list)
    gap: float = 0.0

    def measure(self) -> Point:
        return float(WIDTH), float(DEFAULT_STACK_HEIGHT)

    def frame_count(self) -> int:
        return max((item.frame_count() for item in self.items), default=1)

    def render(self, target: DrawTarget, point: Point, frame: int = 0) -> None:
        x, y = point
        for item in self.items:
            item.render(target, (x, y), frame)
            y += item.measure()[1] + self.gap