"""Composing upcoming departures into an animated image for the display."""

from __future__ import annotations

import io
import os
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path
from typing import Protocol
from zoneinfo import ZoneInfo

from PIL import Image

from tidbus.arrivals import ExpectedBusArrival
from tidbus.bdf import Font, load_font
from tidbus.canvas import DrawTarget, get_rgba
from tidbus.next_buses import get_next_buses
from tidbus.pusher import push
from tidbus.widgets import HStack, TextWidget, VStack

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
ORIGIN = (2.0, 2.0)
ROWS = 3
ROW_GAP = 2.0
TEXT_COLOR = "#fff"
TIME_FORMAT = "%H:%M"
TIMEZONE_VAR = "OUTPUT_TIMEZONE"
DEFAULT_FONT_PATH = "fonts/tb-8.bdf"


class RenderError(RuntimeError):
    """Raised when the display image cannot be produced."""


class _Layout(Protocol):
    def frame_count(self) -> int: ...

    def render(self, target: DrawTarget, point: tuple[float, float], frame: int) -> None: ...


@dataclass(frozen=True)
class RenderArgs:
    """Options for one render: where to write a debug file and how often to retry."""

    debug: str | None = None
    retry: int | None = None
    font_path: str = DEFAULT_FONT_PATH


def _resolve_timezone(zone: tzinfo | str) -> tzinfo:
    return ZoneInfo(zone) if isinstance(zone, str) else zone


def build_layout(
    arrivals: Sequence[ExpectedBusArrival], timezone: tzinfo | str, font: Font
) -> VStack:
    """One row per departure: the line name and its departure time."""
    if len(arrivals) != ROWS:
        raise ValueError(f"expected {ROWS} arrivals, got {len(arrivals)}")
    zone = _resolve_timezone(timezone)
    rows = [
        HStack(
            items=[
                TextWidget(arrival.line, TEXT_COLOR, font),
                TextWidget(
                    arrival.expected_time.astimezone(zone).strftime(TIME_FORMAT),
                    TEXT_COLOR,
                    font,
                ),
            ]
        )
        for arrival in arrivals
    ]
    return VStack(items=rows, gap=ROW_GAP)


def render_frames(
    layout: _Layout, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT
) -> list[bytes]:
    """Render every frame of ``layout`` into RGBA bytes."""
    frame_count = layout.frame_count()
    print(f"Frame count: {frame_count}")
    frames = []
    for frame in range(frame_count):
        target = DrawTarget(width, height)
        layout.render(target, ORIGIN, frame)
        frames.append(get_rgba(target))
    return frames


def encode_webp(
    frames: Sequence[bytes], width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT
) -> bytes:
    """Encode RGBA frames as a lossless animated WebP."""
    if not frames:
        raise ValueError("no frames to encode")
    images = [Image.frombytes("RGBA", (width, height), bytes(f)) for f in frames]
    buffer = io.BytesIO()
    images[0].save(
        buffer,
        format="WEBP",
        save_all=True,
        append_images=images[1:],
        lossless=True,
    )
    return buffer.getvalue()


def render(args: RenderArgs) -> None:
    """Fetch departures, draw them, and write the image to a file or the device."""
    zone_name = os.environ.get(TIMEZONE_VAR)
    if zone_name is None:
        raise RenderError(f"{TIMEZONE_VAR} is not set")
    zone = ZoneInfo(zone_name)

    arrivals = get_next_buses()
    font = load_font(args.font_path)
    layout = build_layout(arrivals, zone, font)
    contents = encode_webp(render_frames(layout))

    if args.debug is not None:
        Path(args.debug).write_bytes(contents)
    else:
        push(contents)