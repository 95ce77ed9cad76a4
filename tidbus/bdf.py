"""Reading bitmap fonts in the BDF format."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path


class BdfError(ValueError):
    """Raised when a BDF document is malformed."""


@dataclass(frozen=True)
class Glyph:
    """A single character bitmap; each bitmap row is left-aligned in ``width`` bits."""

    name: str
    codepoint: int
    width: int
    height: int
    x_offset: int = 0
    y_offset: int = 0
    device_width: int = 0
    bitmap: tuple[int, ...] = ()

    def pixels(self) -> Iterator[tuple[tuple[int, int], bool]]:
        """Yield ((x, y), lit) for every position of the bounding box, row by row."""
        row_bits = (self.width + 7) // 8 * 8
        for y, row in enumerate(self.bitmap):
            for x in range(self.width):
                yield (x, y), bool((row >> (row_bits - 1 - x)) & 1)


@dataclass
class Font:
    """A parsed BDF font, its glyphs keyed by character."""

    name: str = ""
    size: int = 0
    glyphs: dict[str, Glyph] = field(default_factory=dict)

    def glyph(self, char: str) -> Glyph | None:
        """The glyph for ``char``, or None when the font lacks it."""
        return self.glyphs.get(char)

    def __contains__(self, char: object) -> bool:
        return char in self.glyphs


def _ints(rest: str, count: int, keyword: str) -> list[int]:
    parts = rest.split()
    if len(parts) < count:
        raise BdfError(f"{keyword} needs {count} values")
    try:
        return [int(p) for p in parts[:count]]
    except ValueError as exc:
        raise BdfError(f"bad number in {keyword}: {rest!r}") from exc


def _bitmap_row(text: str, width: int) -> int:
    digits = text.strip()
    try:
        value = int(digits, 16)
    except ValueError as exc:
        raise BdfError(f"bad bitmap row: {text!r}") from exc
    needed_bits = (width + 7) // 8 * 8
    present_bits = len(digits) * 4
    if present_bits > needed_bits:
        value >>= present_bits - needed_bits
    elif present_bits < needed_bits:
        value <<= needed_bits - present_bits
    return value


def _parse_char(name: str, lines: Iterator[str]) -> Glyph:
    codepoint: int | None = None
    bbox: list[int] | None = None
    device_width = 0
    bitmap: list[int] = []
    for raw in lines:
        line = raw.strip()
        if not line:
            continue
        keyword, _, rest = line.partition(" ")
        if keyword == "ENCODING":
            codepoint = _ints(rest, 1, keyword)[0]
        elif keyword == "DWIDTH":
            device_width = _ints(rest, 1, keyword)[0]
        elif keyword == "BBX":
            bbox = _ints(rest, 4, keyword)
        elif keyword == "BITMAP":
            if bbox is None:
                raise BdfError(f"glyph {name!r} has BITMAP before BBX")
            for _ in range(bbox[1]):
                row = next(lines, None)
                if row is None:
                    raise BdfError(f"glyph {name!r} bitmap is truncated")
                bitmap.append(_bitmap_row(row, bbox[0]))
        elif keyword == "ENDCHAR":
            if codepoint is None or bbox is None:
                raise BdfError(f"glyph {name!r} lacks ENCODING or BBX")
            width, height, x_offset, y_offset = bbox
            if len(bitmap) != height:
                bitmap.extend([0] * (height - len(bitmap)))
            return Glyph(
                name=name,
                codepoint=codepoint,
                width=width,
                height=height,
                x_offset=x_offset,
                y_offset=y_offset,
                device_width=device_width,
                bitmap=tuple(bitmap),
            )
    raise BdfError(f"glyph {name!r} has no ENDCHAR")


def parse_bdf(text: str) -> Font:
    """Parse a BDF document."""
    lines = iter(text.splitlines())
    font = Font()
    started = False
    for raw in lines:
        line = raw.strip()
        if not line:
            continue
        keyword, _, rest = line.partition(" ")
        if keyword == "STARTFONT":
            started = True
        elif not started:
            raise BdfError("document does not begin with STARTFONT")
        elif keyword == "FONT":
            font.name = rest.strip()
        elif keyword == "SIZE":
            font.size = _ints(rest, 1, keyword)[0]
        elif keyword == "STARTPROPERTIES":
            for prop in lines:
                if prop.strip() == "ENDPROPERTIES":
                    break
            else:
                raise BdfError("properties block has no ENDPROPERTIES")
        elif keyword == "STARTCHAR":
            glyph = _parse_char(rest.strip(), lines)
            if glyph.codepoint >= 0:
                font.glyphs[chr(glyph.codepoint)] = glyph
        elif keyword == "ENDFONT":
            return font
    raise BdfError("document has no ENDFONT")


def load_font(path: str | Path) -> Font:
    """Read and parse a BDF file."""
    return parse_bdf(Path(path).read_text(encoding="latin-1"))