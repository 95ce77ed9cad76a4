import pytest

from tidbus.bdf import BdfError, load_font, parse_bdf

SAMPLE = """STARTFONT 2.1
FONT -sample-small
SIZE 8 75 75
FONTBOUNDINGBOX 3 6 0 -1
STARTPROPERTIES 1
FONT_ASCENT 5
ENDPROPERTIES
CHARS 2
STARTCHAR A
ENCODING 65
SWIDTH 500 0
DWIDTH 4 0
BBX 3 3 0 0
BITMAP
40
A0
E0
ENDCHAR
STARTCHAR unmapped
ENCODING -1
DWIDTH 4 0
BBX 1 1 0 0
BITMAP
80
ENDCHAR
ENDFONT
"""


def test_parses_header():
    font = parse_bdf(SAMPLE)
    assert font.name == "-sample-small"
    assert font.size == 8


def test_glyph_metrics():
    glyph = parse_bdf(SAMPLE).glyph("A")
    assert (glyph.width, glyph.height, glyph.device_width) == (3, 3, 4)
    assert glyph.codepoint == ord("A")


def test_glyph_pixels_follow_bitmap():
    glyph = parse_bdf(SAMPLE).glyph("A")
    lit = {pos for pos, on in glyph.pixels() if on}
    assert lit == {(1, 0), (0, 1), (2, 1), (0, 2), (1, 2), (2, 2)}
    assert len(list(glyph.pixels())) == glyph.width * glyph.height


def test_missing_and_unmapped_glyphs():
    font = parse_bdf(SAMPLE)
    assert font.glyph("Z") is None
    assert "Z" not in font
    assert list(font.glyphs) == ["A"]


@pytest.mark.parametrize(
    "text",
    [
        "FONT x\nENDFONT\n",
        "STARTFONT 2.1\n",
        "STARTFONT 2.1\nSTARTCHAR A\nENCODING 65\nBBX 1 1 0 0\nBITMAP\n80\n",
        "STARTFONT 2.1\nSTARTCHAR A\nBBX 1 1 0 0\nENDCHAR\nENDFONT\n",
        "STARTFONT 2.1\nSTARTCHAR A\nENCODING x\nENDCHAR\nENDFONT\n",
        "STARTFONT 2.1\nSTARTCHAR A\nENCODING 65\nBBX 1 2 0 0\nBITMAP\n80\n",
    ],
)
def test_malformed_documents(text):
    with pytest.raises(BdfError):
        parse_bdf(text)


def test_load_font_matches_parse(tmp_path):
    path = tmp_path / "sample.bdf"
    path.write_text(SAMPLE, encoding="latin-1")
    assert load_font(path) == parse_bdf(SAMPLE)