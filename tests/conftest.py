"""共通フィクスチャ。

- 合成グリフ（三角形・正方形・曲線入り）の StaticGlyphProvider
- fontTools.fontBuilder で組み立てた最小 TrueType フォント（システムフォント不要）
"""

from __future__ import annotations

import io

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

from glyphs.commands import ClosePath, CubicTo, LineTo, MoveTo, QuadTo
from glyphs.provider import StaticGlyphProvider

TRIANGLE = [MoveTo(0, 0), LineTo(10, 0), LineTo(5, 10), ClosePath()]
SQUARE = [MoveTo(0, 0), LineTo(4, 0), LineTo(4, 4), LineTo(0, 4), ClosePath()]
BOWL = [
    MoveTo(0, 0),
    CubicTo(0, 8, 8, 8, 8, 0),
    QuadTo(4, -4, 0, 0),
    ClosePath(),
]


@pytest.fixture()
def static_provider() -> StaticGlyphProvider:
    return StaticGlyphProvider({"A": TRIANGLE, "B": SQUARE, "C": BOWL, " ": []})


def _triangle_glyph():
    pen = TTGlyphPen(None)
    pen.moveTo((0, 0))
    pen.lineTo((500, 0))
    pen.lineTo((250, 700))
    pen.closePath()
    return pen.glyph()


def _ring_glyph():
    pen = TTGlyphPen(None)
    pen.moveTo((0, 350))
    pen.qCurveTo((0, 700), (350, 700))
    pen.qCurveTo((700, 700), (700, 350))
    pen.qCurveTo((700, 0), (350, 0))
    pen.qCurveTo((0, 0), (0, 350))
    pen.closePath()
    return pen.glyph()


def build_test_font_bytes() -> bytes:
    """'A'（三角形）, 'O'（二次曲線の輪）, ' '（空）だけを持つ upem=1000 の TrueType。"""
    fb = FontBuilder(1000, isTTF=True)
    order = [".notdef", "A", "O", "space"]
    fb.setupGlyphOrder(order)
    fb.setupCharacterMap({ord("A"): "A", ord("O"): "O", ord(" "): "space"})
    glyphs = {
        ".notdef": TTGlyphPen(None).glyph(),
        "A": _triangle_glyph(),
        "O": _ring_glyph(),
        "space": TTGlyphPen(None).glyph(),
    }
    fb.setupGlyf(glyphs)
    glyf = fb.font["glyf"]
    advances = {".notdef": 500, "A": 600, "O": 800, "space": 250}
    fb.setupHorizontalMetrics(
        {name: (adv, getattr(glyf[name], "xMin", 0)) for name, adv in advances.items()}
    )
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": "Wire Test", "styleName": "Regular"})
    fb.setupOS2(sTypoAscender=800, usWinAscent=800, usWinDescent=200)
    fb.setupPost()
    buf = io.BytesIO()
    fb.save(buf)
    return buf.getvalue()


@pytest.fixture(scope="session")
def test_font_bytes() -> bytes:
    return build_test_font_bytes()


@pytest.fixture()
def test_font_path(tmp_path, test_font_bytes):
    p = tmp_path / "fonts" / "WireTest-Regular.ttf"
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(test_font_bytes)
    return p
