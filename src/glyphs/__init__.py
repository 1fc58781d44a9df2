"""
どこで: `glyphs` パッケージ。
何を: パスコマンド/グリフの型、フォントアウトライン供給器、例外を再輸出。
なぜ: engine/api からはこの名前空間だけを参照すれば済むようにするため。
"""

from .commands import (
    BoundingBox,
    ClosePath,
    CubicTo,
    Glyph,
    LineTo,
    MoveTo,
    PathCommand,
    QuadTo,
    commands_from_recording,
    make_glyph,
)
from .errors import FontLoadError, GlyphLoadError, GlyphResolutionError, WiretextError
from .provider import (
    FontHandle,
    GlyphProvider,
    StaticGlyphProvider,
    load_font,
    load_font_sync,
)

__all__ = [
    "BoundingBox",
    "ClosePath",
    "CubicTo",
    "Glyph",
    "LineTo",
    "MoveTo",
    "PathCommand",
    "QuadTo",
    "commands_from_recording",
    "make_glyph",
    "FontLoadError",
    "GlyphLoadError",
    "GlyphResolutionError",
    "WiretextError",
    "FontHandle",
    "GlyphProvider",
    "StaticGlyphProvider",
    "load_font",
    "load_font_sync",
]
