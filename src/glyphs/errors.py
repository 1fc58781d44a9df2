"""
どこで: `glyphs.errors`。
何を: フォント読み込み/グリフ解決の例外階層。
なぜ: 呼び出し側が「フォントが無い」と「文字が無い」を区別して扱えるようにするため。
"""

from __future__ import annotations


class WiretextError(Exception):
    """本パッケージが送出する例外の基底。"""


class FontLoadError(WiretextError):
    """フォントリソースを取得/解析できなかった。"""

    def __init__(self, source: object, reason: str) -> None:
        super().__init__(f"Font could not be loaded: {source!s}: {reason}")
        self.source = source
        self.reason = reason


class GlyphResolutionError(WiretextError):
    """文字に対応する描画可能なアウトラインが無い。"""

    def __init__(self, char: str, font: object | None = None) -> None:
        code = f"U+{ord(char):04X}" if len(char) == 1 else repr(char)
        where = f" in font '{font}'" if font is not None else ""
        super().__init__(f"No outline for character {char!r} ({code}){where}")
        self.char = char
        self.font = font


GlyphLoadError = GlyphResolutionError


__all__ = ["WiretextError", "FontLoadError", "GlyphResolutionError", "GlyphLoadError"]
