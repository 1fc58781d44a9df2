"""
どこで: `api` 入口（高レベル公開 API）。
何を: テッセレーション入口・更新サービス・構成・フォント読み込みを再輸出。
なぜ: 利用者が単一名前空間から「フォントを開く → 文字列を線分ジオメトリにする」まで完結できるようにするため。

Usage:
    from api import TessellationConfig, load_font_sync, tessellate_text

    font = load_font_sync("DejaVuSans.ttf")
    result = tessellate_text("ERKAM", font, TessellationConfig(letter_spacing=70))
    result.vertices  # float32 (3N,)
    result.indices   # uint16 (2K,)
"""

from engine.core.tessellation import TessellationResult
from glyphs.errors import FontLoadError, GlyphLoadError, GlyphResolutionError
from glyphs.provider import StaticGlyphProvider, load_font, load_font_sync

from .config import TessellationConfig
from .text import TextGeometryService, open_font, tessellate_text, tessellate_text_async

__all__ = [
    "TessellationConfig",
    "TessellationResult",
    "TextGeometryService",
    "tessellate_text",
    "tessellate_text_async",
    "open_font",
    "load_font",
    "load_font_sync",
    "StaticGlyphProvider",
    "FontLoadError",
    "GlyphLoadError",
    "GlyphResolutionError",
]

__version__ = "0.1.0"
