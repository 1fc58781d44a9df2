"""
どこで: `engine.core.layout`。
何を: 文字列を 1 文字ずつ配置し（送り = グリフ幅 + 字間）、パス歩行器で頂点/線分を積む。
      その後、中心化と詰め込みまでを通して `TessellationResult` を返す。
なぜ: 文字列→線分ジオメトリの入口を 1 関数にまとめ、呼び出しごとに新しい状態で再入可能にするため。

方針:
- 送り量はフォントの advance ではなくアウトライン bbox の幅（`x2 - x1`）+ `spacing`。
  空白など空のグリフも照会し、幅 0 + `spacing` だけ進む（特別扱いしない）。
- 色は `palette[文字位置 % len(palette)]` を、その文字で出した全頂点に複製する。
- 文字が解決できないときは `missing_glyph` に従う。`"raise"`（既定）は例外を伝搬して
  パス全体を中止し、`"skip"` は警告を出して `spacing` だけ進める。
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from common.types import RGBA
from glyphs.errors import GlyphResolutionError
from glyphs.provider import GlyphProvider

from .centering import center_and_finalize
from .layout_state import LayoutState
from .path_walker import walk_path
from .tessellation import TessellationResult, assemble

logger = logging.getLogger(__name__)

MISSING_GLYPH_POLICIES = ("raise", "skip")


def accumulate_glyphs(
    text: Sequence[str],
    provider: GlyphProvider,
    spacing: float,
    *,
    size: float = 200.0,
    scale_factor: float = 1000.0,
    palette: Sequence[RGBA] | None = None,
    missing_glyph: str = "raise",
    curve_mode: str | None = None,
    flatten_segment_length: float | None = None,
) -> LayoutState:
    """全文字を歩いた直後（中心化前）の `LayoutState` を返す。

    Raises
    ------
    GlyphResolutionError
        `missing_glyph="raise"` で文字が解決できない場合。
    ValueError
        `spacing < 0`、空パレット、未知の `missing_glyph` の場合。

    `curve_mode` / `flatten_segment_length` は指定時のみ `provider.get_outline` へ渡す。
    """
    if spacing < 0:
        raise ValueError(f"letter spacing must be non-negative: got {spacing}")
    if missing_glyph not in MISSING_GLYPH_POLICIES:
        raise ValueError(
            f"missing_glyph must be one of {MISSING_GLYPH_POLICIES}: got {missing_glyph!r}"
        )
    if palette is not None and len(palette) == 0:
        raise ValueError("palette must contain at least one color")

    curve: dict[str, object] = {}
    if curve_mode is not None:
        curve["curve_mode"] = curve_mode
    if flatten_segment_length is not None:
        curve["flatten_segment_length"] = flatten_segment_length

    state = LayoutState(scale_factor=float(scale_factor), with_colors=palette is not None)
    for i, ch in enumerate(text):
        color = palette[i % len(palette)] if palette is not None else None
        try:
            glyph = provider.get_outline(ch, size, **curve)
        except GlyphResolutionError:
            if missing_glyph == "raise":
                raise
            logger.warning("Skipping character %r (U+%04X): no outline", ch, ord(ch))
            state.glyph_spans.append((state.offset_x, state.vertex_index, state.vertex_index))
            state.advance(0.0, spacing)
            continue

        first = state.vertex_index
        x_offset = state.offset_x
        walk_path(glyph.commands, x_offset, state, color)
        state.glyph_spans.append((x_offset, first, state.vertex_index))
        state.advance(glyph.bbox.width, spacing)
    return state


def finalize(state: LayoutState) -> TessellationResult:
    """`LayoutState` を中心化して `TessellationResult` に詰める。"""
    raw = np.asarray(state.positions, dtype=np.float64).reshape(-1, 3)
    centered = center_and_finalize(raw, state)
    colors = state.colors if state.with_colors else None
    return assemble(centered, colors, state.indices)


def layout_glyphs(
    text: Sequence[str],
    provider: GlyphProvider,
    spacing: float,
    *,
    size: float = 200.0,
    scale_factor: float = 1000.0,
    palette: Sequence[RGBA] | None = None,
    missing_glyph: str = "raise",
    curve_mode: str | None = None,
    flatten_segment_length: float | None = None,
) -> TessellationResult:
    """文字列を線分ジオメトリへ変換する（配置 → 歩行 → 中心化 → 詰め込み）。

    空文字列は空の結果（頂点 0・線分 0）になる。
    """
    state = accumulate_glyphs(
        text,
        provider,
        spacing,
        size=size,
        scale_factor=scale_factor,
        palette=palette,
        missing_glyph=missing_glyph,
        curve_mode=curve_mode,
        flatten_segment_length=flatten_segment_length,
    )
    result = finalize(state)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Tessellated %d chars: vertices=%d segments=%d",
            len(text),
            result.vertex_count,
            result.segment_count,
        )
    return result


__all__ = ["MISSING_GLYPH_POLICIES", "accumulate_glyphs", "finalize", "layout_glyphs"]
