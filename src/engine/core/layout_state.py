"""
どこで: `engine.core.layout_state`。
何を: 1 回のテッセレーション中だけ存在する可変状態 `LayoutState`（送り位置・頂点/インデックス・bbox）。
なぜ: 送り量と頂点番号を暗黙の共有変数ではなく明示の引数として渡し、グリフ単位で検証できるようにするため。

座標系:
- 頂点は供給器の座標（`FontHandle` は y 下向きの画面座標）を `scale_factor` で割り、y を反転した
  描画座標（y 上向き）で積む。
- bbox は同じく `scale_factor` で割った値だが、y は反転前（供給器の向き）で追跡する。
  中心化で x は `-cx`、y は `+cy` とずらすのはこのため。
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from common.types import RGBA


@dataclass
class LayoutState:
    """テッセレーション 1 パス分の可変状態（パスの呼び出し元が排他的に所有する）。"""

    scale_factor: float = 1000.0
    with_colors: bool = False
    offset_x: float = 0.0
    vertex_index: int = 0
    min_x: float = math.inf
    max_x: float = -math.inf
    min_y: float = math.inf
    max_y: float = -math.inf
    positions: list[float] = field(default_factory=list)
    colors: list[float] = field(default_factory=list)
    indices: list[int] = field(default_factory=list)
    # 文字ごとの (x オフセット, 先頭頂点, 終端頂点)。`accumulate_glyphs()` の戻り値から
    # 文字単位の頂点範囲を引くための記録で、`finalize()` は読まない
    glyph_spans: list[tuple[float, int, int]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.scale_factor:
            raise ValueError("scale_factor must be non-zero")

    # ---------- emit ----------
    def add_vertex(self, x: float, y: float, color: RGBA | None = None) -> int:
        """フォント座標 (x, y) の頂点を 1 つ積み、その番号を返す。"""
        sx = float(x) / self.scale_factor
        sy = float(y) / self.scale_factor
        self.positions.extend((sx, -sy, 0.0))
        if self.with_colors:
            if color is None:
                raise ValueError("color is required when colors are collected")
            r, g, b, a = color
            self.colors.extend((r, g, b, a))
        if sx < self.min_x:
            self.min_x = sx
        if sx > self.max_x:
            self.max_x = sx
        if sy < self.min_y:
            self.min_y = sy
        if sy > self.max_y:
            self.max_y = sy
        idx = self.vertex_index
        self.vertex_index += 1
        return idx

    def add_segment(self, a: int, b: int) -> None:
        self.indices.append(a)
        self.indices.append(b)

    def advance(self, width: float, spacing: float) -> None:
        """送り位置を `width + spacing` だけ進める（負の送りは許容しない）。"""
        step = float(width) + float(spacing)
        if step < 0.0:
            raise ValueError(f"advance must be non-negative: width={width}, spacing={spacing}")
        self.offset_x += step

    # ---------- query ----------
    @property
    def has_bounds(self) -> bool:
        return self.vertex_index > 0

    def bounds(self) -> tuple[float, float, float, float]:
        """(min_x, max_x, min_y, max_y)。頂点が無ければ ±inf の番兵のまま。"""
        return (self.min_x, self.max_x, self.min_y, self.max_y)

    def center(self) -> tuple[float, float]:
        """bbox 中心。頂点が無ければ (0, 0)。"""
        if not self.has_bounds:
            return (0.0, 0.0)
        return ((self.min_x + self.max_x) / 2.0, (self.min_y + self.max_y) / 2.0)


__all__ = ["LayoutState"]
