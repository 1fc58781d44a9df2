"""
どこで: `engine.core.tessellation`。
何を: 中心化済み頂点・色・インデックスを描画境界へ渡すフラットな数値バッファ `TessellationResult` に詰める。
なぜ: 描画側が VBO/IBO へそのまま書き込めるよう、dtype と並び（頂点 3 / 色 4 / 線分 2）を固定するため。

データモデル（不変条件）:
- `vertices: float32 (3N,)`: x, y, z の繰り返し。z は常に 0。
- `indices: uint16 (2K,)`: LINES トポロジの線分対。全要素 < N。
- `colors: float32 (4N,) | None`: 頂点ごとの RGBA。文字ごとの色を頂点数分だけ複製したもの。

頂点数が 65536 を超えると uint16 では番号を表せないため、uint32 へ昇格して警告する。
描画境界は dtype から要素サイズを選ぶ。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

logger = logging.getLogger(__name__)

UINT16_VERTEX_LIMIT = 0xFFFF + 1


@dataclass(frozen=True, slots=True, eq=False)
class TessellationResult:
    """テキスト 1 回分の線分ジオメトリ。作成後は変更しない（更新時は丸ごと差し替える）。"""

    vertices: np.ndarray
    indices: np.ndarray
    colors: np.ndarray | None = None

    @classmethod
    def empty(cls, *, with_colors: bool = False) -> "TessellationResult":
        return assemble(
            np.empty((0, 3), dtype=np.float32),
            np.empty((0, 4), dtype=np.float32) if with_colors else None,
            (),
        )

    @property
    def vertex_count(self) -> int:
        return int(self.vertices.size // 3)

    @property
    def segment_count(self) -> int:
        return int(self.indices.size // 2)

    @property
    def is_empty(self) -> bool:
        return self.vertices.size == 0

    def as_arrays(self) -> tuple[np.ndarray, np.ndarray, np.ndarray | None]:
        """`(N,3)` 頂点・`(K,2)` 線分・`(N,4)` 色のビューを返す（読み取り専用）。"""
        v = self.vertices.reshape(-1, 3)
        i = self.indices.reshape(-1, 2)
        c = self.colors.reshape(-1, 4) if self.colors is not None else None
        return v, i, c

    def bounds(self) -> tuple[float, float, float, float] | None:
        """頂点の (min_x, max_x, min_y, max_y)。空なら None。"""
        if self.is_empty:
            return None
        v = self.vertices.reshape(-1, 3)
        return (
            float(v[:, 0].min()),
            float(v[:, 0].max()),
            float(v[:, 1].min()),
            float(v[:, 1].max()),
        )

    def same_as(self, other: "TessellationResult") -> bool:
        """バッファ内容（dtype とバイト列）が完全に一致するか。"""
        if (self.colors is None) != (other.colors is None):
            return False
        pairs = [(self.vertices, other.vertices), (self.indices, other.indices)]
        if self.colors is not None and other.colors is not None:
            pairs.append((self.colors, other.colors))
        return all(a.dtype == b.dtype and a.tobytes() == b.tobytes() for a, b in pairs)


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


def assemble(
    centered_vertices: np.ndarray,
    colors: np.ndarray | Sequence[float] | None,
    indices: np.ndarray | Sequence[int],
) -> TessellationResult:
    """頂点/色/インデックスを連続メモリのフラット配列に詰める。

    入力の順序はそのまま保つ。検証は行わない（不整合は上流の不具合であり利用者向けのエラーではない）。
    """
    verts = np.ascontiguousarray(np.asarray(centered_vertices, dtype=np.float32).reshape(-1))
    n_verts = verts.size // 3

    if n_verts > UINT16_VERTEX_LIMIT:
        logger.warning(
            "Vertex count %d exceeds the uint16 index range; promoting indices to uint32",
            n_verts,
        )
        index_dtype: type = np.uint32
    else:
        index_dtype = np.uint16
    inds = np.ascontiguousarray(np.asarray(indices, dtype=np.int64).reshape(-1).astype(index_dtype))

    cols = None
    if colors is not None:
        cols = _readonly(
            np.ascontiguousarray(np.asarray(colors, dtype=np.float32).reshape(-1))
        )

    return TessellationResult(vertices=_readonly(verts), indices=_readonly(inds), colors=cols)


__all__ = ["TessellationResult", "assemble", "UINT16_VERTEX_LIMIT"]
