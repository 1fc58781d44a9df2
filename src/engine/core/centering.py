"""
どこで: `engine.core.centering`。
何を: 全文字を積み終えた頂点列を、bbox 中心が原点に来るよう平行移動する。
なぜ: 回転表示の軸を文字列の中央に置くため。全体の bbox が必要なのでグリフ単位では行えない。
"""

from __future__ import annotations

import numpy as np
from numba import njit  # type: ignore[attr-defined]

from common.settings import get as _get_settings

from .layout_state import LayoutState


@njit(fastmath=True, cache=True)
def _shift_xy(vertices: np.ndarray, dx: float, dy: float) -> np.ndarray:
    """x に dx、y に dy を加える（z はそのまま）。"""
    out = vertices.copy()
    out[:, 0] = out[:, 0] + dx
    out[:, 1] = out[:, 1] + dy
    return out


def center_and_finalize(
    raw_vertices: np.ndarray,
    bounds: tuple[float, float, float, float] | LayoutState,
) -> np.ndarray:
    """中心化した頂点列 `(N, 3) float64` を返す（入力は変更しない）。

    Parameters
    ----------
    raw_vertices : np.ndarray
        `(N, 3)` の描画座標（y 反転済み、未中心化）。
    bounds : tuple | LayoutState
        `(min_x, max_x, min_y, max_y)`。y は反転前の向き。`LayoutState` も可。

    Notes
    -----
    y は反転済みなので `-cy` ではなく `+cy` を加える。頂点が無い場合は空配列を返し、
    番兵の ±inf から中心を計算しない。
    """
    verts = np.asarray(raw_vertices, dtype=np.float64).reshape(-1, 3)
    if verts.shape[0] == 0:
        return np.empty((0, 3), dtype=np.float64)

    if isinstance(bounds, LayoutState):
        cx, cy = bounds.center()
    else:
        min_x, max_x, min_y, max_y = bounds
        cx = (min_x + max_x) / 2.0
        cy = (min_y + max_y) / 2.0

    if _get_settings().USE_NUMBA:
        return _shift_xy(np.ascontiguousarray(verts), -cx, cy)
    out = verts.copy()
    out[:, 0] -= cx
    out[:, 1] += cy
    return out


__all__ = ["center_and_finalize"]
