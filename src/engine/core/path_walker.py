"""
どこで: `engine.core.path_walker`。
何を: 1 グリフ分のパスコマンドを歩き、頂点と線分インデックス対を `LayoutState` へ積む。
なぜ: 曲線を平坦化せず制御多角形（制御点を直線で結んだもの）として描くワイヤーフレーム表現のため。

規則:
- M: 頂点 1 つ。線分なし。輪郭の始点と直前点をこの頂点にする。
- L: 頂点 1 つ。(直前点, 新頂点)。
- C: 制御点 2 つと終点の頂点 3 つ。(直前, c1), (c1, c2), (c2, 終点)。
- Q: 制御点と終点の頂点 2 つ。(直前, c), (c, 終点)。
- Z: 頂点なし。始点と直前点が揃っていれば (直前点, 始点) で閉じる。揃っていなければ何もしない。

M より前に来た L/C/Q は直前点が無いので最初の辺を張らず、その頂点を輪郭の始点として扱う。
"""

from __future__ import annotations

from typing import Iterable

from common.types import RGBA
from glyphs.commands import ClosePath, CubicTo, LineTo, MoveTo, PathCommand, QuadTo

from .layout_state import LayoutState


def walk_path(
    commands: Iterable[PathCommand],
    x_offset: float,
    state: LayoutState,
    color: RGBA | None = None,
) -> None:
    """コマンド列を `state` へ積む。x には `x_offset` を加算する（フォント単位）。"""
    start_index: int | None = None
    last_index: int | None = None

    def _chain(idx: int) -> None:
        nonlocal start_index, last_index
        if last_index is not None:
            state.add_segment(last_index, idx)
        elif start_index is None:
            start_index = idx
        last_index = idx

    for cmd in commands:
        if isinstance(cmd, MoveTo):
            start_index = state.add_vertex(cmd.x + x_offset, cmd.y, color)
            last_index = start_index
        elif isinstance(cmd, LineTo):
            _chain(state.add_vertex(cmd.x + x_offset, cmd.y, color))
        elif isinstance(cmd, CubicTo):
            c1 = state.add_vertex(cmd.x1 + x_offset, cmd.y1, color)
            c2 = state.add_vertex(cmd.x2 + x_offset, cmd.y2, color)
            end = state.add_vertex(cmd.x + x_offset, cmd.y, color)
            _chain(c1)
            _chain(c2)
            _chain(end)
        elif isinstance(cmd, QuadTo):
            c = state.add_vertex(cmd.x1 + x_offset, cmd.y1, color)
            end = state.add_vertex(cmd.x + x_offset, cmd.y, color)
            _chain(c)
            _chain(end)
        elif isinstance(cmd, ClosePath):
            if start_index is not None and last_index is not None:
                state.add_segment(last_index, start_index)
        else:
            raise TypeError(f"unsupported path command: {cmd!r}")


__all__ = ["walk_path"]
