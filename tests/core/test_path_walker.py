from __future__ import annotations

import pytest

from engine.core.layout_state import LayoutState
from engine.core.path_walker import walk_path
from glyphs.commands import ClosePath, CubicTo, LineTo, MoveTo, QuadTo

# What this tests
# - M/L/C/Q/Z ごとの頂点数・線分対（制御多角形ルール）
# - 始点が無い Z は何も出さない
# - x オフセット・スケール・y 反転・bbox 追跡


def _state(**kw) -> LayoutState:
    kw.setdefault("scale_factor", 1.0)
    return LayoutState(**kw)


def test_triangle_closes_back_to_start():
    st = _state()
    walk_path([MoveTo(0, 0), LineTo(10, 0), LineTo(5, 10), ClosePath()], 0.0, st)
    assert st.vertex_index == 3
    assert st.indices == [0, 1, 1, 2, 2, 0]
    assert st.positions == [0.0, -0.0, 0.0, 10.0, -0.0, 0.0, 5.0, -10.0, 0.0]


def test_move_alone_emits_no_segment():
    st = _state()
    walk_path([MoveTo(3, 4)], 0.0, st)
    assert st.vertex_index == 1
    assert st.indices == []


def test_cubic_emits_control_polygon():
    st = _state()
    walk_path([MoveTo(0, 0), CubicTo(1, 5, 9, 5, 10, 0)], 0.0, st)
    assert st.vertex_index == 4
    assert st.indices == [0, 1, 1, 2, 2, 3]
    xs = st.positions[0::3]
    assert xs == [0.0, 1.0, 9.0, 10.0]


@pytest.mark.parametrize(
    "cubic",
    [CubicTo(0, 0, 0, 0, 0, 0), CubicTo(-50, 80, 300, -2, 7, 7), CubicTo(1, 1, 2, 2, 3, 3)],
)
def test_cubic_always_three_vertices_three_pairs(cubic):
    st = _state()
    walk_path([MoveTo(0, 0)], 0.0, st)
    before_v, before_i = st.vertex_index, len(st.indices)
    walk_path([MoveTo(0, 0), cubic], 0.0, st)
    # MoveTo で +1 頂点、CubicTo で +3 頂点 / +3 対
    assert st.vertex_index - before_v == 4
    assert (len(st.indices) - before_i) // 2 == 3


def test_quad_emits_control_and_end():
    st = _state()
    walk_path([MoveTo(0, 0), QuadTo(5, 5, 10, 0), ClosePath()], 0.0, st)
    assert st.vertex_index == 3
    assert st.indices == [0, 1, 1, 2, 2, 0]


def test_close_without_move_is_noop():
    st = _state()
    walk_path([ClosePath()], 0.0, st)
    assert st.vertex_index == 0
    assert st.indices == []
    assert not st.has_bounds


def test_line_without_move_starts_contour():
    st = _state()
    walk_path([LineTo(1, 1), LineTo(2, 1), ClosePath()], 0.0, st)
    assert st.vertex_index == 2
    assert st.indices == [0, 1, 1, 0]


def test_start_and_last_reset_per_glyph():
    st = _state()
    walk_path([MoveTo(0, 0), LineTo(1, 0)], 0.0, st)
    # 次のグリフは前のグリフの頂点へ辺を張らない
    walk_path([LineTo(5, 5), ClosePath()], 0.0, st)
    assert st.indices == [0, 1, 2, 2]


def test_two_contours_close_to_their_own_start():
    st = _state()
    cmds = [
        MoveTo(0, 0), LineTo(1, 0), LineTo(1, 1), ClosePath(),
        MoveTo(5, 5), LineTo(6, 5), ClosePath(),
    ]
    walk_path(cmds, 0.0, st)
    assert st.indices == [0, 1, 1, 2, 2, 0, 3, 4, 4, 3]


def test_offset_scale_flip_and_bounds():
    st = _state(scale_factor=10.0)
    walk_path([MoveTo(0, 0), LineTo(10, 20)], 30.0, st)
    assert st.positions == [3.0, -0.0, 0.0, 4.0, -2.0, 0.0]
    # bbox は y 反転前の向き
    assert st.bounds() == (3.0, 4.0, 0.0, 2.0)


def test_colors_duplicated_per_vertex():
    st = _state(with_colors=True)
    red = (1.0, 0.0, 0.0, 1.0)
    walk_path([MoveTo(0, 0), CubicTo(1, 1, 2, 2, 3, 3)], 0.0, st, red)
    assert len(st.colors) == 4 * st.vertex_index
    assert st.colors == list(red) * 4


def test_missing_color_when_collecting_is_an_error():
    st = _state(with_colors=True)
    with pytest.raises(ValueError):
        walk_path([MoveTo(0, 0)], 0.0, st)


def test_unknown_command_type_raises():
    st = _state()
    with pytest.raises(TypeError):
        walk_path([("moveTo", ((0, 0),))], 0.0, st)  # type: ignore[list-item]
