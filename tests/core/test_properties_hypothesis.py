import numpy as np
import pytest

hypothesis = pytest.importorskip("hypothesis", reason="hypothesis is a test optional dependency")
from hypothesis import given, settings, strategies as st  # type: ignore

from engine.core.layout import layout_glyphs
from glyphs.commands import ClosePath, CubicTo, LineTo, MoveTo, QuadTo
from glyphs.provider import StaticGlyphProvider

coord = st.floats(-500, 500, allow_nan=False, allow_infinity=False)

command = st.one_of(
    st.builds(MoveTo, coord, coord),
    st.builds(LineTo, coord, coord),
    st.builds(CubicTo, coord, coord, coord, coord, coord, coord),
    st.builds(QuadTo, coord, coord, coord, coord),
    st.just(ClosePath()),
)

glyph_cmds = st.lists(command, max_size=12)


@settings(max_examples=60, deadline=None)
@given(a=glyph_cmds, b=glyph_cmds, text=st.text(alphabet="ab", max_size=6), spacing=st.floats(0, 100))
def test_buffer_invariants(a, b, text, spacing):
    provider = StaticGlyphProvider({"a": a, "b": b})
    palette = [(1.0, 0.0, 0.0, 1.0), (0.0, 1.0, 0.0, 1.0), (0.0, 0.0, 1.0, 1.0)]
    res = layout_glyphs(text, provider, spacing, scale_factor=100.0, palette=palette)

    assert res.indices.size % 2 == 0
    if res.indices.size:
        assert int(res.indices.max()) < res.vertex_count
    assert res.colors is not None and res.colors.size == 4 * res.vertex_count

    bounds = res.bounds()
    if bounds is not None:
        min_x, max_x, min_y, max_y = bounds
        assert (min_x + max_x) / 2 == pytest.approx(0.0, abs=1e-4)
        assert (min_y + max_y) / 2 == pytest.approx(0.0, abs=1e-4)
        v = res.vertices.reshape(-1, 3)
        np.testing.assert_array_equal(v[:, 2], 0.0)


@settings(max_examples=30, deadline=None)
@given(a=glyph_cmds, text=st.text(alphabet="a", max_size=4))
def test_idempotent(a, text):
    provider = StaticGlyphProvider({"a": a})
    first = layout_glyphs(text, provider, 10.0)
    second = layout_glyphs(text, provider, 10.0)
    assert first.same_as(second)
