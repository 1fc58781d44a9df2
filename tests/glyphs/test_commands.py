from __future__ import annotations

from fontTools.pens.recordingPen import RecordingPen

from glyphs.commands import (
    BoundingBox,
    ClosePath,
    CommandPen,
    CubicTo,
    LineTo,
    MoveTo,
    QuadTo,
    bbox_of,
    commands_from_recording,
    make_glyph,
)

# What this tests
# - BasePen 経由で TrueType の暗黙オンカーブ点・複数制御点の曲線が 1 区間ずつに分解される
# - endPath（開いた輪郭）はコマンドを出さない


def test_recording_roundtrip_basic_ops():
    rec = RecordingPen()
    rec.moveTo((0, 0))
    rec.lineTo((10, 0))
    rec.curveTo((10, 5), (5, 10), (0, 10))
    rec.qCurveTo((-5, 5), (0, 0))
    rec.closePath()
    cmds = commands_from_recording(rec.value)
    assert cmds == [
        MoveTo(0, 0),
        LineTo(10, 0),
        CubicTo(10, 5, 5, 10, 0, 10),
        QuadTo(-5, 5, 0, 0),
        ClosePath(),
    ]


def test_qcurve_with_implied_oncurve_points_is_split():
    pen = CommandPen()
    pen.moveTo((0, 0))
    pen.qCurveTo((0, 100), (100, 100), (100, 0))
    pen.closePath()
    assert pen.commands == [
        MoveTo(0, 0),
        QuadTo(0, 100, 50, 100),
        QuadTo(100, 100, 100, 0),
        ClosePath(),
    ]


def test_all_offcurve_contour_gets_implied_start():
    pen = CommandPen()
    pen.qCurveTo((0, 0), (100, 0), (100, 100), (0, 100), None)
    pen.closePath()
    assert pen.commands[0] == MoveTo(0, 50)
    quads = [c for c in pen.commands if isinstance(c, QuadTo)]
    assert len(quads) == 4
    assert (quads[-1].x, quads[-1].y) == (0, 50)


def test_super_bezier_is_decomposed_into_cubics():
    pen = CommandPen()
    pen.moveTo((0, 0))
    pen.curveTo((0, 10), (10, 20), (20, 20), (30, 0))
    cubics = [c for c in pen.commands if isinstance(c, CubicTo)]
    assert len(cubics) == 2
    assert (cubics[-1].x, cubics[-1].y) == (30, 0)


def test_open_contour_has_no_close():
    rec = RecordingPen()
    rec.moveTo((0, 0))
    rec.lineTo((1, 1))
    rec.endPath()
    assert commands_from_recording(rec.value) == [MoveTo(0, 0), LineTo(1, 1)]


def test_bbox_of_includes_control_points():
    cmds = [MoveTo(0, 0), CubicTo(-2, 5, 12, 5, 10, 0)]
    assert bbox_of(cmds) == BoundingBox(-2, 0, 12, 5)
    assert bbox_of([]) == BoundingBox()
    assert BoundingBox(1, 2, 4, 8).width == 3
    g = make_glyph("x", cmds)
    assert g.bbox.width == 14 and not g.is_empty
    assert make_glyph(" ", []).is_empty
