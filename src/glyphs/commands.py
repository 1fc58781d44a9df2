"""
どこで: `glyphs.commands`。
何を: グリフアウトラインのパスコマンド（M/L/C/Q/Z）とグリフ（コマンド列 + バウンディングボックス）。
なぜ: フォント実装（fontTools）に依存しない形でパス歩行器へ渡すため。

fontTools のペン描画をこの表現へ落とす `CommandPen` も提供する。`BasePen` を継承するので、
TrueType の暗黙オンカーブ点（複数オフカーブの `qCurveTo`）や 3 点以上の `curveTo` は
基底クラス側で 1 区間ずつに分解されてから届く。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence, Union

from fontTools.pens.basePen import BasePen

Point = tuple[float, float]


@dataclass(frozen=True, slots=True)
class MoveTo:
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class LineTo:
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class CubicTo:
    x1: float
    y1: float
    x2: float
    y2: float
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class QuadTo:
    x1: float
    y1: float
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class ClosePath:
    pass


PathCommand = Union[MoveTo, LineTo, CubicTo, QuadTo, ClosePath]


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """デザイン空間の軸平行バウンディングボックス（空グリフは全て 0）。"""

    x1: float = 0.0
    y1: float = 0.0
    x2: float = 0.0
    y2: float = 0.0

    @property
    def width(self) -> float:
        return self.x2 - self.x1

    @property
    def height(self) -> float:
        return self.y2 - self.y1


@dataclass(frozen=True, slots=True)
class Glyph:
    """1 文字分のアウトライン。

    - `commands`: 描画順のパスコマンド。空白などは空。
    - `bbox`: 送り量（advance）の計算に使う。
    """

    char: str
    commands: tuple[PathCommand, ...] = field(default_factory=tuple)
    bbox: BoundingBox = field(default_factory=BoundingBox)

    @property
    def is_empty(self) -> bool:
        return not self.commands


def bbox_of(commands: Iterable[PathCommand]) -> BoundingBox:
    """コマンド列の全座標（制御点を含む）から外接矩形を求める。

    フォント由来のグリフは `BoundsPen` で曲線の厳密な範囲を使う。ここは静的に組んだ
    グリフ向けの簡易版。
    """
    xs: list[float] = []
    ys: list[float] = []
    for cmd in commands:
        if isinstance(cmd, (MoveTo, LineTo)):
            xs.append(cmd.x)
            ys.append(cmd.y)
        elif isinstance(cmd, CubicTo):
            xs.extend((cmd.x1, cmd.x2, cmd.x))
            ys.extend((cmd.y1, cmd.y2, cmd.y))
        elif isinstance(cmd, QuadTo):
            xs.extend((cmd.x1, cmd.x))
            ys.extend((cmd.y1, cmd.y))
    if not xs:
        return BoundingBox()
    return BoundingBox(min(xs), min(ys), max(xs), max(ys))


def make_glyph(char: str, commands: Sequence[PathCommand]) -> Glyph:
    """コマンド列から `Glyph` を作る（bbox は `bbox_of`）。"""
    cmds = tuple(commands)
    return Glyph(char=char, commands=cmds, bbox=bbox_of(cmds))


class CommandPen(BasePen):
    """fontTools のペンプロトコルを `PathCommand` 列へ記録するペン。

    `endPath`（開いた輪郭）はコマンドを出さない。閉じる辺を描かないだけで、
    それまでの頂点と辺はそのまま残る。
    """

    def __init__(self, glyphSet=None) -> None:
        super().__init__(glyphSet)
        self.commands: list[PathCommand] = []

    def _moveTo(self, pt: Point) -> None:
        self.commands.append(MoveTo(float(pt[0]), float(pt[1])))

    def _lineTo(self, pt: Point) -> None:
        self.commands.append(LineTo(float(pt[0]), float(pt[1])))

    def _curveToOne(self, pt1: Point, pt2: Point, pt3: Point) -> None:
        self.commands.append(
            CubicTo(
                float(pt1[0]),
                float(pt1[1]),
                float(pt2[0]),
                float(pt2[1]),
                float(pt3[0]),
                float(pt3[1]),
            )
        )

    def _qCurveToOne(self, pt1: Point, pt2: Point) -> None:
        self.commands.append(QuadTo(float(pt1[0]), float(pt1[1]), float(pt2[0]), float(pt2[1])))

    def _closePath(self) -> None:
        self.commands.append(ClosePath())

    def _endPath(self) -> None:
        pass


def commands_from_recording(value: Iterable[tuple[str, tuple]]) -> list[PathCommand]:
    """`RecordingPen.value` 互換のタプル列を `PathCommand` 列へ変換する。"""
    pen = CommandPen()
    for operator, operands in value:
        getattr(pen, operator)(*operands)
    return pen.commands


__all__ = [
    "MoveTo",
    "LineTo",
    "CubicTo",
    "QuadTo",
    "ClosePath",
    "PathCommand",
    "BoundingBox",
    "Glyph",
    "bbox_of",
    "make_glyph",
    "CommandPen",
    "commands_from_recording",
]
