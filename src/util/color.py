"""
どこで: `util.color`。
何を: 色指定の正規化（Hex, RGB(A) 0–1, RGB(A) 0–255）とパレットの正規化。
なぜ: 構成ファイル/CLI/API のどこから来たパレットでも、頂点色として同じ RGBA(0–1) に揃えるため。
"""

from __future__ import annotations

from typing import Iterable, Sequence

from common.types import RGBA

# 赤・緑・青・黄・マゼンタ・シアン
DEFAULT_PALETTE: tuple[RGBA, ...] = (
    (1.0, 0.0, 0.0, 1.0),
    (0.0, 1.0, 0.0, 1.0),
    (0.0, 0.0, 1.0, 1.0),
    (1.0, 1.0, 0.0, 1.0),
    (1.0, 0.0, 1.0, 1.0),
    (0.0, 1.0, 1.0, 1.0),
)


def _clamp01(x: float) -> float:
    return 0.0 if x < 0.0 else 1.0 if x > 1.0 else float(x)


def parse_hex_color_str(s: str) -> RGBA:
    """Hex 文字列から RGBA(0–1) を返す。

    受理形式: "#RRGGBB", "#RRGGBBAA", "0xRRGGBB", "0xRRGGBBAA", "RRGGBB", "RRGGBBAA"。
    """
    t = s.strip()
    if t.startswith("#"):
        t = t[1:]
    elif t.lower().startswith("0x"):
        t = t[2:]
    if len(t) not in (6, 8):
        raise ValueError(f"invalid hex color length: '{s}' (expected RRGGBB or RRGGBBAA)")
    try:
        r = int(t[0:2], 16)
        g = int(t[2:4], 16)
        b = int(t[4:6], 16)
        a = int(t[6:8], 16) if len(t) == 8 else 255
    except ValueError as e:
        raise ValueError(f"invalid hex color: '{s}'") from e
    return (r / 255.0, g / 255.0, b / 255.0, a / 255.0)


def normalize_color(value: object) -> RGBA:
    """色を RGBA(0–1) へ正規化する。

    - 受理: Hex 文字列, (r,g,b[,a])（全要素 0–1 ならそのまま、そうでなければ 0–255 とみなす）
    - アルファ省略時は 1.0
    """
    if isinstance(value, str):
        return parse_hex_color_str(value)
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"unsupported color type: {type(value)!r}")
    if len(value) not in (3, 4):
        raise ValueError("color tuple/list must be length 3 or 4")
    try:
        comps = [float(c) for c in value]
    except (TypeError, ValueError) as e:
        raise ValueError(f"invalid color tuple/list: {value!r}") from e
    if len(comps) == 3:
        if all(0.0 <= c <= 1.0 for c in comps):
            comps.append(1.0)
        else:
            comps.append(255.0)
    if all(0.0 <= c <= 1.0 for c in comps):
        r, g, b, a = comps
        return (_clamp01(r), _clamp01(g), _clamp01(b), _clamp01(a))
    r8, g8, b8, a8 = (max(0, min(255, int(round(c)))) for c in comps)
    return (r8 / 255.0, g8 / 255.0, b8 / 255.0, a8 / 255.0)


def normalize_palette(values: Iterable[object] | None) -> tuple[RGBA, ...]:
    """パレット（色の並び）を RGBA(0–1) のタプルへ正規化する。

    None は既定パレット。空のパレットは文字位置で引けないため ValueError。
    """
    if values is None:
        return DEFAULT_PALETTE
    palette = tuple(normalize_color(v) for v in values)
    if not palette:
        raise ValueError("palette must contain at least one color")
    return palette


def palette_color(palette: Sequence[RGBA], position: int) -> RGBA:
    """文字位置 `position` に対応する色（`position mod len(palette)`）。"""
    return palette[position % len(palette)]


__all__ = [
    "DEFAULT_PALETTE",
    "parse_hex_color_str",
    "normalize_color",
    "normalize_palette",
    "palette_color",
]
