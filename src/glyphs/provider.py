"""
どこで: `glyphs.provider`。
何を: フォントアウトライン供給（フォント読み込み、文字→`Glyph` 解決、LRU キャッシュ）。
なぜ: テッセレーション側を fontTools から切り離し、`get_outline(char, size)` だけに依存させるため。

- `load_font()` は 1 回だけ解決する `Future` を返す（成功: `FontHandle` / 失敗: `FontLoadError`）。
- `FontHandle.get_outline()` はロード後に同期で呼べる。座標は `size / unitsPerEm` 倍で、y は下向き
  （フォントの y 上向きを反転した画面座標）。エンジン側の `-y` で描画座標の y 上向きに戻る。
- `get_outline(char, size, curve_mode=..., flatten_segment_length=...)` で曲線の扱いを呼び出しごとに
  上書きできる（省略時は供給器の既定）。
- 曲線は既定で制御点のまま返す。`curve_mode="flatten"` なら fontPens の `FlattenPen` で
  おおよそ `flatten_segment_length` 単位の折れ線に置き換える。
"""

from __future__ import annotations

import io
import logging
import threading
from collections import OrderedDict
from concurrent.futures import Future
from pathlib import Path
from typing import Any, Callable, Mapping, Protocol, Sequence

from fontPens.flattenPen import FlattenPen
from fontTools.pens.boundsPen import BoundsPen
from fontTools.pens.recordingPen import DecomposingRecordingPen
from fontTools.pens.transformPen import TransformPen
from fontTools.ttLib import TTFont

from common.settings import get as _get_settings
from util.fonts import debug_fonts, find_font_file, font_search_paths

from .commands import (
    BoundingBox,
    ClosePath,
    CommandPen,
    CubicTo,
    Glyph,
    LineTo,
    MoveTo,
    PathCommand,
    QuadTo,
    bbox_of,
)
from .errors import FontLoadError, GlyphResolutionError

logger = logging.getLogger(__name__)

CURVE_MODES = ("control_polygon", "flatten")

FontSource = str | Path | bytes | bytearray


class GlyphProvider(Protocol):
    """テッセレーションが要求する唯一の契約。"""

    def get_outline(
        self,
        char: str,
        size: float,
        *,
        curve_mode: str | None = None,
        flatten_segment_length: float | None = None,
    ) -> Glyph: ...


class _LRU:
    """単純な上限付き LRU キャッシュ（maxsize=0 で無効）。"""

    def __init__(self, maxsize: int = 4096) -> None:
        self.maxsize = int(maxsize)
        self._od: "OrderedDict[tuple, Glyph]" = OrderedDict()

    def get(self, key: tuple) -> Glyph | None:
        v = self._od.get(key)
        if v is not None:
            self._od.move_to_end(key)
        return v

    def set(self, key: tuple, value: Glyph) -> None:
        if self.maxsize <= 0:
            return
        self._od[key] = value
        self._od.move_to_end(key)
        if len(self._od) > self.maxsize:
            self._od.popitem(last=False)

    def clear(self) -> None:
        self._od.clear()

    def __len__(self) -> int:
        return len(self._od)


def _curve_options(
    curve_mode: str | None,
    flatten_segment_length: float | None,
    default_mode: str,
    default_length: float,
) -> tuple[str, float]:
    mode = default_mode if curve_mode is None else curve_mode
    if mode not in CURVE_MODES:
        raise ValueError(f"curve_mode must be one of {CURVE_MODES}: got {mode!r}")
    seg = default_length if flatten_segment_length is None else float(flatten_segment_length)
    if seg <= 0:
        raise ValueError(f"flatten_segment_length must be positive: got {seg}")
    return mode, seg


class FontHandle:
    """読み込み済みフォント。`get_outline` で `Glyph` を返す。

    TTFont のテーブル遅延読み込みはスレッド安全でないため、解決処理はロックで直列化する。
    """

    def __init__(
        self,
        font: TTFont,
        *,
        name: str,
        curve_mode: str = "control_polygon",
        flatten_segment_length: float = 5.0,
    ) -> None:
        if curve_mode not in CURVE_MODES:
            raise ValueError(f"curve_mode must be one of {CURVE_MODES}: got {curve_mode!r}")
        self._font = font
        self.name = name
        self.curve_mode = curve_mode
        self.flatten_segment_length = float(flatten_segment_length)
        self.units_per_em = float(font["head"].unitsPerEm)  # type: ignore[index]
        self._cmap: Mapping[int, str] = font.getBestCmap() or {}
        self._glyph_set = font.getGlyphSet()
        self._cache = _LRU(maxsize=_get_settings().GLYPH_CACHE_MAXSIZE)
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"FontHandle({self.name!r}, upem={self.units_per_em:g}, mode={self.curve_mode})"

    def has_glyph(self, char: str) -> bool:
        return len(char) == 1 and ord(char) in self._cmap

    def get_outline(
        self,
        char: str,
        size: float,
        *,
        curve_mode: str | None = None,
        flatten_segment_length: float | None = None,
    ) -> Glyph:
        """文字 `char` のアウトラインを `size`（1em の大きさ）で返す。

        `curve_mode` / `flatten_segment_length` を渡すとこの呼び出しに限り既定を上書きする。

        Raises
        ------
        GlyphResolutionError
            cmap に文字が無い、またはグリフ本体が無い場合。
        ValueError
            未知の `curve_mode`。
        """
        mode, seg = _curve_options(
            curve_mode, flatten_segment_length, self.curve_mode, self.flatten_segment_length
        )
        key = (char, float(size), mode, seg)
        with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                return cached
            glyph = self._resolve(char, float(size), mode, seg)
            self._cache.set(key, glyph)
            return glyph

    def _resolve(self, char: str, size: float, curve_mode: str, segment_length: float) -> Glyph:
        if len(char) != 1:
            raise GlyphResolutionError(char, self.name)
        glyph_name = self._cmap.get(ord(char))
        if glyph_name is None or glyph_name not in self._glyph_set:
            raise GlyphResolutionError(char, self.name)

        rec = DecomposingRecordingPen(self._glyph_set)
        self._glyph_set[glyph_name].draw(rec)
        glyph = build_glyph(
            char,
            rec.replay,
            size / self.units_per_em,
            curve_mode=curve_mode,
            flatten_segment_length=segment_length,
            flip_y=True,
        )
        debug_fonts("Resolved %r -> %s (%d commands)", char, glyph_name, len(glyph.commands))
        return glyph

    def cache_size(self) -> int:
        return len(self._cache)


def build_glyph(
    char: str,
    replay: Callable[[Any], None],
    scale: float,
    *,
    curve_mode: str = "control_polygon",
    flatten_segment_length: float = 5.0,
    flip_y: bool = False,
) -> Glyph:
    """ペンへの描画手続き `replay` から、`scale` 倍した `Glyph` を組み立てる。

    bbox は `BoundsPen` による曲線の厳密な範囲（制御点ではない）。空アウトラインは 0 の bbox。
    `flip_y=True` は y を反転する（フォントの y 上向き → 画面の y 下向き）。bbox も反転後の値。
    """
    transform = (scale, 0, 0, -scale if flip_y else scale, 0, 0)

    bounds_pen = BoundsPen(None)
    replay(TransformPen(bounds_pen, transform))

    cmd_pen = CommandPen()
    if curve_mode == "flatten":
        # 区間長は出力単位で指定されるため、入力単位へ戻して渡す
        seg_units = flatten_segment_length / scale if scale else flatten_segment_length
        replay(
            FlattenPen(
                TransformPen(cmd_pen, transform),
                approximateSegmentLength=max(seg_units, 1e-6),
                segmentLines=False,
            )
        )
    else:
        replay(TransformPen(cmd_pen, transform))

    if bounds_pen.bounds is None:
        bbox = BoundingBox()
    else:
        x1, y1, x2, y2 = bounds_pen.bounds
        bbox = BoundingBox(float(x1), float(y1), float(x2), float(y2))
    return Glyph(char=char, commands=tuple(cmd_pen.commands), bbox=bbox)


def replay_commands(commands: Sequence[PathCommand], pen: Any) -> None:
    """`PathCommand` 列を fontTools のペンへ描き戻す。"""
    for cmd in commands:
        if isinstance(cmd, MoveTo):
            pen.moveTo((cmd.x, cmd.y))
        elif isinstance(cmd, LineTo):
            pen.lineTo((cmd.x, cmd.y))
        elif isinstance(cmd, CubicTo):
            pen.curveTo((cmd.x1, cmd.y1), (cmd.x2, cmd.y2), (cmd.x, cmd.y))
        elif isinstance(cmd, QuadTo):
            pen.qCurveTo((cmd.x1, cmd.y1), (cmd.x, cmd.y))
        elif isinstance(cmd, ClosePath):
            pen.closePath()


class StaticGlyphProvider:
    """文字→コマンド列の辞書で与える供給器（合成フォント/テスト用）。

    - 座標は `FontHandle` と同じく y 下向きで与える（反転はしない）。
    - `units_per_em` を指定すると `size / units_per_em` 倍して返す。未指定なら座標はそのまま。
    - コマンド列だけ渡した文字の bbox は制御点を含む外接矩形（`bbox_of`）。
    - `curve_mode="flatten"` は `FontHandle` と同じく `FlattenPen` で曲線を折れ線化する。
    """

    def __init__(
        self,
        glyphs: Mapping[str, Glyph | Sequence[PathCommand]],
        *,
        units_per_em: float | None = None,
        curve_mode: str = "control_polygon",
        flatten_segment_length: float = 5.0,
        name: str = "static",
    ) -> None:
        if curve_mode not in CURVE_MODES:
            raise ValueError(f"curve_mode must be one of {CURVE_MODES}: got {curve_mode!r}")
        self._glyphs: dict[str, Glyph] = {}
        for ch, value in glyphs.items():
            if isinstance(value, Glyph):
                self._glyphs[ch] = value
            else:
                cmds = tuple(value)
                self._glyphs[ch] = Glyph(char=ch, commands=cmds, bbox=bbox_of(cmds))
        self.units_per_em = units_per_em
        self.curve_mode = curve_mode
        self.flatten_segment_length = float(flatten_segment_length)
        self.name = name

    def get_outline(
        self,
        char: str,
        size: float,
        *,
        curve_mode: str | None = None,
        flatten_segment_length: float | None = None,
    ) -> Glyph:
        mode, seg = _curve_options(
            curve_mode, flatten_segment_length, self.curve_mode, self.flatten_segment_length
        )
        glyph = self._glyphs.get(char)
        if glyph is None:
            raise GlyphResolutionError(char, self.name)
        scale = 1.0 if self.units_per_em is None else float(size) / float(self.units_per_em)
        if scale == 1.0 and mode == "control_polygon":
            return glyph
        out = build_glyph(
            char,
            lambda pen: replay_commands(glyph.commands, pen),
            scale,
            curve_mode=mode,
            flatten_segment_length=seg,
        )
        b = glyph.bbox
        # 合成グリフは渡された bbox を尊重する（制御点込みの矩形を曲線範囲で上書きしない）
        return Glyph(
            char=char,
            commands=out.commands,
            bbox=BoundingBox(b.x1 * scale, b.y1 * scale, b.x2 * scale, b.y2 * scale),
        )


# ---------- loading ------------------------------------------------------- #
def resolve_font_path(name: str | Path, fonts_cfg: dict | None = None) -> Path:
    """パス、またはフォントファイル名の部分一致からフォントファイルを解決する。

    Raises
    ------
    FontLoadError
        どちらでも見つからない場合。
    """
    path = Path(name)
    if path.is_file():
        return path
    candidates = font_search_paths(fonts_cfg)
    found = find_font_file(str(name), candidates)
    if found is None:
        raise FontLoadError(name, f"not found in {len(candidates)} font file(s) searched")
    debug_fonts("Font '%s' resolved to %s", name, found)
    return found


def load_font_sync(
    source: FontSource,
    *,
    font_index: int = 0,
    curve_mode: str = "control_polygon",
    flatten_segment_length: float = 5.0,
    fonts_cfg: dict | None = None,
) -> FontHandle:
    """フォントを同期で読み込む。`source` はパス/フォント名/フォントファイルのバイト列。"""
    if curve_mode not in CURVE_MODES:
        raise ValueError(f"curve_mode must be one of {CURVE_MODES}: got {curve_mode!r}")
    if isinstance(source, (bytes, bytearray)):
        file: Any = io.BytesIO(bytes(source))
        name = "<bytes>"
    else:
        file = resolve_font_path(source, fonts_cfg)
        name = str(file)

    idx = max(0, int(font_index))
    try:
        font = TTFont(file, fontNumber=idx)
        handle = FontHandle(
            font,
            name=name,
            curve_mode=curve_mode,
            flatten_segment_length=flatten_segment_length,
        )
    except Exception as e:
        # 壊れたテーブルは struct.error など様々な型で失敗する
        raise FontLoadError(name, str(e) or type(e).__name__) from e
    logger.debug("Loaded font %s", handle)
    return handle


def load_font(source: FontSource, **kwargs: Any) -> "Future[FontHandle]":
    """フォントをバックグラウンドスレッドで読み込み、1 回だけ解決する Future を返す。

    失敗時の例外は `FontLoadError`（`ValueError` などの引数不正はそのまま）。
    """
    future: "Future[FontHandle]" = Future()

    def _run() -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            handle = load_font_sync(source, **kwargs)
        except Exception as e:
            future.set_exception(e)
        else:
            future.set_result(handle)

    threading.Thread(target=_run, name="FontLoader", daemon=True).start()
    return future


__all__ = [
    "CURVE_MODES",
    "GlyphProvider",
    "FontHandle",
    "StaticGlyphProvider",
    "build_glyph",
    "replay_commands",
    "resolve_font_path",
    "load_font_sync",
    "load_font",
]
