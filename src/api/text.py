"""
どこで: `api.text`。
何を: テキスト→線分ジオメトリの公開入口。
      - `tessellate_text`: 同期・再入可能。呼び出しごとに新しい `LayoutState` を使う。
      - `tessellate_text_async`: フォント読み込み `Future` に連結して結果の `Future` を返す。
      - `TextGeometryService`: テキスト更新要求を受け、最新要求の結果だけを公開する。
なぜ: グローバルな更新関数ではなく、テキストと構成を受け取り新しい結果を返す明示的な API にするため。

更新要求の競合方針:
- 要求ごとに単調増加の番号を振る。すでに公開済みの要求より古い要求の結果は公開しない
  （後から完了した古い要求が新しい形状を上書きしない）。各要求の `Future` 自体は結果で解決する。
- フォント読み込みが失敗すると、待っている全要求が `FontLoadError` で失敗する。
  公開済みの形状はそのまま残す。
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from typing import Any, Callable

from engine.core.layout import layout_glyphs
from engine.core.tessellation import TessellationResult
from glyphs.provider import GlyphProvider, load_font

from .config import TessellationConfig

logger = logging.getLogger(__name__)

UpdateListener = Callable[[TessellationResult], None]


def tessellate_text(
    text: str,
    font: GlyphProvider,
    config: TessellationConfig | None = None,
) -> TessellationResult:
    """`text` を `font` のアウトラインで線分ジオメトリに変換する。

    曲線の扱い（`curve_mode` / `flatten_segment_length`）は供給器の既定ではなく `config` に従う。

    Raises
    ------
    GlyphResolutionError
        欠字方針が `"raise"` で、文字が解決できない場合。
    """
    cfg = config if config is not None else TessellationConfig()
    return layout_glyphs(
        text,
        font,
        cfg.letter_spacing,
        size=cfg.glyph_size,
        scale_factor=cfg.scale_factor,
        palette=cfg.active_palette,
        missing_glyph=cfg.missing_glyph,
        curve_mode=cfg.curve_mode,
        flatten_segment_length=cfg.flatten_segment_length,
    )


def _resolved(value: Any) -> Future:
    f: Future = Future()
    f.set_result(value)
    return f


def tessellate_text_async(
    text: str,
    font_future: "Future[Any]",
    config: TessellationConfig | None = None,
) -> "Future[TessellationResult]":
    """フォントの読み込み完了後にテッセレーションし、その結果で解決する `Future` を返す。"""
    out: "Future[TessellationResult]" = Future()

    def _on_font(f: Future) -> None:
        if not out.set_running_or_notify_cancel():
            return
        try:
            result = tessellate_text(text, f.result(), config)
        except Exception as e:
            out.set_exception(e)
        else:
            out.set_result(result)

    font_future.add_done_callback(_on_font)
    return out


def open_font(config: TessellationConfig) -> "Future[Any]":
    """構成のフォント指定で非同期読み込みを開始する。"""
    if config.font is None:
        raise ValueError("config.font is not set")
    return load_font(
        config.font,
        font_index=config.font_index,
        curve_mode=config.curve_mode,
        flatten_segment_length=config.flatten_segment_length,
    )


class TextGeometryService:
    """テキスト更新を受け付け、最新の `TessellationResult` を保持して購読者へ配る。

    `font` は読み込み済みの供給器でも、読み込み中の `Future` でもよい。
    """

    def __init__(
        self,
        font: GlyphProvider | "Future[Any]",
        config: TessellationConfig | None = None,
    ) -> None:
        self._font_future: Future = font if isinstance(font, Future) else _resolved(font)
        self._config = config if config is not None else TessellationConfig()
        self._lock = threading.Lock()
        self._next_id = 0
        self._published_id = 0
        self._latest: TessellationResult | None = None
        self._listeners: list[UpdateListener] = []

    @property
    def config(self) -> TessellationConfig:
        return self._config

    def latest(self) -> TessellationResult | None:
        """最後に公開された結果（まだ無ければ None）。"""
        with self._lock:
            return self._latest

    def on_update(self, listener: UpdateListener) -> None:
        """公開のたびに呼ばれるコールバックを登録する。"""
        with self._lock:
            self._listeners.append(listener)

    def request_update(
        self, text: str | None = None, **overrides: Any
    ) -> "Future[TessellationResult]":
        """テキスト（省略時は構成の `text`）で再テッセレーションを要求する。

        `overrides` は `TessellationConfig` のフィールド（例: `letter_spacing=40`）を
        この要求に限って上書きする。
        """
        cfg = self._config.with_overrides(**overrides)
        content = cfg.text if text is None else text
        with self._lock:
            self._next_id += 1
            request_id = self._next_id

        out: "Future[TessellationResult]" = Future()

        def _on_font(f: Future) -> None:
            if not out.set_running_or_notify_cancel():
                return
            try:
                result = tessellate_text(content, f.result(), cfg)
            except Exception as e:
                logger.error("Text update #%d failed: %s", request_id, e)
                out.set_exception(e)
                return
            self._publish(request_id, result)
            out.set_result(result)

        self._font_future.add_done_callback(_on_font)
        return out

    def update_text(self, text: str | None = None, timeout: float | None = None, **overrides: Any):
        """`request_update` の完了を待って結果を返す同期版。"""
        return self.request_update(text, **overrides).result(timeout=timeout)

    def _publish(self, request_id: int, result: TessellationResult) -> bool:
        with self._lock:
            if request_id <= self._published_id:
                logger.debug(
                    "Discarding stale text update #%d (already published #%d)",
                    request_id,
                    self._published_id,
                )
                return False
            self._published_id = request_id
            self._latest = result
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(result)
            except Exception:
                logger.exception("Text update listener %r failed", listener)
        return True


__all__ = [
    "tessellate_text",
    "tessellate_text_async",
    "open_font",
    "TextGeometryService",
]
