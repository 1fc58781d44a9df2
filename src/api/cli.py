"""
どこで: `api.cli`（`wiretext` コマンド）。
何を: 文字列をテッセレーションし、頂点/線分数と範囲を 1 行で表示。`--out` で npz に保存する。
なぜ: 描画系を立ち上げずに、フォントと構成の組み合わせを手早く確認できるようにするため。
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from common.logging import setup_default_logging
from engine.export.buffers import save_npz
from glyphs.errors import FontLoadError, GlyphResolutionError
from glyphs.provider import load_font_sync

from .config import TessellationConfig
from .text import tessellate_text

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="wiretext",
        description="Tessellate text into line-segment geometry from font outlines.",
    )
    p.add_argument("text", nargs="?", default=None, help="text to tessellate (default: config)")
    p.add_argument("--font", default=None, help="font file path or partial file name")
    p.add_argument("--font-index", type=int, default=None, help="sub-font index for .ttc")
    p.add_argument("--spacing", type=float, default=None, help="letter spacing (font units)")
    p.add_argument("--size", type=float, default=None, help="glyph size passed to the font")
    p.add_argument("--scale", type=float, default=None, help="divisor into render space")
    p.add_argument("--no-color", action="store_true", help="omit per-vertex colors")
    p.add_argument("--flatten", action="store_true", help="flatten curves instead of control polygons")
    p.add_argument("--skip-missing", action="store_true", help="skip characters without outlines")
    p.add_argument("--out", default=None, help="write buffers to this .npz file")
    p.add_argument("--log-level", default=None, help="logging level (default: WT_LOG_LEVEL)")
    return p


def config_from_args(args: argparse.Namespace, base: TessellationConfig) -> TessellationConfig:
    """CLI 引数で構成を上書きする（未指定の引数は構成ファイルの値を残す）。"""
    return base.with_overrides(
        text=args.text,
        font=args.font,
        font_index=args.font_index,
        letter_spacing=args.spacing,
        glyph_size=args.size,
        scale_factor=args.scale,
        enable_color=False if args.no_color else None,
        curve_mode="flatten" if args.flatten else None,
        missing_glyph="skip" if args.skip_missing else None,
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_default_logging(args.log_level)

    try:
        cfg = config_from_args(args, TessellationConfig.load())
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 2
    if cfg.font is None:
        logger.error("No font given (use --font or set text.font in config.yaml)")
        return 2

    try:
        font = load_font_sync(
            cfg.font,
            font_index=cfg.font_index,
            curve_mode=cfg.curve_mode,
            flatten_segment_length=cfg.flatten_segment_length,
        )
        result = tessellate_text(cfg.text, font, cfg)
    except (FontLoadError, GlyphResolutionError) as e:
        logger.error("%s", e)
        return 1

    bounds = result.bounds()
    span = "empty" if bounds is None else "x=[%.4f, %.4f] y=[%.4f, %.4f]" % bounds
    print(
        f"{cfg.text!r}: vertices={result.vertex_count} segments={result.segment_count} "
        f"colors={'yes' if result.colors is not None else 'no'} {span}"
    )
    if args.out:
        save_npz(result, args.out)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
