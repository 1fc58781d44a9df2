"""
どこで: `api.config`。
何を: テッセレーションの構成面 `TessellationConfig`（文字列・フォント・字間・サイズ・倍率・色・曲線・欠字方針）。
なぜ: YAML 構成/CLI/コードのどこから来た値も、検証済みの 1 つの不変オブジェクトに揃えるため。

構成ファイル例（`configs/default.yaml` または `config.yaml` の `text:` セクション）::

    text:
      text: ERKAM
      font: "Uni Sans Heavy.otf"
      letter_spacing: 70
      glyph_size: 200
      scale_factor: 1000
      enable_color: true
      palette: ["#ff0000", "#00ff00", "#0000ff"]
      curve_mode: control_polygon   # または flatten
      missing_glyph: raise          # または skip
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping

from common.types import RGBA
from engine.core.layout import MISSING_GLYPH_POLICIES
from glyphs.provider import CURVE_MODES
from util.color import DEFAULT_PALETTE, normalize_palette
from util.utils import config_section

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TessellationConfig:
    """テキスト→線分ジオメトリ変換の設定（不変）。"""

    text: str = "ERKAM"
    font: str | None = None
    font_index: int = 0
    letter_spacing: float = 70.0
    glyph_size: float = 200.0
    scale_factor: float = 1000.0
    enable_color: bool = True
    palette: tuple[RGBA, ...] = field(default=DEFAULT_PALETTE)
    curve_mode: str = "control_polygon"
    flatten_segment_length: float = 5.0
    missing_glyph: str = "raise"

    def __post_init__(self) -> None:
        if float(self.letter_spacing) < 0:
            raise ValueError(f"letter_spacing must be non-negative: got {self.letter_spacing}")
        if float(self.glyph_size) <= 0:
            raise ValueError(f"glyph_size must be positive: got {self.glyph_size}")
        if float(self.scale_factor) <= 0:
            raise ValueError(f"scale_factor must be positive: got {self.scale_factor}")
        if float(self.flatten_segment_length) <= 0:
            raise ValueError(
                f"flatten_segment_length must be positive: got {self.flatten_segment_length}"
            )
        if self.curve_mode not in CURVE_MODES:
            raise ValueError(f"curve_mode must be one of {CURVE_MODES}: got {self.curve_mode!r}")
        if self.missing_glyph not in MISSING_GLYPH_POLICIES:
            raise ValueError(
                f"missing_glyph must be one of {MISSING_GLYPH_POLICIES}: got {self.missing_glyph!r}"
            )
        # 数値/パレットは正規化して保持（frozen のため object.__setattr__）
        object.__setattr__(self, "font_index", max(0, int(self.font_index)))
        object.__setattr__(self, "letter_spacing", float(self.letter_spacing))
        object.__setattr__(self, "glyph_size", float(self.glyph_size))
        object.__setattr__(self, "scale_factor", float(self.scale_factor))
        object.__setattr__(self, "flatten_segment_length", float(self.flatten_segment_length))
        object.__setattr__(self, "enable_color", bool(self.enable_color))
        object.__setattr__(self, "palette", normalize_palette(self.palette))

    @property
    def active_palette(self) -> tuple[RGBA, ...] | None:
        """色を付けるときのパレット。無効なら None。"""
        return self.palette if self.enable_color else None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "TessellationConfig":
        """辞書から生成する。未知のキーは無視して debug ログに残す。"""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = sorted(k for k in data if k not in known)
        if unknown:
            logger.debug("Ignoring unknown text config keys: %s", ", ".join(unknown))
        kwargs = {k: v for k, v in data.items() if k in known}
        if "palette" in kwargs and kwargs["palette"] is None:
            kwargs.pop("palette")
        return cls(**kwargs)

    @classmethod
    def load(cls, cfg: Mapping[str, Any] | None = None) -> "TessellationConfig":
        """YAML 構成の `text:` セクションから生成する（無ければ既定値）。"""
        section = config_section("text", dict(cfg) if cfg is not None else None)
        return cls.from_mapping(section)

    def with_overrides(self, **overrides: Any) -> "TessellationConfig":
        """値が None でない引数だけを上書きした新しい設定を返す。"""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


__all__ = ["TessellationConfig"]
