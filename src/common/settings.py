"""
どこで: `common.settings`
何を: `WT_*` 環境変数を型付きで一元管理し、import 時に読み込む。
なぜ: キャッシュ上限やデバッグ出力の切替を、呼び出し側の引数を増やさずに調整できるようにするため。
"""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_bool, env_int, env_str


@dataclass
class _Settings:
    # Glyph outline cache
    GLYPH_CACHE_MAXSIZE: int = 4096

    # Fonts
    DEBUG_FONTS: bool = False

    # Centering kernel
    USE_NUMBA: bool = True

    # Logging (CLI only)
    LOG_LEVEL: str = "INFO"


_settings = _Settings()


def reload_from_env() -> None:
    """環境変数から設定を再読込する。

    - キャッシュ上限は 0 未満を 0 に丸める（0 はキャッシュ無効）。
    """
    _settings.GLYPH_CACHE_MAXSIZE = env_int("WT_GLYPH_CACHE_MAXSIZE", 4096, min_value=0) or 0
    _settings.DEBUG_FONTS = env_bool("WT_DEBUG_FONTS", False)
    _settings.USE_NUMBA = env_bool("WT_USE_NUMBA", True)
    _settings.LOG_LEVEL = env_str("WT_LOG_LEVEL", "INFO").upper()


def get() -> _Settings:
    """現在の設定スナップショットを返す。"""
    return _settings


# 初期ロード
reload_from_env()


__all__ = ["get", "reload_from_env", "_Settings"]
