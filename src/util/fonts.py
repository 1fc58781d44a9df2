"""
どこで: `util.fonts`。
何を: フォントファイル探索（検索ディレクトリの正規化、再帰列挙、名前の部分一致解決）。
なぜ: `glyphs.provider` がパス指定とフォント名指定を同じ経路で解決できるようにするため。
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Iterable, Sequence

from .utils import _find_project_root, config_section

logger = logging.getLogger(__name__)

EXTS_DEFAULT: tuple[str, ...] = (".ttf", ".otf", ".ttc")


def resolve_search_dirs(cfg_dirs: Sequence[str | Path]) -> list[Path]:
    """設定由来の検索ディレクトリを正規化して返す（相対→ルート基準、~・環境変数を展開）。"""
    root = _find_project_root(Path(__file__).parent)
    result: list[Path] = []
    for raw in cfg_dirs:
        if not isinstance(raw, (str, Path)):
            continue
        p = Path(os.path.expandvars(os.path.expanduser(str(raw))))
        if not p.is_absolute():
            p = (root / p).resolve()
        if p.is_dir():
            result.append(p)
    return result


def os_font_dirs() -> list[Path]:
    """OS 既定のフォントディレクトリ一覧（存在するもののみ）。"""
    home = Path.home()
    dirs: list[Path] = []
    if sys.platform == "darwin":
        dirs = [
            home / "Library" / "Fonts",
            Path("/System/Library/Fonts"),
            Path("/System/Library/Fonts/Supplemental"),
            Path("/Library/Fonts"),
        ]
    elif sys.platform.startswith("linux"):
        dirs = [
            Path("/usr/share/fonts"),
            Path("/usr/local/share/fonts"),
            home / ".fonts",
            home / ".local/share/fonts",
        ]
    else:
        windir = os.environ.get("WINDIR", r"C:\\Windows")
        dirs = [Path(windir) / "Fonts"]
    return [p for p in dirs if p.exists()]


def glob_font_files(dirs: Iterable[Path], exts: Sequence[str] | None = None) -> list[Path]:
    """ディレクトリ配下のフォントファイルを再帰列挙する。

    ディレクトリの並び順を優先し、各ディレクトリ内はパス順。重複は先勝ちで除去する。
    """
    suffixes = tuple(e.lower() for e in (exts if exts is not None else EXTS_DEFAULT))
    seen: set[Path] = set()
    out: list[Path] = []
    for d in dirs:
        found = sorted(fp.resolve() for fp in d.rglob("*") if fp.suffix.lower() in suffixes)
        for fp in found:
            if fp not in seen:
                seen.add(fp)
                out.append(fp)
    return out


def font_search_paths(fonts_cfg: dict | None = None) -> list[Path]:
    """構成 `fonts:` セクションに従ってフォントファイル一覧を返す。

    - `search_dirs` を先に、`include_os`（既定 True）なら OS ディレクトリを後ろに並べる。
    """
    cfg = fonts_cfg if fonts_cfg is not None else config_section("fonts")
    raw_dirs = cfg.get("search_dirs", [])
    if isinstance(raw_dirs, (str, Path)):
        raw_dirs = [raw_dirs]
    dirs = resolve_search_dirs(raw_dirs if isinstance(raw_dirs, (list, tuple)) else [])
    if bool(cfg.get("include_os", True)):
        dirs.extend(os_font_dirs())
    return glob_font_files(dirs)


def find_font_file(name: str, candidates: Sequence[Path]) -> Path | None:
    """ファイル名の部分一致（大文字小文字・空白無視）で最初の候補を返す。"""
    key = name.lower().replace(" ", "")
    if not key:
        return None
    for fp in candidates:
        if key in fp.name.lower().replace(" ", ""):
            return fp
    return None


def debug_fonts(msg: str, *args: object) -> None:
    """`WT_DEBUG_FONTS` が真のときだけ INFO で出す探索ログ。"""
    from common.settings import get as _get_settings

    if _get_settings().DEBUG_FONTS:
        logger.info(msg, *args)
