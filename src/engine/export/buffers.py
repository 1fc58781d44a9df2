"""
どこで: `engine.export.buffers`。
何を: `TessellationResult` の 3 バッファを `.npz` へ保存/読込する。
なぜ: 別プロセスの描画側や検証スクリプトへ、GPU へ送るのと同じ dtype のまま受け渡すため。
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from engine.core.tessellation import TessellationResult, assemble

logger = logging.getLogger(__name__)


def save_npz(result: TessellationResult, path: str | Path) -> Path:
    """`vertices`/`indices`（と色があれば `colors`）を圧縮 npz で保存し、保存先を返す。"""
    out = Path(path)
    if out.suffix != ".npz":
        out = out.with_suffix(".npz")
    out.parent.mkdir(parents=True, exist_ok=True)
    arrays = {"vertices": result.vertices, "indices": result.indices}
    if result.colors is not None:
        arrays["colors"] = result.colors
    np.savez_compressed(out, **arrays)
    logger.info(
        "Saved %d vertices / %d segments to %s", result.vertex_count, result.segment_count, out
    )
    return out


def load_npz(path: str | Path) -> TessellationResult:
    """`save_npz` で保存したファイルを読み込む。"""
    with np.load(Path(path), allow_pickle=False) as data:
        if "vertices" not in data or "indices" not in data:
            raise ValueError(f"not a tessellation buffer file: {path}")
        colors = data["colors"] if "colors" in data else None
        result = assemble(data["vertices"], colors, data["indices"])
    return result


__all__ = ["save_npz", "load_npz"]
