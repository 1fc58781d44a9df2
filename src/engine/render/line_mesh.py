"""
どこで: `engine.render` の低レベルメッシュ層。
何を: `TessellationResult` の頂点/色/インデックスを VBO/CBO/IBO へ丸ごと書き込み、LINES で描く。
なぜ: テキスト更新のたびにバッファを部分更新せず差し替える、という描画境界の約束を一箇所に閉じ込めるため。

`ctx`/`program` は moderngl 互換のオブジェクト（`ctx.buffer`, `ctx.vertex_array`, `vao.render`）。
moderngl 自体はここでは import しない。
"""

from __future__ import annotations

import logging
from typing import Any

from engine.core.tessellation import TessellationResult

GL_LINES = 0x0001

logger = logging.getLogger(__name__)


class LineMesh:
    """
    テキストのワイヤーフレームを GPU へ送り込む作業を管理
    """

    def __init__(
        self,
        ctx: Any,
        program: Any,
        *,
        position_attr: str = "in_vert",
        color_attr: str | None = "in_color",
        # 初期GPUメモリ確保量（既定: 64KB）。必要に応じて自動拡張。
        initial_reserve: int = 64 * 1024,
    ):
        """
        ctx: moderngl 互換コンテキスト
        program: `position_attr`（vec3）と、色を使うなら `color_attr`（vec4）を持つシェーダープログラム
        VBO: 頂点座標、CBO: 頂点色、IBO: 線分インデックス
        """
        self.ctx = ctx
        self.program = program
        self.position_attr = position_attr
        self.color_attr = color_attr
        self.initial_reserve = int(initial_reserve)

        self.vbo = ctx.buffer(reserve=self.initial_reserve, dynamic=True)
        self.cbo = ctx.buffer(reserve=self.initial_reserve, dynamic=True)
        self.ibo = ctx.buffer(reserve=self.initial_reserve, dynamic=True)
        self.vao: Any = None

        self.index_count: int = 0
        self.index_element_size: int = 2
        self.has_colors: bool = False
        self.uploads: int = 0

    # ---------- バッファ操作 ----------
    def _ensure_capacity(self, name: str, size: int) -> Any:
        buf = getattr(self, name)
        if size > buf.size:
            buf.release()
            buf = self.ctx.buffer(reserve=max(size, self.initial_reserve), dynamic=True)
            setattr(self, name, buf)
        return buf

    def _rebuild_vao(self) -> None:
        if self.vao is not None:
            self.vao.release()
        content = [(self.vbo, "3f", self.position_attr)]
        if self.has_colors and self.color_attr:
            content.append((self.cbo, "4f", self.color_attr))
        self.vao = self.ctx.vertex_array(
            self.program,
            content,
            index_buffer=self.ibo,
            index_element_size=self.index_element_size,
        )

    def upload(self, result: TessellationResult) -> None:
        """結果を丸ごと GPU へ送り込む（部分更新はしない）"""
        if result.is_empty:
            self.index_count = 0
            return

        vbo = self._ensure_capacity("vbo", result.vertices.nbytes)
        ibo = self._ensure_capacity("ibo", result.indices.nbytes)
        vbo.orphan()
        vbo.write(result.vertices.tobytes())
        ibo.orphan()
        ibo.write(result.indices.tobytes())

        self.has_colors = result.colors is not None
        if result.colors is not None:
            cbo = self._ensure_capacity("cbo", result.colors.nbytes)
            cbo.orphan()
            cbo.write(result.colors.tobytes())

        self.index_element_size = int(result.indices.dtype.itemsize)
        # VAO はバッファが差し替わり得るため毎回張り直す
        self._rebuild_vao()
        self.index_count = int(result.indices.size)
        self.uploads += 1
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Uploading text geometry: verts=%d (%.1f KB), inds=%d (%.1f KB), colors=%s",
                result.vertex_count,
                result.vertices.nbytes / 1024.0,
                result.indices.size,
                result.indices.nbytes / 1024.0,
                self.has_colors,
            )

    def draw(self) -> None:
        """線分を LINES で描く。空なら何もしない"""
        if self.index_count == 0 or self.vao is None:
            return
        self.vao.render(mode=GL_LINES, vertices=self.index_count)

    def release(self) -> None:
        """GPUのメモリを解放する（終了時に使う）"""
        self.vbo.release()
        self.cbo.release()
        self.ibo.release()
        if self.vao is not None:
            self.vao.release()
            self.vao = None
