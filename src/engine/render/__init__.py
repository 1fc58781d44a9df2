"""
どこで: `engine.render` サブパッケージ。
何を: `TessellationResult` → GPU バッファ（VBO/CBO/IBO/VAO）への転送境界 `LineMesh`。
なぜ: 計算（engine.core）と GPU リソース管理を分離し、描画側の差し替えを局所化するため。
"""

from .line_mesh import GL_LINES, LineMesh

__all__ = ["GL_LINES", "LineMesh"]
