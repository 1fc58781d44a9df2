from __future__ import annotations

import numpy as np

from engine.core.tessellation import TessellationResult, assemble
from engine.render.line_mesh import GL_LINES, LineMesh

# What this tests
# - 結果を丸ごと書き込み、LINES でインデックス数ぶん描く
# - 容量不足時のバッファ差し替え、uint32 インデックスの要素サイズ、空結果の描画抑止


class DummyBuffer:
    def __init__(self, reserve: int) -> None:
        self.size = reserve
        self.data = b""
        self.orphaned = 0
        self.released = False

    def orphan(self) -> None:
        self.orphaned += 1

    def write(self, data: bytes) -> None:
        assert len(data) <= self.size
        self.data = data

    def release(self) -> None:
        self.released = True


class DummyVAO:
    def __init__(self, content, index_buffer, index_element_size) -> None:
        self.content = content
        self.index_buffer = index_buffer
        self.index_element_size = index_element_size
        self.renders: list[tuple[int, int]] = []
        self.released = False

    def render(self, mode: int, vertices: int) -> None:
        self.renders.append((mode, vertices))

    def release(self) -> None:
        self.released = True


class DummyContext:
    def __init__(self) -> None:
        self.buffers: list[DummyBuffer] = []
        self.vaos: list[DummyVAO] = []

    def buffer(self, reserve: int = 0, dynamic: bool = False) -> DummyBuffer:
        buf = DummyBuffer(reserve)
        self.buffers.append(buf)
        return buf

    def vertex_array(self, program, content, index_buffer=None, index_element_size=4):
        vao = DummyVAO(content, index_buffer, index_element_size)
        self.vaos.append(vao)
        return vao


def _result(n_vertices: int, with_colors: bool = True) -> TessellationResult:
    verts = np.arange(n_vertices * 3, dtype=np.float64).reshape(-1, 3)
    inds = np.array([(i, i + 1) for i in range(n_vertices - 1)], dtype=np.int64).ravel()
    cols = np.ones((n_vertices, 4), dtype=np.float32) if with_colors else None
    return assemble(verts, cols, inds)


def test_upload_then_draw_lines():
    ctx = DummyContext()
    mesh = LineMesh(ctx, program=object())
    r = _result(4)
    mesh.upload(r)
    assert mesh.vbo.data == r.vertices.tobytes()
    assert mesh.ibo.data == r.indices.tobytes()
    assert mesh.cbo.data == r.colors.tobytes()
    assert mesh.index_count == 6
    mesh.draw()
    assert mesh.vao.renders == [(GL_LINES, 6)]
    names = [c[2] for c in mesh.vao.content]
    assert names == ["in_vert", "in_color"]
    assert mesh.vao.index_element_size == 2


def test_upload_without_colors_binds_positions_only():
    ctx = DummyContext()
    mesh = LineMesh(ctx, program=object())
    mesh.upload(_result(3, with_colors=False))
    assert [c[2] for c in mesh.vao.content] == ["in_vert"]


def test_reupload_replaces_and_rebuilds_vao():
    ctx = DummyContext()
    mesh = LineMesh(ctx, program=object(), initial_reserve=16)
    mesh.upload(_result(3))
    first_vao = mesh.vao
    small_vbo = mesh.vbo
    mesh.upload(_result(50))
    assert first_vao.released
    assert small_vbo.released
    assert mesh.vbo.size >= 50 * 3 * 4
    assert mesh.index_count == 49 * 2
    assert mesh.uploads == 2


def test_uint32_indices_use_four_byte_elements():
    ctx = DummyContext()
    mesh = LineMesh(ctx, program=object())
    inds = np.array([0, 70000], dtype=np.int64)
    verts = np.zeros((70001, 3))
    mesh.upload(assemble(verts, None, inds))
    assert mesh.vao.index_element_size == 4


def test_empty_result_draws_nothing():
    ctx = DummyContext()
    mesh = LineMesh(ctx, program=object())
    mesh.upload(_result(3))
    vao = mesh.vao
    mesh.upload(TessellationResult.empty(with_colors=True))
    assert mesh.index_count == 0
    mesh.draw()
    assert vao.renders == []


def test_release_frees_all():
    ctx = DummyContext()
    mesh = LineMesh(ctx, program=object())
    mesh.upload(_result(3))
    vao = mesh.vao
    mesh.release()
    assert all(b.released for b in (mesh.vbo, mesh.cbo, mesh.ibo))
    assert vao.released and mesh.vao is None
