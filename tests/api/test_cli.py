from __future__ import annotations

import numpy as np
import pytest

from api.cli import main
from engine.core.tessellation import assemble
from engine.export.buffers import load_npz, save_npz

# What this tests
# - 終了コード（成功 0 / フォント・欠字 1 / 構成不備 2）と要約行
# - `--out` の npz が同じ dtype で読み戻せる


def test_summary_line_and_npz(test_font_path, tmp_path, capsys):
    out = tmp_path / "out" / "geom"
    code = main(["AO", "--font", str(test_font_path), "--out", str(out)])
    assert code == 0
    line = capsys.readouterr().out.strip()
    assert line.startswith("'AO': vertices=")
    assert "colors=yes" in line
    loaded = load_npz(out.with_suffix(".npz"))
    assert loaded.vertex_count > 0
    assert f"vertices={loaded.vertex_count} " in line
    assert loaded.colors is not None


def test_no_color_flag(test_font_path, capsys):
    assert main(["A", "--font", str(test_font_path), "--no-color"]) == 0
    assert "colors=no" in capsys.readouterr().out


def test_missing_glyph_exit_code_and_skip(test_font_path, capsys):
    assert main(["AZ", "--font", str(test_font_path)]) == 1
    assert main(["AZ", "--font", str(test_font_path), "--skip-missing"]) == 0


def test_missing_font_exit_code(tmp_path):
    assert main(["A", "--font", str(tmp_path / "nope.ttf")]) == 1


def test_invalid_option_exit_code(test_font_path):
    assert main(["A", "--font", str(test_font_path), "--spacing", "-3"]) == 2


def test_npz_roundtrip_keeps_dtypes(tmp_path):
    r = assemble([[0, 0, 0], [1, 1, 0]], None, [0, 1])
    p = save_npz(r, tmp_path / "g.bin")
    assert p.suffix == ".npz"
    back = load_npz(p)
    assert back.same_as(r)
    assert back.colors is None


def test_load_npz_rejects_foreign_file(tmp_path):
    p = tmp_path / "other.npz"
    np.savez(p, a=np.zeros(3))
    with pytest.raises(ValueError):
        load_npz(p)
