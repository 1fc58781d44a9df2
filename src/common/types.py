"""
どこで: `common` の型定義。
何を: 頂点色の軽量エイリアス。
なぜ: 依存の少ない場所に置き、glyphs/engine/api の間で同じ名前を使うため。
"""

RGBA = tuple[float, float, float, float]

__all__ = ["RGBA"]
