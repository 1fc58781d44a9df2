"""
どこで: `engine.core` サブパッケージ。
何を: グリフのパスコマンド → 線分ジオメトリ（頂点/インデックス）への変換パイプライン。
なぜ: 配置（layout）→ パス歩行（walk）→ 中心化（center）→ 詰め込み（assemble）を純関数として
      並べ、描画境界（engine.render）から独立して検証できるようにするため。
"""
