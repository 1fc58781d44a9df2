"""
どこで: `common` パッケージ。
何を: 設定・環境変数・ロギング・型エイリアスなど、glyphs/engine/api が共有する土台。
なぜ: 依存の向きを「common ← glyphs ← engine ← api」に揃え、循環を避けるため。
"""
