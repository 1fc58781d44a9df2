"""
どこで: `engine.export` サブパッケージ。
何を: `TessellationResult` のファイル保存/読込。
"""
