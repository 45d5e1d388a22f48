# どこで: `src/compline/core/parameters/__init__.py`。
# 何を: パラメータ関連の公開名を再エクスポートする。

from __future__ import annotations

from .meta import ParamMeta

__all__ = ["ParamMeta"]
