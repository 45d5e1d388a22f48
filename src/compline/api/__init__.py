# どこで: `src/compline/api/__init__.py`。
# 何を: 公開 API（Export）を再エクスポートする。

from __future__ import annotations

from .export import Export, config_digest, default_output_path

__all__ = ["Export", "config_digest", "default_output_path"]
