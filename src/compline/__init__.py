# どこで: `src/compline/__init__.py`。
# 何を: ルート `compline` パッケージを定義する。
# なぜ: import 起点を `compline` に統一するため。

from __future__ import annotations

from compline.api import Export
from compline.core.composition_config import (
    CompositionConfig,
    InvalidConfiguration,
    clamp_composition_config,
)
from compline.core.pipeline import RenderOutput, render
from compline.core.random_source import DeterministicRandom
from compline.core.style import RenderStyle

__all__ = [
    "CompositionConfig",
    "DeterministicRandom",
    "Export",
    "InvalidConfiguration",
    "RenderOutput",
    "RenderStyle",
    "clamp_composition_config",
    "render",
]
