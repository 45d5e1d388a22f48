# どこで: `src/compline/core/parameters/meta.py`。
# 何を: ParamMeta（構図パラメータの型とレンジ情報）と、そのレンジへのクランプを提供する。
# なぜ: UI 側のスライダーレンジと入力境界でのクランプを同じ表で管理するため。

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ParamMeta:
    """パラメータの型・レンジ情報。

    ui_min/ui_max は UI スライダーのレンジであり、入力境界で `clamp` する際の上下限にもなる。
    None の側はクランプしない。
    """

    kind: str  # "float" | "int" | "bool"
    ui_min: Any | None = None
    ui_max: Any | None = None

    def clamp(self, value: Any) -> Any:
        """値を kind に合わせて型変換し、レンジ内へ収めて返す。

        Raises
        ------
        ValueError
            kind が未知、値を数値化できない、または float が有限でない（NaN/inf）場合。
        """
        if self.kind == "bool":
            return bool(value)
        if self.kind == "int":
            v: Any = int(value)
        elif self.kind == "float":
            v = float(value)
            if not math.isfinite(v):
                raise ValueError(f"有限の数値である必要がある: got={value!r}")
        else:
            raise ValueError(f"未対応の ParamMeta.kind: {self.kind!r}")

        if self.ui_min is not None and v < self.ui_min:
            v = type(v)(self.ui_min)
        if self.ui_max is not None and v > self.ui_max:
            v = type(v)(self.ui_max)
        return v


__all__ = ["ParamMeta"]
