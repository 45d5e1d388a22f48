"""
どこで: リポジトリ直下 `main.py`。
何を: 既定の構図パラメータで 1 枚生成し、SVG として保存する。
なぜ: 動作確認用の最小エントリポイントとして利用するため。
"""

import logging
import sys

sys.path.append("src")

from compline import CompositionConfig, Export

if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    config = CompositionConfig(
        grid_width=256,
        grid_height=256,
        jitter=0.05,
        max_line_length=0.1,
        obliquity=0.0,
        length_skew_exponent=4.0,
        line_count=256,
        stroke_width=8,
        seed=42,
    )
    out = Export(config, "svg")
    print(f"saved: {out.path} ({len(out.output.lines)} lines)")
