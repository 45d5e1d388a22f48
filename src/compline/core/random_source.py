"""
どこで: `src/compline/core/random_source.py`。
何を: seed で初期化できる一様乱数源 DeterministicRandom を提供する。
なぜ: 1 回の描画で消費する乱数をすべてこのインスタンス経由にし、seed だけで出力を再現するため。
"""

from __future__ import annotations

import math

import numpy as np

_SEED_MODULUS = 2**64
_BLOCK_SIZE = 4096


def _normalize_seed(seed: int) -> int:
    """seed を numpy が受け付ける非負整数へ写して返す。"""
    return int(seed) % _SEED_MODULUS


class DeterministicRandom:
    """seed 可能な [0, 1) 一様乱数源。

    Notes
    -----
    実体は `numpy.random.Generator`（PCG64）。`Generator.random(n)` は `random()` を n 回
    呼んだ場合と同じ値列を返すので、内部では _BLOCK_SIZE 個ずつ先読みしておき `next()` で 1 つずつ払い出す。
    `next_array(shape)` も先読み分から順に消費するため、`next()` との混在でも値列の順序は変わらない。
    インスタンスはスレッド間で共有しないこと。
    """

    def __init__(self, seed: int = 0) -> None:
        self.seed(seed)

    @property
    def current_seed(self) -> int:
        """最後に設定した（正規化済み）seed を返す。"""
        return self._seed

    def seed(self, value: int) -> None:
        """内部状態を value だけで決まる状態へリセットする。"""
        self._seed = _normalize_seed(value)
        self._rng = np.random.default_rng(self._seed)
        self._buffer: list[float] = []
        self._cursor = 0

    def next(self) -> float:
        """[0, 1) の一様乱数を 1 つ返す。"""
        if self._cursor >= len(self._buffer):
            self._buffer = self._rng.random(_BLOCK_SIZE).tolist()
            self._cursor = 0
        value = self._buffer[self._cursor]
        self._cursor += 1
        return value

    def next_array(self, shape: int | tuple[int, ...]) -> np.ndarray:
        """[0, 1) の一様乱数を shape 分まとめて返す（C 順で `next()` と同順）。"""
        dims = (int(shape),) if isinstance(shape, (int, np.integer)) else tuple(int(s) for s in shape)
        n = math.prod(dims)
        pending = self._buffer[self._cursor : self._cursor + n]
        self._cursor += len(pending)
        rest = n - len(pending)
        if rest > 0:
            out = np.concatenate([np.asarray(pending, dtype=np.float64), self._rng.random(rest)])
        else:
            out = np.asarray(pending, dtype=np.float64)
        return out.reshape(dims)


__all__ = ["DeterministicRandom"]
