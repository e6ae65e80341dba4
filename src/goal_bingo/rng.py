from __future__ import annotations

import hashlib
import random
import secrets
from dataclasses import dataclass
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")

ENGINES = ("py_random", "numpy_pcg64")


@dataclass
class RandomSource:
    """Injectable randomness; every engine operation that picks a cell takes one."""

    engine: str
    seed: int

    def randint(self, a: int, b: int) -> int:
        raise NotImplementedError

    def random(self) -> float:
        raise NotImplementedError

    def choice(self, seq: Sequence[T]) -> T:
        raise NotImplementedError

    def shuffle(self, arr: List[T]) -> None:
        raise NotImplementedError

    def sample(self, seq: Sequence[T], k: int) -> List[T]:
        raise NotImplementedError


class PyRandomSource(RandomSource):
    def __init__(self, seed: int):
        super().__init__(engine="py_random", seed=seed)
        self._rng = random.Random(seed)

    def randint(self, a: int, b: int) -> int:
        return self._rng.randint(a, b)

    def random(self) -> float:
        return self._rng.random()

    def choice(self, seq: Sequence[T]) -> T:
        if not seq:
            raise IndexError("cannot choose from an empty sequence")
        return self._rng.choice(list(seq))

    def shuffle(self, arr: List[T]) -> None:
        self._rng.shuffle(arr)

    def sample(self, seq: Sequence[T], k: int) -> List[T]:
        return self._rng.sample(list(seq), k)


class NumpyPCG64Source(RandomSource):
    def __init__(self, seed: int):
        try:
            import numpy as np
        except ImportError as exc:
            raise RuntimeError("numpy is not installed; install goal-bingo[pcg]") from exc
        super().__init__(engine="numpy_pcg64", seed=seed)
        self._rng = np.random.Generator(np.random.PCG64(seed))

    def randint(self, a: int, b: int) -> int:
        return int(self._rng.integers(low=a, high=b + 1))

    def random(self) -> float:
        return float(self._rng.random())

    def choice(self, seq: Sequence[T]) -> T:
        if not seq:
            raise IndexError("cannot choose from an empty sequence")
        return seq[int(self._rng.integers(low=0, high=len(seq)))]

    def shuffle(self, arr: List[T]) -> None:
        self._rng.shuffle(arr)

    def sample(self, seq: Sequence[T], k: int) -> List[T]:
        idxs = self._rng.choice(len(seq), size=k, replace=False)
        return [seq[int(i)] for i in idxs]


def create_rng(engine: str, seed: Optional[int] = None) -> RandomSource:
    engine = (engine or "py_random").strip().lower()
    if seed is None:
        seed = secrets.randbits(63)
    if engine == "py_random":
        return PyRandomSource(seed)
    if engine == "numpy_pcg64":
        return NumpyPCG64Source(seed)
    raise ValueError(f"Unsupported RNG engine: {engine}")


def derive_seed(base_seed: int, index: int | str, purpose: str) -> int:
    """Derive a sub-seed from base seed, index and purpose using sha256.

    Returns a 63-bit positive integer suitable for seeding common RNGs.
    """
    s = f"{base_seed}|{index}|{purpose}".encode("utf-8")
    digest = hashlib.sha256(s).digest()
    return int.from_bytes(digest[:8], byteorder="big") & ((1 << 63) - 1)
