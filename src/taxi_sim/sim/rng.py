# sim/rng.py
from __future__ import annotations

from dataclasses import dataclass
from functools import cache
from zlib import crc32

import numpy as np


def _u32(x: int) -> int:
    return int(x & 0xFFFFFFFF)


def _crc32_u32(s: str) -> int:
    return _u32(crc32(s.encode("utf-8")))


@dataclass(frozen=True)
class RNGKey:
    stream: str
    parts: tuple[int, ...]  # normalized to u32

    @classmethod
    def named(cls, stream: str) -> RNGKey:
        return cls(stream=stream, parts=(_crc32_u32(stream),))


class RNGRegistry:
    """
    Deterministic numpy Generator streams, one per concern ("deliveries",
    "sizing", "palette", "routing").
    Seed path: [master_seed, scenario, *key.parts]; streams do not consume
    each other's state, so adding a consumer never shifts another's draws.
    """

    def __init__(self, master_seed: int, *, scenario: str | int = 0):
        self.master_seed = _u32(master_seed)
        self.scenario_tag = _crc32_u32(str(scenario))

    @cache
    def generator(self, key: RNGKey) -> np.random.Generator:
        ss = np.random.SeedSequence(entropy=[self.master_seed, self.scenario_tag, *key.parts])
        return np.random.Generator(np.random.PCG64(ss))

    def stream(self, name: str) -> np.random.Generator:
        return self.generator(RNGKey.named(name))

