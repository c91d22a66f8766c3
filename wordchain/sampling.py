#!/usr/bin/env python3
"""
Weighted Sampling
=================
Strategies for drawing a suffix with probability proportional to its count.

Both samplers produce the same distribution; they differ only in cost:
- FlatPoolSampler: repeats each suffix `count` times and draws uniformly.
  Memory and time grow with the total observation count of the prefix.
- CumulativeSampler: binary search over cumulative weights. O(m) setup and
  O(log m) per draw for m distinct suffixes.
"""

import random
from bisect import bisect_right
from itertools import accumulate
from typing import Mapping

from wordchain.config import SAMPLERS
from wordchain.errors import ConfigError


class WeightedSampler:
    """Interface for count-weighted choice."""

    name = None

    def choose(self, weights: Mapping[str, int], rng: random.Random) -> str:
        """
        Draw one key of `weights`.

        Args:
            weights: Non-empty mapping of suffix -> positive count
            rng: Random source to draw from

        Returns:
            The chosen suffix
        """
        raise NotImplementedError


class FlatPoolSampler(WeightedSampler):
    """Flatten counts into a repeated pool and pick uniformly from it."""

    name = 'flat'

    def choose(self, weights: Mapping[str, int], rng: random.Random) -> str:
        # {"how": 2, "can": 1} -> ["how", "how", "can"]
        pool = []
        for suffix, count in weights.items():
            pool.extend([suffix] * count)
        return pool[rng.randrange(len(pool))]


class CumulativeSampler(WeightedSampler):
    """Pick by binary search over cumulative counts."""

    name = 'cumulative'

    def choose(self, weights: Mapping[str, int], rng: random.Random) -> str:
        suffixes = list(weights.keys())
        cumulative = list(accumulate(weights.values()))
        point = rng.randrange(cumulative[-1])
        return suffixes[bisect_right(cumulative, point)]


_SAMPLERS = {
    FlatPoolSampler.name: FlatPoolSampler,
    CumulativeSampler.name: CumulativeSampler,
}


def get_sampler(name: str) -> WeightedSampler:
    """Resolve a sampler by name ('flat' or 'cumulative')."""
    sampler_cls = _SAMPLERS.get(name)
    if sampler_cls is None:
        raise ConfigError(
            f"Unknown sampler '{name}'. Available samplers: {', '.join(SAMPLERS)}"
        )
    return sampler_cls()


__all__ = [
    'WeightedSampler',
    'FlatPoolSampler',
    'CumulativeSampler',
    'get_sampler',
]
