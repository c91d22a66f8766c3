#!/usr/bin/env python3
"""
Text Generator
==============
Frequency-weighted random walk over a loaded chain.

Starting from a uniformly chosen prefix, each step draws a suffix of the
current window with probability proportional to its count, emits it and
shifts the window. The walk stops after `n` tokens or at a prefix with no
recorded suffixes, whichever comes first. The word limit is needed because
the chain may contain cycles.
"""

import logging
import random
from typing import List, Optional

from wordchain.chain import Chain, Prefix
from wordchain.errors import ConfigError, ExhaustedChainError
from wordchain.sampling import FlatPoolSampler, WeightedSampler

logger = logging.getLogger(__name__)


class Generator:
    """
    Generates token sequences from a Chain. The chain is never modified.

    Usage:
        gen = Generator(chain, rng=random.Random(42))
        print(gen.generate_text(100))
    """

    def __init__(self,
                 chain: Chain,
                 rng: Optional[random.Random] = None,
                 sampler: Optional[WeightedSampler] = None):
        """
        Args:
            chain: Chain to walk
            rng: Random source (default: a new OS-seeded random.Random)
            sampler: Weighted choice strategy (default: FlatPoolSampler)
        """
        self.chain = chain
        self.rng = rng if rng is not None else random.Random()
        self.sampler = sampler if sampler is not None else FlatPoolSampler()

    def generate(self, n: int) -> List[str]:
        """
        Generate up to `n` tokens.

        The k tokens of the starting prefix are always emitted, so n <= k
        yields exactly that prefix.

        Raises:
            ExhaustedChainError: if the chain has no prefixes
        """
        if n < 0:
            raise ConfigError(f"word count must not be negative, got {n}")

        prefixes = self.chain.prefixes
        if not prefixes:
            raise ExhaustedChainError("chain has no prefixes to start from")

        start = self.rng.randrange(len(prefixes))
        window = Prefix.from_key(prefixes[start], self.chain.order)
        words = list(window.tokens)

        table = self.chain.table
        while len(words) < n:
            choices = table.suffixes(window.key)
            if not choices:
                logger.debug(f"Dead end at prefix {window.key!r} after {len(words)} tokens")
                break
            suffix = self.sampler.choose(choices, self.rng)
            words.append(suffix)
            window = window.shift(suffix)

        return words

    def generate_text(self, n: int) -> str:
        """Generate up to `n` tokens as text, without empty placeholder tokens."""
        return ' '.join(token for token in self.generate(n) if token)


__all__ = ['Generator']
