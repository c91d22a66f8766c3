#!/usr/bin/env python3
"""
Word-Level Markov Chain
=======================
Builds a frequency table of token transitions from one or more corpora.

A chain of order k maps every k-token window ("prefix") seen in the input to
the tokens that followed it ("suffixes") and how often. Consider:

    I am not a number! I am a free man!

With k = 2 the table is:

    Prefix       Suffixes

    "" ""        I: 1
    "" I         am: 1
    I am         not: 1, a: 1
    am not       a: 1
    not a        number!: 1
    a number!    I: 1
    number! I    am: 1
    am a         free: 1
    a free       man!: 1

The window starts as k empty placeholder tokens, so the first tokens of a
corpus are recorded under partially empty prefixes.

The table keeps prefixes in first-seen order, which doubles as the chain's
prefix order list. Raw tokens of each corpus are kept so the model writer can
replay them.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, TextIO, Tuple

from wordchain.config import parse_order
from wordchain.errors import ConfigError

logger = logging.getLogger(__name__)


# =============================================================================
# PREFIX
# =============================================================================

@dataclass(frozen=True)
class Prefix:
    """Fixed-length window of tokens. Immutable; shift() returns a new one."""
    tokens: Tuple[str, ...]

    @classmethod
    def empty(cls, order: int) -> 'Prefix':
        """Window of `order` empty placeholder tokens."""
        return cls(('',) * order)

    @classmethod
    def from_key(cls, key: str, order: int) -> 'Prefix':
        """Rebuild a prefix from its string key."""
        if order == 0:
            return cls(())
        tokens = tuple(key.split(' '))
        if len(tokens) != order:
            raise ValueError(f"key {key!r} does not hold {order} tokens")
        return cls(tokens)

    @property
    def key(self) -> str:
        """Canonical map key: tokens joined with a single space."""
        return ' '.join(self.tokens)

    def shift(self, token: str) -> 'Prefix':
        """Drop the first token and append `token`."""
        if not self.tokens:
            return self
        return Prefix(self.tokens[1:] + (token,))

    def __len__(self) -> int:
        return len(self.tokens)

    def __str__(self) -> str:
        return self.key


# =============================================================================
# FREQUENCY TABLE
# =============================================================================

class FrequencyTable:
    """
    Insertion-ordered mapping of prefix key -> suffix -> count.

    Iterating the table yields prefix keys in first-seen order. Suffixes of a
    prefix are likewise kept in first-observed order. Every stored count is
    at least 1; a key registered with ensure() may have no suffixes at all.
    """

    def __init__(self):
        self._counts: dict = {}

    def add(self, key: str, suffix: str, count: int = 1):
        """Record `count` observations of `suffix` following `key`."""
        if count < 1:
            raise ValueError(f"count must be at least 1, got {count}")
        suffixes = self._counts.get(key)
        if suffixes is None:
            suffixes = self._counts[key] = Counter()
        suffixes[suffix] += count

    def ensure(self, key: str):
        """Register `key` with no suffixes. A no-op for known keys."""
        if key not in self._counts:
            self._counts[key] = Counter()

    def suffixes(self, key: str) -> dict:
        """Suffix counts for `key` (a copy; empty if the key is unknown)."""
        return dict(self._counts.get(key, {}))

    def total(self, key: str) -> int:
        """Number of times `key` was followed by a token."""
        return sum(self._counts.get(key, {}).values())

    def observations(self) -> int:
        """Total number of recorded transitions."""
        return sum(sum(c.values()) for c in self._counts.values())

    def items(self) -> Iterator[Tuple[str, dict]]:
        for key, suffixes in self._counts.items():
            yield key, dict(suffixes)

    def merge(self, other: 'FrequencyTable'):
        """Add all counts from `other`. Keys new to this table keep other's order."""
        for key, suffixes in other.items():
            self.ensure(key)
            for suffix, count in suffixes.items():
                self.add(key, suffix, count)

    def as_dict(self) -> dict:
        return {key: dict(suffixes) for key, suffixes in self._counts.items()}

    def __contains__(self, key) -> bool:
        return key in self._counts

    def __iter__(self) -> Iterator[str]:
        return iter(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def __eq__(self, other) -> bool:
        if not isinstance(other, FrequencyTable):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __repr__(self) -> str:
        return f"FrequencyTable({len(self)} prefixes, {self.observations()} observations)"


# =============================================================================
# CHAIN
# =============================================================================

@dataclass
class Chain:
    """
    A Markov chain model: order, frequency table and per-corpus token records.

    `corpora` holds the raw tokens of every ingested corpus. It is empty for
    chains loaded from a model file.
    """
    order: int
    table: FrequencyTable = field(default_factory=FrequencyTable)
    corpora: List[List[str]] = field(default_factory=list)

    @property
    def prefixes(self) -> List[str]:
        """Distinct prefix keys in first-seen order."""
        return list(self.table)

    def prefix(self, index: int) -> Prefix:
        return Prefix.from_key(self.prefixes[index], self.order)

    def is_empty(self) -> bool:
        return len(self.table) == 0

    def __len__(self) -> int:
        return len(self.table)


# =============================================================================
# BUILDING
# =============================================================================

def iter_tokens(stream: TextIO) -> Iterator[str]:
    """Lazily split a text stream into whitespace-delimited tokens."""
    for line in stream:
        yield from line.split()


class ChainBuilder:
    """
    Builds a Chain from one or more corpora.

    Each ingest() call is one corpus. Counts accumulate in a single table;
    the raw tokens of each corpus are recorded separately.

    Usage:
        builder = ChainBuilder(order=2)
        with open("corpus.txt") as f:
            builder.ingest_stream(f)
        chain = builder.chain
    """

    def __init__(self, order: int):
        self.order = parse_order(order)
        self.chain = Chain(order=self.order)

    def ingest(self, tokens: Iterable[str]) -> int:
        """
        Consume a token stream as one corpus.

        Args:
            tokens: Iterable of tokens, consumed lazily

        Returns:
            Number of tokens consumed

        Raises:
            ConfigError: on an empty token or one containing whitespace.
                Tokens before it stay ingested.
        """
        table = self.chain.table
        record: List[str] = []
        self.chain.corpora.append(record)

        window = Prefix.empty(self.order)
        for token in tokens:
            if not token or token != ''.join(token.split()):
                raise ConfigError(
                    f"token {token!r} at position {len(record)} is empty or contains whitespace"
                )
            table.add(window.key, token)
            record.append(token)
            window = window.shift(token)

        logger.debug(
            f"Ingested corpus {len(self.chain.corpora)}: {len(record)} tokens, "
            f"{len(table)} prefixes so far"
        )
        return len(record)

    def ingest_stream(self, stream: TextIO) -> int:
        """Tokenize a text stream on whitespace and ingest it as one corpus."""
        return self.ingest(iter_tokens(stream))


def merge_chains(chains: Iterable[Chain]) -> Chain:
    """
    Merge independently built chains of the same order.

    Counts are summed per prefix. Prefix order follows argument order: the
    first chain's prefixes, then prefixes first seen in each later chain.
    Corpus records are concatenated in the same order, so writing the merged
    chain replays them consistently with that prefix order.
    """
    chains = list(chains)
    if not chains:
        raise ConfigError("no chains to merge")

    order = chains[0].order
    merged = Chain(order=order)
    for chain in chains:
        if chain.order != order:
            raise ConfigError(f"cannot merge chains of order {order} and {chain.order}")
        merged.table.merge(chain.table)
        merged.corpora.extend(list(record) for record in chain.corpora)
    return merged


__all__ = [
    'Prefix',
    'FrequencyTable',
    'Chain',
    'ChainBuilder',
    'iter_tokens',
    'merge_chains',
]
