#!/usr/bin/env python3
"""
Configuration
=============
Build and generation settings, with defaults taken from app.yaml.

Usage:
    from wordchain.config import BuildConfig, GenerationConfig

    build = BuildConfig(order=3)          # encoding from app.yaml
    gen = GenerationConfig(seed=42)       # words/sampler from app.yaml
"""

from dataclasses import dataclass
from typing import Optional

from wordchain.errors import ConfigError
from wordchain.settings import get_setting

SAMPLERS = ('flat', 'cumulative')


def parse_order(value) -> int:
    """Parse a chain order (prefix length). Must be a positive integer."""
    try:
        order = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"order must be an integer, got {value!r}") from None
    if order < 1:
        raise ConfigError(f"order must be at least 1, got {order}")
    return order


def parse_word_count(value) -> int:
    """Parse the number of words to generate. Must be a positive integer."""
    try:
        count = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"word count must be an integer, got {value!r}") from None
    if count < 1:
        raise ConfigError(f"word count must be at least 1, got {count}")
    return count


@dataclass
class BuildConfig:
    """Configuration for building a chain from corpora."""
    order: Optional[int] = None
    encoding: Optional[str] = None

    def __post_init__(self):
        cfg = get_setting("build", {}) or {}
        if self.order is None:
            self.order = cfg.get("default_order")
        if self.encoding is None:
            self.encoding = cfg.get("encoding")

        missing = [
            name for name, value in (
                ("default_order", self.order),
                ("encoding", self.encoding),
            )
            if value is None
        ]
        if missing:
            raise ConfigError(f"build settings missing in app.yaml: {', '.join(missing)}")

        self.order = parse_order(self.order)


@dataclass
class GenerationConfig:
    """Configuration for generating text from a loaded chain."""
    words: Optional[int] = None
    sampler: Optional[str] = None
    seed: Optional[int] = None

    def __post_init__(self):
        cfg = get_setting("generation", {}) or {}
        if self.words is None:
            self.words = cfg.get("default_words")
        if self.sampler is None:
            self.sampler = cfg.get("sampler")
        if self.seed is None:
            self.seed = cfg.get("seed")

        missing = [
            name for name, value in (
                ("default_words", self.words),
                ("sampler", self.sampler),
            )
            if value is None
        ]
        if missing:
            raise ConfigError(f"generation settings missing in app.yaml: {', '.join(missing)}")

        self.words = parse_word_count(self.words)
        if self.sampler not in SAMPLERS:
            raise ConfigError(
                f"Unknown sampler '{self.sampler}'. Available samplers: {', '.join(SAMPLERS)}"
            )
        if self.seed is not None:
            try:
                self.seed = int(self.seed)
            except (TypeError, ValueError):
                raise ConfigError(f"seed must be an integer, got {self.seed!r}") from None
