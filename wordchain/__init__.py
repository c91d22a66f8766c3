#!/usr/bin/env python3
"""
Wordchain - Markov Chain Text Builder & Generator
=================================================

Learns word-level Markov chains from text corpora, saves them in a plain
text model format and generates new text from them.

Quick Start
-----------
    import random
    from wordchain import ChainBuilder, Generator, save_chain, load_chain

    builder = ChainBuilder(order=2)
    builder.ingest("I am not a number! I am a free man!".split())
    save_chain(builder.chain, "model.txt")

    chain = load_chain("model.txt")
    text = Generator(chain, rng=random.Random(1)).generate_text(20)

Modules
-------
    wordchain.chain      - Prefix, FrequencyTable, Chain, ChainBuilder
    wordchain.model_io   - Model file writer and reader
    wordchain.generator  - Weighted random walk over a chain
    wordchain.sampling   - Weighted choice strategies
    wordchain.config     - Build/generation settings (app.yaml)
    wordchain.errors     - Exception hierarchy

CLI Usage
---------
    python -m wordchain read 2 model.txt corpus.txt
    python -m wordchain generate model.txt 100
    python -m wordchain inspect model.txt
"""

__version__ = "0.1.0"
__author__ = "Wordchain"

import sys
from pathlib import Path

# Ensure parent directory is in path for imports
_parent = Path(__file__).parent.parent
if str(_parent) not in sys.path:
    sys.path.insert(0, str(_parent))

# =============================================================================
# Public API
# =============================================================================

from .errors import (
    MarkovChainError,
    ConfigError,
    ChainIOError,
    FormatError,
    ExhaustedChainError,
)
from .config import BuildConfig, GenerationConfig
from .chain import (
    Prefix,
    FrequencyTable,
    Chain,
    ChainBuilder,
    iter_tokens,
    merge_chains,
)
from .model_io import (
    ModelWriter,
    ModelReader,
    save_chain,
    load_chain,
)
from .sampling import (
    WeightedSampler,
    FlatPoolSampler,
    CumulativeSampler,
    get_sampler,
)
from .generator import Generator

__all__ = [
    '__version__',
    # Errors
    'MarkovChainError',
    'ConfigError',
    'ChainIOError',
    'FormatError',
    'ExhaustedChainError',
    # Config
    'BuildConfig',
    'GenerationConfig',
    # Model
    'Prefix',
    'FrequencyTable',
    'Chain',
    'ChainBuilder',
    'iter_tokens',
    'merge_chains',
    # Persistence
    'ModelWriter',
    'ModelReader',
    'save_chain',
    'load_chain',
    # Generation
    'WeightedSampler',
    'FlatPoolSampler',
    'CumulativeSampler',
    'get_sampler',
    'Generator',
]
