#!/usr/bin/env python3
"""
Errors
======
Exception hierarchy for chain building, persistence and generation.

Every error carries the process exit code the CLI reports it with.
"""

from typing import Optional


class MarkovChainError(Exception):
    """Base class for all wordchain errors."""
    exit_code = 1


class ConfigError(MarkovChainError):
    """Invalid order, word count, sampler name or setting."""
    exit_code = 2


class ChainIOError(MarkovChainError, OSError):
    """An input corpus or model file could not be opened."""
    exit_code = 3


class FormatError(MarkovChainError, ValueError):
    """Malformed model text. Aborts the whole read."""
    exit_code = 4

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class ExhaustedChainError(MarkovChainError):
    """Generation was requested from a chain with no prefixes."""
    exit_code = 5


__all__ = [
    'MarkovChainError',
    'ConfigError',
    'ChainIOError',
    'FormatError',
    'ExhaustedChainError',
]
