#!/usr/bin/env python3
"""
Model Persistence
=================
Reads and writes chains in a line-oriented text format:

    <order>
    <prefix_tok_1> ... <prefix_tok_k> <suffix_1> <count_1> [<suffix_2> <count_2> ...]
    ...

- Line 1 is the order k.
- One line per distinct prefix, in first-seen order.
- Fields are separated by a single space.
- The empty placeholder token is written as "" and read back as ''.
- Counts are cumulative totals over every ingested corpus.

Usage:
    from wordchain.model_io import save_chain, load_chain

    save_chain(builder.chain, "model.txt")
    chain = load_chain("model.txt")
"""

import io
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterator, List, TextIO

from wordchain.chain import Chain, Prefix
from wordchain.errors import ChainIOError, FormatError

logger = logging.getLogger(__name__)

EMPTY_TOKEN = '""'


def quote_token(token: str) -> str:
    return EMPTY_TOKEN if token == '' else token


def unquote_token(field: str) -> str:
    return '' if field == EMPTY_TOKEN else field


def parse_decimal(raw: str) -> int:
    """Parse an ASCII decimal integer with an optional leading minus sign."""
    digits = raw[1:] if raw.startswith('-') else raw
    if not (digits.isascii() and digits.isdigit()):
        raise ValueError(f"not a decimal integer: {raw!r}")
    return int(raw)


# =============================================================================
# WRITER
# =============================================================================

class ModelWriter:
    """
    Serializes a Chain.

    Line order comes from replaying each corpus with the same sliding window
    the builder used: a prefix's line is written the first time the replay
    reaches it and never again. Each line carries the prefix's final suffix
    counts, not the counts known at that point of the replay.
    """

    def iter_prefix_keys(self, chain: Chain) -> Iterator[str]:
        """Yield every prefix key once, in replay order."""
        emitted = set()
        for record in chain.corpora:
            window = Prefix.empty(chain.order)
            for token in record:
                key = window.key
                if key not in emitted:
                    emitted.add(key)
                    yield key
                window = window.shift(token)

        # Chains without corpus records (loaded from a file, or merged from
        # loaded chains) fall back to first-seen order.
        for key in chain.table:
            if key not in emitted:
                emitted.add(key)
                yield key

    def format_line(self, chain: Chain, key: str) -> str:
        try:
            prefix = Prefix.from_key(key, chain.order)
        except ValueError as e:
            raise FormatError(f"cannot write prefix: {e}") from None
        fields: List[str] = [quote_token(token) for token in prefix.tokens]
        for suffix, count in chain.table.suffixes(key).items():
            fields.append(quote_token(suffix))
            fields.append(str(count))
        return ' '.join(fields)

    def write(self, chain: Chain, stream: TextIO) -> int:
        """
        Write `chain` to a text stream.

        Returns:
            Number of prefix lines written
        """
        stream.write(f"{chain.order}\n")
        lines = 0
        for key in self.iter_prefix_keys(chain):
            stream.write(self.format_line(chain, key) + "\n")
            lines += 1
        return lines

    def dumps(self, chain: Chain) -> str:
        buffer = io.StringIO()
        self.write(chain, buffer)
        return buffer.getvalue()


# =============================================================================
# READER
# =============================================================================

class ModelReader:
    """
    Parses the model format back into a Chain.

    Any malformed line aborts the read with FormatError; a partially parsed
    chain is never returned.
    """

    def read(self, stream: TextIO) -> Chain:
        header = stream.readline()
        if not header:
            raise FormatError("missing order header", line_number=1)
        try:
            order = parse_decimal(header.strip())
        except ValueError:
            raise FormatError(f"order header is not an integer: {header.strip()!r}",
                              line_number=1) from None
        if order < 0:
            raise FormatError(f"order must not be negative, got {order}", line_number=1)

        chain = Chain(order=order)
        for line_number, line in enumerate(stream, start=2):
            self._parse_line(chain, line, line_number)
        return chain

    def _parse_line(self, chain: Chain, line: str, line_number: int):
        order = chain.order
        fields = [unquote_token(f) for f in line.split()]
        if len(fields) < order:
            raise FormatError(
                f"expected at least {order} prefix fields, got {len(fields)}",
                line_number=line_number,
            )

        key = ' '.join(fields[:order])
        pairs = fields[order:]
        if len(pairs) % 2:
            raise FormatError("suffix/count fields are not paired", line_number=line_number)

        parsed = []
        for suffix, raw_count in zip(pairs[0::2], pairs[1::2]):
            try:
                count = parse_decimal(raw_count)
            except ValueError:
                raise FormatError(f"count for {suffix!r} is not an integer: {raw_count!r}",
                                  line_number=line_number) from None
            if count < 1:
                raise FormatError(f"count for {suffix!r} must be positive, got {count}",
                                  line_number=line_number)
            parsed.append((suffix, count))

        chain.table.ensure(key)
        for suffix, count in parsed:
            chain.table.add(key, suffix, count)

    def loads(self, text: str) -> Chain:
        return self.read(io.StringIO(text))


# =============================================================================
# FILES
# =============================================================================

def save_chain(chain: Chain, filepath, encoding: str = 'utf-8') -> int:
    """Write `chain` to `filepath`. Returns the number of prefix lines."""
    path = Path(filepath)
    tmp_name = None
    try:
        # Written beside the target, then renamed over it.
        with tempfile.NamedTemporaryFile('w', encoding=encoding, newline='\n',
                                         dir=path.parent, prefix=f".{path.name}.",
                                         suffix=".tmp", delete=False) as f:
            tmp_name = f.name
            lines = ModelWriter().write(chain, f)
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        raise ChainIOError(f"cannot write model file {path}: {e.strerror or e}") from e
    finally:
        if tmp_name is not None:
            os.unlink(tmp_name)
    logger.info(f"Wrote {lines} prefixes (order {chain.order}) to {path}")
    return lines


def load_chain(filepath, encoding: str = 'utf-8') -> Chain:
    """Read a chain from `filepath`."""
    path = Path(filepath)
    try:
        with path.open('r', encoding=encoding) as f:
            chain = ModelReader().read(f)
    except OSError as e:
        raise ChainIOError(f"cannot read model file {path}: {e.strerror or e}") from e
    except UnicodeDecodeError as e:
        raise FormatError(f"model file {path} is not valid {encoding} text") from e
    logger.info(f"Loaded {len(chain)} prefixes (order {chain.order}) from {path}")
    return chain


__all__ = [
    'EMPTY_TOKEN',
    'ModelWriter',
    'ModelReader',
    'save_chain',
    'load_chain',
]
