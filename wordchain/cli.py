#!/usr/bin/env python3
"""
Wordchain CLI
=============
Command-line interface for building Markov chain models and generating text.

Usage:
    wordchain read 2 model.txt corpus1.txt corpus2.txt
    wordchain generate model.txt 100 --seed 42
    wordchain inspect model.txt --top 20
"""

import argparse
import io
import logging
import random
import sys
from pathlib import Path

# Add parent to path
_parent = Path(__file__).parent.parent
if str(_parent) not in sys.path:
    sys.path.insert(0, str(_parent))

from rich.console import Console
from rich.logging import RichHandler

from wordchain import __version__
from wordchain.config import SAMPLERS, BuildConfig, GenerationConfig
from wordchain.errors import ChainIOError, MarkovChainError
from wordchain.settings import get_setting

logger = logging.getLogger(__name__)


# =============================================================================
# Utilities
# =============================================================================

class Output:
    """Handles CLI output with quiet mode support."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet

    def print(self, *args, **kwargs):
        if not self.quiet:
            print(*args, **kwargs)

    def error(self, msg: str):
        print(f"Error: {msg}", file=sys.stderr)

    def success(self, msg: str):
        if not self.quiet:
            print(f"OK: {msg}")


def configure_logging(verbose: bool = False, quiet: bool = False):
    """Route log records to stderr through rich."""
    level = get_setting("logging.level", "WARNING")
    if verbose:
        level = "DEBUG"
    elif quiet:
        level = "ERROR"

    logging.basicConfig(
        level=level,
        format=get_setting("logging.format", "%(message)s"),
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def open_corpus(name: str, encoding: str):
    """Open an input corpus; '-' is standard input."""
    if name == '-':
        return io.TextIOWrapper(sys.stdin.buffer, encoding=encoding)
    try:
        return open(name, 'r', encoding=encoding)
    except OSError as e:
        raise ChainIOError(f"cannot open input file {name}: {e.strerror or e}") from e


# =============================================================================
# Commands
# =============================================================================

def cmd_read(args, out: Output):
    """Build a model from one or more corpora and save it."""
    from wordchain.chain import ChainBuilder
    from wordchain.model_io import save_chain

    cfg = BuildConfig(order=args.order)
    builder = ChainBuilder(cfg.order)

    for name in args.infiles:
        out.print(f"Reading corpus {name}")
        stream = open_corpus(name, cfg.encoding)
        try:
            tokens = builder.ingest_stream(stream)
        except UnicodeDecodeError as e:
            raise ChainIOError(f"input file {name} is not valid {cfg.encoding} text") from e
        finally:
            if name == '-':
                stream.detach()   # leave sys.stdin open
            else:
                stream.close()
        logger.info(f"{name}: {tokens} tokens")

    lines = save_chain(builder.chain, args.outfile, cfg.encoding)
    out.success(f"Wrote {lines} prefixes (order {cfg.order}) to {args.outfile}")
    return 0


def cmd_generate(args, out: Output):
    """Generate text from a saved model."""
    from wordchain.generator import Generator
    from wordchain.model_io import load_chain
    from wordchain.sampling import get_sampler

    cfg = GenerationConfig(words=args.wordcount, sampler=args.sampler, seed=args.seed)
    chain = load_chain(args.modelfile, get_setting("build.encoding", "utf-8"))

    generator = Generator(chain, rng=random.Random(cfg.seed), sampler=get_sampler(cfg.sampler))
    print(generator.generate_text(cfg.words))
    return 0


def cmd_inspect(args, out: Output):
    """Show statistics for a saved model."""
    from wordchain.model_io import load_chain
    from wordchain.ui import render_summary, summarize

    top = args.top if args.top is not None else get_setting("ui.top_prefixes", 10)
    chain = load_chain(args.modelfile, get_setting("build.encoding", "utf-8"))

    if out.quiet:
        return 0
    render_summary(summarize(chain, top=top), Console(), title=str(args.modelfile))
    return 0


# =============================================================================
# Entry point
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='wordchain',
        description='Wordchain - Markov chain text builder & generator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s read 2 model.txt corpus.txt
  %(prog)s read 3 model.txt part1.txt part2.txt
  cat corpus.txt | %(prog)s read 2 model.txt -
  %(prog)s generate model.txt 100
  %(prog)s generate model.txt 50 --seed 7 --sampler cumulative
  %(prog)s inspect model.txt --top 20
"""
    )

    parser.add_argument('--version', '-V', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress non-essential output')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # --- read ---
    p = subparsers.add_parser('read', aliases=['READ', 'r'], help='Build a model from corpora')
    p.add_argument('order', help='Prefix length in words (positive integer)')
    p.add_argument('outfile', help='Model file to write')
    p.add_argument('infiles', nargs='+', help="Input corpora ('-' for stdin)")

    # --- generate ---
    p = subparsers.add_parser('generate', aliases=['GENERATE', 'gen', 'g'],
                              help='Generate text from a model')
    p.add_argument('modelfile', help='Model file written by read')
    p.add_argument('wordcount', nargs='?', help='Maximum number of words (default from app.yaml)')
    p.add_argument('--seed', type=int, help='Seed for reproducible output')
    p.add_argument('--sampler', choices=SAMPLERS,
                   help='Weighted sampling strategy (default from app.yaml)')

    # --- inspect ---
    p = subparsers.add_parser('inspect', aliases=['INSPECT', 'info'], help='Show model statistics')
    p.add_argument('modelfile', help='Model file written by read')
    p.add_argument('--top', '-t', type=int, help='Number of busiest prefixes to list')

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    # Handle aliases
    cmd_map = {
        'READ': 'read', 'r': 'read',
        'GENERATE': 'generate', 'gen': 'generate', 'g': 'generate',
        'INSPECT': 'inspect', 'info': 'inspect',
    }
    command = cmd_map.get(args.command, args.command)

    out = Output(quiet=args.quiet)
    configure_logging(verbose=args.verbose, quiet=args.quiet)

    commands = {
        'read': cmd_read,
        'generate': cmd_generate,
        'inspect': cmd_inspect,
    }

    handler = commands.get(command)
    if handler:
        try:
            return handler(args, out)
        except KeyboardInterrupt:
            out.print("\nCancelled.")
            return 130
        except MarkovChainError as e:
            out.error(str(e))
            return e.exit_code
        except Exception as e:
            out.error(str(e))
            if args.verbose:
                import traceback
                traceback.print_exc()
            return 1

    parser.print_help()
    return 0


if __name__ == '__main__':
    sys.exit(main())
