#!/usr/bin/env python3
"""
Model Summary UI
================
Rich-based terminal rendering for `wordchain inspect`.

Usage:
    from wordchain.ui import summarize, render_summary

    summary = summarize(chain, top=10)
    render_summary(summary, Console())
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich import box

from wordchain.chain import Chain
from wordchain.model_io import quote_token


@dataclass
class PrefixStats:
    """Statistics for one prefix."""
    key: str
    observations: int
    distinct_suffixes: int
    top_suffixes: List[Tuple[str, int]] = field(default_factory=list)


@dataclass
class ChainSummary:
    """Aggregate statistics for a chain."""
    order: int
    prefixes: int
    observations: int
    distinct_suffixes: int
    dead_ends: int
    busiest: List[PrefixStats] = field(default_factory=list)


def display_key(key: str, order: int) -> str:
    """Prefix key with empty placeholders shown as ""."""
    if order == 0:
        return '(empty)'
    return ' '.join(quote_token(t) for t in key.split(' '))


def summarize(chain: Chain, top: int = 10) -> ChainSummary:
    """Collect statistics for a chain, with the `top` most observed prefixes."""
    stats = []
    suffix_vocab = set()
    for key, suffixes in chain.table.items():
        suffix_vocab.update(suffixes)
        ranked = sorted(suffixes.items(), key=lambda kv: -kv[1])
        stats.append(PrefixStats(
            key=key,
            observations=sum(suffixes.values()),
            distinct_suffixes=len(suffixes),
            top_suffixes=ranked[:3],
        ))

    # A dead end is a suffix that completes a window no line starts with.
    dead_ends = 0
    if chain.order > 0:
        for key, suffixes in chain.table.items():
            head = key.split(' ')[1:]
            for suffix in suffixes:
                if ' '.join(head + [suffix]) not in chain.table:
                    dead_ends += 1

    busiest = sorted(stats, key=lambda s: -s.observations)[:max(top, 0)]
    return ChainSummary(
        order=chain.order,
        prefixes=len(chain.table),
        observations=chain.table.observations(),
        distinct_suffixes=len(suffix_vocab),
        dead_ends=dead_ends,
        busiest=busiest,
    )


def render_summary(summary: ChainSummary, console: Console, title: str = "Model"):
    """Print a summary panel and a table of the busiest prefixes."""
    overview = Table.grid(padding=(0, 2))
    overview.add_column(style="bold cyan")
    overview.add_column()
    overview.add_row("Order", str(summary.order))
    overview.add_row("Prefixes", f"{summary.prefixes:,}")
    overview.add_row("Observations", f"{summary.observations:,}")
    overview.add_row("Distinct suffixes", f"{summary.distinct_suffixes:,}")
    overview.add_row("Dead-end transitions", f"{summary.dead_ends:,}")

    if summary.busiest:
        table = Table(box=box.SIMPLE, show_edge=False, header_style="bold")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Prefix")
        table.add_column("Count", justify="right")
        table.add_column("Suffixes", justify="right")
        table.add_column("Most frequent")
        for i, stats in enumerate(summary.busiest, 1):
            common = ', '.join(f"{quote_token(s)} ({c})" for s, c in stats.top_suffixes)
            table.add_row(
                str(i),
                display_key(stats.key, summary.order),
                str(stats.observations),
                str(stats.distinct_suffixes),
                common,
            )
        body = Group(overview, Text(""), table)
    else:
        body = Group(overview, Text("(empty chain)", style="dim"))

    console.print(Panel(body, title=title, border_style="blue"))


__all__ = [
    'PrefixStats',
    'ChainSummary',
    'summarize',
    'render_summary',
]
