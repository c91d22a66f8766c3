"""
Tests for Model Persistence
===========================
Tests for ModelWriter, ModelReader, save_chain and load_chain in
wordchain/model_io.py.
"""

import io
import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from wordchain.chain import Chain, ChainBuilder, merge_chains
from wordchain.errors import ChainIOError, FormatError
from wordchain.model_io import ModelReader, ModelWriter, load_chain, save_chain

NUMBER_TEXT = "I am not a number! I am a free man!"

NUMBER_MODEL = (
    "2\n"
    '"" "" I 1\n'
    '"" I am 1\n'
    "I am not 1 a 1\n"
    "am not a 1\n"
    "not a number! 1\n"
    "a number! I 1\n"
    "number! I am 1\n"
    "am a free 1\n"
    "a free man! 1\n"
)


def build(*corpora, order=2) -> Chain:
    builder = ChainBuilder(order)
    for text in corpora:
        builder.ingest(text.split())
    return builder.chain


class TestModelWriter:
    """Tests for the model writer."""

    def test_number_model_exact(self):
        """Writer output is bit-exact for the reference corpus."""
        assert ModelWriter().dumps(build(NUMBER_TEXT)) == NUMBER_MODEL

    def test_empty_chain_writes_header_only(self):
        assert ModelWriter().dumps(build("")) == "2\n"

    def test_cumulative_counts_across_corpora(self):
        """A line written during the first corpus carries later counts too."""
        chain = build("a b", "b a b c", order=1)
        assert ModelWriter().dumps(chain) == (
            "1\n"
            '"" a 1 b 1\n'
            "a b 2\n"
            "b a 1 c 1\n"
        )

    def test_one_line_per_prefix(self):
        text = "the cat sat on the mat the cat sat on the hat"
        chain = build(text, text, order=2)
        lines = ModelWriter().dumps(chain).splitlines()[1:]
        keys = [" ".join(line.split()[:2]) for line in lines]
        assert len(keys) == len(set(keys)) == len(chain)

    def test_short_corpus_quotes_every_empty_slot(self):
        """A corpus shorter than the order yields an all-empty prefix."""
        text = ModelWriter().dumps(build("x", order=3))
        assert text == '3\n"" "" "" x 1\n'

    def test_write_returns_line_count(self):
        buffer = io.StringIO()
        assert ModelWriter().write(build(NUMBER_TEXT), buffer) == 9

    def test_loaded_chain_written_in_first_seen_order(self):
        """Chains without corpus records are written in prefix order."""
        chain = ModelReader().loads(NUMBER_MODEL)
        assert chain.corpora == []
        assert ModelWriter().dumps(chain) == NUMBER_MODEL

    def test_merged_loaded_chains(self):
        left = ModelReader().loads("1\na b 1\n")
        right = ModelReader().loads("1\nb c 2\na d 1\n")
        assert ModelWriter().dumps(merge_chains([left, right])) == (
            "1\n"
            "a b 1 d 1\n"
            "b c 2\n"
        )


class TestModelReader:
    """Tests for the model reader."""

    def test_number_scenario_round_trip(self):
        chain = ModelReader().loads(NUMBER_MODEL)
        assert chain.order == 2
        assert chain.table.suffixes("I am") == {"not": 1, "a": 1}
        assert chain.table == build(NUMBER_TEXT).table

    def test_round_trip_preserves_prefix_order(self):
        original = build(NUMBER_TEXT, "a free man! is not a number!")
        loaded = ModelReader().loads(ModelWriter().dumps(original))
        assert loaded.table == original.table
        assert loaded.prefixes == original.prefixes

    def test_round_trip_is_stable(self):
        """Writing a loaded chain reproduces the file."""
        text = ModelWriter().dumps(build("one two three two one", "three two one", order=1))
        assert ModelWriter().dumps(ModelReader().loads(text)) == text

    def test_empty_marker_restored(self):
        """The "" marker becomes the empty string, not a literal quote pair."""
        chain = ModelReader().loads('3\n"" "" "" x 1\n')
        assert chain.prefixes == ["  "]
        assert chain.prefix(0).tokens == ("", "", "")
        assert '""' not in chain.prefixes[0]

    def test_duplicate_lines_are_summed(self):
        chain = ModelReader().loads("1\na b 1\na b 2 c 1\n")
        assert chain.prefixes == ["a"]
        assert chain.table.suffixes("a") == {"b": 3, "c": 1}

    def test_prefix_without_suffixes(self):
        """A line with only prefix fields registers the prefix with no suffixes."""
        chain = ModelReader().loads("2\na b\nc d e 1\n")
        assert chain.prefixes == ["a b", "c d"]
        assert chain.table.suffixes("a b") == {}
        assert chain.table.total("a b") == 0

    def test_prefix_without_suffixes_round_trip(self):
        text = "2\na b\nc d e 1\n"
        assert ModelWriter().dumps(ModelReader().loads(text)) == text

    def test_prefix_only_line_then_suffixes(self):
        chain = ModelReader().loads("1\na\na b 2\n")
        assert chain.prefixes == ["a"]
        assert chain.table.suffixes("a") == {"b": 2}

    def test_header_only(self):
        chain = ModelReader().loads("2\n")
        assert chain.order == 2
        assert chain.is_empty()

    def test_order_zero(self):
        chain = ModelReader().loads("0\nx 2 y 1\n")
        assert chain.table.suffixes("") == {"x": 2, "y": 1}

    def test_extra_whitespace_tolerated(self):
        chain = ModelReader().loads("2\n  I   am\tnot 1  a 1 \n")
        assert chain.table.suffixes("I am") == {"not": 1, "a": 1}


class TestModelReaderErrors:
    """Malformed input aborts the read with FormatError."""

    @pytest.mark.parametrize("text,line", [
        ("", 1),
        ("two\n", 1),
        ("-1\n", 1),
        ("2\na\n", 2),
        ("2\na b c\n", 2),
        ("2\na b c x\n", 2),
        ("2\na b c 0\n", 2),
        ("2\na b c 1\nd e f 1.5\n", 3),
        ("2\na b c 1\n\n", 3),
        ("2\na b c +3\n", 2),
        ("2\na b c 1_0\n", 2),
        ("2\na b c \u0663\n", 2),
        ("+2\n", 1),
        ("2_0\n", 1),
        ("\u0662\n", 1),
        ("-\n", 1),
    ])
    def test_format_errors(self, text, line):
        with pytest.raises(FormatError) as exc_info:
            ModelReader().loads(text)
        assert exc_info.value.line_number == line
        assert f"line {line}" in str(exc_info.value)

    def test_error_aborts_whole_read(self):
        """Lines after a bad count are never used."""
        reader = ModelReader()
        stream = io.StringIO("1\na b 1\nb c oops\nc d 1\n")
        with pytest.raises(FormatError):
            reader.read(stream)

    def test_format_error_is_value_error(self):
        with pytest.raises(ValueError):
            ModelReader().loads("nope\n")


class TestModelFiles:
    """Tests for save_chain() / load_chain()."""

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "model.txt"
        assert save_chain(build(NUMBER_TEXT), path) == 9
        assert path.read_text() == NUMBER_MODEL
        assert load_chain(path).table == build(NUMBER_TEXT).table

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(ChainIOError):
            load_chain(tmp_path / "missing.txt")

    def test_save_into_missing_directory(self, tmp_path):
        with pytest.raises(ChainIOError):
            save_chain(build(NUMBER_TEXT), tmp_path / "nope" / "model.txt")

    def test_load_binary_file(self, tmp_path):
        path = tmp_path / "model.bin"
        path.write_bytes(b"\xff\xfe\x00\x81")
        with pytest.raises(FormatError):
            load_chain(path)

    def test_io_error_is_os_error(self, tmp_path):
        with pytest.raises(OSError):
            load_chain(tmp_path / "missing.txt")

    def test_failed_save_keeps_existing_model(self, tmp_path):
        """A chain that cannot be written leaves the old file untouched."""
        path = tmp_path / "model.txt"
        save_chain(build(NUMBER_TEXT), path)

        broken = Chain(order=1)
        broken.table.add("a b", "c")    # key holds two tokens for order 1
        with pytest.raises(FormatError):
            save_chain(broken, path)

        assert path.read_text() == NUMBER_MODEL
        assert [p.name for p in tmp_path.iterdir()] == ["model.txt"]

    def test_save_replaces_existing_model(self, tmp_path):
        path = tmp_path / "model.txt"
        path.write_text("stale\n")
        save_chain(build("x", order=3), path)
        assert path.read_text() == '3\n"" "" "" x 1\n'
        assert [p.name for p in tmp_path.iterdir()] == ["model.txt"]
