"""Pseudocode parser tests."""

from __future__ import annotations

from bs4 import BeautifulSoup

from enrichment.markdown.postprocessors.pseudocode import (
    IOEntry,
    Line,
    Spacer,
    Step,
    code_block_lines,
    looks_like_pseudocode,
    parse_pseudocode,
)

SORT_LINES = [
    "Algorithm Sort",
    "Input: array A",
    "Output: sorted A",
    "1: for i in A",
    "2: swap if needed",
]


def test_parse_full_algorithm():
    block = parse_pseudocode(SORT_LINES)

    assert block.title == "Algorithm Sort"
    assert block.io == [IOEntry("Input", "array A"), IOEntry("Output", "sorted A")]
    assert block.steps == [Step("1", " for i in A"), Step("2", " swap if needed")]


def test_serialisation_preserves_order_and_numbering():
    block = parse_pseudocode(SORT_LINES)

    assert block.to_lines() == SORT_LINES


def test_blank_lines_become_spacers_but_are_trimmed_at_edges():
    block = parse_pseudocode(["Algorithm X", "", "1: a", "", "2: b", "", ""])

    assert block.steps == [Step("1", " a"), Spacer(), Step("2", " b")]


def test_first_plain_line_promoted_to_title():
    block = parse_pseudocode(["Binary search", "lo = 0", "3:  loop   "])

    assert block.title == "Binary search"
    assert block.steps == [Line("lo = 0"), Step("3", "  loop")]


def test_only_first_algorithm_line_is_title():
    block = parse_pseudocode(["Algorithm A", "Algorithm B"])

    assert block.title == "Algorithm A"
    assert block.steps == [Line("Algorithm B")]


def test_io_labels_are_normalised_and_may_be_empty():
    block = parse_pseudocode(["input:", "OUTPUT :  result"])

    assert block.io == [IOEntry("Input", ""), IOEntry("Output", "result")]
    assert block.title is None


def test_plain_lines_keep_indentation():
    block = parse_pseudocode(["Algorithm Loop", "for x in xs", "    visit(x)   "])

    assert block.steps == [Line("for x in xs"), Line("    visit(x)")]


def test_empty_block_is_not_recognised():
    assert parse_pseudocode([]) is None
    assert parse_pseudocode(["", "   ", ""]) is None


def test_looks_like_pseudocode():
    assert looks_like_pseudocode(["", "Algorithm 1 Dijkstra"])
    assert looks_like_pseudocode(["some notes", "output: value"])
    assert not looks_like_pseudocode(["print('hello')", "Algorithm later"])


def test_code_block_lines_trims_trailing_blank_lines():
    soup = BeautifulSoup('<pre class="pseudocode"><code>Algorithm A\n1: x\n\n\n</code></pre>', "html.parser")

    assert code_block_lines(soup.pre) == ["Algorithm A", "1: x"]
