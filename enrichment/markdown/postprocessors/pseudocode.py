# enrichment/markdown/postprocessors/pseudocode.py
"""
Parser for pseudocode written in fenced code blocks.

Expected markdown input:
    ```pseudocode
    Algorithm Insertion Sort
    Input: array A of n numbers
    Output: A sorted ascending
    1: for i = 2 to n
    2:     key = A[i]

    3: return A
    ```

Parsed into an AlgorithmBlock:
    title  "Algorithm Insertion Sort"
    io     [Input: "array A of n numbers", Output: "A sorted ascending"]
    steps  [step 1, step 2, spacer, step 3]

Lines that are none of the above become plain lines. Without an explicit
``Algorithm`` line the first plain line is used as the title.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from bs4 import Tag

TITLE_PATTERN = re.compile(r"^Algorithm\b", re.IGNORECASE)
IO_PATTERN = re.compile(r"^(Input|Output)\s*:\s*(.*)$", re.IGNORECASE)
STEP_PATTERN = re.compile(r"^(\d+)\s*:(.*)$")


@dataclass(frozen=True)
class IOEntry:
    label: str  # "Input" or "Output"
    value: str


@dataclass(frozen=True)
class Step:
    number: str
    text: str
    kind: str = field(default="step", init=False)


@dataclass(frozen=True)
class Line:
    text: str
    kind: str = field(default="line", init=False)


@dataclass(frozen=True)
class Spacer:
    kind: str = field(default="spacer", init=False)


StepLine = Union[Step, Line, Spacer]


@dataclass
class AlgorithmBlock:
    title: Optional[str] = None
    io: List[IOEntry] = field(default_factory=list)
    steps: List[StepLine] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.title and not self.io and not self.steps

    def to_lines(self) -> List[str]:
        """Serialise back to pseudocode source lines."""
        lines = []
        if self.title:
            lines.append(self.title)
        for entry in self.io:
            lines.append(f"{entry.label}: {entry.value}".rstrip())
        for step in self.steps:
            if isinstance(step, Step):
                lines.append(f"{step.number}:{step.text}")
            elif isinstance(step, Line):
                lines.append(step.text)
            else:
                lines.append("")
        return lines


def _trim_trailing_blank(lines: Sequence[str]) -> List[str]:
    trimmed = list(lines)
    while trimmed and not trimmed[-1].strip():
        trimmed.pop()
    return trimmed


def code_block_lines(pre: Tag) -> List[str]:
    """Literal text lines of a ``<pre>`` block, trailing blank lines removed."""
    code = pre.find("code")
    source = (code or pre).get_text()
    return _trim_trailing_blank(source.split("\n"))


def looks_like_pseudocode(lines: Sequence[str]) -> bool:
    """
    Content check for blocks declared as plain text: an ``Algorithm`` first
    line, or any ``Input:``/``Output:`` line.
    """
    for line in lines:
        if line.strip():
            if TITLE_PATTERN.match(line.strip()):
                return True
            break

    return any(
        re.match(r"^(Input|Output)\s*:", line.strip(), re.IGNORECASE) for line in lines
    )


def parse_pseudocode(lines: Sequence[str]) -> Optional[AlgorithmBlock]:
    """
    Parse pseudocode lines into an AlgorithmBlock.

    Returns None when nothing recognisable is left, in which case the code
    block should be left as it is.
    """
    block = AlgorithmBlock()

    for raw in _trim_trailing_blank(lines):
        line = raw.strip()

        if not line:
            block.steps.append(Spacer())
            continue

        if block.title is None and TITLE_PATTERN.match(line):
            block.title = line
            continue

        io_match = IO_PATTERN.match(line)
        if io_match:
            block.io.append(
                IOEntry(label=io_match.group(1).capitalize(), value=io_match.group(2).strip())
            )
            continue

        step_match = STEP_PATTERN.match(line)
        if step_match:
            block.steps.append(
                Step(number=step_match.group(1), text=step_match.group(2).rstrip())
            )
            continue

        block.steps.append(Line(text=raw.rstrip()))

    if block.title is None:
        for index, step in enumerate(block.steps):
            if isinstance(step, Line):
                block.title = step.text.strip()
                del block.steps[index]
                break

    # Spacers only separate steps; drop them at either end
    while block.steps and isinstance(block.steps[0], Spacer):
        block.steps.pop(0)
    while block.steps and isinstance(block.steps[-1], Spacer):
        block.steps.pop()

    if block.is_empty():
        return None
    return block
