"""Analyzers that turn raw text into normalized index terms.

The default analyzer lower-cases its input, pulls structured tokens (compound
numbers, plain numbers, e-mail addresses) out of the text first, and only then
splits what is left on runs of non-letter characters. Extracted spans are
tracked by character offset so the generic pass never sees fragments of them.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
import re
from typing import Protocol


@dataclass
class Token:
    """Represents a token emitted by analyzers."""

    text: str
    position: int
    start_char: int
    end_char: int


class Analyzer(Protocol):
    """Protocol implemented by analyzers."""

    def __call__(self, text: str) -> list[Token]:  # pragma: no cover - interface definition
        ...


@dataclass(frozen=True)
class SpecialCasePattern:
    """Named pattern extracted as a whole token before generic splitting."""

    name: str
    pattern: re.Pattern[str]

    def matches(self, text: str) -> bool:
        """Return True when the entire ``text`` is one instance of the pattern."""
        return self.pattern.fullmatch(text) is not None


# Phone numbers (0221-4701751), versions (8.04), money (3,50) and times (15:15)
COMPOUND = SpecialCasePattern("COMPOUND", re.compile(r"\d+[-.,:]\d+"))
NUMBER = SpecialCasePattern("NUMBER", re.compile(r"\d+"))
EMAIL = SpecialCasePattern("EMAIL", re.compile(r"[^@\s]+@.+?\.(?:de|com|eu|org|net)"))

# Priority order: COMPOUND must run before NUMBER or "15:10" splits in two.
SPECIAL_CASES: tuple[SpecialCasePattern, ...] = (COMPOUND, NUMBER, EMAIL)

# Candidate runs: \w minus digits and underscore. Still admits numerics such as
# "²" or "Ⅻ", which _letter_runs() splits out with str.isalpha().
_WORD_RUN = re.compile(r"[^\W\d_]+")


def _free_spans(consumed: Sequence[tuple[int, int]], length: int) -> Iterator[tuple[int, int]]:
    """Yield the gaps of ``[0, length)`` not covered by sorted ``consumed`` spans."""
    cursor = 0
    for start, end in consumed:
        if start > cursor:
            yield cursor, start
        cursor = max(cursor, end)
    if cursor < length:
        yield cursor, length


def _letter_runs(text: str, start: int, end: int) -> Iterator[tuple[int, int]]:
    """Yield spans of Unicode letters (categories L*) inside ``text[start:end]``."""
    for match in _WORD_RUN.finditer(text, start, end):
        if match.group(0).isalpha():
            yield match.span()
            continue
        run_start = None
        for offset in range(match.start(), match.end()):
            if text[offset].isalpha():
                if run_start is None:
                    run_start = offset
            elif run_start is not None:
                yield run_start, offset
                run_start = None
        if run_start is not None:
            yield run_start, match.end()


class SpecialCaseTokenizer:
    """Tokenizer that extracts special-case patterns before splitting on non-letters.

    Tokens come out in two groups: first every special-case match (in pattern
    priority order, then text order), then the remaining letter runs in text
    order. A pattern is only searched inside text no earlier pattern consumed,
    so a match can never straddle or re-use an already extracted span.
    """

    def __init__(self, special_cases: Sequence[SpecialCasePattern] = SPECIAL_CASES) -> None:
        self.special_cases = tuple(special_cases)

    def __call__(self, text: str) -> Iterator[Token]:
        consumed: list[tuple[int, int]] = []
        position = 0
        for case in self.special_cases:
            matched: list[tuple[int, int]] = []
            for start, end in _free_spans(consumed, len(text)):
                for match in case.pattern.finditer(text, start, end):
                    yield Token(
                        text=match.group(0),
                        position=position,
                        start_char=match.start(),
                        end_char=match.end(),
                    )
                    position += 1
                    matched.append(match.span())
            if matched:
                consumed = sorted(consumed + matched)

        for start, end in _free_spans(consumed, len(text)):
            for run_start, run_end in _letter_runs(text, start, end):
                yield Token(
                    text=text[run_start:run_end],
                    position=position,
                    start_char=run_start,
                    end_char=run_end,
                )
                position += 1


class SpecialCaseAnalyzer:
    """Default analyzer: lower-case, extract special cases, split on non-letters."""

    def __init__(self, special_cases: Sequence[SpecialCasePattern] = SPECIAL_CASES) -> None:
        self.tokenizer = SpecialCaseTokenizer(special_cases)

    def __call__(self, text: str) -> list[Token]:
        return list(self.tokenizer(text.lower()))


_ANALYZER_FACTORIES: dict[str, Callable[[], Analyzer]] = {
    "default": lambda: SpecialCaseAnalyzer(),
    "letters": lambda: SpecialCaseAnalyzer(special_cases=()),
}


def get_analyzer(name: str | None) -> Analyzer:
    """Return analyzer by name, defaulting to the special-case analyzer."""

    if name is None:
        return _ANALYZER_FACTORIES["default"]()
    normalized = name.lower()
    if normalized not in _ANALYZER_FACTORIES:
        msg = f"Unknown analyzer '{name}'. Available: {sorted(_ANALYZER_FACTORIES)}"
        raise ValueError(msg)
    return _ANALYZER_FACTORIES[normalized]()


def available_analyzers() -> list[str]:
    return sorted(_ANALYZER_FACTORIES)


_DEFAULT_ANALYZER = SpecialCaseAnalyzer()


def tokenize(text: str) -> list[str]:
    """Return the normalized terms of ``text`` using the default analyzer."""
    return [token.text for token in _DEFAULT_ANALYZER(text)]


def match_special_case(name: str, text: str) -> bool:
    """Report whether ``text`` as a whole matches the special case called ``name``."""

    for case in SPECIAL_CASES:
        if case.name == name.upper():
            return case.matches(text)
    msg = f"Unknown special case '{name}'. Available: {[case.name for case in SPECIAL_CASES]}"
    raise ValueError(msg)
