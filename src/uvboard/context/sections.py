"""Prioritized section extraction for prose documents.

Keeps the opening of a README and then the regions most likely to explain
how the project is run: usage, installation, examples, and finally any
fenced code block. Tiers are consulted strictly in that order, and matches
inside a tier are taken in document order.

Both ATX (``## Usage``) and underlined headings are recognized, so
Markdown setext headings and reStructuredText section titles work alike.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

import structlog

from uvboard.config import INTRO_CHARS, MIN_FRAGMENT_CHARS
from uvboard.context.budget import ELISION_MARKER, consume

logger = structlog.get_logger()

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.+?)\s*#*\s*$")
_FENCE_RE = re.compile(r"^\s*(`{3,}|~{3,})")
_UNDERLINE_RE = re.compile(r"""^([=\-~^*+#"])\1{2,}\s*$""")

# "=" and "-" follow the Markdown setext levels; other adornments get
# deeper levels in order of first appearance.
_FIXED_UNDERLINE_LEVELS = {"=": 1, "-": 2}


@dataclass(frozen=True)
class Span:
    """Half-open character range ``[start, end)`` within a document."""

    start: int
    end: int


@dataclass(frozen=True)
class _Heading:
    level: int
    title: str
    start: int


def _lines_with_offsets(content: str) -> list[tuple[int, str]]:
    offsets = []
    pos = 0
    for line in content.splitlines(keepends=True):
        offsets.append((pos, line))
        pos += len(line)
    return offsets


def _is_title_candidate(text: str) -> bool:
    return bool(text.strip()) and not text[0].isspace() and not _UNDERLINE_RE.match(text)


def _scan_headings(content: str) -> list[_Heading]:
    """Find ATX and underlined headings outside fenced code."""
    headings: list[_Heading] = []
    fence: str | None = None
    title: tuple[int, str] | None = None
    adornments: list[str] = []

    for offset, line in _lines_with_offsets(content):
        text = line.rstrip("\r\n")

        underline = _UNDERLINE_RE.match(text) if fence is None else None
        if underline and title is not None:
            char = underline.group(1)
            level = _FIXED_UNDERLINE_LEVELS.get(char)
            if level is None:
                if char not in adornments:
                    adornments.append(char)
                level = len(_FIXED_UNDERLINE_LEVELS) + adornments.index(char) + 1
            headings.append(_Heading(level=level, title=title[1].strip(), start=title[0]))
            title = None
            continue

        fence_match = _FENCE_RE.match(line)
        if fence_match:
            marker = fence_match.group(1)
            if fence is None:
                fence = marker
            elif marker.startswith(fence):
                fence = None
            title = None
            continue
        if fence is not None:
            continue

        heading_match = _HEADING_RE.match(text)
        if heading_match:
            headings.append(
                _Heading(
                    level=len(heading_match.group(1)),
                    title=heading_match.group(2),
                    start=offset,
                )
            )
            title = None
            continue

        title = (offset, text) if _is_title_candidate(text) else None

    return headings


def heading_regions(content: str, keywords: re.Pattern[str]) -> list[Span]:
    """Regions whose heading matches ``keywords``.

    A region runs from its heading line up to the next heading of the
    same or higher level, or to the end of the document.
    """
    headings = _scan_headings(content)
    spans: list[Span] = []

    for index, heading in enumerate(headings):
        if not keywords.search(heading.title):
            continue
        end = len(content)
        for following in headings[index + 1 :]:
            if following.level <= heading.level:
                end = following.start
                break
        spans.append(Span(heading.start, end))

    return spans


def fenced_code_blocks(content: str) -> list[Span]:
    """Fenced code blocks, fences included. An unclosed fence runs to the end.

    A ``~~~`` line directly under a line of text is a heading underline,
    not a fence.
    """
    spans: list[Span] = []
    fence: str | None = None
    block_start = 0
    previous = ""

    for offset, line in _lines_with_offsets(content):
        text = line.rstrip("\r\n")
        fence_match = _FENCE_RE.match(line)
        is_underline = (
            fence is None and _UNDERLINE_RE.match(text) and _is_title_candidate(previous)
        )
        previous = text
        if not fence_match or is_underline:
            continue
        marker = fence_match.group(1)
        if fence is None:
            fence = marker
            block_start = offset
        elif marker.startswith(fence):
            spans.append(Span(block_start, offset + len(line)))
            fence = None

    if fence is not None:
        spans.append(Span(block_start, len(content)))

    return spans


def uncovered_runs(span: Span, kept: Sequence[Span]) -> list[Span]:
    """Parts of ``span`` not already covered by any of ``kept``."""
    runs: list[Span] = []
    start = span.start
    for piece in sorted(kept, key=lambda p: p.start):
        if piece.end <= start or piece.start >= span.end:
            continue
        if piece.start > start:
            runs.append(Span(start, piece.start))
        start = max(start, piece.end)
    if start < span.end:
        runs.append(Span(start, span.end))
    return runs


@dataclass(frozen=True)
class SectionTier:
    """One entry of the priority table.

    Attributes:
        name: Tier name, used in logs.
        find: Returns candidate spans in document order.
        min_keep: Fragments shorter than this after truncation are dropped.
    """

    name: str
    find: Callable[[str], list[Span]]
    min_keep: int = MIN_FRAGMENT_CHARS


def _heading_tier(name: str, pattern: str, min_keep: int) -> SectionTier:
    keywords = re.compile(pattern, re.IGNORECASE)
    return SectionTier(
        name=name,
        find=lambda content: heading_regions(content, keywords),
        min_keep=min_keep,
    )


def default_tiers(min_keep: int = MIN_FRAGMENT_CHARS) -> tuple[SectionTier, ...]:
    """The standard README priority table, highest priority first."""
    return (
        _heading_tier(
            "usage",
            r"\b(?:usage|how to use|command[- ]line|cli|running)\b|用法|使用",
            min_keep,
        ),
        _heading_tier(
            "installation",
            r"\b(?:install(?:ation|ing)?|quick[- ]?start|getting started|setup)\b"
            r"|安装|快速开始",
            min_keep,
        ),
        _heading_tier("examples", r"\b(?:examples?|demos?)\b|示例|例子", min_keep),
        SectionTier(name="code", find=fenced_code_blocks, min_keep=min_keep),
    )


class SectionExtractor:
    """Extracts the most useful regions of a prose document within a budget.

    The first ``intro_chars`` characters are always kept. The rest of the
    budget goes to tier matches in priority order; each is truncated to
    what is left, and discarded if that leaves less than the tier's
    ``min_keep``. Text already kept by the intro or an earlier tier is
    never repeated: a match is reduced to its uncovered runs first. Kept
    pieces are joined with an elision marker unless they are contiguous
    in the source. Marker overhead is charged to the budget, so the result
    never exceeds ``max_len``.

    Args:
        tiers: Priority table, highest first. Defaults to ``default_tiers``.
        intro_chars: Length of the always-kept opening.
        min_fragment_chars: Minimum fragment length for the default tier
            table. Ignored when ``tiers`` is given; each custom tier
            carries its own ``min_keep``.

    Example:
        >>> extractor = SectionExtractor()
        >>> extractor.extract("short readme", 4000)
        'short readme'
    """

    def __init__(
        self,
        tiers: Sequence[SectionTier] | None = None,
        *,
        intro_chars: int = INTRO_CHARS,
        min_fragment_chars: int = MIN_FRAGMENT_CHARS,
    ) -> None:
        self.tiers = tuple(tiers) if tiers is not None else default_tiers(min_fragment_chars)
        self.intro_chars = intro_chars

    def select(self, content: str, max_len: int) -> list[Span]:
        """Choose the spans to keep, intro first, then in tier order."""
        intro_end = min(self.intro_chars, max_len, len(content))
        pieces = [Span(0, intro_end)]
        remaining = consume(max_len, intro_end)

        for tier in self.tiers:
            if remaining <= 0:
                break
            for span in tier.find(content):
                for run in uncovered_runs(span, pieces):
                    if remaining <= 0:
                        break
                    gap = 0 if run.start == pieces[-1].end else len(ELISION_MARKER)
                    room = consume(remaining, gap)
                    end = min(run.end, run.start + max(room, 0))
                    if end <= run.start or end - run.start < tier.min_keep:
                        continue

                    pieces.append(Span(run.start, end))
                    remaining = consume(room, end - run.start)
                    logger.debug(
                        "Section kept",
                        tier=tier.name,
                        start=run.start,
                        chars=end - run.start,
                        truncated=end < run.end,
                        remaining=remaining,
                    )

        return pieces

    def extract(self, content: str, max_len: int) -> str:
        """Return ``content`` itself if it fits, else a bounded excerpt."""
        if len(content) <= max_len:
            return content
        if max_len <= 0:
            return ""

        pieces = self.select(content, max_len)
        parts = [content[pieces[0].start : pieces[0].end]]
        for previous, current in zip(pieces, pieces[1:]):
            if current.start != previous.end:
                parts.append(ELISION_MARKER)
            parts.append(content[current.start : current.end])
        return "".join(parts)


def extract_sections(content: str, max_len: int) -> str:
    """Extract with the default tier table."""
    return SectionExtractor().extract(content, max_len)
