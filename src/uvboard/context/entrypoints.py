"""Entry-point extraction for source documents.

A source excerpt keeps the import preamble and the code around the last
line that looks like a program entry point (``__main__`` guard, ``main``
style function, CLI registration). That region is the best evidence of
how the program is meant to be invoked.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

import structlog

from uvboard.config import ENTRY_CONTEXT_LINES
from uvboard.context.budget import ELISION_MARKER, truncate_text
from uvboard.context.models import EntrySignature

logger = structlog.get_logger()

ENTRY_FUNCTION_NAMES = ("main", "run", "cli", "app", "start")

# Checked in order; the first match tags the line.
SIGNATURE_PATTERNS: tuple[tuple[EntrySignature, re.Pattern[str]], ...] = (
    (
        EntrySignature.MAIN_GUARD,
        re.compile(r"""^\s*if\s+__name__\s*==\s*['"]__main__['"]\s*:"""),
    ),
    (
        EntrySignature.ENTRY_FUNCTION,
        re.compile(
            r"^\s*(?:async\s+)?def\s+(?:" + "|".join(ENTRY_FUNCTION_NAMES) + r")\s*\("
        ),
    ),
    (
        EntrySignature.COMMAND_REGISTRATION,
        re.compile(
            r"\b(?:typer\.run|fire\.Fire|\w+\.add_command|\w+\.add_typer"
            r"|\w+\.add_parser|\w+\.add_subparsers)\s*\("
        ),
    ),
    (
        EntrySignature.COMMAND_DECORATOR,
        re.compile(r"^\s*@(?:\w+\.)*(?:command|group|callback)\b"),
    ),
    (
        EntrySignature.ARGUMENT_PARSER,
        re.compile(r"\bArgumentParser\s*\("),
    ),
)

_IMPORT_RE = re.compile(r"^(?:import\s+\S|from\s+\S+\s+import\b)")


def classify_line(line: str) -> EntrySignature | None:
    """Tag a line with the entry signature it matches, if any."""
    for signature, pattern in SIGNATURE_PATTERNS:
        if pattern.search(line):
            return signature
    return None


def find_entry_line(lines: list[str]) -> tuple[int, EntrySignature] | None:
    """Index and signature of the entry line closest to the end of file."""
    for index in range(len(lines) - 1, -1, -1):
        signature = classify_line(lines[index])
        if signature is not None:
            return index, signature
    return None


def find_import_end(lines: list[str]) -> int:
    """Index of the last line of the leading import block, or -1.

    Blank lines inside the block are tolerated, as are the continuation
    lines of a parenthesized ``from x import (...)``. The block ends at the
    first other non-blank line.
    """
    import_end = -1
    in_parens = False

    for index, line in enumerate(lines):
        stripped = line.strip()
        if in_parens:
            import_end = index
            if ")" in stripped:
                in_parens = False
            continue
        if not stripped:
            continue
        if not _IMPORT_RE.match(stripped):
            break
        import_end = index
        if "(" in stripped and ")" not in stripped:
            in_parens = True

    return import_end


@dataclass(frozen=True)
class SourceLayout:
    """Where the interesting parts of a source document are.

    Attributes:
        lines: The document split on newlines.
        import_end: Last line of the import block, -1 when there is none.
        entry_line: Line of the detected entry point, if any.
        signature: Which signature matched at ``entry_line``.
    """

    lines: list[str]
    import_end: int
    entry_line: int | None
    signature: EntrySignature | None

    @classmethod
    def analyze(cls, content: str) -> SourceLayout:
        lines = content.split("\n")
        found = find_entry_line(lines)
        return cls(
            lines=lines,
            import_end=find_import_end(lines),
            entry_line=found[0] if found else None,
            signature=found[1] if found else None,
        )

    @property
    def import_block(self) -> str:
        return "\n".join(self.lines[: self.import_end + 1])

    @property
    def body(self) -> str:
        return "\n".join(self.lines[self.import_end + 1 :])


class EntryPointExtractor:
    """Extracts the import preamble plus entry-point context from source.

    Example:
        >>> extractor = EntryPointExtractor()
        >>> extractor.extract("print('hi')", 800)
        "print('hi')"
    """

    def __init__(self, *, context_lines: int = ENTRY_CONTEXT_LINES) -> None:
        self.context_lines = context_lines

    def extract(self, content: str, max_len: int) -> str:
        """Return ``content`` itself if it fits, else a bounded excerpt."""
        if len(content) <= max_len:
            return content
        if max_len <= len(ELISION_MARKER):
            return truncate_text(content, max_len)

        layout = SourceLayout.analyze(content)
        imports = layout.import_block
        include_imports = bool(imports) and len(imports) < max_len / 2

        if layout.entry_line is None:
            logger.debug("No entry point found, using head/tail", max_len=max_len)
            if include_imports:
                return self._head_tail(imports + "\n", layout.body, max_len)
            return self._head_tail("", content, max_len)

        window_start = max(layout.entry_line - self.context_lines, layout.import_end + 1)
        window = "\n".join(layout.lines[window_start:])
        if include_imports:
            prefix = imports + ELISION_MARKER
            contiguous = window_start == layout.import_end + 1
            composed = imports + "\n" + window if contiguous else prefix + window
        else:
            prefix = ELISION_MARKER.lstrip("\n")
            composed = window if window_start == 0 else prefix + window

        logger.debug(
            "Entry point found",
            signature=layout.signature.value if layout.signature else None,
            line=layout.entry_line,
            window_start=window_start,
            imports_included=include_imports,
        )

        if len(composed) <= max_len:
            return composed

        room = max_len - len(prefix)
        if room <= 0:
            return truncate_text(content, max_len)
        return prefix + window[-room:]

    def _head_tail(self, prefix: str, body: str, max_len: int) -> str:
        if len(prefix) + len(body) <= max_len:
            return prefix + body
        room = max_len - len(prefix) - len(ELISION_MARKER)
        if room <= 0:
            return truncate_text(prefix + body, max_len)

        leading = room // 2
        trailing = room - leading
        tail = body[-trailing:] if trailing > 0 else ""
        return prefix + body[:leading] + ELISION_MARKER + tail


def extract_entry_context(content: str, max_len: int) -> str:
    """Extract with default settings."""
    return EntryPointExtractor().extract(content, max_len)
