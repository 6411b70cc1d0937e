"""Data types shared by the extraction core."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Category(str, Enum):
    """Document categories, each with its own fixed budget."""

    PROSE = "prose"
    MANIFEST = "manifest"
    SOURCE = "source"


class EntrySignature(str, Enum):
    """Line patterns that mark a program entry point.

    Declaration order is the classification order: a line matching
    several patterns is tagged with the first one listed here.
    """

    MAIN_GUARD = "main_guard"
    ENTRY_FUNCTION = "entry_function"
    COMMAND_REGISTRATION = "command_registration"
    COMMAND_DECORATOR = "command_decorator"
    ARGUMENT_PARSER = "argument_parser"


@dataclass(frozen=True)
class Document:
    """A raw document read from a repository.

    Attributes:
        name: Path of the document relative to the repository root.
        content: Full text content.
        category: Which budget the document draws from.
    """

    name: str
    content: str
    category: Category


@dataclass(frozen=True)
class Excerpt:
    """Bounded text produced from a document.

    Attributes:
        name: Name of the source document.
        text: The excerpt itself.
        source_chars: Length of the untruncated content.
    """

    name: str
    text: str
    source_chars: int

    @property
    def consumed_chars(self) -> int:
        """Characters this excerpt takes out of its category budget."""
        return len(self.text)

    @property
    def truncated(self) -> bool:
        return len(self.text) < self.source_chars


@dataclass
class BudgetPlan:
    """How one category budget was spread across its documents.

    Attributes:
        budget: The category budget.
        allocations: Characters offered to each processed document.
        excerpts: Excerpts of the processed documents, in processing order.
        dropped: Documents reached after the budget ran out.
    """

    budget: int
    allocations: dict[str, int] = field(default_factory=dict)
    excerpts: dict[str, Excerpt] = field(default_factory=dict)
    dropped: list[str] = field(default_factory=list)

    @property
    def consumed_chars(self) -> int:
        return sum(e.consumed_chars for e in self.excerpts.values())

    @property
    def remaining_chars(self) -> int:
        return max(self.budget - self.consumed_chars, 0)

    def texts(self) -> dict[str, str]:
        """Map document names to excerpt text."""
        return {name: excerpt.text for name, excerpt in self.excerpts.items()}


@dataclass
class DocumentSet:
    """Documents collected for one invocation, grouped by category.

    Attributes:
        prose: The README, if the repository has one.
        manifests: Manifest name -> content.
        sources: Source file name -> content.
    """

    prose: Document | None = None
    manifests: dict[str, str] = field(default_factory=dict)
    sources: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_documents(cls, documents: list[Document]) -> DocumentSet:
        """Group documents by category.

        The first prose document wins; later ones are ignored.
        """
        doc_set = cls()
        for doc in documents:
            if doc.category is Category.PROSE:
                if doc_set.prose is None:
                    doc_set.prose = doc
            elif doc.category is Category.MANIFEST:
                doc_set.manifests[doc.name] = doc.content
            else:
                doc_set.sources[doc.name] = doc.content
        return doc_set
