"""Per-category truncation pipeline.

Each category is squeezed into its own fixed budget; no budget is shared
across categories:

- prose: the README goes straight through the section extractor
- manifest: allocator with plain head truncation
- source: allocator with the entry-point extractor
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from uvboard.config import BudgetConfig
from uvboard.context.budget import BudgetAllocator, truncate_text
from uvboard.context.entrypoints import EntryPointExtractor
from uvboard.context.models import BudgetPlan, DocumentSet, Excerpt
from uvboard.context.sections import SectionExtractor

logger = structlog.get_logger()


@dataclass
class PipelineResult:
    """Excerpts for one invocation.

    Attributes:
        prose: README name -> excerpt (at most one entry).
        manifest_plan: Allocation of the manifest budget.
        source_plan: Allocation of the source budget.
    """

    prose: dict[str, Excerpt] = field(default_factory=dict)
    manifest_plan: BudgetPlan = field(default_factory=lambda: BudgetPlan(budget=0))
    source_plan: BudgetPlan = field(default_factory=lambda: BudgetPlan(budget=0))

    @property
    def manifests(self) -> dict[str, str]:
        return self.manifest_plan.texts()

    @property
    def sources(self) -> dict[str, str]:
        return self.source_plan.texts()

    def to_dict(self) -> dict[str, dict[str, str]]:
        """Excerpt text per category, ready for JSON output."""
        return {
            "prose": {name: e.text for name, e in self.prose.items()},
            "manifest": self.manifests,
            "source": self.sources,
        }

    def render(self) -> str:
        """Render all excerpts as markdown sections.

        Returns:
            Markdown with one fenced block per document.
        """
        parts: list[str] = []
        for title, excerpts in (
            ("README", self.prose),
            ("Manifests", self.manifest_plan.excerpts),
            ("Source files", self.source_plan.excerpts),
        ):
            if not excerpts:
                continue
            parts.append(f"## {title}")
            for name, excerpt in excerpts.items():
                parts.append(f"### {name}\n```\n{excerpt.text}\n```")
        return "\n\n".join(parts)


class TruncationPipeline:
    """Turns a DocumentSet into bounded excerpts.

    Example:
        >>> pipeline = TruncationPipeline()
        >>> result = pipeline.run(DocumentSet(manifests={"requirements.txt": "httpx"}))
        >>> result.manifests
        {'requirements.txt': 'httpx'}
    """

    def __init__(self, budgets: BudgetConfig | None = None) -> None:
        self.budgets = budgets or BudgetConfig()
        self.sections = SectionExtractor(
            intro_chars=self.budgets.intro_chars,
            min_fragment_chars=self.budgets.min_fragment_chars,
        )
        self.entrypoints = EntryPointExtractor(
            context_lines=self.budgets.entry_context_lines,
        )
        self.manifest_allocator = BudgetAllocator(
            self.budgets.manifest_chars,
            truncate_text,
            floor_min=self.budgets.floor_min_chars,
        )
        self.source_allocator = BudgetAllocator(
            self.budgets.source_chars,
            self.entrypoints.extract,
            floor_min=self.budgets.floor_min_chars,
        )

    def run(self, documents: DocumentSet) -> PipelineResult:
        """Produce excerpts for every category.

        Args:
            documents: Documents grouped by category.

        Returns:
            PipelineResult with per-category excerpts and budget plans.
        """
        result = PipelineResult(
            manifest_plan=self.manifest_allocator.allocate(documents.manifests),
            source_plan=self.source_allocator.allocate(documents.sources),
        )

        if documents.prose is not None:
            doc = documents.prose
            text = self.sections.extract(doc.content, self.budgets.prose_chars)
            result.prose[doc.name] = Excerpt(
                name=doc.name, text=text, source_chars=len(doc.content)
            )

        logger.debug(
            "Truncation pipeline complete",
            prose_chars=sum(e.consumed_chars for e in result.prose.values()),
            manifest_chars=result.manifest_plan.consumed_chars,
            source_chars=result.source_plan.consumed_chars,
            dropped=result.manifest_plan.dropped + result.source_plan.dropped,
        )

        return result
