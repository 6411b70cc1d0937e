"""Context budgeting and extraction.

Squeezes repository documents into fixed per-category character budgets
while keeping usage instructions and program entry points.

Key components:
- allocate / BudgetAllocator: spreads a category budget across documents
- SectionExtractor: prioritized README section extraction
- EntryPointExtractor: import preamble plus entry-point context
- TruncationPipeline: applies the above per category
- load_documents: collects documents from a local checkout
"""

from uvboard.context.budget import ELISION_MARKER, BudgetAllocator, allocate, truncate_text
from uvboard.context.entrypoints import EntryPointExtractor, classify_line
from uvboard.context.loader import load_documents
from uvboard.context.models import (
    BudgetPlan,
    Category,
    Document,
    DocumentSet,
    EntrySignature,
    Excerpt,
)
from uvboard.context.pipeline import PipelineResult, TruncationPipeline
from uvboard.context.sections import SectionExtractor, SectionTier, default_tiers

__all__ = [
    "ELISION_MARKER",
    "BudgetAllocator",
    "BudgetPlan",
    "Category",
    "Document",
    "DocumentSet",
    "EntryPointExtractor",
    "EntrySignature",
    "Excerpt",
    "PipelineResult",
    "SectionExtractor",
    "SectionTier",
    "TruncationPipeline",
    "allocate",
    "classify_line",
    "default_tiers",
    "load_documents",
    "truncate_text",
]
