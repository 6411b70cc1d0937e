"""Category budget allocation across named documents."""

from __future__ import annotations

from collections.abc import Callable, Mapping

import structlog

from uvboard.config import FLOOR_MIN_CHARS
from uvboard.context.models import BudgetPlan, Excerpt

logger = structlog.get_logger()

# Inserted wherever content between two kept pieces was left out.
ELISION_MARKER = "\n... (truncated) ...\n"

TruncateFn = Callable[[str, int], str]


def consume(remaining: int, amount: int) -> int:
    """Return the budget left after spending ``amount`` characters."""
    return remaining - amount


def truncate_text(content: str, max_len: int) -> str:
    """Keep the first ``max_len`` characters of ``content``."""
    if max_len <= 0:
        return ""
    return content[:max_len]


def allocate(
    documents: Mapping[str, str],
    budget: int,
    truncate: TruncateFn = truncate_text,
    *,
    floor_min: int = FLOOR_MIN_CHARS,
) -> BudgetPlan:
    """Spread a category budget across documents, smallest first.

    Each document is offered an even share of what is left among the
    documents not yet processed, but never less than ``floor_min`` and
    never more than what is left. Budget a small document does not use
    flows on to the larger ones, so everything that fits is kept whole.
    Documents reached after the budget is spent get no excerpt at all.

    Args:
        documents: Document name -> raw content.
        budget: Category budget in characters.
        truncate: Produces an excerpt of at most the given length.
        floor_min: Smallest allocation offered to a processed document.

    Returns:
        BudgetPlan with allocations, excerpts and dropped names.
    """
    plan = BudgetPlan(budget=budget)
    if not documents:
        return plan

    ordered = sorted(documents.items(), key=lambda item: (len(item[1]), item[0]))
    remaining = budget

    for index, (name, content) in enumerate(ordered):
        if remaining <= 0:
            plan.dropped.append(name)
            continue

        share = remaining // (len(ordered) - index)
        allocated = min(remaining, max(share, floor_min))
        text = truncate(content, allocated)
        plan.allocations[name] = allocated
        plan.excerpts[name] = Excerpt(name=name, text=text, source_chars=len(content))
        remaining = consume(remaining, len(text))

        logger.debug(
            "Document allocated",
            document=name,
            allocated=allocated,
            kept=len(text),
            size=len(content),
            remaining=remaining,
        )

    if plan.dropped:
        logger.debug(
            "Budget exhausted, documents dropped",
            budget=budget,
            dropped=plan.dropped,
        )

    return plan


class BudgetAllocator:
    """Allocator bound to one category budget and truncation function.

    Example:
        >>> allocator = BudgetAllocator(budget=1000)
        >>> allocator.allocate({"a.txt": "hello"}).texts()
        {'a.txt': 'hello'}
    """

    def __init__(
        self,
        budget: int,
        truncate: TruncateFn = truncate_text,
        *,
        floor_min: int = FLOOR_MIN_CHARS,
    ) -> None:
        self.budget = budget
        self.truncate = truncate
        self.floor_min = floor_min

    def allocate(self, documents: Mapping[str, str]) -> BudgetPlan:
        return allocate(
            documents,
            self.budget,
            self.truncate,
            floor_min=self.floor_min,
        )
