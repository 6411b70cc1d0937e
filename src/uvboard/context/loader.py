"""Collects the documents of a local repository checkout."""

from __future__ import annotations

from pathlib import Path

import structlog

from uvboard.config import DiscoveryConfig
from uvboard.context.models import Category, Document, DocumentSet
from uvboard.exceptions import DocumentLoadError

logger = structlog.get_logger()


def _read(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.warning("Failed to read document", path=str(path), error=str(e))
        return None


def load_documents(root: Path, discovery: DiscoveryConfig | None = None) -> DocumentSet:
    """Read README, manifests and root-level source files.

    Only the repository root is inspected. Missing candidates are
    skipped; the first README candidate present wins. Source files are
    taken in name order, up to ``max_source_files``.

    Args:
        root: Repository root directory.
        discovery: Which files to look for.

    Returns:
        DocumentSet with whatever was found.

    Raises:
        DocumentLoadError: If ``root`` is not a directory.
    """
    discovery = discovery or DiscoveryConfig()
    if not root.is_dir():
        msg = f"Repository root is not a directory: {root}"
        raise DocumentLoadError(msg, path=root)

    documents: list[Document] = []

    for name in discovery.readme_files:
        path = root / name
        if not path.is_file():
            continue
        content = _read(path)
        if content is not None:
            documents.append(Document(name=name, content=content, category=Category.PROSE))
            break

    for name in discovery.manifest_files:
        path = root / name
        if not path.is_file():
            continue
        content = _read(path)
        if content is not None:
            documents.append(Document(name=name, content=content, category=Category.MANIFEST))

    suffixes = set(discovery.source_suffixes)
    source_paths = sorted(
        p for p in root.iterdir() if p.is_file() and p.suffix in suffixes
    )
    for path in source_paths[: discovery.max_source_files]:
        content = _read(path)
        if content is not None:
            documents.append(
                Document(name=path.name, content=content, category=Category.SOURCE)
            )

    doc_set = DocumentSet.from_documents(documents)
    logger.debug(
        "Documents loaded",
        root=str(root),
        readme=doc_set.prose.name if doc_set.prose else None,
        manifests=list(doc_set.manifests),
        sources=list(doc_set.sources),
    )
    return doc_set
