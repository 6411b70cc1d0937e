"""Pytest fixtures for uvboard tests."""

from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

import pytest


def filler(length: int) -> str:
    """Plain prose without headings, fences or section keywords."""
    text = "lorem ipsum dolor sit amet consectetur adipiscing elit "
    return (text * (length // len(text) + 1))[:length]


@pytest.fixture
def sample_repo(tmp_path: Path) -> Path:
    """Create a small Python repository checkout.

    Contains a README, two manifests, three root-level modules and a
    nested module that discovery must ignore.
    """
    repo = tmp_path / "repo"
    repo.mkdir()

    (repo / "README.md").write_text(
        "# Sample\n\nA sample tool.\n\n## Usage\n\n```bash\npython main.py --help\n```\n"
    )
    (repo / "requirements.txt").write_text("httpx>=0.27\nrich\n")
    (repo / "pyproject.toml").write_text('[project]\nname = "sample"\n')
    (repo / "main.py").write_text(
        "import sys\n\n\ndef main():\n    print(sys.argv)\n\n\n"
        'if __name__ == "__main__":\n    main()\n'
    )
    (repo / "helpers.py").write_text("def helper():\n    return 1\n")
    (repo / "notes.txt").write_text("not a source file\n")

    pkg = repo / "pkg"
    pkg.mkdir()
    (pkg / "inner.py").write_text("x = 1\n")

    return repo
