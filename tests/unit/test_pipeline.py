"""Unit tests for the per-category truncation pipeline."""

from __future__ import annotations

from conftest import filler

from uvboard.config import BudgetConfig
from uvboard.context.budget import ELISION_MARKER
from uvboard.context.models import Category, Document, DocumentSet
from uvboard.context.pipeline import PipelineResult, TruncationPipeline


def _long_script(lines: int = 300) -> str:
    body = [f"    step_{i:03d}()" for i in range(lines)]
    return "import sys\n" + "\n".join(body) + '\nif __name__ == "__main__":\n    main()\n'


class TestDocumentSet:
    """Tests for DocumentSet grouping."""

    def test_from_documents(self) -> None:
        docs = [
            Document("README.md", "first", Category.PROSE),
            Document("README.rst", "second", Category.PROSE),
            Document("requirements.txt", "rich", Category.MANIFEST),
            Document("main.py", "print(1)", Category.SOURCE),
        ]
        doc_set = DocumentSet.from_documents(docs)

        assert doc_set.prose is not None
        assert doc_set.prose.name == "README.md"
        assert doc_set.manifests == {"requirements.txt": "rich"}
        assert doc_set.sources == {"main.py": "print(1)"}


class TestTruncationPipeline:
    """Tests for TruncationPipeline."""

    def test_empty(self) -> None:
        result = TruncationPipeline().run(DocumentSet())

        assert result.prose == {}
        assert result.manifests == {}
        assert result.sources == {}
        assert result.render() == ""

    def test_small_documents_pass_through(self) -> None:
        doc_set = DocumentSet(
            prose=Document("README.md", "# Tool\n", Category.PROSE),
            manifests={"requirements.txt": "httpx\n"},
            sources={"main.py": "print('hi')\n"},
        )
        result = TruncationPipeline().run(doc_set)

        assert result.to_dict() == {
            "prose": {"README.md": "# Tool\n"},
            "manifest": {"requirements.txt": "httpx\n"},
            "source": {"main.py": "print('hi')\n"},
        }

    def test_each_category_uses_its_own_budget(self) -> None:
        budgets = BudgetConfig(prose_chars=1000, manifest_chars=700, source_chars=900)
        doc_set = DocumentSet(
            prose=Document("README.md", filler(5000), Category.PROSE),
            manifests={"setup.cfg": "m" * 3000},
            sources={"main.py": _long_script()},
        )
        result = TruncationPipeline(budgets).run(doc_set)

        assert len(result.prose["README.md"].text) <= 1000
        assert result.manifests["setup.cfg"] == "m" * 700
        assert len(result.sources["main.py"]) <= 900
        assert result.manifest_plan.budget == 700
        assert result.source_plan.budget == 900

    def test_sources_use_entry_point_extraction(self) -> None:
        budgets = BudgetConfig(source_chars=800)
        result = TruncationPipeline(budgets).run(
            DocumentSet(sources={"main.py": _long_script()})
        )
        text = result.sources["main.py"]

        assert text.startswith("import sys" + ELISION_MARKER)
        assert text.endswith('if __name__ == "__main__":\n    main()\n')

    def test_manifests_plain_truncation(self) -> None:
        budgets = BudgetConfig(manifest_chars=1000)
        manifest = "\n".join(f"package-{i}>=1.0" for i in range(200))
        result = TruncationPipeline(budgets).run(
            DocumentSet(manifests={"requirements.txt": manifest})
        )
        assert result.manifests["requirements.txt"] == manifest[:1000]

    def test_starved_sources_dropped(self) -> None:
        budgets = BudgetConfig(source_chars=600)
        doc_set = DocumentSet(
            sources={
                "a.py": "x = 1\n" * 20,
                "b.py": "\n".join(f"v{i} = {i}" for i in range(300)),
                "c.py": _long_script(400),
            }
        )
        result = TruncationPipeline(budgets).run(doc_set)

        assert result.sources["a.py"] == "x = 1\n" * 20
        assert len(result.sources["b.py"]) == 480
        assert result.source_plan.dropped == ["c.py"]

    def test_render(self) -> None:
        doc_set = DocumentSet(
            prose=Document("README.md", "# Tool", Category.PROSE),
            sources={"main.py": "print(1)"},
        )
        rendered = TruncationPipeline().run(doc_set).render()

        assert "## README" in rendered
        assert "### README.md\n```\n# Tool\n```" in rendered
        assert "## Source files" in rendered
        assert "## Manifests" not in rendered

    def test_result_defaults(self) -> None:
        result = PipelineResult()
        assert result.to_dict() == {"prose": {}, "manifest": {}, "source": {}}
