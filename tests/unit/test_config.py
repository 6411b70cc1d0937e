"""Unit tests for configuration schema and serialization."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from uvboard.config import BudgetConfig, DiscoveryConfig, UvboardConfig


def test_default_config() -> None:
    """Default budgets match the documented constants."""
    config = UvboardConfig.default()

    assert config.budgets.prose_chars == 4000
    assert config.budgets.manifest_chars == 6000
    assert config.budgets.source_chars == 8000
    assert config.budgets.floor_min_chars == 500
    assert config.budgets.intro_chars == 500
    assert config.budgets.min_fragment_chars == 100
    assert config.budgets.entry_context_lines == 20
    assert config.discovery.max_source_files == 5
    assert config.discovery.readme_files[0] == "README.md"


def test_config_serialization() -> None:
    """Budgets survive a YAML round trip."""
    config = UvboardConfig(budgets=BudgetConfig(prose_chars=1234))

    yaml_content = config.to_yaml()
    assert "prose_chars: 1234" in yaml_content
    assert "manifest_files:" in yaml_content

    loaded = UvboardConfig.from_yaml(yaml_content)
    assert loaded.budgets.prose_chars == 1234
    assert loaded.discovery == config.discovery


def test_from_yaml_partial() -> None:
    """Sections left out of the YAML keep their defaults."""
    cfg = UvboardConfig.from_yaml("budgets:\n  source_chars: 100\n")

    assert cfg.budgets.source_chars == 100
    assert cfg.budgets.prose_chars == 4000
    assert cfg.discovery.max_source_files == 5


def test_from_yaml_empty() -> None:
    assert UvboardConfig.from_yaml("") == UvboardConfig.default()


def test_from_yaml_invalid() -> None:
    with pytest.raises(ValueError, match="Invalid YAML"):
        UvboardConfig.from_yaml("budgets: [unclosed")


def test_from_yaml_not_mapping() -> None:
    with pytest.raises(ValueError, match="must be a mapping"):
        UvboardConfig.from_yaml("- a\n- b\n")


def test_negative_budget_rejected() -> None:
    with pytest.raises(ValueError):
        UvboardConfig.from_yaml("budgets:\n  prose_chars: -1\n")


def test_budgets_frozen() -> None:
    budgets = BudgetConfig()
    with pytest.raises(ValidationError):
        budgets.prose_chars = 10  # type: ignore[misc]


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("UVBOARD_PROSE_CHARS", "2500")
    monkeypatch.setenv("UVBOARD_SOURCE_CHARS", "3000")

    budgets = BudgetConfig()
    assert budgets.prose_chars == 2500
    assert budgets.source_chars == 3000
    assert budgets.manifest_chars == 6000


def test_source_suffix_validation() -> None:
    with pytest.raises(ValueError, match="must start with"):
        DiscoveryConfig(source_suffixes=["py"])


def test_save_and_load(tmp_path: Path) -> None:
    path = tmp_path / "uvboard.yaml"
    UvboardConfig(budgets=BudgetConfig(manifest_chars=42)).save(path)

    assert UvboardConfig.load(path).budgets.manifest_chars == 42


def test_load_missing(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        UvboardConfig.load(tmp_path / "missing.yaml")
