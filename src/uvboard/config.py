"""Configuration schema for uvboard."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

DEFAULT_PROSE_CHARS = 4000
DEFAULT_MANIFEST_CHARS = 6000
DEFAULT_SOURCE_CHARS = 8000

FLOOR_MIN_CHARS = 500
INTRO_CHARS = 500
MIN_FRAGMENT_CHARS = 100
ENTRY_CONTEXT_LINES = 20


class BudgetConfig(BaseSettings):
    """Per-category character budgets and extraction limits.

    Budgets are fixed once the process is configured; nothing in the
    extraction core derives them from the documents being processed.

    Environment variables (used when the config file omits ``budgets``):
        UVBOARD_PROSE_CHARS: Budget for the README excerpt.
        UVBOARD_MANIFEST_CHARS: Budget shared by dependency manifests.
        UVBOARD_SOURCE_CHARS: Budget shared by source files.

    Attributes:
        prose_chars: Budget for the single prose document.
        manifest_chars: Budget for all manifest documents together.
        source_chars: Budget for all source documents together.
        floor_min_chars: Smallest allocation a processed document receives.
        intro_chars: Introductory prefix always kept from prose.
        min_fragment_chars: Shortest prose fragment worth keeping.
        entry_context_lines: Lines kept above a detected entry point.
    """

    prose_chars: int = Field(default=DEFAULT_PROSE_CHARS, ge=0)
    manifest_chars: int = Field(default=DEFAULT_MANIFEST_CHARS, ge=0)
    source_chars: int = Field(default=DEFAULT_SOURCE_CHARS, ge=0)
    floor_min_chars: int = Field(default=FLOOR_MIN_CHARS, ge=0)
    intro_chars: int = Field(default=INTRO_CHARS, ge=0)
    min_fragment_chars: int = Field(default=MIN_FRAGMENT_CHARS, ge=0)
    entry_context_lines: int = Field(default=ENTRY_CONTEXT_LINES, ge=0)

    model_config = {
        "env_prefix": "UVBOARD_",
        "extra": "ignore",
        "frozen": True,
    }


class DiscoveryConfig(BaseModel):
    """Which files of a checkout feed each document category.

    Attributes:
        manifest_files: Dependency/config manifests read when present.
        readme_files: README candidates; the first one found wins.
        source_suffixes: Suffixes of root-level source files.
        max_source_files: Maximum number of source files to read.
    """

    manifest_files: list[str] = Field(
        default_factory=lambda: [
            "requirements.txt",
            "setup.py",
            "setup.cfg",
            "Pipfile",
            "pyproject.toml",
        ]
    )
    readme_files: list[str] = Field(
        default_factory=lambda: [
            "README.md",
            "readme.md",
            "README.rst",
            "README.txt",
            "README",
        ]
    )
    source_suffixes: list[str] = Field(default_factory=lambda: [".py"])
    max_source_files: int = Field(default=5, ge=0)

    @field_validator("source_suffixes")
    @classmethod
    def validate_suffixes(cls, v: list[str]) -> list[str]:
        """Ensure suffixes start with a dot."""
        for suffix in v:
            if not suffix.startswith("."):
                msg = f"Source suffix must start with '.': {suffix!r}"
                raise ValueError(msg)
        return v


class UvboardConfig(BaseModel):
    """Complete uvboard configuration.

    Attributes:
        version: Config schema version.
        budgets: Category budgets and extraction limits.
        discovery: Document discovery settings.

    Example:
        >>> config = UvboardConfig.default()
        >>> config.budgets.prose_chars
        4000
    """

    version: str = "1.0"
    budgets: BudgetConfig = Field(default_factory=BudgetConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)

    def to_yaml(self) -> str:
        """Serialize the config to YAML.

        Returns:
            YAML string representation.
        """
        data = self.model_dump(mode="json")
        return yaml.dump(data, default_flow_style=False, sort_keys=False)

    def save(self, path: Path) -> None:
        """Save the config to a YAML file.

        Args:
            path: Path to save the file.
        """
        path.write_text(self.to_yaml())

    @classmethod
    def from_yaml(cls, yaml_content: str) -> UvboardConfig:
        """Parse config from YAML content.

        Args:
            yaml_content: YAML string to parse.

        Returns:
            Parsed UvboardConfig instance.

        Raises:
            ValueError: If the YAML is invalid.
        """
        try:
            data: dict[str, Any] = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            msg = f"Invalid YAML: {e}"
            raise ValueError(msg) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            msg = "Config YAML must be a mapping"
            raise ValueError(msg)

        return cls.model_validate(data)

    @classmethod
    def load(cls, path: Path) -> UvboardConfig:
        """Load config from a YAML file.

        Args:
            path: Path to the YAML file.

        Returns:
            Parsed UvboardConfig instance.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ValueError: If the YAML is invalid.
        """
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        return cls.from_yaml(path.read_text())

    @classmethod
    def default(cls) -> UvboardConfig:
        """Create a default configuration."""
        return cls()
