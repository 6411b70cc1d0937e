"""uvboard - context budgeting for packaging-manifest generation."""

__version__ = "0.1.0"
