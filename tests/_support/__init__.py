"""
Test support utilities for doc-assembly tests.

Helpers that don't fit as pytest fixtures but are shared across test
files: a fake extractor that understands just enough JSDoc to exercise the
pipeline without Node.js, and writers for small project trees.
"""

from __future__ import annotations

from pathlib import Path


def write_files(root: Path, files: dict[str, str]) -> None:
    """Write ``{relative_path: text}`` under ``root``."""
    for relative, text in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
