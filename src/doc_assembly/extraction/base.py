"""
Extractor interface.

An extractor turns one or more intermediate module copies into documented
members. It does not parse anything itself: parsing is delegated to an
external tool.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path

from doc_assembly.models import Member


class Extractor(ABC):
    """Base class for structured-documentation extractors.

    Both operations are configured for shallow traversal, alphabetical
    member order, and no table of contents.

    Doc-Types:
        - API_REFERENCE (section: "Extraction", priority: 7)
    """

    @abstractmethod
    async def render_markdown(self, paths: Sequence[Path], module: str | None = None) -> str:
        """Render ``paths`` to markdown (CLI mode).

        Args:
            paths: Intermediate module copies
            module: Identifier attached to errors
        """

    @abstractmethod
    async def extract(self, paths: Sequence[Path], module: str | None = None) -> list[Member]:
        """Return the top-level documented entries of ``paths`` (library mode)."""
