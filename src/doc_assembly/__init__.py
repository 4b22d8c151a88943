"""
Documentation Assembly Package

Builds reference pages from source doc-comments: fragments are spliced into
copies of each module, an external extractor documents them, the markdown
is normalized, and one unit can inherit members from another.

Example:
    >>> from doc_assembly import DocAssemblyConfig, DocumentationOrchestrator
    >>> from pathlib import Path
    >>> orchestrator = DocumentationOrchestrator(DocAssemblyConfig(project_root=Path(".")))
    >>> orchestrator.generate_all()
"""

__version__ = "0.1.0"

from doc_assembly.assembler import PageAssembler
from doc_assembly.config import DocAssemblyConfig
from doc_assembly.errors import DocAssemblyError, ExtractionError
from doc_assembly.extraction import DocumentationJsExtractor, Extractor
from doc_assembly.merger import ExclusionFilter, merge_members
from doc_assembly.normalizer import MarkdownNormalizer
from doc_assembly.orchestrator import DocumentationOrchestrator
from doc_assembly.substitution import SubstitutionEngine

__all__ = [
    "PageAssembler",
    "DocAssemblyConfig",
    "DocAssemblyError",
    "ExtractionError",
    "DocumentationJsExtractor",
    "Extractor",
    "ExclusionFilter",
    "merge_members",
    "MarkdownNormalizer",
    "DocumentationOrchestrator",
    "SubstitutionEngine",
    "__version__",
]
