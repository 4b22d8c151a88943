"""
Extraction adapters.

Delegates doc-comment parsing to an external extractor and returns
structured members or rendered markdown.
"""

from doc_assembly.extraction.base import Extractor
from doc_assembly.extraction.documentation_js import DocumentationJsExtractor, comment_to_member
from doc_assembly.extraction.mdast import format_type, to_markdown

__all__ = [
    "Extractor",
    "DocumentationJsExtractor",
    "comment_to_member",
    "format_type",
    "to_markdown",
]
