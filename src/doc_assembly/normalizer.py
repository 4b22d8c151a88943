"""
Markdown Normalizer.

Post-processes extractor markdown. Each rule is a pure function that
returns its input unchanged when the pattern it targets is absent, and the
``MarkdownNormalizer`` applies them in a fixed order:

1. strip_optional_defaults  ``(optional, default `x`)`` annotations
2. strip_stray_markers      backslash escape runs around emphasis
3. splice_shared_blocks     shared blocks the extractor left unresolved
4. splice_configuration     move ``## config`` to ``<!-- configuration -->``

Front matter is added at emission (``prepend_front_matter``).

Guardrails:
    - Rules never reorder members
    - A missing ``## config`` section is not an error
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence

from doc_assembly.logging import get_logger
from doc_assembly.models import Fragment, FragmentKind, FrontMatter
from doc_assembly.substitution import format_shared_block

logger = get_logger(__name__)

OPTIONAL_DEFAULT_RE = re.compile(r"\(optional, default.*?\)")
STRAY_MARKER_RE = re.compile(r"\\+")
CONFIG_SECTION_RE = re.compile(r"## config(.*)\[1\]", re.DOTALL)
CONFIG_ANCHOR = "<!-- configuration -->"
CONFIG_MARKER = "[1]"


def strip_optional_defaults(markdown: str) -> str:
    """Remove ``(optional, default …)`` up to its closing parenthesis."""
    return OPTIONAL_DEFAULT_RE.sub("", markdown)


def strip_stray_markers(markdown: str) -> str:
    r"""Remove backslash runs left by the extractor's escaping (``\*`` -> ``*``)."""
    return STRAY_MARKER_RE.sub("", markdown)


def splice_shared_blocks(markdown: str, fragments: Sequence[Fragment]) -> str:
    """Resolve ``{{ name }}`` placeholders still present in the markdown."""
    for fragment in fragments:
        if fragment.kind is FragmentKind.SHARED_BLOCK:
            markdown = markdown.replace(fragment.placeholder, format_shared_block(fragment.body))
    return markdown


def splice_configuration(markdown: str) -> str:
    """Move the ``## config`` section body to the configuration anchor.

    The section runs from the ``## config`` heading to the last ``[1]``
    marker. Its body replaces the first anchor and the section itself
    collapses to ``[1]``.
    """
    match = CONFIG_SECTION_RE.search(markdown)
    if not match:
        return markdown

    body = match.group(1)
    markdown = markdown.replace(CONFIG_ANCHOR, body, 1)
    return CONFIG_SECTION_RE.sub(lambda _: CONFIG_MARKER, markdown, count=1)


def prepend_front_matter(markdown: str, front_matter: FrontMatter) -> str:
    return front_matter.render() + markdown


class MarkdownNormalizer:
    """Apply the normalization rules in order.

    Args:
        shared: Shared-block fragments for the defensive second pass
    """

    def __init__(self, shared: Sequence[Fragment] = ()):
        self.shared = list(shared)
        self.rules: list[tuple[str, Callable[[str], str]]] = [
            ("strip_optional_defaults", strip_optional_defaults),
            ("strip_stray_markers", strip_stray_markers),
            ("splice_shared_blocks", lambda text: splice_shared_blocks(text, self.shared)),
            ("splice_configuration", splice_configuration),
        ]

    def normalize(self, markdown: str, module: str | None = None) -> str:
        for name, rule in self.rules:
            updated = rule(markdown)
            if updated != markdown:
                logger.debug("normalizer.rule_applied", rule=name, module=module)
            markdown = updated
        return markdown
