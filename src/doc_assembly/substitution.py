"""
Template Substitution Engine.

Rewrites placeholder tokens in a module's text with fragment bodies and
writes the result to an intermediate copy in the build directory. The
original module is never written.

Manifesto:
    Shared wording (parameter descriptions, narrative sections) lives once
    in a fragment directory. Modules reference it with a placeholder and
    the engine splices it in before the extractor ever sees the file.

Architecture:
    ```
    lib/helper/Foo.js ──► read
                            │
          {{> partial }} ───┤  format_inline_partial (indented doc-comment lines)
          {{ shared }}   ───┤  format_shared_block (two blank lines + body)
          type aliases   ───┤  expand_aliases (skipped for typings builds)
                            ▼
                    docs/build/Foo.js
    ```

Guardrails:
    - Unknown placeholders pass through verbatim
      ✅ The extractor renders them as text, the build continues
    - Do NOT write back to the source module
      ✅ Only the build-directory copy is written

Tags:
    - substitution
    - templates
    - core_infrastructure

Doc-Types:
    - ARCHITECTURE (section: "Substitution", priority: 8)
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from pathlib import Path

from doc_assembly.errors import ConfigError, EmitError, SourceReadError
from doc_assembly.logging import get_logger
from doc_assembly.models import Fragment, FragmentKind, Module

logger = get_logger(__name__)

INLINE_INDENT = "   * "

# Applied in order: the optional forms must be rewritten before the bare ones.
DEFAULT_TYPE_ALIASES: list[tuple[str, str]] = [
    (r"CodeceptJS\.LocatorOrString\?", "(string | object)?"),
    (r"LocatorOrString\?", "(string | object)?"),
    (r"CodeceptJS\.LocatorOrString", "string | object"),
    (r"LocatorOrString", "string | object"),
    (r"CodeceptJS\.StringOrSecret", "string | object"),
]


def format_inline_partial(body: str) -> str:
    """Reformat a partial so it renders inside a ``/** ... */`` block.

    Every line after the first gets the doc-comment indentation; the first
    line follows the placeholder's own ``*`` so it stays bare, and the whole
    block starts on a new line.

        >>> format_inline_partial("first\\nsecond")
        '\\nfirst\\n   * second'
    """
    lines = body.split("\n")
    indented = [lines[0]] + [INLINE_INDENT + line for line in lines[1:]]
    return "\n" + "\n".join(indented)


def format_shared_block(body: str) -> str:
    """Shared blocks are inserted verbatim after two blank lines."""
    return f"\n\n\n{body}"


def compile_aliases(aliases: Iterable[Sequence[str]]) -> list[tuple[re.Pattern[str], str]]:
    return [(re.compile(pattern), replacement) for pattern, replacement in aliases]


class SubstitutionEngine:
    """Splice fragments into module text.

    Args:
        partials: Inline-partial fragments, in discovery order
        shared: Shared-block fragments, in discovery order
        type_aliases: Ordered ``(regex, replacement)`` pairs
    """

    def __init__(
        self,
        partials: Sequence[Fragment] = (),
        shared: Sequence[Fragment] = (),
        type_aliases: Iterable[Sequence[str]] | None = None,
    ):
        self.partials = [f for f in partials if f.kind is FragmentKind.INLINE_PARTIAL]
        self.shared = [f for f in shared if f.kind is FragmentKind.SHARED_BLOCK]
        self.type_aliases = compile_aliases(DEFAULT_TYPE_ALIASES if type_aliases is None else type_aliases)

        self._replacements: list[tuple[str, str]] = [
            (f.placeholder, format_inline_partial(f.body)) for f in self.partials
        ] + [(f.placeholder, format_shared_block(f.body)) for f in self.shared]

    @property
    def placeholders(self) -> list[str]:
        return [placeholder for placeholder, _ in self._replacements]

    def replace_placeholders(self, text: str) -> str:
        for placeholder, replacement in self._replacements:
            text = text.replace(placeholder, replacement)
        return text

    def expand_aliases(self, text: str) -> str:
        for pattern, replacement in self.type_aliases:
            text = pattern.sub(replacement, text)
        return text

    def substitute(self, text: str, expand_aliases: bool = True) -> str:
        text = self.replace_placeholders(text)
        if expand_aliases:
            text = self.expand_aliases(text)
        return text

    def prepare(self, module: Module, build_dir: Path, for_typings: bool = False) -> Path:
        """Write the substituted copy of ``module`` into ``build_dir``.

        Returns:
            Path of the intermediate copy
        """
        try:
            text = module.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceReadError(f"Cannot read module source {module.path}", cause=e).with_context(
                module=module.name, stage="substitute", path=str(module.path)
            ) from e

        target = Path(build_dir) / module.filename
        if target.resolve() == module.path.resolve():
            raise ConfigError("Build directory must differ from the source directory").with_context(
                module=module.name, stage="substitute", path=str(target)
            )

        output = self.substitute(text, expand_aliases=not for_typings)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(output, encoding="utf-8")
        except OSError as e:
            raise EmitError(f"Cannot write intermediate copy {target}", cause=e).with_context(
                module=module.name, stage="substitute", path=str(target)
            ) from e

        logger.debug("substitution.prepared", module=module.name, target=str(target), for_typings=for_typings)
        return target
