"""
Fake extractor for pipeline tests.

Understands the subset of JSDoc used by the fixture modules: a ``/** */``
block followed by ``class Name`` or ``name(args) {``, free-text description
lines and ``@param {type} name description`` tags (``[name=default]`` for
optional parameters). Methods become ``instance`` members of the preceding
class, sorted by name like ``--sort-order=alpha``.

Usage:
    extractor = FakeExtractor(fail_on={"Broken"})
    markdown = await extractor.render_markdown([Path("docs/build/Foo.js")])
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Sequence
from pathlib import Path

from doc_assembly.errors import ExtractionError
from doc_assembly.extraction.base import Extractor
from doc_assembly.formatter import MarkdownFormatter
from doc_assembly.logging import get_context
from doc_assembly.models import Member, Param

COMMENT_RE = re.compile(r"/\*\*(.*?)\*/\s*\n?\s*([^\n]*)", re.DOTALL)
CLASS_RE = re.compile(r"class\s+(\w+)")
METHOD_RE = re.compile(r"(?:async\s+)?(\w+)\s*\(")
PARAM_RE = re.compile(r"@param\s+\{([^}]*)\}\s+(\S+)\s*(.*)")
LEADING_STAR_RE = re.compile(r"^\s*\*\s?")


def _parse_param(match: re.Match[str]) -> Param:
    type_, name, description = match.groups()
    default = None
    optional = False
    if name.startswith("[") and name.endswith("]"):
        optional = True
        name = name[1:-1]
        if "=" in name:
            name, default = name.split("=", 1)
    return Param(name=name, type=type_, description=description.strip(), default=default, optional=optional)


def parse_comment(body: str) -> tuple[str, list[Param]]:
    description: list[str] = []
    params: list[Param] = []
    for raw in body.split("\n"):
        line = LEADING_STAR_RE.sub("", raw).rstrip()
        match = PARAM_RE.search(line)
        if match:
            params.append(_parse_param(match))
        elif not line.strip().startswith("@"):
            description.append(line)
    return "\n".join(description).strip(), params


def parse_module(text: str) -> list[Member]:
    entries: list[Member] = []
    current: Member | None = None
    methods: list[Member] = []

    def close() -> None:
        if current is not None:
            entries.append(current.with_members("instance", sorted(methods, key=lambda m: m.name)))

    for comment, declaration in COMMENT_RE.findall(text):
        description, params = parse_comment(comment)
        class_match = CLASS_RE.search(declaration)
        if class_match:
            close()
            current = Member(name=class_match.group(1), kind="class", description=description)
            methods = []
            continue
        method_match = METHOD_RE.search(declaration)
        if method_match:
            member = Member(name=method_match.group(1), scope="instance", description=description, params=params)
            if current is None:
                entries.append(member)
            else:
                methods.append(member)
    close()
    return entries


class FakeExtractor(Extractor):
    """In-process extractor recording every call.

    Args:
        fail_on: Module identifiers whose extraction raises ``ExtractionError``
    """

    def __init__(self, fail_on: Sequence[str] = ()):
        self.fail_on = set(fail_on)
        self.calls: list[tuple[str, str | None, tuple[Path, ...]]] = []
        self.log_modules: list[tuple[str | None, str | None]] = []
        self.formatter = MarkdownFormatter()

    @property
    def extract_counts(self) -> Counter:
        return Counter(module for mode, module, _ in self.calls if mode == "json")

    def _read(self, paths: Sequence[Path], module: str | None) -> list[Member]:
        if module in self.fail_on:
            raise ExtractionError("Extractor exited with 1: SyntaxError").with_context(
                module=module, stage="extract", stderr="SyntaxError: Unexpected token"
            )
        entries: list[Member] = []
        for path in paths:
            entries.extend(parse_module(Path(path).read_text(encoding="utf-8")))
        return entries

    async def render_markdown(self, paths: Sequence[Path], module: str | None = None) -> str:
        self.calls.append(("md", module, tuple(paths)))
        return self.formatter.format(self._read(paths, module))

    async def extract(self, paths: Sequence[Path], module: str | None = None) -> list[Member]:
        self.calls.append(("json", module, tuple(paths)))
        self.log_modules.append((module, get_context().module))
        return self._read(paths, module)
