"""
documentation.js adapter.

Runs ``documentation build`` as a subprocess. Markdown mode returns the
tool's own rendering; JSON mode is parsed into ``Member`` trees so that
members can be merged before formatting.

Example:
    >>> extractor = DocumentationJsExtractor()
    >>> markdown = asyncio.run(extractor.render_markdown([Path("docs/build/Playwright.js")]))
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from doc_assembly.errors import ExtractionError
from doc_assembly.extraction.base import Extractor
from doc_assembly.extraction.mdast import format_type, to_markdown
from doc_assembly.logging import get_logger
from doc_assembly.models import Member, Param, Returns

logger = get_logger(__name__)

DEFAULT_COMMAND = ("npx", "documentation")
SHARED_ARGS = ("--shallow", "--sort-order=alpha")
MARKDOWN_ARGS = ("-f", "md", "--markdown-toc=false")
JSON_ARGS = ("-f", "json")

MEMBER_CATEGORIES = ("global", "inner", "instance", "events", "static")


def _param_from_tag(tag: dict[str, Any], prefix: str = "") -> list[Param]:
    type_node = tag.get("type") or {}
    params = [
        Param(
            name=prefix + tag.get("name", ""),
            type=format_type(type_node),
            description=to_markdown(tag.get("description")),
            default=tag.get("default"),
            optional=type_node.get("type") == "OptionalType" or tag.get("default") is not None,
        )
    ]
    # Nested properties already carry their dotted name ("options.timeout").
    for child in tag.get("properties") or []:
        params.extend(_param_from_tag(child))
    return params


def comment_to_member(comment: dict[str, Any]) -> Member:
    """Convert one documentation.js JSON comment into a ``Member`` tree."""
    params: list[Param] = []
    for tag in comment.get("params") or []:
        params.extend(_param_from_tag(tag))

    properties: list[Param] = []
    for tag in comment.get("properties") or []:
        properties.extend(_param_from_tag(tag))

    members = {}
    for category in MEMBER_CATEGORIES:
        children = (comment.get("members") or {}).get(category) or []
        if children:
            members[category] = [comment_to_member(child) for child in children]

    return Member(
        name=comment.get("name") or "",
        kind=comment.get("kind") or "",
        scope=comment.get("scope"),
        description=to_markdown(comment.get("description")),
        params=params,
        properties=properties,
        returns=[
            Returns(type=format_type(r.get("type")), description=to_markdown(r.get("description")))
            for r in comment.get("returns") or []
        ],
        examples=[example.get("description", "") for example in comment.get("examples") or []],
        augments=[a["name"] for a in comment.get("augments") or [] if a.get("name")],
        type=format_type(comment.get("type")),
        members=members,
    )


class DocumentationJsExtractor(Extractor):
    """Extract documentation with the documentation.js CLI.

    Args:
        command: Executable prefix, e.g. ``("npx", "documentation")``
        timeout: Seconds before the process is killed (None waits forever)
        cwd: Working directory for the process
    """

    def __init__(
        self,
        command: Sequence[str] = DEFAULT_COMMAND,
        timeout: float | None = None,
        cwd: Path | None = None,
    ):
        self.command = tuple(command)
        self.timeout = timeout
        self.cwd = cwd

    def build_args(self, paths: Sequence[Path], fmt: str) -> list[str]:
        format_args = MARKDOWN_ARGS if fmt == "md" else JSON_ARGS
        return [*self.command, "build", *(str(p) for p in paths), *format_args, *SHARED_ARGS]

    async def _run(self, args: list[str], module: str | None) -> str:
        logger.debug("extractor.exec", args=args)
        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(self.cwd) if self.cwd else None,
            )
        except FileNotFoundError as e:
            raise ExtractionError(f"Extractor not found: {args[0]}", cause=e).with_context(
                module=module, stage="extract"
            ) from e

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except TimeoutError as e:
            process.kill()
            await process.wait()
            raise ExtractionError(f"Extractor timed out after {self.timeout}s", cause=e).with_context(
                module=module, stage="extract"
            ) from e

        if process.returncode != 0:
            message = stderr.decode("utf-8", errors="replace").strip()
            raise ExtractionError(
                f"Extractor exited with {process.returncode}: {message.splitlines()[-1] if message else 'no output'}"
            ).with_context(module=module, stage="extract", stderr=message)

        try:
            return stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ExtractionError("Extractor output is not valid UTF-8", cause=e).with_context(
                module=module, stage="extract"
            ) from e

    async def render_markdown(self, paths: Sequence[Path], module: str | None = None) -> str:
        return await self._run(self.build_args(paths, "md"), module)

    async def extract(self, paths: Sequence[Path], module: str | None = None) -> list[Member]:
        output = await self._run(self.build_args(paths, "json"), module)
        try:
            comments = json.loads(output)
        except json.JSONDecodeError as e:
            raise ExtractionError("Extractor returned invalid JSON", cause=e).with_context(
                module=module, stage="extract"
            ) from e
        return [comment_to_member(comment) for comment in comments]
