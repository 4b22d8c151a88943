"""
Documentation Orchestrator.

Coordinates the documentation categories of a build. Categories read
disjoint inputs and write disjoint outputs, so they run concurrently.

Example:
    >>> orchestrator = DocumentationOrchestrator(DocAssemblyConfig(project_root=Path(".")))
    >>> orchestrator.generate_all()
    {'helpers': [...], 'plugins': [...], 'external_helpers': [...]}
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Iterable
from pathlib import Path

import httpx

from doc_assembly.assembler import PageAssembler, emit_page
from doc_assembly.config import DocAssemblyConfig
from doc_assembly.extraction import DocumentationJsExtractor, Extractor
from doc_assembly.logging import bind_context, get_logger, log_step
from doc_assembly.models import Page
from doc_assembly.pages import (
    PageRenderer,
    build_changelog_page,
    build_ci_page,
    build_external_helper_page,
    build_plugins_page,
    build_remote_section_page,
    build_section_page,
)

logger = get_logger(__name__)


class DocumentationOrchestrator:
    """Orchestrate a documentation build across categories.

    Manifesto:
        One command regenerates every page from current inputs. Nothing is
        incremental: a rerun on unchanged inputs writes identical pages.

    Architecture:
        ```
        DocumentationOrchestrator.build_docs()
              │
              ├──► build_helpers()            PageAssembler.run()
              ├──► build_plugins()            one page for lib/plugin/*
              └──► build_external_helpers()   one page per external helper
                        (asyncio.gather, first failure propagates)
        ```

    Guardrails:
        - Do NOT retry a failed module
          ✅ Fix the doc-comment and rerun the whole build

    Tags:
        - orchestrator
        - generation
        - coordination
    """

    def __init__(
        self,
        config: DocAssemblyConfig,
        extractor: Extractor | None = None,
        renderer: PageRenderer | None = None,
    ):
        self.config = config
        self.extractor = extractor or DocumentationJsExtractor(
            command=config.extractor_command,
            timeout=config.extractor_timeout,
            cwd=config.project_root,
        )
        self.renderer = renderer or PageRenderer()

    def assembler(self, for_typings: bool = False) -> PageAssembler:
        return PageAssembler(self.config, self.extractor, for_typings=for_typings)

    # ── Categories ───────────────────────────────────────────────────

    async def build_helpers(self, only: Iterable[str] | None = None) -> list[Page]:
        return await self.assembler().run(only=only)

    async def build_plugins(self) -> list[Page]:
        page = await build_plugins_page(self.config, self.extractor)
        if page is None:
            return []
        emit_page(page)
        return [page]

    async def build_external_helpers(self) -> list[Page]:
        async def _one(helper) -> Page:
            page = await build_external_helper_page(self.config, self.extractor, helper, self.renderer)
            emit_page(page)
            return page

        pages = await asyncio.gather(*(_one(helper) for helper in self.config.external_helpers))
        return list(pages)

    async def build_docs(self) -> dict[str, list[Page]]:
        """Run helpers, plugins and external helpers concurrently."""
        bind_context(run_id=uuid.uuid4().hex[:12])
        with log_step("orchestrator.build_docs"):
            helpers, plugins, external = await asyncio.gather(
                self.build_helpers(),
                self.build_plugins(),
                self.build_external_helpers(),
            )
        return {"helpers": helpers, "plugins": plugins, "external_helpers": external}

    async def build_lib(self, for_typings: bool = False) -> list[Path]:
        """Substituted copies of all source modules (for type definitions)."""
        return await self.assembler(for_typings=for_typings).build_lib()

    async def build_typings_sources(self) -> list[Path]:
        return await self.build_lib(for_typings=True)

    def build_changelog(self) -> Page:
        page = build_changelog_page(self.config, self.renderer)
        emit_page(page)
        return page

    async def build_ci(self, client: httpx.AsyncClient | None = None) -> Page:
        page = await build_ci_page(self.config, client=client, renderer=self.renderer)
        emit_page(page)
        return page

    def build_section(
        self,
        source: Path,
        name: str,
        title: str,
        heading: str | None = None,
        note: str | None = None,
    ) -> Page:
        """Wrap ``source`` as ``<docs_dir>/<name>.md`` with permalink ``/<name>``."""
        page = build_section_page(
            source=self.config.resolve(source),
            target=self.config.resolve(self.config.docs_dir) / f"{name}.md",
            permalink=f"/{name}",
            title=title,
            heading=heading,
            note=note,
            renderer=self.renderer,
        )
        emit_page(page)
        return page

    async def build_remote_section(
        self,
        url: str,
        name: str,
        title: str,
        heading: str | None = None,
        note: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> Page:
        """Fetch ``url`` and wrap it as ``<docs_dir>/<name>.md`` with permalink ``/<name>``."""
        page = await build_remote_section_page(
            url,
            target=self.config.resolve(self.config.docs_dir) / f"{name}.md",
            permalink=f"/{name}",
            title=title,
            heading=heading,
            note=note,
            client=client,
            renderer=self.renderer,
        )
        emit_page(page)
        return page

    async def build_remote_sections(self, client: httpx.AsyncClient | None = None) -> list[Page]:
        """Every configured remote section page, fetched concurrently."""
        pages = await asyncio.gather(
            *(
                self.build_remote_section(section.url, name=section.name, title=section.title, client=client)
                for section in self.config.remote_sections
            )
        )
        return list(pages)

    # ── Synchronous entry points ─────────────────────────────────────

    def generate_all(self) -> dict[str, list[Path]]:
        """Build all documentation categories.

        Returns:
            Dict mapping category to written page paths
        """
        results = asyncio.run(self.build_docs())
        summary = {category: [page.path for page in pages] for category, pages in results.items()}
        logger.info("orchestrator.summary", **{category: len(paths) for category, paths in summary.items()})
        return summary

    def generate_helpers(self, only: Iterable[str] | None = None) -> list[Path]:
        return [page.path for page in asyncio.run(self.build_helpers(only=only))]
