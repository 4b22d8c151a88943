"""
Page Assembler.

Runs the per-module pipeline and writes one page per module.

Architecture:
    ```
    PageAssembler.run()
          │
          ├──► discover_modules()  (ignore list applied)
          │
          └──► for each module, concurrently (max_concurrency):
                    │
                    ├──► prepare()       substitute into docs/build/<file>
                    │
                    ├──► extract         markdown (CLI mode)
                    │      or            JSON of derived + base ──► merge ──► format
                    │
                    ├──► normalize()
                    │
                    └──► emit()          docs/helpers/<name>.md (overwrite)
    ```

Features:
    - Ignore list of undocumented modules from configuration
    - For-typings mode keeps internal type aliases
    - Any derived/base pairing from configuration, not only Appium
    - Base units are extracted once per run and shared with the merge

Guardrails:
    - Do NOT continue after an extraction failure
      ✅ The first error propagates; pages already written stay written
    - Do NOT touch source modules
      ✅ All rewriting happens on copies in the build directory

Tags:
    - assembler
    - pipeline
    - core_infrastructure

Doc-Types:
    - ARCHITECTURE (section: "Page Assembly", priority: 10)
    - API_REFERENCE (section: "Core Module", priority: 9)
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from pathlib import Path

from doc_assembly.config import DocAssemblyConfig
from doc_assembly.errors import ConfigError, EmitError, ExtractionError, SourceReadError
from doc_assembly.extraction.base import Extractor
from doc_assembly.formatter import MarkdownFormatter
from doc_assembly.fragments import discover_fragments
from doc_assembly.logging import get_logger, log_step
from doc_assembly.merger import MergePair, merge_units
from doc_assembly.models import ExtractedModule, FragmentKind, FrontMatter, Module, Page
from doc_assembly.normalizer import MarkdownNormalizer
from doc_assembly.substitution import SubstitutionEngine

logger = get_logger(__name__)


def emit_page(page: Page) -> Path:
    """Write a page, replacing any previous content."""
    try:
        page.path.parent.mkdir(parents=True, exist_ok=True)
        page.path.write_text(page.text, encoding="utf-8")
    except OSError as e:
        raise EmitError(f"Cannot write page {page.path}", cause=e).with_context(
            module=page.name, stage="emit", path=str(page.path)
        ) from e
    logger.info("page.emitted", page=page.name, path=str(page.path), bytes=len(page.text.encode("utf-8")))
    return page.path


def discover_source_files(directory: Path, extension: str) -> list[Path]:
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix == extension)


class PageAssembler:
    """Assemble helper pages from source modules.

    Args:
        config: Build configuration
        extractor: Extraction adapter
        for_typings: Keep type aliases unexpanded in intermediate copies
        formatter: Markdown formatter for merged units
    """

    def __init__(
        self,
        config: DocAssemblyConfig,
        extractor: Extractor,
        for_typings: bool = False,
        formatter: MarkdownFormatter | None = None,
    ):
        self.config = config
        self.extractor = extractor
        self.for_typings = for_typings
        self.formatter = formatter or MarkdownFormatter()

        self.source_dir = config.resolve(config.source_dir)
        self.build_dir = config.resolve(config.build_dir)
        self.output_dir = config.resolve(config.output_dir)

        self.partials = discover_fragments(
            config.resolve(config.partials_dir), FragmentKind.INLINE_PARTIAL, config.fragment_extension
        )
        self.shared = discover_fragments(
            config.resolve(config.shared_dir), FragmentKind.SHARED_BLOCK, config.fragment_extension
        )
        self.engine = SubstitutionEngine(self.partials, self.shared, config.type_aliases)
        self.normalizer = MarkdownNormalizer(self.shared)
        self.merge_pairs: dict[str, MergePair] = config.merge_pair_map

        self._prepared: dict[str, Path] = {}
        self._units: dict[str, asyncio.Task[ExtractedModule]] = {}

    # ── Discovery ────────────────────────────────────────────────────

    def all_modules(self) -> list[Module]:
        return [Module.from_path(p) for p in discover_source_files(self.source_dir, self.config.source_extension)]

    def discover_modules(self) -> list[Module]:
        """Source modules to document, ignore list applied."""
        ignored = set(self.config.ignore)
        return [m for m in self.all_modules() if m.name not in ignored]

    def module_by_name(self, name: str) -> Module:
        for module in self.all_modules():
            if module.name == name:
                return module
        raise SourceReadError(f"Module {name!r} not found in {self.source_dir}").with_context(
            module=name, stage="discover"
        )

    def page_path(self, name: str) -> Path:
        return self.output_dir / f"{name}.md"

    # ── Pipeline stages ──────────────────────────────────────────────

    def prepare(self, module: Module) -> Path:
        """Substituted copy of ``module``, written once per run."""
        if module.name not in self._prepared:
            self._prepared[module.name] = self.engine.prepare(module, self.build_dir, for_typings=self.for_typings)
        return self._prepared[module.name]

    async def _extract_unit(self, module: Module) -> ExtractedModule:
        # The task inherits its creator's context; log under this unit instead.
        with log_step("assembler.extract_unit", level="debug", module=module.name, stage="extract"):
            path = self.prepare(module)
            entries = await self.extractor.extract([path], module=module.name)
        return ExtractedModule(module=module, entries=entries)

    async def extract_unit(self, module: Module) -> ExtractedModule:
        """Structured extraction, shared by every caller in the run."""
        task = self._units.get(module.name)
        if task is None:
            task = asyncio.ensure_future(self._extract_unit(module))
            self._units[module.name] = task
        return await task

    async def merged_markdown(self, module: Module, pair: MergePair) -> str:
        """Extract derived and base units, merge them and format the result."""
        base_module = self.module_by_name(pair.base)
        derived_unit, base_unit = await asyncio.gather(self.extract_unit(module), self.extract_unit(base_module))

        derived_entry = derived_unit.primary
        base_entry = base_unit.primary
        if derived_entry is None:
            raise ExtractionError("No documented entry to merge into").with_context(module=module.name, stage="merge")
        if base_entry is None:
            raise ExtractionError("No documented entry to merge from").with_context(module=pair.base, stage="merge")

        merged = merge_units(derived_entry, base_entry, pair.exclusion, pair.category)
        return self.formatter.format(derived_unit.replace_entry(derived_entry, merged).entries)

    async def build_module(self, module: Module) -> Page:
        """Substitute, extract, merge when paired, and normalize one module."""
        with log_step("assembler.module", module=module.name) as timer:
            path = self.prepare(module)

            pair = self.merge_pairs.get(module.name)
            if pair is not None:
                markdown = await self.merged_markdown(module, pair)
                timer.add_metric("merged_from", pair.base)
            else:
                markdown = await self.extractor.render_markdown([path], module=module.name)

            body = self.normalizer.normalize(markdown, module=module.name)
            timer.add_metric("bytes", len(body))

        return Page(
            name=module.name,
            path=self.page_path(module.name),
            front_matter=FrontMatter.for_helper(module.name, self.config.permalink_prefix),
            body=body,
        )

    async def emit(self, page: Page) -> Path:
        return emit_page(page)

    # ── Runs ─────────────────────────────────────────────────────────

    def _reset(self) -> None:
        self._prepared = {}
        self._units = {}

    async def run(self, only: Iterable[str] | None = None) -> list[Page]:
        """Build and emit every documented module.

        Args:
            only: Restrict the run to these module identifiers

        Returns:
            Emitted pages in module order
        """
        self._reset()
        modules = self.discover_modules()

        if only is not None:
            wanted = set(only)
            unknown = wanted - {m.name for m in modules}
            if unknown:
                raise ConfigError(f"Unknown or ignored modules: {', '.join(sorted(unknown))}")
            modules = [m for m in modules if m.name in wanted]

        semaphore = asyncio.Semaphore(self.config.max_concurrency)

        async def _run_one(module: Module) -> Page:
            async with semaphore:
                page = await self.build_module(module)
                await self.emit(page)
                return page

        with log_step("assembler.run", category="helpers", modules=len(modules)):
            pages = await asyncio.gather(*(_run_one(m) for m in modules))
        return list(pages)

    async def build_lib(self) -> list[Path]:
        """Write substituted copies of every source module, ignored ones included."""
        self._reset()
        with log_step("assembler.build_lib", category="lib", for_typings=self.for_typings) as timer:
            paths = [self.prepare(module) for module in self.all_modules()]
            timer.add_metric("modules", len(paths))
        return paths
