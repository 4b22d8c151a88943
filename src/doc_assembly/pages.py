"""
Supplementary pages.

Everything besides the per-helper pages: the combined plugins page, helpers
documented from other packages, the releases page, static section pages,
and the community CI recipes page. All of them follow the same emission
convention (front matter + body).
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import httpx
from jinja2 import Environment, FileSystemLoader, select_autoescape

from doc_assembly.assembler import discover_source_files
from doc_assembly.config import DocAssemblyConfig, ExternalHelperConfig
from doc_assembly.errors import FetchError, SourceReadError
from doc_assembly.extraction.base import Extractor
from doc_assembly.logging import get_logger, log_step
from doc_assembly.models import FrontMatter, Module, Page
from doc_assembly.substitution import SubstitutionEngine

logger = get_logger(__name__)

CI_ABOUT_SLUG = "about-the-continuous-integration-category"


class PageRenderer:
    """Render page bodies from Jinja2 templates.

    Args:
        template_dir: Directory containing ``*.md.j2`` templates
    """

    def __init__(self, template_dir: Path | None = None):
        if template_dir is None:
            template_dir = Path(__file__).parent / "templates"
        self.template_dir = Path(template_dir)

        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def render(self, template_name: str, **context: Any) -> str:
        return self.env.get_template(template_name).render(**context)


def section_front_matter(permalink: str, title: str, edit_link: bool = False) -> FrontMatter:
    fields = {"permalink": permalink, "layout": "Section", "sidebar": "false", "title": title}
    if not edit_link:
        fields["editLink"] = "false"
    return FrontMatter(fields)


def _read(path: Path, name: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(f"Cannot read {path}", cause=e).with_context(module=name, path=str(path)) from e


# ── Plugins ──────────────────────────────────────────────────────────────


async def build_plugins_page(config: DocAssemblyConfig, extractor: Extractor) -> Page | None:
    """All plugin modules rendered together on one page.

    Returns None when there are no plugin modules.
    """
    plugin_dir = config.resolve(config.plugin_dir)
    paths = discover_source_files(plugin_dir, config.source_extension)
    if not paths:
        logger.info("plugins.none_found", directory=str(plugin_dir))
        return None

    with log_step("pages.plugins", module="plugins", modules=len(paths)):
        markdown = await extractor.render_markdown(paths, module="plugins")

    front_matter = FrontMatter({"permalink": "plugins", "sidebarDepth": "", "sidebar": "auto", "title": "Plugins"})
    return Page(
        name="plugins",
        path=config.resolve(config.docs_dir) / "plugins.md",
        front_matter=front_matter,
        body=markdown,
    )


# ── External helpers ─────────────────────────────────────────────────────


async def build_external_helper_page(
    config: DocAssemblyConfig,
    extractor: Extractor,
    helper: ExternalHelperConfig,
    renderer: PageRenderer | None = None,
) -> Page:
    """Document a helper shipped by another package.

    Type aliases are expanded on a copy in the build directory; the
    package's own file is only read.
    """
    renderer = renderer or PageRenderer()
    source = config.resolve(helper.path)
    if not source.is_file():
        raise SourceReadError(f"External helper source not found: {source}").with_context(
            module=helper.name, stage="substitute", path=str(source)
        )

    engine = SubstitutionEngine(type_aliases=config.type_aliases)
    copy = engine.prepare(Module(name=helper.name, path=source), config.resolve(config.build_dir) / "external" / helper.name)

    with log_step("pages.external_helper", module=helper.name):
        markdown = await extractor.render_markdown([copy], module=helper.name)

    front_matter = FrontMatter(
        {"permalink": f"{config.permalink_prefix}/{helper.name}", "sidebar": "auto", "title": helper.name}
    )
    return Page(
        name=helper.name,
        path=config.resolve(config.output_dir) / f"{helper.name}.md",
        front_matter=front_matter,
        body=renderer.render("external_helper.md.j2", name=helper.name, content=markdown),
    )


# ── Changelog ────────────────────────────────────────────────────────────

USER_MENTION_RE = re.compile(r"\s@([\w-]+)")
ISSUE_REF_RE = re.compile(r"#(\d+)")
HELPER_TAG_RE = re.compile(r"\s\[(\w+)\]\s")


def process_changelog(text: str, repository_url: str) -> str:
    """Link user mentions and issue numbers, bold ``[Helper]`` tags."""
    text = USER_MENTION_RE.sub(r" **[\1](https://github.com/\1)**", text)
    text = ISSUE_REF_RE.sub(rf"[#\1]({repository_url}/issues/\1)", text)
    return HELPER_TAG_RE.sub(r" **[\1]** ", text)


def build_changelog_page(config: DocAssemblyConfig, renderer: PageRenderer | None = None) -> Page:
    renderer = renderer or PageRenderer()
    changelog = _read(config.resolve(config.changelog_file), "changelog")
    front_matter = FrontMatter(
        {"permalink": "/changelog", "title": "Releases", "sidebar": "false", "layout": "Section"}
    )
    return Page(
        name="changelog",
        path=config.resolve(config.docs_dir) / "changelog.md",
        front_matter=front_matter,
        body=renderer.render("changelog.md.j2", changelog=process_changelog(changelog, config.repository_url)),
    )


# ── Section pages ────────────────────────────────────────────────────────


def _section_page(
    content: str,
    target: Path,
    permalink: str,
    title: str,
    heading: str | None,
    note: str | None,
    renderer: PageRenderer | None,
) -> Page:
    renderer = renderer or PageRenderer()
    return Page(
        name=Path(target).stem,
        path=Path(target),
        front_matter=section_front_matter(permalink, title),
        body=renderer.render("section.md.j2", heading=heading, note=note, content=content),
    )


def build_section_page(
    source: Path,
    target: Path,
    permalink: str,
    title: str,
    heading: str | None = None,
    note: str | None = None,
    renderer: PageRenderer | None = None,
) -> Page:
    """Wrap a local markdown file (README, wiki page) as a section page."""
    return _section_page(_read(Path(source), title), target, permalink, title, heading, note, renderer)


async def fetch_remote_text(client: httpx.AsyncClient, url: str) -> str:
    try:
        response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise FetchError(f"Cannot fetch {url}: {e}", cause=e).with_context(url=url, stage="fetch") from e
    return response.text


async def build_remote_section_page(
    url: str,
    target: Path,
    permalink: str,
    title: str,
    heading: str | None = None,
    note: str | None = None,
    client: httpx.AsyncClient | None = None,
    renderer: PageRenderer | None = None,
) -> Page:
    """Wrap markdown fetched from ``url`` (another repository's README) as a section page."""
    with log_step("pages.remote_section", module=Path(target).stem) as timer:
        if client is None:
            async with httpx.AsyncClient(timeout=30.0, follow_redirects=True) as own_client:
                content = await fetch_remote_text(own_client, url)
        else:
            content = await fetch_remote_text(client, url)
        timer.add_metric("bytes", len(content))

    return _section_page(content, target, permalink, title, heading, note, renderer)


# ── Continuous integration recipes ──────────────────────────────────────


async def fetch_ci_topics(client: httpx.AsyncClient, url: str) -> list[dict[str, Any]]:
    """Topics of the CI category, without the category's about post."""
    try:
        response = await client.get(url)
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        raise FetchError(f"Cannot fetch CI recipes: {e}", cause=e).with_context(url=url, stage="fetch") from e

    return [topic for topic in data.get("topics", []) if topic.get("slug") != CI_ABOUT_SLUG]


async def build_ci_page(
    config: DocAssemblyConfig,
    client: httpx.AsyncClient | None = None,
    renderer: PageRenderer | None = None,
) -> Page:
    renderer = renderer or PageRenderer()

    with log_step("pages.ci", module="continuous-integration") as timer:
        if client is None:
            async with httpx.AsyncClient(timeout=30.0) as own_client:
                topics = await fetch_ci_topics(own_client, config.ci_search_url)
        else:
            topics = await fetch_ci_topics(client, config.ci_search_url)
        timer.add_metric("topics", len(topics))

    front_matter = FrontMatter({"permalink": "/continuous-integration", "title": "Continuous Integration"})
    return Page(
        name="continuous-integration",
        path=config.resolve(config.docs_dir) / "continuous-integration.md",
        front_matter=front_matter,
        body=renderer.render(
            "continuous_integration.md.j2",
            topics=topics,
            topic_url=config.ci_topic_url,
            category_url=config.ci_category_url,
        ),
    )
