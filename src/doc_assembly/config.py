"""
Configuration for documentation assembly.

Describes where modules, fragments and pages live, which modules are left
undocumented, how type aliases expand, and which units inherit members
from which.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from doc_assembly.errors import ConfigError
from doc_assembly.merger import WEB_ONLY_PATTERNS, ExclusionFilter, MergePair
from doc_assembly.substitution import DEFAULT_TYPE_ALIASES


@dataclass
class MergePairConfig:
    """Derived unit that inherits members from a base unit.

    Attributes:
        derived: Module identifier of the inheriting unit
        base: Module identifier of the unit members come from
        exclude: Regex patterns for base members that must not be inherited
        category: Member category to merge
    """

    derived: str
    base: str
    exclude: list[str] = field(default_factory=list)
    category: str = "instance"

    def to_merge_pair(self) -> MergePair:
        return MergePair(
            derived=self.derived,
            base=self.base,
            exclusion=ExclusionFilter.from_strings(self.exclude),
            category=self.category,
        )


@dataclass
class ExternalHelperConfig:
    """Helper documented from outside the source directory."""

    name: str
    path: Path

    def __post_init__(self):
        self.path = Path(self.path)


@dataclass
class RemoteSectionConfig:
    """Section page whose markdown is fetched from a URL.

    Attributes:
        name: Page file stem and permalink (``/<name>``)
        url: Raw markdown to fetch
        title: Page title
    """

    name: str
    url: str
    title: str


def _default_merge_pairs() -> list[MergePairConfig]:
    return [MergePairConfig(derived="Appium", base="WebDriver", exclude=list(WEB_ONLY_PATTERNS))]


def _default_external_helpers() -> list[ExternalHelperConfig]:
    return [
        ExternalHelperConfig("Detox", Path("node_modules/@codeceptjs/detox-helper/Detox.js")),
        ExternalHelperConfig("MockRequest", Path("node_modules/@codeceptjs/mock-request/index.js")),
    ]


def _default_remote_sections() -> list[RemoteSectionConfig]:
    return [
        RemoteSectionConfig(
            "vue",
            "https://raw.githubusercontent.com/codecept-js/vue-cli-plugin-codeceptjs-puppeteer/master/README.md",
            "Testing Vue Apps",
        ),
    ]


_PATH_FIELDS = (
    "project_root",
    "source_dir",
    "plugin_dir",
    "partials_dir",
    "shared_dir",
    "build_dir",
    "output_dir",
    "docs_dir",
    "changelog_file",
)


@dataclass
class DocAssemblyConfig:
    """Configuration for a documentation build.

    Relative paths are resolved against ``project_root``.

    Attributes:
        project_root: Root of the documented project
        source_dir: Modules documented one page each
        plugin_dir: Modules documented together on the plugins page
        partials_dir: Inline-partial fragments (``{{> name }}``)
        shared_dir: Shared-block fragments (``{{ name }}``)
        build_dir: Scratch directory for intermediate copies
        output_dir: Where helper pages are written
        docs_dir: Where top-level pages (plugins, changelog) are written
        source_extension: Extension of documented modules
        fragment_extension: Extension of fragment files
        ignore: Module identifiers that are never documented
        type_aliases: Ordered ``[regex, replacement]`` rewrites
        merge_pairs: Derived/base member inheritance
        external_helpers: Helpers documented from other packages
        remote_sections: Section pages fetched from other repositories
        extractor_command: Executable prefix for documentation.js
        extractor_timeout: Seconds per extractor call (None = no limit)
        max_concurrency: Module pipelines running at once
        permalink_prefix: Permalink prefix for helper pages
        changelog_file: Source of the releases page
        repository_url: Repository used for issue links in the changelog
        ci_search_url: Discourse search endpoint for CI recipes
        ci_topic_url: Base URL for CI recipe topics
        ci_category_url: Discourse category linked from the CI page
    """

    project_root: Path = field(default_factory=lambda: Path("."))
    source_dir: Path = field(default_factory=lambda: Path("lib/helper"))
    plugin_dir: Path = field(default_factory=lambda: Path("lib/plugin"))
    partials_dir: Path = field(default_factory=lambda: Path("docs/webapi"))
    shared_dir: Path = field(default_factory=lambda: Path("docs/shared"))
    build_dir: Path = field(default_factory=lambda: Path("docs/build"))
    output_dir: Path = field(default_factory=lambda: Path("docs/helpers"))
    docs_dir: Path = field(default_factory=lambda: Path("docs"))

    source_extension: str = ".js"
    fragment_extension: str = ".mustache"

    ignore: list[str] = field(default_factory=lambda: ["Polly", "MockRequest"])
    type_aliases: list[list[str]] = field(default_factory=lambda: [list(a) for a in DEFAULT_TYPE_ALIASES])
    merge_pairs: list[MergePairConfig] = field(default_factory=_default_merge_pairs)
    external_helpers: list[ExternalHelperConfig] = field(default_factory=_default_external_helpers)
    remote_sections: list[RemoteSectionConfig] = field(default_factory=_default_remote_sections)

    extractor_command: list[str] = field(default_factory=lambda: ["npx", "documentation"])
    extractor_timeout: float | None = None
    max_concurrency: int = 4

    permalink_prefix: str = "/helpers"
    changelog_file: Path = field(default_factory=lambda: Path("CHANGELOG.md"))
    repository_url: str = "https://github.com/codeceptjs/CodeceptJS"
    ci_search_url: str = "https://codecept.discourse.group/search.json?q=category%3A9"
    ci_topic_url: str = "https://codecept.discourse.group/t"
    ci_category_url: str = "https://codecept.discourse.group/c/CodeceptJS-issues-in-general/ci/9"

    def __post_init__(self):
        """Convert strings to Paths and nested dicts to config objects."""
        for name in _PATH_FIELDS:
            value = getattr(self, name)
            if isinstance(value, str):
                setattr(self, name, Path(value))

        self.merge_pairs = [
            pair if isinstance(pair, MergePairConfig) else MergePairConfig(**pair) for pair in self.merge_pairs
        ]
        self.external_helpers = [
            helper if isinstance(helper, ExternalHelperConfig) else ExternalHelperConfig(**helper)
            for helper in self.external_helpers
        ]
        self.remote_sections = [
            section if isinstance(section, RemoteSectionConfig) else RemoteSectionConfig(**section)
            for section in self.remote_sections
        ]

        if self.max_concurrency < 1:
            raise ConfigError(f"max_concurrency must be at least 1, got {self.max_concurrency}")
        for alias in self.type_aliases:
            if len(alias) != 2:
                raise ConfigError(f"Type alias must be [pattern, replacement], got {alias!r}")

    def resolve(self, path: Path) -> Path:
        """Resolve ``path`` against ``project_root``."""
        path = Path(path)
        return path if path.is_absolute() else self.project_root / path

    @property
    def merge_pair_map(self) -> dict[str, MergePair]:
        """Merge pairs keyed by derived module."""
        return {pair.derived: pair.to_merge_pair() for pair in self.merge_pairs}

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "DocAssemblyConfig":
        """Load configuration from a YAML file.

        A relative ``project_root`` is taken relative to the file's directory.
        """
        yaml_path = Path(yaml_path)
        try:
            with open(yaml_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot load configuration {yaml_path}: {e}", cause=e) from e

        if not isinstance(data, dict):
            raise ConfigError(f"Configuration {yaml_path} must be a mapping")

        root = Path(data.get("project_root", "."))
        if not root.is_absolute():
            data["project_root"] = yaml_path.parent / root
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DocAssemblyConfig":
        """Create config from dictionary."""
        try:
            return cls(**data)
        except TypeError as e:
            raise ConfigError(f"Invalid configuration: {e}", cause=e) from e

    def to_dict(self) -> dict[str, Any]:
        """Convert config to a YAML-friendly dictionary."""
        data: dict[str, Any] = {name: str(getattr(self, name)) for name in _PATH_FIELDS}
        data.update(
            {
                "source_extension": self.source_extension,
                "fragment_extension": self.fragment_extension,
                "ignore": list(self.ignore),
                "type_aliases": [list(alias) for alias in self.type_aliases],
                "merge_pairs": [
                    {
                        "derived": pair.derived,
                        "base": pair.base,
                        "exclude": list(pair.exclude),
                        "category": pair.category,
                    }
                    for pair in self.merge_pairs
                ],
                "external_helpers": [
                    {"name": helper.name, "path": str(helper.path)} for helper in self.external_helpers
                ],
                "remote_sections": [
                    {"name": section.name, "url": section.url, "title": section.title}
                    for section in self.remote_sections
                ],
                "extractor_command": list(self.extractor_command),
                "extractor_timeout": self.extractor_timeout,
                "max_concurrency": self.max_concurrency,
                "permalink_prefix": self.permalink_prefix,
                "repository_url": self.repository_url,
                "ci_search_url": self.ci_search_url,
                "ci_topic_url": self.ci_topic_url,
                "ci_category_url": self.ci_category_url,
            }
        )
        return data
