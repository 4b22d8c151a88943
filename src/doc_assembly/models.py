"""
Data model for the documentation pipeline.

Modules and Fragments are read-only inputs, Members come out of the
extractor, and Pages are the write-once outputs.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path


class FragmentKind(str, Enum):
    """Fragment namespaces and their placeholder syntax."""

    INLINE_PARTIAL = "inline_partial"  # {{> name }}
    SHARED_BLOCK = "shared_block"  # {{ name }}


@dataclass(frozen=True)
class Module:
    """A source unit whose doc-comments are extracted.

    The identifier is the base filename without extension.
    """

    name: str
    path: Path

    @classmethod
    def from_path(cls, path: Path) -> Module:
        path = Path(path)
        return cls(name=path.stem, path=path)

    @property
    def filename(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class Fragment:
    """A named, externally authored text block spliced into modules."""

    name: str
    kind: FragmentKind
    body: str

    @property
    def placeholder(self) -> str:
        if self.kind is FragmentKind.INLINE_PARTIAL:
            return f"{{{{> {self.name} }}}}"
        return f"{{{{ {self.name} }}}}"


@dataclass
class Param:
    """A parameter or property of a documented member."""

    name: str
    type: str | None = None
    description: str = ""
    default: str | None = None
    optional: bool = False


@dataclass
class Returns:
    type: str | None = None
    description: str = ""


@dataclass
class Member:
    """
    One documented unit returned by the extractor.

    Top-level entries (classes, typedefs, functions) hold their own members
    partitioned by category (``instance``, ``static``, ...). Ordering inside
    each category is the extractor's (alphabetical).
    """

    name: str
    kind: str = "function"
    scope: str | None = None
    description: str = ""
    params: list[Param] = field(default_factory=list)
    properties: list[Param] = field(default_factory=list)
    returns: list[Returns] = field(default_factory=list)
    examples: list[str] = field(default_factory=list)
    augments: list[str] = field(default_factory=list)
    type: str | None = None
    members: dict[str, list[Member]] = field(default_factory=dict)

    def members_of(self, category: str) -> list[Member]:
        return self.members.get(category, [])

    def with_members(self, category: str, members: list[Member]) -> Member:
        """Return a copy with one member category replaced."""
        updated = dict(self.members)
        updated[category] = list(members)
        return replace(self, members=updated)


@dataclass
class ExtractedModule:
    """Extractor output for one module."""

    module: Module
    entries: list[Member] = field(default_factory=list)

    @property
    def primary(self) -> Member | None:
        """The entry named like the module, else the first class."""
        for entry in self.entries:
            if entry.name == self.module.name:
                return entry
        for entry in self.entries:
            if entry.kind == "class":
                return entry
        return self.entries[0] if self.entries else None

    def replace_entry(self, old: Member, new: Member) -> ExtractedModule:
        entries = [new if entry is old else entry for entry in self.entries]
        return ExtractedModule(module=self.module, entries=entries)


@dataclass
class FrontMatter:
    """
    Page header consumed by the site generator.

    Fields render in insertion order between ``---`` lines, followed by a
    blank line. A value of ``""`` renders as ``key: `` (e.g. ``sidebarDepth``).
    """

    fields: dict[str, str] = field(default_factory=dict)

    @classmethod
    def for_helper(cls, name: str, permalink_prefix: str = "/helpers") -> FrontMatter:
        return cls(
            {
                "permalink": f"{permalink_prefix}/{name}",
                "editLink": "false",
                "sidebar": "auto",
                "title": name,
            }
        )

    def render(self) -> str:
        lines = ["---"]
        lines.extend(f"{key}: {value}" for key, value in self.fields.items())
        lines.append("---")
        return "\n".join(lines) + "\n\n"


@dataclass
class Page:
    """Final emitted artifact; identity is its target path."""

    name: str
    path: Path
    front_matter: FrontMatter
    body: str

    @property
    def text(self) -> str:
        return self.front_matter.render() + self.body
