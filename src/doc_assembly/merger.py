"""
Member Inheritance Merger.

Lets a derived documented unit acquire the members of a base unit it does
not define itself, minus those an exclusion filter rules out.

Manifesto:
    Appium behaves like WebDriver for most commands. Rather than document
    each shared command twice, WebDriver's applicable members are folded
    into the Appium page on every build. The exclusion filter encodes the
    commands that only make sense in a browser.

Architecture:
    ```
    derived members ──────────────────────────────┐
                                                  ├──► derived + appended base
    base members ──► not excluded ──► not defined ┘
    ```

Examples:
    >>> derived = [Member("A"), Member("B")]
    >>> base = [Member("A"), Member("C"), Member("D")]
    >>> [m.name for m in merge_members(derived, base, ExclusionFilter.from_strings(["^D$"]))]
    ['A', 'B', 'C']

Guardrails:
    - The derived definition always wins on a name collision
    - Member bodies are never modified, only inclusion is decided

Tags:
    - merge
    - inheritance
    - core_infrastructure

Doc-Types:
    - ARCHITECTURE (section: "Member Inheritance", priority: 9)
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from doc_assembly.errors import ConfigError
from doc_assembly.logging import get_logger
from doc_assembly.models import Member

logger = get_logger(__name__)


@dataclass(frozen=True)
class ExclusionFilter:
    """Ordered name patterns; a member matching any of them is not inherited."""

    patterns: tuple[re.Pattern[str], ...] = ()

    @classmethod
    def from_strings(cls, patterns: Iterable[str]) -> ExclusionFilter:
        compiled = []
        for pattern in patterns:
            try:
                compiled.append(re.compile(pattern))
            except re.error as e:
                raise ConfigError(f"Invalid exclusion pattern {pattern!r}: {e}", cause=e) from e
        return cls(tuple(compiled))

    def matches(self, name: str) -> bool:
        return any(pattern.search(name) for pattern in self.patterns)

    def __len__(self) -> int:
        return len(self.patterns)


# Members that only make sense in a browser context.
WEB_ONLY_PATTERNS = [
    "Title",
    "Popup",
    "Cookie",
    "Url",
    "^press",
    "^refreshPage",
    "^resizeWindow",
    "Script$",
    "cursor",
    "Css",
    "Tab$",
    "^wait",
]

APPIUM_WEB_ONLY = ExclusionFilter.from_strings(WEB_ONLY_PATTERNS)


@dataclass(frozen=True)
class MergePair:
    """A derived/base pairing with its exclusion filter."""

    derived: str
    base: str
    exclusion: ExclusionFilter = field(default_factory=ExclusionFilter)
    category: str = "instance"


def merge_members(
    derived: Sequence[Member],
    base: Sequence[Member],
    exclusion: ExclusionFilter | None = None,
) -> list[Member]:
    """Derived members followed by the inheritable base members.

    A base member is appended, in base order, when its name matches no
    exclusion pattern and no member already merged has the same name.
    """
    exclusion = exclusion or ExclusionFilter()
    defined = {member.name for member in derived}

    merged = list(derived)
    for member in base:
        if exclusion.matches(member.name):
            continue
        if member.name in defined:
            continue
        merged.append(member)
        defined.add(member.name)
    return merged


def merge_units(
    derived: Member,
    base: Member,
    exclusion: ExclusionFilter | None = None,
    category: str = "instance",
) -> Member:
    """Return a copy of ``derived`` with ``category`` members merged from ``base``."""
    merged = merge_members(derived.members_of(category), base.members_of(category), exclusion)
    logger.info(
        "merger.merged",
        derived=derived.name,
        base=base.name,
        category=category,
        own=len(derived.members_of(category)),
        inherited=len(merged) - len(derived.members_of(category)),
    )
    return derived.with_members(category, merged)
