"""
Markdown formatter for extracted members.

Produces the same layout documentation.js writes in markdown mode, so a
page built from merged members reads like any other helper page and goes
through the same normalizer rules.
"""

from __future__ import annotations

from collections.abc import Sequence

from doc_assembly.models import Member, Param, Returns

GENERATED_BANNER = "<!-- Generated by documentation.js. Update this documentation by updating the source code. -->"

# Categories rendered under an entry, in documentation.js order.
RENDERED_CATEGORIES = ("static", "instance", "events", "inner")


def _format_param(param: Param) -> str:
    line = f"*   `{param.name}`"
    if param.type:
        line += f" **{param.type}**"
    if param.description:
        line += f" {param.description}"
    if param.default is not None:
        line += f" (optional, default `{param.default}`)"
    return line


def _format_returns(returns: Returns) -> str:
    line = "Returns"
    if returns.type:
        line += f" **{returns.type}**"
    if returns.description:
        line += f" {returns.description}"
    return line


class MarkdownFormatter:
    """Render member trees to markdown.

    Args:
        banner: Include the generated-by comment at the top
        heading_depth: Heading level for top-level entries
    """

    def __init__(self, banner: bool = True, heading_depth: int = 2):
        self.banner = banner
        self.heading_depth = heading_depth

    def format(self, entries: Sequence[Member]) -> str:
        blocks: list[str] = []
        if self.banner:
            blocks.append(GENERATED_BANNER)
        for entry in entries:
            blocks.extend(self._member_blocks(entry, self.heading_depth))
        return "\n\n".join(blocks) + "\n"

    def _member_blocks(self, member: Member, depth: int) -> list[str]:
        blocks = [f"{'#' * depth} {member.name}"]
        section = "#" * min(depth + 1, 6)

        if member.augments:
            blocks.append(f"**Extends {', '.join(member.augments)}**")
        if member.description:
            blocks.append(member.description)
        if member.type:
            blocks.append(f"Type: **{member.type}**")

        if member.params:
            blocks.append(f"{section} Parameters")
            blocks.append("\n".join(_format_param(p) for p in member.params))

        if member.properties:
            blocks.append(f"{section} Properties")
            blocks.append("\n".join(_format_param(p) for p in member.properties))

        if member.examples:
            blocks.append(f"{section} Examples")
            blocks.extend(f"```javascript\n{example}\n```" for example in member.examples)

        blocks.extend(_format_returns(r) for r in member.returns)

        for category in RENDERED_CATEGORIES:
            for child in member.members_of(category):
                blocks.extend(self._member_blocks(child, min(depth + 1, 6)))

        return blocks
