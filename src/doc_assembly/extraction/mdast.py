"""
Rendering helpers for documentation.js JSON output.

Descriptions arrive as mdast trees (the remark markdown AST) and types as
doctrine type expressions. Both are turned back into the strings the
markdown formatter writes.
"""

from __future__ import annotations

from typing import Any

LIST_BULLET = "*   "
LIST_INDENT = "    "


def to_markdown(node: dict[str, Any] | str | None) -> str:
    """Render an mdast node (or plain string) to markdown text."""
    if node is None:
        return ""
    if isinstance(node, str):
        return node
    return _render_block(node).strip("\n")


def _render_children_inline(node: dict[str, Any]) -> str:
    return "".join(_render_inline(child) for child in node.get("children", []))


def _render_inline(node: dict[str, Any]) -> str:
    kind = node.get("type")

    if kind == "text":
        return node.get("value", "")
    if kind == "inlineCode":
        return f"`{node.get('value', '')}`"
    if kind == "emphasis":
        return f"*{_render_children_inline(node)}*"
    if kind == "strong":
        return f"**{_render_children_inline(node)}**"
    if kind == "delete":
        return f"~~{_render_children_inline(node)}~~"
    if kind == "link":
        return f"[{_render_children_inline(node)}]({node.get('url', '')})"
    if kind == "image":
        return f"![{node.get('alt') or ''}]({node.get('url', '')})"
    if kind == "break":
        return "\n"
    if kind == "html":
        return node.get("value", "")
    if "children" in node:
        return _render_children_inline(node)
    return node.get("value", "")


def _render_blocks(children: list[dict[str, Any]]) -> str:
    return "\n\n".join(block for block in (_render_block(child) for child in children) if block)


def _render_list(node: dict[str, Any]) -> str:
    ordered = node.get("ordered", False)
    start = node.get("start") or 1
    items = []
    for index, item in enumerate(node.get("children", [])):
        bullet = f"{start + index}.  " if ordered else LIST_BULLET
        body = _render_blocks(item.get("children", []))
        lines = body.split("\n")
        rendered = bullet + lines[0]
        for line in lines[1:]:
            rendered += "\n" + (LIST_INDENT + line if line else "")
        items.append(rendered)
    separator = "\n\n" if node.get("spread") else "\n"
    return separator.join(items)


def _render_table(node: dict[str, Any]) -> str:
    rows = []
    for row in node.get("children", []):
        cells = [_render_children_inline(cell) for cell in row.get("children", [])]
        rows.append("| " + " | ".join(cells) + " |")
    if rows:
        width = len(node["children"][0].get("children", []))
        rows.insert(1, "| " + " | ".join(["---"] * width) + " |")
    return "\n".join(rows)


def _render_block(node: dict[str, Any]) -> str:
    kind = node.get("type")

    if kind == "root":
        return _render_blocks(node.get("children", []))
    if kind == "paragraph":
        return _render_children_inline(node)
    if kind == "heading":
        return "#" * node.get("depth", 1) + " " + _render_children_inline(node)
    if kind == "code":
        lang = node.get("lang") or ""
        return f"```{lang}\n{node.get('value', '')}\n```"
    if kind == "list":
        return _render_list(node)
    if kind == "blockquote":
        inner = _render_blocks(node.get("children", []))
        return "\n".join(f"> {line}" if line else ">" for line in inner.split("\n"))
    if kind == "thematicBreak":
        return "***"
    if kind == "table":
        return _render_table(node)
    if kind == "definition":
        return f"[{node.get('identifier', '')}]: {node.get('url', '')}"
    return _render_inline(node)


def format_type(node: dict[str, Any] | None) -> str | None:
    """Render a doctrine type expression, e.g. ``(string | object)?``."""
    if not node:
        return None

    kind = node.get("type")

    if kind == "NameExpression":
        return node.get("name", "")
    if kind == "UnionType":
        return "(" + " | ".join(format_type(e) or "" for e in node.get("elements", [])) + ")"
    if kind == "OptionalType":
        return f"{format_type(node.get('expression'))}?"
    if kind == "NullableType":
        return f"?{format_type(node.get('expression'))}"
    if kind == "NonNullableType":
        return f"!{format_type(node.get('expression'))}"
    if kind == "RestType":
        return f"...{format_type(node.get('expression'))}"
    if kind == "TypeApplication":
        applications = ", ".join(format_type(a) or "" for a in node.get("applications", []))
        return f"{format_type(node.get('expression'))}<{applications}>"
    if kind == "ArrayType":
        return "[" + ", ".join(format_type(e) or "" for e in node.get("elements", [])) + "]"
    if kind == "RecordType":
        return "{" + ", ".join(format_type(f) or "" for f in node.get("fields", [])) + "}"
    if kind == "FieldType":
        value = format_type(node.get("value"))
        return f"{node.get('key')}: {value}" if value else str(node.get("key"))
    if kind == "FunctionType":
        params = ", ".join(format_type(p) or "" for p in node.get("params", []))
        result = format_type(node.get("result"))
        return f"function ({params})" + (f": {result}" if result else "")
    if kind == "AllLiteral":
        return "any"
    if kind == "NullLiteral":
        return "null"
    if kind == "UndefinedLiteral":
        return "undefined"
    if kind == "VoidLiteral":
        return "void"
    if kind == "StringLiteralType":
        return f'"{node.get("value", "")}"'
    if kind in ("NumericLiteralType", "BooleanLiteralType"):
        return str(node.get("value")).lower() if kind == "BooleanLiteralType" else str(node.get("value"))
    return node.get("name") or kind
