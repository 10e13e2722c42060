"""Markdown generators for extracted documentation."""

from __future__ import annotations

from pathlib import Path

from .models import (
    DescriptionItem,
    DescriptionKind,
    Document,
    ExtractionResult,
    FormulaKind,
    Parameter,
)

SEPARATOR = "---"


def _fence(body: str, info: str = "") -> list[str]:
    return [f"```{info}", body, "```"]


def _format_parameter(p: Parameter) -> str:
    text = f"{p.name} ({p.type_name})"
    return f"{text}: {p.description}" if p.description else text


def _format_return(p: Parameter) -> str:
    return f"{p.type_name}: {p.description}" if p.description else p.type_name


def render_description_item(item: DescriptionItem) -> list[str]:
    """Render one @description entry as Markdown lines."""
    if item.kind is DescriptionKind.CODE:
        return _fence(item.body, item.language.extension)
    if item.kind is DescriptionKind.FORMULA:
        if item.formula is FormulaKind.BLOCK:
            return ["$$", item.body, "$$"]
        return [f"${item.body}$"]
    if item.kind is DescriptionKind.BULLET:
        body = item.body.strip()
        prefix = "" if body.startswith("-") else "- "
        return [f"{'  ' * item.indent}{prefix}{body}"]
    if item.kind is DescriptionKind.HTML_LINK:
        return [f"[{item.body}]({item.body})"]
    return [item.body]


def render_document(doc: Document) -> str:
    """Render one Document as a Markdown fragment.

    Sections appear in a fixed order (signature, includes, brief, parameters,
    returns, description) and empty sections are left out entirely.
    """
    lines: list[str] = []

    if doc.signature:
        lines.extend(_fence(doc.signature, "lua"))
        lines.append("")

    if doc.includes:
        lines.append(f"**Includes:** {', '.join(doc.includes)}")
        lines.append("")

    if doc.brief:
        lines.append(f"**Brief:** {doc.brief}")
        lines.append("")

    if doc.parameters:
        lines.append("**Parameters:**")
        for p in doc.parameters:
            lines.append(f"- {_format_parameter(p)}")
        lines.append("")

    if doc.return_value is not None:
        lines.append(f"**Returns:** {_format_return(doc.return_value)}")
        lines.append("")

    if doc.descriptions:
        lines.append("**Description:**")
        lines.append("")
        for item in doc.descriptions:
            lines.extend(render_description_item(item))
        lines.append("")

    if not lines:
        return ""
    return "\n".join(lines) + "\n"


def render_documents(docs: list[Document]) -> str:
    """Concatenate rendered Documents, each followed by a horizontal rule."""
    parts = []
    for doc in docs:
        parts.append(render_document(doc))
        parts.append(f"{SEPARATOR}\n\n")
    return "".join(parts)


def generate_page(result: ExtractionResult) -> str:
    """Generate the Markdown page for one source file ("" if undocumented)."""
    if not result.documents:
        return ""
    title = Path(result.source_file).name or "Reference"
    lines = [
        "<!-- AUTO-GENERATED. DO NOT EDIT. Run `todoc` to regenerate. -->",
        "",
        f"# {title}",
        "",
        "",
    ]
    return "\n".join(lines) + render_documents(result.documents)


def generate_index(pages: dict[str, ExtractionResult]) -> str:
    """Generate README.md listing every documented function per page.

    Args:
        pages: Link target (relative to the index) -> extraction result

    Returns:
        Markdown text of the index
    """
    lines = [
        "<!-- AUTO-GENERATED. DO NOT EDIT. Run `todoc` to regenerate. -->",
        "",
        "# API Reference",
        "",
    ]

    documented = {link: r for link, r in pages.items() if r.documents}
    if not documented:
        lines.append("*No documented functions yet. Add @brief tags to source files.*")
        lines.append("")
        return "\n".join(lines)

    for link in sorted(documented):
        result = documented[link]
        lines.extend(
            [
                f"## [{result.source_file}]({link})",
                "",
                "| Function | Description |",
                "|----------|-------------|",
            ]
        )
        for doc in result.documents:
            name = doc.name or doc.signature
            desc = (doc.brief or "").replace("|", "\\|")
            lines.append(f"| `{name}` | {desc} |")
        lines.append("")

    return "\n".join(lines)


def output_path_for(
    source: Path, output_dir: Path | None = None, root: Path | None = None
) -> Path:
    """Destination of the Markdown page for `source`.

    Without an output directory the page sits beside the source with a .md
    extension. With one, the source's path relative to `root` is mirrored
    inside it.
    """
    if output_dir is None:
        return source.with_suffix(".md")
    relative = Path(source.name)
    if root is not None:
        try:
            relative = source.resolve().relative_to(root.resolve())
        except ValueError:
            pass
    return output_dir / relative.with_suffix(".md")
