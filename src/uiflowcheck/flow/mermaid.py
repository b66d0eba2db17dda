"""Mermaid flowchart export of the screen navigation graph."""

from __future__ import annotations

import logging
import os
import posixpath
import re
from dataclasses import dataclass, field
from pathlib import Path

import aiofiles

from uiflowcheck.config import ModuleSpec, UIFlowConfig

logger = logging.getLogger(__name__)

SKIP_DIRS = {"shared", "docs", "screenshots", "assets", "node_modules"}
SKIP_FILES = {"index.html", "nav.html", "device-preview.html"}

SCREEN_NAME_RE = re.compile(r"^(SCR-)?([A-Z]+)-(\d{3})(?:-(.+))?$")
TARGET_NAME_RE = re.compile(r"^(SCR-)?([A-Z]+)-(\d{3})")
TITLE_RE = re.compile(r"<title>([^<]+)</title>", re.IGNORECASE)
ONCLICK_NAV_RE = re.compile(r"""onclick=["']location\.href=["']([^"']+)["']["']""")
ANCHOR_NAV_RE = re.compile(r"""<a[^>]+href=["']([^"'#]+\.html)["'][^>]*>""")

LABEL_LIMIT = 20


@dataclass
class FlowEdge:
    source: str
    target: str
    kind: str  # navigate or link
    inferred: bool = False


@dataclass
class FlowScreen:
    id: str
    module: str
    name: str
    path: str
    edges: list[FlowEdge] = field(default_factory=list)


def normalize_target(href: str, source_path: str) -> str | None:
    """Map an href found in ``source_path`` to a screen id, if it names one."""
    if not href or href == "#" or href.startswith(("http", "javascript")):
        return None

    resolved = posixpath.normpath(posixpath.join(posixpath.dirname(source_path), href))
    stem = posixpath.basename(resolved)
    if stem.endswith(".html"):
        stem = stem[: -len(".html")]

    match = TARGET_NAME_RE.match(stem)
    if match:
        return f"SCR-{match.group(2)}-{match.group(3)}"
    return None


def parse_screen(content: str, path: str) -> FlowScreen:
    """Screen id, module, title and outgoing edges of one HTML file."""
    stem = posixpath.basename(path)[: -len(".html")]
    screen_id, module, slug = stem, "", ""

    match = SCREEN_NAME_RE.match(stem)
    if match:
        module = match.group(2)
        slug = match.group(4) or ""
        screen_id = f"SCR-{module}-{match.group(3)}"

    title = TITLE_RE.search(content)
    screen = FlowScreen(
        id=screen_id,
        module=module,
        name=title.group(1).strip() if title else (slug or screen_id),
        path=path,
    )

    for nav in ONCLICK_NAV_RE.finditer(content):
        target = normalize_target(nav.group(1), path)
        if target:
            marker = content.find("data-inferred")
            inferred = marker != -1 and marker < nav.start() + 100
            screen.edges.append(FlowEdge(screen_id, target, "navigate", inferred))

    for link in ANCHOR_NAV_RE.finditer(content):
        target = normalize_target(link.group(1), path)
        if target and target != screen_id:
            screen.edges.append(FlowEdge(screen_id, target, "link"))

    return screen


async def scan_screens(base: str | Path) -> list[FlowScreen]:
    """Parse every screen below ``base``."""
    base = Path(base)
    screens: list[FlowScreen] = []

    for root, dirnames, filenames in os.walk(base):
        dirnames[:] = sorted(d for d in dirnames if d not in SKIP_DIRS)
        for filename in sorted(filenames):
            if not filename.endswith(".html") or filename in SKIP_FILES:
                continue
            full = Path(root) / filename
            async with aiofiles.open(full, "r", encoding="utf-8", errors="replace") as f:
                content = await f.read()
            screens.append(parse_screen(content, full.relative_to(base).as_posix()))

    logger.debug("Parsed %d screens under %s", len(screens), base)
    return screens


def _node(screen_id: str) -> str:
    return screen_id.replace("-", "_")


def _unique_edges(screens: list[FlowScreen]) -> list[FlowEdge]:
    unique: dict[str, FlowEdge] = {}
    for screen in screens:
        for edge in screen.edges:
            unique.setdefault(f"{edge.source}->{edge.target}", edge)
    return list(unique.values())


def generate_mermaid(screens: list[FlowScreen], modules: dict[str, ModuleSpec]) -> str:
    """Fenced ``flowchart TB`` block with one subgraph per module."""
    lines = ["```mermaid", "flowchart TB", ""]

    groups: dict[str, list[FlowScreen]] = {}
    for screen in screens:
        if screen.module:
            groups.setdefault(screen.module, []).append(screen)

    for module_id, members in groups.items():
        module = modules.get(module_id)
        icon = module.icon if module else "📄"
        name = module.name if module and module.name else module_id
        lines.append(f'    subgraph {module_id}["{icon} {name}"]')
        lines.append("        direction TB")
        for screen in sorted(members, key=lambda s: s.id):
            label = screen.name if len(screen.name) <= LABEL_LIMIT else screen.name[:18] + "..."
            lines.append(f'        {_node(screen.id)}["{screen.id}<br/>{label}"]')
        lines.append("    end")
        lines.append("")

    lines.append("    %% navigation")
    for edge in _unique_edges(screens):
        arrow = "-.->" if edge.inferred else "-->"
        comment = " %% inferred" if edge.inferred else ""
        lines.append(f"    {_node(edge.source)} {arrow} {_node(edge.target)}{comment}")

    lines.append("```")
    return "\n".join(lines)


def generate_summary(screens: list[FlowScreen], modules: dict[str, ModuleSpec]) -> str:
    """Markdown header with counts, module distribution and inferred edges."""
    edges = [edge for screen in screens for edge in screen.edges]
    lines = [
        "# UI Flow Diagram",
        "",
        "> Generated by `uiflowcheck mermaid`; embed the flowchart below in the SDD.",
        "",
        "## Statistics",
        "",
        "| Item | Count |",
        "|------|-------|",
        f"| Screens | {len(screens)} |",
        f"| Navigation links | {len(edges)} |",
    ]

    counts: dict[str, int] = {}
    for screen in screens:
        if screen.module:
            counts[screen.module] = counts.get(screen.module, 0) + 1

    lines += ["", "## Modules", "", "| Module | Screens |", "|--------|---------|"]
    for module_id, count in sorted(counts.items()):
        module = modules.get(module_id)
        name = module.name if module and module.name else module_id
        lines.append(f"| {name} ({module_id}) | {count} |")

    inferred = [edge for edge in edges if edge.inferred]
    if inferred:
        lines += ["", "## Inferred Navigation (needs review)", "", "| Source | Target |", "|--------|--------|"]
        for edge in inferred:
            lines.append(f"| {edge.source} | {edge.target} |")

    lines += ["", "## Flowchart", "", ""]
    return "\n".join(lines)


async def export_flow(config: UIFlowConfig, output: str | Path | None = None) -> tuple[Path, Path]:
    """Write the Markdown flow document and a bare ``.mermaid`` file.

    Returns the two written paths.
    """
    base = Path(config.project_dir)
    if not base.is_dir():
        raise NotADirectoryError(f"Not a directory: {base}")

    output_path = Path(output) if output else base / "docs" / "flow-diagram.md"
    modules = {m.id: m for m in config.modules}

    screens = await scan_screens(base)
    mermaid = generate_mermaid(screens, modules)
    document = generate_summary(screens, modules) + mermaid + "\n"

    output_path.parent.mkdir(parents=True, exist_ok=True)
    async with aiofiles.open(output_path, "w", encoding="utf-8") as f:
        await f.write(document)

    bare_path = output_path.with_suffix(".mermaid")
    bare = "\n".join(mermaid.splitlines()[1:-1]) + "\n"
    async with aiofiles.open(bare_path, "w", encoding="utf-8") as f:
        await f.write(bare)

    logger.info("Wrote flow diagram with %d screens to %s", len(screens), output_path)
    return output_path, bare_path
