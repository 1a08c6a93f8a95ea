"""Navigation graph visualization.

Combines the route graph with an analysis result and renders it as DOT
(Graphviz) or Mermaid markup. Entry points, orphans, dead-ends and allowed
terminals are styled distinctly. Pure transform, no analysis happens here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from navgraph.graph.models import LinkKind, RouteKind
from navgraph.observability.logging import get_logger

if TYPE_CHECKING:
    from navgraph.graph.analysis import AnalysisResult
    from navgraph.graph.graph import Graph

log = get_logger(__name__)

_ENTRY_COLOR = "#90EE90"  # light green
_ORPHAN_COLOR = "#FFB6C1"  # light pink
_DEAD_END_COLOR = "#FFD700"  # gold
_TERMINAL_COLOR = "#D3D3D3"  # light grey
_DEFAULT_COLOR = "#ADD8E6"  # light blue
_MAX_LABEL = 40


@dataclass
class VizNode:
    """A route node in the visualization."""

    id: str
    label: str
    is_entry: bool = False
    is_orphan: bool = False
    is_dead_end: bool = False
    is_terminal: bool = False
    is_dynamic: bool = False


@dataclass
class VizEdge:
    """A link edge in the visualization."""

    from_id: str
    to_id: str
    is_programmatic: bool = False


@dataclass
class NavigationView:
    """Complete visualization data for one analyzed graph."""

    nodes: list[VizNode]
    edges: list[VizEdge]


def build_navigation_view(graph: Graph, result: AnalysisResult) -> NavigationView:
    """Extract visualization data from a graph and its analysis result.

    Nodes and edges are sorted so the rendered output is stable.
    """
    nodes = [
        VizNode(
            id=path,
            label=_truncate(path, _MAX_LABEL),
            is_entry=path in result.entry_points,
            is_orphan=path in result.orphans,
            is_dead_end=path in result.dead_ends,
            is_terminal=path in result.terminals,
            is_dynamic=node.kind is RouteKind.DYNAMIC,
        )
        for path, node in sorted(graph.nodes.items())
    ]

    # Collapse same-endpoint links of different kinds; navigational wins.
    programmatic_only: dict[tuple[str, str], bool] = {}
    for edge in graph.edges:
        key = (edge.from_path, edge.to_path)
        is_prog = edge.kind is LinkKind.PROGRAMMATIC
        programmatic_only[key] = programmatic_only.get(key, True) and is_prog

    edges = [
        VizEdge(from_id=src, to_id=dst, is_programmatic=prog)
        for (src, dst), prog in sorted(programmatic_only.items())
    ]
    log.debug("navigation_view_built", nodes=len(nodes), edges=len(edges))
    return NavigationView(nodes=nodes, edges=edges)


def render_dot(view: NavigationView) -> str:
    """Render a NavigationView as DOT (Graphviz) markup."""
    lines = [
        "digraph navigation {",
        "  rankdir=LR;",
        '  node [fontname="Helvetica" fontsize=10 style="filled,solid"];',
        '  edge [fontname="Helvetica" fontsize=8];',
        "",
    ]

    for node in view.nodes:
        attrs = _dot_node_attrs(node)
        attr_str = " ".join(f"{k}={v}" for k, v in attrs.items())
        lines.append(f'  "{_dot_escape(node.id)}" [{attr_str}];')

    lines.append("")

    for edge in view.edges:
        suffix = ' [style="dashed"]' if edge.is_programmatic else ""
        lines.append(f'  "{_dot_escape(edge.from_id)}" -> "{_dot_escape(edge.to_id)}"{suffix};')

    lines.append("}")
    return "\n".join(lines)


def render_mermaid(view: NavigationView) -> str:
    """Render a NavigationView as Mermaid flowchart markup."""
    ids = {node.id: f"n{i}" for i, node in enumerate(view.nodes)}
    lines = ["graph LR"]

    for node in view.nodes:
        safe_id = ids[node.id]
        label = _mermaid_escape(node.label)
        cls = _mermaid_class(node)
        shape = f'(["{label}"])' if node.is_dynamic else f'["{label}"]'
        lines.append(f"  {safe_id}{shape}{f':::{cls}' if cls else ''}")

    lines.append("")

    for edge in view.edges:
        arrow = "-.->" if edge.is_programmatic else "-->"
        lines.append(f"  {ids[edge.from_id]} {arrow} {ids[edge.to_id]}")

    lines.append("")
    lines.append(f"  classDef entry fill:{_ENTRY_COLOR},stroke:#333")
    lines.append(f"  classDef orphan fill:{_ORPHAN_COLOR},stroke:#333,stroke-dasharray: 4 2")
    lines.append(f"  classDef deadEnd fill:{_DEAD_END_COLOR},stroke:#333")
    lines.append(f"  classDef terminal fill:{_TERMINAL_COLOR},stroke:#333")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _truncate(text: str, max_len: int) -> str:
    """Truncate text with ellipsis if too long."""
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def _mermaid_class(node: VizNode) -> str | None:
    # An entry point can also be a dead-end; the finding takes precedence.
    if node.is_orphan:
        return "orphan"
    if node.is_dead_end:
        return "deadEnd"
    if node.is_entry:
        return "entry"
    if node.is_terminal:
        return "terminal"
    return None


def _dot_node_attrs(node: VizNode) -> dict[str, str]:
    """Build DOT attribute dict for a node."""
    attrs: dict[str, str] = {"shape": "ellipse" if node.is_dynamic else "box"}

    if node.is_orphan:
        attrs["fillcolor"] = f'"{_ORPHAN_COLOR}"'
        attrs["style"] = '"filled,dashed"'
    elif node.is_dead_end:
        attrs["fillcolor"] = f'"{_DEAD_END_COLOR}"'
    elif node.is_entry:
        attrs["fillcolor"] = f'"{_ENTRY_COLOR}"'
        attrs["penwidth"] = '"2"'
    elif node.is_terminal:
        attrs["fillcolor"] = f'"{_TERMINAL_COLOR}"'
    else:
        attrs["fillcolor"] = f'"{_DEFAULT_COLOR}"'

    attrs["label"] = f'"{_dot_escape(node.label)}"'
    return attrs


def _dot_escape(text: str) -> str:
    """Escape special characters for DOT labels."""
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def _mermaid_escape(text: str) -> str:
    """Escape special characters for Mermaid labels."""
    return text.replace('"', "&quot;").replace("\n", " ")
