"""Navigation graph export."""

from uiflowcheck.flow.mermaid import (
    FlowEdge,
    FlowScreen,
    export_flow,
    generate_mermaid,
    generate_summary,
    normalize_target,
    parse_screen,
    scan_screens,
)

__all__ = [
    "FlowEdge",
    "FlowScreen",
    "export_flow",
    "generate_mermaid",
    "generate_summary",
    "normalize_target",
    "parse_screen",
    "scan_screens",
]
