"""Clickable coverage validation for generated UI screens."""

from uiflowcheck.navigation.extractor import extract_clickable_elements
from uiflowcheck.navigation.report import format_console, generate_fix_suggestions, generate_markdown
from uiflowcheck.navigation.targets import predict_target_screen, resolve_target
from uiflowcheck.navigation.validator import NavigationValidator

__all__ = [
    "NavigationValidator",
    "extract_clickable_elements",
    "format_console",
    "generate_fix_suggestions",
    "generate_markdown",
    "predict_target_screen",
    "resolve_target",
]
