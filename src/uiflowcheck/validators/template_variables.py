"""Detection of unreplaced {{PLACEHOLDER}} template variables."""

from __future__ import annotations

import re

from uiflowcheck.validators.base import Validator

PLACEHOLDER_RE = re.compile(r"\{\{([A-Z_][A-Z0-9_]*)\}\}")

CORE_FILES = [
    "index.html",
    "device-preview.html",
    "docs/ui-flow-diagram-ipad.html",
    "docs/ui-flow-diagram-iphone.html",
]

KNOWN_VARIABLES = {
    "FIRST_SCREEN_PATH": "initial screen path, e.g. 'auth/SCR-AUTH-001-login.html'",
    "PROJECT_NAME": "project name",
    "TOTAL_SCREENS": "total number of screens",
    "MODULE_COUNT": "number of modules",
    "PRIMARY_COLOR": "primary color",
    "ACCENT_COLOR": "accent color",
}


def find_placeholders(content: str) -> list[tuple[str, int]]:
    """(variable name, 1-based line) for each placeholder in content."""
    return [
        (match.group(1), content.count("\n", 0, match.start()) + 1)
        for match in PLACEHOLDER_RE.finditer(content)
    ]


class TemplateVariablesValidator(Validator):
    """Generated files must not contain placeholders left over from templates."""

    name = "template-variables"
    description = "Detects unreplaced {{VARIABLE}} placeholders"

    def files_to_check(self) -> list[str]:
        screens: list[str] = []
        for folder in [m.folder for m in self.config.modules] + ["iphone"]:
            screens.extend(self.files.module_screens(folder))
        return CORE_FILES + screens

    async def run_checks(self) -> None:
        checked = 0
        found: dict[str, list[dict]] = {}

        for path in self.files_to_check():
            content = await self.files.read_optional(path)
            if content is None:
                continue
            checked += 1

            for variable, line in find_placeholders(content):
                found.setdefault(path, []).append({"variable": variable, "line": line})
                hint = KNOWN_VARIABLES.get(variable, "custom variable")
                self.fail(path, f"Line {line}: {{{{{variable}}}}} not replaced ({hint})")

        self._details["files_checked"] = checked
        self._details["unreplaced"] = found

        if not found:
            self.passed("Template Variables", f"No unreplaced variables in {checked} files")
