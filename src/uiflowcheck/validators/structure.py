"""Screen files, index.html and diagram structure of a UI flow."""

from __future__ import annotations

import re

from uiflowcheck.validators.base import Validator

INDEX_FILE = "index.html"
DIAGRAMS = [
    ("docs/ui-flow-diagram.html", True),
    ("docs/ui-flow-diagram-ipad.html", True),
    ("docs/ui-flow-diagram-iphone.html", False),
]
SHARED_FILES = ["shared/project-theme.css", "shared/notify-parent.js"]
PLACEHOLDER_TEXTS = ("尚未產生畫面", "No screens generated yet")

COVERAGE_RE = re.compile(r"(?:覆蓋率|Coverage)</p>\s*<p[^>]*>(\d+)%", re.IGNORECASE)
SCREEN_LINK_RE = re.compile(r'href="([^"]*SCR-[^"]*\.html)"')
TEMPLATE_VAR_RE = re.compile(r"\{\{[A-Z_]+\}\}")


class StructureValidator(Validator):
    """Expected screens exist and the overview pages are complete."""

    name = "structure"
    description = "Validates screen files and module structure"

    def _expected_screens(self) -> None:
        category = "Screens"
        expected = self.config.expected_screens
        if not expected:
            self.warn(category, "No expected screens configured, skipping screen inventory")
            return

        total = found = 0
        missing: list[str] = []
        for module_id, stems in expected.items():
            module = self.config.get_module(module_id)
            folder = module.folder if module else module_id.lower()
            module_found = 0
            for stem in stems:
                total += 1
                path = f"{folder}/{stem}.html"
                if self.files.exists(path):
                    module_found += 1
                else:
                    missing.append(path)
                    self.fail(category, f"{module_id}: missing {path}")
            found += module_found
            if module_found == len(stems):
                self.passed(category, f"{module_id}: {module_found}/{len(stems)} screens")

        self._details["screens"] = {
            "expected": total,
            "found": found,
            "missing": missing,
            "coverage": round(found / total * 100, 1) if total else 100.0,
        }

    async def _index(self) -> None:
        category = "index.html"
        content = await self.files.read_optional(INDEX_FILE)
        if content is None:
            self.fail(category, "index.html not found")
            return

        match = COVERAGE_RE.search(content)
        if match is None:
            self.warn(category, "Coverage figure not found")
        elif int(match.group(1)) == 100:
            self.passed(category, "Coverage shows 100%")
        else:
            self.fail(category, f"Coverage shows {match.group(1)}%")

        links = SCREEN_LINK_RE.findall(content)
        broken = [href for href in links if not self.files.exists(href)]
        for href in broken:
            self.fail(category, f"Broken screen link: {href}")
        if links and not broken:
            self.passed(category, f"{len(links)} screen links valid")

        if any(text in content for text in PLACEHOLDER_TEXTS):
            self.fail(category, "Contains placeholder text")

    async def _diagrams(self) -> None:
        category = "Diagrams"
        for path, required in DIAGRAMS:
            content = await self.files.read_optional(path)
            if content is None:
                if required:
                    self.fail(category, f"{path} missing")
                else:
                    self.warn(category, f"{path} missing (optional)")
                continue

            leftovers = sorted(set(TEMPLATE_VAR_RE.findall(content)))
            if leftovers:
                self.fail(category, f"{path} has unreplaced variables: {', '.join(leftovers)}")
            elif 'class="flow-container"' not in content:
                self.warn(category, f"{path} has no flow-container")
            else:
                self.passed(category, f"{path} present")

    def _shared(self) -> None:
        for path in SHARED_FILES:
            if self.files.exists(path):
                self.passed("Shared Resources", f"{path} exists")
            else:
                self.warn("Shared Resources", f"{path} missing")

    async def run_checks(self) -> None:
        self._expected_screens()
        await self._index()
        await self._diagrams()
        self._shared()
