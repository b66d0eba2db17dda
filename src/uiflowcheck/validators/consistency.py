"""Consistency of a generated UI flow with the reference standards."""

from __future__ import annotations

import re

from uiflowcheck.config import UIFlowConfig
from uiflowcheck.tools.file_tools import ProjectFiles
from uiflowcheck.validators.base import Validator
from uiflowcheck.validators.standards import Standards, load_standards

IPHONE_DIAGRAM = "docs/ui-flow-diagram.html"
IPAD_DIAGRAM = "docs/ui-flow-diagram-ipad.html"
STANDALONE_IPHONE_DIAGRAM = "docs/ui-flow-diagram-iphone.html"
DEVICE_PREVIEW = "device-preview.html"
THEME_CSS = "shared/project-theme.css"

SCREEN_CARD_RE = re.compile(r'class="[^"]*screen-card[^"]*"')
SCREEN_ITEM_RE = re.compile(r'class="[^"]*screen-item[^"]*"')
MODULE_COUNT_RE = re.compile(r"[A-Z]{3,}\s*\(\d+\)")


def _has_css(content: str, prop: str, value: str) -> bool:
    return f"{prop}: {value}" in content or f"{prop}:{value}" in content


class ConsistencyValidator(Validator):
    """Compares diagrams, preview and theme against ``Standards``."""

    name = "consistency"
    description = "Validates against reference-example standards"

    def __init__(
        self,
        config: UIFlowConfig,
        files: ProjectFiles | None = None,
        standards: Standards | None = None,
    ) -> None:
        super().__init__(config, files)
        self.standards = standards

    def _file_structure(self, standards: Standards) -> None:
        category = "File Structure"
        required = standards.required_files

        for prefix, names, optional in (
            ("", required.root, False),
            ("docs/", required.docs, False),
            ("shared/", required.shared, True),
        ):
            for name in names:
                path = f"{prefix}{name}"
                if self.files.exists(path):
                    self.passed(category, f"{path} exists")
                elif optional:
                    self.warn(category, f"{path} missing (optional)")
                else:
                    self.fail(category, f"{path} missing")

    async def _device_specs(self, standards: Standards, device: str) -> None:
        category = f"Device Specs ({device})"
        path = IPHONE_DIAGRAM if device == "iphone" else IPAD_DIAGRAM
        content = await self.files.read_optional(path)
        if content is None:
            self.fail(category, f"{path} not found")
            return

        frame = standards.iphone_frame if device == "iphone" else standards.ipad_frame
        for prop, value in (("width", frame.width), ("height", frame.height)):
            if _has_css(content, prop, value):
                self.passed(category, f"Frame {prop}: {value}")
            else:
                self.fail(category, f"Frame {prop} should be {value}")

        if frame.scale in content:
            self.passed(category, f"Scale factor: {frame.scale}")
        else:
            self.fail(category, f"Scale factor should be {frame.scale}")

        if device == "iphone":
            notch = standards.notch
            if f"width: {notch.width}px" in content and f"height: {notch.height}px" in content:
                self.passed(category, f"Notch: {notch.width}x{notch.height}px")
            else:
                self.warn(category, "Notch dimensions may differ")
        elif _has_css(content, "border-radius", "50%"):
            self.passed(category, "Camera: circular (border-radius: 50%)")
        else:
            self.warn(category, "Camera style may differ")

    async def _required_elements(self) -> None:
        category = "Required Elements"

        diagram = await self.files.read_optional(IPHONE_DIAGRAM)
        if diagram is not None:
            for marker in ("flow-container", "device-frame"):
                if marker in diagram:
                    self.passed(category, f"{marker} present")
                else:
                    self.fail(category, f"{marker} missing")

            cards = len(SCREEN_CARD_RE.findall(diagram))
            if cards:
                self.passed(category, f"screen-card count: {cards}")
            else:
                self.fail(category, "No screen-cards found")

            if "device-switcher" in diagram:
                self.passed(category, "device-switcher present")
            else:
                self.warn(category, "device-switcher may be missing")

            if "zoom" in diagram:
                self.passed(category, "zoom-controls present")
            else:
                self.warn(category, "zoom-controls may be missing")

        preview = await self.files.read_optional(DEVICE_PREVIEW)
        if preview is not None:
            items = len(SCREEN_ITEM_RE.findall(preview))
            if items:
                self.passed(category, f"device-preview sidebar: {items} screen items")
            else:
                self.fail(category, "device-preview sidebar has no screen items")

    async def _function_behavior(self, standards: Standards) -> None:
        category = "Function Behavior"
        switcher = standards.device_switcher

        diagram = await self.files.read_optional(IPHONE_DIAGRAM)
        if diagram is not None:
            if re.search(standards.open_screen_pattern, diagram):
                self.passed(category, "openScreen() redirects to device-preview.html")
            elif "device-preview.html" in diagram:
                self.passed(category, "openScreen() uses device-preview.html")
            else:
                self.fail(category, "openScreen() should redirect to device-preview.html")

            if switcher.iphone_to_ipad in diagram:
                self.passed(category, "iPhone diagram links to iPad version")
            else:
                self.warn(category, "iPhone diagram may not link to iPad version")

        ipad = await self.files.read_optional(IPAD_DIAGRAM)
        if ipad is not None:
            if switcher.ipad_to_iphone in ipad:
                self.passed(category, "iPad diagram links to iPhone version")
            else:
                self.warn(category, "iPad diagram may not link to iPhone version")

        preview = await self.files.read_optional(DEVICE_PREVIEW)
        if preview is not None:
            if "URLSearchParams" in preview or "searchParams" in preview:
                self.passed(category, "URL parameters supported (device + screen)")
            elif "device=" in preview and "screen=" in preview:
                self.passed(category, "URL parameters referenced")
            else:
                self.warn(category, "URL parameter handling may be incomplete")

    async def _css_consistency(self, standards: Standards) -> None:
        category = "CSS Consistency"
        colors = standards.module_colors or {m.id: m.color for m in self.config.modules}
        if not colors:
            return

        combined = ""
        for path in (IPHONE_DIAGRAM, IPAD_DIAGRAM, DEVICE_PREVIEW, THEME_CSS):
            combined += await self.files.read_optional(path) or ""
        lowered = combined.lower()

        total = len(colors)
        threshold = total * standards.color_threshold

        colors_found = sum(1 for color in colors.values() if color.lower() in lowered)
        if colors_found >= threshold:
            self.passed(category, f"Module colors defined: {colors_found}/{total}")
        elif colors_found:
            self.warn(category, f"Module colors partially defined: {colors_found}/{total}")
        else:
            self.fail(category, "Module colors not defined")

        badges_found = sum(1 for module_id in colors if f"badge-{module_id.lower()}" in lowered)
        if badges_found >= threshold:
            self.passed(category, f"badge-{{module}} classes: {badges_found}/{total}")
        elif badges_found:
            self.warn(category, f"badge-{{module}} classes partially defined: {badges_found}/{total}")
        else:
            self.warn(category, "badge-{module} classes may use different naming")

    async def _diagram_no_legend(self) -> None:
        category = "Diagram No Legend"
        for path in (IPHONE_DIAGRAM, IPAD_DIAGRAM, STANDALONE_IPHONE_DIAGRAM):
            content = await self.files.read_optional(path)
            if content is None:
                continue

            has_legend = 'class="legend"' in content or "legend-item" in content or "legend-color" in content
            if has_legend:
                self.fail(category, f"{path} contains a module legend - it belongs in index.html")
            elif MODULE_COUNT_RE.search(content):
                self.warn(category, f"{path} may contain module counts - check for a duplicated legend")
            else:
                self.passed(category, f"{path} has no duplicated module legend")

    async def run_checks(self) -> None:
        standards = self.standards
        if standards is None:
            standards, source = load_standards(self.files.project_dir, self.config.standards_path)
            self._details["standards_source"] = source or "built-in"

        self._file_structure(standards)
        await self._device_specs(standards, "iphone")
        await self._device_specs(standards, "ipad")
        await self._required_elements()
        await self._function_behavior(standards)
        await self._css_consistency(standards)
        await self._diagram_no_legend()
