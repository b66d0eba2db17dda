"""Validation of the figures displayed by index.html."""

from __future__ import annotations

import re

from uiflowcheck.validators.base import Validator

INDEX_FILE = "index.html"

COVERAGE_PATTERNS = [
    re.compile(r"(?:UI/UX\s*)?(?:覆蓋率|Coverage)</p>\s*<p[^>]*>(\d+)%</p>", re.DOTALL | re.IGNORECASE),
    re.compile(r">(\d+)%</p>\s*</div>\s*</div>\s*</div>\s*</header>", re.DOTALL),
    re.compile(r"font-bold[^>]*text-green[^>]*>(\d+)%"),
]
IPAD_PATTERNS = [
    re.compile(r"iPad[^>]*</p>\s*<p[^>]*>(\d+)</p>", re.DOTALL),
    re.compile(r">iPad</p>\s*<p[^>]*font-bold[^>]*>(\d+)<", re.DOTALL),
]
IPHONE_PATTERNS = [
    re.compile(r"iPhone[^>]*</p>\s*<p[^>]*>(\d+)</p>", re.DOTALL),
    re.compile(r">iPhone</p>\s*<p[^>]*font-bold[^>]*>(\d+)<", re.DOTALL),
]


def _first_int(patterns: list[re.Pattern], content: str) -> int | None:
    for pattern in patterns:
        match = pattern.search(content)
        if match:
            return int(match.group(1))
    return None


def parse_index(content: str, module_ids: list[str]) -> dict:
    """Extract coverage, device totals and legend counts shown by index.html.

    Values that cannot be found are returned as None.
    """
    legend: dict[str, int | None] = {}
    for module_id in module_ids:
        match = re.search(rf"\b{re.escape(module_id)}\s*\((\d+)\)", content, re.IGNORECASE)
        legend[module_id] = int(match.group(1)) if match else None

    return {
        "coverage": _first_int(COVERAGE_PATTERNS, content),
        "ipad_total": _first_int(IPAD_PATTERNS, content),
        "iphone_total": _first_int(IPHONE_PATTERNS, content),
        "modules": legend,
    }


class IndexDataValidator(Validator):
    """index.html must show the real screen counts and coverage."""

    name = "index-data"
    description = "Validates coverage, device totals and module legend in index.html"

    def count_actual(self) -> dict:
        modules = {m.id: len(self.files.module_screens(m.folder)) for m in self.config.modules}
        return {
            "modules": modules,
            "ipad_total": sum(modules.values()),
            "iphone_total": len(self.files.module_screens("iphone")),
        }

    async def run_checks(self) -> None:
        actual = self.count_actual()
        self._details["actual"] = actual

        content = await self.files.read_optional(INDEX_FILE)
        if content is None:
            self.fail("index.html", "index.html does not exist")
            return

        shown = parse_index(content, [m.id for m in self.config.modules])
        self._details["displayed"] = shown

        for key, label in (("ipad_total", "iPad total"), ("iphone_total", "iPhone total")):
            if shown[key] == actual[key]:
                self.passed("Totals", f"{label} correct: {actual[key]}")
            else:
                self.fail("Totals", f"{label} mismatch: index.html shows {shown[key]}, actual {actual[key]}")

        expected_coverage = 100 if actual["ipad_total"] > 0 else 0
        if shown["coverage"] == expected_coverage:
            self.passed("Coverage", f"Coverage correct: {expected_coverage}%")
        else:
            self.fail(
                "Coverage",
                f"Coverage mismatch: index.html shows {shown['coverage']}%, expected {expected_coverage}%",
            )

        for module_id, count in actual["modules"].items():
            displayed = shown["modules"][module_id]
            if displayed is None:
                if count:
                    self.warn("Module Legend", f"{module_id}: {count} screens but not listed in module legend")
                else:
                    self.warn("Module Legend", f"{module_id}: not found in module legend")
            elif displayed == count:
                self.passed("Module Legend", f"{module_id}: {count} screens")
            else:
                self.fail("Module Legend", f"{module_id} mismatch: index.html shows {displayed}, actual {count}")
