"""Validation of iframe/screen paths in diagrams and the device preview."""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone

from uiflowcheck.validators.base import Validator

logger = logging.getLogger(__name__)

IPAD_DIAGRAM = "docs/ui-flow-diagram-ipad.html"
IPHONE_DIAGRAM = "docs/ui-flow-diagram-iphone.html"
DEVICE_PREVIEW = "device-preview.html"
ERROR_LOG_NAME = "iframe-src-error-log.json"
FILE_NOT_FOUND = "FILE_NOT_FOUND"

DIAGRAM_SRC_RE = re.compile(r'src="\.\./([^"]+\.html)"')
LOAD_SCREEN_RE = re.compile(r"""loadScreen\(['"]([^'"]+\.html)['"]""")
PREVIEW_IFRAME_RE = re.compile(r'id="(preview-iframe-(?:ipad|ipad-mini|iphone))"\s+src="([^"]+)"')
DATA_IPHONE_RE = re.compile(r'data-iphone="([^"]+)"')


def _unique(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))


class IframeSrcValidator(Validator):
    """Every screen path embedded in diagrams and the preview must exist.

    This check is blocking: a missing path means the generated UI flow is not
    navigable and later phases should not start. On failure an error log is
    written to ``<error_log_dir>/iframe-src-error-log.json``.
    """

    name = "iframe-src"
    description = "Validates iframe src paths in diagrams and device preview"

    def _tally(self, key: str, paths: list[str]) -> dict:
        entry = {"total": len(paths), "valid": 0, "missing": []}
        for path in paths:
            if self.files.exists(path):
                entry["valid"] += 1
            else:
                entry["missing"].append(path)
        self._details["results"][key] = entry
        return entry

    def _report(self, category: str, label: str, entry: dict) -> None:
        if entry["missing"]:
            for missing in entry["missing"]:
                self.fail(category, f"{label}: missing {missing}")
        else:
            self.passed(category, f"{label}: all {entry['total']} paths valid")

    async def _check_diagram(self, key: str, path: str) -> None:
        content = await self.files.read_optional(path)
        if content is None:
            self._details["results"][key] = {"total": 0, "valid": 0, "missing": [FILE_NOT_FOUND]}
            self.fail(path, f"File not found: {path}")
            return

        entry = self._tally(key, DIAGRAM_SRC_RE.findall(content))
        self._report(path, "iframe src", entry)

    async def _check_device_preview(self) -> None:
        content = await self.files.read_optional(DEVICE_PREVIEW)
        if content is None:
            self._details["results"]["device_preview"] = {"total": 0, "valid": 0, "missing": [FILE_NOT_FOUND]}
            self.fail(DEVICE_PREVIEW, f"File not found: {DEVICE_PREVIEW}")
            return

        entry = self._tally("device_preview", _unique(LOAD_SCREEN_RE.findall(content)))
        self._report(DEVICE_PREVIEW, "loadScreen", entry)

        iframes = {"total": 0, "valid": 0, "missing": []}
        for iframe_id, src in PREVIEW_IFRAME_RE.findall(content):
            iframes["total"] += 1
            if self.files.exists(src):
                iframes["valid"] += 1
            else:
                iframes["missing"].append(f"{iframe_id}: {src}")
        self._details["results"]["device_preview_iframes"] = iframes
        self._report(DEVICE_PREVIEW, "initial iframe src", iframes)

        entry = self._tally("data_iphone", _unique(DATA_IPHONE_RE.findall(content)))
        self._report(DEVICE_PREVIEW, "data-iphone", entry)

    def _check_counts(self, ipad_screens: list[str]) -> bool:
        results = self._details["results"]
        actual = len(ipad_screens)
        counts = {
            "iPad diagram": results.get("ipad_diagram", {}).get("total", 0),
            "iPhone diagram": results.get("iphone_diagram", {}).get("total", 0),
            "device-preview": results.get("device_preview", {}).get("total", 0),
        }

        mismatched = {label: count for label, count in counts.items() if count != actual}
        if mismatched:
            detail = ", ".join(f"{label} {count}" for label, count in mismatched.items())
            self.fail("Screen Count", f"Screen counts differ from {actual} actual iPad screens: {detail}")
            return False

        self.passed("Screen Count", f"Screen counts consistent: {actual}")
        return True

    async def _write_error_log(self, ipad: int, iphone: int) -> None:
        error_log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "phase": "iframe-src-validation",
            "results": self._details["results"],
            "actualScreenCount": {"ipad": ipad, "iphone": iphone},
            "recovery_action": "fix-diagram-and-preview-files",
        }
        path = f"{self.config.error_log_dir}/{ERROR_LOG_NAME}"
        written = await self.files.write_text(path, json.dumps(error_log, indent=2))
        self._details["error_log"] = path
        logger.warning("iframe src validation failed, error log written to %s", written)

    async def run_checks(self) -> None:
        self._details["results"] = {}

        ipad_screens = self.files.find_screens(".", exclude_prefixes=["iphone/", "docs/"])
        iphone_screens = self.files.find_screens("iphone")
        self._details["actual_screens"] = {"ipad": len(ipad_screens), "iphone": len(iphone_screens)}

        await self._check_diagram("ipad_diagram", IPAD_DIAGRAM)
        await self._check_diagram("iphone_diagram", IPHONE_DIAGRAM)
        await self._check_device_preview()
        self._check_counts(ipad_screens)

        if self.has_failures:
            await self._write_error_log(len(ipad_screens), len(iphone_screens))
