"""Clickable coverage validation across a UI flow project."""

from __future__ import annotations

import logging
import posixpath
import re

from uiflowcheck.config import UIFlowConfig
from uiflowcheck.models.schemas import (
    IssueType,
    NavigationIssue,
    NavigationReport,
    ScreenResult,
    ValidatorResult,
)
from uiflowcheck.navigation.extractor import extract_clickable_elements
from uiflowcheck.navigation.targets import resolve_target
from uiflowcheck.tools.file_tools import ProjectFiles
from uiflowcheck.validators.base import Validator

logger = logging.getLogger(__name__)

DEVICE_PREVIEW = "device-preview.html"
NOTIFY_SCRIPT = "notify-parent.js"
WIRING_EXEMPT = {"index.html", DEVICE_PREVIEW}

SCREEN_ITEM_RE = re.compile(r'class="screen-item')
DATA_SCREEN_RE = re.compile(r'data-screen="')


class NavigationValidator(Validator):
    """Checks that every clickable element in every screen leads somewhere.

    Example usage:
        validator = NavigationValidator(UIFlowConfig(project_dir="./ui-flow"))
        report = await validator.scan()
        print(f"Coverage: {report.coverage}%")
    """

    name = "navigation"
    description = "Validates navigation links and click handlers"

    def __init__(
        self,
        config: UIFlowConfig,
        files: ProjectFiles | None = None,
        module: str | None = None,
    ) -> None:
        super().__init__(config, files)
        self.module = module
        self.report: NavigationReport | None = None

    def _issue(self, report: NavigationReport, screen: ScreenResult, issue: NavigationIssue, counted: bool = True) -> None:
        if counted:
            screen.issues.append(issue)
            report.issues.append(issue)
            report.invalid_elements += 1
        else:
            screen.warnings.append(issue)
            report.warnings.append(issue)

    def _check_wiring(self, report: NavigationReport, screen: ScreenResult, content: str) -> None:
        filename = posixpath.basename(screen.screen)
        if filename in WIRING_EXEMPT or NOTIFY_SCRIPT in content:
            return
        self._issue(
            report,
            screen,
            NavigationIssue(
                screen=screen.screen,
                kind=IssueType.MISSING_NOTIFY_PARENT,
                message="Missing notify-parent.js - sidebar will not sync when navigating to this screen",
                raw='Add: <script src="../shared/notify-parent.js"></script>',
            ),
        )

    def _check_device_preview(self, report: NavigationReport, content: str) -> ScreenResult:
        screen = ScreenResult(screen=DEVICE_PREVIEW)

        if "addEventListener" not in content or "pageLoaded" not in content:
            self._issue(
                report,
                screen,
                NavigationIssue(
                    screen=DEVICE_PREVIEW,
                    kind=IssueType.MISSING_POSTMESSAGE_LISTENER,
                    message="CRITICAL: Missing postMessage listener - sidebar will not sync on navigation",
                    raw="Add: window.addEventListener('message', ...) with pageLoaded handler",
                ),
            )

        if "syncSidebarFromIframe" not in content:
            self._issue(
                report,
                screen,
                NavigationIssue(
                    screen=DEVICE_PREVIEW,
                    kind=IssueType.MISSING_SIDEBAR_SYNC_FUNCTION,
                    message="CRITICAL: Missing syncSidebarFromIframe function - sidebar will not highlight current screen",
                    raw="Add: function syncSidebarFromIframe(url) { ... }",
                ),
            )

        items = len(SCREEN_ITEM_RE.findall(content))
        tagged = len(DATA_SCREEN_RE.findall(content))
        if items > 0 and tagged < items:
            self._issue(
                report,
                screen,
                NavigationIssue(
                    screen=DEVICE_PREVIEW,
                    kind=IssueType.MISSING_DATA_SCREEN_ATTRIBUTES,
                    message=f"{items - tagged} screen items missing data-screen attribute - sidebar sync may not work",
                    raw='Add: data-screen="module/SCR-XXX.html" to each screen-item',
                ),
                counted=False,
            )

        return screen

    async def _scan_screen(self, report: NavigationReport, path: str, known: list[str]) -> ScreenResult:
        content = await self.files.read_text(path)
        screen = ScreenResult(screen=path)

        self._check_wiring(report, screen, content)

        for element in extract_clickable_elements(content):
            issue = NavigationIssue(
                screen=path,
                kind=element.kind,
                line=element.line,
                message=element.message,
                raw=element.raw,
                target=element.target,
                text=element.text,
                element_id=element.element_id,
            )

            if element.kind == IssueType.VOID_ONCLICK_WARNING:
                self._issue(report, screen, issue, counted=False)
                continue

            if element.is_issue:
                screen.total_elements += 1
                report.total_elements += 1
                self._issue(report, screen, issue)
            elif element.target:
                screen.total_elements += 1
                report.total_elements += 1
                resolution = resolve_target(
                    element.target, path, self.files, known, self.config.external_prefixes
                )
                if resolution.valid:
                    screen.valid_elements += 1
                    report.valid_elements += 1
                else:
                    issue.message = f"Target not found: {element.target}"
                    self._issue(report, screen, issue)

        logger.debug(
            "%s: %d elements, %d valid, %d issues",
            path, screen.total_elements, screen.valid_elements, len(screen.issues),
        )
        return screen

    async def scan(self) -> NavigationReport:
        """Scan all screens and build a navigation report."""
        report = NavigationReport()
        scan_dirs = self.config.scan_dirs(self.module)
        screens = self.files.list_html(scan_dirs, self.config.exclude_patterns)
        report.total_screens = len(screens)
        logger.info("Validating navigation in %d screens under %s", len(screens), self.files.project_dir)

        for path in screens:
            report.screens.append(await self._scan_screen(report, path, screens))

        if self.module is None:
            preview = await self.files.read_optional(DEVICE_PREVIEW)
            if preview is not None:
                report.screens.append(self._check_device_preview(report, preview))

        self.report = report
        return report

    async def run_checks(self) -> None:
        report = await self.scan()
        category = "Navigation"

        for issue in report.issues:
            self.fail(category, f"{issue.screen}:{issue.line} {issue.message}")
        for warning in report.warnings:
            self.warn(category, f"{warning.screen}:{warning.line} {warning.message}")
        if report.passed:
            self.passed(category, f"{report.valid_elements}/{report.total_elements} elements valid")

        self._details = {
            "total_screens": report.total_screens,
            "total_elements": report.total_elements,
            "valid_elements": report.valid_elements,
            "invalid_elements": report.invalid_elements,
            "coverage": report.coverage,
        }

    def summarize(self, result: ValidatorResult) -> str:
        report = self.report
        if report is None:
            return super().summarize(result)
        return (
            f"{report.total_screens} screens, coverage {report.coverage}% "
            f"({report.invalid_elements} invalid)"
        )
