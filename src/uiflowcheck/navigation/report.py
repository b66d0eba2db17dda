"""Human-readable output for navigation reports."""

from __future__ import annotations

from datetime import datetime, timezone

from uiflowcheck.models.schemas import IssueType, NavigationIssue, NavigationReport
from uiflowcheck.navigation.targets import predict_target_screen

RULE = "-" * 60


def format_console(report: NavigationReport, verbose: bool = False) -> str:
    """Per-screen results followed by the summary block."""
    lines: list[str] = []

    for screen in report.screens:
        if screen.ok and not verbose:
            continue
        status = "OK  " if screen.ok else "FAIL"
        lines.append(f"[{status}] {screen.screen}")
        lines.append(
            f"       Elements: {screen.total_elements}, Valid: {screen.valid_elements}, "
            f"Issues: {len(screen.issues)}"
        )
        for issue in screen.issues:
            lines.append(f"       Line {issue.line}: {issue.message}")
        if verbose:
            for warning in screen.warnings:
                lines.append(f"       Line {warning.line}: (warning) {warning.message}")

    lines.append(RULE)
    lines.append("Summary")
    lines.append(f"  Total Screens:    {report.total_screens}")
    lines.append(f"  Total Elements:   {report.total_elements}")
    lines.append(f"  Valid Elements:   {report.valid_elements}")
    lines.append(f"  Invalid Elements: {report.invalid_elements}")
    lines.append(f"  Coverage:         {report.coverage}%")
    lines.append("")

    if report.passed:
        lines.append("Navigation validation PASSED - 100% coverage")
    else:
        lines.append("Navigation validation FAILED - issues found")
        lines.append("Run with --fix to see fix suggestions")

    return "\n".join(lines)


def generate_markdown(report: NavigationReport, generated_at: datetime | None = None) -> str:
    """Markdown report with summary, per-screen and issue tables."""
    generated_at = generated_at or datetime.now(timezone.utc)
    lines = [
        "# Navigation Validation Report",
        "",
        f"**Generated:** {generated_at.isoformat()}",
        f"**Coverage:** {report.coverage}%",
        "",
        "## Summary",
        "",
        "| Metric | Value |",
        "|--------|-------|",
        f"| Total Screens | {report.total_screens} |",
        f"| Total Clickable Elements | {report.total_elements} |",
        f"| Valid Elements | {report.valid_elements} |",
        f"| Invalid Elements | {report.invalid_elements} |",
        f"| **Coverage** | **{report.coverage}%** |",
        "",
        "## Screen Details",
        "",
        "| Screen | Elements | Valid | Issues |",
        "|--------|----------|-------|--------|",
    ]

    for screen in report.screens:
        status = "✅" if screen.ok else "⚠️"
        lines.append(
            f"| {status} {screen.screen} | {screen.total_elements} | "
            f"{screen.valid_elements} | {len(screen.issues)} |"
        )

    if report.issues:
        lines += [
            "",
            "## Issues Found",
            "",
            "| Screen | Line | Type | Issue |",
            "|--------|------|------|-------|",
        ]
        for issue in report.issues:
            message = issue.message.replace("|", "\\|")
            lines.append(f"| {issue.screen} | {issue.line} | {issue.kind.value} | {message} |")

    lines += ["", "---", "", "*Generated by uiflowcheck navigation*", ""]
    return "\n".join(lines)


def _suggestion(issue: NavigationIssue) -> list[str]:
    kind = issue.kind

    if kind == IssueType.EMPTY_HREF:
        return ["Fix: Replace href=\"#\" with onclick=\"location.href='target.html'\""]
    if kind == IssueType.EMPTY_ONCLICK:
        return ["Fix: Add navigation handler, e.g. onclick=\"location.href='target.html'\""]
    if kind in (IssueType.CLOSE_BUTTON_NO_ONCLICK, IssueType.CLOSE_ICON_NO_ONCLICK):
        return [
            "Fix: This is a CLOSE/EXIT control - it MUST navigate.",
            "   Add: onclick=\"location.href='previous-screen.html'\"",
            "   Or:  onclick=\"history.back()\"",
        ]
    if kind == IssueType.SETTINGS_ROW_NO_ONCLICK:
        prediction = predict_target_screen(issue.text, issue.screen)
        return [
            f"Fix: Settings row \"{issue.text or '(unknown)'}\" MUST have onclick.",
            "   Option 1 (create target screen):",
            f"     onclick=\"location.href='{prediction.screen_id}'\"",
            "   Option 2 (explain with alert):",
            f"     onclick=\"alert('{prediction.description}')\"",
        ]
    if kind == IssueType.CLICKABLE_ROW_NO_ONCLICK:
        return [
            "Fix: This row has clickable styling but no onclick handler.",
            "   Add: onclick=\"location.href='target.html'\"",
            "   Or:  onclick=\"alert('Feature description')\"",
        ]
    if kind == IssueType.BUTTON_NO_ONCLICK:
        return ["Fix: Add onclick handler to button, e.g. onclick=\"location.href='target.html'\""]
    if kind == IssueType.VOID_ONCLICK_NAVIGATION:
        prediction = predict_target_screen(issue.text, issue.screen)
        return [
            f"Fix: Navigation button [{issue.element_id or '(unknown)'}] uses a void(0) placeholder.",
            f"   Button text: \"{issue.text or '(unknown)'}\"",
            "   Option 1 (create target screen):",
            f"     onclick=\"location.href='{prediction.screen_id}'\"",
            "   Option 2 (navigate to existing screen):",
            "     onclick=\"location.href='SCR-MODULE-XXX-name.html'\"",
        ]
    if kind in (IssueType.ONCLICK_HREF, IssueType.HREF):
        return ["Fix: Create missing file or update target path", f"     Missing: {issue.target}"]
    if kind == IssueType.MISSING_NOTIFY_PARENT:
        return [
            "Fix: Add notify-parent.js for sidebar sync, before </body>:",
            '   <script src="../shared/notify-parent.js"></script>',
        ]
    if kind == IssueType.MISSING_POSTMESSAGE_LISTENER:
        return [
            "Fix: Add a postMessage listener to device-preview.html:",
            "   window.addEventListener('message', function(event) {",
            "     if (event.data && event.data.type === 'pageLoaded') {",
            "       syncSidebarFromIframe(event.data.url || event.data.pathname);",
            "     }",
            "   });",
        ]
    if kind == IssueType.MISSING_SIDEBAR_SYNC_FUNCTION:
        return ["Fix: Add function syncSidebarFromIframe(url) { ... } to device-preview.html"]
    return []


def generate_fix_suggestions(report: NavigationReport) -> str:
    """Fix suggestions for every counted issue."""
    if not report.issues:
        return "No issues to fix!"

    lines = ["Fix Suggestions", RULE]
    for issue in report.issues:
        lines.append(f"File:  {issue.screen}")
        lines.append(f"Line:  {issue.line}")
        lines.append(f"Issue: {issue.message}")
        lines.extend(_suggestion(issue))
        lines.append("")
    return "\n".join(lines)
