"""Tests for navigation report output."""

from datetime import datetime, timezone

from uiflowcheck.models.schemas import IssueType, NavigationIssue, NavigationReport, ScreenResult
from uiflowcheck.navigation import format_console, generate_fix_suggestions, generate_markdown


def make_report() -> NavigationReport:
    missing = NavigationIssue(
        screen="auth/SCR-AUTH-002-register.html",
        kind=IssueType.ONCLICK_HREF,
        line=12,
        message="Target not found: SCR-AUTH-003-verify.html",
        target="SCR-AUTH-003-verify.html",
    )
    row = NavigationIssue(
        screen="setting/SCR-SETTING-001-main.html",
        kind=IssueType.SETTINGS_ROW_NO_ONCLICK,
        line=40,
        message="CRITICAL: Settings row has no onclick handler (must navigate or show alert)",
        text="語言",
    )
    return NavigationReport(
        total_screens=3,
        total_elements=4,
        valid_elements=2,
        invalid_elements=2,
        screens=[
            ScreenResult(screen="auth/SCR-AUTH-001-login.html", total_elements=2, valid_elements=2),
            ScreenResult(screen="auth/SCR-AUTH-002-register.html", total_elements=1, issues=[missing]),
            ScreenResult(screen="setting/SCR-SETTING-001-main.html", total_elements=1, issues=[row]),
        ],
        issues=[missing, row],
    )


class TestConsoleOutput:
    def test_hides_ok_screens_by_default(self):
        output = format_console(make_report())
        assert "SCR-AUTH-001-login.html" not in output
        assert "[FAIL] auth/SCR-AUTH-002-register.html" in output
        assert "Line 12: Target not found: SCR-AUTH-003-verify.html" in output
        assert "Coverage:         50.0%" in output
        assert "FAILED" in output

    def test_verbose_shows_every_screen(self):
        output = format_console(make_report(), verbose=True)
        assert "[OK  ] auth/SCR-AUTH-001-login.html" in output

    def test_passed(self):
        output = format_console(NavigationReport())
        assert "PASSED - 100% coverage" in output


class TestMarkdownReport:
    def test_sections(self):
        generated = datetime(2026, 1, 2, tzinfo=timezone.utc)
        markdown = generate_markdown(make_report(), generated_at=generated)

        assert markdown.startswith("# Navigation Validation Report")
        assert "2026-01-02T00:00:00+00:00" in markdown
        assert "| **Coverage** | **50.0%** |" in markdown
        assert "| ✅ auth/SCR-AUTH-001-login.html | 2 | 2 | 0 |" in markdown
        assert "## Issues Found" in markdown
        assert "| auth/SCR-AUTH-002-register.html | 12 | onclick-href |" in markdown

    def test_no_issue_table_when_clean(self):
        assert "## Issues Found" not in generate_markdown(NavigationReport())


class TestFixSuggestions:
    def test_no_issues(self):
        assert generate_fix_suggestions(NavigationReport()) == "No issues to fix!"

    def test_missing_target(self):
        output = generate_fix_suggestions(make_report())
        assert "Missing: SCR-AUTH-003-verify.html" in output

    def test_settings_row_prediction(self):
        output = generate_fix_suggestions(make_report())
        assert "location.href='SCR-SETTING-002-language.html'" in output
        assert "alert('Change app language')" in output
