"""Tests for requirements traceability validation."""

import json

import pytest

from uiflowcheck.config import UIFlowConfig
from uiflowcheck.validators import TraceabilityValidator
from uiflowcheck.validators.traceability import REQ_RE, SCR_RE, base_id, coverage, extract_ids, sdd_sections

SRS = """# SRS
## REQ-AUTH-001 Login
## REQ-AUTH-002 Register
"""

SDD = """# SDD
REQ-AUTH-001 is realised by SCR-AUTH-001-login.
REQ-AUTH-002 is realised by SCR-AUTH-002-register.

## Screens

### SCR-AUTH-001-login

#### Layout

Email and password fields.

**按鈕導航**

| Button | Target |
|--------|--------|
| Sign up | Register |

### SCR-AUTH-002-register

**按鈕導航**

| Button | Target |
|--------|--------|
| Back | Login |
"""

RTM = """# RTM
| Requirement | Design | Screen |
|-------------|--------|--------|
| REQ-AUTH-001 | Login | SCR-AUTH-001-login |
| REQ-AUTH-002 | Register | SCR-AUTH-002-register |
"""

TRACE_PROJECT = {
    "01-planning/SRS-app.md": SRS,
    "02-design/SDD-app.md": SDD,
    "07-traceability/RTM-app.md": RTM,
    "04-ui-flow/auth/SCR-AUTH-001-login.html": "",
    "04-ui-flow/auth/SCR-AUTH-002-register.html": "",
    "04-ui-flow/docs/SCR-AUTH-003-extra.html": "",
    "02-design/images/auth/SCR-AUTH-001-login.png": "",
    "02-design/images/auth/SCR-AUTH-002-register.png": "",
}


class TestHelpers:
    def test_extract_ids_unique_in_order(self):
        content = "REQ-A-2 REQ-A-1 REQ-A-2 SCR-AUTH-001-login SCR-AUTH-001-login"
        assert extract_ids(content, REQ_RE) == ["REQ-A-2", "REQ-A-1"]
        assert extract_ids(content, SCR_RE) == ["SCR-AUTH-001-login"]

    def test_coverage(self):
        assert coverage(3, 1) == 67
        assert coverage(0, 0) == 100


class TestTraceabilityValidator:
    @pytest.mark.asyncio
    async def test_complete_trace_passes(self, project):
        root = project(TRACE_PROJECT)
        result = await TraceabilityValidator(UIFlowConfig(project_dir=str(root))).validate()

        assert result.success, [c.message for c in result.failed]
        assert result.details["srs_to_sdd"] == 100
        assert result.details["sdd_to_ui_flow"] == 100
        assert result.details["rtm"] == 100
        assert result.details["rtm_mappings"] == 2

    @pytest.mark.asyncio
    async def test_ui_flow_screens_skip_docs(self, project):
        root = project(TRACE_PROJECT)
        validator = TraceabilityValidator(UIFlowConfig(project_dir=str(root)))
        assert validator.ui_flow_screens() == ["SCR-AUTH-001-login", "SCR-AUTH-002-register"]

    @pytest.mark.asyncio
    async def test_gaps_fail(self, project):
        files = dict(TRACE_PROJECT)
        files["01-planning/SRS-app.md"] = SRS + "## REQ-AUTH-003 Reset password\n"
        files["02-design/SDD-app.md"] = SDD + "REQ-AUTH-001 also uses SCR-AUTH-004-reset.\n"
        root = project(files)

        result = await TraceabilityValidator(UIFlowConfig(project_dir=str(root))).validate()
        failed = [c.message for c in result.failed]

        assert "REQ-AUTH-003 has no design coverage" in failed
        assert "SCR-AUTH-004-reset has no UI flow screen" in failed
        assert "REQ-AUTH-003 missing from RTM" in failed
        assert "SCR-AUTH-004-reset missing from RTM" in failed
        assert result.details["srs_to_sdd"] == 67

    @pytest.mark.asyncio
    async def test_slug_mismatch_matches_by_prefix(self, project):
        files = dict(TRACE_PROJECT)
        files["04-ui-flow/auth/SCR-AUTH-002-signup.html"] = files.pop("04-ui-flow/auth/SCR-AUTH-002-register.html")
        root = project(files)

        result = await TraceabilityValidator(UIFlowConfig(project_dir=str(root))).validate()
        assert result.details["sdd_to_ui_flow"] == 100

    @pytest.mark.asyncio
    async def test_missing_documents(self, project):
        root = project({"01-planning/SRS-app.md": SRS})
        result = await TraceabilityValidator(UIFlowConfig(project_dir=str(root))).validate()

        assert [c.message for c in result.failed] == [
            "SDD document not found",
            "RTM document not found",
        ]
        assert "srs_to_sdd" not in result.details


class TestSDDSections:
    def test_sections_end_at_next_heading(self):
        content = (
            "### SCR-AUTH-001-login\n#### Layout\ntext\n"
            "### SCR-AUTH-002-register\n**按鈕導航**\n"
            "## Appendix\n"
        )
        sections = sdd_sections(content)

        assert list(sections) == ["SCR-AUTH-001", "SCR-AUTH-002"]
        assert "#### Layout" in sections["SCR-AUTH-001"]
        assert "**按鈕導航" not in sections["SCR-AUTH-001"]
        assert "Appendix" not in sections["SCR-AUTH-002"]

    def test_base_id(self):
        assert base_id("SCR-AUTH-001-login") == "SCR-AUTH-001"
        assert base_id("SCR-HOME-002a-detail") == "SCR-HOME-002a"
        assert base_id("index") is None


class TestSDDScreenCoverage:
    @pytest.mark.asyncio
    async def test_complete_screens(self, project):
        root = project(TRACE_PROJECT)
        result = await TraceabilityValidator(UIFlowConfig(project_dir=str(root))).validate()

        assert result.details["sdd_screens"] == 100
        assert result.details["sdd_screen_modules"] == {"AUTH": {"ui": 2, "sdd": 2, "coverage": 100}}
        assert not [c for c in result.checks if c.category == "SDD Screens" and c.status != "passed"]

    @pytest.mark.asyncio
    async def test_iphone_screens_not_counted(self, project):
        root = project({**TRACE_PROJECT, "04-ui-flow/iphone/SCR-AUTH-001-login.html": ""})
        validator = TraceabilityValidator(UIFlowConfig(project_dir=str(root)))
        assert validator.module_screens() == {"SCR-AUTH-001-login": "AUTH", "SCR-AUTH-002-register": "AUTH"}

    @pytest.mark.asyncio
    async def test_gaps(self, project):
        files = dict(TRACE_PROJECT)
        files["02-design/SDD-app.md"] = SDD.replace(
            "**按鈕導航**\n\n| Button | Target |\n|--------|--------|\n| Back | Login |\n", ""
        )
        files["04-ui-flow/home/SCR-HOME-001-main.html"] = ""
        root = project(files)

        result = await TraceabilityValidator(UIFlowConfig(project_dir=str(root))).validate()
        failed = [c.message for c in result.failed]

        assert "SCR-HOME-001-main not documented in SDD" in failed
        assert "SCR-HOME-001-main has no screenshot in 02-design/images/" in failed
        assert "SCR-AUTH-002-register has no button navigation table" in [w.message for w in result.warnings]
        assert result.details["sdd_screens"] == 67
        assert result.details["sdd_screen_modules"]["HOME"] == {"ui": 1, "sdd": 0, "coverage": 0}


class TestTraceabilityReport:
    @pytest.mark.asyncio
    async def test_report_written(self, project):
        root = project(TRACE_PROJECT)
        result = await TraceabilityValidator(UIFlowConfig(project_dir=str(root))).validate()

        assert result.details["report"] == "traceability-report.json"
        report = json.loads((root / "traceability-report.json").read_text(encoding="utf-8"))
        assert report["passed"] is True
        assert report["documents"]["sdd"] == "02-design/SDD-app.md"
        assert report["coverage"] == {"srs_to_sdd": 100, "sdd_to_ui_flow": 100, "rtm": 100, "sdd_screens": 100}
        assert report["failures"] == []

    @pytest.mark.asyncio
    async def test_report_written_when_documents_missing(self, project):
        root = project({"01-planning/SRS-app.md": SRS})
        await TraceabilityValidator(UIFlowConfig(project_dir=str(root))).validate()

        report = json.loads((root / "traceability-report.json").read_text(encoding="utf-8"))
        assert report["passed"] is False
        assert report["documents"]["rtm"] is None
        assert report["coverage"] == {}
        assert report["failures"] == ["SDD document not found", "RTM document not found"]
