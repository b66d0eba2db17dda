"""Tests for the UI flow validators."""

import json

import pytest

from conftest import screen
from uiflowcheck.config import DEFAULT_MODULES, UIFlowConfig
from uiflowcheck.validators import (
    ConsistencyValidator,
    IframeSrcValidator,
    IndexDataValidator,
    StructureValidator,
    TemplateVariablesValidator,
    load_standards,
)
from uiflowcheck.validators.index_data import parse_index
from uiflowcheck.validators.template_variables import find_placeholders


def config_for(root, **kwargs) -> UIFlowConfig:
    return UIFlowConfig(project_dir=str(root), **kwargs)


def messages(result) -> list[str]:
    return [c.message for c in result.failed]


IFRAME_PROJECT = {
    "auth/SCR-AUTH-001-login.html": screen("login"),
    "auth/SCR-AUTH-002-register.html": screen("register"),
    "iphone/SCR-AUTH-001-login.html": screen("login"),
    "iphone/SCR-AUTH-002-register.html": screen("register"),
    "docs/ui-flow-diagram-ipad.html": (
        '<iframe src="../auth/SCR-AUTH-001-login.html"></iframe>\n'
        '<iframe src="../auth/SCR-AUTH-002-register.html"></iframe>\n'
    ),
    "docs/ui-flow-diagram-iphone.html": (
        '<iframe src="../iphone/SCR-AUTH-001-login.html"></iframe>\n'
        '<iframe src="../iphone/SCR-AUTH-002-register.html"></iframe>\n'
    ),
    "device-preview.html": (
        "<div class=\"screen-item\" onclick=\"loadScreen('auth/SCR-AUTH-001-login.html')\" "
        'data-iphone="iphone/SCR-AUTH-001-login.html"></div>\n'
        "<div class=\"screen-item\" onclick=\"loadScreen('auth/SCR-AUTH-002-register.html')\" "
        'data-iphone="iphone/SCR-AUTH-002-register.html"></div>\n'
        "<script>loadScreen('auth/SCR-AUTH-001-login.html');</script>\n"
        '<iframe id="preview-iframe-ipad" src="auth/SCR-AUTH-001-login.html"></iframe>\n'
    ),
}


class TestIframeSrcValidator:
    @pytest.mark.asyncio
    async def test_consistent_project_passes(self, project):
        root = project(IFRAME_PROJECT)
        result = await IframeSrcValidator(config_for(root)).validate()

        assert result.success, messages(result)
        assert result.details["actual_screens"] == {"ipad": 2, "iphone": 2}
        assert result.details["results"]["device_preview"]["total"] == 2
        assert not (root / "workspace" / "iframe-src-error-log.json").exists()

    @pytest.mark.asyncio
    async def test_missing_src_fails_and_logs(self, project):
        files = dict(IFRAME_PROJECT)
        files["docs/ui-flow-diagram-ipad.html"] += '<iframe src="../auth/SCR-AUTH-009-gone.html"></iframe>\n'
        root = project(files)

        result = await IframeSrcValidator(config_for(root)).validate()

        assert not result.success
        assert "iframe src: missing auth/SCR-AUTH-009-gone.html" in messages(result)
        assert any(m.startswith("Screen counts differ") for m in messages(result))

        log = json.loads((root / "workspace" / "iframe-src-error-log.json").read_text(encoding="utf-8"))
        assert log["phase"] == "iframe-src-validation"
        assert log["actualScreenCount"] == {"ipad": 2, "iphone": 2}
        assert log["results"]["ipad_diagram"]["missing"] == ["auth/SCR-AUTH-009-gone.html"]

    @pytest.mark.asyncio
    async def test_missing_files_fail(self, project):
        root = project({"auth/SCR-AUTH-001-login.html": screen("login")})
        result = await IframeSrcValidator(config_for(root)).validate()

        assert "File not found: docs/ui-flow-diagram-ipad.html" in messages(result)
        assert "File not found: device-preview.html" in messages(result)
        assert result.details["results"]["device_preview"]["missing"] == ["FILE_NOT_FOUND"]


INDEX_HTML = """
<p class="text-sm">UI/UX 覆蓋率</p>
<p class="text-2xl font-bold">{coverage}%</p>
<p class="text-sm">iPad</p><p class="text-xl font-bold">{ipad}</p>
<p class="text-sm">iPhone</p><p class="text-xl font-bold">{iphone}</p>
<div class="legend"><span>AUTH ({auth})</span><span>HOME (1)</span></div>
"""

INDEX_SCREENS = {
    "auth/SCR-AUTH-001-login.html": "",
    "auth/SCR-AUTH-002-register.html": "",
    "home/SCR-HOME-001-main.html": "",
    "iphone/SCR-AUTH-001-login.html": "",
}


class TestIndexDataValidator:
    def test_parse_index(self):
        shown = parse_index(INDEX_HTML.format(coverage=100, ipad=3, iphone=1, auth=2), ["AUTH", "HOME", "VOCAB"])
        assert shown["coverage"] == 100
        assert shown["ipad_total"] == 3
        assert shown["iphone_total"] == 1
        assert shown["modules"] == {"AUTH": 2, "HOME": 1, "VOCAB": None}

    @pytest.mark.asyncio
    async def test_matching_index_passes(self, project):
        root = project({**INDEX_SCREENS, "index.html": INDEX_HTML.format(coverage=100, ipad=3, iphone=1, auth=2)})
        result = await IndexDataValidator(config_for(root)).validate()

        assert result.success, messages(result)
        assert result.details["actual"]["ipad_total"] == 3
        # modules without screens and without a legend entry only warn
        assert any("VOCAB" in w.message for w in result.warnings)

    @pytest.mark.asyncio
    async def test_mismatches_fail(self, project):
        root = project({**INDEX_SCREENS, "index.html": INDEX_HTML.format(coverage=80, ipad=5, iphone=1, auth=4)})
        result = await IndexDataValidator(config_for(root)).validate()

        failed = messages(result)
        assert "iPad total mismatch: index.html shows 5, actual 3" in failed
        assert "Coverage mismatch: index.html shows 80%, expected 100%" in failed
        assert "AUTH mismatch: index.html shows 4, actual 2" in failed

    @pytest.mark.asyncio
    async def test_unlisted_module_with_screens_warns(self, project):
        root = project({
            **INDEX_SCREENS,
            "vocab/SCR-VOCAB-001-list.html": "",
            "index.html": INDEX_HTML.format(coverage=100, ipad=4, iphone=1, auth=2),
        })
        result = await IndexDataValidator(config_for(root)).validate()
        assert result.success, messages(result)
        assert "VOCAB: 1 screens but not listed in module legend" in [w.message for w in result.warnings]

    @pytest.mark.asyncio
    async def test_missing_index_fails(self, project):
        root = project(INDEX_SCREENS)
        result = await IndexDataValidator(config_for(root)).validate()
        assert messages(result) == ["index.html does not exist"]


class TestTemplateVariablesValidator:
    def test_find_placeholders(self):
        assert find_placeholders("a\n{{PROJECT_NAME}} {{lower}}\n{{TOTAL_SCREENS}}") == [
            ("PROJECT_NAME", 2),
            ("TOTAL_SCREENS", 3),
        ]

    @pytest.mark.asyncio
    async def test_unreplaced_variables_fail(self, project):
        root = project({
            "index.html": "<html>\n<title>{{PROJECT_NAME}}</title>",
            "auth/SCR-AUTH-001-login.html": "<p>{{WELCOME_TEXT}}</p>",
        })
        result = await TemplateVariablesValidator(config_for(root)).validate()

        assert not result.success
        assert "Line 2: {{PROJECT_NAME}} not replaced (project name)" in messages(result)
        assert "Line 1: {{WELCOME_TEXT}} not replaced (custom variable)" in messages(result)
        assert result.details["files_checked"] == 2
        assert set(result.details["unreplaced"]) == {"index.html", "auth/SCR-AUTH-001-login.html"}

    @pytest.mark.asyncio
    async def test_clean_project_passes(self, project):
        root = project({"index.html": "<html></html>", "iphone/SCR-AUTH-001-login.html": "<p>Hi</p>"})
        result = await TemplateVariablesValidator(config_for(root)).validate()

        assert result.success
        assert result.passed_checks[0].message == "No unreplaced variables in 2 files"


THEME_CSS = "\n".join(f".badge-{m.id.lower()} {{ background: {m.color}; }}" for m in DEFAULT_MODULES)

IPHONE_DIAGRAM = """
<style>
.device-frame { width: 120px; height: 260px; }
.screen-frame iframe { transform: scale(0.305); }
.notch { width: 40px; height: 6px; }
</style>
<div class="device-switcher"><a href="ui-flow-diagram-ipad.html">iPad</a></div>
<div class="zoom-controls"></div>
<div class="flow-container">
  <div class="screen-card device-frame"></div>
</div>
<script>function openScreen(path) { location.href = 'device-preview.html?screen=' + path; }</script>
"""

IPAD_DIAGRAM = """
<style>
.device-frame { width: 200px; height: 140px; }
.screen-frame iframe { transform: scale(0.168); }
.camera { border-radius: 50%; }
</style>
<div class="device-switcher"><a href="ui-flow-diagram.html">iPhone</a></div>
"""

CONSISTENT_PROJECT = {
    "index.html": "<html></html>",
    "device-preview.html": (
        '<div class="screen-item"></div>'
        "<script>const params = new URLSearchParams(location.search);</script>"
    ),
    "docs/ui-flow-diagram.html": IPHONE_DIAGRAM,
    "docs/ui-flow-diagram-ipad.html": IPAD_DIAGRAM,
    "shared/project-theme.css": THEME_CSS,
    "shared/notify-parent.js": "",
}


class TestConsistencyValidator:
    @pytest.mark.asyncio
    async def test_consistent_project_passes(self, project, monkeypatch):
        monkeypatch.setenv("HOME", str(project.root / "home-dir"))
        root = project(CONSISTENT_PROJECT)
        result = await ConsistencyValidator(config_for(root)).validate()

        assert result.success, messages(result)
        assert result.details["standards_source"] == "built-in"
        assert not result.warnings

    @pytest.mark.asyncio
    async def test_project_standards_file(self, project):
        standards = {"iphone_frame": {"width": "130px", "height": "260px", "scale": "scale(0.305)"}}
        root = project({**CONSISTENT_PROJECT, "standards.json": json.dumps(standards)})
        result = await ConsistencyValidator(config_for(root)).validate()

        assert "Frame width should be 130px" in messages(result)
        assert result.details["standards_source"].endswith("standards.json")

    @pytest.mark.asyncio
    async def test_legend_in_diagram_fails(self, project):
        files = dict(CONSISTENT_PROJECT)
        files["docs/ui-flow-diagram-ipad.html"] += '<div class="legend">AUTH (3)</div>'
        root = project(files)
        result = await ConsistencyValidator(config_for(root)).validate()

        assert (
            "docs/ui-flow-diagram-ipad.html contains a module legend - it belongs in index.html"
            in messages(result)
        )

    @pytest.mark.asyncio
    async def test_missing_files(self, project):
        root = project({"index.html": ""})
        result = await ConsistencyValidator(config_for(root)).validate()

        failed = messages(result)
        assert "device-preview.html missing" in failed
        assert "docs/ui-flow-diagram.html not found" in failed
        assert "Module colors not defined" in failed
        assert any(w.message == "shared/notify-parent.js missing (optional)" for w in result.warnings)

    def test_explicit_standards_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_standards(tmp_path, tmp_path / "nope.json")


class TestStructureValidator:
    @pytest.mark.asyncio
    async def test_structure(self, project):
        root = project({
            "auth/SCR-AUTH-001-login.html": screen("login"),
            "index.html": (
                '<p>Coverage</p><p class="big">100%</p>'
                '<a href="auth/SCR-AUTH-001-login.html">Login</a>'
            ),
            "docs/ui-flow-diagram.html": '<div class="flow-container"></div>',
            "docs/ui-flow-diagram-ipad.html": '<div class="flow-container"></div>',
        })
        config = config_for(root, expected_screens={"AUTH": ["SCR-AUTH-001-login", "SCR-AUTH-002-register"]})
        result = await StructureValidator(config).validate()

        assert messages(result) == ["AUTH: missing auth/SCR-AUTH-002-register.html"]
        assert result.details["screens"]["coverage"] == 50.0
        passed = [c.message for c in result.passed_checks]
        assert "Coverage shows 100%" in passed
        assert "1 screen links valid" in passed
        warned = [w.message for w in result.warnings]
        assert "docs/ui-flow-diagram-iphone.html missing (optional)" in warned
        assert "shared/project-theme.css missing" in warned

    @pytest.mark.asyncio
    async def test_broken_index(self, project):
        root = project({
            "index.html": (
                '<p>覆蓋率</p><p class="big">60%</p>'
                '<a href="home/SCR-HOME-001-main.html">Home</a>'
                "<p>尚未產生畫面</p>"
            ),
            "docs/ui-flow-diagram.html": "<title>{{PROJECT_NAME}}</title>",
        })
        result = await StructureValidator(config_for(root)).validate()

        failed = messages(result)
        assert "Coverage shows 60%" in failed
        assert "Broken screen link: home/SCR-HOME-001-main.html" in failed
        assert "Contains placeholder text" in failed
        assert "docs/ui-flow-diagram.html has unreplaced variables: {{PROJECT_NAME}}" in failed
        assert "docs/ui-flow-diagram-ipad.html missing" in failed
        assert any("No expected screens configured" in w.message for w in result.warnings)
