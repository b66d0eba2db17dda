"""Requirements traceability across SRS, SDD, RTM and the UI flow."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone

from uiflowcheck.models.schemas import CheckStatus
from uiflowcheck.validators.base import Validator

logger = logging.getLogger(__name__)

REQ_RE = re.compile(r"REQ-[A-Z]+-\d+")
SCR_RE = re.compile(r"SCR-[A-Z]+-\d+(?:-[a-z-]+)?")
SLUG_RE = re.compile(r"-[a-z-]+$")
RTM_ROW_RE = re.compile(r"\|\s*(REQ-[A-Z]+-\d+)\s*\|[^|]*\|\s*(SCR-[A-Z]+-\d+[^|]*)")
SDD_HEADING_RE = re.compile(r"^### (SCR-[A-Z]+-\d+[a-z]?)(?:-[\w-]+)?", re.MULTILINE)
SECTION_RE = re.compile(r"^#{1,3} ", re.MULTILINE)
BASE_ID_RE = re.compile(r"SCR-[A-Z]+-\d+[a-z]?")
NAV_TABLE_MARKER = "**按鈕導航"

PLANNING_DIR = "01-planning"
DESIGN_DIR = "02-design"
UI_FLOW_DIR = "04-ui-flow"
TRACEABILITY_DIR = "07-traceability"
SKIP_DIRS = {"node_modules", "shared", "docs", "screenshots"}
IMAGES_DIR = f"{DESIGN_DIR}/images"
REPORT_NAME = "traceability-report.json"


def extract_ids(content: str, pattern: re.Pattern) -> list[str]:
    """Unique ids in order of first appearance."""
    return list(dict.fromkeys(pattern.findall(content)))


def sdd_sections(content: str) -> dict[str, str]:
    """Text of each ``### SCR-...`` section keyed by base screen id.

    A section runs until the next heading of level three or above.
    """
    sections: dict[str, str] = {}
    for match in SDD_HEADING_RE.finditer(content):
        following = SECTION_RE.search(content, match.end())
        end = following.start() if following else len(content)
        sections.setdefault(match.group(1), content[match.start() : end])
    return sections


def base_id(name: str) -> str | None:
    match = BASE_ID_RE.match(name)
    return match.group(0) if match else None


@dataclass
class TraceDocument:
    """Requirement and screen ids found in one document."""

    path: str | None = None
    requirements: list[str] = field(default_factory=list)
    screens: list[str] = field(default_factory=list)
    mappings: dict[str, list[str]] = field(default_factory=dict)
    sections: dict[str, str] = field(default_factory=dict)


def coverage(total: int, missing: int) -> int:
    return round((total - missing) / total * 100) if total else 100


class TraceabilityValidator(Validator):
    """Every requirement is designed, mapped in the RTM, and every screen exists.

    Works on a requirements project laid out as ``01-planning/SRS-*.md``,
    ``02-design/SDD-*.md``, ``07-traceability/RTM-*.md`` and ``04-ui-flow/``.
    """

    name = "traceability"
    description = "Verifies SRS -> SDD -> RTM -> UI flow traceability"

    def _find(self, directory: str, prefix: str) -> str | None:
        base = self.files.project_dir / directory
        if not base.is_dir():
            return None
        for entry in sorted(base.iterdir()):
            if entry.is_file() and entry.name.startswith(prefix) and entry.suffix == ".md":
                return self.files.relative(entry)
        return None

    async def _load(self, directory: str, prefix: str) -> TraceDocument:
        path = self._find(directory, prefix)
        if path is None:
            return TraceDocument()
        content = await self.files.read_text(path)
        doc = TraceDocument(
            path=path,
            requirements=extract_ids(content, REQ_RE),
            screens=extract_ids(content, SCR_RE),
        )
        if prefix == "RTM-":
            for req, scr in RTM_ROW_RE.findall(content):
                doc.mappings.setdefault(req, []).append(scr.strip())
        elif prefix == "SDD-":
            doc.sections = sdd_sections(content)
        return doc

    def ui_flow_screens(self) -> list[str]:
        base = self.files.project_dir / UI_FLOW_DIR
        if not base.is_dir():
            return []
        screens = []
        for path in sorted(base.rglob("SCR-*.html")):
            if SKIP_DIRS.intersection(path.relative_to(base).parts[:-1]):
                continue
            screens.append(path.stem)
        return screens

    def module_screens(self) -> dict[str, str]:
        """iPad screen name -> module id for screens inside module folders."""
        base = self.files.project_dir / UI_FLOW_DIR
        if not base.is_dir():
            return {}
        screens = {}
        for path in sorted(base.rglob("SCR-*.html")):
            folders = path.relative_to(base).parts[:-1]
            if not folders or folders[0] == "iphone" or SKIP_DIRS.intersection(folders):
                continue
            screens[path.stem] = folders[0].upper()
        return screens

    def screenshot_ids(self) -> set[str]:
        """Base screen ids of every ``02-design/images/<module>/*.png``."""
        base = self.files.project_dir / IMAGES_DIR
        if not base.is_dir():
            return set()
        ids = set()
        for module_dir in base.iterdir():
            if not module_dir.is_dir():
                continue
            for image in module_dir.glob("*.png"):
                screen_id = base_id(image.stem)
                if screen_id:
                    ids.add(screen_id)
        return ids

    def _srs_to_sdd(self, srs: TraceDocument, sdd: TraceDocument) -> None:
        category = "SRS -> SDD"
        missing = [req for req in srs.requirements if req not in sdd.requirements]
        extra = [req for req in sdd.requirements if req not in srs.requirements]
        for req in missing:
            self.fail(category, f"{req} has no design coverage")
        for req in extra:
            self.warn(category, f"{req} appears in SDD but not in SRS")
        pct = coverage(len(srs.requirements), len(missing))
        self._details["srs_to_sdd"] = pct
        if not missing:
            self.passed(category, f"{len(srs.requirements)} requirements covered ({pct}%)")

    def _sdd_to_ui_flow(self, sdd: TraceDocument, screen_ids: list[str]) -> None:
        category = "SDD -> UI Flow"
        missing = []
        for scr in sdd.screens:
            prefix = SLUG_RE.sub("", scr)
            if not any(sid == scr or sid.startswith(prefix) for sid in screen_ids):
                missing.append(scr)
                self.fail(category, f"{scr} has no UI flow screen")
        pct = coverage(len(sdd.screens), len(missing))
        self._details["sdd_to_ui_flow"] = pct
        if not missing:
            self.passed(category, f"{len(sdd.screens)} designed screens implemented ({pct}%)")

    def _rtm_completeness(self, srs: TraceDocument, sdd: TraceDocument, rtm: TraceDocument) -> None:
        category = "RTM"
        unmapped_reqs = [req for req in srs.requirements if req not in rtm.requirements]
        unmapped_screens = [scr for scr in sdd.screens if scr not in rtm.screens]
        for req in unmapped_reqs:
            self.fail(category, f"{req} missing from RTM")
        for scr in unmapped_screens:
            self.fail(category, f"{scr} missing from RTM")

        total = len(srs.requirements) + len(sdd.screens)
        pct = coverage(total, len(unmapped_reqs) + len(unmapped_screens))
        self._details["rtm"] = pct
        self._details["rtm_mappings"] = len(rtm.mappings)
        if not unmapped_reqs and not unmapped_screens:
            self.passed(category, f"RTM complete ({pct}%)")

    def _sdd_screens(self, sdd: TraceDocument, screens: dict[str, str]) -> None:
        category = "SDD Screens"
        screenshots = self.screenshot_ids()
        modules: dict[str, dict[str, int]] = {}
        undocumented = []

        for name, module in screens.items():
            stats = modules.setdefault(module, {"ui": 0, "sdd": 0})
            stats["ui"] += 1
            screen_id = base_id(name)
            section = sdd.sections.get(screen_id)

            if section is None:
                undocumented.append(name)
                self.fail(category, f"{name} not documented in SDD")
            else:
                stats["sdd"] += 1
                if NAV_TABLE_MARKER not in section:
                    self.warn(category, f"{name} has no button navigation table")
            if screen_id not in screenshots:
                self.fail(category, f"{name} has no screenshot in {IMAGES_DIR}/")

        for stats in modules.values():
            stats["coverage"] = coverage(stats["ui"], stats["ui"] - stats["sdd"])
        pct = coverage(len(screens), len(undocumented))
        self._details["sdd_screens"] = pct
        self._details["sdd_screen_modules"] = dict(sorted(modules.items()))
        if not undocumented:
            self.passed(category, f"{len(screens)} UI flow screens documented in SDD ({pct}%)")

    async def _write_report(self, documents: dict[str, str | None]) -> None:
        report = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "project": str(self.files.project_dir),
            "documents": documents,
            "coverage": {
                key: self._details[key]
                for key in ("srs_to_sdd", "sdd_to_ui_flow", "rtm", "sdd_screens")
                if key in self._details
            },
            "modules": self._details.get("sdd_screen_modules", {}),
            "failures": [c.message for c in self._checks if c.status == CheckStatus.FAILED],
            "passed": not self.has_failures,
        }
        written = await self.files.write_text(REPORT_NAME, json.dumps(report, indent=2, ensure_ascii=False))
        self._details["report"] = REPORT_NAME
        logger.info("Traceability report saved to %s", written)

    async def run_checks(self) -> None:
        srs = await self._load(PLANNING_DIR, "SRS-")
        sdd = await self._load(DESIGN_DIR, "SDD-")
        rtm = await self._load(TRACEABILITY_DIR, "RTM-")

        for label, doc in (("SRS", srs), ("SDD", sdd), ("RTM", rtm)):
            if doc.path is None:
                self.fail("Documents", f"{label} document not found")

        if not self.has_failures:
            self._srs_to_sdd(srs, sdd)
            self._sdd_to_ui_flow(sdd, self.ui_flow_screens())
            self._rtm_completeness(srs, sdd, rtm)
            self._sdd_screens(sdd, self.module_screens())

        await self._write_report({"srs": srs.path, "sdd": sdd.path, "rtm": rtm.path})
