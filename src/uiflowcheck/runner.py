"""Runs several validators concurrently and collects a suite result."""

from __future__ import annotations

import asyncio
import logging
import time

from uiflowcheck.config import UIFlowConfig
from uiflowcheck.models.schemas import RunStatus, SuiteEntry, SuiteResult
from uiflowcheck.navigation.validator import NavigationValidator
from uiflowcheck.tools.file_tools import ProjectFiles
from uiflowcheck.validators import (
    ConsistencyValidator,
    IframeSrcValidator,
    IndexDataValidator,
    StructureValidator,
    TemplateVariablesValidator,
    TraceabilityValidator,
    Validator,
)

logger = logging.getLogger(__name__)

VALIDATORS: dict[str, type[Validator]] = {
    "structure": StructureValidator,
    "navigation": NavigationValidator,
    "consistency": ConsistencyValidator,
    "iframe-src": IframeSrcValidator,
    "index-data": IndexDataValidator,
    "template-variables": TemplateVariablesValidator,
    "traceability": TraceabilityValidator,
}

DEFAULT_ORDER = [
    "structure",
    "navigation",
    "consistency",
    "iframe-src",
    "index-data",
    "template-variables",
]


def create_validator(name: str, config: UIFlowConfig, files: ProjectFiles | None = None) -> Validator:
    """Instantiate a registered validator by name."""
    try:
        validator_cls = VALIDATORS[name]
    except KeyError:
        raise ValueError(
            f"Unknown validator: {name} (available: {', '.join(VALIDATORS)})"
        ) from None
    return validator_cls(config, files)


class ValidationSuite:
    """Runs validators in parallel, isolating each one.

    A validator that raises is reported with status ``error``; the others
    still complete.

    Example usage:
        suite = ValidationSuite(UIFlowConfig(project_dir="./ui-flow"))
        result = await suite.run(only=["navigation", "index-data"])
        for entry in result.entries:
            print(entry.name, entry.status.value)
    """

    def __init__(self, config: UIFlowConfig, files: ProjectFiles | None = None) -> None:
        self.config = config
        self.files = files or ProjectFiles(config.project_dir)

    async def _run_one(self, name: str) -> SuiteEntry:
        start = time.time()
        try:
            validator = create_validator(name, self.config, self.files)
            result = await validator.validate()
        except Exception as e:
            logger.exception("Validator %s raised", name)
            return SuiteEntry(
                name=name,
                status=RunStatus.ERROR,
                duration_ms=(time.time() - start) * 1000,
                error=str(e),
            )

        return SuiteEntry(
            name=name,
            status=RunStatus.PASSED if result.success else RunStatus.FAILED,
            duration_ms=(time.time() - start) * 1000,
            summary=result.summary,
        )

    async def run(
        self,
        only: list[str] | None = None,
        skip: list[str] | None = None,
    ) -> SuiteResult:
        """Run the selected validators.

        Args:
            only: Validator names to run (default order when omitted)
            skip: Names reported as skipped without running

        Returns:
            SuiteResult with one entry per selected validator, in order
        """
        names = list(only) if only else list(DEFAULT_ORDER)
        for name in names:
            if name not in VALIDATORS:
                raise ValueError(f"Unknown validator: {name} (available: {', '.join(VALIDATORS)})")
        skipped = set(skip or [])

        start = time.time()
        to_run = [name for name in names if name not in skipped]
        logger.info("Running %d validators in parallel", len(to_run))
        results = await asyncio.gather(*(self._run_one(name) for name in to_run))
        by_name = dict(zip(to_run, results))

        entries = [
            by_name.get(name) or SuiteEntry(name=name, status=RunStatus.SKIPPED, summary="skipped")
            for name in names
        ]
        suite = SuiteResult(
            project_dir=str(self.files.project_dir),
            entries=entries,
            total_duration_ms=(time.time() - start) * 1000,
        )

        logger.info(
            "Suite complete: %d validators, %d passed, %.0fms total",
            len(entries),
            sum(1 for e in entries if e.status == RunStatus.PASSED),
            suite.total_duration_ms,
        )
        return suite


def format_suite(result: SuiteResult) -> str:
    """Console table of a suite run."""
    labels = {
        RunStatus.PASSED: "PASS",
        RunStatus.FAILED: "FAIL",
        RunStatus.ERROR: "ERR ",
        RunStatus.SKIPPED: "SKIP",
    }
    lines = [f"Validation suite: {result.project_dir}", ""]
    for entry in result.entries:
        detail = entry.error if entry.status == RunStatus.ERROR else entry.summary
        lines.append(f"  [{labels[entry.status]}] {entry.name:<20} {detail} ({entry.duration_ms:.0f}ms)")
    lines.append("")
    lines.append("ALL PASSED" if result.success else "FAILED")
    return "\n".join(lines)
