from __future__ import annotations

"""Base validator class shared by every UI flow check."""

import logging
from abc import ABC, abstractmethod

from uiflowcheck.config import UIFlowConfig
from uiflowcheck.models.schemas import CheckStatus, ValidationCheck, ValidatorResult
from uiflowcheck.tools.file_tools import ProjectFiles

logger = logging.getLogger(__name__)


class Validator(ABC):
    """Abstract base class for all validators.

    Subclasses implement ``run_checks`` and record findings with
    ``passed``/``fail``/``warn``. Findings are data: a validator only raises
    for programming errors or unreadable projects, never for a failed check.
    """

    name: str = "base"
    description: str = "Base validator"

    def __init__(self, config: UIFlowConfig, files: ProjectFiles | None = None) -> None:
        self.config = config
        self.files = files or ProjectFiles(config.project_dir)
        self._checks: list[ValidationCheck] = []
        self._details: dict = {}

    def passed(self, category: str, message: str) -> None:
        self._checks.append(ValidationCheck(category=category, status=CheckStatus.PASSED, message=message))

    def fail(self, category: str, message: str) -> None:
        logger.debug("[%s] %s: %s", self.name, category, message)
        self._checks.append(ValidationCheck(category=category, status=CheckStatus.FAILED, message=message))

    def warn(self, category: str, message: str) -> None:
        self._checks.append(ValidationCheck(category=category, status=CheckStatus.WARNING, message=message))

    @property
    def has_failures(self) -> bool:
        return any(c.status == CheckStatus.FAILED for c in self._checks)

    @abstractmethod
    async def run_checks(self) -> None:
        """Perform the checks for this validator."""

    def summarize(self, result: ValidatorResult) -> str:
        return (
            f"{len(result.passed_checks)} passed, {len(result.warnings)} warnings, "
            f"{len(result.failed)} failed"
        )

    async def validate(self) -> ValidatorResult:
        """Run the checks and collect a result."""
        self._checks = []
        self._details = {}
        await self.run_checks()

        result = ValidatorResult(validator=self.name, checks=list(self._checks), details=dict(self._details))
        result.summary = self.summarize(result)
        logger.info("%s: %s", self.name, result.summary)
        return result
