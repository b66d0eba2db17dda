from __future__ import annotations

"""Pydantic models and schemas."""

from uiflowcheck.models.schemas import (
    CheckStatus,
    ClickableElement,
    IssueType,
    NavigationIssue,
    NavigationReport,
    RunStatus,
    ScreenResult,
    SuiteEntry,
    SuiteResult,
    TargetKind,
    TargetResolution,
    ValidationCheck,
    ValidatorResult,
)

__all__ = [
    "CheckStatus",
    "ClickableElement",
    "IssueType",
    "NavigationIssue",
    "NavigationReport",
    "RunStatus",
    "ScreenResult",
    "SuiteEntry",
    "SuiteResult",
    "TargetKind",
    "TargetResolution",
    "ValidationCheck",
    "ValidatorResult",
]
