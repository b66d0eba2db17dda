from __future__ import annotations

"""Pydantic schemas for validation results."""

from enum import Enum

from pydantic import BaseModel, Field, computed_field


class IssueType(str, Enum):
    """Kinds of navigation findings."""

    ONCLICK_HREF = "onclick-href"
    HREF = "href"
    EMPTY_HREF = "empty-href"
    EMPTY_ONCLICK = "empty-onclick"
    VOID_ONCLICK_NAVIGATION = "void-onclick-navigation"
    VOID_ONCLICK_WARNING = "void-onclick-warning"
    CLOSE_BUTTON_NO_ONCLICK = "close-button-no-onclick"
    SETTINGS_ROW_NO_ONCLICK = "settings-row-no-onclick"
    BUTTON_NO_ONCLICK = "button-no-onclick"
    CLOSE_ICON_NO_ONCLICK = "close-icon-no-onclick"
    CLICKABLE_ROW_NO_ONCLICK = "clickable-row-no-onclick"
    MISSING_NOTIFY_PARENT = "missing-notify-parent"
    MISSING_POSTMESSAGE_LISTENER = "missing-postmessage-listener"
    MISSING_SIDEBAR_SYNC_FUNCTION = "missing-sidebar-sync-function"
    MISSING_DATA_SCREEN_ATTRIBUTES = "missing-data-screen-attributes"


class TargetKind(str, Enum):
    """How a navigation target was resolved."""

    EXTERNAL = "external"
    ALERT = "alert"
    FILE = "file"
    MATCHED = "matched"
    MISSING = "missing"


class ClickableElement(BaseModel):
    """An interactive element found in a screen."""

    kind: IssueType
    target: str | None = Field(default=None, description="Navigation target, if any")
    raw: str = Field(default="", description="Matched HTML snippet (truncated)")
    line: int = Field(default=0, description="1-based line number")
    is_issue: bool = False
    message: str = ""
    text: str = Field(default="", description="Visible text of the element")
    element_id: str | None = None


class TargetResolution(BaseModel):
    """Result of resolving a navigation target."""

    valid: bool
    kind: TargetKind
    path: str | None = None


class NavigationIssue(BaseModel):
    """A navigation problem attached to a screen."""

    screen: str
    kind: IssueType
    line: int = 0
    message: str
    raw: str = ""
    target: str | None = None
    text: str = ""
    element_id: str | None = None


class ScreenResult(BaseModel):
    """Navigation result for a single screen."""

    screen: str
    total_elements: int = 0
    valid_elements: int = 0
    issues: list[NavigationIssue] = Field(default_factory=list)
    warnings: list[NavigationIssue] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues


class NavigationReport(BaseModel):
    """Result of clickable coverage validation across a project."""

    total_screens: int = 0
    total_elements: int = 0
    valid_elements: int = 0
    invalid_elements: int = 0
    screens: list[ScreenResult] = Field(default_factory=list)
    issues: list[NavigationIssue] = Field(default_factory=list)
    warnings: list[NavigationIssue] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def coverage(self) -> float:
        """Percentage of counted elements with a valid target."""
        if self.total_elements == 0:
            return 100.0
        return round(self.valid_elements / self.total_elements * 100, 1)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def passed(self) -> bool:
        return self.invalid_elements == 0


class CheckStatus(str, Enum):
    """Outcome of a single validation check."""

    PASSED = "passed"
    FAILED = "failed"
    WARNING = "warning"


class ValidationCheck(BaseModel):
    """A single check performed by a validator."""

    category: str
    status: CheckStatus
    message: str


class ValidatorResult(BaseModel):
    """Result from one validator."""

    validator: str
    checks: list[ValidationCheck] = Field(default_factory=list)
    details: dict = Field(default_factory=dict)
    summary: str = ""

    @property
    def failed(self) -> list[ValidationCheck]:
        return [c for c in self.checks if c.status == CheckStatus.FAILED]

    @property
    def warnings(self) -> list[ValidationCheck]:
        return [c for c in self.checks if c.status == CheckStatus.WARNING]

    @property
    def passed_checks(self) -> list[ValidationCheck]:
        return [c for c in self.checks if c.status == CheckStatus.PASSED]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def success(self) -> bool:
        return not self.failed


class RunStatus(str, Enum):
    """Status of a validator inside a suite run."""

    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"
    SKIPPED = "skipped"


class SuiteEntry(BaseModel):
    """One validator's outcome in a suite run."""

    name: str
    status: RunStatus
    duration_ms: float = 0.0
    summary: str = ""
    error: str | None = None


class SuiteResult(BaseModel):
    """Complete result of running the validation suite."""

    project_dir: str
    entries: list[SuiteEntry] = Field(default_factory=list)
    total_duration_ms: float = 0.0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def success(self) -> bool:
        return all(e.status in (RunStatus.PASSED, RunStatus.SKIPPED) for e in self.entries)
