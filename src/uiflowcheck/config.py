from __future__ import annotations

"""Configuration for uiflowcheck."""

import os
from pathlib import Path

from pydantic import BaseModel, Field


class ModuleSpec(BaseModel):
    """A UI flow module and the folder its screens live in."""

    id: str
    folder: str
    name: str = ""
    color: str = "#64748B"
    icon: str = "📄"


DEFAULT_MODULES: list[ModuleSpec] = [
    ModuleSpec(id="AUTH", folder="auth", name="Authentication", color="#6366F1", icon="🔐"),
    ModuleSpec(id="ONBOARD", folder="onboard", name="Onboarding", color="#8B5CF6", icon="👋"),
    ModuleSpec(id="HOME", folder="home", name="Home", color="#F59E0B", icon="🏠"),
    ModuleSpec(id="VOCAB", folder="vocab", name="Vocabulary", color="#10B981", icon="📖"),
    ModuleSpec(id="SENTENCE", folder="sentence", name="Sentences", color="#0EA5E9", icon="💬"),
    ModuleSpec(id="TRAIN", folder="train", name="Training", color="#3B82F6", icon="🎯"),
    ModuleSpec(id="REPORT", folder="report", name="Reports", color="#EC4899", icon="📊"),
    ModuleSpec(id="PROGRESS", folder="progress", name="Progress", color="#22C55E", icon="📈"),
    ModuleSpec(id="PARENT", folder="parent", name="Parent", color="#14B8A6", icon="👨‍👩‍👧"),
    ModuleSpec(id="ENGAGE", folder="engage", name="Engagement", color="#F97316", icon="🏆"),
    ModuleSpec(id="SOCIAL", folder="social", name="Social", color="#A855F7", icon="🤝"),
    ModuleSpec(id="PROFILE", folder="profile", name="Profile", color="#EF4444", icon="👤"),
    ModuleSpec(id="SETTING", folder="setting", name="Settings", color="#64748B", icon="⚙️"),
    ModuleSpec(id="COMMON", folder="common", name="Common", color="#78716C", icon="🔧"),
]


class UIFlowConfig(BaseModel):
    """Main configuration for a UI flow project."""

    project_dir: str = "."
    modules: list[ModuleSpec] = Field(default_factory=lambda: [m.model_copy() for m in DEFAULT_MODULES])

    # Navigation scan settings
    extra_scan_dirs: list[str] = Field(default_factory=lambda: ["iphone"])
    exclude_patterns: list[str] = Field(
        default_factory=lambda: [
            "node_modules",
            "shared",
            "docs",
            "screenshots",
            "device-preview.html",
            "screen-template",
        ]
    )
    external_prefixes: list[str] = Field(
        default_factory=lambda: ["http://", "https://", "mailto:", "tel:", "javascript:"]
    )

    # Output locations (relative to project_dir)
    report_name: str = "NAVIGATION-VALIDATION-REPORT.md"
    error_log_dir: str = "workspace"

    # Structure check: module id -> expected screen stems
    expected_screens: dict[str, list[str]] = Field(default_factory=dict)
    standards_path: str | None = None

    @property
    def project_path(self) -> Path:
        return Path(self.project_dir)

    def get_module(self, module_id: str) -> ModuleSpec | None:
        """Look up a module by id (case-insensitive)."""
        wanted = module_id.upper()
        for module in self.modules:
            if module.id == wanted:
                return module
        return None

    def scan_dirs(self, module_id: str | None = None) -> list[str]:
        """Directories scanned for screens, optionally restricted to one module."""
        if module_id:
            module = self.get_module(module_id)
            if module is None:
                raise ValueError(f"Unknown module: {module_id}")
            return [module.folder]
        return ["."] + [m.folder for m in self.modules] + list(self.extra_scan_dirs)

    @classmethod
    def from_env(cls) -> "UIFlowConfig":
        """Load configuration from environment variables."""
        kwargs: dict = {
            "project_dir": os.getenv("UIFLOW_PROJECT_DIR", "."),
            "standards_path": os.getenv("UIFLOW_STANDARDS"),
        }

        # UIFLOW_MODULES="AUTH:auth,HOME:home"
        modules_env = os.getenv("UIFLOW_MODULES")
        if modules_env:
            modules = []
            for pair in modules_env.split(","):
                pair = pair.strip()
                if not pair:
                    continue
                module_id, _, folder = pair.partition(":")
                modules.append(ModuleSpec(id=module_id.upper(), folder=folder or module_id.lower()))
            kwargs["modules"] = modules

        return cls(**kwargs)

    @classmethod
    def from_file(cls, path: str | Path) -> "UIFlowConfig":
        """Load configuration from a JSON file."""
        import json

        path = Path(path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = json.load(f)

        return cls(**data)


def get_default_config() -> UIFlowConfig:
    """Get default configuration, checking config files first."""
    config_paths = [
        Path("uiflow.json"),
        Path(".uiflow.json"),
        Path.home() / ".config" / "uiflowcheck" / "config.json",
    ]

    for path in config_paths:
        if path.exists():
            return UIFlowConfig.from_file(path)

    # Fall back to environment variables
    return UIFlowConfig.from_env()
