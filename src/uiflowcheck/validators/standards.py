from __future__ import annotations

"""Reference standards a generated UI flow is compared against."""

import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

STANDARDS_FILE = "standards.json"


class RequiredFiles(BaseModel):
    root: list[str] = Field(default_factory=lambda: ["index.html", "device-preview.html"])
    docs: list[str] = Field(default_factory=lambda: ["ui-flow-diagram.html", "ui-flow-diagram-ipad.html"])
    shared: list[str] = Field(default_factory=lambda: ["project-theme.css", "notify-parent.js"])


class FrameSpec(BaseModel):
    width: str
    height: str
    scale: str


class NotchSpec(BaseModel):
    width: int = 40
    height: int = 6


class DeviceSwitcher(BaseModel):
    iphone_to_ipad: str = "ui-flow-diagram-ipad.html"
    ipad_to_iphone: str = "ui-flow-diagram.html"


class Standards(BaseModel):
    """Reference values for diagram frames, required files and module styling."""

    required_files: RequiredFiles = Field(default_factory=RequiredFiles)
    iphone_frame: FrameSpec = Field(
        default_factory=lambda: FrameSpec(width="120px", height="260px", scale="scale(0.305)")
    )
    ipad_frame: FrameSpec = Field(
        default_factory=lambda: FrameSpec(width="200px", height="140px", scale="scale(0.168)")
    )
    notch: NotchSpec = Field(default_factory=NotchSpec)
    open_screen_pattern: str = r"openScreen[\s\S]*?device-preview\.html"
    device_switcher: DeviceSwitcher = Field(default_factory=DeviceSwitcher)
    # module id -> color; empty means "use the configured modules"
    module_colors: dict[str, str] = Field(default_factory=dict)
    color_threshold: float = 0.7


def load_standards(project_dir: str | Path, explicit: str | Path | None = None) -> tuple[Standards, str | None]:
    """Find and load standards.json.

    Looks at the explicit path, the project root, then the user config dir.
    Returns built-in defaults (and None as source) when nothing is found.
    """
    if explicit and not Path(explicit).is_file():
        raise FileNotFoundError(f"Standards file not found: {explicit}")

    candidates = [Path(explicit)] if explicit else []
    candidates += [
        Path(project_dir) / STANDARDS_FILE,
        Path.home() / ".config" / "uiflowcheck" / STANDARDS_FILE,
    ]

    for path in candidates:
        if path.is_file():
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            logger.debug("Loaded standards from %s", path)
            return Standards(**data), str(path)

    return Standards(), None
