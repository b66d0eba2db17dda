from __future__ import annotations

"""Project file access helpers."""

from uiflowcheck.tools.file_tools import ProjectFiles

__all__ = ["ProjectFiles"]
