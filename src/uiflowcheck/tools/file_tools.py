from __future__ import annotations

"""File access for UI flow projects."""

import fnmatch
import os
from pathlib import Path

import aiofiles

SCREEN_PATTERN = "SCR-*.html"


class ProjectFiles:
    """File operations scoped to a UI flow project.

    All paths are relative to the project root and validated against it.
    Returned paths use forward slashes regardless of platform.
    """

    def __init__(self, project_dir: str | Path = ".") -> None:
        self.project_dir = Path(project_dir).resolve()

    def _validate_path(self, path: str | Path) -> Path:
        """Validate and resolve path within the project directory."""
        resolved = (self.project_dir / path).resolve()
        if resolved != self.project_dir and not str(resolved).startswith(str(self.project_dir) + os.sep):
            raise ValueError(f"Path {path} is outside project directory")
        return resolved

    def relative(self, path: Path) -> str:
        """Project-relative POSIX path for an absolute path."""
        return path.resolve().relative_to(self.project_dir).as_posix()

    def resolve(self, path: str | Path) -> Path:
        return self._validate_path(path)

    async def read_text(self, path: str | Path) -> str:
        """Read contents of a file."""
        file_path = self._validate_path(path)
        if not file_path.is_file():
            raise FileNotFoundError(f"File not found: {path}")

        async with aiofiles.open(file_path, "r", encoding="utf-8", errors="replace") as f:
            return await f.read()

    async def read_optional(self, path: str | Path) -> str | None:
        """Read a file, returning None when it does not exist."""
        try:
            return await self.read_text(path)
        except FileNotFoundError:
            return None

    async def write_text(self, path: str | Path, content: str) -> Path:
        """Write content to a file (create or overwrite)."""
        file_path = self._validate_path(path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        async with aiofiles.open(file_path, "w", encoding="utf-8") as f:
            await f.write(content)

        return file_path

    def exists(self, path: str | Path) -> bool:
        """Check if a file exists inside the project."""
        try:
            return self._validate_path(path).exists()
        except ValueError:
            return False

    def list_html(self, dirs: list[str], exclude: list[str] | None = None) -> list[str]:
        """List .html files directly inside each directory.

        Files whose relative path contains any exclude pattern are skipped.
        Missing directories are ignored.
        """
        exclude = exclude or []
        found: list[str] = []
        seen: set[str] = set()

        for directory in dirs:
            try:
                dir_path = self._validate_path(directory)
            except ValueError:
                continue
            if not dir_path.is_dir():
                continue

            for entry in sorted(dir_path.iterdir()):
                if not entry.is_file() or not entry.name.endswith(".html"):
                    continue
                relative = self.relative(entry)
                if relative in seen:
                    continue
                if any(pattern in relative for pattern in exclude):
                    continue
                seen.add(relative)
                found.append(relative)

        return found

    def find_screens(self, directory: str = ".", exclude_prefixes: list[str] | None = None) -> list[str]:
        """Recursively find SCR-*.html screens below a directory."""
        exclude_prefixes = exclude_prefixes or []
        base = self._validate_path(directory)
        if not base.is_dir():
            return []

        screens: list[str] = []
        for root, dirnames, filenames in os.walk(base):
            dirnames.sort()
            for filename in sorted(filenames):
                if not fnmatch.fnmatchcase(filename, SCREEN_PATTERN):
                    continue
                relative = self.relative(Path(root) / filename)
                if any(relative.startswith(prefix) for prefix in exclude_prefixes):
                    continue
                screens.append(relative)

        return screens

    def module_screens(self, folder: str) -> list[str]:
        """SCR-*.html screens directly inside one module folder."""
        try:
            dir_path = self._validate_path(folder)
        except ValueError:
            return []
        if not dir_path.is_dir():
            return []

        return [
            self.relative(entry)
            for entry in sorted(dir_path.iterdir())
            if entry.is_file() and fnmatch.fnmatchcase(entry.name, SCREEN_PATTERN)
        ]
