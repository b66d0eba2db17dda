"""Shared fixtures for building UI flow projects on disk."""

from pathlib import Path

import pytest

NOTIFY = '<script src="../shared/notify-parent.js"></script>'


def write_files(root, files: dict[str, str]) -> None:
    for relative, content in files.items():
        path = Path(root) / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def screen(body: str, title: str = "Screen", notify: bool = True) -> str:
    script = NOTIFY if notify else ""
    return f"<html><head><title>{title}</title></head><body>\n{body}\n{script}</body></html>\n"


@pytest.fixture
def project(tmp_path):
    """Empty project directory plus a writer for its files."""

    def write(files: dict[str, str]) -> Path:
        write_files(tmp_path, files)
        return tmp_path

    write.root = tmp_path
    return write
