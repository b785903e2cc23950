"""Filesystem utilities for saved response discovery."""

from __future__ import annotations

from pathlib import Path

INCLUDED_EXTENSIONS = {".html", ".htm", ".xhtml", ".shtml"}
EXCLUDED_DIRECTORIES = {
    "node_modules",
    "vendor",
    ".git",
    "__pycache__",
    "venv",
    ".venv",
}


def collect_source_files(root_path: str) -> list[str]:
    """Collect saved HTML responses from a file or a directory tree.

    Args:
        root_path: A single file, or a directory to scan recursively.

    Returns:
        Absolute file paths. A single file is returned whatever its suffix;
        directory entries are filtered by supported extensions.

    Raises:
        FileNotFoundError: If the path does not exist.
    """
    root = Path(root_path)
    if not root.exists():
        raise FileNotFoundError(f"Scan path does not exist: {root}")
    if root.is_file():
        return [str(root.resolve())]

    discovered_files: list[str] = []
    pending_dirs: list[Path] = [root]

    while pending_dirs:
        current_dir = pending_dirs.pop()
        for entry in current_dir.iterdir():
            if entry.is_dir():
                if entry.name in EXCLUDED_DIRECTORIES:
                    continue
                pending_dirs.append(entry)
                continue

            if entry.is_file() and entry.suffix.lower() in INCLUDED_EXTENSIONS:
                discovered_files.append(str(entry.resolve()))

    return discovered_files
