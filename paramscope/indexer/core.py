"""Core functionality for file system traversal.

This module contains the FileWalker class that collects the Ruby and
jbuilder files of a Rails tree.
"""

import os
from pathlib import Path
from typing import Any

from .config import SKIP_DIRS


def is_text_file(file_path: Path) -> bool:
    """Check if file is text (not binary).

    Args:
        file_path: Path to the file to check

    Returns:
        True if file is text, False if binary
    """
    try:
        with open(file_path, "rb") as f:
            chunk = f.read(8192)
            if b"\0" in chunk:
                return False
            # Try to decode as UTF-8
            try:
                chunk.decode("utf-8")
                return True
            except UnicodeDecodeError:
                return False
    except (FileNotFoundError, PermissionError):
        return False


class FileWalker:
    """Walks configured directories of a project and collects source files."""

    def __init__(self, root_path: Path, extensions: list[str], follow_symlinks: bool = False):
        self.root_path = Path(root_path)
        self.extensions = set(extensions)
        self.follow_symlinks = follow_symlinks
        self.skip_dirs = set(SKIP_DIRS)

        # Stats tracking
        self.stats = {
            "total_files": 0,
            "matched_files": 0,
            "binary_files": 0,
            "skipped_dirs": 0,
        }

    def process_file(self, file: Path, base_dir: Path) -> dict[str, Any] | None:
        """Process a single file and return its info.

        Args:
            file: Path to the file to process
            base_dir: Directory the walk started from

        Returns:
            File info dictionary or None if file should be skipped
        """
        if file.name.startswith("."):
            return None
        if not any(file.name.endswith(ext) for ext in self.extensions):
            return None

        try:
            if not self.follow_symlinks and file.is_symlink():
                return None
        except OSError:
            return None

        if not is_text_file(file):
            self.stats["binary_files"] += 1
            return None

        self.stats["matched_files"] += 1
        return {
            "path": file.relative_to(self.root_path).as_posix(),
            "relative_to_base": file.relative_to(base_dir).as_posix(),
            "abs_path": str(file),
            "ext": file.suffix,
        }

    def walk(self, directory: str | Path = ".") -> tuple[list[dict], dict[str, Any]]:
        """Walk one directory (relative to the root) and collect file information.

        A missing directory yields no files.

        Returns:
            Tuple of (files_list, statistics)
        """
        base_dir = self.root_path / directory
        files = []
        if not base_dir.is_dir():
            return files, self.stats

        for dirpath, dirnames, filenames in os.walk(base_dir, followlinks=self.follow_symlinks):
            skipped = [d for d in dirnames if d in self.skip_dirs or d.startswith(".")]
            self.stats["skipped_dirs"] += len(skipped)
            dirnames[:] = [d for d in dirnames if d not in skipped]

            for filename in filenames:
                self.stats["total_files"] += 1
                file_info = self.process_file(Path(dirpath) / filename, base_dir)
                if file_info:
                    files.append(file_info)

        # Sort by path for deterministic output
        files.sort(key=lambda x: x["path"])

        return files, self.stats
