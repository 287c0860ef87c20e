"""Helper utility functions for paramscope."""

import json
from pathlib import Path
from typing import Any

from .logging import logger


def normalize_path(file_path: Path | str, project_root: Path | str | None = None) -> str:
    """Normalize a file path for reports.

    Converts backslashes to forward slashes and strips the project root so
    reported paths are stable relative paths.

    Examples:
        >>> normalize_path("app\\\\controllers\\\\pages_controller.rb")
        'app/controllers/pages_controller.rb'

        >>> normalize_path("/srv/app/app/models/user.rb", project_root="/srv/app")
        'app/models/user.rb'
    """
    normalized = str(file_path).replace("\\", "/")

    if project_root is not None:
        root_str = str(project_root).replace("\\", "/").rstrip("/")

        if normalized.startswith(root_str + "/"):
            normalized = normalized[len(root_str) + 1 :]
        elif normalized.startswith(root_str):
            normalized = normalized[len(root_str) :]

    return normalized.lstrip("/")


def load_json_file(file_path: Path | str) -> Any:
    """
    Load and parse a JSON file.

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If file contains invalid JSON
    """
    try:
        with open(file_path, encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        logger.error(f"JSON file not found: {file_path}")
        raise
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in file {file_path}: {e}")
        raise


def save_json_file(data: Any, file_path: Path | str) -> None:
    """Save data as JSON to file, creating parent directories."""
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
