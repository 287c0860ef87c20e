"""Runtime configuration for paramscope - centralized configuration management."""

import copy
import json
import os
from pathlib import Path
from typing import Any

from paramscope.indexer.config import DEFAULT_EXCEPTION_BASES
from paramscope.utils.constants import (
    CONFIG_FILE_NAME,
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_WORKERS,
    ENV_PREFIX,
    OUTPUT_DIR,
    RAW_DIR,
)
from paramscope.utils.helpers import load_json_file
from paramscope.utils.logging import logger

DEFAULTS = {
    "paths": {
        "controllers_dir": "app/controllers",
        "helpers_dir": "app/helpers",
        "views_dir": "app/views",
        "routes_table": "routes.txt",
        "endpoints_json": str(RAW_DIR / "endpoints.json"),
    },
    "limits": {
        "max_file_size": DEFAULT_MAX_FILE_SIZE,
        "workers": DEFAULT_WORKERS,
    },
    "analysis": {
        "ignored_macros": [],
        "exception_bases": sorted(DEFAULT_EXCEPTION_BASES),
    },
}


def load_runtime_config(root: str = ".") -> dict[str, Any]:
    """
    Load runtime configuration from .paramscope/config.json and environment variables.

    Config priority (highest to lowest):
    1. Environment variables (PARAMSCOPE_<SECTION>_<KEY>)
    2. .paramscope/config.json file
    3. Built-in defaults

    Args:
        root: Root directory to look for config file

    Returns:
        Configuration dictionary with merged values
    """
    cfg = copy.deepcopy(DEFAULTS)

    path = Path(root) / OUTPUT_DIR.name / CONFIG_FILE_NAME
    try:
        if path.exists():
            user = load_json_file(path)

            if isinstance(user, dict):
                for section in cfg:
                    if section in user and isinstance(user[section], dict):
                        for key, value in user[section].items():
                            if key in cfg[section] and isinstance(value, type(cfg[section][key])):
                                cfg[section][key] = value
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Could not load config file from {path}: {e}")
        logger.info("Continuing with default configuration")

    for section in cfg:
        for key in cfg[section]:
            env_var = f"{ENV_PREFIX}_{section.upper()}_{key.upper()}"
            if env_var in os.environ:
                value = os.environ[env_var]
                try:
                    default_value = cfg[section][key]
                    if isinstance(default_value, int):
                        cfg[section][key] = int(value)
                    elif isinstance(default_value, list):
                        cfg[section][key] = [v.strip() for v in value.split(",") if v.strip()]
                    else:
                        cfg[section][key] = value
                except ValueError as e:
                    logger.warning(
                        f"Invalid value for environment variable {env_var}: '{value}' - {e}"
                    )
                    logger.info(f"Using default value: {cfg[section][key]}")

    return cfg
