"""Centralized constants for the paramscope utils package.

Single source of truth for output paths and environment variable names used
across utility modules.
"""

from pathlib import Path

# ============================================================================
# OUTPUT DIRECTORIES
# ============================================================================

# Primary output directory for all paramscope artifacts
OUTPUT_DIR = Path("./.paramscope")

# Log files
ERROR_LOG_FILE = OUTPUT_DIR / "error.log"

# Output subdirectories
RAW_DIR = OUTPUT_DIR / "raw"
CONFIG_FILE_NAME = "config.json"

# ============================================================================
# FILE PROCESSING LIMITS
# ============================================================================

# Maximum file size to analyze (default: 2MB)
DEFAULT_MAX_FILE_SIZE = 2 * 1024 * 1024

# Worker threads used for per-file classification
DEFAULT_WORKERS = 4

# ============================================================================
# ENVIRONMENT VARIABLES
# ============================================================================

ENV_PREFIX = "PARAMSCOPE"
