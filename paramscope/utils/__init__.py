"""paramscope utilities package."""

from .constants import ERROR_LOG_FILE, OUTPUT_DIR, RAW_DIR
from .error_handler import handle_exceptions
from .exit_codes import ExitCodes
from .helpers import load_json_file, normalize_path, save_json_file
from .logging import logger

__all__ = [
    "OUTPUT_DIR",
    "ERROR_LOG_FILE",
    "RAW_DIR",
    "handle_exceptions",
    "ExitCodes",
    "load_json_file",
    "normalize_path",
    "save_json_file",
    "logger",
]
