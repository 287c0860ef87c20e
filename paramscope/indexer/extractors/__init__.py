"""Extractor framework for the indexer.

This module defines the BaseExtractor abstract class and the ExtractorRegistry
for dynamic discovery and registration of file-type extractors.

CRITICAL ARCHITECTURE PRINCIPLE:
Extractors are thin adapters. They receive a parsed tree and delegate to the
implementation layer (ast_extractors/*_impl.py), which walks the tree. No
extractor inspects source text with regex.
"""

import importlib
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from paramscope.utils.logging import logger


class BaseExtractor(ABC):
    """Abstract base class for all extractors."""

    def __init__(self, root_path: Path, ast_parser: Any | None = None, config: dict[str, Any] | None = None):
        """Initialize the extractor.

        Args:
            root_path: Project root path
            ast_parser: Parser instance producing trees for extract()
            config: Runtime configuration (see config_runtime)
        """
        self.root_path = root_path
        self.ast_parser = ast_parser
        self.config = config or {}

    @abstractmethod
    def supported_extensions(self) -> list[str]:
        """Return list of file extensions this extractor supports.

        Returns:
            List of file extensions (e.g., ['.rb'])
        """
        pass

    @abstractmethod
    def extract(self, file_info: dict[str, Any], tree: Any) -> dict[str, Any]:
        """Extract all relevant information from a parsed file.

        Args:
            file_info: File metadata dictionary from FileWalker
            tree: Parsed tree-sitter Tree

        Returns:
            Dictionary containing all extracted data
        """
        pass


class ExtractorRegistry:
    """Registry for dynamic discovery and management of extractors.

    Automatically discovers all extractor modules in the extractors/ directory
    and registers them by their supported file extensions.

    Design:
    - One extractor class per file (ruby.py -> RubyExtractor)
    - Extractors register themselves via supported_extensions()
    - No hardcoded mapping - pure discovery pattern
    """

    def __init__(self, root_path: Path, ast_parser: Any | None = None, config: dict[str, Any] | None = None):
        self.root_path = root_path
        self.ast_parser = ast_parser
        self.config = config or {}
        self.extractors: dict[str, BaseExtractor] = {}
        self._discover()

    def _discover(self):
        """Auto-discover and register all extractor modules."""
        extractor_dir = Path(__file__).parent

        for file_path in sorted(extractor_dir.glob("*.py")):
            if file_path.name.startswith("_"):
                continue

            module_name = file_path.stem
            module = importlib.import_module(f".{module_name}", package=__name__)

            for attr_name in dir(module):
                attr = getattr(module, attr_name)
                if isinstance(attr, type) and issubclass(attr, BaseExtractor) and attr is not BaseExtractor:
                    extractor = attr(self.root_path, self.ast_parser, self.config)
                    for ext in extractor.supported_extensions():
                        self.extractors[ext] = extractor
                    logger.debug(f"Registered {attr_name} for {extractor.supported_extensions()}")
                    break

    def get_extractor(self, file_path: str) -> BaseExtractor | None:
        """Get the extractor for a file, matching the longest registered suffix."""
        for ext in sorted(self.extractors, key=len, reverse=True):
            if file_path.endswith(ext):
                return self.extractors[ext]
        return None

    def supported_extensions(self) -> list[str]:
        return list(self.extractors.keys())
