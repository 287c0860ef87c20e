"""Ruby file extractor - classify controllers, concerns and helpers."""

from pathlib import Path
from typing import Any

from paramscope.ast_extractors.rails_impl import DeclarationClassifier
from paramscope.indexer.config import DEFAULT_EXCEPTION_BASES, RUBY_EXTENSIONS
from paramscope.utils.logging import logger

from . import BaseExtractor


class RubyExtractor(BaseExtractor):
    """Extractor for Ruby source files."""

    def __init__(self, root_path: Path, ast_parser: Any | None = None, config: dict[str, Any] | None = None):
        super().__init__(root_path, ast_parser, config)
        analysis = self.config.get("analysis", {})
        self.ignored_macros = list(analysis.get("ignored_macros", []))
        self.exception_bases = list(analysis.get("exception_bases", DEFAULT_EXCEPTION_BASES))

    def supported_extensions(self) -> list[str]:
        return list(RUBY_EXTENSIONS)

    def extract(self, file_info: dict[str, Any], tree: Any) -> dict[str, Any]:
        """Classify a parsed Ruby file.

        A fresh classifier is built per file, so extraction is safe to run
        from worker threads.

        Raises:
            ClassificationError: The file holds an unsupported shape
        """
        classifier = DeclarationClassifier(
            ignored_macros=self.ignored_macros,
            exception_bases=self.exception_bases,
        )
        declarations = classifier.classify(tree)

        logger.debug(
            f"Classified {file_info['path']} -> "
            + (", ".join(f"{type(d).__name__} {d.qualified_name}" for d in declarations) or "nothing")
        )
        return {"declarations": declarations}
