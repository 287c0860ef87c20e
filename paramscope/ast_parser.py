"""Ruby parser front end using Tree-sitter.

The analysis core only ever reads the trees produced here. Nodes are shared
references into one parse tree, so work lists can hold them without copying
subtrees.
"""

from pathlib import Path
from typing import Any

from tree_sitter_language_pack import get_parser

from paramscope.indexer.exceptions import ClassificationError
from paramscope.utils.constants import DEFAULT_MAX_FILE_SIZE
from paramscope.utils.logging import logger


class RubyParser:
    """Parses Ruby source into tree-sitter trees."""

    language = "ruby"

    def __init__(self, max_file_size: int = DEFAULT_MAX_FILE_SIZE):
        self.max_file_size = max_file_size

    def parse_source(self, source: str | bytes) -> Any:
        """Parse Ruby source text and return the tree-sitter Tree.

        A fresh parser is used per call, tree-sitter parsers are not safe to
        share between worker threads.
        """
        if isinstance(source, str):
            source = source.encode("utf-8")
        try:
            parser = get_parser(self.language)
        except Exception as e:
            raise RuntimeError(
                f"Failed to load tree-sitter grammar for Ruby: {e}\n"
                "Please try: pip install --force-reinstall tree-sitter-language-pack"
            ) from e
        tree = parser.parse(source)
        if tree.root_node.has_error:
            logger.debug("Ruby source parsed with syntax errors, continuing best-effort")
        return tree

    def parse_file(self, file_path: Path) -> Any:
        """Parse a Ruby file into a tree-sitter Tree."""
        file_path = Path(file_path)
        size = file_path.stat().st_size
        if size >= self.max_file_size:
            raise ClassificationError(
                f"file too large to analyze ({size} bytes, limit {self.max_file_size})"
            )
        with open(file_path, "rb") as f:
            content = f.read()
        return self.parse_source(content)
