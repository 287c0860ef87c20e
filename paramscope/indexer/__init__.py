"""paramscope indexer package.

This package walks a Rails tree and turns its files into the declaration
model. It includes:
- FileWalker for directory traversal
- Pluggable file-type extractors (Ruby classes/modules, jbuilder views)
- AnalysisOrchestrator (indexer.orchestrator) for the parallel build and
  single-writer merge

ARCHITECTURAL CONTRACT: File Path Responsibility
=================================================
The orchestrator owns file paths. Extractors receive file_info and a parsed
tree and return declarations; implementations under ast_extractors/ only
ever see tree nodes and report line numbers.

The orchestrator is not imported here: it depends on the graph and route
layers, which themselves import indexer.exceptions.
"""

from .core import FileWalker

__all__ = ["FileWalker"]
