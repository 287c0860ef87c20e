"""Analysis orchestration logic.

Two phases:

1. Build: every controller, helper and view file is parsed and classified
   in a thread pool. Classification is a pure function of one tree, so
   workers share nothing.
2. Merge: results are folded into the ModelRegistry by this thread alone,
   in walk order, so last-write-wins is deterministic.

Endpoints are resolved only after the merge, against the complete model.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from paramscope.ast_parser import RubyParser
from paramscope.config_runtime import load_runtime_config
from paramscope.graph.registry import ModelRegistry
from paramscope.graph.types import View
from paramscope.routes import Request, load_routes_table
from paramscope.utils.logging import logger

from .config import JBUILDER_EXTENSIONS, RUBY_EXTENSIONS
from .core import FileWalker
from .exceptions import ParamscopeError
from .extractors import ExtractorRegistry


@dataclass
class FileError:
    """A file whose contribution was dropped."""

    path: str
    message: str


@dataclass
class AnalysisResult:
    """Outcome of the build and merge phases."""

    registry: ModelRegistry
    views: dict[tuple[str, str], View] = field(default_factory=dict)
    errors: list[FileError] = field(default_factory=list)
    files_analyzed: int = 0

    @property
    def failed_files(self) -> int:
        return len(self.errors)


@dataclass
class EndpointReport:
    """Resolution outcome for one routed request."""

    request: Request
    params: list[str] = field(default_factory=list)
    fields: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "method": self.request.method.value,
            "uri": self.request.uri,
            "prefix": self.request.prefix,
            "controller": self.request.controller,
            "action": self.request.action,
            "params": self.params,
            "response_fields": self.fields,
            "error": self.error,
        }


class AnalysisOrchestrator:
    """Coordinates walking, parsing, classification and resolution."""

    def __init__(self, root_path: Path, config: dict[str, Any] | None = None):
        self.root_path = Path(root_path)
        self.config = config if config is not None else load_runtime_config(str(self.root_path))

        self.ast_parser = RubyParser(max_file_size=self.config["limits"]["max_file_size"])
        self.extractor_registry = ExtractorRegistry(self.root_path, self.ast_parser, self.config)

    def _collect_files(self) -> list[dict[str, Any]]:
        paths = self.config["paths"]
        files: list[dict[str, Any]] = []

        ruby_walker = FileWalker(self.root_path, RUBY_EXTENSIONS)
        for directory in (paths["controllers_dir"], paths["helpers_dir"]):
            found, _ = ruby_walker.walk(directory)
            files.extend(found)

        view_walker = FileWalker(self.root_path, JBUILDER_EXTENSIONS)
        found, _ = view_walker.walk(paths["views_dir"])
        files.extend(found)
        return files

    def _process_file(self, file_info: dict[str, Any]) -> dict[str, Any]:
        """Parse and extract one file. Runs on a worker thread."""
        extractor = self.extractor_registry.get_extractor(file_info["path"])
        if extractor is None:
            return {}
        tree = self.ast_parser.parse_file(Path(file_info["abs_path"]))
        return extractor.extract(file_info, tree)

    def analyze(self) -> AnalysisResult:
        """Build the declaration model and collect views.

        Per-file failures are recorded on the result and never abort the run.
        """
        files = self._collect_files()
        workers = max(1, int(self.config["limits"]["workers"]))
        logger.info(f"Analyzing {len(files)} files with {workers} workers")

        result = AnalysisResult(registry=ModelRegistry(), files_analyzed=len(files))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self._process_file, f) for f in files]

            # Single-writer merge in walk order
            for file_info, future in zip(files, futures):
                try:
                    extracted = future.result()
                except (ParamscopeError, OSError, UnicodeDecodeError) as e:
                    logger.debug(f"Failed to classify {file_info['path']}: {e}")
                    result.errors.append(FileError(path=file_info["path"], message=str(e)))
                    continue

                for decl in extracted.get("declarations", []):
                    result.registry.add(decl)
                view = extracted.get("view")
                if view is not None:
                    result.views[(view.controller, view.action)] = view

        stats = result.registry.get_stats()
        logger.info(
            f"Model built: {stats['controllers']} controllers, {stats['concerns']} concerns, "
            f"{stats['helpers']} helpers, {len(result.views)} views, {result.failed_files} failed files"
        )
        return result

    def load_requests(self) -> list[Request]:
        """Read the configured routes table.

        Raises:
            FileNotFoundError: The routes table does not exist
            RouteParseError: A line holds an unknown verb
        """
        path = self.root_path / self.config["paths"]["routes_table"]
        return load_routes_table(path)

    def resolve(self, requests: list[Request], result: AnalysisResult) -> list[EndpointReport]:
        """Resolve every request; failures are reported per endpoint."""
        reports = []
        for request in requests:
            report = EndpointReport(request=request)
            view = result.views.get((request.controller, request.action))
            if view is not None:
                report.fields = list(view.fields)
            try:
                report.params = sorted(request.params(result.registry))
            except ParamscopeError as e:
                logger.debug(f"Could not resolve {request.endpoint}: {e}")
                report.error = str(e)
            reports.append(report)
        return reports
