"""Custom exceptions for the indexer and resolution layers.

Classification failures are file-scoped: the batch driver records them and
moves on to the next file. Resolution failures are query-scoped: they are
reported for one endpoint and never touch registry state.
"""


class ParamscopeError(Exception):
    """Base class for all paramscope errors."""


class ClassificationError(ParamscopeError):
    """Raised when a source file contains a shape the classifier does not support.

    Attributes:
        message: Human-readable error description
        fragment: The offending source fragment, when one is available
        line: 1-based line number of the fragment
    """

    def __init__(self, message: str, fragment: str | None = None, line: int | None = None):
        self.message = message
        self.fragment = fragment
        self.line = line
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.fragment is None:
            return self.message
        location = f" (line {self.line})" if self.line is not None else ""
        return f"{self.message}{location}: {self.fragment}"


class ResolutionError(ParamscopeError):
    """Raised when an action, include target or hook target cannot be found."""


class CyclicInheritanceError(ResolutionError):
    """Raised when a controller's ancestor chain revisits a controller."""

    def __init__(self, chain: list[str]):
        self.chain = list(chain)
        super().__init__("cyclic ancestor chain: " + " -> ".join(self.chain))


class RouteParseError(ParamscopeError):
    """Raised when a route table line cannot be parsed."""
