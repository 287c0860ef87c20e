"""Route table parsing.

Reads the column output of `rails routes`:

                   Prefix Verb     URI Pattern                 Controller#Action
                    users GET      /users(.:format)            users#index
                          POST     /users(.:format)            users#create
                edit_user GET      /users/:id/edit(.:format)   users#edit
                          GET|POST /search(.:format)           search#query

Prefix is optional, verbs may be pipe-joined, and lines without a
`controller#action` column (header, redirects, mounted engines) are skipped.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from paramscope.graph.registry import ModelRegistry
from paramscope.graph.resolver import MethodResolver
from paramscope.indexer.exceptions import ResolutionError, RouteParseError
from paramscope.utils.logging import logger

HEADER_TOKEN = "Controller#Action"
CONTROLLER_SUFFIX = "Controller"


class RequestMethod(Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    HEAD = "HEAD"

    @classmethod
    def parse(cls, verb: str) -> "RequestMethod":
        try:
            return cls(verb.upper())
        except ValueError:
            raise RouteParseError(f"unknown request method '{verb}'") from None


def pascal_case(segment: str) -> str:
    """`user_profiles` -> `UserProfiles`."""
    return "".join(part[:1].upper() + part[1:] for part in segment.split("_") if part)


@dataclass(frozen=True)
class Request:
    """One routed endpoint."""

    method: RequestMethod
    prefix: str
    uri: str
    controller: str
    action: str

    def __str__(self) -> str:
        return f"{self.method.value} {self.uri}"

    @property
    def controller_class_name(self) -> str:
        """Registry key of the routed controller: `admin/user_profiles` -> `AdminUserProfilesController`."""
        return "".join(pascal_case(segment) for segment in self.controller.split("/")) + CONTROLLER_SUFFIX

    @property
    def endpoint(self) -> str:
        return f"{self.controller}#{self.action}"

    def params(self, registry: ModelRegistry) -> set[str]:
        """Parameters read by this endpoint.

        Raises:
            ResolutionError: Controller, action or a hook target is missing
        """
        class_name = self.controller_class_name
        controller = registry.get_controller(class_name)
        if controller is None:
            raise ResolutionError(
                f"action {self.action} not found in controller {class_name} for request {self}"
            )
        return MethodResolver(registry, controller).endpoint_params(self.action, request_id=str(self))


def parse_route_line(line: str, line_number: int = 0) -> list[Request]:
    """Parse one line of the routes table, returning one Request per verb.

    Raises:
        RouteParseError: The verb column holds an unknown method
    """
    tokens = line.split()
    target_index = None
    for index, token in enumerate(tokens):
        if token == HEADER_TOKEN:
            return []
        if "#" in token and not token.startswith(("/", "#")):
            target_index = index
            break

    if target_index is None:
        return []
    if target_index < 2:
        logger.debug(f"Skipping route line {line_number} without verb and URI: {line.strip()}")
        return []

    controller, _, action = tokens[target_index].partition("#")
    uri = tokens[target_index - 1]
    verbs = tokens[target_index - 2]
    prefix = tokens[target_index - 3] if target_index >= 3 else ""

    try:
        methods = [RequestMethod.parse(verb) for verb in verbs.split("|")]
    except RouteParseError as e:
        raise RouteParseError(f"{e} on line {line_number}") from None

    return [
        Request(method=method, prefix=prefix, uri=uri, controller=controller, action=action)
        for method in methods
    ]


def parse_routes_table(text: str) -> list[Request]:
    """Parse the full `rails routes` output."""
    requests: list[Request] = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        requests.extend(parse_route_line(line, line_number))
    return requests


def load_routes_table(path: Path) -> list[Request]:
    """Read and parse a routes table file."""
    with open(path, encoding="utf-8") as f:
        return parse_routes_table(f.read())
