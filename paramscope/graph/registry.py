"""ModelRegistry - the merged declaration model of one analysis run.

Three mappings keyed by qualified name. A later insertion under an existing
name replaces the earlier declaration (last write wins); the replacement is
logged at debug level but never rejected.
"""

from paramscope.graph.types import Concern, Controller, Declaration, HelperModule
from paramscope.utils.logging import logger


class ModelRegistry:
    """Controllers, concerns and helpers keyed by qualified name."""

    def __init__(self):
        self.controllers: dict[str, Controller] = {}
        self.concerns: dict[str, Concern] = {}
        self.helpers: dict[str, HelperModule] = {}

    def _insert(self, table: dict, kind: str, decl: Declaration) -> None:
        key = decl.qualified_name
        if key in table:
            logger.debug(f"Replacing {kind} '{key}' with a later declaration")
        table[key] = decl

    def insert_controller(self, decl: Controller) -> None:
        self._insert(self.controllers, "controller", decl)

    def insert_concern(self, decl: Concern) -> None:
        self._insert(self.concerns, "concern", decl)

    def insert_helper(self, decl: HelperModule) -> None:
        self._insert(self.helpers, "helper", decl)

    def add(self, decl: Declaration) -> None:
        """Insert a declaration into the mapping for its kind."""
        if isinstance(decl, Controller):
            self.insert_controller(decl)
        elif isinstance(decl, Concern):
            self.insert_concern(decl)
        elif isinstance(decl, HelperModule):
            self.insert_helper(decl)
        else:
            raise TypeError(f"Not a declaration: {decl!r}")

    def get_controller(self, qualified_name: str) -> Controller | None:
        return self.controllers.get(qualified_name)

    def get_concern(self, qualified_name: str) -> Concern | None:
        return self.concerns.get(qualified_name)

    def get_helper(self, qualified_name: str) -> HelperModule | None:
        return self.helpers.get(qualified_name)

    def get_stats(self) -> dict[str, int]:
        """Declaration counts per kind."""
        return {
            "controllers": len(self.controllers),
            "concerns": len(self.concerns),
            "helpers": len(self.helpers),
        }

    def __len__(self) -> int:
        return len(self.controllers) + len(self.concerns) + len(self.helpers)
