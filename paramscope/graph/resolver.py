"""Method resolution across inheritance and mixin composition.

MethodResolver answers, for one controller, which methods are visible
(own, then inherited, then included) and which request parameters an
endpoint reaches through its call graph and its action hooks.

Name lookup follows Ruby's lexical rule: an ancestor or include named
`Base` inside `module Api; module V1` is looked up as `ApiV1Base`, then
`ApiBase`, then `Base`. A root-anchored name (`::Base`) is looked up only
at the top level.
"""

from paramscope.graph.registry import ModelRegistry
from paramscope.graph.types import ActionHook, Concern, Controller, HelperModule, MethodProfile, qualify
from paramscope.indexer.config import ROOT_SCOPE
from paramscope.indexer.exceptions import CyclicInheritanceError, ResolutionError
from paramscope.utils.logging import logger


class MethodResolver:
    """Effective-method and parameter resolution for one controller.

    The registry must be fully populated before a resolver is used; lookups
    against a partial registry silently miss inherited or included methods.

    Args:
        registry: The merged declaration model
        controller: Controller to resolve
        lineage: Qualified names of the descendants that led here, used to
            detect cyclic ancestor chains
    """

    def __init__(self, registry: ModelRegistry, controller: Controller, lineage: tuple[str, ...] = ()):
        self.registry = registry
        self.controller = controller
        self.lineage = tuple(lineage) + (controller.qualified_name,)
        self._all_methods: list[MethodProfile] | None = None
        self._included: list[Concern | HelperModule] | None = None

    def _scopes(self) -> tuple[str, ...]:
        if self.controller.nesting:
            return self.controller.nesting
        if self.controller.enclosing_module:
            return (self.controller.enclosing_module,)
        return ()

    def _candidates(self, name: str) -> list[str]:
        bare = qualify("", name)
        if name.startswith(ROOT_SCOPE):
            return [bare]
        candidates = []
        for scope in reversed(self._scopes()):
            candidate = qualify(scope, name)
            if candidate not in candidates:
                candidates.append(candidate)
        if bare not in candidates:
            candidates.append(bare)
        return candidates

    # ------------------------------------------------------------------
    # Ancestors and mixins
    # ------------------------------------------------------------------

    def parent(self) -> Controller | None:
        """The ancestor controller, or None when it is not part of the model."""
        if not self.controller.parent_name:
            return None
        for candidate in self._candidates(self.controller.parent_name):
            # the superclass is evaluated before the class constant exists
            if candidate == self.controller.qualified_name:
                continue
            parent = self.registry.get_controller(candidate)
            if parent is not None:
                return parent
        return None

    def _parent_resolver(self) -> "MethodResolver | None":
        parent = self.parent()
        if parent is None:
            return None
        if parent.qualified_name in self.lineage:
            raise CyclicInheritanceError(list(self.lineage) + [parent.qualified_name])
        return MethodResolver(self.registry, parent, self.lineage)

    def included_modules(self) -> list[Concern | HelperModule]:
        """Mixins named by `include`, concerns taking precedence over helpers.

        A missing mixin is logged as a warning and skipped.
        """
        if self._included is not None:
            return self._included

        found: list[Concern | HelperModule] = []
        for name in self.controller.includes:
            module = None
            for candidate in self._candidates(name):
                module = self.registry.get_concern(candidate) or self.registry.get_helper(candidate)
                if module is not None:
                    break
            if module is None:
                logger.warning(
                    f"Include '{name}' of {self.controller.qualified_name} is not a known concern or helper"
                )
                continue
            found.append(module)

        self._included = found
        return found

    # ------------------------------------------------------------------
    # Method sets
    # ------------------------------------------------------------------

    def own_methods(self) -> list[MethodProfile]:
        return list(self.controller.methods)

    def inherited_methods(self) -> list[MethodProfile]:
        """The ancestor's full method set, recursively.

        Raises:
            CyclicInheritanceError: The ancestor chain revisits a controller
        """
        parent = self._parent_resolver()
        if parent is None:
            return []
        return parent.all_methods()

    def included_methods(self) -> list[MethodProfile]:
        methods: list[MethodProfile] = []
        for module in self.included_modules():
            methods.extend(module.methods)
        return methods

    def all_methods(self) -> list[MethodProfile]:
        """Own, inherited and included methods in that order, duplicates kept."""
        if self._all_methods is None:
            self._all_methods = self.own_methods() + self.inherited_methods() + self.included_methods()
        return self._all_methods

    def method_by_name(self, name: str) -> MethodProfile | None:
        for method in self.all_methods():
            if method.name == name:
                return method
        return None

    def action_hooks(self) -> list[ActionHook]:
        """Own hooks, then the ancestor's effective hooks, then hooks of included concerns."""
        hooks = list(self.controller.action_hooks)
        parent = self._parent_resolver()
        if parent is not None:
            hooks.extend(parent.action_hooks())
        for module in self.included_modules():
            if isinstance(module, Concern):
                hooks.extend(module.action_hooks)
        return hooks

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------

    def params_for(self, method: MethodProfile, visited: set[str] | None = None) -> set[str]:
        """Parameters read by a method and, transitively, by the methods it calls.

        A callee is skipped when its call list equals the caller's while its
        declared arguments differ. `visited` holds the names already expanded
        during this query so mutual recursion terminates.
        """
        if visited is None:
            visited = set()
        visited.add(method.name)

        params = set(method.params)
        for callee_name, _args in method.method_calls:
            if callee_name in visited:
                continue
            callee = self.method_by_name(callee_name)
            if callee is None:
                logger.debug(f"Call to '{callee_name}' in {method.name} does not resolve, skipping")
                continue
            if callee.method_calls == method.method_calls and callee.args != method.args:
                continue
            params |= self.params_for(callee, visited)
        return params

    def endpoint_params(self, action: str, request_id: str = "") -> set[str]:
        """Parameters reachable from an action and from every action hook.

        Raises:
            ResolutionError: The action or a hook target does not resolve
        """
        qualified_name = self.controller.qualified_name
        method = self.method_by_name(action)
        if method is None:
            raise ResolutionError(
                f"action {action} not found in controller {qualified_name} for request {request_id}"
            )

        params = self.params_for(method)
        for hook in self.action_hooks():
            target = self.method_by_name(hook.target)
            if target is None:
                raise ResolutionError(
                    f"hook '{hook}' for action {action} not found in controller "
                    f"{qualified_name} for request {request_id}"
                )
            params |= self.params_for(target)
        return params
