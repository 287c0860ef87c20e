"""Rails source-file classification using tree-sitter.

DeclarationClassifier turns one parsed file into declarations:

- a class with an ancestor -> Controller (hooks, includes, profiled methods)
- a class deriving from an exception base -> nothing
- a module body that extends ActiveSupport::Concern -> Concern
- any other module body (or file) holding defs -> HelperModule

Modules are walked breadth-first, each carrying the qualified names of its
enclosing modules, innermost last. Shapes outside this vocabulary raise
ClassificationError; callers treat that as a per-file failure.
"""

from collections import deque
from typing import Any, Iterable

from paramscope.ast_extractors.base import (
    bare_call_name,
    body_of,
    call_arguments,
    constant_name,
    fragment,
    line_of,
    statements,
    symbol_name,
    unanchored,
)
from paramscope.ast_extractors.ruby_impl import analyze_method
from paramscope.graph.types import (
    ActionHook,
    ActionKind,
    Concern,
    Controller,
    Declaration,
    HelperModule,
    MethodProfile,
    qualify,
)
from paramscope.indexer.config import (
    CONCERN_BASE,
    CONCERN_CLASS_METHODS_BLOCK,
    CONCERN_INCLUDED_CALLBACK,
    DEFAULT_EXCEPTION_BASES,
    EXTEND_MACRO,
    FRAMEWORK_INCLUDE_PREFIXES,
    HOOK_MACROS,
    IGNORED_CLASS_MACROS,
    INCLUDE_MACRO,
    REQUIRE_MACROS,
    RESCUE_HANDLER_OPTION,
    VISIBILITY_MACROS,
)
from paramscope.indexer.exceptions import ClassificationError

_METHOD_KINDS = frozenset({"method", "singleton_method"})

_CONSTANT_KINDS = frozenset({"constant", "scope_resolution"})


def _is_constant_assignment(node: Any) -> bool:
    if node.type not in ("assignment", "operator_assignment"):
        return False
    left = node.child_by_field_name("left")
    return left is not None and left.type in _CONSTANT_KINDS


def _defs_in_arguments(node: Any) -> list[Any]:
    """Method definitions passed to a macro, as in `private def foo`."""
    if node.type != "call":
        return []
    return [arg for arg in call_arguments(node) if arg.type in _METHOD_KINDS]


def _call_block(node: Any) -> Any | None:
    if node.type != "call":
        return None
    return node.child_by_field_name("block")


class DeclarationClassifier:
    """Classifies parsed Ruby files into Controller, Concern and HelperModule declarations.

    Args:
        ignored_macros: Extra class-level macros to accept without effect
        exception_bases: Ancestors marking a class as an error type
    """

    def __init__(
        self,
        ignored_macros: Iterable[str] = (),
        exception_bases: Iterable[str] = DEFAULT_EXCEPTION_BASES,
    ):
        self.ignored_macros = IGNORED_CLASS_MACROS | frozenset(ignored_macros)
        self.exception_bases = frozenset(exception_bases)

    def classify(self, tree: Any) -> list[Declaration]:
        """Classify a parsed file.

        Args:
            tree: A tree-sitter Tree (or its root node)

        Returns:
            Declarations in discovery order

        Raises:
            ClassificationError: The file holds an unsupported shape
        """
        root = getattr(tree, "root_node", tree)
        top = statements(root)
        if not top:
            raise ClassificationError("expected file to have a class or module inside it")

        declarations: list[Declaration] = []
        queue = deque([(top, ())])
        while queue:
            body, nesting = queue.popleft()
            declarations.extend(self._classify_body(body, nesting, queue))
        return declarations

    # ------------------------------------------------------------------
    # Module and file bodies
    # ------------------------------------------------------------------

    def _classify_body(self, body: list[Any], nesting: tuple[str, ...], queue: deque) -> list[Declaration]:
        prefix = nesting[-1] if nesting else ""
        declarations: list[Declaration] = []
        methods: list[MethodProfile] = []
        hooks: list[ActionHook] = []
        is_concern = any(self._is_concern_marker(stmt) for stmt in body)

        for stmt in body:
            kind = stmt.type

            if kind == "module":
                name = constant_name(stmt.child_by_field_name("name"))
                if name is None:
                    raise ClassificationError("module name is not a constant", fragment(stmt), line_of(stmt))
                queue.append((body_of(stmt), nesting + (qualify(prefix, name),)))
            elif kind == "class":
                controller = self._classify_class(stmt, nesting)
                if controller is not None:
                    declarations.append(controller)
            elif kind in _METHOD_KINDS:
                methods.append(analyze_method(stmt))
            elif _is_constant_assignment(stmt):
                continue
            elif kind in ("call", "identifier"):
                methods.extend(self._module_macro(stmt, is_concern, hooks))
            else:
                raise ClassificationError("unknown syntax", fragment(stmt), line_of(stmt))

        if is_concern:
            declarations.append(Concern(name=prefix, methods=methods, action_hooks=hooks))
        elif methods:
            declarations.append(HelperModule(name=prefix, methods=methods))
        return declarations

    def _is_concern_marker(self, node: Any) -> bool:
        if bare_call_name(node) != EXTEND_MACRO or node.type != "call":
            return False
        return any(unanchored(constant_name(arg)) == CONCERN_BASE for arg in call_arguments(node))

    def _module_macro(self, node: Any, is_concern: bool, hooks: list[ActionHook]) -> list[MethodProfile]:
        """Apply one call statement of a module body, returning any defs it wraps."""
        name = bare_call_name(node)
        if name is None:
            raise ClassificationError("unexpected 'send'", fragment(node), line_of(node))

        if name in REQUIRE_MACROS or name == INCLUDE_MACRO:
            return []
        if name in VISIBILITY_MACROS:
            return [analyze_method(d) for d in _defs_in_arguments(node)]
        if name == EXTEND_MACRO:
            for arg in call_arguments(node):
                if unanchored(constant_name(arg)) != CONCERN_BASE:
                    raise ClassificationError("unsupported 'extend' found", fragment(node), line_of(node))
            return []

        block = _call_block(node)
        if is_concern and block is not None:
            if name == CONCERN_INCLUDED_CALLBACK:
                for stmt in body_of(block):
                    hooks.extend(self._hooks_from(stmt))
                return []
            if name == CONCERN_CLASS_METHODS_BLOCK:
                return []

        raise ClassificationError("unexpected 'send'", fragment(node), line_of(node))

    # ------------------------------------------------------------------
    # Class bodies
    # ------------------------------------------------------------------

    def _classify_class(self, node: Any, nesting: tuple[str, ...]) -> Controller | None:
        name = constant_name(node.child_by_field_name("name"))
        if name is None:
            raise ClassificationError("class name is not a constant", fragment(node), line_of(node))

        superclass = node.child_by_field_name("superclass")
        if superclass is None:
            raise ClassificationError("single file classes not supported", fragment(node), line_of(node))
        parent_name = constant_name(superclass)
        if parent_name is None:
            raise ClassificationError("class ancestor is not a constant", fragment(node), line_of(node))

        if unanchored(parent_name) in self.exception_bases:
            return None

        controller = Controller(
            name=name,
            parent_name=parent_name,
            enclosing_module=nesting[-1] if nesting else None,
            nesting=nesting,
        )
        for stmt in body_of(node):
            self._classify_class_statement(stmt, controller)
        return controller

    def _classify_class_statement(self, stmt: Any, controller: Controller) -> None:
        if stmt.type in _METHOD_KINDS:
            controller.methods.append(analyze_method(stmt))
            return
        if _is_constant_assignment(stmt):
            return

        macro = bare_call_name(stmt) if stmt.type in ("call", "identifier") else None
        if macro is None:
            raise ClassificationError("unexpected construct in class body", fragment(stmt), line_of(stmt))

        if macro in HOOK_MACROS:
            controller.action_hooks.extend(self._hooks_from(stmt))
        elif macro == INCLUDE_MACRO:
            controller.includes.extend(self._include_names(stmt))
        elif macro in self.ignored_macros:
            for definition in _defs_in_arguments(stmt):
                controller.methods.append(analyze_method(definition))
        else:
            raise ClassificationError("unexpected construct in class body", fragment(stmt), line_of(stmt))

    def _hooks_from(self, node: Any) -> list[ActionHook]:
        """Action hooks registered by one macro call, empty for non-hook statements."""
        macro = bare_call_name(node)
        if macro not in HOOK_MACROS or node.type != "call":
            return []

        kind = ActionKind(HOOK_MACROS[macro])
        hooks = []
        for arg in call_arguments(node):
            if arg.type == "simple_symbol":
                hooks.append(ActionHook(kind, symbol_name(arg), macro))
            elif arg.type == "pair" and kind is ActionKind.RESCUE_FROM:
                if symbol_name(arg.child_by_field_name("key")) != RESCUE_HANDLER_OPTION:
                    continue
                target = symbol_name(arg.child_by_field_name("value"))
                if target is not None:
                    hooks.append(ActionHook(kind, target, macro))
        return hooks

    def _include_names(self, node: Any) -> list[str]:
        names = []
        for arg in call_arguments(node):
            name = constant_name(arg)
            if name is None or unanchored(name).startswith(FRAMEWORK_INCLUDE_PREFIXES):
                continue
            names.append(name)
        return names
