"""Ruby method-body analysis using tree-sitter.

MethodAnalyzer walks one method body with an explicit work list (no
recursion, so deeply nested bodies are safe) and records what the body
touches: request parameters, headers, instance variables, local variable
re-reads and outgoing calls.

Tree-sitter node type reference (tree-sitter-ruby):
- identifier: local variable read OR argument-less receiver-less call
- call: method call (fields receiver, method, arguments, block)
- element_reference: `recv[idx, ...]` (field object, index children)
- assignment / operator_assignment: fields left, right (and operator)
- left_assignment_list: multiple assignment targets
- block / do_block / lambda: closures (fields parameters, body)
- rescue: fields exceptions, variable (exception_variable), body
"""

from collections import deque
from typing import Any

from paramscope.ast_extractors.base import (
    SKIPPED_KINDS,
    call_arguments,
    call_method_name,
    index_arguments,
    node_text,
    parameter_names,
    render_arguments,
    render_literal,
)
from paramscope.ast_extractors.ruby_params import ParamAccess, ParamAccessResolver
from paramscope.graph.types import MethodProfile

# Definitions nested in a body belong to another scope and are never entered
_SCOPE_BOUNDARIES = frozenset({"method", "singleton_method", "class", "module", "singleton_class"})

_CLOSURE_PARAMETER_KINDS = frozenset({"block_parameters", "lambda_parameters"})


class LocalScope:
    """Source-position model of local variables in one method body.

    Ruby decides whether a bare identifier is a local variable by whether an
    assignment to that name appears earlier in the source. The pre-pass
    records the first assignment offset per name so the decision does not
    depend on the order the work list visits nodes in.
    """

    def __init__(self, body: Any, args: list[str]):
        self.args = set(args)
        self.closure_params: set[str] = set()
        self.first_assignment: dict[str, int] = {}
        if body is not None:
            self._collect(body)

    def _assign(self, node: Any) -> None:
        if node is None:
            return
        if node.type == "identifier":
            name = node_text(node)
            offset = node.start_byte
            if name not in self.first_assignment or offset < self.first_assignment[name]:
                self.first_assignment[name] = offset
        elif node.type in ("left_assignment_list", "destructured_left_assignment", "rest_assignment"):
            for child in node.named_children:
                self._assign(child)

    def _collect(self, body: Any) -> None:
        queue = deque([body])
        while queue:
            node = queue.popleft()
            kind = node.type
            if kind in ("assignment", "operator_assignment"):
                self._assign(node.child_by_field_name("left"))
            elif kind == "for":
                self._assign(node.child_by_field_name("pattern"))
            elif kind == "exception_variable":
                for child in node.named_children:
                    self._assign(child)
            elif kind in _CLOSURE_PARAMETER_KINDS:
                self.closure_params.update(parameter_names(node))

            for child in node.named_children:
                if child.type not in _SCOPE_BOUNDARIES:
                    queue.append(child)

    def is_local(self, node: Any) -> bool:
        """True when an identifier node reads a local (argument, block param or assigned)."""
        name = node_text(node)
        if name in self.args or name in self.closure_params:
            return True
        offset = self.first_assignment.get(name)
        return offset is not None and offset < node.start_byte

    def is_counted(self, name: str) -> bool:
        """Only assigned locals carry a read counter; arguments never do."""
        return name in self.first_assignment and name not in self.args


class MethodAnalyzer:
    """Builds a MethodProfile from one method body.

    Every node kind the walk understands has an entry in the dispatch table;
    anything else is ignored, so unfamiliar syntax degrades to missing facts
    rather than errors.

    Not thread-safe: use one analyzer per worker.
    """

    def __init__(self):
        self._profile: MethodProfile | None = None
        self._scope: LocalScope | None = None
        self._params: ParamAccessResolver | None = None
        self._queue: deque = deque()

        self._handlers = {
            "identifier": self._visit_identifier,
            "call": self._visit_call,
            "element_reference": self._visit_element_reference,
            "assignment": self._visit_assignment,
            "operator_assignment": self._visit_assignment,
            "block": self._visit_closure,
            "do_block": self._visit_closure,
            "lambda": self._visit_closure,
            "rescue": self._visit_rescue,
            "in_clause": self._visit_in_clause,
            "for": self._visit_for,
            "pair": self._visit_pair,
            "string": self._visit_interpolated,
            "delimited_symbol": self._visit_interpolated,
            "heredoc_body": self._visit_interpolated,
            "regex": self._visit_interpolated,
            "subshell": self._visit_interpolated,
        }
        # Kinds that only contribute their children
        for kind in (
            "program",
            "body_statement",
            "begin",
            "block_body",
            "parenthesized_statements",
            "then",
            "else",
            "ensure",
            "do",
            "interpolation",
            "if",
            "unless",
            "elsif",
            "if_modifier",
            "unless_modifier",
            "while",
            "until",
            "while_modifier",
            "until_modifier",
            "rescue_modifier",
            "conditional",
            "case",
            "when",
            "case_match",
            "binary",
            "unary",
            "range",
            "array",
            "hash",
            "argument_list",
            "right_assignment_list",
            "splat_argument",
            "hash_splat_argument",
            "block_argument",
            "return",
            "next",
            "break",
            "yield",
            "in",
            "exceptions",
        ):
            self._handlers[kind] = self._visit_children

    def analyze(self, body: Any, name: str, args: list[str]) -> MethodProfile:
        """Analyze a method body.

        Args:
            body: The def's body node (body_statement or a single expression),
                or None for an empty method
            name: Method name
            args: Declared argument names

        Returns:
            The MethodProfile of the body
        """
        self._profile = MethodProfile(name=name, args=list(args))
        self._scope = LocalScope(body, args)
        self._params = ParamAccessResolver(self._scope.is_local)
        self._queue = deque()

        if body is not None:
            self._queue.append(body)

        while self._queue:
            node = self._queue.popleft()
            handler = self._handlers.get(node.type)
            if handler is not None:
                handler(node)

        profile = self._profile
        self._profile = None
        self._scope = None
        self._params = None
        return profile

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _enqueue(self, *nodes: Any) -> None:
        for node in nodes:
            if node is not None and node.type not in SKIPPED_KINDS:
                self._queue.append(node)

    def _apply(self, access: ParamAccess) -> None:
        self._profile.params.update(access.keys)
        self._enqueue(*access.follow)

    def _record_call(self, name: str, arg_nodes: list[Any]) -> None:
        self._profile.method_calls.append((name, render_arguments(arg_nodes)))

    def _assign_local(self, name: str) -> None:
        self._profile.local_variable_reads.setdefault(name, 0)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _visit_children(self, node: Any) -> None:
        self._enqueue(*node.named_children)

    def _visit_identifier(self, node: Any) -> None:
        name = node_text(node)
        if self._scope.is_local(node):
            if self._scope.is_counted(name):
                reads = self._profile.local_variable_reads
                reads[name] = reads.get(name, 0) + 1
            return
        # A bare identifier that is not a local is a call with no arguments
        self._profile.method_calls.append((name, ()))

    def _visit_call(self, node: Any) -> None:
        receiver = node.child_by_field_name("receiver")
        block = node.child_by_field_name("block")
        args = call_arguments(node)
        method = call_method_name(node)

        if method is None:
            self._enqueue(receiver, *args, block)
            return

        access = self._params.chain_access(node)
        if access is not None:
            if not access.rejected:
                self._apply(access)
            return

        access = self._params.accessor_access(node)
        if access is not None:
            self._apply(access)
            return

        header = self._params.header_accessor_key(node)
        if header is not None:
            self._profile.headers.append((header, ""))
            self._enqueue(*args[1:])
            return

        if node.child_by_field_name("method").type == "super":
            self._enqueue(*args, block)
            return

        self._record_call(method, args)
        self._enqueue(receiver, *args, block)

    def _visit_element_reference(self, node: Any) -> None:
        access = self._params.index_access(node)
        if access is not None:
            self._apply(access)
            return

        header = self._params.header_key(node)
        if header is not None:
            self._profile.headers.append((header, ""))
            self._enqueue(*index_arguments(node)[1:])
            return

        self._enqueue(node.child_by_field_name("object"), *index_arguments(node))

    def _visit_assignment(self, node: Any) -> None:
        left = node.child_by_field_name("left")
        right = node.child_by_field_name("right")
        self._assign_target(left, right)
        self._enqueue(right)

    def _assign_target(self, left: Any, right: Any) -> None:
        if left is None:
            return
        kind = left.type

        if kind == "identifier":
            self._assign_local(node_text(left))
        elif kind == "instance_variable":
            self._profile.instance_variables.add(node_text(left))
        elif kind in ("left_assignment_list", "destructured_left_assignment", "rest_assignment"):
            for target in left.named_children:
                self._assign_target(target, None)
        elif kind == "element_reference":
            header = self._params.header_key(left)
            if header is not None:
                value = render_literal(right) if right is not None else ""
                self._profile.headers.append((header, value))
                self._enqueue(*index_arguments(left)[1:])
                return
            if not self._params.is_params_source(left.child_by_field_name("object")):
                self._enqueue(left.child_by_field_name("object"))
            self._enqueue(*index_arguments(left))
        elif kind == "call":
            # Attribute writer: `obj.name = value` calls `name=`
            method = call_method_name(left)
            if method is not None:
                self._record_call(f"{method}=", [right] if right is not None else [])
            self._enqueue(left.child_by_field_name("receiver"))

    def _visit_closure(self, node: Any) -> None:
        body = node.child_by_field_name("body")
        if body is not None:
            self._enqueue(body)
            return
        parameters = node.child_by_field_name("parameters")
        skip = parameters.id if parameters is not None else None
        self._enqueue(*(child for child in node.named_children if child.id != skip))

    def _visit_rescue(self, node: Any) -> None:
        for child in node.named_children:
            if child.type == "exception_variable":
                for target in child.named_children:
                    self._assign_target(target, None)
            else:
                self._enqueue(child)

    def _visit_in_clause(self, node: Any) -> None:
        self._enqueue(node.child_by_field_name("guard"), node.child_by_field_name("body"))

    def _visit_for(self, node: Any) -> None:
        self._assign_target(node.child_by_field_name("pattern"), None)
        self._enqueue(node.child_by_field_name("value"), node.child_by_field_name("body"))

    def _visit_pair(self, node: Any) -> None:
        key = node.child_by_field_name("key")
        if key is not None and key.type not in ("hash_key_symbol", "simple_symbol", "string"):
            self._enqueue(key)
        self._enqueue(node.child_by_field_name("value"))

    def _visit_interpolated(self, node: Any) -> None:
        self._enqueue(*(child for child in node.named_children if child.type == "interpolation"))


def analyze_method(node: Any) -> MethodProfile:
    """Profile a `method` or `singleton_method` definition node."""
    name = node_text(node.child_by_field_name("name"))
    args = parameter_names(node.child_by_field_name("parameters"))
    return MethodAnalyzer().analyze(node.child_by_field_name("body"), name, args)


__all__ = ["LocalScope", "MethodAnalyzer", "analyze_method"]
