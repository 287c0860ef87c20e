"""Base utilities and shared helpers for Ruby tree walking.

This module contains the helpers shared by the method analyzer, the
declaration classifier and the view walker. Everything here reads
tree-sitter nodes; nothing mutates them.

ARCHITECTURAL PRINCIPLE: NO REGEX FOR EXTRACTION
================================================
We have a syntax tree. Names, keys and literal values are recovered by
walking node kinds and fields, never by pattern matching source text.
"""

from typing import Any

from paramscope.indexer.config import ROOT_SCOPE, UNKNOWN

# Node kinds that never carry analysable code
SKIPPED_KINDS = frozenset({"comment", "empty_statement", "heredoc_end"})

# Wrapper kinds whose named children are a plain statement sequence
COMPOUND_KINDS = frozenset({
    "program",
    "body_statement",
    "begin",
    "block_body",
    "parenthesized_statements",
    "then",
    "else",
    "ensure",
    "do",
})

_PARAMETER_NAME_KINDS = frozenset({
    "optional_parameter",
    "keyword_parameter",
    "splat_parameter",
    "hash_splat_parameter",
    "block_parameter",
})

FRAGMENT_WIDTH = 80


def node_text(node: Any) -> str:
    """Safely decode node text."""
    if node is None:
        return ""
    return node.text.decode("utf-8", errors="ignore")


def line_of(node: Any) -> int:
    """1-based line number of a node."""
    return node.start_point[0] + 1


def fragment(node: Any) -> str:
    """First source line of a node, truncated for diagnostics."""
    text = node_text(node).splitlines()
    first = text[0] if text else ""
    if len(first) > FRAGMENT_WIDTH:
        return first[: FRAGMENT_WIDTH - 3] + "..."
    return first


def statements(node: Any) -> list[Any]:
    """Statements of a compound node, or the node itself when it is a single expression."""
    if node is None:
        return []
    if node.type in COMPOUND_KINDS:
        return [child for child in node.named_children if child.type not in SKIPPED_KINDS]
    if node.type in SKIPPED_KINDS:
        return []
    return [node]


def body_of(node: Any) -> list[Any]:
    """Statements inside the body of a class, module, def or block node.

    Older grammar builds put body statements directly under the definition
    instead of a `body` field, so fall back to the unnamed-field children.
    """
    body = node.child_by_field_name("body")
    if body is not None:
        return statements(body)

    fielded = set()
    for field_name in ("name", "superclass", "parameters", "object"):
        child = node.child_by_field_name(field_name)
        if child is not None:
            fielded.add(child.id)
    return [
        child
        for child in node.named_children
        if child.id not in fielded and child.type not in SKIPPED_KINDS
    ]


def call_arguments(node: Any) -> list[Any]:
    """Argument nodes of a call (empty when it has none)."""
    arguments = node.child_by_field_name("arguments")
    if arguments is None:
        return []
    return [child for child in arguments.named_children if child.type not in SKIPPED_KINDS]


def call_method_name(node: Any) -> str | None:
    """Method name of a `call` node, None for `recv.()` style calls."""
    method = node.child_by_field_name("method")
    if method is None:
        return None
    return node_text(method)


def index_arguments(node: Any) -> list[Any]:
    """Index expressions of an `element_reference` node."""
    obj = node.child_by_field_name("object")
    obj_id = obj.id if obj is not None else None
    return [
        child
        for child in node.named_children
        if child.id != obj_id and child.type not in SKIPPED_KINDS
    ]


def is_bare_call(node: Any, name: str | None = None) -> bool:
    """True for a receiver-less call such as `before_action :foo` or `private`."""
    if node.type == "identifier":
        return name is None or node_text(node) == name
    if node.type != "call" or node.child_by_field_name("receiver") is not None:
        return False
    method = call_method_name(node)
    return method is not None and (name is None or method == name)


def bare_call_name(node: Any) -> str | None:
    """Name of a receiver-less call or bare identifier, else None."""
    if node.type == "identifier":
        return node_text(node)
    if is_bare_call(node):
        return call_method_name(node)
    return None


def parameter_names(node: Any) -> list[str]:
    """Names declared by a method_parameters, block_parameters or lambda_parameters node."""
    names: list[str] = []
    if node is None:
        return names

    for child in node.named_children:
        if child.type == "identifier":
            names.append(node_text(child))
        elif child.type in _PARAMETER_NAME_KINDS:
            name = child.child_by_field_name("name")
            if name is not None:
                names.append(node_text(name))
        elif child.type in ("destructured_parameter", "block_parameters"):
            names.extend(parameter_names(child))
    return names


def constant_name(node: Any) -> str | None:
    """Fully scoped constant path (`A::B`) of a constant node, None otherwise.

    A root-anchored path keeps its leading separator (`::A::B`).
    """
    if node is None:
        return None
    if node.type == "constant":
        return node_text(node)
    if node.type == "scope_resolution":
        name = node_text(node.child_by_field_name("name"))
        scope = node.child_by_field_name("scope")
        if scope is None:
            return ROOT_SCOPE + name
        outer = constant_name(scope)
        if outer is None:
            return None
        return f"{outer}::{name}"
    if node.type == "superclass":
        inner = [child for child in node.named_children if child.type not in SKIPPED_KINDS]
        return constant_name(inner[0]) if inner else None
    return None


def unanchored(name: str | None) -> str | None:
    """Constant path with any leading root separator removed."""
    if name is None:
        return None
    return name.removeprefix(ROOT_SCOPE)


def symbol_name(node: Any) -> str | None:
    """Name of a symbol or plain string literal, None for anything else."""
    if node is None:
        return None
    if node.type in ("simple_symbol", "delimited_symbol", "hash_key_symbol", "string", "bare_symbol"):
        rendered = render_literal(node)
        return None if rendered == UNKNOWN else rendered
    return None


def _string_content(node: Any) -> str:
    parts = []
    for child in node.named_children:
        if child.type == "interpolation":
            return UNKNOWN
        parts.append(node_text(child))
    return "".join(parts)


def render_arguments(nodes: list[Any]) -> tuple[str, ...]:
    """Render call arguments; consecutive bare `key => value` pairs form one argument."""
    rendered: list[str] = []
    pending: list[str] = []
    for node in nodes:
        if node.type == "pair":
            pending.append(render_literal(node))
            continue
        if pending:
            rendered.append(",".join(pending))
            pending = []
        rendered.append(render_literal(node))
    if pending:
        rendered.append(",".join(pending))
    return tuple(rendered)


def render_literal(node: Any) -> str:
    """Canonical textual form of a literal-like node.

    This string is used both as a parameter key and as a header value, so it
    must be stable for equal source. Unrecognised shapes render as `unknown`.
    """
    if node is None:
        return UNKNOWN

    kind = node.type
    if kind in ("identifier", "integer", "float", "hash_key_symbol", "bare_symbol",
                "instance_variable", "nil", "true", "false"):
        return node_text(node)

    if kind == "simple_symbol":
        return node_text(node).lstrip(":")

    if kind == "delimited_symbol" or kind == "string":
        return _string_content(node)

    if kind == "call":
        if node.child_by_field_name("receiver") is None and not call_arguments(node):
            if node.child_by_field_name("block") is None:
                return call_method_name(node) or UNKNOWN
        return UNKNOWN

    if kind == "array":
        items = [render_literal(child) for child in node.named_children if child.type not in SKIPPED_KINDS]
        return f"[{','.join(items)}]"

    if kind == "hash":
        items = [render_literal(child) for child in node.named_children if child.type not in SKIPPED_KINDS]
        return "{" + ",".join(items) + "}"

    if kind == "pair":
        key = render_literal(node.child_by_field_name("key"))
        value = render_literal(node.child_by_field_name("value"))
        return f"{key}=>{value}"

    if kind == "argument_list":
        return ",".join(render_arguments(
            [child for child in node.named_children if child.type not in SKIPPED_KINDS]
        ))

    if kind in ("constant", "scope_resolution"):
        return constant_name(node) or UNKNOWN

    if kind == "binary":
        operator = node.child_by_field_name("operator")
        if operator is not None and operator.type in ("||", "or"):
            left = render_literal(node.child_by_field_name("left"))
            right = render_literal(node.child_by_field_name("right"))
            return f"{left} or {right}"
        return UNKNOWN

    if kind == "element_reference":
        receiver = render_literal(node.child_by_field_name("object"))
        indexes = ",".join(render_literal(child) for child in index_arguments(node))
        return f"{receiver}[{indexes}]"

    if kind == "parenthesized_statements":
        inner = statements(node)
        if len(inner) == 1:
            return render_literal(inner[0])

    return UNKNOWN
