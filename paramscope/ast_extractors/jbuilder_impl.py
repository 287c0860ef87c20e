"""Jbuilder response-field extraction using tree-sitter.

Walks a `.json.jbuilder` template and lists the JSON keys it writes:

    json.title @post.title             -> title
    json.(@post, :id, :body)           -> id, body
    json.author do                     -> author.name
      json.name @post.author.name
    end
    if @admin                          -> ?secret
      json.secret @post.secret
    end

Keys written under a conditional carry a `?` on the leaf. Block
parameters are not keys.
"""

from collections import deque
from typing import Any

from paramscope.ast_extractors.base import (
    COMPOUND_KINDS,
    SKIPPED_KINDS,
    body_of,
    call_arguments,
    call_method_name,
    node_text,
    statements,
    symbol_name,
)

JSON_RECEIVER = "json"

# Bang methods with a known field meaning; any other bang method is skipped
EXTRACT_METHOD = "extract!"
SET_METHOD = "set!"
ARRAY_METHOD = "array!"

_CONDITIONAL_KINDS = frozenset({
    "if",
    "unless",
    "elsif",
    "if_modifier",
    "unless_modifier",
    "conditional",
    "case",
    "when",
})


def _is_json(node: Any) -> bool:
    if node is None:
        return False
    if node.type == "identifier":
        return node_text(node) == JSON_RECEIVER
    if node.type == "call":
        return (
            call_method_name(node) == JSON_RECEIVER
            and node.child_by_field_name("receiver") is None
            and not call_arguments(node)
        )
    return False


def _field_path(parent: str, name: str, optional: bool) -> str:
    leaf = f"?{name}" if optional else name
    return f"{parent}.{leaf}" if parent else leaf


def _nested_path(parent: str, name: str) -> str:
    return f"{parent}.{name}" if parent else name


def extract_response_fields(tree: Any) -> list[str]:
    """List the response keys a jbuilder template writes, in first-seen order."""
    root = getattr(tree, "root_node", tree)
    fields: list[str] = []
    seen: set[str] = set()

    def emit(path: str) -> None:
        if path not in seen:
            seen.add(path)
            fields.append(path)

    queue = deque([(root, "", False)])
    while queue:
        node, parent, optional = queue.popleft()
        kind = node.type

        if kind in COMPOUND_KINDS:
            for stmt in statements(node):
                queue.append((stmt, parent, optional))
        elif kind in _CONDITIONAL_KINDS:
            condition = node.child_by_field_name("condition")
            skip = condition.id if condition is not None else None
            for child in node.named_children:
                if child.id != skip and child.type not in SKIPPED_KINDS:
                    queue.append((child, parent, True))
        elif kind in ("block", "do_block"):
            for stmt in body_of(node):
                queue.append((stmt, parent, optional))
        elif kind == "call":
            block = node.child_by_field_name("block")
            if not _is_json(node.child_by_field_name("receiver")):
                if block is not None:
                    queue.append((block, parent, optional))
                continue

            method = call_method_name(node)
            args = call_arguments(node)

            if method is None or method == EXTRACT_METHOD:
                for arg in args[1:]:
                    name = symbol_name(arg)
                    if name is not None:
                        emit(_field_path(parent, name, optional))
            elif method == SET_METHOD:
                name = symbol_name(args[0]) if args else None
                if name is None:
                    continue
                if block is not None:
                    queue.append((block, _nested_path(parent, name), optional))
                else:
                    emit(_field_path(parent, name, optional))
            elif method == ARRAY_METHOD:
                for arg in args[1:]:
                    name = symbol_name(arg)
                    if name is not None:
                        emit(_field_path(parent, name, optional))
                if block is not None:
                    queue.append((block, parent, optional))
            elif method.endswith("!"):
                continue
            elif block is not None:
                queue.append((block, _nested_path(parent, method), optional))
            else:
                emit(_field_path(parent, method, optional))

    return fields


def view_key(relative_path: str) -> tuple[str, str] | None:
    """Split `admin/users/index.json.jbuilder` into (`admin/users`, `index`).

    Partials (`_user.json.jbuilder`) and templates at the views root are not
    endpoint views and yield None.
    """
    parts = relative_path.replace("\\", "/").split("/")
    if len(parts) < 2:
        return None
    file_name = parts[-1]
    if file_name.startswith("_"):
        return None
    action = file_name.split(".", 1)[0]
    return "/".join(parts[:-1]), action
