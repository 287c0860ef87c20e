"""Request-parameter access idioms for Rails controller methods.

The parameter bag is recognised by shape, not by type: `params` (or any
argument-less `x.params` call) indexed with brackets, walked through a
`require`/`permit` chain, or queried with a key accessor. Every idiom is
normalised to canonical keys:

    params[:id]                          -> id
    params['dogs', 'pizza']              -> dogs, pizza
    params['cat']['dogs']                -> cat:dogs
    params.require(:a).permit(:b)        -> a, b
    params.permit(:a => [], :b => {})    -> a[], b{}
    params.permit(address: [:city])      -> address:city
    params.dig(:user, :name)             -> user:name

Headers use the same machinery with the `headers` bag and yield
`(key, value)` pairs instead of keys.
"""

from dataclasses import dataclass, field
from typing import Any, Callable

from paramscope.ast_extractors.base import (
    call_arguments,
    call_method_name,
    index_arguments,
    node_text,
    render_literal,
    symbol_name,
)
from paramscope.indexer.config import (
    HEADERS_KEY_ACCESSORS,
    HEADERS_SOURCE,
    NESTED_KEY_SEPARATOR,
    PARAMS_DIG,
    PARAMS_KEY_ACCESSORS,
    PARAMS_SOURCE,
    PERMIT_METHOD,
    REQUIRE_METHOD,
    UNKNOWN,
)
from paramscope.utils.logging import logger

CHAIN_METHODS = frozenset({REQUIRE_METHOD, PERMIT_METHOD})


@dataclass
class ParamAccess:
    """Outcome of matching one node against the parameter idioms.

    Attributes:
        keys: Canonical parameter keys read by the expression
        follow: Child nodes the caller must still analyze
        rejected: True for a require/permit chain in the forbidden order
    """

    keys: list[str] = field(default_factory=list)
    follow: list[Any] = field(default_factory=list)
    rejected: bool = False


class ParamAccessResolver:
    """Recognises parameter and header reads inside one method body.

    Args:
        is_local: Predicate telling whether an identifier node refers to a
            local variable. A local named `params` shadows the bag.
    """

    def __init__(self, is_local: Callable[[Any], bool]):
        self.is_local = is_local

    # ------------------------------------------------------------------
    # Bag recognition
    # ------------------------------------------------------------------

    def _is_source(self, node: Any, name: str) -> bool:
        if node is None:
            return False
        if node.type == "identifier":
            return node_text(node) == name and not self.is_local(node)
        if node.type == "call":
            return (
                call_method_name(node) == name
                and not call_arguments(node)
                and node.child_by_field_name("block") is None
            )
        return False

    def is_params_source(self, node: Any) -> bool:
        return self._is_source(node, PARAMS_SOURCE)

    def is_headers_source(self, node: Any) -> bool:
        return self._is_source(node, HEADERS_SOURCE)

    def resolves_to_params(self, node: Any) -> bool:
        """True when `node` is the bag or a call/index chain rooted at it."""
        current = node
        while current is not None:
            if self.is_params_source(current):
                return True
            if current.type == "call":
                current = current.child_by_field_name("receiver")
            elif current.type == "element_reference":
                current = current.child_by_field_name("object")
            else:
                return False
        return False

    # ------------------------------------------------------------------
    # Bracket indexing
    # ------------------------------------------------------------------

    def index_access(self, node: Any) -> ParamAccess | None:
        """Match `params[...]`, nested indexing, and indexing of a params chain.

        Returns None when the indexed object is not the parameter bag.
        """
        levels: list[list[Any]] = []
        current = node
        while current.type == "element_reference":
            levels.append(index_arguments(current))
            inner = current.child_by_field_name("object")
            if inner is None:
                return None
            current = inner

        if not self.resolves_to_params(current):
            return None

        access = ParamAccess()
        rendered_levels = [[render_literal(arg) for arg in level] for level in levels]

        if len(rendered_levels) == 1:
            access.keys = [key for key in rendered_levels[0] if key != UNKNOWN]
        else:
            fragments = []
            for level in reversed(rendered_levels):
                known = [key for key in level if key != UNKNOWN]
                if known:
                    fragments.append(",".join(known))
            if fragments:
                access.keys = [NESTED_KEY_SEPARATOR.join(fragments)]

        for level in levels:
            access.follow.extend(level)
        if not self.is_params_source(current):
            access.follow.append(current)
        return access

    def header_key(self, node: Any) -> str | None:
        """Key of a `headers['X']` expression, None for other index expressions."""
        if not self.is_headers_source(node.child_by_field_name("object")):
            return None
        indexes = index_arguments(node)
        if not indexes:
            return None
        return render_literal(indexes[0])

    # ------------------------------------------------------------------
    # Calls on the bag
    # ------------------------------------------------------------------

    def chain_access(self, node: Any) -> ParamAccess | None:
        """Match a `require`/`permit` chain rooted at the parameter bag.

        `require` may be followed by `permit`, never the other way round: a
        chain such as `params.permit(:a).require(:b)` is rejected and
        contributes nothing.
        """
        links = []
        current = node
        while current is not None and current.type == "call" and call_method_name(current) in CHAIN_METHODS:
            links.append(current)
            current = current.child_by_field_name("receiver")

        if not links or not self.is_params_source(current):
            return None

        access = ParamAccess()
        seen_permit = False
        for link in reversed(links):
            method = call_method_name(link)
            if method == PERMIT_METHOD:
                seen_permit = True
                for arg in call_arguments(link):
                    access.keys.extend(permit_keys(arg))
            else:
                if seen_permit:
                    logger.debug(f"Ignoring require after permit: {node_text(node)}")
                    return ParamAccess(rejected=True)
                for arg in call_arguments(link):
                    name = symbol_name(arg)
                    if name is not None:
                        access.keys.append(name)
        return access

    def accessor_access(self, node: Any) -> ParamAccess | None:
        """Match `params.fetch(:k)`, `params.key?(:k)` and `params.dig(:a, :b)`."""
        if not self.is_params_source(node.child_by_field_name("receiver")):
            return None
        method = call_method_name(node)
        args = call_arguments(node)
        if not args:
            return None

        access = ParamAccess()
        if method == PARAMS_DIG:
            path = [render_literal(arg) for arg in args]
            known = [key for key in path if key != UNKNOWN]
            if known:
                access.keys.append(NESTED_KEY_SEPARATOR.join(known))
            access.follow.extend(arg for arg in args if symbol_name(arg) is None)
            return access
        if method in PARAMS_KEY_ACCESSORS:
            key = render_literal(args[0])
            if key != UNKNOWN:
                access.keys.append(key)
            access.follow.extend(args[1:])
            block = node.child_by_field_name("block")
            if block is not None:
                access.follow.append(block)
            return access
        return None

    def header_accessor_key(self, node: Any) -> str | None:
        """Key of `headers.fetch('X')` style reads."""
        if not self.is_headers_source(node.child_by_field_name("receiver")):
            return None
        if call_method_name(node) not in HEADERS_KEY_ACCESSORS:
            return None
        args = call_arguments(node)
        if not args:
            return None
        return render_literal(args[0])


def permit_keys(node: Any, prefix: str = "") -> list[str]:
    """Flatten one `permit` argument into canonical keys.

    Symbols and strings name a key; `key => []` and `key => {}` mark array
    and hash values; non-empty nested specs produce `outer:inner` keys.
    """
    name = symbol_name(node)
    if name is not None:
        return [prefix + name]

    keys: list[str] = []
    if node.type == "array":
        for element in node.named_children:
            keys.extend(permit_keys(element, prefix))
    elif node.type == "hash":
        for pair in node.named_children:
            keys.extend(permit_keys(pair, prefix))
    elif node.type == "pair":
        key = symbol_name(node.child_by_field_name("key"))
        value = node.child_by_field_name("value")
        if key is None or value is None:
            return keys
        inner = [child for child in value.named_children if child.type != "comment"]
        if value.type == "array" and not inner:
            keys.append(f"{prefix}{key}[]")
        elif value.type == "hash" and not inner:
            keys.append(f"{prefix}{key}{{}}")
        elif value.type in ("array", "hash"):
            keys.extend(permit_keys(value, f"{prefix}{key}{NESTED_KEY_SEPARATOR}"))
        else:
            keys.append(prefix + key)
    return keys
