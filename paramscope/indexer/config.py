"""Indexer configuration - constants and patterns.

This module contains the fixed vocabulary the classifier and the method
analyzer recognise. Organized into logical sections for maintainability.

CRITICAL: This file should contain ONLY configuration constants.
NO business logic.
"""

# =============================================================================
# FILE SYSTEM CONFIGURATION
# =============================================================================

# Directories to always skip while walking a Rails tree
SKIP_DIRS: set[str] = {
    ".git",
    ".hg",
    ".svn",
    "node_modules",
    "tmp",
    "log",
    "vendor",
    "coverage",
    ".bundle",
}

RUBY_EXTENSIONS = [".rb"]
JBUILDER_EXTENSIONS = [".jbuilder"]


# =============================================================================
# CONTROLLER CLASS BODIES
# =============================================================================

# Callback macros recorded as action hooks, mapped to ActionKind values.
# "custom" hooks keep the macro name on the hook.
HOOK_MACROS: dict[str, str] = {
    "before_action": "before_action",
    "prepend_before_action": "before_action",
    "append_before_action": "before_action",
    "before_filter": "before_action",
    "around_action": "around_action",
    "around_filter": "around_action",
    "rescue_from": "rescue_from",
    "after_action": "custom",
    "after_filter": "custom",
}

# Option key naming the handler of rescue_from
RESCUE_HANDLER_OPTION = "with"

VISIBILITY_MACROS = frozenset({
    "private",
    "protected",
    "public",
    "private_class_method",
    "module_function",
})

REQUIRE_MACROS = frozenset({"require", "require_relative"})

# Class-level macros accepted without any effect on the model
IGNORED_CLASS_MACROS = frozenset({
    "skip_before_action",
    "skip_after_action",
    "skip_around_action",
    "skip_auth_methods",
    "helper_method",
    "protect_from_forgery",
    "layout",
    "attr_reader",
    "attr_writer",
    "attr_accessor",
}) | VISIBILITY_MACROS | REQUIRE_MACROS

INCLUDE_MACRO = "include"
EXTEND_MACRO = "extend"

# Includes under these namespaces are framework plumbing, not mixins we model
FRAMEWORK_INCLUDE_PREFIXES = (
    "ActionController::",
    "AbstractController::",
    "ActionView::",
    "ActiveSupport::",
)

DEFAULT_EXCEPTION_BASES = frozenset({"StandardError", "Exception", "RuntimeError"})


# =============================================================================
# CONCERNS
# =============================================================================

CONCERN_BASE = "ActiveSupport::Concern"
CONCERN_INCLUDED_CALLBACK = "included"
CONCERN_CLASS_METHODS_BLOCK = "class_methods"


# =============================================================================
# METHOD BODIES
# =============================================================================

PARAMS_SOURCE = "params"
HEADERS_SOURCE = "headers"

REQUIRE_METHOD = "require"
PERMIT_METHOD = "permit"

# params.<accessor>(:key) reads `key` directly
PARAMS_KEY_ACCESSORS = frozenset({"fetch", "key?", "has_key?", "include?", "member?"})
PARAMS_DIG = "dig"

HEADERS_KEY_ACCESSORS = frozenset({"fetch", "key?", "has_key?", "include?"})

# Rendering sentinel for anything that is not a recognised literal
UNKNOWN = "unknown"

# Leading separator of a root-anchored constant path, e.g. ::ApplicationController
ROOT_SCOPE = "::"

# Separator for nested parameter keys, e.g. params[:user][:name] -> user:name
NESTED_KEY_SEPARATOR = ":"
