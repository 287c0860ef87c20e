"""Shared data structures for the declaration model.

This module contains the core data types used by:
- MethodAnalyzer (produces MethodProfile)
- DeclarationClassifier (produces Controller, Concern, HelperModule)
- ModelRegistry and MethodResolver (consume them)
- the jbuilder view walker (produces View)

Declarations are built once per source file and never mutated afterwards.
"""

from dataclasses import dataclass, field
from enum import Enum


@dataclass
class MethodProfile:
    """Static facts recovered from one method body."""

    name: str
    args: list[str] = field(default_factory=list)
    params: set[str] = field(default_factory=set)
    headers: list[tuple[str, str]] = field(default_factory=list)
    instance_variables: set[str] = field(default_factory=set)
    local_variable_reads: dict[str, int] = field(default_factory=dict)
    method_calls: list[tuple[str, tuple[str, ...]]] = field(default_factory=list)
    renders: list[str] = field(default_factory=list)

    def called_names(self) -> list[str]:
        """Names of outgoing calls in call order, duplicates kept."""
        return [callee for callee, _ in self.method_calls]


class ActionKind(Enum):
    """Kinds of controller callbacks that run around an action."""

    BEFORE_ACTION = "before_action"
    AROUND_ACTION = "around_action"
    RESCUE_FROM = "rescue_from"
    CUSTOM = "custom"


@dataclass(frozen=True)
class ActionHook:
    """A callback registration such as `before_action :authenticate`.

    `macro` is the macro as written, which is what distinguishes custom hooks.
    """

    kind: ActionKind
    target: str
    macro: str = ""

    def __str__(self) -> str:
        return f"{self.macro or self.kind.value} :{self.target}"


def qualify(prefix: str, name: str) -> str:
    """Build a qualified name by concatenating the module path and the name.

    Scope separators inside a scoped constant are dropped so that
    `module Admin; class UsersController` and `class Admin::UsersController`
    share one registry key: `AdminUsersController`.
    """
    return prefix + name.replace("::", "")


@dataclass
class Controller:
    """A class with an explicit ancestor, treated as an endpoint group."""

    name: str
    parent_name: str
    methods: list[MethodProfile] = field(default_factory=list)
    action_hooks: list[ActionHook] = field(default_factory=list)
    includes: list[str] = field(default_factory=list)
    enclosing_module: str | None = None
    # Qualified names of the lexically enclosing modules, outermost first
    nesting: tuple[str, ...] = ()

    @property
    def qualified_name(self) -> str:
        return qualify(self.enclosing_module or "", self.name)


@dataclass
class Concern:
    """A mixin module extending ActiveSupport::Concern."""

    name: str
    methods: list[MethodProfile] = field(default_factory=list)
    action_hooks: list[ActionHook] = field(default_factory=list)

    @property
    def qualified_name(self) -> str:
        return self.name


@dataclass
class HelperModule:
    """A module (or top-level file) contributing plain methods."""

    name: str
    methods: list[MethodProfile] = field(default_factory=list)

    @property
    def qualified_name(self) -> str:
        return self.name


Declaration = Controller | Concern | HelperModule


@dataclass
class View:
    """Response fields rendered by one jbuilder template."""

    controller: str
    action: str
    fields: list[str] = field(default_factory=list)
