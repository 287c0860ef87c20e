"""Graph package - declaration model and method resolution.

Core modules:
- types: Declarations and method profiles
- registry: Merged model keyed by qualified name
- resolver: Inheritance, mixin and call-graph parameter resolution
"""

from .registry import ModelRegistry
from .resolver import MethodResolver
from .types import ActionHook, ActionKind, Concern, Controller, Declaration, HelperModule, MethodProfile, View

__all__ = [
    "ModelRegistry",
    "MethodResolver",
    "ActionHook",
    "ActionKind",
    "Concern",
    "Controller",
    "Declaration",
    "HelperModule",
    "MethodProfile",
    "View",
]
