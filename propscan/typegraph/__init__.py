"""Type graph accessors and the TypeScript front end that builds graphs."""

from .base import ParameterInfo, SignatureInfo, SourceLocation, TypeAccessor, TypeShape
from .graph import GraphAccessor
from .typescript import TREE_SITTER_AVAILABLE, TypeScriptModule, TypeScriptParser

__all__ = [
    "GraphAccessor",
    "ParameterInfo",
    "SignatureInfo",
    "SourceLocation",
    "TREE_SITTER_AVAILABLE",
    "TypeAccessor",
    "TypeScriptModule",
    "TypeScriptParser",
    "TypeShape",
]
