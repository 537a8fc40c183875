"""Parser module for JavaScript source ingestion.

This module provides tree-sitter based parsing of JavaScript files into
source units: resolved function records, their calls, and file-level call
records.

Example:
    >>> from flowmetrics.parser import TreeSitterParser
    >>> parser = TreeSitterParser()
    >>> result = parser.parse_file("server/server.js")
    >>> print([f.name for f in result.unit.functions])
"""

from .base import BaseParser, ParserError
from .calls import DEFAULT_BUILTIN_CALLS, CallExtractor, callee_name
from .models import (
    CallKind,
    CallRecord,
    ExportDescriptor,
    FunctionKey,
    FunctionKind,
    FunctionRecord,
    ImportDescriptor,
    ParseResult,
    SourceUnit,
)
from .naming import NAMING_RULES, FunctionNameResolver, NameMatch
from .traversal import TraversalContext, walk, walk_scope
from .tree_sitter import TreeSitterParser

__all__ = [
    # Base classes
    "BaseParser",
    "ParserError",
    # Parser implementations
    "TreeSitterParser",
    # Resolution and extraction
    "FunctionNameResolver",
    "NameMatch",
    "NAMING_RULES",
    "CallExtractor",
    "callee_name",
    "DEFAULT_BUILTIN_CALLS",
    "TraversalContext",
    "walk",
    "walk_scope",
    # Records
    "FunctionKey",
    "FunctionKind",
    "FunctionRecord",
    "CallKind",
    "CallRecord",
    "ImportDescriptor",
    "ExportDescriptor",
    "SourceUnit",
    "ParseResult",
]
