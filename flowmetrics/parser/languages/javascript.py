"""JavaScript language extractor using tree-sitter.

This module walks a tree-sitter JavaScript tree once and produces the
file's :class:`SourceUnit`: resolved function records with their call
lists, every file-level call, and import/export descriptors.
"""

from typing import TYPE_CHECKING

import structlog

from ..calls import DEFAULT_BUILTIN_CALLS, CallExtractor, callee_name
from ..models import (
    ARRAY_PARAMETER,
    OBJECT_PARAMETER,
    UNNAMED_PARAMETER,
    CallRecord,
    ExportDescriptor,
    FunctionKey,
    FunctionKind,
    FunctionRecord,
    ImportDescriptor,
    SourceUnit,
)
from ..naming import FunctionNameResolver, string_value
from ..traversal import TraversalContext, is_function_node, node_line, node_text, walk
from .base import BaseExtractor

if TYPE_CHECKING:
    from tree_sitter import Node, Tree

logger = structlog.get_logger(__name__)

_FUNCTION_KINDS: dict[str, FunctionKind] = {
    "function_declaration": FunctionKind.DECLARATION,
    "generator_function_declaration": FunctionKind.DECLARATION,
    "function_expression": FunctionKind.EXPRESSION,
    "generator_function": FunctionKind.EXPRESSION,
    "arrow_function": FunctionKind.ARROW,
    "method_definition": FunctionKind.METHOD,
}


class JavaScriptExtractor(BaseExtractor):
    """JavaScript extractor for tree-sitter-javascript trees.

    Attributes:
        language: The language identifier ('javascript').
        call_extractor: Collects calls for functions and files.
    """

    language: str = "javascript"

    def __init__(self, builtins: frozenset[str] | set[str] = DEFAULT_BUILTIN_CALLS) -> None:
        self.call_extractor = CallExtractor(builtins)

    def extract_unit(
        self,
        tree: "Tree",
        source_code: str,
        file_path: str,
    ) -> SourceUnit:
        """Extract the source unit for one JavaScript file.

        A fresh :class:`FunctionNameResolver` is created per call so the
        anonymous-name counter never leaks between files.

        Args:
            tree: The tree-sitter parse tree.
            source_code: The original source code.
            file_path: Path to the source file.

        Returns:
            The SourceUnit for the file.
        """
        module = self.module_name(file_path)
        resolver = FunctionNameResolver()

        functions: list[FunctionRecord] = []
        seen: set[FunctionKey] = set()
        # node id -> resolved name, used to attribute calls to their function
        resolved_names: dict[int, str] = {}
        calls: list[CallRecord] = []
        imports: list[ImportDescriptor] = []
        exports: list[ExportDescriptor] = []

        for node, context in walk(tree.root_node):
            if is_function_node(node):
                name = resolver.resolve(node, context)
                resolved_names[node.id] = name
                record = self._build_function(node, name, file_path, module)
                if record.key in seen:
                    logger.debug("Skipping duplicate function", function=record.id)
                    continue
                seen.add(record.key)
                functions.append(record)

            elif node.type == "call_expression":
                call = self._record_call(node, context, file_path, resolved_names)
                if call is not None:
                    calls.append(call)
                required = self._extract_require(node, context)
                if required is not None:
                    imports.append(required)

            elif node.type == "import_statement":
                descriptor = self.extract_import(node)
                if descriptor is not None:
                    imports.append(descriptor)

            elif node.type == "export_statement":
                descriptor = self.extract_export(node)
                if descriptor is not None:
                    exports.append(descriptor)

        logger.debug(
            "Extracted source unit",
            file=file_path,
            functions=len(functions),
            calls=len(calls),
            imports=len(imports),
            exports=len(exports),
        )

        return SourceUnit(
            path=file_path,
            module=module,
            functions=functions,
            calls=calls,
            imports=imports,
            exports=exports,
        )

    def _build_function(
        self,
        node: "Node",
        name: str,
        file_path: str,
        module: str,
    ) -> FunctionRecord:
        """Build the record for one function definition."""
        start_line, end_line = self.get_node_line_range(node)
        calls, direct_calls = self.call_extractor.extract(node)

        return FunctionRecord(
            name=name,
            file_path=file_path,
            module=module,
            parameters=self._extract_parameters(node),
            calls=calls,
            direct_calls=direct_calls,
            line=start_line,
            end_line=end_line,
            kind=_FUNCTION_KINDS[node.type],
        )

    def _extract_parameters(self, node: "Node") -> list[str]:
        """Declared parameter names, with placeholders for patterns."""
        single = node.child_by_field_name("parameter")
        if single is not None:
            return [node_text(single)]

        params = node.child_by_field_name("parameters")
        if params is None:
            return []

        names: list[str] = []
        for child in params.named_children:
            if child.type == "comment":
                continue
            if child.type == "identifier":
                names.append(node_text(child))
            elif child.type == "object_pattern":
                names.append(OBJECT_PARAMETER)
            elif child.type == "array_pattern":
                names.append(ARRAY_PARAMETER)
            else:
                names.append(UNNAMED_PARAMETER)
        return names

    def _record_call(
        self,
        node: "Node",
        context: TraversalContext,
        file_path: str,
        resolved_names: dict[int, str],
    ) -> CallRecord | None:
        enclosing = context.enclosing_function()
        source_function = resolved_names.get(enclosing.id) if enclosing is not None else None
        return self.call_extractor.record(
            node,
            file_path=file_path,
            source_function=source_function,
        )

    def _extract_require(
        self,
        node: "Node",
        context: TraversalContext,
    ) -> ImportDescriptor | None:
        """``require('module')`` as an import descriptor."""
        resolved = callee_name(node)
        if resolved is None or resolved[0] != "require":
            return None

        arguments = node.child_by_field_name("arguments")
        if arguments is None:
            return None
        source = next((arg for arg in arguments.named_children if arg.type == "string"), None)
        if source is None:
            return None

        local_names: list[str] = []
        parent = context.parent
        if parent is not None and parent.type == "variable_declarator":
            target = parent.child_by_field_name("name")
            if target is not None and target.type == "identifier":
                local_names.append(node_text(target))
            elif target is not None and target.type == "object_pattern":
                local_names.extend(
                    node_text(child)
                    for child in target.named_children
                    if child.type == "shorthand_property_identifier_pattern"
                )

        return ImportDescriptor(
            source=string_value(source),
            local_names=local_names,
            imported_names=[],
            is_require=True,
            line=node_line(node),
        )

    def extract_import(self, node: "Node") -> ImportDescriptor | None:
        """Build a descriptor for an ES ``import`` statement."""
        if node.type != "import_statement":
            return None

        source = node.child_by_field_name("source")
        local_names: list[str] = []
        imported_names: list[str] = []

        for clause in node.named_children:
            if clause.type != "import_clause":
                continue
            for child in clause.named_children:
                if child.type == "identifier":
                    local_names.append(node_text(child))
                    imported_names.append("default")
                elif child.type == "namespace_import":
                    alias = next(
                        (c for c in child.named_children if c.type == "identifier"), None
                    )
                    local_names.append(node_text(alias))
                    imported_names.append("*")
                elif child.type == "named_imports":
                    for spec in child.named_children:
                        if spec.type != "import_specifier":
                            continue
                        name = node_text(spec.child_by_field_name("name"))
                        alias = spec.child_by_field_name("alias")
                        imported_names.append(name)
                        local_names.append(node_text(alias) if alias is not None else name)

        return ImportDescriptor(
            source=string_value(source) if source is not None else "",
            local_names=local_names,
            imported_names=imported_names,
            is_require=False,
            line=node_line(node),
        )

    def extract_export(self, node: "Node") -> ExportDescriptor | None:
        """Build a descriptor for an ES ``export`` statement."""
        if node.type != "export_statement":
            return None

        is_default = any(child.type == "default" for child in node.children)
        source = node.child_by_field_name("source")
        names: list[str] = []

        declaration = node.child_by_field_name("declaration")
        if is_default:
            names.append("default")
        elif declaration is not None:
            names.extend(self._declared_names(declaration))
        else:
            for child in node.named_children:
                if child.type != "export_clause":
                    continue
                for spec in child.named_children:
                    if spec.type != "export_specifier":
                        continue
                    alias = spec.child_by_field_name("alias")
                    if alias is None:
                        alias = spec.child_by_field_name("name")
                    names.append(node_text(alias))
            if not names and source is not None:
                names.append("*")

        return ExportDescriptor(
            names=names,
            is_default=is_default,
            source=string_value(source) if source is not None else None,
            line=node_line(node),
        )

    def _declared_names(self, declaration: "Node") -> list[str]:
        """Names bound by an exported declaration."""
        name = declaration.child_by_field_name("name")
        if name is not None:
            return [node_text(name)]

        names: list[str] = []
        for child in declaration.named_children:
            if child.type == "variable_declarator":
                target = child.child_by_field_name("name")
                if target is not None and target.type == "identifier":
                    names.append(node_text(target))
        return names
