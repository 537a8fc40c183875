"""Pydantic models for parsed JavaScript source units.

This module defines the records produced by a single file scan: the
functions found in the file, the calls observed in it, and informational
import/export descriptors. All records are frozen once created; fan-in and
fan-out figures are owned by the call graph, not by these records.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# (file path, resolved name, declaration line)
FunctionKey = tuple[str, str, int]

# Stand-ins for parameters that do not bind a single plain name.
OBJECT_PARAMETER = "object"
ARRAY_PARAMETER = "array"
UNNAMED_PARAMETER = "unnamed"


class FunctionKind(str, Enum):
    """Syntactic form of a function definition."""

    DECLARATION = "declaration"
    EXPRESSION = "named-expression"
    ARROW = "arrow"
    METHOD = "method"


class CallKind(str, Enum):
    """How the callee of a call expression is written."""

    DIRECT = "direct-identifier"
    MEMBER = "member-expression"


class FunctionRecord(BaseModel):
    """One function definition found in a source file.

    Attributes:
        name: Resolved function name (declared or heuristically assigned).
        file_path: Path of the file containing the definition.
        module: Module name derived from the file name.
        parameters: Declared parameter names. Destructured or complex
            parameters appear as the placeholders ``object``, ``array`` or
            ``unnamed``.
        calls: Outgoing call names in first-seen order, both direct and
            member calls, without duplicates.
        direct_calls: The subset of ``calls`` made through a bare identifier.
        line: Declaration line (1-indexed).
        end_line: Last line of the definition (1-indexed).
        kind: Syntactic form of the definition.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., description="Resolved function name")
    file_path: str = Field(..., description="Path to the source file")
    module: str = Field(..., description="Module name (file stem)")
    parameters: list[str] = Field(default_factory=list, description="Parameter names")
    calls: list[str] = Field(default_factory=list, description="Outgoing call names")
    direct_calls: list[str] = Field(
        default_factory=list, description="Outgoing bare-identifier call names"
    )
    line: int = Field(..., ge=1, description="Declaration line (1-indexed)")
    end_line: int = Field(..., ge=1, description="End line (1-indexed)")
    kind: FunctionKind = Field(..., description="Syntactic form")

    @property
    def key(self) -> FunctionKey:
        """Identity of the function within an analysis run."""
        return (self.file_path, self.name, self.line)

    @property
    def id(self) -> str:
        """String identity in format {file_path}:{name}:{line}."""
        return f"{self.file_path}:{self.name}:{self.line}"


class CallRecord(BaseModel):
    """One call expression observed in a source file.

    Attributes:
        source_file: File in which the call appears.
        source_function: Resolved name of the innermost enclosing function,
            None for top-level code.
        target: Callee name (``foo`` or ``obj.method``).
        line: Line of the call (1-indexed).
        column: Column of the call (0-indexed).
        kind: Direct identifier or member expression call.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    source_file: str = Field(..., description="File containing the call")
    source_function: str | None = Field(None, description="Enclosing function name")
    target: str = Field(..., description="Callee name")
    line: int = Field(..., ge=1, description="Line of the call")
    column: int = Field(0, ge=0, description="Column of the call")
    kind: CallKind = Field(..., description="Callee form")


class ImportDescriptor(BaseModel):
    """An ES module import or CommonJS require.

    Attributes:
        source: Module specifier being imported.
        local_names: Local bindings introduced by the import.
        imported_names: Exported names requested from the source module.
        is_require: True for ``require('...')`` calls.
        line: Line of the import.
    """

    model_config = ConfigDict(frozen=True)

    source: str = Field(..., description="Module specifier")
    local_names: list[str] = Field(default_factory=list, description="Local bindings")
    imported_names: list[str] = Field(default_factory=list, description="Imported names")
    is_require: bool = Field(False, description="True for require() calls")
    line: int = Field(..., ge=1, description="Line of the import")


class ExportDescriptor(BaseModel):
    """An ES module export statement.

    Attributes:
        names: Exported names; ``default`` for default exports.
        is_default: True for ``export default``.
        source: Re-export source module, if any.
        line: Line of the export.
    """

    model_config = ConfigDict(frozen=True)

    names: list[str] = Field(default_factory=list, description="Exported names")
    is_default: bool = Field(False, description="True for export default")
    source: str | None = Field(None, description="Re-export source")
    line: int = Field(..., ge=1, description="Line of the export")


class SourceUnit(BaseModel):
    """The result of scanning one source file.

    Attributes:
        path: Path to the file.
        module: Module name derived from the file name.
        functions: Function definitions in discovery order.
        calls: Every recorded call in the file, in source order.
        imports: Import descriptors (informational).
        exports: Export descriptors (informational).
        syntax_errors: Recoverable syntax errors seen while parsing.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    path: str = Field(..., description="Path to the source file")
    module: str = Field(..., description="Module name (file stem)")
    functions: list[FunctionRecord] = Field(default_factory=list, description="Functions")
    calls: list[CallRecord] = Field(default_factory=list, description="File-level calls")
    imports: list[ImportDescriptor] = Field(default_factory=list, description="Imports")
    exports: list[ExportDescriptor] = Field(default_factory=list, description="Exports")
    syntax_errors: list[str] = Field(
        default_factory=list, description="Recoverable syntax errors"
    )

    @property
    def function_names(self) -> set[str]:
        """Names of all functions defined in this unit."""
        return {func.name for func in self.functions}


class ParseResult(BaseModel):
    """Result of parsing a source file.

    Attributes:
        unit: The extracted source unit.
        file_path: Path to the parsed file.
        language: Language the file was parsed as.
        parse_errors: Recoverable syntax errors encountered.
        success: True when the tree contained no syntax errors.
    """

    unit: SourceUnit = Field(..., description="Extracted source unit")
    file_path: str = Field(..., description="Path to the parsed file")
    language: str = Field(..., description="Programming language")
    parse_errors: list[str] = Field(default_factory=list, description="Parsing errors encountered")
    success: bool = Field(True, description="Whether parsing was error free")
