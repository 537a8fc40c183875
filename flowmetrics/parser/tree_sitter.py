"""Tree-sitter based parser implementation.

This module provides the syntax ingestor: it turns JavaScript source into a
tree-sitter tree with line/column positions on every node and hands the tree
to the language extractor. Tree-sitter recovers from most syntax errors by
inserting ERROR or MISSING nodes; those are reported but do not abort the
parse unless the tree is unusable or strict mode is enabled.
"""

from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from .base import BaseParser, ParserError
from .calls import DEFAULT_BUILTIN_CALLS
from .languages import get_extractor
from .languages.base import BaseExtractor
from .models import ParseResult
from .traversal import walk

if TYPE_CHECKING:
    from tree_sitter import Language, Node, Parser, Tree

logger = structlog.get_logger(__name__)


class TreeSitterParser(BaseParser):
    """Tree-sitter based source code parser.

    Attributes:
        supported_languages: Languages this parser can handle.
        strict_syntax: Treat any syntax error as unrecoverable.
        builtins: Direct-call names excluded from call extraction.
    """

    supported_languages: set[str] = {"javascript"}

    def __init__(
        self,
        *,
        strict_syntax: bool = False,
        builtins: frozenset[str] | set[str] = DEFAULT_BUILTIN_CALLS,
    ) -> None:
        """Initialize the TreeSitterParser.

        Grammars are loaded lazily on first use.

        Args:
            strict_syntax: Reject files containing any syntax error.
            builtins: Direct-call names excluded from call extraction.
        """
        self.strict_syntax = strict_syntax
        self.builtins = frozenset(builtins)
        self._initialized = False
        self._parsers: dict[str, Parser] = {}
        self._languages: dict[str, Language] = {}
        self._extractors: dict[str, BaseExtractor] = {}
        logger.debug("TreeSitterParser created (lazy initialization)")

    def _ensure_initialized(self) -> None:
        """Load the tree-sitter grammars on first use."""
        if self._initialized:
            return

        self._init_javascript_parser()
        self.supported_languages = set(self._parsers.keys())
        self._initialized = True
        logger.debug(
            "TreeSitterParser initialized",
            languages=sorted(self.supported_languages),
        )

    def _init_javascript_parser(self) -> None:
        """Initialize the JavaScript tree-sitter parser (JSX included)."""
        import tree_sitter_javascript
        from tree_sitter import Language, Parser

        language = Language(tree_sitter_javascript.language())
        parser = Parser(language)

        self._languages["javascript"] = language
        self._parsers["javascript"] = parser
        logger.debug("JavaScript tree-sitter parser initialized")

    def _get_parser(self, language: str) -> "Parser":
        """Get the tree-sitter parser for a language.

        Raises:
            ParserError: If no parser is available for the language.
        """
        if language not in self._parsers:
            raise ParserError(f"No parser available for language: {language}")
        return self._parsers[language]

    def _get_extractor(self, language: str) -> BaseExtractor:
        """Get the (cached) extractor for a language.

        Raises:
            ParserError: If no extractor is available for the language.
        """
        if language not in self._extractors:
            try:
                self._extractors[language] = get_extractor(language, builtins=self.builtins)
            except ValueError as e:
                raise ParserError(str(e)) from e
        return self._extractors[language]

    def _parse_to_tree(self, source_code: str, language: str) -> "Tree":
        """Parse source code into a tree-sitter tree.

        Raises:
            ParserError: If tree-sitter returns no tree.
        """
        parser = self._get_parser(language)
        tree = parser.parse(source_code.encode("utf-8"))

        if tree is None:
            raise ParserError(f"tree-sitter failed to parse {language} source")

        return tree

    def parse_file(
        self,
        file_path: Path | str,
        *,
        encoding: str = "utf-8",
    ) -> ParseResult:
        """Read and parse a source file.

        Args:
            file_path: Path to the source file to parse.
            encoding: Character encoding of the file. Defaults to utf-8.

        Returns:
            ParseResult containing the source unit and any recoverable errors.

        Raises:
            FileNotFoundError: If the file does not exist.
            ParserError: If the file cannot be read, decoded or parsed.
        """
        self._ensure_initialized()

        path = Path(file_path) if isinstance(file_path, str) else file_path
        path_str = str(path)

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path_str}")

        if not path.is_file():
            raise ParserError("Path is not a file", file_path=path_str)

        language = self.detect_language(path)
        if not language:
            raise ParserError(f"Cannot detect language for file: {path.name}", file_path=path_str)

        try:
            source_code = path.read_text(encoding=encoding)
        except UnicodeDecodeError as e:
            raise ParserError(f"Cannot decode file with {encoding}", file_path=path_str) from e
        except OSError as e:
            raise ParserError(f"Cannot read file: {e.strerror}", file_path=path_str) from e

        logger.debug("Parsing file", file=path_str, language=language)

        return self.parse_source(source_code, file_path=path_str, language=language)

    def parse_source(
        self,
        source_code: str,
        *,
        file_path: str | None = None,
        language: str | None = None,
    ) -> ParseResult:
        """Parse source code from a string.

        Args:
            source_code: The source code to parse.
            file_path: Optional virtual file path for identities.
            language: Language identifier.

        Returns:
            ParseResult containing the source unit and any recoverable errors.

        Raises:
            ValueError: If language cannot be determined.
            ParserError: If the tree is unusable, or has any syntax error in
                strict mode.
        """
        self._ensure_initialized()

        effective_path = file_path or "<string>"

        if not language and file_path:
            language = self.detect_language(file_path)

        if not language:
            raise ValueError("Language must be specified or inferrable from file_path")

        if not self.supports_language(language):
            raise ParserError(f"Unsupported language: {language}", file_path=effective_path)

        tree = self._parse_to_tree(source_code, language)
        root = tree.root_node

        parse_errors: list[str] = []
        if root.has_error:
            error_nodes = self._find_error_nodes(root)
            for error_node in error_nodes:
                line = error_node.start_point[0] + 1
                col = error_node.start_point[1] + 1
                parse_errors.append(f"Syntax error at line {line}, column {col}")

            if error_nodes and (self.strict_syntax or self._is_unrecoverable(root)):
                first = error_nodes[0]
                raise ParserError(
                    "Unrecoverable syntax error",
                    file_path=effective_path,
                    line=first.start_point[0] + 1,
                    column=first.start_point[1] + 1,
                )

            logger.warning(
                "Parse tree contains recoverable errors",
                file=effective_path,
                errors=len(error_nodes),
            )

        extractor = self._get_extractor(language)
        unit = extractor.extract_unit(tree, source_code, effective_path)
        if parse_errors:
            unit = unit.model_copy(update={"syntax_errors": parse_errors})

        return ParseResult(
            unit=unit,
            file_path=effective_path,
            language=language,
            parse_errors=parse_errors,
            success=len(parse_errors) == 0,
        )

    def _find_error_nodes(self, root: "Node") -> list["Node"]:
        """All ERROR and MISSING nodes in the tree, in source order."""
        return [node for node, _ in walk(root) if node.type == "ERROR" or node.is_missing]

    def _is_unrecoverable(self, root: "Node") -> bool:
        """True when the tree holds no usable statement at all."""
        if root.type == "ERROR":
            return True
        statements = [child for child in root.named_children if child.type != "comment"]
        return bool(statements) and all(child.type == "ERROR" for child in statements)

    def debug_ast(
        self,
        source_code: str,
        language: str = "javascript",
        max_depth: int = 10,
    ) -> str:
        """Generate a debug representation of the tree.

        Useful when working on naming rules against the grammar's node
        shapes.

        Args:
            source_code: The source code to parse.
            language: The programming language.
            max_depth: Maximum depth to print.

        Returns:
            Indented one-node-per-line rendering of the tree.
        """
        self._ensure_initialized()

        tree = self._parse_to_tree(source_code, language)
        lines: list[str] = []
        for node, context in walk(tree.root_node):
            depth = len(context.ancestors)
            if depth > max_depth:
                continue
            indent = "  " * depth
            if depth == max_depth:
                lines.append(f"{indent}...")
                continue
            text = (node.text or b"").decode("utf-8", errors="replace")
            if len(text) > 50:
                text = text[:50] + "..."
            text = text.replace("\n", "\\n")
            lines.append(
                f"{indent}{node.type} [{node.start_point[0] + 1}:{node.start_point[1]}]"
                f" = {text!r}"
            )
        return "\n".join(lines) + "\n"
