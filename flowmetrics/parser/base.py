"""Abstract base parser interface.

This module defines the abstract base class that source parsers implement
and the error raised when a file cannot be turned into a usable tree.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from .models import ParseResult


class BaseParser(ABC):
    """Abstract base class for source code parsers.

    Attributes:
        supported_languages: Set of language identifiers this parser supports.
    """

    supported_languages: set[str] = set()

    @abstractmethod
    def parse_file(
        self,
        file_path: Path | str,
        *,
        encoding: str = "utf-8",
    ) -> ParseResult:
        """Parse a source file and extract its source unit.

        Args:
            file_path: Path to the source file to parse.
            encoding: Character encoding of the file. Defaults to utf-8.

        Returns:
            ParseResult containing the source unit and any recoverable errors.

        Raises:
            FileNotFoundError: If the file does not exist.
            ParserError: If the file cannot be read, decoded or parsed.
        """
        ...

    @abstractmethod
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
            file_path: Optional virtual file path used for identities and the
                module name.
            language: Language identifier. If not provided, must be
                inferrable from file_path.

        Returns:
            ParseResult containing the source unit and any recoverable errors.

        Raises:
            ValueError: If language cannot be determined.
            ParserError: If the source cannot be parsed.
        """
        ...

    def supports_language(self, language: str) -> bool:
        """Check if this parser supports the given language."""
        return language.lower() in self.supported_languages

    @staticmethod
    def detect_language(file_path: Path | str) -> str | None:
        """Detect the programming language from a file path.

        Args:
            file_path: Path to the file.

        Returns:
            Language identifier if detected, None otherwise.
        """
        extension_map: dict[str, str] = {
            ".js": "javascript",
            ".mjs": "javascript",
            ".cjs": "javascript",
            ".jsx": "javascript",
        }

        path = Path(file_path) if isinstance(file_path, str) else file_path
        return extension_map.get(path.suffix.lower())


class ParserError(Exception):
    """Exception raised when a file cannot be parsed.

    Attributes:
        message: Explanation of the error.
        file_path: Path to the file being parsed when error occurred.
        line: Line number where error occurred, if known.
        column: Column number where error occurred, if known.
    """

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize the ParserError.

        Args:
            message: Explanation of the error.
            file_path: Path to the file being parsed.
            line: Line number where error occurred.
            column: Column number where error occurred.
        """
        self.message = message
        self.file_path = file_path
        self.line = line
        self.column = column

        details = []
        if file_path:
            details.append(f"file={file_path}")
        if line is not None:
            details.append(f"line={line}")
        if column is not None:
            details.append(f"column={column}")

        full_message = f"{message} ({', '.join(details)})" if details else message

        super().__init__(full_message)
