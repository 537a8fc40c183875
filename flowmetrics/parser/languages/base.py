"""Abstract base class for language-specific extractors.

This module defines the interface that language extractors implement. Each
extractor traverses a tree-sitter tree for its language and produces the
:class:`SourceUnit` for one file.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tree_sitter import Node, Tree

from ..models import ExportDescriptor, ImportDescriptor, SourceUnit


class BaseExtractor(ABC):
    """Abstract base class for language-specific extractors.

    Attributes:
        language: The language identifier this extractor handles.
    """

    language: str = ""

    @abstractmethod
    def extract_unit(
        self,
        tree: "Tree",
        source_code: str,
        file_path: str,
    ) -> SourceUnit:
        """Extract the source unit for one file.

        This is the main entry point for extraction. It traverses the whole
        tree once, resolving functions, collecting calls and recording
        import/export descriptors.

        Args:
            tree: The tree-sitter parse tree.
            source_code: The original source code.
            file_path: Path to the source file.

        Returns:
            The SourceUnit for the file.
        """
        ...

    @abstractmethod
    def extract_import(self, node: "Node") -> ImportDescriptor | None:
        """Build an import descriptor from an import node, if it is one."""
        ...

    @abstractmethod
    def extract_export(self, node: "Node") -> ExportDescriptor | None:
        """Build an export descriptor from an export node, if it is one."""
        ...

    @staticmethod
    def module_name(file_path: str) -> str:
        """Module name for a file: its name without extension."""
        return Path(file_path).stem

    def get_node_line_range(self, node: "Node") -> tuple[int, int]:
        """Get the line range of a node (1-indexed).

        Args:
            node: The tree-sitter node.

        Returns:
            Tuple of (start_line, end_line), 1-indexed.
        """
        # tree-sitter uses 0-indexed lines
        return (node.start_point[0] + 1, node.end_point[0] + 1)
