"""Main analysis pipeline orchestrator.

This module provides the AnalysisPipeline class which runs a complete
analysis: file discovery, per-file parsing, call graph aggregation, and
metric calculation. Files are processed one at a time in discovery order;
the call graph is only built after every file has been parsed.
"""

import time
from collections.abc import Callable
from pathlib import Path

import structlog

from ..analysis import AnalysisConfig, CallGraphBuilder, StructuralMetricsCalculator
from ..config import Settings, get_settings
from ..parser import ParserError, SourceUnit, TreeSitterParser
from .discovery import FileDiscovery
from .models import AnalysisResult, DiscoveryConfig, FileInfo, IngestionError

logger = structlog.get_logger(__name__)


# Type for progress callback
ProgressCallback = Callable[[int, int, str], None]


class NoSourceFilesError(Exception):
    """Raised when discovery finds no source files under the root."""

    def __init__(self, root: str) -> None:
        self.root = root
        super().__init__(f"No JavaScript files found under {root}")


class AnalysisPipeline:
    """Orchestrates discovery, parsing, aggregation and metrics.

    Attributes:
        settings: Application settings.
        parser: Tree-sitter parser instance.
        discovery: File discovery instance.
        calculator: Structural metrics calculator.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        parser: TreeSitterParser | None = None,
    ) -> None:
        """Initialize the AnalysisPipeline.

        Args:
            settings: Application settings. Uses cached settings if not provided.
            parser: Parser instance. Creates a TreeSitterParser from settings
                if not provided.
        """
        self.settings = settings or get_settings()
        self.parser = parser or TreeSitterParser(
            strict_syntax=self.settings.strict_syntax,
            builtins=frozenset(self.settings.builtin_calls),
        )
        self.discovery = FileDiscovery(DiscoveryConfig.from_settings(self.settings))
        self.calculator = StructuralMetricsCalculator(AnalysisConfig.from_settings(self.settings))

        logger.debug("AnalysisPipeline initialized")

    def run(
        self,
        root: str | Path,
        progress_callback: ProgressCallback | None = None,
    ) -> AnalysisResult:
        """Analyse every source file under a root directory.

        Args:
            root: Root directory of the project.
            progress_callback: Optional callback for progress updates.
                Called with (current, total, current_file) on each file.

        Returns:
            AnalysisResult with the call graph, metrics and skipped files.

        Raises:
            NoSourceFilesError: If no source files are found.
        """
        start_time = time.time()
        root_path = Path(root) if isinstance(root, str) else root
        root_str = str(root_path)

        logger.info("Starting analysis", root=root_str)

        files = self.discovery.discover(root_path)
        if not files:
            raise NoSourceFilesError(root_str)

        total_files = len(files)
        logger.info("Discovered files to analyse", files=total_files)

        builder = CallGraphBuilder()
        errors: list[IngestionError] = []

        for index, file_info in enumerate(files, start=1):
            if progress_callback:
                progress_callback(index, total_files, file_info.relative_path)

            unit, error = self._process_file(file_info)
            if error is not None:
                errors.append(error)
            elif unit is not None:
                builder.add_unit(unit)

        # Every file has contributed; flow figures can now be computed.
        graph = builder.build()
        metrics = self.calculator.calculate(graph)

        duration_ms = int((time.time() - start_time) * 1000)

        logger.info(
            "Analysis complete",
            files_processed=len(graph.units),
            functions=len(graph.functions),
            errors=len(errors),
            duration_ms=duration_ms,
        )

        return AnalysisResult(
            root=root_str,
            files=files,
            graph=graph,
            metrics=metrics,
            errors=errors,
            duration_ms=duration_ms,
        )

    def _process_file(self, file_info: FileInfo) -> tuple[SourceUnit | None, IngestionError | None]:
        """Parse one file, converting any failure into an IngestionError."""
        try:
            result = self.parser.parse_file(file_info.path)
        except ParserError as e:
            logger.warning("Skipping file", file=file_info.path, error=e.message, line=e.line)
            return None, IngestionError(
                file_path=file_info.path,
                error_type=type(e).__name__,
                message=e.message,
                line=e.line,
            )
        except Exception as e:
            logger.warning("Skipping file", file=file_info.path, error=str(e))
            return None, IngestionError(
                file_path=file_info.path,
                error_type=type(e).__name__,
                message=str(e),
            )

        return result.unit, None
