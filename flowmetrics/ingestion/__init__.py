"""Ingestion module for project discovery and analysis runs.

This module provides file discovery and the pipeline that parses every
discovered file, builds the call graph and computes metrics.

Example:
    >>> from flowmetrics.ingestion import AnalysisPipeline
    >>> pipeline = AnalysisPipeline()
    >>> result = pipeline.run("/path/to/project")
    >>> print(f"Analysed {result.files_processed} files")
"""

from .discovery import FileDiscovery
from .models import AnalysisResult, DiscoveryConfig, FileInfo, IngestionError
from .pipeline import AnalysisPipeline, NoSourceFilesError, ProgressCallback

__all__ = [
    # Main pipeline
    "AnalysisPipeline",
    "ProgressCallback",
    "NoSourceFilesError",
    # Models
    "AnalysisResult",
    "DiscoveryConfig",
    "FileInfo",
    "IngestionError",
    # File discovery
    "FileDiscovery",
]
