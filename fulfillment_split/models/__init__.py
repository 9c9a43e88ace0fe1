"""Domain models for the multi-location fulfillment analyzer.

This package contains the frozen dataclasses passed between the reader, the
detection/reconstruction services and the CLI.
"""

from .analysis_result import AnalysisResult, FileStat, RunResult
from .column_mapping import NOT_FOUND, ColumnMapping
from .config_models import AnalyzerConfig, ColumnLayout
from .header import HeaderLocation
from .order_record import OrderRecord

__all__ = [
    # Configuration models
    "AnalyzerConfig",
    "ColumnLayout",
    # Detection models
    "HeaderLocation",
    "ColumnMapping",
    "NOT_FOUND",
    # Result models
    "OrderRecord",
    "AnalysisResult",
    "FileStat",
    "RunResult",
]
