from .errors import (
    BenchLabError,
    ConfigurationError,
    EmptyBatchError,
    ScoreFieldError,
    SelectionError,
)
from .median import median_index, select_median

__all__ = [
    "BenchLabError",
    "ConfigurationError",
    "EmptyBatchError",
    "ScoreFieldError",
    "SelectionError",
    "median_index",
    "select_median",
]
