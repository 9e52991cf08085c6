from .dtcc_logging import (
    init_logging,
    get_logger,
    get_python_logger,
    set_log_level,
    log_level,
)
from .progress import ProgressTracker, report_progress, get_progress

debug, info, warning, error, critical = get_logger()

__all__ = [
    "init_logging",
    "get_logger",
    "get_python_logger",
    "set_log_level",
    "log_level",
    "ProgressTracker",
    "report_progress",
    "get_progress",
    "debug",
    "info",
    "warning",
    "error",
    "critical",
]
