from .common.dtcc_logging import get_logger, log_level, set_log_level

debug, info, warning, error, critical = get_logger("dtcc-lift")

__all__ = ["debug", "info", "warning", "error", "critical", "set_log_level", "log_level"]
