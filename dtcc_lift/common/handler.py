# Copyright(C) 2023 Anders Logg
# Licensed under the MIT License

"""Rich logging handler for dtcc-lift.

Every record is printed as one line per message line:

    [13:24:20] [dtcc-lift] [warning] Node column is empty at one end of ...

The handler shares its console with the progress bar so that messages
logged while a lift is running are printed above the bar.
"""

from datetime import datetime
from logging import LogRecord
from typing import Tuple

from rich.console import Console
from rich.highlighter import NullHighlighter
from rich.logging import RichHandler
from rich.text import Text
from rich.traceback import Traceback

# level -> (style of the level tag, style of the message)
LEVEL_STYLES = {
    "DEBUG": ("dim", "dim"),
    "INFO": ("bright_blue", ""),
    "WARNING": ("yellow", "yellow"),
    "ERROR": ("red bold", "red"),
    "CRITICAL": ("white on red", "red bold"),
}


def _tag(text: str, style: str = "dim") -> Tuple[Tuple[str, str], ...]:
    return (("[", "dim"), (text, style), ("] ", "dim"))


class LoggingHandler(RichHandler):
    """RichHandler with the dtcc one-line format and no rich columns."""

    def __init__(self, source_name: str = "dtcc-lift", console: Console = None, **kwargs):
        kwargs.setdefault("rich_tracebacks", True)
        super().__init__(
            console=console,
            show_time=False,
            show_level=False,
            show_path=False,
            markup=False,
            highlighter=NullHighlighter(),
            **kwargs,
        )
        self.source_name = source_name

    def format_lines(self, record: LogRecord):
        """Styled lines of a record, without traceback."""
        level_style, message_style = LEVEL_STYLES.get(record.levelname, ("", ""))
        prefix = (
            _tag(datetime.fromtimestamp(record.created).strftime("%H:%M:%S"))
            + _tag(self.source_name)
            + _tag(record.levelname.lower(), level_style)
        )
        return [
            Text.assemble(*prefix, (line, message_style))
            for line in record.getMessage().split("\n")
        ]

    def emit(self, record: LogRecord) -> None:
        try:
            for line in self.format_lines(record):
                self.console.print(line)
            if record.exc_info and self.rich_tracebacks:
                exc_type, exc_value, tb = record.exc_info
                self.console.print(
                    Traceback.from_exception(
                        exc_type, exc_value, tb, show_locals=self.tracebacks_show_locals
                    )
                )
        except Exception:
            self.handleError(record)
