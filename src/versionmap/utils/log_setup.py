"""
Logging setup for versionmap.

Log records go to stderr through rich so command output on stdout stays
machine readable. A log file can be added to keep the full debug trail of how
a branch source or merge base was chosen.

"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.rule import Rule
from rich.text import Text

console = Console()

FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s"


def setup_logging(
	is_verbose: bool = False,
	log_to_console: bool = True,
	log_file_path: Path | str | None = None,
) -> None:
	"""
	Configure the root logger for a versionmap run.

	Args:
	    is_verbose: Show debug records (cache hits, correction steps) on the console
	    log_to_console: Whether to log to stderr
	    log_file_path: Optional file that receives every record at debug level

	"""
	console_level = logging.DEBUG if is_verbose else logging.WARNING

	root_logger = logging.getLogger()
	root_logger.setLevel(logging.DEBUG if log_file_path else console_level)
	for handler in root_logger.handlers[:]:
		root_logger.removeHandler(handler)

	if log_to_console:
		root_logger.addHandler(
			RichHandler(
				level=console_level,
				console=Console(stderr=True),
				rich_tracebacks=True,
				show_path=is_verbose,
			)
		)

	if log_file_path:
		file_path = Path(log_file_path)
		try:
			file_path.parent.mkdir(parents=True, exist_ok=True)
			file_handler = logging.FileHandler(file_path, mode="a", encoding="utf-8")
		except OSError:
			root_logger.exception("Failed to set up file logging to %s", file_path)
			return
		file_handler.setLevel(logging.DEBUG)
		file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
		root_logger.addHandler(file_handler)
		root_logger.debug("Logging to file: %s", file_path)


def _display_summary(title: str, message: str, style: str) -> None:
	console.print()
	console.print(Rule(Text(title, style=f"bold {style}"), style=style))
	console.print(f"\n{message}\n")
	console.print(Rule(style=style))
	console.print()


def display_error_summary(error_message: str) -> None:
	"""Print an error between two red rules."""
	_display_summary("Error Summary", error_message, "red")


def display_warning_summary(warning_message: str) -> None:
	"""Print a warning, e.g. an ambiguous source branch, between two yellow rules."""
	_display_summary("Warning Summary", warning_message, "yellow")
