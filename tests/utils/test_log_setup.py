"""Tests for logging setup and console summaries."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest
from rich.logging import RichHandler

from versionmap.utils.log_setup import display_error_summary, display_warning_summary, setup_logging

if TYPE_CHECKING:
	from pathlib import Path


@pytest.mark.unit
class TestSetupLogging:
	"""Test cases for setup_logging."""

	def test_console_only(self) -> None:
		"""Without a log file the root logger shows warnings through rich."""
		setup_logging(is_verbose=False)

		root_logger = logging.getLogger()
		assert root_logger.level == logging.WARNING
		assert [type(handler) for handler in root_logger.handlers] == [RichHandler]

	def test_verbose(self) -> None:
		"""Verbose mode lowers the console level to debug."""
		setup_logging(is_verbose=True)

		assert logging.getLogger().handlers[0].level == logging.DEBUG

	@pytest.mark.fs
	def test_log_file_receives_debug_records(self, tmp_path: Path) -> None:
		"""The log file keeps debug records even when the console does not."""
		log_file = tmp_path / "logs" / "versionmap.log"

		setup_logging(is_verbose=False, log_to_console=False, log_file_path=log_file)
		logging.getLogger("versionmap.test").debug("Cache hit for merge base")
		for handler in logging.getLogger().handlers:
			handler.flush()

		assert "Cache hit for merge base" in log_file.read_text(encoding="utf-8")
		for handler in logging.getLogger().handlers[:]:
			handler.close()


@pytest.mark.unit
class TestSummaries:
	"""Test cases for the error and warning summaries."""

	def test_error_summary(self, capsys: pytest.CaptureFixture[str]) -> None:
		"""The error message is printed under an error title."""
		display_error_summary("Branch not found: nope")

		output = capsys.readouterr().out
		assert "Error Summary" in output
		assert "Branch not found: nope" in output

	def test_warning_summary(self, capsys: pytest.CaptureFixture[str]) -> None:
		"""The warning message is printed under a warning title."""
		display_warning_summary("Multiple source branches were found")

		output = capsys.readouterr().out
		assert "Warning Summary" in output
		assert "Multiple source branches were found" in output
