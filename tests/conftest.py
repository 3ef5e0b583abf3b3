"""Global test fixtures and configuration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
	from collections.abc import Iterator


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
	"""Undo the handler and level changes the CLI makes to the root logger."""
	root_logger = logging.getLogger()
	handlers = root_logger.handlers[:]
	level = root_logger.level

	yield

	for handler in root_logger.handlers[:]:
		if handler not in handlers:
			root_logger.removeHandler(handler)
	for handler in handlers:
		if handler not in root_logger.handlers:
			root_logger.addHandler(handler)
	root_logger.setLevel(level)
