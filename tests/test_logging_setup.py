"""
Tests for the Rich logging bootstrap.
"""

from __future__ import annotations

import logging

import pytest
from rich.logging import RichHandler

import logging_setup


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging_setup._CONFIGURED_LEVEL = None


def _rich_handlers() -> list[logging.Handler]:
    return [h for h in logging.getLogger().handlers if isinstance(h, RichHandler)]


def test_installs_one_rich_handler_across_reruns() -> None:
    logging_setup._CONFIGURED_LEVEL = None
    logging_setup.setup_logging("debug")
    logging_setup.setup_logging("DEBUG")
    assert len(_rich_handlers()) == 1
    assert logging.getLogger().level == logging.DEBUG


def test_level_change_replaces_handler() -> None:
    logging_setup._CONFIGURED_LEVEL = None
    logging_setup.setup_logging("INFO")
    logging_setup.setup_logging("WARNING")
    handlers = _rich_handlers()
    assert len(handlers) == 1
    assert handlers[0].level == logging.WARNING


def test_unknown_level_name_falls_back_to_info() -> None:
    logging_setup._CONFIGURED_LEVEL = None
    logging_setup.setup_logging("chatty")
    assert logging.getLogger().level == logging.INFO


def test_noisy_libraries_are_quieted() -> None:
    logging_setup._CONFIGURED_LEVEL = None
    logging_setup.setup_logging("DEBUG")
    assert logging.getLogger("urllib3").level == logging.WARNING
    assert logging.getLogger("faker").level == logging.WARNING
