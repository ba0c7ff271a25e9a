"""Tests for the stdout/stderr logging split"""

import logging

import pytest

from form_builder.logging_config import InfoFilter, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def _record(level):
    return logging.LogRecord("form_builder", level, __file__, 1, "msg", None, None)


def test_info_filter_blocks_warnings():
    info_filter = InfoFilter()
    assert info_filter.filter(_record(logging.INFO))
    assert info_filter.filter(_record(logging.DEBUG))
    assert not info_filter.filter(_record(logging.WARNING))


def test_setup_logging_installs_two_handlers(restore_root_logger):
    setup_logging("debug")
    setup_logging("debug")

    assert len(restore_root_logger.handlers) == 2
    assert restore_root_logger.level == logging.DEBUG
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


def test_unknown_level_falls_back_to_info(restore_root_logger):
    setup_logging("chatty")
    assert restore_root_logger.level == logging.INFO
