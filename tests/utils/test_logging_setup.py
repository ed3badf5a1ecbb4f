"""
日志配置工具的单元测试
"""

import logging

import pytest

from nonbondedmc.utils import setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)


def _console_handlers(root):
    return [h for h in root.handlers if h.get_name() == "nonbondedmc-console"]


def test_sets_level(restore_root_logger):
    setup_logging(level=logging.DEBUG)
    assert restore_root_logger.level == logging.DEBUG
    assert _console_handlers(restore_root_logger)[0].level == logging.DEBUG


def test_console_handler_not_duplicated(restore_root_logger):
    setup_logging()
    setup_logging(level=logging.WARNING)
    consoles = _console_handlers(restore_root_logger)
    assert len(consoles) == 1
    assert consoles[0].level == logging.WARNING


def test_log_file_records_debug(restore_root_logger, tmp_path):
    log_file = tmp_path / "runs" / "salt.log"
    setup_logging(log_file=str(log_file))
    logging.getLogger("nonbondedmc.test").debug("drift detail")
    logging.getLogger("nonbondedmc.test").info("hello drift")
    for h in restore_root_logger.handlers:
        h.flush()
    text = log_file.read_text(encoding="utf-8")
    assert "drift detail" in text
    assert "| INFO | nonbondedmc.test: hello drift" in text
