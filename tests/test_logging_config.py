"""Tests for songshelf.logging_config."""

from __future__ import annotations

import logging
import logging.handlers

import pytest

from songshelf.logging_config import (
    LOG_FILE_BACKUPS,
    LOG_FILE_MAX_BYTES,
    get_logger,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_get_logger_namespaces():
    assert get_logger("songshelf.ingest").name == "songshelf.ingest"
    assert get_logger("worker").name == "songshelf.worker"


def test_setup_logging_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "songshelf.log"
    logger = setup_logging("DEBUG", log_file, console_output=False)
    get_logger("songshelf.test").error("disk on fire")
    for handler in logging.getLogger().handlers:
        handler.flush()
    assert logger.name == "songshelf"
    assert "disk on fire" in log_file.read_text()


def test_setup_logging_rejects_unknown_level():
    with pytest.raises(ValueError):
        setup_logging("LOUD", console_output=False)


def test_log_file_rotates(tmp_path):
    log_file = tmp_path / "songshelf.log"
    setup_logging("INFO", log_file, console_output=False)
    handlers = [
        h for h in logging.getLogger().handlers
        if isinstance(h, logging.handlers.RotatingFileHandler)
    ]
    assert len(handlers) == 1
    assert handlers[0].maxBytes == LOG_FILE_MAX_BYTES
    assert handlers[0].backupCount == LOG_FILE_BACKUPS
