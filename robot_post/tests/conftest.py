"""Shared fixtures."""

from __future__ import annotations

import logging

import pytest

from robot_post.utils import logging_config


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop handlers and context installed by setup_logging() during a test.

    The CLI binds a console handler to the current ``sys.stderr``, which
    pytest swaps per test.
    """
    root = logging.getLogger()
    level = root.level
    yield
    for handler in logging_config._handlers:
        root.removeHandler(handler)
        handler.close()
    logging_config._handlers.clear()
    logging_config.pop_context()
    root.setLevel(level)
