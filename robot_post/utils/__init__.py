"""Shared utilities: logging configuration and filesystem helpers."""

from robot_post.utils import fs, logging_config

__all__ = ["fs", "logging_config"]
