"""Trajectory input documents: pydantic schema and JSON/YAML loading."""

from robot_post.documents.loader import DocumentError, load_document, parse_document
from robot_post.documents.schema import PointRecord, TrajectoryDocument

__all__ = [
    "DocumentError",
    "PointRecord",
    "TrajectoryDocument",
    "load_document",
    "parse_document",
]
