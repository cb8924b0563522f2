"""Load trajectory documents from JSON or YAML.

Usage:
    from robot_post.documents import load_document
    document = load_document("job.json")
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml
from pydantic import ValidationError

from robot_post.documents.schema import TrajectoryDocument
from robot_post.utils import fs

logger = logging.getLogger(__name__)

JSON_SUFFIXES = (".json",)
YAML_SUFFIXES = (".yaml", ".yml")


class DocumentError(ValueError):
    """Raised when a document cannot be read or does not match the schema."""

    pass


def _format_validation_error(exc: ValidationError) -> str:
    """One line per offending field, e.g. ``trajectory.0.speed: Field required``."""
    lines = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"]) or "<root>"
        lines.append(f"  {loc}: {err['msg']}")
    return f"{exc.error_count()} validation error(s)\n" + "\n".join(lines)


def parse_document(data: Any, source: str = "<memory>") -> TrajectoryDocument:
    """Validate an in-memory mapping against :class:`TrajectoryDocument`.

    Parameters
    ----------
    data : Any
        Parsed JSON/YAML content.
    source : str
        Name used in error messages.

    Returns
    -------
    TrajectoryDocument
        Validated document.

    Raises
    ------
    DocumentError
        If *data* is not a mapping or any field is missing or mistyped.
        Every offending field is listed.
    """
    if not isinstance(data, dict):
        raise DocumentError(
            f"Document {source} must be a mapping, got {type(data).__name__}"
        )
    try:
        return TrajectoryDocument.model_validate(data)
    except ValidationError as e:
        raise DocumentError(
            f"Document validation failed at {source}: {_format_validation_error(e)}"
        ) from e


def _read(path: Path) -> Dict[str, Any]:
    suffix = path.suffix.lower()
    if suffix in JSON_SUFFIXES:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise DocumentError(f"Failed to parse JSON document {path}: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentError(f"Cannot read document {path}: {e}") from e
    if suffix in YAML_SUFFIXES:
        try:
            return fs.load_yaml(path)
        except yaml.YAMLError as e:
            raise DocumentError(str(e)) from e
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentError(f"Cannot read document {path}: {e}") from e
    raise DocumentError(
        f"Unsupported document format '{path.suffix}' for {path}. "
        f"Use one of: {', '.join(JSON_SUFFIXES + YAML_SUFFIXES)}"
    )


def load_document(path: Union[str, Path]) -> TrajectoryDocument:
    """Read and validate a trajectory document.

    Raises
    ------
    FileNotFoundError
        If *path* doesn't exist
    DocumentError
        If the file cannot be read, cannot be parsed or fails schema validation
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Trajectory document not found: {path}")

    document = parse_document(_read(path), source=str(path))
    logger.debug(
        "Loaded %s: robot=%s firmware=%s points=%d",
        path, document.robot, document.firmware_version, len(document.trajectory),
    )
    return document
