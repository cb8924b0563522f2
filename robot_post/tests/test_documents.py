"""Tests for trajectory document loading.

Covers JSON and YAML parsing, strict schema validation with every
offending field reported, and the unsupported-format path.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from robot_post.documents import (
    DocumentError,
    PointRecord,
    TrajectoryDocument,
    load_document,
    parse_document,
)

FIXTURES = Path(__file__).parent / "fixtures"


def _document(**overrides) -> dict:
    data = {
        "robot": "NovaTech RT-500",
        "firmware_version": "3.2",
        "base_frame": [0, 0, 0, 0, 0, 0],
        "tool_frame": [0, 0, 150, 0, 0, 0],
        "trajectory": [
            {"type": "linear", "position": [500, 200, 300, 0, 90, 0], "speed": 100},
        ],
    }
    data.update(overrides)
    return data


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


class TestLoad:
    def test_json_fixture(self) -> None:
        doc = load_document(FIXTURES / "sample_trajectory.json")
        assert isinstance(doc, TrajectoryDocument)
        assert doc.robot == "NovaTech RT-500"
        assert len(doc.trajectory) == 3
        assert doc.trajectory[0].acceleration == 75
        assert doc.trajectory[1].acceleration is None
        assert doc.trajectory[1].position is None

    def test_yaml_fixture(self) -> None:
        doc = load_document(FIXTURES / "edge_cases_trajectory.yaml")
        assert doc.firmware_version == "3.0"
        assert doc.trajectory[0].type == "LINEAR"
        assert doc.trajectory[1].joints[5] == 720.0

    def test_yml_suffix(self, tmp_path: Path) -> None:
        path = tmp_path / "job.yml"
        path.write_text(json.dumps(_document()))  # JSON is valid YAML
        assert load_document(path).firmware_version == "3.2"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_document(tmp_path / "absent.json")

    def test_unsupported_suffix(self, tmp_path: Path) -> None:
        path = tmp_path / "job.xml"
        path.write_text("<job/>")
        with pytest.raises(DocumentError, match="Unsupported document format"):
            load_document(path)

    def test_malformed_json(self, tmp_path: Path) -> None:
        path = tmp_path / "job.json"
        path.write_text("{not json")
        with pytest.raises(DocumentError, match="Failed to parse JSON"):
            load_document(path)

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "job.yaml"
        path.write_text("robot: [unclosed\n")
        with pytest.raises(DocumentError):
            load_document(path)

    def test_empty_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "job.yaml"
        path.write_text("")
        with pytest.raises(DocumentError, match="must be a mapping"):
            load_document(path)

    def test_undecodable_json(self, tmp_path: Path) -> None:
        path = tmp_path / "job.json"
        path.write_bytes(b'{"robot": "\xff\xfe"}')
        with pytest.raises(DocumentError, match="Cannot read document"):
            load_document(path)

    def test_undecodable_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "job.yaml"
        path.write_bytes(b"robot: \xff\xfe\n")
        with pytest.raises(DocumentError):
            load_document(path)

    def test_directory_named_like_document(self, tmp_path: Path) -> None:
        path = tmp_path / "dir.json"
        path.mkdir()
        with pytest.raises(DocumentError, match="Cannot read document"):
            load_document(path)


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------


class TestSchema:
    def test_valid(self) -> None:
        doc = parse_document(_document())
        assert isinstance(doc.trajectory[0], PointRecord)
        assert doc.trajectory[0].speed == 100

    def test_all_missing_fields_reported(self) -> None:
        with pytest.raises(DocumentError) as exc:
            parse_document({"robot": "NovaTech RT-500"})
        message = str(exc.value)
        for field in ("firmware_version", "base_frame", "tool_frame", "trajectory"):
            assert field in message

    def test_missing_point_speed(self) -> None:
        data = _document(trajectory=[{"type": "linear", "position": [0] * 6}])
        with pytest.raises(DocumentError, match=r"trajectory\.0\.speed"):
            parse_document(data)

    @pytest.mark.parametrize("speed", ["100", 100.0, True])
    def test_speed_must_be_integer(self, speed) -> None:
        data = _document(trajectory=[{"type": "linear", "position": [0] * 6, "speed": speed}])
        with pytest.raises(DocumentError):
            parse_document(data)

    def test_firmware_must_be_string(self) -> None:
        with pytest.raises(DocumentError, match="firmware_version"):
            parse_document(_document(firmware_version=3.1))

    def test_non_mapping_root(self) -> None:
        with pytest.raises(DocumentError, match="must be a mapping"):
            parse_document([1, 2, 3])

    def test_value_semantics_left_to_domain(self) -> None:
        # Wrong arity, zero speed and unknown robots are schema-valid.
        data = _document(
            robot="Unknown",
            base_frame=[0, 0, 0],
            trajectory=[{"type": "spline", "position": [1, 2], "speed": 0}],
        )
        doc = parse_document(data)
        assert doc.base_frame == [0.0, 0.0, 0.0]
        assert doc.trajectory[0].speed == 0

    def test_empty_trajectory_is_schema_valid(self) -> None:
        assert parse_document(_document(trajectory=[])).trajectory == []

    def test_integers_accepted_as_coordinates(self) -> None:
        doc = parse_document(_document())
        assert doc.tool_frame == [0.0, 0.0, 150.0, 0.0, 0.0, 0.0]
