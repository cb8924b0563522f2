"""Tests for the processing pipeline.

End-to-end from documents to program files: point-index prefixes, the
workspace reach policy, atomic output, overwrite protection and parallel
batch processing.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from pathlib import Path

import pytest

from robot_post.configs.loader import (
    OutputConfig,
    PostProcessorConfig,
    ProcessingConfig,
    ReachPolicy,
    WorkspaceConfig,
)
from robot_post.documents import parse_document
from robot_post.pipeline import (
    build_trajectory,
    default_output_path,
    postprocess,
    postprocess_file,
    postprocess_files,
)

FIXTURES = Path(__file__).parent / "fixtures"

REFERENCE_PROGRAM = (
    "// Generated code for NovaTech RT-500\n"
    "// Firmware version: 3.2\n"
    "\n"
    "BASE P[0.0,0.0,0.0,0.0,0.0,0.0]\n"
    "TOOL P[0.0,0.0,150.0,0.0,0.0,0.0]\n"
    "\n"
    "MOVL P[500.0,200.0,300.0,0.0,90.0,0.0] SPD=100 ACC=75\n"
)


def _data(*points: dict, firmware: str = "3.2") -> dict:
    return {
        "robot": "NovaTech RT-500",
        "firmware_version": firmware,
        "base_frame": [0, 0, 0, 0, 0, 0],
        "tool_frame": [0, 0, 150, 0, 0, 0],
        "trajectory": list(points),
    }


LINEAR = {"type": "linear", "position": [500, 200, 300, 0, 90, 0], "speed": 100, "acceleration": 75}
FAR = {"type": "linear", "position": [2500, 0, 0, 0, 0, 0], "speed": 100}


def _config(policy: ReachPolicy = ReachPolicy.WARN, **output) -> PostProcessorConfig:
    return PostProcessorConfig(
        workspace=WorkspaceConfig(reach_policy=policy),
        output=OutputConfig(**output) if output else OutputConfig(),
    )


def _write_doc(path: Path, data: dict) -> Path:
    path.write_text(json.dumps(data))
    return path


# ---------------------------------------------------------------------------
# build_trajectory / postprocess
# ---------------------------------------------------------------------------


class TestBuild:
    def test_reference_program(self) -> None:
        out = postprocess(parse_document(_data(LINEAR))).unwrap()
        assert out.code == REFERENCE_PROGRAM
        assert out.robot == "NovaTech RT-500"
        assert out.firmware_version == "3.2"
        assert out.point_count == 1
        assert out.warnings == ()

    def test_insert_error_carries_point_index(self) -> None:
        doc = parse_document(_data(LINEAR, LINEAR, {**LINEAR, "speed": 0}))
        r = build_trajectory(doc)
        assert not r.ok
        assert r.error.message.startswith("Point 2: ")
        assert "Speed must be positive" in r.error.message

    def test_j6_800_message(self) -> None:
        joint = {"type": "joint", "joints": [0, 0, 0, 0, 0, 800], "speed": 50}
        r = build_trajectory(parse_document(_data(joint)))
        assert r.error.message.startswith("Point 0: ")
        assert "exceeds" in r.error.message

    def test_empty_trajectory_generates_nothing(self) -> None:
        r = postprocess(parse_document(_data()))
        assert not r.ok
        assert "at least one point" in r.error.message

    def test_aggregate_errors_not_prefixed(self) -> None:
        r = build_trajectory(parse_document({**_data(LINEAR), "robot": "Other"}))
        assert r.error.message.startswith("Unsupported robot model: Other")

    def test_rejected_point_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        doc = parse_document(_data({**LINEAR, "acceleration": 5}))
        with caplog.at_level(logging.WARNING, logger="robot_post.pipeline"):
            build_trajectory(doc)
        assert "Failed to add point 0" in caplog.text


class TestReachPolicy:
    def test_warn_records_advisory(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="robot_post.pipeline"):
            out = postprocess(parse_document(_data(LINEAR, FAR)), _config()).unwrap()
        assert len(out.warnings) == 1
        assert out.warnings[0].startswith("Point 1: Position [2500.0, 0.0, 0.0] exceeds")
        assert "Workspace advisory" in caplog.text
        assert "MOVL P[2500.0," in out.code

    def test_reject_fails(self) -> None:
        r = postprocess(parse_document(_data(LINEAR, FAR)), _config(ReachPolicy.REJECT))
        assert not r.ok
        assert r.error.message.startswith("Point 1: ")

    def test_ignore_skips(self) -> None:
        out = postprocess(parse_document(_data(FAR)), _config(ReachPolicy.IGNORE)).unwrap()
        assert out.warnings == ()

    def test_joint_points_not_checked(self) -> None:
        joint = {"type": "joint", "joints": [5000, 0, 0, 0, 0, 0], "speed": 5}
        out = postprocess(parse_document(_data(joint)), _config(ReachPolicy.REJECT)).unwrap()
        assert out.point_count == 1


# ---------------------------------------------------------------------------
# File processing
# ---------------------------------------------------------------------------


class TestFile:
    def test_writes_next_to_input(self, tmp_path: Path) -> None:
        src = _write_doc(tmp_path / "job.json", _data(LINEAR))
        report = postprocess_file(src)
        assert report.success
        assert report.output_path == tmp_path / "job.txt"
        assert report.output_path.read_text() == REFERENCE_PROGRAM
        assert not list(tmp_path.glob("*.tmp"))

    def test_explicit_output_path(self, tmp_path: Path) -> None:
        src = _write_doc(tmp_path / "job.json", _data(LINEAR))
        out = tmp_path / "nested" / "program.nt"
        report = postprocess_file(src, out)
        assert report.success
        assert out.read_text() == REFERENCE_PROGRAM

    def test_domain_failure_writes_nothing(self, tmp_path: Path) -> None:
        src = _write_doc(tmp_path / "job.json", _data())
        report = postprocess_file(src)
        assert not report.success
        assert "at least one point" in report.message
        assert not (tmp_path / "job.txt").exists()

    def test_schema_failure_reported(self, tmp_path: Path) -> None:
        src = _write_doc(tmp_path / "job.json", {"robot": "NovaTech RT-500"})
        report = postprocess_file(src)
        assert not report.success
        assert "validation failed" in report.message

    def test_missing_input_reported(self, tmp_path: Path) -> None:
        report = postprocess_file(tmp_path / "absent.json")
        assert not report.success
        assert "not found" in report.message

    def test_undecodable_input_reported(self, tmp_path: Path) -> None:
        src = tmp_path / "job.json"
        src.write_bytes(b'{"robot": "\xff"}')
        report = postprocess_file(src)
        assert not report.success
        assert "Cannot read document" in report.message

    def test_directory_input_reported(self, tmp_path: Path) -> None:
        src = tmp_path / "job.json"
        src.mkdir()
        report = postprocess_file(src)
        assert not report.success
        assert "Cannot read document" in report.message

    def test_suffix_matching_input_keeps_source(self, tmp_path: Path) -> None:
        src = _write_doc(tmp_path / "job.json", _data(LINEAR))
        before = src.read_text()
        report = postprocess_file(src, config=_config(suffix=".json"))
        assert not report.success
        assert "would overwrite the input" in report.message
        assert src.read_text() == before

    def test_explicit_output_equal_to_input(self, tmp_path: Path) -> None:
        src = _write_doc(tmp_path / "job.json", _data(LINEAR))
        before = src.read_text()
        report = postprocess_file(src, tmp_path / "." / "job.json")
        assert not report.success
        assert src.read_text() == before

    def test_overwrite_disabled(self, tmp_path: Path) -> None:
        src = _write_doc(tmp_path / "job.json", _data(LINEAR))
        (tmp_path / "job.txt").write_text("keep me")
        report = postprocess_file(src, config=_config(suffix=".txt", overwrite=False))
        assert not report.success
        assert (tmp_path / "job.txt").read_text() == "keep me"

    def test_custom_suffix(self, tmp_path: Path) -> None:
        cfg = _config(suffix=".nt", overwrite=True)
        assert default_output_path(Path("a/job.yaml"), cfg) == Path("a/job.nt")
        assert default_output_path(Path("a/job.yaml"), cfg, Path("out")) == Path("out/job.nt")

    def test_report_str(self, tmp_path: Path) -> None:
        src = _write_doc(tmp_path / "job.json", _data(LINEAR))
        assert str(postprocess_file(src)).startswith("[OK] ")


class TestBatch:
    def test_fixtures_in_parallel(self, tmp_path: Path) -> None:
        inputs = [
            FIXTURES / "sample_trajectory.json",
            FIXTURES / "edge_cases_trajectory.yaml",
        ]
        reports = postprocess_files(inputs, output_dir=tmp_path)
        assert [r.success for r in reports] == [True, True]
        assert [r.input_path for r in reports] == inputs

        sample = (tmp_path / "sample_trajectory.txt").read_text()
        assert sample.splitlines()[-2] == "MOVJ J[45.0,-30.0,60.0,0.0,45.0,180.0] SPD=50% ACC=50"
        assert sample.splitlines()[-1] == "MOVL P[600.5,-150.2,250.0,0.0,90.0,45.0] SPD=250 ACC=40"

        edge = (tmp_path / "edge_cases_trajectory.txt").read_text().splitlines()
        assert edge[4] == "TOOL P[0.0,0.0,100.5,0.0,0.0,0.0]"
        assert edge[6] == "MOVL P[1200.0,0.0,1600.0,0.0,0.0,0.0] SPD(10000) ACC=100"
        assert edge[7] == "MOVJ J[0.0,0.0,0.0,0.0,0.0,720.0] SPD(1)% ACC=10"
        assert edge[8] == "MOVJ J[0.0,0.0,0.0,0.0,0.0,-720.0] SPD(100)% ACC=50"

    def test_failures_do_not_stop_batch(self, tmp_path: Path) -> None:
        good = _write_doc(tmp_path / "good.json", _data(LINEAR))
        bad = _write_doc(tmp_path / "bad.json", _data())
        cfg = dataclasses.replace(_config(), processing=ProcessingConfig(max_workers=2))
        reports = postprocess_files([bad, good], config=cfg)
        assert [r.success for r in reports] == [False, True]
        assert (tmp_path / "good.txt").exists()

    def test_output_collision(self, tmp_path: Path) -> None:
        a = _write_doc(tmp_path / "job.json", _data(LINEAR))
        b = tmp_path / "job.yaml"
        b.write_text(json.dumps(_data(LINEAR)))
        reports = postprocess_files([a, b], output_dir=tmp_path / "out")
        assert reports[0].success
        assert not reports[1].success
        assert "already used" in reports[1].message

    def test_empty_batch(self) -> None:
        assert postprocess_files([]) == []
