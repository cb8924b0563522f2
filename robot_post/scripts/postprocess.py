#!/usr/bin/env python3
"""
Post-process Script.

Convert trajectory documents (JSON or YAML) into NovaTech RT-500 programs.

Usage:
    python -m robot_post.scripts.postprocess sample_trajectory.json
    python -m robot_post.scripts.postprocess job.yaml -o job_program.txt
    python -m robot_post.scripts.postprocess *.json --output-dir out/ -j 8
    python -m robot_post.scripts.postprocess job.json --stdout

Exit status:
    0  every input produced a program
    1  at least one input failed
    2  usage or configuration error
"""

from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path

import yaml

from robot_post.configs.loader import (
    ConfigError,
    PostProcessorConfig,
    ProcessingConfig,
    load_config,
)
from robot_post.documents import DocumentError, load_document
from robot_post.pipeline import FileReport, postprocess, postprocess_file, postprocess_files
from robot_post.utils.logging_config import setup_logging

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {text!r}") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="robot-post",
        description="Generate NovaTech RT-500 programs from trajectory documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Input formats: .json, .yaml, .yml",
    )
    parser.add_argument(
        "inputs",
        nargs="+",
        type=Path,
        metavar="INPUT",
        help="Trajectory document(s) to process",
    )

    # Output destination
    dest = parser.add_mutually_exclusive_group()
    dest.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Output program path (single input only)",
    )
    dest.add_argument(
        "--output-dir",
        type=Path,
        help="Directory for generated programs (default: next to each input)",
    )
    dest.add_argument(
        "--stdout",
        action="store_true",
        help="Print programs to stdout instead of writing files",
    )

    parser.add_argument(
        "--config",
        "-c",
        type=str,
        help="Configuration file path",
    )
    parser.add_argument(
        "--jobs",
        "-j",
        type=_positive_int,
        help="Worker threads (overrides processing.max_workers)",
    )

    # Logging
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Override logging.level from the configuration",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit JSON log lines",
    )
    return parser


def _print_reports(reports: list[FileReport]) -> None:
    for report in reports:
        print(report)
        for warning in report.warnings:
            print(f"    warning: {warning}")
    ok = sum(1 for r in reports if r.success)
    print(f"{ok}/{len(reports)} file(s) processed successfully")


def _run_stdout(inputs: list[Path], config: PostProcessorConfig) -> int:
    status = EXIT_OK
    for input_path in inputs:
        try:
            document = load_document(input_path)
        except (DocumentError, FileNotFoundError) as e:
            print(f"Error: {e}", file=sys.stderr)
            status = EXIT_FAILED
            continue
        result = postprocess(document, config)
        if not result.ok:
            print(f"Error: {input_path}: {result.error.message}", file=sys.stderr)
            status = EXIT_FAILED
            continue
        sys.stdout.write(result.value.code)
    return status


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.output is not None and len(args.inputs) > 1:
        parser.error("--output accepts a single INPUT; use --output-dir for several")

    # Load config
    try:
        config = load_config(args.config)
    except (ConfigError, FileNotFoundError, yaml.YAMLError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return EXIT_USAGE

    if args.jobs is not None:
        config = dataclasses.replace(config, processing=ProcessingConfig(args.jobs))

    log_cfg = config.logging
    setup_logging(
        args.log_level or log_cfg.level,
        log_cfg.file,
        json=args.json_logs or log_cfg.json,
        color=log_cfg.color,
        rotate=log_cfg.rotate,
        context={"app": "robot-post"},
    )

    if args.stdout:
        return _run_stdout(args.inputs, config)

    if args.output is not None:
        reports = [postprocess_file(args.inputs[0], args.output, config)]
    else:
        reports = postprocess_files(args.inputs, args.output_dir, config)

    _print_reports(reports)
    return EXIT_OK if all(r.success for r in reports) else EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
