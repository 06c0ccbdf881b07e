"""Configuration module — frozen dataclass loaded from CLI args, env vars and YAML."""

import argparse
import os
from dataclasses import dataclass

import yaml

USAGE = "<process that outputs to stdout> | logrotate [-t] [-c <N>] <filename>"


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class Config:
    filename: str
    threshold_kb: int = 5000
    tee: bool = False
    log_level: str = "INFO"


def load_yaml(path: str) -> dict:
    """Load a YAML config file and return its mapping (empty file → {})."""
    with open(path, "r") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="logrotate",
        usage=USAGE,
        description="Write lines read from stdin to a file, rotating and gzipping it by size.",
    )
    parser.add_argument("filename", help="Log file to write")
    parser.add_argument(
        "-t", "--tee",
        action="store_true",
        default=None,
        help="Behave like tee(1)",
    )
    parser.add_argument(
        "-c", "--threshold-kb",
        type=int,
        default=None,
        help=f"Max (uncompressed) logfile size in kB (default: {Config.threshold_kb})",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="YAML config file (env: LOGROTATE_CONFIG)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help=f"Diagnostics level (default: {Config.log_level})",
    )
    return parser


def load_config(argv=None) -> Config:
    """Build Config with precedence CLI > env vars > YAML file > defaults."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config_path = args.config or os.environ.get("LOGROTATE_CONFIG")
    file_values = load_yaml(config_path) if config_path else {}

    threshold_kb = file_values.get("threshold_kb", Config.threshold_kb)
    tee = _parse_bool(file_values.get("tee", Config.tee))
    log_level = file_values.get("log_level", Config.log_level)

    # Env vars override the file
    if "LOGROTATE_THRESHOLD_KB" in os.environ:
        threshold_kb = os.environ["LOGROTATE_THRESHOLD_KB"]
    if "LOGROTATE_TEE" in os.environ:
        tee = _parse_bool(os.environ["LOGROTATE_TEE"])
    if "LOGROTATE_LOG_LEVEL" in os.environ:
        log_level = os.environ["LOGROTATE_LOG_LEVEL"]

    if args.threshold_kb is not None:
        threshold_kb = args.threshold_kb
    if args.tee is not None:
        tee = args.tee
    if args.log_level is not None:
        log_level = args.log_level

    if isinstance(threshold_kb, bool) or not isinstance(threshold_kb, (int, str)):
        raise ValueError(f"threshold_kb must be an integer, got {threshold_kb!r}")
    try:
        threshold_kb = int(threshold_kb)
    except (TypeError, ValueError):
        raise ValueError(f"threshold_kb must be an integer, got {threshold_kb!r}")
    if threshold_kb <= 0:
        raise ValueError(f"threshold_kb must be positive, got {threshold_kb}")

    return Config(
        filename=args.filename,
        threshold_kb=threshold_kb,
        tee=tee,
        log_level=str(log_level).upper(),
    )
