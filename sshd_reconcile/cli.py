"""Command line entry point."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import yaml

from sshd_reconcile.dependencies import DEFAULT_CONFIG_PATH, get_reconcile_service, get_runner, load_config
from sshd_reconcile.exceptions import ReconcileError
from sshd_reconcile.services.yaml_service import YAMLService
from sshd_reconcile.utils.logger import setup_logger

logger = logging.getLogger("sshd_reconcile")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="sshd-reconcile",
        description="Reconcile sshd host keys, config fragments and remote login state",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument("--dry-run", action="store_true", help="Show what would be changed without making changes")
    parser.add_argument("--report", type=Path, default=None, help="Write a YAML report of the run to this path")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Override the configured log level",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Run one reconciliation pass.

    Args:
        argv: Command line arguments (defaults to sys.argv)

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)

    # Console logging until the config says otherwise
    setup_logger(level_override=args.log_level)

    try:
        config = load_config(args.config)
    except ReconcileError as e:
        logger.error(f"Configuration error: {e.message}")
        return EXIT_CONFIG_ERROR

    setup_logger(config, level_override=args.log_level)

    runner = get_runner(dry_run=args.dry_run)
    service = get_reconcile_service(config, runner)
    report = service.reconcile(config.openssh, dry_run=args.dry_run)

    for failure in report.failures:
        logger.error(f"[{failure.step}] {failure.entity or '-'}: {failure.kind}: {failure.message}")

    exit_code = EXIT_OK if report.ok else EXIT_FAILED

    if args.report is not None:
        try:
            YAMLService.save_yaml(args.report, report.model_dump(mode="json"))
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Cannot write report {args.report}: {e}")
            return EXIT_FAILED
        logger.info(f"Report written to {args.report}")

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
