"""Argument parsing, configuration loading, and picker bootstrap."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys

from . import __version__
from .config import AppConfig, load_config
from .discovery.aws_client import EC2InstanceFetcher
from .exceptions import ConfigError, PickerError
from .logging_config import configure_logging
from .picker import InstancePicker
from .presentation.selector import QuestionarySelector

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ec2-skim",
        description="Fuzzy-pick a running EC2 instance and print its IP address",
    )
    parser.add_argument(
        "-r", "--region",
        dest="regions",
        action="extend",
        nargs="+",
        required=True,
        metavar="REGION",
        help="The region to search for instances in (repeatable)",
    )
    parser.add_argument(
        "-f", "--filter",
        dest="filters",
        action="extend",
        nargs="+",
        metavar="FILTER",
        help="EC2 filters to filter by, e.g. 'tag:Team=infra,platform;instance-type=t3.micro'. "
        "Each value is queried separately and the results merged",
    )
    parser.add_argument(
        "-d", "--display-tag",
        dest="display_tags",
        action="extend",
        nargs="+",
        metavar="TAG",
        help="Which tags to show in the list of instances, in addition to Name",
    )
    parser.add_argument(
        "--public-ip",
        action="store_true",
        help="Return the public IP of the selected instance instead of the private one",
    )
    parser.add_argument(
        "-m", "--multi",
        action="store_true",
        help="Allow selecting several instances; one address is printed per line",
    )
    parser.add_argument(
        "-c", "--config",
        help="Path to an optional YAML configuration file",
    )
    parser.add_argument(
        "--profile",
        help="AWS credential profile to use",
    )
    parser.add_argument(
        "--log-level",
        help="Log level for stderr output (default: WARNING)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """Fold command-line overrides into the loaded configuration."""
    if args.profile:
        config = dataclasses.replace(
            config, aws=dataclasses.replace(config.aws, credential_profile=args.profile)
        )
    if args.multi:
        config = dataclasses.replace(
            config, display=dataclasses.replace(config.display, multi_select=True)
        )
    if args.log_level:
        config = dataclasses.replace(
            config, logging=dataclasses.replace(config.logging, level=args.log_level)
        )
    return config


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = _apply_overrides(load_config(args.config), args)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    configure_logging(config.logging)

    try:
        picker = InstancePicker(
            config,
            fetcher=EC2InstanceFetcher(config.aws),
            selector=QuestionarySelector(multi=config.display.multi_select),
        )
        addresses = picker.run(
            args.regions,
            raw_filters=args.filters,
            extra_display_tags=args.display_tags,
            public_ip=args.public_ip,
        )
    except PickerError as exc:
        logger.error("Fatal error: %s", exc)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130

    if addresses:
        sys.stdout.write("\n".join(addresses))
        sys.stdout.flush()
    return 0
