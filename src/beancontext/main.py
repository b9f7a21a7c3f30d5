"""
Command line entry point for querying a configuration context.
"""

import argparse
import sys

from . import __version__
from .config.settings import get_settings
from .context import ContainerContext
from .exceptions import ConfigurationError
from .observability.logging import get_logger, setup_logging

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_CONFIG_ERROR = 2

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="beancontext", description="Query properties and beans of a configuration context"
    )
    parser.add_argument("--config", default=None, help="Container definition location")
    parser.add_argument(
        "--properties",
        action="append",
        default=None,
        metavar="LOCATION",
        help="Property resource location (repeatable, later ones override earlier ones)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging level",
    )
    parser.add_argument("--version", action="version", version=f"beancontext {__version__}")

    commands = parser.add_subparsers(dest="command", required=True)

    get_cmd = commands.add_parser("get", help="Print a property value")
    get_cmd.add_argument("key")
    get_cmd.add_argument("--default", default=None, help="Value to print if the key is absent")

    commands.add_parser("keys", help="Print all property keys, sorted")

    contains_cmd = commands.add_parser("contains", help="Check whether a bean is defined")
    contains_cmd.add_argument("name")

    bean_cmd = commands.add_parser("bean", help="Print the repr of a bean")
    bean_cmd.add_argument("name")

    return parser


def run(context: ContainerContext, args: argparse.Namespace) -> int:
    if args.command == "get":
        value = context.get_property(args.key, args.default)
        if value is None:
            print(f"property not found: {args.key}", file=sys.stderr)
            return EXIT_NOT_FOUND
        print(value)
        return EXIT_OK

    if args.command == "keys":
        for key in sorted(context.property_keys()):
            print(key)
        return EXIT_OK

    if args.command == "contains":
        found = context.contains_bean(args.name)
        print("true" if found else "false")
        return EXIT_OK if found else EXIT_NOT_FOUND

    if args.command == "bean":
        if not context.contains_bean(args.name):
            print(f"bean not found: {args.name}", file=sys.stderr)
            return EXIT_NOT_FOUND
        print(repr(context.get_bean(args.name, object)))
        return EXIT_OK

    raise ValueError(f"unknown command: {args.command}")


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    settings = get_settings()
    setup_logging(
        args.log_level or settings.observability.log_level,
        settings.observability.log_format,
    )

    context = ContainerContext(
        args.config if args.config is not None else settings.config_location,
        args.properties if args.properties is not None else settings.property_locations,
    )
    try:
        with context:
            return run(context, args)
    except ConfigurationError as e:
        logger.error("Configuration error", error=str(e), cause=repr(e.most_specific_cause()))
        print(f"configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR


if __name__ == "__main__":
    sys.exit(main())
