from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from trusted_conf.config import YamlConfigLoader
from trusted_conf.config.models import AppConfig, ConfigLoadRequest
from trusted_conf.importer import ConfigImporter
from trusted_conf.logging import init_logging
from trusted_conf.models import ImportedValues

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trusted-conf",
        description="Read validated variable values from an untrusted configuration file",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a YAML settings file (default: built-in settings)",
    )
    parser.add_argument(
        "--no-dotenv",
        action="store_true",
        help="Disable loading .env (env overrides still apply)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    def add_common(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("file", help="Configuration file to read")
        sub.add_argument(
            "--pattern",
            required=True,
            help="Regular expression every accepted value must match in full",
        )
        sub.add_argument(
            "--sep",
            default=None,
            help="Literal separator between name and value (default from settings, usually '=')",
        )

    # Command: get
    get_parser = subparsers.add_parser("get", help="Print the value of one variable")
    add_common(get_parser)
    get_parser.add_argument("name", help="Variable name")

    # Command: many
    many_parser = subparsers.add_parser("many", help="Print every variable that was found")
    add_common(many_parser)
    many_parser.add_argument("names", nargs="+", help="Variable names")

    # Command: all
    all_parser = subparsers.add_parser("all", help="Print all variables, failing if any is missing")
    add_common(all_parser)
    all_parser.add_argument("names", nargs="+", help="Variable names")

    return parser


def _load_config(args: argparse.Namespace) -> AppConfig:
    request = ConfigLoadRequest(
        yaml_path=args.config,
        dotenv_path=None if args.no_dotenv else ".env",
    )
    return YamlConfigLoader().load(request)


def _print_values(names: Sequence[str], values: ImportedValues) -> None:
    for name in dict.fromkeys(names):
        if name in values.values:
            print(f"{name}={values.values[name]}")


def run(args: argparse.Namespace, config: AppConfig) -> int:
    importer = ConfigImporter.from_settings(config.importer)
    separator = args.sep if args.sep is not None else config.importer.default_separator
    logger.debug("app.command command=%s file=%s", args.command, args.file)

    if args.command == "get":
        result = importer.import_one(args.file, args.name, args.pattern, separator)
        if not result.found:
            return 1
        print(result.value)
        return 0

    if args.command == "many":
        outcome = importer.import_many(args.file, args.names, args.pattern, separator)
    else:
        outcome = importer.import_all_required(args.file, args.names, args.pattern, separator)

    if not isinstance(outcome, ImportedValues):
        return 1
    _print_values(args.names, outcome)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        config = _load_config(args)
        init_logging(config.logging)
    except (OSError, ValueError) as exc:
        # Missing settings file, bad YAML, bad override or an unknown logging level.
        parser.error(f"invalid settings: {exc}")

    try:
        return run(args, config)
    except ValueError as exc:
        # Bad value pattern or variable name.
        parser.error(str(exc))


if __name__ == "__main__":
    sys.exit(main())
