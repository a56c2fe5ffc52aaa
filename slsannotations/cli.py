"""CLI entrypoints for sls-annotations commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import yaml

from .config import ConfigError, load_config
from .errors import CollectionError
from .logging import configure_logging
from .plugin import AnnotationsPlugin


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_log_file_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "--log-file",
        type=Path,
        default=argparse.SUPPRESS if suppress_default else None,
        help="Also write log records to this file.",
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the service directory or its serverless.yml (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sls-annotations",
        description="Register decorated TypeScript handler classes as serverless functions.",
    )
    _add_verbose_option(parser)
    _add_log_file_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    collect_parser = subparsers.add_parser(
        "collect",
        help="Collect handler decorators and print the resulting functions.",
    )
    _add_verbose_option(collect_parser, suppress_default=True)
    _add_log_file_option(collect_parser, suppress_default=True)
    _add_path_argument(collect_parser)
    collect_parser.add_argument(
        "--stage",
        default=None,
        help="Deployment stage; overrides provider.stage.",
    )
    collect_parser.add_argument(
        "--format",
        choices=("json", "yaml"),
        default="json",
        help="Output format for the function registry.",
    )

    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Print every serialized decorator as JSON.",
    )
    _add_verbose_option(inspect_parser, suppress_default=True)
    _add_log_file_option(inspect_parser, suppress_default=True)
    _add_path_argument(inspect_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for sls-annotations commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        service = load_config(args.path)
    except ConfigError as exc:
        parser.exit(1, f"Invalid configuration: {exc}\n")

    options = {"stage": args.stage} if getattr(args, "stage", None) else {}
    plugin = AnnotationsPlugin(service, options)

    if args.command == "collect":
        try:
            functions = plugin.run_hook("collect:init")
        except (FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(1, f"{exc}\n")
        except CollectionError as exc:
            parser.exit(1, f"sls-annotations collect failed: {exc}\n")
        if args.format == "yaml":
            print(yaml.safe_dump({"functions": functions}, sort_keys=False), end="")
        else:
            print(json.dumps(functions, indent=2, default=str))
    elif args.command == "inspect":
        try:
            records = plugin.resolve_records()
        except (FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(1, f"{exc}\n")
        except CollectionError as exc:
            parser.exit(1, f"sls-annotations inspect failed: {exc}\n")
        print(json.dumps([record.to_dict() for record in records], indent=2))
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
