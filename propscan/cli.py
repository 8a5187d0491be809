"""CLI entrypoints for propscan commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .classifier import ErrorPolicy
from .config import ConfigError, load_config
from .errors import ClassificationError, PropScanError
from .logging import configure_logging, get_logger
from .models import FinderResult
from .scanner import SourceScanner


def _add_verbose_option(parser: argparse.ArgumentParser, *, suppress_default: bool = False) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    kwargs["default"] = argparse.SUPPRESS if suppress_default else False
    parser.add_argument("-v", "--verbose", **kwargs)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="propscan",
        description="Extract component props schemas from TypeScript sources.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser(
        "scan",
        help="Scan files or directories and print the props schema as JSON.",
    )
    _add_verbose_option(scan_parser, suppress_default=True)
    scan_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Source files or directories to scan (.ts/.tsx).",
    )
    scan_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Write the JSON result to this file instead of stdout.",
    )
    scan_parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on types no rule matches instead of recording them as any.",
    )
    scan_parser.add_argument(
        "--config",
        type=Path,
        default=Path("."),
        help="Path to .propscan.yml or the directory containing it.",
    )
    scan_parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Ignore and do not update the result cache.",
    )

    check_parser = subparsers.add_parser(
        "check",
        help="Validate a previously written result file.",
    )
    _add_verbose_option(check_parser, suppress_default=True)
    check_parser.add_argument("result", type=Path, help="JSON result file to validate.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for propscan commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))
    logger = get_logger("cli")

    if args.command == "scan":
        try:
            config = load_config(args.config)
        except ConfigError as exc:
            parser.exit(1, f"Invalid configuration: {exc}\n")
        if args.strict:
            config.error_policy = ErrorPolicy.STRICT

        scanner = SourceScanner(config, use_cache=not args.no_cache)
        try:
            result = scanner.scan(args.paths)
        except ClassificationError as exc:
            parser.exit(1, f"propscan scan failed: {exc}\n")
        except PropScanError as exc:
            parser.exit(1, f"{exc}\n")

        payload = result.to_json()
        if args.output is not None:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(payload + "\n", encoding="utf-8")
            logger.info("Wrote %d component(s) to %s", len(result.components), _relativize(args.output))
        else:
            print(payload)
    elif args.command == "check":
        try:
            result = FinderResult.from_json(args.result.read_text(encoding="utf-8"))
        except OSError as exc:
            parser.exit(1, f"Cannot read {args.result}: {exc}\n")
        except ValueError as exc:
            parser.exit(1, f"{_relativize(args.result)} is not a valid result: {exc}\n")
        print(
            f"{_relativize(args.result)}: {len(result.components)} component(s), "
            f"{len(result.refs)} ref(s)"
        )
    else:  # pragma: no cover - argparse enforces known commands
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
