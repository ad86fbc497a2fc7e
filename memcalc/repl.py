import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import Iterator, Optional, Sequence

from memcalc import __version__
from memcalc.config import DEFAULT_CONFIG, CalcConfig, CalcConfigError, load_config
from memcalc.dispatcher import run_session
from memcalc.errors import CalcError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_CONFIG_ERROR = 2


class InputSourceError(CalcError):
    """Raised when the line source itself cannot be read."""


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="memcalc", description="line calculator with named memory slots")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", type=Path, default=None, help="TOML file with a [memcalc] table.")
    parser.add_argument("--max-slots", type=int, default=None, help="Limit the number of memory slots.")
    parser.add_argument(
        "--update-previous",
        action="store_true",
        help="Make mem<name>+ / mem<name>- results the previous result.",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="Don't print the startup banner.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for diagnostics written to stderr.",
    )
    return parser


def _resolve_config(args: argparse.Namespace) -> CalcConfig:
    config = load_config(args.config) if args.config is not None else DEFAULT_CONFIG
    overrides: dict[str, object] = {}
    if args.max_slots is not None:
        if args.max_slots < 1:
            raise CalcConfigError(f"--max-slots must be positive, got {args.max_slots}")
        overrides["max_slots"] = args.max_slots
    if args.update_previous:
        overrides["mutation_updates_previous"] = True
    if args.quiet:
        overrides["banner"] = False
    return dataclasses.replace(config, **overrides)


def read_lines() -> Iterator[str]:
    interactive = sys.stdin.isatty()
    while True:
        try:
            line = input("> ") if interactive else sys.stdin.readline()
        except (EOFError, KeyboardInterrupt):
            return
        except OSError as e:
            raise InputSourceError(str(e)) from e
        if interactive:
            yield line
        elif not line:
            return
        else:
            yield line.rstrip("\r\n")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = _resolve_config(args)
    except CalcConfigError as e:
        print(e, file=sys.stderr)
        return EXIT_CONFIG_ERROR

    try:
        for output in run_session(read_lines(), config):
            print(output)
    except InputSourceError as e:
        logger.error("Failed reading input: %s", e)
        return EXIT_INPUT_ERROR
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
