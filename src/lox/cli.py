"""Command-line interface for the Lox front end."""

from __future__ import annotations

import argparse
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TextIO

from lox.errors import ErrorReporter, ParseError
from lox.parser import DEFAULT_MAX_DEPTH

# Exit statuses, from sysexits.h
EXIT_DATAERR = 64
EXIT_NOINPUT = 66

MODES = ("tokens", "ast")
CONFIG_NAME = "lox.toml"


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    script: Path | None
    mode: str
    max_depth: int
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="lox",
        description="Scan and parse Lox source; without a script, start a prompt",
    )
    p.add_argument("script", nargs="?", help="Lox script to process")
    output = p.add_mutually_exclusive_group()
    output.add_argument(
        "--tokens",
        dest="mode",
        action="store_const",
        const="tokens",
        help="Print the scanned tokens (default)",
    )
    output.add_argument(
        "--ast",
        dest="mode",
        action="store_const",
        const="ast",
        help="Parse one expression and print its syntax tree",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    p.add_argument(
        "--max-depth",
        type=int,
        default=None,
        metavar="N",
        help=f"Maximum expression nesting depth (default: {DEFAULT_MAX_DEPTH})",
    )
    p.add_argument(
        "--debug", action="store_true", help="Dump the AST tree to stderr (ast mode only)"
    )
    return p


def load_config(config_path: Path | None, directory: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else directory / CONFIG_NAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace, cwd: Path | None = None) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, cwd if cwd is not None else Path("."))

    mode = "tokens"
    cfg_output = config.get("output")
    if isinstance(cfg_output, dict) and "mode" in cfg_output:
        mode = str(cfg_output["mode"])
    if args.mode is not None:
        mode = args.mode
    if mode not in MODES:
        raise argparse.ArgumentTypeError(
            f"invalid output mode {mode!r} (expected one of: {', '.join(MODES)})"
        )

    max_depth = DEFAULT_MAX_DEPTH
    cfg_parser = config.get("parser")
    if isinstance(cfg_parser, dict):
        cfg_depth = cfg_parser.get("max_depth")
        if isinstance(cfg_depth, int) and not isinstance(cfg_depth, bool):
            max_depth = cfg_depth
    if args.max_depth is not None:
        max_depth = args.max_depth
    if max_depth < 1:
        raise argparse.ArgumentTypeError(f"max depth must be positive, got {max_depth}")

    if args.debug and mode != "ast":
        raise argparse.ArgumentTypeError("--debug dumps the syntax tree and requires ast mode")

    return CliOptions(
        script=Path(args.script) if args.script else None,
        mode=mode,
        max_depth=max_depth,
        debug=args.debug,
    )


def run_source(source: str, options: CliOptions, reporter: ErrorReporter, out: TextIO) -> None:
    """Scan (and in ast mode, parse) one chunk of source, printing the result."""
    from lox.debug import dump_ast, dump_tokens, format_ast
    from lox.parser import parse_expression
    from lox.scanner import scan_tokens

    tokens = scan_tokens(source, reporter)
    if options.mode == "tokens":
        dump_tokens(tokens, file=out)
        return

    try:
        expr = parse_expression(tokens, reporter, options.max_depth)
    except ParseError:
        # Already reported
        return

    out.write(format_ast(expr) + "\n")
    if options.debug:
        dump_ast(expr, file=sys.stderr)


def run_file(script: Path, options: CliOptions, out: TextIO) -> int:
    """Process a whole script. Returns EXIT_DATAERR if anything was reported."""
    try:
        source = script.read_text(encoding="utf-8")
    except OSError as exc:
        print(f"error: cannot read {script}: {exc.strerror}", file=sys.stderr)
        return EXIT_NOINPUT

    reporter = ErrorReporter(source=source, filename=str(script))
    run_source(source, options, reporter, out)
    return EXIT_DATAERR if reporter.had_error else 0


def run_prompt(options: CliOptions, stdin: TextIO, out: TextIO) -> int:
    """Read-eval-print loop: one line at a time until end of input."""
    reporter = ErrorReporter()
    try:
        while True:
            out.write("> ")
            out.flush()
            line = stdin.readline()
            if not line:
                break
            run_source(line, options, reporter, out)
            reporter.reset()
    except KeyboardInterrupt:
        pass
    out.write("\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code. Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except tomllib.TOMLDecodeError as exc:
        print(f"error: invalid config file: {exc}", file=sys.stderr)
        return 2

    if options.script is None:
        return run_prompt(options, sys.stdin, sys.stdout)
    return run_file(options.script, options, sys.stdout)
