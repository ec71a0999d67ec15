import argparse
import json
import logging
import sys
import time
from typing import List, Optional

from .config.config import STDIN_FILE_PATH, CheckerConfig
from .exceptions import PytcError
from .parser.core.parser import parse_python, read_source
from .pipeline import CheckResult, check_file, check_source
from .utils import CheckerArtifactEncoder, TerminalColors, format_diagnostic, paint

COMMANDS = ("check", "parse")
TOP_LEVEL_OPTIONS = ("-v", "--verbose", "-h", "--help")
VERBOSE_HELP = "Log checker internals to stderr and print the execution time."


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pytc", description="A static type checker for annotated Python files.")
    parser.add_argument("-v", "--verbose", action="store_true", help=VERBOSE_HELP)
    subparsers = parser.add_subparsers(dest="command")

    check = subparsers.add_parser("check", help="Check Python files for type errors.")
    check.add_argument("paths", nargs="+", help="Files to check. Use '-' to read from stdin.")
    check.add_argument(
        "--hoist-functions",
        action="store_true",
        help="Bind all function signatures of a block before checking it, so functions may be used before their definition.",
    )
    check.add_argument("--no-undefined-names", action="store_true", help="Do not report references to names that are never bound.")
    check.add_argument("--dump-symbols", action="store_true", help="Save the symbol table and diagnostics of each file as '<file>.check.json'.")
    check.add_argument("--no-color", action="store_true", help="Disable colored output.")
    # SUPPRESS keeps the subcommand from overwriting a top-level `-v`.
    check.add_argument("-v", "--verbose", action="store_true", default=argparse.SUPPRESS, help=VERBOSE_HELP)

    parse = subparsers.add_parser("parse", help="Parse a file and print its syntax tree as JSON (debug).")
    parse.add_argument("path", help="File to parse. Use '-' to read from stdin.")
    parse.add_argument("-v", "--verbose", action="store_true", default=argparse.SUPPRESS, help=VERBOSE_HELP)

    return parser


def _configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _check_one(path: str, config: CheckerConfig, dump_stages: List[str]) -> CheckResult:
    if path == "-":
        return check_source(sys.stdin.read(), file_path=STDIN_FILE_PATH, config=config, dump_stages=dump_stages)
    return check_file(path, config=config, dump_stages=dump_stages)


def _run_check(args) -> int:
    config = CheckerConfig(
        hoist_function_signatures=args.hoist_functions,
        report_undefined_names=not args.no_undefined_names,
    )
    dump_stages = ["check"] if args.dump_symbols else []
    use_color = not args.no_color and sys.stdout.isatty()

    error_count, failed_files = 0, 0
    for path in args.paths:
        try:
            result = _check_one(path, config, dump_stages)
        except PytcError as e:
            # Unreadable files are the run's failure for that path, not diagnostics.
            print(f"{TerminalColors.RED}ERROR: {e.core_message}{TerminalColors.RESET}", file=sys.stderr)
            failed_files += 1
            continue

        for diagnostic in result.diagnostics:
            print(format_diagnostic(diagnostic, use_color=use_color))
        if not result.ok:
            error_count += len(result.diagnostics)
            failed_files += 1

    checked = len(args.paths)
    if failed_files:
        print("\n" + paint(f"Found {error_count} error(s) in {failed_files} of {checked} file(s)", TerminalColors.RED, use_color))
        return 1
    print(paint(f"Success: no issues found in {checked} file(s)", TerminalColors.GREEN, use_color))
    return 0


def _run_parse(args) -> int:
    if args.path == "-":
        source, file_path = sys.stdin.read(), STDIN_FILE_PATH
    else:
        source, file_path = read_source(args.path), args.path
    module = parse_python(source, file_path=file_path)
    print(json.dumps(module, indent=2, cls=CheckerArtifactEncoder))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    start_time = time.perf_counter()
    argv = list(sys.argv[1:] if argv is None else argv)

    # `pytc [-v] FILE ...` is shorthand for `pytc [-v] check FILE ...`. The
    # command goes right after the top-level options so that check options
    # written before the file still belong to `check`.
    index = 0
    while index < len(argv) and argv[index] in TOP_LEVEL_OPTIONS:
        index += 1
    if index < len(argv) and argv[index] not in COMMANDS:
        argv.insert(index, "check")

    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 2

    _configure_logging(args.verbose)

    try:
        if args.command == "parse":
            return _run_parse(args)
        return _run_check(args)

    # --- Error Handling ---
    except PytcError as e:
        print(f"\n{TerminalColors.RED}--- ERROR ---\n{e}{TerminalColors.RESET}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"\n{TerminalColors.RED}--- UNEXPECTED CHECKER ERROR ---{TerminalColors.RESET}", file=sys.stderr)
        print("This may be a bug in pytc. Please report it.", file=sys.stderr)
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        return 1

    finally:
        if args.verbose:
            duration = time.perf_counter() - start_time
            print(f"\n{TerminalColors.CYAN}--- Total Execution Time: {duration:.4f} seconds ---{TerminalColors.RESET}", file=sys.stderr)


if __name__ == "__main__":
    sys.exit(main())
