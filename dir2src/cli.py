"""CLI entrypoint for dir2src."""

from __future__ import annotations

import argparse
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from .config import (
    CONFIG_FILENAME,
    DEFAULT_HEADER_NAME,
    DEFAULT_ROOT_NAMESPACE,
    ConfigError,
    load_config,
    resolve_config,
)
from .filesystem import GenerationError
from .generator import Generator
from .logging import configure_logging
from .naming import SanitizationError


@dataclass(frozen=True)
class CommandLineOption:
    """Describes one command-line flag."""

    identifier: str
    long_name: str
    short_name: str | None
    description: str
    default: str | None
    kind: str


OPTIONS: Tuple[CommandLineOption, ...] = (
    CommandLineOption(
        identifier="help",
        long_name="help",
        short_name="h",
        description="print this summary",
        default=None,
        kind="help",
    ),
    CommandLineOption(
        identifier="root_namespace",
        long_name="root-namespace",
        short_name="n",
        description="name of root namespace in output",
        default=DEFAULT_ROOT_NAMESPACE,
        kind="string",
    ),
    CommandLineOption(
        identifier="print_output_files",
        long_name="print-output-files",
        short_name="p",
        description="print absolute paths of output source files\ne.g. to feed into build systems",
        default=None,
        kind="boolean",
    ),
    CommandLineOption(
        identifier="header_name",
        long_name="header-name",
        short_name=None,
        description="file name of the aggregate header in the output root",
        default=DEFAULT_HEADER_NAME,
        kind="string",
    ),
    CommandLineOption(
        identifier="jobs",
        long_name="jobs",
        short_name="j",
        description="number of files read and written in parallel",
        default="1",
        kind="integer",
    ),
    CommandLineOption(
        identifier="config",
        long_name="config",
        short_name="c",
        description=f"path to a {CONFIG_FILENAME} settings file",
        default=f"./{CONFIG_FILENAME}",
        kind="string",
    ),
    CommandLineOption(
        identifier="dry_run",
        long_name="dry-run",
        short_name=None,
        description="list the files that would be generated without writing them",
        default=None,
        kind="boolean",
    ),
    CommandLineOption(
        identifier="verbose",
        long_name="verbose",
        short_name="v",
        description="increase log verbosity for troubleshooting",
        default=None,
        kind="boolean",
    ),
    CommandLineOption(
        identifier="log_file",
        long_name="log-file",
        short_name=None,
        description="also write debug logs to this file",
        default=None,
        kind="string",
    ),
)


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports usage errors with exit status 1."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def _flags(option: CommandLineOption) -> list[str]:
    flags = []
    if option.short_name:
        flags.append(f"-{option.short_name}")
    flags.append(f"--{option.long_name}")
    return flags


def _help_text(option: CommandLineOption) -> str:
    text = option.description
    if option.default and option.kind in {"string", "integer"}:
        text += f' [default: "{option.default}"]'
    return text


def _build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="dir2src",
        description="Embed every file of a directory tree as a C++ byte array.",
        formatter_class=argparse.RawTextHelpFormatter,
        add_help=False,
        allow_abbrev=False,
    )
    for option in OPTIONS:
        flags = _flags(option)
        help_text = _help_text(option)
        if option.kind == "help":
            parser.add_argument(*flags, action="help", help=help_text)
        elif option.kind == "boolean":
            parser.add_argument(*flags, dest=option.identifier, action="store_true", help=help_text)
        elif option.kind == "integer":
            # None marks "not given" so a config file value can apply.
            parser.add_argument(*flags, dest=option.identifier, type=int, default=None, help=help_text)
        else:
            parser.add_argument(*flags, dest=option.identifier, default=None, help=help_text)

    parser.add_argument("input_path", nargs="?", metavar="<input-path>", help="directory tree to embed")
    parser.add_argument("output_path", nargs="?", metavar="<output-path>", help="directory receiving generated sources")
    return parser


def _missing_value_option(argv: list[str]) -> str | None:
    """Return the value-taking flag that swallowed one of the two trailing paths."""
    if len(argv) < 2:
        return None
    options = argv[:-2]
    if not options:
        return None
    valued = {
        flag
        for option in OPTIONS
        if option.kind in {"string", "integer"}
        for flag in _flags(option)
    }
    return options[-1] if options[-1] in valued else None


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for dir2src."""
    if argv is None:
        argv = sys.argv[1:]
    parser = _build_parser()

    # The last two arguments are always the input and output paths.
    missing = _missing_value_option(argv)
    if missing is not None:
        parser.print_usage(sys.stderr)
        parser.exit(1, f"Missing value for option {missing}\n")

    args = parser.parse_args(argv)

    if args.input_path is None or args.output_path is None:
        parser.print_help()
        parser.exit(0)

    configure_logging(
        verbose=bool(args.verbose),
        log_file=Path(args.log_file) if args.log_file else None,
    )

    try:
        if args.config is not None:
            file_config = load_config(Path(args.config), required=True)
        else:
            file_config = load_config(Path.cwd())
        config = resolve_config(
            args.input_path,
            args.output_path,
            file_config,
            root_namespace=args.root_namespace,
            header_name=args.header_name,
            jobs=args.jobs,
            print_output_files=bool(args.print_output_files),
            dry_run=bool(args.dry_run),
        )
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    try:
        result = Generator(config).run()
    except (GenerationError, SanitizationError) as exc:
        parser.exit(1, f"dir2src failed: {exc}\nRun with --verbose for more details.\n")
    except (FileNotFoundError, NotADirectoryError) as exc:
        parser.exit(1, f"{exc}\n")

    if config.print_output_files or config.dry_run:
        for module in result.modules:
            print(os.path.abspath(module.path))


if __name__ == "__main__":
    main(sys.argv[1:])
