"""Command-line interface for hless."""

from __future__ import annotations

import argparse
import io
import logging
import os
import shlex
import subprocess
import sys
from pathlib import Path
from typing import BinaryIO

from hless import __version__
from hless.config.loader import ConfigNotFoundError, load_config, resolve_config_path, save_config
from hless.config.schema import Config
from hless.core.formatter import Formatter
from hless.core.pipeline import DEFAULT_PAGER, PagerError, PipelineRunner
from hless.log_setup import setup_logging

logger = logging.getLogger(__name__)

DEFAULT_EDITOR = "vi"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hless",
        description="Highlight keywords in a text stream and view it in less",
        epilog="Example: tail -n 500 app.log | hless -c ERROR '#ff0000'",
    )

    parser.add_argument(
        "source",
        nargs="?",
        type=Path,
        metavar="FILE",
        help="File to view (default: standard input)",
    )

    parser.add_argument(
        "--color",
        "-c",
        nargs=2,
        action="append",
        default=[],
        metavar=("KEYWORD", "COLOR"),
        help="Highlight KEYWORD with foreground COLOR (#RRGGBB)",
    )

    parser.add_argument(
        "--background",
        "-b",
        nargs=2,
        action="append",
        default=[],
        metavar=("KEYWORD", "COLOR"),
        help="Highlight KEYWORD with background COLOR (#RRGGBB)",
    )

    parser.add_argument(
        "--alias",
        "-a",
        nargs=2,
        action="append",
        default=[],
        metavar=("NAME", "KEYWORD"),
        help="Show NAME as KEYWORD, colored like KEYWORD",
    )

    parser.add_argument(
        "--exclude",
        "-v",
        action="append",
        default=[],
        metavar="TEXT",
        help="Hide lines containing TEXT",
    )

    save = parser.add_mutually_exclusive_group()
    save.add_argument(
        "--add",
        action="store_true",
        help="Add the -c/-b/-a settings to the configuration file",
    )
    save.add_argument(
        "--set",
        action="store_true",
        help="Replace all settings in the configuration file with the -c/-b/-a settings",
    )

    parser.add_argument(
        "--edit",
        "-e",
        action="store_true",
        help="Open the configuration file in $EDITOR",
    )

    parser.add_argument(
        "--config",
        type=Path,
        metavar="FILE",
        help="Configuration file path (default: ~/.config/hless/default)",
    )

    parser.add_argument(
        "--pager",
        metavar="CMD",
        help="Pager command (default: less -n -R -)",
    )

    parser.add_argument(
        "--no-ignore-interrupt",
        action="store_false",
        dest="ignore_interrupt",
        help="Let Ctrl-C terminate hless instead of leaving it to the pager",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log debug messages to stderr",
    )

    parser.add_argument(
        "--version",
        "-V",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        args: Arguments to parse (defaults to sys.argv[1:])

    Returns:
        Parsed arguments
    """
    return build_parser().parse_args(args)


def overrides_from_args(parsed: argparse.Namespace) -> Config:
    """Collect the -c/-b/-a settings into a configuration.

    Raises:
        ValueError: If a color is not a #RRGGBB string
    """
    return Config(
        foreground=dict(parsed.color),
        background=dict(parsed.background),
        aliases=dict(parsed.alias),
    )


def edit_config(config_path: Path) -> int:
    """Open the configuration file in the user's editor.

    Returns:
        The editor's exit status
    """
    editor = os.environ.get("EDITOR") or DEFAULT_EDITOR
    command = [*shlex.split(editor), str(config_path)]

    config_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        return subprocess.call(command)
    except OSError as e:
        print(f"Error: cannot start editor '{editor}': {e}", file=sys.stderr)
        return 1


def update_config(config_path: Path, overrides: Config, replace: bool) -> Path:
    """Store command-line settings in the configuration file.

    Args:
        config_path: Configuration file
        overrides: Settings from the command line
        replace: Replace the keyword mappings instead of merging into them

    Returns:
        The path written
    """
    try:
        current = load_config(config_path)
    except ConfigNotFoundError:
        current = Config()

    if replace:
        updated = Config(
            foreground=overrides.foreground,
            background=overrides.background,
            aliases=overrides.aliases,
            pager=current.pager,
        )
    else:
        updated = current.merge(overrides)

    return save_config(updated, config_path)


def load_effective_config(config_path: Path, overrides: Config) -> Config:
    """Load the configuration file and apply command-line settings.

    A missing file is not an error: paging still works without highlighting.
    """
    try:
        config = load_config(config_path)
    except ConfigNotFoundError as e:
        logger.warning("%s, highlighting only command-line keywords", e)
        config = Config()

    return config.merge(overrides)


def run(parsed: argparse.Namespace, config: Config, source: BinaryIO) -> int:
    """Page source through the formatter."""
    formatter = Formatter.from_config(config)

    if parsed.pager:
        pager = shlex.split(parsed.pager)
    else:
        pager = config.pager or list(DEFAULT_PAGER)

    runner = PipelineRunner(
        formatter,
        pager=pager,
        ignore_interrupt=parsed.ignore_interrupt,
        exclude=parsed.exclude,
    )
    return runner.run(source)


def open_source(path: Path | None) -> BinaryIO:
    """Open the input file, or return standard input when no file is given.

    Both are unbuffered handles on the file descriptor. The streaming thread
    may still be blocked reading one when the pager exits, and a buffered
    reader's lock held at that point aborts interpreter shutdown. The file is
    not closed explicitly for the same reason: process exit releases it.
    """
    if path is not None:
        return open(path, "rb", buffering=0)

    try:
        fd = sys.stdin.fileno()
    except (AttributeError, io.UnsupportedOperation):
        # Replaced stdin without a descriptor
        return sys.stdin.buffer
    return io.FileIO(fd, "r", closefd=False)


def main(args: list[str] | None = None) -> int:
    """Main entry point.

    Args:
        args: Command-line arguments

    Returns:
        Exit code
    """
    parsed = parse_args(args)
    setup_logging(debug=parsed.debug)

    config_path = resolve_config_path(parsed.config)

    if parsed.edit:
        return edit_config(config_path)

    try:
        overrides = overrides_from_args(parsed)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if parsed.add or parsed.set:
        try:
            written = update_config(config_path, overrides, replace=parsed.set)
        except (OSError, ValueError) as e:
            print(f"Error updating configuration: {e}", file=sys.stderr)
            return 1
        logger.info("Saved configuration to %s", written)

    # Nothing to read
    if parsed.source is None and sys.stdin.isatty():
        if not (parsed.add or parsed.set):
            build_parser().print_help()
        return 0

    try:
        source = open_source(parsed.source)
    except OSError as e:
        print(f"Error: cannot open {parsed.source}: {e.strerror}", file=sys.stderr)
        return 1

    # Load configuration
    try:
        config = load_effective_config(config_path, overrides)
    except (OSError, ValueError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return 1

    try:
        return run(parsed, config, source)
    except PagerError as e:
        print(f"Error: {e}", file=sys.stderr)
        if e.returncode is not None and e.returncode > 0:
            return e.returncode
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
