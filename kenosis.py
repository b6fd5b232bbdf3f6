#!/usr/bin/env python3
"""
Kenosis — Ancient Greek κένωσις (emptying)

Finds Python virtual environments (directories containing a pyvenv.cfg file)
below a directory, reports the space they occupy and prepares an `rm -rf`
command for them. The command is copied to the clipboard for review; Kenosis
itself never deletes anything.

Usage:
    kenosis                       # Scan the current directory
    kenosis <path>                # Scan path
    kenosis <path> --all          # Also descend into hidden directories
    kenosis <path> --show-ignored # List directories that could not be read
    kenosis <path> --no-copy      # Print the command without copying it
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from auxiliary import format_bytes, format_path_for_display, printable_path
from console_ui import ConsoleUI
from kenosis_config import ConfigManager
from shell_command import build_removal_command, copy_to_clipboard
from venv_scanner import ScanResult, VenvScanner

logger = logging.getLogger("kenosis")


def _option(args: argparse.Namespace, name: str, default: bool) -> bool:
    """Command line value for a --flag/--no-flag option, falling back to the saved default"""
    value = getattr(args, name, None)
    return default if value is None else value


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def setup_logging(verbose: bool = False):
    """Send log records to stderr through Rich; DEBUG when verbose, WARNING otherwise."""
    level = logging.DEBUG if verbose else logging.WARNING
    handler = RichHandler(
        console=Console(stderr=True, emoji=False),
        show_time=False,
        show_path=False,
        markup=False,
    )
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)

    if verbose:
        logger.debug("Verbose logging enabled")


# ---------------------------------------------------------------------------
# Kenosis
# ---------------------------------------------------------------------------


class Kenosis:
    """Main application class for the Kenosis virtual environment finder."""

    def __init__(
        self,
        args: argparse.Namespace,
        config_manager: Optional[ConfigManager] = None,
        ui: Optional[ConsoleUI] = None,
    ):
        self.args = args
        self.ui = ui or ConsoleUI()
        self.config_manager = config_manager or ConfigManager()
        self._config = self.config_manager.load()

        self.include_hidden = _option(args, "all", self._config.include_hidden)
        self.show_ignored = _option(args, "show_ignored", self._config.show_ignored)
        self.copy_command = _option(args, "copy", self._config.copy_to_clipboard)

    # -- validation ----------------------------------------------------------

    def _resolve_root(self, path: str) -> str:
        """Return the absolute scan root, exiting on unusable paths."""
        display = printable_path(path)
        root = Path(path).expanduser()
        try:
            exists = root.exists()
            is_dir = exists and root.is_dir()
        except OSError as e:
            self.ui.print_error(f"Cannot access {display}: {e.strerror or e}")
            sys.exit(1)
        if not exists:
            self.ui.print_error(f"Path does not exist: {display}")
            sys.exit(1)
        if not is_dir:
            self.ui.print_error(f"Not a directory: {display}")
            sys.exit(1)
        try:
            with os.scandir(root):
                pass
            return str(root.resolve())
        except OSError as e:
            self.ui.print_error(f"Cannot read directory {display}: {e.strerror or e}")
            sys.exit(1)

    # -- scanning ------------------------------------------------------------

    def scan(self, root: str) -> ScanResult:
        self.ui.print_header("Kenosis", f"Scanning {escape(format_path_for_display(root))}")

        progress = self.ui.create_activity_progress()
        with progress:
            task = progress.add_task("Scanning...", total=None)

            def on_progress(dirs_scanned: int):
                progress.update(task, description=f"Scanning... {dirs_scanned} dirs")

            scanner = VenvScanner(include_hidden=self.include_hidden, progress_callback=on_progress)
            result = scanner.scan(root)

        logger.debug(
            "Scanned %d directories in %.2fs, %d environments, %d ignored",
            result.directories_scanned,
            result.scan_duration,
            len(result.environments),
            len(result.ignored),
        )
        return result

    def _record_run(self, result: ScanResult):
        self._config.record_run(len(result.environments), result.total_size)
        try:
            self.config_manager.save(self._config)
        except OSError as e:
            logger.warning("Could not save configuration to %s: %s", self.config_manager.config_file, e)

    # -- reporting -----------------------------------------------------------

    def report(self, result: ScanResult):
        if not result.environments:
            self.ui.print_success("No virtual environments found.")
            return

        table = Table(title="Virtual Environments", box=box.ROUNDED, show_lines=False)
        table.add_column("#", style="dim", justify="right")
        table.add_column("Size", justify="right", style="yellow", min_width=10)
        table.add_column("Path", style="cyan", overflow="fold")

        for rank, env in enumerate(result.ranked(), 1):
            table.add_row(str(rank), format_bytes(env.size), Text(format_path_for_display(env.path)))

        self.ui.print_table(table)
        self.ui.print_info(
            f"Total reclaimable: {format_bytes(result.total_size)}  ({len(result.environments)} environments)"
        )
        self.ui.print_info(f"Scan completed in {result.scan_duration:.1f}s")

    def report_ignored(self, result: ScanResult):
        if not result.ignored:
            self.ui.print_info("No ignored directories.")
            return

        table = Table(title="Ignored Directories", box=box.ROUNDED, show_lines=False)
        table.add_column("Path", style="white dim", overflow="fold")
        table.add_column("Reason", style="red", no_wrap=True)
        for record in result.ignored:
            table.add_row(Text(format_path_for_display(record.path)), Text(record.reason))

        self.ui.console.print()
        self.ui.print_table(table)

    # -- command -------------------------------------------------------------

    def publish_command(self, result: ScanResult) -> str:
        command = build_removal_command([env.path for env in result.ranked()])

        self.ui.console.print()
        self.ui.print_info("Removal command:")
        printable = printable_path(command)
        self.ui.print_literal(printable)
        self.ui.console.print()
        if printable != command:
            self.ui.print_warning(
                "Some paths are not valid UTF-8 and are shown with \\x escapes; "
                "use the clipboard copy rather than the text above."
            )

        if not self.copy_command:
            return command

        if copy_to_clipboard(command, self._config.clipboard_command):
            self.ui.print_success("Command copied to clipboard. Review it before running.")
        else:
            self.ui.print_warning(
                "Could not copy to clipboard. Install a clipboard utility "
                "(pbcopy, wl-copy, xclip or xsel) or copy the command above manually."
            )
        return command

    # -- main entry point ----------------------------------------------------

    def run(self) -> ScanResult:
        root = self._resolve_root(getattr(self.args, "path", None) or ".")

        result = self.scan(root)
        self._record_run(result)
        self.report(result)

        if self.show_ignored:
            self.report_ignored(result)
        elif result.ignored:
            self.ui.print_warning(f"Directories that could not be read: {len(result.ignored)} (use --show-ignored)")

        if result.environments:
            self.publish_command(result)
        return result


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kenosis",
        description="Kenosis — find Python virtual environments and prepare their removal",
    )
    parser.add_argument("path", nargs="?", default=".", help="Directory to scan (default: current directory)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show diagnostic output")
    parser.add_argument(
        "-i",
        "--show-ignored",
        action=argparse.BooleanOptionalAction,
        help="List directories that could not be read (overrides the saved default)",
    )
    parser.add_argument(
        "-a",
        "--all",
        action=argparse.BooleanOptionalAction,
        help="Also scan hidden directories (overrides the saved default)",
    )
    parser.add_argument(
        "--copy",
        action=argparse.BooleanOptionalAction,
        help="Copy the command to the clipboard (default: on)",
    )
    return parser


def main(argv: Optional[list[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    app = Kenosis(args)
    app.run()


if __name__ == "__main__":
    main()
