#!/usr/bin/env python3
"""
BTCONFIG CLI - Config Inspector
-------------------------------
Command line front end for looking inside config files:

    btconfig tokens FILE                    token table per significant line
    btconfig tree FILE [--yaml]             parsed node tree
    btconfig load FILE --schema mod:Class   bind into a class and show the result
    btconfig check PATH [--ext .cfg]        batch syntax / schema check
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from btconfig.cli.formatter import ConfigFormatter, console
from btconfig.core.engine import ConfigLoader
from btconfig.core.errors import ConfigError
from btconfig.core.exporter import ConfigExporter
from btconfig.core.models import ParseReport

VERSION = "0.1.0"

logger = logging.getLogger("btconfig.cli")


class SchemaImportError(Exception):
    """The --schema argument does not name an importable class."""


def import_schema(spec: str) -> Any:
    """Resolves 'package.module:ClassName' (or 'package.module.ClassName')."""
    if ":" in spec:
        module_name, _, attr_path = spec.partition(":")
    else:
        module_name, _, attr_path = spec.rpartition(".")
    if not module_name or not attr_path:
        raise SchemaImportError(f"expected 'module:Class', got {spec!r}")

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise SchemaImportError(f"cannot import module {module_name!r}: {e}")

    for part in attr_path.split("."):
        try:
            target = getattr(target, part)
        except AttributeError:
            raise SchemaImportError(f"module {module_name!r} has no attribute {attr_path!r}")
    return target


class BtConfigCLI:
    """
    CLI wrapper that translates user commands into loader actions.
    Every command returns a process exit status.
    """

    def __init__(self):
        self.parser = argparse.ArgumentParser(
            prog="btconfig",
            description="btconfig - reader and inspector for dash-indented config files",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self.loader = ConfigLoader()
        self.exporter = ConfigExporter()
        self.formatter = ConfigFormatter()
        self._setup_args()

    def _setup_args(self):
        """Configures the command-line flags and subcommands."""
        self.parser.add_argument("--version", action="version", version=f"btconfig v{VERSION}")
        self.parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
        subparsers = self.parser.add_subparsers(dest="command", metavar="Command")

        tokens_parser = subparsers.add_parser("tokens", help="Show the token lines of a config file")
        tokens_parser.add_argument("file", help="Path to a config file")

        tree_parser = subparsers.add_parser("tree", help="Show the parsed node tree")
        tree_parser.add_argument("file", help="Path to a config file")
        tree_parser.add_argument("--yaml", action="store_true", help="Render the tree as YAML")

        load_parser = subparsers.add_parser("load", help="Bind a config file into a class")
        load_parser.add_argument("file", help="Path to a config file")
        load_parser.add_argument("--schema", required=True, help="Destination class as 'module:Class'")

        check_parser = subparsers.add_parser("check", help="Check one file or a directory of files")
        check_parser.add_argument("path", help="Path to a config file or directory")
        check_parser.add_argument("--ext", default=".cfg", help="File extension filter (default: .cfg)")
        check_parser.add_argument("--schema", help="Also bind every file into 'module:Class'")

    def _setup_logging(self, verbose: bool):
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.WARNING,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )

    def print_header(self, subtitle: str):
        console.print(Panel.fit(
            f"[bold cyan]btconfig v{VERSION}[/bold cyan]",
            title=f"[bold white]{subtitle}[/bold white]",
            border_style="cyan"
        ))

    def _open(self, path: Path):
        # utf-8-sig drops a byte order mark written by Windows editors
        return path.open("r", encoding="utf-8-sig")

    def cmd_tokens(self, args: argparse.Namespace) -> int:
        path = Path(args.file)
        try:
            with self._open(path) as reader:
                context = self.loader.parse(reader)
        except (ConfigError, OSError, UnicodeDecodeError) as e:
            self.formatter.show_error(path.name, e)
            return 1
        self.formatter.show_tokens(context.token_lines, path.name)
        return 0

    def cmd_tree(self, args: argparse.Namespace) -> int:
        path = Path(args.file)
        try:
            with self._open(path) as reader:
                context = self.loader.parse(reader)
        except (ConfigError, OSError, UnicodeDecodeError) as e:
            self.formatter.show_error(path.name, e)
            return 1

        if args.yaml:
            self.formatter.show_yaml(self.exporter.export_tree(context.root), f"Tree: {path.name}")
        else:
            self.formatter.show_tree(context.root, path.name)
        return 0

    def cmd_load(self, args: argparse.Namespace) -> int:
        path = Path(args.file)
        try:
            schema = import_schema(args.schema)
        except SchemaImportError as e:
            console.print(f"[bold red]Error:[/bold red] {e}")
            return 2

        try:
            with self._open(path) as reader:
                instance = self.loader.load_as(reader, schema)
        except (ConfigError, OSError, UnicodeDecodeError) as e:
            self.formatter.show_error(path.name, e)
            return 1

        self.formatter.show_yaml(self.exporter.export_instance(instance), f"{schema.__name__}: {path.name}")
        return 0

    def cmd_check(self, args: argparse.Namespace) -> int:
        input_path = Path(args.path)
        if not input_path.exists():
            console.print(f"[bold red]Error:[/bold red] Path '{args.path}' not found.")
            return 2

        schema = None
        if args.schema:
            try:
                schema = import_schema(args.schema)
            except SchemaImportError as e:
                console.print(f"[bold red]Error:[/bold red] {e}")
                return 2

        if input_path.is_file():
            target_files = [input_path]
        else:
            target_files = sorted(
                f for f in input_path.rglob(f"*{args.ext}")
                if f.is_file() and not f.is_symlink()
            )

        if not target_files:
            console.print(f"[bold yellow]No '{args.ext}' files found under {args.path}.[/bold yellow]")
            return 0

        reports: List[ParseReport] = []
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(bar_width=40),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=console,
            transient=True,
        ) as progress:
            task_id = progress.add_task("Checking configs...", total=len(target_files))
            for file_path in target_files:
                reports.append(self.check_file(file_path, schema))
                progress.update(task_id, advance=1, description=f"Checked: {file_path.name}")

        self.formatter.print_final_table(reports)
        return 0 if all(r.success for r in reports) else 1

    def check_file(self, file_path: Path, schema: Optional[Any] = None) -> ParseReport:
        """Parses (and optionally binds) a single file into a report row."""
        name = str(file_path)
        try:
            with self._open(file_path) as reader:
                context = self.loader.parse(reader)
            if schema is not None:
                self.loader.binder.bind_new(context.root, schema)
        except ConfigError as e:
            logger.debug("check failed for %s: %s", name, e)
            return ParseReport(name, False, type(e).__name__, error=str(e))
        except (OSError, UnicodeDecodeError) as e:
            return ParseReport(name, False, "READ_ERROR", error=str(e))

        status = "BOUND" if schema is not None else "OK"
        return ParseReport(name, True, status, node_count=context.count_nodes())

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Primary routing entry point."""
        args = self.parser.parse_args(argv)
        self._setup_logging(args.verbose)

        handlers = {
            "tokens": self.cmd_tokens,
            "tree": self.cmd_tree,
            "load": self.cmd_load,
            "check": self.cmd_check,
        }
        handler = handlers.get(args.command)
        if handler is None:
            self.print_header("Config Inspector")
            self.parser.print_help()
            return 0
        return handler(args)


def main():
    """Application entry point with interrupt handling."""
    try:
        sys.exit(BtConfigCLI().run())
    except KeyboardInterrupt:
        console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
