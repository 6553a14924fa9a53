# src/btconfig/cli/formatter.py
from typing import List, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.tree import Tree

from btconfig.core.models import Node, ParseReport, TokenLine

# Shared Rich console for every CLI screen
console = Console()


class ConfigFormatter:
    """
    ConfigFormatter: the visual side of the CLI.
    Renders token tables, node trees, YAML views and check reports.
    """

    def __init__(self, out: Optional[Console] = None):
        self.console = out or console

    def show_tokens(self, token_lines: Sequence[TokenLine], file_name: str):
        table = Table(title=f"Tokens: {file_name}", show_header=True, header_style="bold magenta")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Depth", justify="right")
        table.add_column("Shape")
        table.add_column("Tokens", style="cyan")

        for index, line in enumerate(token_lines, 1):
            table.add_row(str(index), str(line.depth), self._shape_of(line), escape(line.describe()))

        self.console.print(table)

    def _shape_of(self, line: TokenLine) -> str:
        if len(line) == 4:
            return "assignment"
        if line.composite:
            return "named block" if len(line) == 3 else "anonymous block"
        return "value"

    def show_tree(self, root: Node, file_name: str):
        tree = Tree(f"[bold cyan]{file_name}[/bold cyan]")
        for child in root.children or []:
            self._add_branch(tree, child)
        self.console.print(tree)

    def _add_branch(self, parent: Tree, node: Node):
        label = "[dim]-[/dim]" if node.key is None else f"[bold]{escape(node.key)}[/bold]"
        if node.value is not None:
            parent.add(f"{label} = [green]{escape(repr(node.value))}[/green]")
            return
        branch = parent.add(f"{label}:")
        for child in node.children or []:
            self._add_branch(branch, child)

    def show_yaml(self, yaml_text: str, title: str):
        syntax = Syntax(yaml_text.rstrip() or "{}", "yaml", theme="monokai", line_numbers=False)
        self.console.print(Panel(syntax, title=title, border_style="green"))

    def show_error(self, file_name: str, error: Exception):
        self.console.print(f"[bold red]{type(error).__name__} in {file_name}:[/bold red] {escape(str(error))}")

    def print_final_table(self, reports: List[ParseReport]):
        """
        Builds the summary table shown at the end of a check run.
        """
        table = Table(title="btconfig Check Report", show_lines=True, header_style="bold magenta")
        table.add_column("File Path", style="cyan")
        table.add_column("Nodes", justify="right")
        table.add_column("Status", style="bold")
        table.add_column("Result", justify="center")

        for r in reports:
            color = "green" if r.success else "red"
            table.add_row(
                r.file_path,
                str(r.node_count),
                f"[{color}]{r.status}[/{color}]",
                "✅" if r.success else "❌"
            )

        self.console.print(table)

        for r in reports:
            if r.error:
                self.console.print(f"[bold red]Error in {r.file_path}:[/bold red] {escape(r.error)}")
