"""Output formatting utilities for the CLI."""

from __future__ import annotations

import json

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from minimax_lm.provider import ModelInformation
from minimax_lm.types import ResponsePart, TextPart, ThinkingPart, ToolCallPart


class OutputFormatter:
    """Rich-based output formatting for the mmx CLI."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def format_model_list(self, models: list[ModelInformation]) -> None:
        if not models:
            self.console.print("[dim]No models available.[/dim]")
            return

        table = Table(title="MiniMax Models")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Name")
        table.add_column("Context", justify="right")
        table.add_column("Detail", style="dim")

        for m in models:
            table.add_row(m.id, m.name, f"{m.max_input_tokens:,}", m.detail)

        self.console.print(table)

    def format_part(self, part: ResponsePart) -> None:
        """Print one streamed response part without a trailing newline."""
        if isinstance(part, ThinkingPart):
            value = part.value if isinstance(part.value, str) else "".join(part.value)
            self.console.print(value, end="", style="dim italic", markup=False)
        elif isinstance(part, TextPart):
            self.console.print(part.value, end="", markup=False)
        elif isinstance(part, ToolCallPart):
            args = json.dumps(part.input or {}, default=str)
            self.console.print(
                f"\n[yellow]tool call[/yellow] {part.name}({args[:200]}) [dim]{part.call_id}[/dim]"
            )

    def format_config(self, config: dict) -> None:
        config_json = json.dumps(config, indent=2, default=str)
        self.console.print(Syntax(config_json, "json", theme="monokai"))
