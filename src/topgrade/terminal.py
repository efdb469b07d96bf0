from __future__ import annotations

"""Terminal output.

CONTRACT
- Inputs: step labels and results
- Outputs:
  - print_separator(): full-width rule carrying a label
  - print_result(): `name: OK` (green) or `name: FAILED` (red)
- Invariants:
  - All user-facing progress goes through one rich Console
"""

from dataclasses import dataclass, field

from rich.console import Console


@dataclass
class Terminal:
    console: Console = field(default_factory=Console)

    def print_separator(self, label: str) -> None:
        self.console.print()
        self.console.rule(f"[bold]{label}[/bold]", align="left", style="white")

    def print_result(self, name: str, succeeded: bool) -> None:
        status = "[green]OK[/green]" if succeeded else "[red]FAILED[/red]"
        self.console.print(f"{name}: {status}", highlight=False)

    def print_error(self, message: str) -> None:
        self.console.print(f"[red]ERROR:[/red] {message}", highlight=False)
