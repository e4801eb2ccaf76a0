from __future__ import annotations

from typing import List, Optional

from rich.console import Console
from rich.table import Table

from .validation import ValidationIssue, ValidationReport


class ValidationFormatter:
    """Renders a ValidationReport as Rich tables, errors first."""

    def __init__(self, console: Optional[Console] = None, show_suggestions: bool = True):
        self.console = console or Console()
        self.show_suggestions = show_suggestions

    def format_report(self, report: ValidationReport) -> None:
        if report.errors:
            self._format_issues(report.errors, header_text="Validation Errors", header_style="bold red")
        if report.warnings:
            self._format_issues(report.warnings, header_text="Validation Warnings", header_style="bold yellow")

        if not report.errors and not report.warnings:
            self.console.print("[bold green]✓ Configuration passed validation.[/bold green]")
        elif not report.errors:
            self.console.print("[bold green]✓ Configuration passed validation (with warnings).[/bold green]")

    def _format_issues(self, issues: List[ValidationIssue], header_text: str, header_style: str) -> None:
        table = Table(title=f"{header_text} ({len(issues)})", title_style=header_style, show_lines=False)
        table.add_column("Path", style="cyan", no_wrap=True)
        table.add_column("Code", style="magenta", no_wrap=True)
        table.add_column("Message", style="white")
        if self.show_suggestions:
            table.add_column("Suggestion", style="dim")

        for issue in issues:
            row = [issue.path, issue.code, issue.message]
            if self.show_suggestions:
                row.append(issue.fix_suggestion or "")
            table.add_row(*row)

        self.console.print(table)
        self.console.print()
