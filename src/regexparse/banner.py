from __future__ import annotations

from dataclasses import dataclass, field

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .parser import RegexParser
from .version import __version__


@dataclass
class BannerInfo:
    version: str
    regex: str
    engine: str
    flags: list[str] = field(default_factory=list)
    include_all_groups: bool = True
    timeout: float | None = None
    group_names: list[str] = field(default_factory=list)
    group_count: int = 1

    @property
    def emits_ordinals(self) -> bool:
        return self.include_all_groups or not self.group_names


def build_banner_info(parser: RegexParser) -> BannerInfo:
    """Build a BannerInfo instance from a constructed parser."""
    description = parser.describe()
    return BannerInfo(
        version=__version__,
        regex=description["regex"],
        engine=description["engine"],
        flags=description["flags"],
        include_all_groups=description["include_all_groups"],
        timeout=description["timeout"],
        group_names=description["group_names"],
        group_count=description["group_count"],
    )


def print_pattern_banner(info: BannerInfo, console: Console) -> None:
    """Print a panel describing the pattern's capture-group layout."""
    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("Key", style="cyan bold", no_wrap=True)
    table.add_column("Value", style="white")

    table.add_row("Pattern", Text(info.regex, style="bold"))
    table.add_row("Engine", info.engine)
    if info.flags:
        table.add_row("Flags", ", ".join(info.flags))
    if info.timeout is not None:
        table.add_row("Timeout", f"{info.timeout:g}s")

    table.add_row("Group count", f"[bold]{info.group_count}[/bold] (including group 0)")
    if info.group_names:
        table.add_row("Named groups", Text(", ".join(info.group_names), style="green"))
    else:
        table.add_row("Named groups", "[dim](none)[/dim]")

    ordinal_keys = [str(index) for index in range(info.group_count)]
    field_keys = list(info.group_names)
    if info.emits_ordinals:
        field_keys.extend(ordinal_keys)
    table.add_row("Record fields", Text(", ".join(field_keys)))

    panel = Panel(
        table,
        title=f"[bold white]REGEXPARSE[/bold white] [dim]{info.version}[/dim]",
        border_style="blue",
        padding=(1, 2),
    )

    console.print()
    console.print(panel)
    console.print()
