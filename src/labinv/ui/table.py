"""Table rendering using rich, with a stacked card layout for narrow consoles."""

from typing import Any

from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table as RichTable

from labinv.ui.responsive import label_rows


class TableColumn:
    """Configuration for a table column."""

    def __init__(
        self,
        name: str,
        style: str | None = None,
        justify: str = "left",
        no_wrap: bool = False,
    ):
        self.name = name
        self.style = style
        self.justify = justify
        self.no_wrap = no_wrap


class Table:
    """Table component for CLI output.

    On a console at most ``card_width`` columns wide each row is rendered as a
    card of ``label: value`` lines instead of a column grid.

    Example usage:
        columns = [
            TableColumn("Name", style="bold cyan"),
            TableColumn("Quantity", justify="right"),
            TableColumn("Status", style="green"),
        ]
        table = Table("Inventory", columns)
        table.add_row(["Ethanol", "12", "In Stock"])
        table.add_row(["Acetone", "0", "Out of Stock"], style="red")
        table.render()
    """

    def __init__(
        self,
        title: str | None = None,
        columns: list[TableColumn] | None = None,
        show_header: bool = True,
        show_lines: bool = False,
        card_width: int = 60,
    ):
        """Initialize a table.

        Args:
            title: Optional table title
            columns: List of TableColumn definitions
            show_header: Whether to show column headers
            show_lines: Whether to show lines between rows
            card_width: Console width at or below which rows render as cards
        """
        self.title = title
        self.columns = columns or []
        self.show_header = show_header
        self.show_lines = show_lines
        self.card_width = card_width
        self.rows: list[tuple[list[Any], str | None]] = []

    def add_row(self, values: list[Any], style: str | None = None) -> None:
        """Add a row to the table.

        Args:
            values: List of cell values (extra values beyond the columns are
                shown unlabelled in card mode and dropped in grid mode)
            style: Optional style for the entire row
        """
        self.rows.append((values, style))

    def _build_rich_table(self) -> RichTable:
        """Build a rich.Table object from the configuration."""
        table = RichTable(
            title=self.title,
            show_header=self.show_header,
            show_lines=self.show_lines,
        )

        for col in self.columns:
            table.add_column(
                col.name,
                style=col.style,
                justify=col.justify,  # type: ignore
                no_wrap=col.no_wrap,
            )

        width = len(self.columns)
        for values, row_style in self.rows:
            str_values = [str(v) for v in values][:width] if width else []
            table.add_row(*str_values, style=row_style)

        return table

    def _build_cards(self) -> Group:
        """Build one panel per row, each cell prefixed by its column label."""
        labeled = label_rows(
            [col.name for col in self.columns],
            [[str(v) for v in values] for values, _ in self.rows],
        )
        panels = []
        for cells, (_, row_style) in zip(labeled.rows, self.rows):
            lines = [
                f"[bold]{escape(cell.label)}:[/bold] {escape(cell.value)}"
                if cell.label
                else escape(cell.value)
                for cell in cells
            ]
            panels.append(Panel("\n".join(lines), style=row_style or ""))
        if self.title:
            return Group(f"[italic]{self.title}[/italic]", *panels)
        return Group(*panels)

    def build(self, width: int) -> RichTable | Group:
        if width <= self.card_width:
            return self._build_cards()
        return self._build_rich_table()

    def render(self, console: Console | None = None) -> None:
        """Render the table to the console."""
        console = console or Console()
        console.print(self.build(console.width))

    def to_string(self, width: int = 120) -> str:
        """Return the table as a string (useful for testing).

        Returns:
            The rendered table as a string
        """
        console = Console(width=width)
        with console.capture() as capture:
            console.print(self.build(width))
        return capture.get()
