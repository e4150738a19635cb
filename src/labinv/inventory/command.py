"""CLI commands for the `labinv components` group."""

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

import click
from rich.console import Console

from labinv import logger
from labinv.inventory.config import ClientConfig, load_client_config
from labinv.inventory.errors import ValidationError
from labinv.inventory.models import (
    Component,
    DateRange,
    FilterCriteria,
    Pagination,
    StockFilter,
    StockStatus,
)
from labinv.inventory.notify import ConsoleNotifier
from labinv.inventory.service import HttpComponentService
from labinv.inventory.store import InventoryStore
from labinv.ui.loading_bar import LoadingBar
from labinv.ui.table import Table, TableColumn

T = TypeVar("T")

_STATUS_STYLES = {
    StockStatus.OUT_OF_STOCK: "red",
    StockStatus.LOW_STOCK: "yellow",
    StockStatus.IN_STOCK: None,
}

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run_with_store(
    config: ClientConfig, action: Callable[[InventoryStore], Awaitable[T]]
) -> T:
    """Run ``action`` against a store backed by a fresh HTTP service."""

    async def runner() -> T:
        async with HttpComponentService(config) as service:
            store = InventoryStore(
                service, notifier=ConsoleNotifier(), page_size=config.page_size
            )
            return await action(store)

    return asyncio.run(runner())


def _fmt_price(price: float | None) -> str:
    if price is None:
        return "—"
    return f"${price:,.2f}"


def _fmt_qty(component: Component) -> str:
    qty = f"{component.quantity:,}"
    return f"{qty} {component.unit}" if component.unit else qty


def _components_table(
    title: str, components: list[Component], card_width: int
) -> Table:
    columns = [
        TableColumn("ID", style="dim", no_wrap=True),
        TableColumn("Name", style="bold cyan"),
        TableColumn("Part Number"),
        TableColumn("Category"),
        TableColumn("Quantity", justify="right"),
        TableColumn("Unit Price", justify="right", style="green"),
        TableColumn("Location"),
        TableColumn("Status"),
    ]
    table = Table(title, columns, card_width=card_width)
    for c in components:
        status = c.stock_status
        table.add_row(
            [
                c.id,
                c.name,
                c.part_number or "—",
                c.category,
                _fmt_qty(c),
                _fmt_price(c.unit_price),
                c.location or "—",
                status.value,
            ],
            style=_STATUS_STYLES[status],
        )
    return table


def _parse_fields(ctx, param, values: tuple[str, ...]) -> dict[str, Any]:
    """Turn repeated ``--set key=value`` options into a payload dict."""
    data: dict[str, Any] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"Expected key=value, got {item!r}")
        data[key.strip()] = value
    return data


def _parse_tags(ctx, param, value: str | None) -> list[str]:
    if not value:
        return []
    return [t.strip() for t in value.split(",") if t.strip()]


# ---------------------------------------------------------------------------
# Group
# ---------------------------------------------------------------------------


@click.group()
@click.pass_context
def components(ctx: click.Context) -> None:
    """Browse and edit the laboratory component inventory."""
    try:
        ctx.obj = load_client_config()
    except ValueError as e:
        raise click.ClickException(f"Invalid configuration: {e}")


# ---------------------------------------------------------------------------
# list
# ---------------------------------------------------------------------------


@components.command("list")
@click.option("--search", "-s", help="Free-text search over name, part number, etc.")
@click.option("--category", help="Only this category.")
@click.option("--location", help="Only this storage location.")
@click.option(
    "--stock",
    "stock_status",
    type=click.Choice([s.value for s in StockFilter]),
    help="Stock level class.",
)
@click.option("--min-qty", "min_quantity", type=int, help="Minimum quantity.")
@click.option("--max-qty", "max_quantity", type=int, help="Maximum quantity.")
@click.option("--min-price", type=float, help="Minimum unit price.")
@click.option("--max-price", type=float, help="Maximum unit price.")
@click.option("--manufacturer", help="Manufacturer name.")
@click.option("--supplier", help="Supplier name.")
@click.option(
    "--added",
    "date_range",
    type=click.Choice([d.value for d in DateRange]),
    help="Added within this period.",
)
@click.option("--tags", callback=_parse_tags, help="Comma-separated tags.")
@click.option("--has-datasheet", is_flag=True, help="Only items with a datasheet.")
@click.option("--sort-by", default="name", show_default=True)
@click.option(
    "--sort-order", type=click.Choice(["asc", "desc"]), default="asc", show_default=True
)
@click.option("--page", "-p", default=1, show_default=True, type=int)
@click.option("--limit", "-n", type=int, help="Items per page (config default).")
@click.option("--all", "all_pages", is_flag=True, help="Walk every page.")
@click.pass_obj
def list_components(
    config: ClientConfig,
    page: int,
    limit: int | None,
    all_pages: bool,
    **criteria: Any,
) -> None:
    """List components matching the given filters."""
    filters = FilterCriteria.model_validate(criteria)
    pagination = Pagination(page=page, limit=limit or config.page_size)
    if pagination.page < 1 or pagination.limit < 1:
        raise click.BadParameter("--page and --limit must be positive")

    async def action(store: InventoryStore) -> tuple[list[Component], Pagination]:
        result = await store.fetch_page(filters, pagination)
        if not result.success:
            raise click.ClickException(result.error or "Failed to fetch components")
        items = list(store.components)
        start, total_pages = store.pagination.page, store.pagination.total_pages
        if all_pages and total_pages > start:
            with LoadingBar("Fetching pages", total=total_pages - start) as bar:
                for next_page in range(start + 1, total_pages + 1):
                    store.set_pagination({"page": next_page})
                    result = await store.fetch_page()
                    if not result.success:
                        raise click.ClickException(
                            result.error or "Failed to fetch components"
                        )
                    items.extend(store.components)
                    bar.advance()
        return items, store.pagination

    logger.info(f"Listing components: {filters.to_query()} page={page}")
    items, totals = _run_with_store(config, action)

    if not items:
        click.echo("No components found.")
        return

    if all_pages:
        title = f"Components ({len(items)} of {totals.total})"
    else:
        title = (
            f"Components (page {totals.page}/{totals.total_pages}, "
            f"{totals.total} total)"
        )
    _components_table(title, items, config.card_width).render()


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------


@components.command()
@click.argument("component_id")
@click.pass_obj
def show(config: ClientConfig, component_id: str) -> None:
    """Show one component in detail."""

    async def action(store: InventoryStore) -> Component | None:
        return await store.fetch_one(component_id)

    component = _run_with_store(config, action)
    if component is None:
        raise click.exceptions.Exit(1)

    columns = [TableColumn("Field", style="bold"), TableColumn("Value")]
    table = Table(component.name, columns, card_width=config.card_width)
    rows = [
        ("ID", component.id),
        ("Part Number", component.part_number),
        ("Category", component.category),
        ("Description", component.description),
        ("Manufacturer", component.manufacturer),
        ("Quantity", _fmt_qty(component)),
        ("Unit Price", _fmt_price(component.unit_price)),
        ("Location", component.location),
        ("Minimum Stock", component.min_stock),
        ("Critical Low", component.critical_low),
        ("Status", component.stock_status.value),
        ("Supplier", component.supplier),
        ("Datasheet", component.datasheet_link),
        ("Tags", ", ".join(component.tags)),
    ]
    for label, value in rows:
        table.add_row([label, "—" if value in (None, "") else value])
    table.render()


# ---------------------------------------------------------------------------
# add / update / delete
# ---------------------------------------------------------------------------


@components.command()
@click.option(
    "--set",
    "fields",
    multiple=True,
    callback=_parse_fields,
    help="Field to set, as key=value (e.g. --set name=Ethanol). Repeatable.",
)
@click.pass_obj
def add(config: ClientConfig, fields: dict[str, Any]) -> None:
    """Create a component. NAME and CATEGORY are required."""

    async def action(store: InventoryStore):
        return await store.create(fields)

    try:
        result = _run_with_store(config, action)
    except ValidationError as e:
        raise click.UsageError(str(e))
    if not result.success:
        raise click.exceptions.Exit(1)
    click.echo(f"Created {result.data.id}")


@components.command()
@click.argument("component_id")
@click.option(
    "--set",
    "fields",
    multiple=True,
    callback=_parse_fields,
    help="Field to change, as key=value. Repeatable.",
)
@click.pass_obj
def update(config: ClientConfig, component_id: str, fields: dict[str, Any]) -> None:
    """Update fields of a component."""
    if not fields:
        raise click.UsageError("Nothing to update; pass at least one --set key=value")

    async def action(store: InventoryStore):
        return await store.update(component_id, fields)

    result = _run_with_store(config, action)
    if not result.success:
        raise click.exceptions.Exit(1)


@components.command()
@click.argument("component_id")
@click.option(
    "--type",
    "movement",
    type=click.Choice(["inward", "outward", "adjustment"]),
    required=True,
    help="Stock in, stock out, or set an absolute count.",
)
@click.argument("quantity", type=int)
@click.option("--reason", help="Why the stock moved.")
@click.option("--project", help="Project the stock was used for.")
@click.option("--cost", type=float, help="Total cost of the movement.")
@click.pass_obj
def stock(
    config: ClientConfig,
    component_id: str,
    movement: str,
    quantity: int,
    reason: str | None,
    project: str | None,
    cost: float | None,
) -> None:
    """Record a stock movement of QUANTITY for a component."""
    payload = {
        "type": movement,
        "quantity": quantity,
        "reason": reason,
        "project": project,
        "cost": cost,
    }

    async def action(store: InventoryStore):
        return await store.update_quantity(component_id, payload)

    try:
        result = _run_with_store(config, action)
    except ValidationError as e:
        raise click.UsageError(str(e))
    if not result.success:
        raise click.exceptions.Exit(1)
    click.echo(f"New quantity: {result.data.component.quantity}")


@components.command()
@click.argument("component_id")
@click.confirmation_option(prompt="Delete this component?")
@click.pass_obj
def delete(config: ClientConfig, component_id: str) -> None:
    """Delete a component."""

    async def action(store: InventoryStore):
        return await store.delete(component_id)

    result = _run_with_store(config, action)
    if not result.success:
        raise click.exceptions.Exit(1)


# ---------------------------------------------------------------------------
# lookups
# ---------------------------------------------------------------------------


@components.command()
@click.pass_obj
def categories(config: ClientConfig) -> None:
    """List the categories in use."""
    for name in _run_with_store(config, lambda store: store.fetch_categories()):
        click.echo(name)


@components.command()
@click.pass_obj
def locations(config: ClientConfig) -> None:
    """List the storage locations in use."""
    for name in _run_with_store(config, lambda store: store.fetch_locations()):
        click.echo(name)


@components.command("low-stock")
@click.pass_obj
def low_stock(config: ClientConfig) -> None:
    """List components at or below their critical-low threshold."""
    items = _run_with_store(config, lambda store: store.fetch_low_stock())
    if not items:
        click.echo("Nothing is low on stock.")
        return
    _components_table(
        f"Low stock ({len(items)})", items, config.card_width
    ).render()


@components.command()
@click.pass_obj
def stats(config: ClientConfig) -> None:
    """Show inventory totals by category."""
    data = _run_with_store(config, lambda store: store.fetch_stats())
    if data is None:
        raise click.ClickException("Statistics are unavailable")

    console = Console()
    console.print(f"Components:     {data.total_components:,}")
    console.print(f"Low stock:      [yellow]{data.low_stock_components:,}[/yellow]")
    console.print(f"Out of stock:   [red]{data.out_of_stock_components:,}[/red]")
    console.print(f"Total value:    {_fmt_price(data.total_value)}")

    if data.category_stats:
        columns = [
            TableColumn("Category", style="bold cyan"),
            TableColumn("Items", justify="right"),
            TableColumn("Value", justify="right", style="green"),
        ]
        table = Table("By category", columns, card_width=config.card_width)
        for stat in data.category_stats:
            table.add_row(
                [stat.category or "—", f"{stat.count:,}", _fmt_price(stat.value)]
            )
        table.render(console)
