"""Shared fixtures and factories for inventory tests."""

import asyncio
from typing import Any

from labinv.inventory.errors import NotFound
from labinv.inventory.models import (
    Component,
    ComponentPage,
    ComponentStats,
    QuantityUpdate,
    QuantityUpdateResult,
)
from labinv.inventory.notify import Notifier
from labinv.inventory.service import ComponentServicePort

# ---------------------------------------------------------------------------
# Factories / Builders
# ---------------------------------------------------------------------------


def make_component(
    id: str = "c1",
    name: str = "Ethanol",
    category: str = "Chemical",
    quantity: int = 20,
    critical_low: int = 10,
    **kwargs: Any,
) -> Component:
    """Factory for Component with sensible defaults."""
    return Component(
        id=id,
        name=name,
        category=category,
        quantity=quantity,
        critical_low=critical_low,
        part_number=kwargs.get("part_number", f"PN-{id}"),
        unit=kwargs.get("unit", "mL"),
        unit_price=kwargs.get("unit_price", 1.5),
        location=kwargs.get("location", "Shelf A"),
        min_stock=kwargs.get("min_stock"),
        tags=kwargs.get("tags", []),
    )


def make_page(
    components: list[Component] | None = None,
    current_page: int = 1,
    total_pages: int = 1,
    total: int | None = None,
) -> ComponentPage:
    """Factory for ComponentPage; ``total`` defaults to the item count."""
    components = components if components is not None else [make_component()]
    return ComponentPage(
        components=components,
        current_page=current_page,
        total_pages=total_pages,
        total=len(components) if total is None else total,
    )


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class RecordingNotifier(Notifier):
    """Collects notifications instead of displaying them."""

    def __init__(self):
        self.successes: list[str] = []
        self.errors: list[str] = []

    def success(self, message: str) -> None:
        self.successes.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


class FakeService(ComponentServicePort):
    """In-memory ComponentServicePort with canned results.

    Usage:
        service = FakeService()
        service.pages.append(make_page([...]))
        service.fail("list_components", NetworkError("down"))
        page = await service.list_components({"page": 1})

    ``list_components`` hands out queued pages in order (repeating the last
    one). A ``list_components`` or ``get`` call can be held until released
    with :meth:`gate`.
    """

    def __init__(self):
        self.pages: list[ComponentPage] = []
        self.items: dict[str, Component] = {}
        self.calls: list[tuple[str, Any]] = []
        self._errors: dict[str, Exception] = {}
        self._gates: dict[str, list[asyncio.Event]] = {}
        self.quantity_msg: str | None = "Stock inward successful"
        self.category_list: list[str] = ["Chemical", "Equipment"]
        self.location_list: list[str] = ["Shelf A", "Fridge 2"]
        self.stats_data = ComponentStats(total_components=3, low_stock_components=1)

    def fail(self, method: str, error: Exception) -> None:
        """Make ``method`` raise ``error`` until :meth:`recover` is called."""
        self._errors[method] = error

    def recover(self, method: str) -> None:
        self._errors.pop(method, None)

    def gate(self, method: str = "list_components") -> asyncio.Event:
        """Hold the next ``method`` call until the event is set."""
        event = asyncio.Event()
        self._gates.setdefault(method, []).append(event)
        return event

    async def _wait(self, method: str) -> None:
        gates = self._gates.get(method)
        if gates:
            await gates.pop(0).wait()

    def _check(self, method: str, arg: Any = None) -> None:
        self.calls.append((method, arg))
        if method in self._errors:
            raise self._errors[method]

    def count(self, method: str) -> int:
        return sum(1 for name, _ in self.calls if name == method)

    async def list_components(self, params: dict[str, Any]) -> ComponentPage:
        index = self.count("list_components")
        self.calls.append(("list_components", params))
        page = self.pages[min(index, len(self.pages) - 1)] if self.pages else make_page([])
        await self._wait("list_components")
        if "list_components" in self._errors:
            raise self._errors["list_components"]
        return page

    async def get(self, component_id: str) -> Component:
        self._check("get", component_id)
        await self._wait("get")
        if component_id not in self.items:
            raise NotFound()
        return self.items[component_id]

    async def create(self, data: dict[str, Any]) -> Component:
        self._check("create", data)
        component = Component.model_validate({"_id": f"new-{len(self.calls)}", **data})
        self.items[component.id] = component
        return component

    async def update(self, component_id: str, data: dict[str, Any]) -> Component:
        self._check("update", (component_id, data))
        if component_id not in self.items:
            raise NotFound()
        updated = self.items[component_id].model_copy(update=data)
        self.items[component_id] = updated
        return updated

    async def update_quantity(
        self, component_id: str, update: QuantityUpdate
    ) -> QuantityUpdateResult:
        self._check("update_quantity", (component_id, update))
        component = self.items[component_id]
        if update.type == "inward":
            quantity = component.quantity + update.quantity
        elif update.type == "outward":
            quantity = component.quantity - update.quantity
        else:
            quantity = update.quantity
        component = component.model_copy(update={"quantity": quantity})
        self.items[component_id] = component
        return QuantityUpdateResult(
            component=component, msg=self.quantity_msg, new_quantity=quantity
        )

    async def delete(self, component_id: str) -> None:
        self._check("delete", component_id)
        self.items.pop(component_id, None)

    async def categories(self) -> list[str]:
        self._check("categories")
        return self.category_list

    async def locations(self) -> list[str]:
        self._check("locations")
        return self.location_list

    async def low_stock(self) -> list[Component]:
        self._check("low_stock")
        return [c for c in self.items.values() if c.quantity <= c.critical_low]

    async def stats(self) -> ComponentStats:
        self._check("stats")
        return self.stats_data

    async def __aenter__(self) -> "FakeService":
        return self

    async def __aexit__(self, *args: Any) -> None:
        return None
