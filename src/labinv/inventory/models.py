"""Data models for the component inventory client.

Wire names follow the backend's camelCase JSON; attributes are snake_case.
All models accept either form on input (``populate_by_name``).
"""

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CRITICAL_LOW = 10
DEFAULT_PAGE_SIZE = 10


class StockStatus(str, Enum):
    """Stock classification derived from quantity and thresholds."""

    OUT_OF_STOCK = "Out of Stock"
    LOW_STOCK = "Low Stock"
    IN_STOCK = "In Stock"


class StockFilter(str, Enum):
    """Stock-status values accepted by the list endpoint."""

    IN_STOCK = "inStock"
    LOW_STOCK = "lowStock"
    OUT_OF_STOCK = "outOfStock"


class DateRange(str, Enum):
    """Date-added buckets accepted by the list endpoint."""

    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


def stock_status(quantity: int, critical_low: int) -> StockStatus:
    """Classify a stock level.

    Checked in priority order: empty stock wins over the low threshold.
    """
    if quantity == 0:
        return StockStatus.OUT_OF_STOCK
    if quantity <= critical_low:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


class Component(BaseModel):
    """A trackable laboratory inventory item as served by the backend."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(..., alias="_id", description="Opaque backend identifier.")
    name: str = Field(..., description="Display name.")
    part_number: str | None = Field(None, alias="partNumber")
    category: str = Field(..., description="Category (open set, e.g. 'Chemical').")
    description: str | None = None
    manufacturer: str | None = None
    datasheet_link: str | None = Field(None, alias="datasheetLink")

    quantity: int = Field(0, ge=0)
    unit: str | None = Field(None, description="Unit of measure (e.g. 'pcs', 'mL').")
    unit_price: float = Field(0.0, ge=0, alias="unitPrice")
    location: str | None = None
    min_stock: int | None = Field(None, alias="minStock")
    critical_low: int = Field(DEFAULT_CRITICAL_LOW, alias="criticalLow")

    supplier: str | None = None
    supplier_part_number: str | None = Field(None, alias="supplierPartNumber")
    lead_time: int | None = Field(None, alias="leadTime", description="Days.")
    package_type: str | None = Field(None, alias="packageType")
    tags: list[str] = Field(default_factory=list)
    total_value: float | None = Field(None, alias="totalValue")
    is_active: bool = Field(True, alias="isActive")
    added_date: datetime | None = Field(None, alias="addedDate")
    last_restocked: datetime | None = Field(None, alias="lastRestocked")
    last_used_date: datetime | None = Field(None, alias="lastUsedDate")

    @property
    def stock_status(self) -> StockStatus:
        return stock_status(self.quantity, self.critical_low)


class FilterCriteria(BaseModel):
    """Client-side constraints narrowing the component collection view."""

    model_config = ConfigDict(populate_by_name=True)

    search: str | None = None
    category: str | None = None
    location: str | None = None
    stock_status: StockFilter | None = Field(None, alias="stockStatus")
    min_quantity: int | None = Field(None, alias="minQuantity")
    max_quantity: int | None = Field(None, alias="maxQuantity")
    min_price: float | None = Field(None, alias="minPrice")
    max_price: float | None = Field(None, alias="maxPrice")
    manufacturer: str | None = None
    supplier: str | None = None
    date_range: DateRange | None = Field(None, alias="dateRange")
    tags: list[str] = Field(default_factory=list)
    has_datasheet: bool = Field(False, alias="hasDatasheet")
    sort_by: str = Field("name", alias="sortBy")
    sort_order: Literal["asc", "desc"] = Field("asc", alias="sortOrder")

    def merge(self, partial: dict[str, Any]) -> "FilterCriteria":
        """Return a copy with ``partial`` shallow-merged on top.

        Keys may be given as attribute names or wire aliases.
        """
        aliases = {
            f.alias: name for name, f in FilterCriteria.model_fields.items() if f.alias
        }
        data = self.model_dump()
        for key, value in partial.items():
            data[aliases.get(key, key)] = value
        return FilterCriteria.model_validate(data)

    def to_query(self) -> dict[str, Any]:
        """Build list-endpoint query parameters.

        Unset fields are left out entirely; an empty string must never reach
        the server where it could be read as "match the empty string".
        """
        query: dict[str, Any] = {}
        for name, value in self.model_dump(by_alias=True, mode="json").items():
            if value is None:
                continue
            if isinstance(value, str) and not value.strip():
                continue
            if isinstance(value, list):
                tags = [t.strip() for t in value if t and t.strip()]
                if not tags:
                    continue
                value = ",".join(tags)
            if name == "hasDatasheet" and not value:
                continue
            if isinstance(value, bool):
                value = "true" if value else "false"
            query[name] = value
        return query


class Pagination(BaseModel):
    """Client-side pagination cursor plus server-reported totals."""

    page: int = Field(1, description="Current page, 1-based.")
    limit: int = Field(DEFAULT_PAGE_SIZE, description="Items per page.")
    total: int = Field(0, description="Total matching items on the server.")
    total_pages: int = Field(1, description="Derived from total and limit.")

    def clamp(self, page: int) -> int:
        """Bound ``page`` to ``[1, total_pages]``."""
        return max(1, min(page, max(self.total_pages, 1)))

    def to_query(self) -> dict[str, int]:
        return {"page": self.page, "limit": self.limit}


def _as_int(value: Any, fallback: int) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return fallback
    return parsed or fallback


class ComponentPage(BaseModel):
    """One page of the list endpoint's response."""

    model_config = ConfigDict(populate_by_name=True)

    components: list[Component] = Field(default_factory=list)
    current_page: int = Field(1, alias="currentPage")
    total_pages: int = Field(1, alias="totalPages")
    total: int = 0
    limit: int | None = None

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> "ComponentPage":
        """Parse a list response, tolerating missing or non-numeric totals.

        The backend echoes ``currentPage`` straight from the query string and
        reports ``totalPages = 0`` for an empty result, so both are coerced.
        """
        limit = data.get("limit")
        return cls(
            components=[Component.model_validate(c) for c in data.get("components", [])],
            current_page=_as_int(data.get("currentPage"), 1),
            total_pages=_as_int(data.get("totalPages"), 1),
            total=_as_int(data.get("total"), 0),
            limit=_as_int(limit, 0) or None,
        )

    def pagination(self, limit: int) -> Pagination:
        """Pagination state reported by this page, current page clamped."""
        page = Pagination(
            limit=self.limit or limit, total=self.total, total_pages=self.total_pages
        )
        page.page = page.clamp(self.current_page)
        return page


class QuantityUpdate(BaseModel):
    """A stock movement: receipt, issue, or absolute adjustment."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["inward", "outward", "adjustment"]
    quantity: int = Field(..., ge=1)
    reason: str | None = Field(None, max_length=200)
    project: str | None = Field(None, max_length=100)
    location: str | None = None
    supplier: str | None = None
    invoice_number: str | None = Field(None, alias="invoiceNumber")
    cost: float | None = Field(None, ge=0)


class QuantityUpdateResult(BaseModel):
    """Response of the quantity endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    component: Component
    msg: str | None = None
    new_quantity: int | None = Field(None, alias="newQuantity")


class CategoryStat(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    category: str | None = Field(None, alias="_id")
    count: int = 0
    value: float = 0.0


class ComponentStats(BaseModel):
    """Server-aggregated inventory statistics."""

    model_config = ConfigDict(populate_by_name=True)

    total_components: int = Field(0, alias="totalComponents")
    low_stock_components: int = Field(0, alias="lowStockComponents")
    out_of_stock_components: int = Field(0, alias="outOfStockComponents")
    total_value: float = Field(0.0, alias="totalValue")
    category_stats: list[CategoryStat] = Field(
        default_factory=list, alias="categoryStats"
    )


class OperationResult(BaseModel):
    """Outcome of a store mutation, for callers that need more than state."""

    success: bool
    data: Any = None
    error: str | None = None
    superseded: bool = Field(
        False, description="A newer request replaced this one before it resolved."
    )
