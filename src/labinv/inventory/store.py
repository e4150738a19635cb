"""Client-side state for the component collection.

:class:`InventoryStore` owns the current page of components, the active filter
and sort criteria, pagination, the "current component" used by edit flows, and
the loading/error flags. All reads and writes against the backend go through
it so the local view stays consistent after every mutation.

Remote failures (:class:`NetworkError`, :class:`ServiceError`) stop at the
store: they become a user-facing message in :attr:`InventoryStore.error`, are
sent to the notifier, and are never re-raised. Nothing is retried.
"""

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from labinv import logger
from labinv.inventory.errors import (
    InventoryError,
    PageOutOfRange,
    ServiceError,
    ValidationError,
)
from labinv.inventory.models import (
    DEFAULT_PAGE_SIZE,
    Component,
    ComponentStats,
    FilterCriteria,
    OperationResult,
    Pagination,
    QuantityUpdate,
)
from labinv.inventory.notify import LogNotifier, Notifier
from labinv.inventory.service import ComponentServicePort

REQUIRED_FIELDS = ("name", "category")


def error_message(error: Exception, fallback: str) -> str:
    """The backend's message when it sent one, else ``fallback``."""
    if isinstance(error, ServiceError) and error.message:
        return error.message
    return fallback


def validate_required(data: dict[str, Any]) -> None:
    """Raise :class:`ValidationError` if a required field is missing or blank."""
    missing = [f for f in REQUIRED_FIELDS if not str(data.get(f) or "").strip()]
    if missing:
        raise ValidationError(missing)


class InventoryStore:
    """Filtered, paginated view of the remote component collection.

    Only the most recently issued :meth:`fetch_page` may change the snapshot.
    Every call takes the next value of a request counter; a response whose
    number is no longer the latest is dropped when it arrives, so an older
    request resolving late can never overwrite newer intent. The request
    itself is not cancelled.
    """

    def __init__(
        self,
        service: ComponentServicePort,
        notifier: Notifier | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._service = service
        self._notifier = notifier or LogNotifier()

        self.components: list[Component] = []
        self.current_component: Component | None = None
        self.filters = FilterCriteria()
        self.pagination = Pagination(limit=page_size)
        self.is_loading = False
        self.error: str | None = None

        self.categories: list[str] = []
        self.locations: list[str] = []
        self.low_stock_components: list[Component] = []
        self.stats: ComponentStats | None = None

        self._page_seq = 0
        self._current_seq = 0
        # Criteria and page size that produced the current totals.
        self._settled: tuple[FilterCriteria, int] | None = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _fail(self, error: Exception, fallback: str) -> str:
        message = error_message(error, fallback)
        self.error = message
        self.is_loading = False
        self._notifier.error(message)
        return message

    def _succeed(self) -> None:
        self.is_loading = False
        self.error = None

    def _replace(self, component: Component) -> None:
        self.components = [
            component if c.id == component.id else c for c in self.components
        ]
        if self.current_component and self.current_component.id == component.id:
            self.current_component = component

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def fetch_page(
        self,
        criteria: FilterCriteria | None = None,
        pagination: Pagination | None = None,
    ) -> OperationResult:
        """Fetch one page matching ``criteria``.

        Both arguments default to the store's own filters and pagination.

        Raises:
            ValueError: ``page < 1`` or ``limit < 1``.
            PageOutOfRange: ``page`` is beyond the known ``total_pages`` for
                the same criteria and page size.
        """
        criteria = criteria if criteria is not None else self.filters
        pagination = pagination if pagination is not None else self.pagination
        page, limit = pagination.page, pagination.limit

        if page < 1 or limit < 1:
            raise ValueError(f"Invalid pagination: page={page}, limit={limit}")
        if self._settled == (criteria, limit) and page > self.pagination.total_pages:
            raise PageOutOfRange(page, self.pagination.total_pages)

        self._page_seq += 1
        seq = self._page_seq
        self.is_loading = True

        params = {**criteria.to_query(), "page": page, "limit": limit}
        try:
            result = await self._service.list_components(params)
        except InventoryError as e:
            if seq != self._page_seq:
                logger.debug(f"Dropping failure of superseded request #{seq}: {e}")
                return OperationResult(success=False, superseded=True)
            message = self._fail(e, "Failed to fetch components")
            return OperationResult(success=False, error=message)

        if seq != self._page_seq:
            logger.debug(f"Dropping result of superseded request #{seq}")
            return OperationResult(success=False, superseded=True)

        self.components = result.components
        self.filters = criteria
        self.pagination = result.pagination(limit)
        self._settled = (criteria, self.pagination.limit)
        self._succeed()
        logger.debug(
            f"Loaded {len(self.components)} components "
            f"(page {self.pagination.page}/{self.pagination.total_pages}, "
            f"total {self.pagination.total})"
        )
        return OperationResult(success=True, data=result.components)

    async def refresh(self) -> OperationResult:
        """Re-fetch the current page with the current criteria."""
        return await self.fetch_page()

    async def fetch_one(self, component_id: str | None) -> Component | None:
        """Load a single component as :attr:`current_component`.

        The previous value is cleared before the request so it can never show
        through for a different id. A falsy id only clears.
        """
        self.current_component = None
        if not component_id:
            return None

        self._current_seq += 1
        seq = self._current_seq
        self.is_loading = True
        try:
            component = await self._service.get(component_id)
        except InventoryError as e:
            if seq == self._current_seq:
                self._fail(e, "Failed to fetch component")
            return None

        if seq != self._current_seq:
            return None
        self.current_component = component
        self._succeed()
        return component

    def clear_current_component(self) -> None:
        """Forget the current component, e.g. when leaving an edit screen."""
        self._current_seq += 1
        self.current_component = None
        self.error = None
        self.is_loading = False

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create(self, data: dict[str, Any]) -> OperationResult:
        """Create a component and prepend it to the list.

        Raises:
            ValidationError: ``name`` or ``category`` is missing; no request
                is sent.
        """
        validate_required(data)
        self.is_loading = True
        try:
            component = await self._service.create(data)
        except InventoryError as e:
            return OperationResult(
                success=False, error=self._fail(e, "Failed to create component")
            )

        self.components = [component, *self.components]
        self._succeed()
        self._notifier.success("Component created successfully!")
        return OperationResult(success=True, data=component)

    async def update(self, component_id: str, data: dict[str, Any]) -> OperationResult:
        """Full-record update; the item is replaced in place by id."""
        self.is_loading = True
        try:
            component = await self._service.update(component_id, data)
        except InventoryError as e:
            return OperationResult(
                success=False, error=self._fail(e, "Failed to update component")
            )

        self._replace(component)
        self._succeed()
        self._notifier.success("Component updated successfully!")
        return OperationResult(success=True, data=component)

    async def update_quantity(
        self, component_id: str, quantity_data: QuantityUpdate | dict[str, Any]
    ) -> OperationResult:
        """Record a stock movement, then re-fetch the whole page.

        The re-fetch keeps low-stock classification and totals in line with
        the server after the movement.

        Raises:
            ValidationError: ``quantity_data`` is not a valid movement.
        """
        if not isinstance(quantity_data, QuantityUpdate):
            try:
                quantity_data = QuantityUpdate.model_validate(quantity_data)
            except PydanticValidationError as e:
                fields = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
                raise ValidationError(fields) from e

        self.is_loading = True
        try:
            result = await self._service.update_quantity(component_id, quantity_data)
        except InventoryError as e:
            return OperationResult(
                success=False, error=self._fail(e, "Failed to update quantity")
            )

        self._replace(result.component)
        self._succeed()
        self._notifier.success(result.msg or f"Stock {quantity_data.type} successful")
        try:
            await self.fetch_page()
        except PageOutOfRange:
            # The movement is already committed; reload the last page instead.
            self.pagination = self.pagination.model_copy(
                update={"page": self.pagination.clamp(self.pagination.page)}
            )
            await self.fetch_page()
        return OperationResult(success=True, data=result)

    async def delete(self, component_id: str) -> OperationResult:
        """Delete a component and drop it from the list."""
        self.is_loading = True
        try:
            await self._service.delete(component_id)
        except InventoryError as e:
            return OperationResult(
                success=False, error=self._fail(e, "Failed to delete component")
            )

        self.components = [c for c in self.components if c.id != component_id]
        if self.current_component and self.current_component.id == component_id:
            self.current_component = None
        self._succeed()
        self._notifier.success("Component deleted successfully!")
        return OperationResult(success=True)

    # ------------------------------------------------------------------
    # Criteria
    # ------------------------------------------------------------------

    def set_filters(self, partial: dict[str, Any]) -> None:
        """Shallow-merge ``partial`` into the filters; browsing restarts at page 1."""
        self.filters = self.filters.merge(partial)
        self.pagination = self.pagination.model_copy(update={"page": 1})

    def reset_filters(self) -> None:
        self.filters = FilterCriteria()
        self.pagination = self.pagination.model_copy(update={"page": 1})

    def set_pagination(self, partial: dict[str, Any]) -> None:
        """Shallow-merge ``partial`` into pagination. No range check here."""
        self.pagination = Pagination.model_validate(
            {**self.pagination.model_dump(), **partial}
        )

    def clear_error(self) -> None:
        self.error = None

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def fetch_categories(self) -> list[str]:
        try:
            self.categories = await self._service.categories()
        except InventoryError as e:
            logger.error(f"Failed to fetch categories: {e}")
        return self.categories

    async def fetch_locations(self) -> list[str]:
        try:
            self.locations = await self._service.locations()
        except InventoryError as e:
            logger.error(f"Failed to fetch locations: {e}")
        return self.locations

    async def fetch_low_stock(self) -> list[Component]:
        try:
            self.low_stock_components = await self._service.low_stock()
        except InventoryError as e:
            logger.error(f"Failed to fetch low stock components: {e}")
        return self.low_stock_components

    async def fetch_stats(self) -> ComponentStats | None:
        try:
            self.stats = await self._service.stats()
        except InventoryError as e:
            logger.error(f"Failed to fetch stats: {e}")
        return self.stats
