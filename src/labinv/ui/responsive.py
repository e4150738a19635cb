"""Responsive table helpers for narrow viewports.

Two concerns live here:

* Labelling: every body cell is tagged with the text of its column header so a
  layout can render each row as a stacked "card" of label/value pairs.
  :func:`label_rows` is the pure core; :class:`ResponsiveTableAnnotator`
  writes its result onto an :mod:`xml.etree.ElementTree` table as
  ``data-label`` attributes.
* Scroll feedback: a thin indicator bar whose horizontal scale follows the
  container's scroll position, refreshed on throttled scroll and resize events.

Example usage:
    viewport = Viewport(width=1024)
    annotator = ResponsiveTableAnnotator(viewport)
    container = ScrollContainer(div, scroll_width=1000, client_width=500)
    annotator.make_responsive(container)
    ...
    annotator.close()
"""

import time
import uuid
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import BaseModel, Field

from labinv import logger

CARD_MODE_MAX_WIDTH = 480  # px
SCROLL_THROTTLE_MS = 50
RESIZE_THROTTLE_MS = 100

RESPONSIVE_CLASS = "responsive-table"
CARD_CLASS = "responsive-card-table"
INDICATOR_CLASS = "table-scroll-indicator"
LABEL_ATTR = "data-label"

INDICATOR_VISIBLE_OPACITY = 0.7


# ---------------------------------------------------------------------------
# Pure labelling
# ---------------------------------------------------------------------------


class LabeledCell(BaseModel):
    value: str = Field(..., description="Cell text.")
    label: str | None = Field(None, description="Header of the cell's column.")


class LabeledTable(BaseModel):
    headers: list[str] = Field(default_factory=list)
    rows: list[list[LabeledCell]] = Field(default_factory=list)


def label_rows(headers: list[str], rows: list[list[str]]) -> LabeledTable:
    """Pair every body cell with the header at the same column index.

    Cells past the last header, or under an empty header, stay unlabelled.
    Ragged or header-less tables are accepted as they are.
    """
    labels = [h.strip() for h in headers]
    labeled = []
    for row in rows:
        cells = []
        for index, value in enumerate(row):
            label = labels[index] if index < len(labels) else None
            cells.append(LabeledCell(value=value, label=label or None))
        labeled.append(cells)
    return LabeledTable(headers=labels, rows=labeled)


# ---------------------------------------------------------------------------
# Throttling
# ---------------------------------------------------------------------------


class Throttle:
    """Leading-edge throttle: at most one call per ``interval_ms``.

    Calls arriving inside the interval are dropped, not deferred.
    """

    def __init__(
        self,
        func: Callable[..., Any],
        interval_ms: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.func = func
        self.interval = interval_ms / 1000
        self._clock = clock
        self._last: float | None = None

    def __call__(self, *args: Any, **kwargs: Any) -> bool:
        """Invoke the wrapped function unless throttled; return whether it ran."""
        now = self._clock()
        if self._last is not None and now - self._last < self.interval:
            return False
        self._last = now
        self.func(*args, **kwargs)
        return True


# ---------------------------------------------------------------------------
# Event sources
# ---------------------------------------------------------------------------


class EventTarget:
    """Minimal listener registry in the style of a DOM event target."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Callable[[], Any]]] = {}

    def add_listener(self, event: str, handler: Callable[[], Any]) -> None:
        self._listeners.setdefault(event, []).append(handler)

    def remove_listener(self, event: str, handler: Callable[[], Any]) -> None:
        handlers = self._listeners.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, []))

    def dispatch(self, event: str) -> None:
        for handler in list(self._listeners.get(event, [])):
            handler()


class Viewport(EventTarget):
    """The window a table is displayed in."""

    def __init__(self, width: int) -> None:
        super().__init__()
        self.width = width

    def resize(self, width: int) -> None:
        self.width = width
        self.dispatch("resize")


class ScrollContainer(EventTarget):
    """A horizontally scrollable element wrapping a table.

    Scroll metrics are supplied by whoever lays the element out; this class
    only stores them and emits ``scroll`` when :meth:`scroll_to` moves.
    """

    def __init__(
        self,
        element: ET.Element,
        scroll_width: float = 0,
        client_width: float = 0,
        scroll_left: float = 0,
    ) -> None:
        super().__init__()
        self.element = element
        self.scroll_width = scroll_width
        self.client_width = client_width
        self.scroll_left = scroll_left

    @property
    def table(self) -> ET.Element | None:
        return self.element.find(".//table")

    def scroll_to(self, left: float) -> None:
        self.scroll_left = left
        self.dispatch("scroll")


# ---------------------------------------------------------------------------
# Element helpers
# ---------------------------------------------------------------------------


def _classes(element: ET.Element) -> list[str]:
    return (element.get("class") or "").split()


def has_class(element: ET.Element, name: str) -> bool:
    return name in _classes(element)


def add_class(element: ET.Element, name: str) -> None:
    classes = _classes(element)
    if name not in classes:
        element.set("class", " ".join([*classes, name]))


def remove_class(element: ET.Element, name: str) -> None:
    classes = _classes(element)
    if name in classes:
        classes.remove(name)
        element.set("class", " ".join(classes))


def _text(element: ET.Element) -> str:
    return "".join(element.itertext()).strip()


def header_cells(table: ET.Element) -> list[ET.Element]:
    """Cells of the first header row (``thead`` first, else the first ``th`` row)."""
    row = table.find("./thead/tr")
    if row is None:
        row = next((tr for tr in table.iter("tr") if tr.find("th") is not None), None)
    if row is None:
        return []
    return [cell for cell in row if cell.tag in ("th", "td")]


def body_rows(table: ET.Element) -> list[ET.Element]:
    rows = table.findall("./tbody/tr")
    if not rows:
        rows = [tr for tr in table.findall("./tr") if tr.find("td") is not None]
    return rows


def generate_table_id() -> str:
    return f"resp-table-{uuid.uuid4().hex[:9]}"


# ---------------------------------------------------------------------------
# Scroll indicator
# ---------------------------------------------------------------------------


@dataclass
class ScrollIndicator:
    """Visual state of a container's scroll bar."""

    element: ET.Element
    opacity: float = 0.0
    scale: float = 1.0

    def update(self, scroll_width: float, client_width: float, scroll_left: float) -> None:
        """Scale by the remaining scroll distance; hide when nothing overflows."""
        if scroll_width > client_width:
            self.opacity = INDICATOR_VISIBLE_OPACITY
            ratio = scroll_left / (scroll_width - client_width)
            self.scale = max(0.0, min(1.0, 1 - ratio))
        else:
            self.opacity = 0.0
        self.element.set(
            "style", f"opacity: {self.opacity}; transform: scaleX({self.scale})"
        )


@dataclass
class _Attachment:
    container: ScrollContainer
    indicator: ScrollIndicator
    on_scroll: Throttle
    on_resize: Throttle


# ---------------------------------------------------------------------------
# Annotator
# ---------------------------------------------------------------------------


class ResponsiveTableAnnotator:
    """Per-screen responsive table state.

    Structural work (labels, ids, indicator creation) happens once per table
    or container. Card mode is re-evaluated on every throttled resize.
    Call :meth:`close` when the screen goes away.
    """

    def __init__(
        self,
        viewport: Viewport,
        card_width: int = CARD_MODE_MAX_WIDTH,
        scroll_interval_ms: float = SCROLL_THROTTLE_MS,
        resize_interval_ms: float = RESIZE_THROTTLE_MS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.viewport = viewport
        self.card_width = card_width
        self.scroll_interval_ms = scroll_interval_ms
        self.resize_interval_ms = resize_interval_ms
        self._clock = clock
        # Append-only for the life of the annotator.
        self.processed: set[str] = set()
        self._attached: dict[int, _Attachment] = {}

    def is_card_mode(self) -> bool:
        return self.viewport.width <= self.card_width

    def apply_card_mode(self, table: ET.Element) -> None:
        if self.is_card_mode():
            add_class(table, CARD_CLASS)
        else:
            remove_class(table, CARD_CLASS)

    def annotate(self, table: ET.Element) -> bool:
        """Label the body cells of ``table`` from its header row.

        Returns ``False`` without touching the table if it was annotated
        before.
        """
        table_id = table.get("id")
        if not table_id:
            table_id = generate_table_id()
            table.set("id", table_id)
        if table_id in self.processed:
            return False
        self.processed.add(table_id)

        add_class(table, RESPONSIVE_CLASS)
        self.apply_card_mode(table)

        headers = [_text(th) for th in header_cells(table)]
        rows = body_rows(table)
        cells = [[c for c in row if c.tag == "td"] for row in rows]
        labeled = label_rows(headers, [[_text(c) for c in row] for row in cells])
        for row_cells, labeled_row in zip(cells, labeled.rows):
            for cell, labeled_cell in zip(row_cells, labeled_row):
                if labeled_cell.label:
                    cell.set(LABEL_ATTR, labeled_cell.label)

        logger.debug(f"Annotated table {table_id}: {len(headers)} columns, {len(rows)} rows")
        return True

    def attach_scroll_indicator(self, container: ScrollContainer) -> ScrollIndicator:
        """Create the container's indicator and start tracking scroll/resize.

        Repeated calls return the existing indicator.
        """
        existing = self._attached.get(id(container))
        if existing is not None:
            return existing.indicator

        element = next(
            (el for el in container.element if has_class(el, INDICATOR_CLASS)), None
        )
        if element is None:
            element = ET.SubElement(container.element, "div", {"class": INDICATOR_CLASS})
        indicator = ScrollIndicator(element)

        def update() -> None:
            if container.table is None:
                return
            indicator.update(
                container.scroll_width, container.client_width, container.scroll_left
            )

        def on_resize() -> None:
            table = container.table
            if table is None:
                return
            self.apply_card_mode(table)
            update()

        attachment = _Attachment(
            container=container,
            indicator=indicator,
            on_scroll=Throttle(update, self.scroll_interval_ms, self._clock),
            on_resize=Throttle(on_resize, self.resize_interval_ms, self._clock),
        )
        container.add_listener("scroll", attachment.on_scroll)
        self.viewport.add_listener("resize", attachment.on_resize)
        self._attached[id(container)] = attachment

        update()
        return indicator

    def make_responsive(self, container: ScrollContainer) -> None:
        """Annotate the container's table and attach its indicator."""
        table = container.table
        if table is None:
            return
        self.annotate(table)
        self.attach_scroll_indicator(container)

    def teardown(self, container: ScrollContainer) -> None:
        """Remove the listeners registered for ``container``, if any."""
        attachment = self._attached.pop(id(container), None)
        if attachment is None:
            return
        container.remove_listener("scroll", attachment.on_scroll)
        self.viewport.remove_listener("resize", attachment.on_resize)

    def close(self) -> None:
        """Tear down every container this annotator attached to."""
        for attachment in list(self._attached.values()):
            self.teardown(attachment.container)
