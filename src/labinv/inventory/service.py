"""Remote component service: port and httpx adapter.

The backend exposes the component collection under ``/components``::

    GET    /components               ?search=&category=&page=&limit=...
    GET    /components/:id
    POST   /components
    PUT    /components/:id
    PUT    /components/:id/quantity
    DELETE /components/:id
    GET    /components/categories | locations | low-stock | stats

Errors come back as ``{"msg": "..."}`` with a non-2xx status.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, TypeVar

import httpx
from pydantic import ValidationError as PydanticValidationError

from labinv import logger
from labinv.inventory.config import ClientConfig, load_client_config
from labinv.inventory.errors import NetworkError, NotFound, ServiceError
from labinv.inventory.models import (
    Component,
    ComponentPage,
    ComponentStats,
    QuantityUpdate,
    QuantityUpdateResult,
)

T = TypeVar("T")


class ComponentServicePort(ABC):
    """Everything the inventory store needs from the backend."""

    @abstractmethod
    async def list_components(self, params: dict[str, Any]) -> ComponentPage: ...

    @abstractmethod
    async def get(self, component_id: str) -> Component: ...

    @abstractmethod
    async def create(self, data: dict[str, Any]) -> Component: ...

    @abstractmethod
    async def update(self, component_id: str, data: dict[str, Any]) -> Component: ...

    @abstractmethod
    async def update_quantity(
        self, component_id: str, update: QuantityUpdate
    ) -> QuantityUpdateResult: ...

    @abstractmethod
    async def delete(self, component_id: str) -> None: ...

    @abstractmethod
    async def categories(self) -> list[str]: ...

    @abstractmethod
    async def locations(self) -> list[str]: ...

    @abstractmethod
    async def low_stock(self) -> list[Component]: ...

    @abstractmethod
    async def stats(self) -> ComponentStats: ...


def clean_params(params: dict[str, Any]) -> dict[str, Any]:
    """Drop ``None`` and empty-string query values."""
    return {k: v for k, v in params.items() if v is not None and v != ""}


def _error_message(resp: httpx.Response) -> str | None:
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        msg = body.get("msg") or body.get("message")
        if msg:
            return str(msg)
        errors = body.get("errors")
        if isinstance(errors, list) and errors:
            first = errors[0]
            if isinstance(first, dict) and first.get("msg"):
                return str(first["msg"])
    return None


def _parse(parser: Callable[[Any], T], data: Any) -> T:
    """Build a model from a response body, as a ServiceError if it does not fit."""
    try:
        return parser(data)
    except PydanticValidationError as e:
        logger.warning(f"Unexpected response body: {e}")
        raise ServiceError("Invalid response from server") from e


class HttpComponentService(ComponentServicePort):
    """Port adapter talking JSON to the inventory REST backend over httpx.

    A client may be injected (tests pass one built on ``httpx.MockTransport``);
    otherwise one is created from the config and closed by :meth:`aclose`.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config or load_client_config()
        self._client = client or httpx.AsyncClient(
            base_url=self._config.base_url.rstrip("/"),
            timeout=self._config.timeout,
            headers=self._headers(),
        )

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._config.api_token:
            headers["Authorization"] = f"Bearer {self._config.api_token}"
        return headers

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpComponentService":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send one request and translate failures into inventory errors."""
        logger.debug(f"{method} {path} {kwargs.get('params') or ''}")
        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.TransportError as e:
            logger.warning(f"{method} {path} failed without a response: {e}")
            raise NetworkError(str(e)) from e

        if resp.status_code == 404:
            raise NotFound(_error_message(resp))
        if resp.is_error:
            message = _error_message(resp)
            logger.warning(f"{method} {path} -> HTTP {resp.status_code}: {message}")
            raise ServiceError(message, status_code=resp.status_code)

        if not resp.content:
            return None
        return resp.json()

    async def list_components(self, params: dict[str, Any]) -> ComponentPage:
        data = await self._request("GET", "/components", params=clean_params(params))
        return _parse(ComponentPage.from_response, data or {})

    async def get(self, component_id: str) -> Component:
        data = await self._request("GET", f"/components/{component_id}")
        return _parse(Component.model_validate, data)

    async def create(self, data: dict[str, Any]) -> Component:
        created = await self._request("POST", "/components", json=data)
        return _parse(Component.model_validate, created)

    async def update(self, component_id: str, data: dict[str, Any]) -> Component:
        updated = await self._request("PUT", f"/components/{component_id}", json=data)
        return _parse(Component.model_validate, updated)

    async def update_quantity(
        self, component_id: str, update: QuantityUpdate
    ) -> QuantityUpdateResult:
        data = await self._request(
            "PUT",
            f"/components/{component_id}/quantity",
            json=update.model_dump(by_alias=True, exclude_none=True),
        )
        return _parse(QuantityUpdateResult.model_validate, data)

    async def delete(self, component_id: str) -> None:
        await self._request("DELETE", f"/components/{component_id}")

    async def categories(self) -> list[str]:
        data = await self._request("GET", "/components/categories")
        return [c for c in data or [] if c]

    async def locations(self) -> list[str]:
        data = await self._request("GET", "/components/locations")
        return [loc for loc in data or [] if loc]

    async def low_stock(self) -> list[Component]:
        data = await self._request("GET", "/components/low-stock")
        return [_parse(Component.model_validate, c) for c in data or []]

    async def stats(self) -> ComponentStats:
        data = await self._request("GET", "/components/stats")
        return _parse(ComponentStats.model_validate, data or {})
