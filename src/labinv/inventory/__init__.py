"""Component inventory: backend client and client-side collection state."""

from labinv.inventory.config import (
    ClientConfig,
    create_default_config,
    get_config_dir,
    get_config_file,
    load_client_config,
)
from labinv.inventory.errors import (
    InventoryError,
    NetworkError,
    NotFound,
    PageOutOfRange,
    ServiceError,
    ValidationError,
)
from labinv.inventory.models import (
    Component,
    ComponentStats,
    FilterCriteria,
    OperationResult,
    Pagination,
    QuantityUpdate,
    StockStatus,
    stock_status,
)
from labinv.inventory.service import ComponentServicePort, HttpComponentService
from labinv.inventory.store import InventoryStore

__all__ = [
    # Config
    "ClientConfig",
    "create_default_config",
    "get_config_dir",
    "get_config_file",
    "load_client_config",
    # Errors
    "InventoryError",
    "NetworkError",
    "NotFound",
    "PageOutOfRange",
    "ServiceError",
    "ValidationError",
    # Models
    "Component",
    "ComponentStats",
    "FilterCriteria",
    "OperationResult",
    "Pagination",
    "QuantityUpdate",
    "StockStatus",
    "stock_status",
    # Service / store
    "ComponentServicePort",
    "HttpComponentService",
    "InventoryStore",
]
