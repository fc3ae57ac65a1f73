from stockroom.api.context import domain_context_middleware
from stockroom.api.errors import register_exception_handlers
from stockroom.api.routes import inventory_router, kiosk_router, receiving_router, replenishment_router

__all__ = [
    "domain_context_middleware",
    "inventory_router",
    "kiosk_router",
    "receiving_router",
    "replenishment_router",
    "register_exception_handlers",
]
