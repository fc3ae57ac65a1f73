"""Stockroom bounded context: the SKU ledger, kiosk checkout and receiving.

The domain is initialised once per process by `initialize()`, which points
its default database at DATABASE_URL and registers the aggregates,
commands and handlers declared in the element modules.
"""

import importlib
from contextlib import contextmanager
from typing import Iterator

import structlog
from protean.domain import Domain
from sqlalchemy.exc import OperationalError

from stockroom.config import Config
from stockroom.exceptions import UpstreamUnavailable

stockroom = Domain(name="stockroom")

logger = structlog.get_logger(__name__)

_ELEMENT_MODULES = (
    "stockroom.ledger.sku",
    "stockroom.ledger.repository",
    "stockroom.ledger.adjustment",
    "stockroom.checkout.order",
    "stockroom.checkout.engine",
    "stockroom.receiving.event",
    "stockroom.receiving.reconciler",
)

_settings: Config | None = None
_initialized = False


def settings() -> Config:
    global _settings
    if _settings is None:
        _settings = Config.from_env()
    return _settings


def initialize(config: Config | None = None) -> Domain:
    """Configure and initialise the domain; later calls return it unchanged."""
    global _settings, _initialized
    if _initialized:
        return stockroom

    _settings = config or Config.from_env()
    stockroom.config["databases"]["default"] = _settings.database

    for module in _ELEMENT_MODULES:
        importlib.import_module(module)
    stockroom.init(traverse=False)
    _initialized = True

    logger.debug("stockroom_initialized", env=_settings.env, provider=_settings.database["provider"])
    return stockroom


@contextmanager
def guard_ledger() -> Iterator[None]:
    """Surface an unreachable ledger database as UpstreamUnavailable."""
    try:
        yield
    except OperationalError as exc:
        logger.error("ledger_unavailable", error=str(exc.orig))
        raise UpstreamUnavailable("Stock ledger is unavailable", details={"reason": str(exc.orig)}) from exc
