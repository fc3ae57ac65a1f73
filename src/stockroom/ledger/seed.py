"""Demo catalogue, used to seed a fresh store and as the degraded-mode fallback."""

import structlog
from protean.core.unit_of_work import UnitOfWork
from protean.utils.globals import current_domain

from stockroom.ledger.sku import SKU

logger = structlog.get_logger(__name__)

SEED_ITEMS = (
    {"name": "Iced Americano", "price": 1500, "external_code": "880001", "category": "Coffee", "stock": 100},
    {"name": "Hot Americano", "price": 1200, "external_code": "880002", "category": "Coffee", "stock": 100},
    {"name": "Bottled Water 500ml", "price": 900, "external_code": "880003", "category": "Beverage", "stock": 50},
    {"name": "Plastic Bag", "price": 20, "external_code": "880004", "category": "Uncategorized", "stock": 1000},
    {"name": "Cup Noodles", "price": 1100, "external_code": "880005", "category": "Food", "stock": 30},
)


def demo_catalogue() -> list[SKU]:
    """Unsaved SKU instances built from the seed items."""
    return [SKU.create(**item) for item in SEED_ITEMS]


def seed_catalogue() -> list[SKU]:
    """Replace every SKU with the demo catalogue."""
    skus = demo_catalogue()
    with UnitOfWork():
        repo = current_domain.repository_for(SKU)
        removed = repo.remove_all()
        for sku in skus:
            repo.add(sku)

    logger.info("catalogue_seeded", count=len(skus), replaced=removed)
    return skus
