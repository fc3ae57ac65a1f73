"""Manual stock adjustment: command and handler."""

import structlog
from protean import handle
from protean.core.unit_of_work import UnitOfWork
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from stockroom.domain import guard_ledger, stockroom
from stockroom.exceptions import InsufficientStock, SkuNotFound, ValidationError
from stockroom.ledger.locks import sku_locks
from stockroom.ledger.sku import SKU

logger = structlog.get_logger(__name__)


@stockroom.command(part_of="SKU")
class AdjustStock:
    sku_id = Identifier(required=True)
    quantity = Integer(required=True)  # Signed change
    reason = String(max_length=100, default="manual")
    adjusted_by = String(max_length=100)


@stockroom.command_handler(part_of=SKU)
class AdjustStockHandler:
    @handle(AdjustStock)
    def adjust_stock(self, command):
        if command.quantity == 0:
            raise ValidationError({"quantity": ["Quantity change cannot be zero"]})

        with sku_locks.hold([command.sku_id]), guard_ledger(), UnitOfWork():
            repo = current_domain.repository_for(SKU)
            sku = repo.find(command.sku_id)
            if sku is None:
                raise SkuNotFound(command.sku_id)
            if command.quantity < 0 and not sku.can_fulfil(-command.quantity):
                raise InsufficientStock(sku.id, available=sku.stock, requested=-command.quantity, name=sku.name)

            previous = sku.stock
            sku = repo.adjust_stock(sku, command.quantity)

        logger.info(
            "stock_adjusted",
            sku_id=sku.id,
            previous_stock=previous,
            new_stock=sku.stock,
            quantity=command.quantity,
            reason=command.reason,
            adjusted_by=command.adjusted_by,
        )
        return sku
