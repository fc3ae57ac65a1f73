"""Checkout transaction engine: handler and order queries.

A checkout is all-or-nothing: either every aggregated SKU is decremented by
exactly its requested quantity and one Order is written, or nothing changes.

Lines are resolved first, then the affected SKUs are locked (in-process,
sorted) and re-read inside one unit of work. Every requirement is checked
before the first write, and each write is itself a conditional decrement,
so stock read during resolution is never trusted at commit.
"""

import structlog
from protean import handle
from protean.core.unit_of_work import UnitOfWork
from protean.utils.globals import current_domain

from stockroom.checkout.cart import CartLine, Checkout, PaymentMethod, parse_cart
from stockroom.checkout.order import Order
from stockroom.domain import guard_ledger, stockroom
from stockroom.exceptions import EmptyCart, InsufficientStock, NotFoundError, SkuNotFound, ValidationError
from stockroom.ledger.locks import sku_locks
from stockroom.ledger.repository import LISTING_LIMIT
from stockroom.ledger.sku import SKU

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------
def _validate(lines: list[CartLine], payment_method: str) -> None:
    if not lines:
        raise EmptyCart()

    errors = {}
    for index, line in enumerate(lines):
        if line.quantity <= 0:
            errors[f"items.{index}.quantity"] = ["Quantity must be positive"]
        if line.unit_price is not None and line.unit_price < 0:
            errors[f"items.{index}.unit_price"] = ["Unit price cannot be negative"]
        if not (line.sku_ref or line.external_code):
            errors[f"items.{index}"] = ["Item must carry an id or an external code"]

    methods = [method.value for method in PaymentMethod]
    if payment_method not in methods:
        errors["payment_method"] = [f"Payment method must be one of: {', '.join(methods)}"]

    if errors:
        raise ValidationError(errors)


def _resolve(lines: list[CartLine]) -> list[dict]:
    """Resolve every line to a SKU, snapshotting name and price."""
    repo = current_domain.repository_for(SKU)
    resolved = []
    for line in lines:
        sku = repo.resolve(line.sku_ref, line.external_code)
        if sku is None:
            raise SkuNotFound(line.sku_ref or line.external_code, name=line.name)
        resolved.append(
            {
                "sku_id": sku.id,
                "external_code": line.external_code or sku.external_code,
                "name": line.name or sku.name,
                "unit_price": sku.price if line.unit_price is None else line.unit_price,
                "quantity": line.quantity,
            }
        )
    return resolved


def aggregate_demand(resolved: list[dict]) -> dict[str, int]:
    """Sum requested quantities per SKU, keeping first-seen order."""
    demand: dict[str, int] = {}
    for line in resolved:
        demand[line["sku_id"]] = demand.get(line["sku_id"], 0) + line["quantity"]
    return demand


# ---------------------------------------------------------------------------
# Handler
# ---------------------------------------------------------------------------
@stockroom.command_handler(part_of=Order)
class CheckoutHandler:
    @handle(Checkout)
    def checkout(self, command):
        lines = parse_cart(command.items)
        _validate(lines, command.payment_method)

        with guard_ledger():
            resolved = _resolve(lines)
        demand = aggregate_demand(resolved)

        with sku_locks.hold(demand.keys()), guard_ledger(), UnitOfWork():
            repo = current_domain.repository_for(SKU)
            rows = {sku_id: repo.find(sku_id) for sku_id in demand}

            for sku_id, requested in demand.items():
                sku = rows[sku_id]
                if sku is None:
                    raise SkuNotFound(sku_id)
                if not sku.can_fulfil(requested):
                    logger.warning("checkout_rejected", sku_id=sku.id, available=sku.stock, requested=requested)
                    raise InsufficientStock(sku.id, available=sku.stock, requested=requested, name=sku.name)

            for sku_id, requested in demand.items():
                repo.decrement_if_available(rows[sku_id], requested)

            order = Order.place(resolved, payment_method=command.payment_method)
            current_domain.repository_for(Order).add(order)

        if command.total_amount is not None and command.total_amount != order.total_amount:
            logger.warning(
                "checkout_total_mismatch",
                order_number=order.order_number,
                client_total=command.total_amount,
                total_amount=order.total_amount,
            )

        logger.info(
            "checkout_completed",
            order_number=order.order_number,
            total_amount=order.total_amount,
            payment_method=order.payment_method,
            lines=len(resolved),
            skus=len(demand),
        )
        return order


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
def get_order(order_number: str) -> Order:
    order = current_domain.repository_for(Order)._dao.query.filter(order_number=order_number).all().first
    if order is None:
        raise NotFoundError(f"Order not found: {order_number}", details={"order_number": order_number})
    return order


def list_orders() -> list[Order]:
    """Orders, newest first."""
    return current_domain.repository_for(Order)._dao.query.order_by("-created_at").limit(LISTING_LIMIT).all().items
