"""Order aggregate: the immutable receipt of one completed checkout."""

from datetime import UTC, datetime
from uuid import uuid4

from protean.fields import DateTime, HasMany, Identifier, Integer, String

from stockroom.checkout.cart import PaymentMethod
from stockroom.domain import stockroom
from stockroom.shared.dates import utcnow


def generate_order_number(now: datetime | None = None) -> str:
    """`ORD-<utc timestamp>-<random suffix>`; unique even within one millisecond."""
    now = now or datetime.now(UTC)
    return f"ORD-{now.strftime('%Y%m%d%H%M%S%f')}-{uuid4().hex[:8].upper()}"


@stockroom.entity(part_of="Order")
class OrderLine:
    position = Integer(required=True, min_value=0)
    sku_id = Identifier()
    external_code = String(max_length=100)
    name = String(required=True, max_length=200)
    unit_price = Integer(required=True, min_value=0)
    quantity = Integer(required=True, min_value=1)
    line_total = Integer(required=True, min_value=0)


@stockroom.aggregate
class Order:
    order_number = String(required=True, max_length=64, unique=True)
    total_amount = Integer(required=True, min_value=0)
    payment_method = String(required=True, max_length=20, choices=PaymentMethod)
    created_at = DateTime(default=utcnow)
    lines = HasMany(OrderLine)

    @classmethod
    def place(cls, lines: list[dict], payment_method: str) -> "Order":
        """Build an order from priced lines; the total is always derived from them."""
        order_lines = [
            OrderLine(
                position=position,
                sku_id=line["sku_id"],
                external_code=line.get("external_code"),
                name=line["name"],
                unit_price=line["unit_price"],
                quantity=line["quantity"],
                line_total=line["unit_price"] * line["quantity"],
            )
            for position, line in enumerate(lines)
        ]
        return cls(
            order_number=generate_order_number(),
            total_amount=sum(line.line_total for line in order_lines),
            payment_method=payment_method,
            created_at=utcnow(),
            lines=order_lines,
        )

    @property
    def ordered_lines(self) -> list[OrderLine]:
        """Lines in the order the kiosk submitted them."""
        return sorted(self.lines, key=lambda line: line.position)
