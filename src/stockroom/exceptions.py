"""Error taxonomy for stock operations.

Every error carries the detail a caller needs to explain and correct the
condition: the offending field, item reference, or available vs. requested
quantity. The families extend protean's exceptions, so errors raised by
protean itself (field validation, missing aggregates) and by the ledger
are handled alike; the HTTP layer maps each family to a status code.
"""

from protean import exceptions as protean_exceptions


class StockroomError(Exception):
    """Mixin carrying a message, a stable error code and structured details."""

    code = "error"

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        return self.message

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message, "details": self.details}


# ---------------------------------------------------------------------------
# Validation (caller fixes input and retries)
# ---------------------------------------------------------------------------
class ValidationError(StockroomError, protean_exceptions.ValidationError):
    """Malformed or missing input.

    `messages` maps field names to lists of human-readable problems, e.g.
    ``{"quantity": ["Quantity must be positive"]}``.
    """

    code = "validation_error"

    def __init__(self, messages: dict[str, list[str]]):
        summary = "; ".join(f"{key}: {', '.join(errors)}" for key, errors in messages.items())
        super().__init__(summary or "Invalid input", details={"messages": messages})
        self.messages = messages

    @classmethod
    def from_protean(cls, exc: protean_exceptions.ValidationError) -> "ValidationError":
        messages = exc.messages if isinstance(exc.messages, dict) else {"_entity": [str(exc.messages)]}
        return cls({key: [str(error) for error in errors] for key, errors in messages.items()})


class MissingField(ValidationError):
    def __init__(self, field: str):
        self.field = field
        super().__init__({field: [f"{field} is required"]})


class EmptyCart(ValidationError):
    def __init__(self):
        super().__init__({"items": ["Cart must contain at least one item"]})


# ---------------------------------------------------------------------------
# Lookup (caller refreshes)
# ---------------------------------------------------------------------------
class NotFoundError(StockroomError, protean_exceptions.ObjectNotFoundError):
    code = "not_found"


class SkuNotFound(NotFoundError):
    """No SKU matches the given id or external code."""

    def __init__(self, reference: str | None, name: str | None = None):
        self.reference = reference
        self.name = name
        label = name or reference or "<unknown>"
        super().__init__(
            f"Item not found: {label}",
            details={"item": reference, "name": name},
        )


# ---------------------------------------------------------------------------
# Conflicts (caller re-fetches and reduces quantity)
# ---------------------------------------------------------------------------
class ConflictError(StockroomError, protean_exceptions.InvalidOperationError):
    code = "conflict"


class InsufficientStock(ConflictError):
    code = "insufficient_stock"

    def __init__(self, sku_id: str, available: int, requested: int, name: str | None = None):
        self.sku_id = sku_id
        self.name = name
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for {name or sku_id}: {available} available, {requested} requested",
            details={"sku_id": sku_id, "name": name, "available": available, "requested": requested},
        )


# ---------------------------------------------------------------------------
# Infrastructure / access
# ---------------------------------------------------------------------------
class UpstreamUnavailable(StockroomError):
    """The ledger could not be reached. Callers fall back with an explicit warning."""

    code = "upstream_unavailable"


class PermissionDenied(StockroomError):
    code = "permission_denied"
