"""OrderRequest: one replenishment candidate and the operator's decision on it."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field

SYSTEM_REQUESTER = "system"


class RequestStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class OrderRequest(BaseModel):
    """Keyed by SKU id: at most one request per SKU is live at a time."""

    id: str
    item: str
    quantity: int
    requested_by: str = SYSTEM_REQUESTER
    detected_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    status: RequestStatus = RequestStatus.PENDING
    approved_quantity: int | None = None
    approved_at: datetime | None = None
    decided_by: str | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING
