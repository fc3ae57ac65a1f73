"""Decision store port: durable storage for the replenishment worklist.

The worklist code programs against this interface; adapters are swapped
via configuration.
"""

from abc import ABC, abstractmethod

from stockroom.replenishment.request import OrderRequest


class DecisionStorePort(ABC):
    """Abstract interface for decision store adapters."""

    @abstractmethod
    def load(self) -> list[OrderRequest]:
        """Return persisted requests in stored order.

        Unreadable state is discarded (and logged), never raised.
        """
        ...

    @abstractmethod
    def save(self, requests: list[OrderRequest]) -> None:
        """Replace the persisted worklist with `requests`."""
        ...
