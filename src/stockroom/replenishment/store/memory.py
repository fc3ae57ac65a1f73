"""In-memory decision store for tests and throwaway sessions."""

from stockroom.replenishment.request import OrderRequest
from stockroom.replenishment.store.port import DecisionStorePort


class InMemoryDecisionStore(DecisionStorePort):
    def __init__(self, requests: list[OrderRequest] | None = None):
        self._requests = [request.model_copy() for request in requests or []]

    def load(self) -> list[OrderRequest]:
        return [request.model_copy() for request in self._requests]

    def save(self, requests: list[OrderRequest]) -> None:
        self._requests = [request.model_copy() for request in requests]

    def clear(self) -> None:
        self._requests = []
