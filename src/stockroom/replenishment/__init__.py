"""Replenishment worklist: shared service instance."""

_worklist_instance = None


def get_worklist():
    """Return the process-wide worklist (singleton) over the configured decision store."""
    global _worklist_instance
    if _worklist_instance is None:
        from stockroom.replenishment.store import get_decision_store
        from stockroom.replenishment.worklist import ReplenishmentWorklist

        _worklist_instance = ReplenishmentWorklist(get_decision_store())
    return _worklist_instance


def reset_worklist():
    """Reset the worklist singleton (useful for testing)."""
    global _worklist_instance
    _worklist_instance = None
