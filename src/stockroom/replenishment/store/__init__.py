"""Decision store abstraction: pluggable persistence for operator decisions."""

from stockroom.domain import settings

_store_instance = None


def get_decision_store():
    """Return the configured decision store (singleton).

    Selected by STOCKROOM_DECISION_STORE: `json` writes to
    STOCKROOM_WORKLIST_PATH, `memory` keeps state for the process only.
    """
    global _store_instance
    if _store_instance is None:
        config = settings()
        adapter = config.decision_store
        if adapter == "json":
            from stockroom.replenishment.store.json_file import JsonFileDecisionStore

            _store_instance = JsonFileDecisionStore(config.worklist_path)
        elif adapter == "memory":
            from stockroom.replenishment.store.memory import InMemoryDecisionStore

            _store_instance = InMemoryDecisionStore()
        else:
            raise ValueError(f"Unknown decision store adapter: {adapter}")
    return _store_instance


def reset_decision_store():
    """Reset the decision store singleton (useful for testing)."""
    global _store_instance
    _store_instance = None
