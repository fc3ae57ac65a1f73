"""JSON-file decision store.

The file holds a list of serialised OrderRequests. Saves write a sibling
temporary file and atomically replace the target, so a crash never leaves
a half-written worklist behind. A corrupt file, or a corrupt entry inside
it, is dropped with a warning.
"""

import json
import os
from pathlib import Path

import structlog
from pydantic import ValidationError as PydanticValidationError

from stockroom.replenishment.request import OrderRequest
from stockroom.replenishment.store.port import DecisionStorePort

logger = structlog.get_logger(__name__)


class JsonFileDecisionStore(DecisionStorePort):
    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> list[OrderRequest]:
        if not self.path.exists():
            return []

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("worklist_state_discarded", path=str(self.path), reason=str(exc))
            return []

        if not isinstance(raw, list):
            logger.warning("worklist_state_discarded", path=str(self.path), reason="expected a list")
            return []

        requests = []
        seen = set()
        for entry in raw:
            try:
                request = OrderRequest.model_validate(entry)
            except PydanticValidationError as exc:
                logger.warning("worklist_entry_discarded", path=str(self.path), errors=exc.error_count())
                continue
            if request.id in seen:
                continue
            seen.add(request.id)
            requests.append(request)
        return requests

    def save(self, requests: list[OrderRequest]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [request.model_dump(mode="json") for request in requests]

        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        tmp_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp_path, self.path)
