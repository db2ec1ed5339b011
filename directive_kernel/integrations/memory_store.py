"""
In-memory collaborators for the prototype and for tests.

Production deployments plug in clients for the real entity service, mail
integration and UI router; these keep the same async interfaces.
"""

import copy
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import uuid4

from directive_kernel.integrations.protocols import ENTITY_KINDS

logger = logging.getLogger(__name__)


class RecordNotFoundError(Exception):
    """Raised when an update targets an unknown record."""
    pass


class InMemoryDataStore:
    """
    Dict-backed entity store.

    Records get an `id` of the form `<kind>_<12 hex>` and a `created_date`
    stamp. Sort strings follow the `field` / `-field` convention.
    """

    def __init__(self, seed: Optional[Dict[str, List[dict]]] = None):
        self._records: Dict[str, List[dict]] = {kind: [] for kind in ENTITY_KINDS}
        self.calls: List[tuple] = []
        for kind, records in (seed or {}).items():
            for record in records:
                self._insert(kind, dict(record))

    def _insert(self, kind: str, data: dict) -> dict:
        record = dict(data)
        record.setdefault("id", f"{kind.lower()}_{uuid4().hex[:12]}")
        record.setdefault("created_date", datetime.now().isoformat())
        self._records.setdefault(kind, []).append(record)
        return record

    @staticmethod
    def _sorted(records: List[dict], sort: Optional[str]) -> List[dict]:
        if not sort:
            return records
        descending = sort.startswith("-")
        field = sort.lstrip("-")
        indexed = list(enumerate(records))
        indexed.sort(
            key=lambda pair: (str(pair[1].get(field) or ""), pair[0]),
            reverse=descending,
        )
        return [record for _, record in indexed]

    async def list(
        self, kind: str, sort: Optional[str] = None, limit: Optional[int] = None
    ) -> List[dict]:
        self.calls.append(("list", kind))
        records = self._sorted(list(self._records.get(kind, [])), sort)
        return copy.deepcopy(records[:limit] if limit else records)

    async def filter(
        self,
        kind: str,
        query: Dict[str, Any],
        sort: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[dict]:
        self.calls.append(("filter", kind))
        matches = [
            r for r in self._records.get(kind, [])
            if all(r.get(k) == v for k, v in query.items())
        ]
        matches = self._sorted(matches, sort)
        return copy.deepcopy(matches[:limit] if limit else matches)

    async def create(self, kind: str, data: Dict[str, Any]) -> dict:
        self.calls.append(("create", kind))
        record = self._insert(kind, data)
        logger.debug("Created %s %s", kind, record["id"])
        return copy.deepcopy(record)

    async def update(self, kind: str, record_id: str, data: Dict[str, Any]) -> dict:
        self.calls.append(("update", kind))
        for record in self._records.get(kind, []):
            if record.get("id") == record_id:
                record.update(data)
                record["updated_date"] = datetime.now().isoformat()
                return copy.deepcopy(record)
        raise RecordNotFoundError(f"{kind} {record_id} not found")

    def records(self, kind: str) -> List[dict]:
        """Snapshot of every stored record of a kind."""
        return copy.deepcopy(self._records.get(kind, []))


class OutboxEmailSender:
    """Collects outgoing mail instead of sending it."""

    def __init__(self):
        self.outbox: List[dict] = []

    async def send(self, to: str, subject: str, body: str) -> dict:
        message = {
            "id": f"msg_{uuid4().hex[:12]}",
            "to": to,
            "subject": subject,
            "body": body,
            "status": "sent",
        }
        self.outbox.append(message)
        logger.info("Queued email %s to %s", message["id"], to)
        return message


class RecordingNavigator:
    """Remembers navigation requests for a host that reads them later."""

    def __init__(self):
        self.history: List[str] = []

    @property
    def current_page(self) -> Optional[str]:
        return self.history[-1] if self.history else None

    async def navigate(self, page: str) -> None:
        self.history.append(page)
