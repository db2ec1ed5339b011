"""
Collaborator interfaces consumed by the dispatcher.

All calls are awaited; they are the only suspension points of a dispatch.
"""

from typing import Any, Dict, List, Optional, Protocol

# Entity kinds understood by the data store
CLIENT = "Client"
PROJECT = "Project"
TASK = "Task"
MEETING = "Meeting"
DECISION = "Decision"
COMMUNICATION = "CommunicationMessage"

ENTITY_KINDS = (CLIENT, PROJECT, TASK, MEETING, DECISION, COMMUNICATION)


class DataStore(Protocol):
    """List/filter/create/update per entity kind. Records are plain dicts."""

    async def list(
        self, kind: str, sort: Optional[str] = None, limit: Optional[int] = None
    ) -> List[Dict[str, Any]]: ...

    async def filter(
        self,
        kind: str,
        query: Dict[str, Any],
        sort: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]: ...

    async def create(self, kind: str, data: Dict[str, Any]) -> Dict[str, Any]: ...

    async def update(
        self, kind: str, record_id: str, data: Dict[str, Any]
    ) -> Dict[str, Any]: ...


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> str: ...


class EmailSender(Protocol):
    async def send(self, to: str, subject: str, body: str) -> Dict[str, Any]: ...


class Navigator(Protocol):
    async def navigate(self, page: str) -> None: ...
