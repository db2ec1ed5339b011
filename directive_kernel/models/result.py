"""Match candidates, per-directive outcomes and batch reports."""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class ActionStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class ErrorKind(str, Enum):
    UNSUPPORTED = "unsupported"
    VALIDATION = "validation"
    RESOLUTION = "resolution"
    EXTERNAL = "external"


class MatchCandidate(BaseModel):
    """A record picked by fuzzy resolution, with its similarity score."""

    entity: Any
    score: float = Field(ge=0, le=1)


class ActionResult(BaseModel):
    """Outcome of dispatching a single directive."""

    directive_type: str
    status: ActionStatus
    message: str                                # Human-readable outcome line
    produced_reference: Optional[str] = None    # ID of a record this action created
    error_kind: Optional[ErrorKind] = None
    payload: Optional[dict] = None              # Reports, analyses, navigation target

    @property
    def ok(self) -> bool:
        return self.status == ActionStatus.SUCCESS

    @classmethod
    def success(
        cls,
        directive_type: str,
        message: str,
        produced_reference: Optional[str] = None,
        payload: Optional[dict] = None,
    ) -> "ActionResult":
        return cls(
            directive_type=directive_type,
            status=ActionStatus.SUCCESS,
            message=message,
            produced_reference=produced_reference,
            payload=payload,
        )

    @classmethod
    def failure(
        cls,
        directive_type: str,
        message: str,
        error_kind: ErrorKind,
        payload: Optional[dict] = None,
    ) -> "ActionResult":
        return cls(
            directive_type=directive_type,
            status=ActionStatus.FAILURE,
            message=message,
            error_kind=error_kind,
            payload=payload,
        )


class BatchReport(BaseModel):
    """Everything the host UI needs to render one assistant reply."""

    display_text: str
    results: List[ActionResult] = []

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> int:
        return len(self.results) - self.succeeded
