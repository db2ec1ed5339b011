"""Directive — one parsed [ACTION: ...] unit from an assistant reply."""

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict


class DirectiveType(str, Enum):
    NAVIGATE_TO_PAGE = "NAVIGATE_TO_PAGE"
    GENERATE_CLIENT_REPORT = "GENERATE_CLIENT_REPORT"
    GENERATE_PROJECT_REPORT = "GENERATE_PROJECT_REPORT"
    ANALYZE_CLIENT_SENTIMENT = "ANALYZE_CLIENT_SENTIMENT"
    SEND_EMAIL = "SEND_EMAIL"
    CREATE_TASK = "CREATE_TASK"
    SCHEDULE_MEETING = "SCHEDULE_MEETING"
    BULK_UPDATE_CLIENT_STAGE = "BULK_UPDATE_CLIENT_STAGE"
    UPDATE_CLIENT = "UPDATE_CLIENT"


class Directive(BaseModel):
    """
    A tokenized directive.

    `type` holds the raw type token so that unrecognised types survive
    tokenization and are rejected by the dispatcher with a clear outcome.
    """

    model_config = ConfigDict(frozen=True)

    type: str
    raw_params: str                         # Body as it appeared between the markers
    params: Dict[str, str] = {}             # Insertion order = order in the body

    @property
    def directive_type(self) -> Optional[DirectiveType]:
        try:
            return DirectiveType(self.type)
        except ValueError:
            return None
