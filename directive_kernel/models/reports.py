"""Report payloads — composed on demand, returned to the UI, never stored."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class ClientReport(BaseModel):
    """Summary of everything attached to one client."""

    client_id: str
    client_name: str
    stage: Optional[str] = None
    status: Optional[str] = None
    project_count: int
    task_count: int
    open_task_count: int
    meeting_count: int
    communication_count: int
    projects: List[dict] = []               # name / status pairs
    open_tasks: List[dict] = []             # Most urgent first
    upcoming_meetings: List[dict] = []
    recent_communications: List[dict] = []
    generated_at: datetime


class ProjectReport(BaseModel):
    """Progress summary for one project."""

    project_id: str
    project_name: str
    client_name: Optional[str] = None
    status: Optional[str] = None
    task_count: int
    completed_task_count: int
    completion_percentage: int              # 0-100, derived from task counts
    open_tasks: List[dict] = []
    meeting_count: int
    upcoming_meetings: List[dict] = []
    recent_decisions: List[dict] = []
    generated_at: datetime
