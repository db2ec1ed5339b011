"""Engine configuration — thresholds and defaults applied by the handlers."""

from typing import List

from pydantic import BaseModel, Field


DEFAULT_PAGES = [
    "Dashboard",
    "Clients",
    "Projects",
    "Tasks",
    "Meetings",
    "Planner",
    "Reports",
    "DailyReports",
    "Decisions",
    "Documents",
    "Invoices",
    "Quotes",
    "TimeLogs",
    "CommunicationHub",
    "Automations",
    "Integrations",
    "Settings",
    "AIChat",
]

# (value, label) pairs of the client pipeline
DEFAULT_PIPELINE_STAGES = [
    ["ברור_תכן", "ברור תכן"],
    ["תיק_מידע", "תיק מידע"],
    ["היתרים", "היתרים"],
    ["ביצוע", "ביצוע"],
    ["סיום", "סיום"],
]


class EngineConfig(BaseModel):
    """Configuration for directive dispatch."""

    match_threshold: float = Field(ge=0, le=1, default=0.6)
    default_hour: int = Field(ge=0, le=23, default=9)
    default_minute: int = Field(ge=0, le=59, default=0)
    default_meeting_duration_minutes: int = 60
    default_reminder_minutes: int = 60
    default_meeting_type: str = "פגישת תכנון"
    default_meeting_status: str = "מתוכננת"
    default_task_priority: str = "בינונית"
    default_task_status: str = "חדשה"
    sentiment_message_limit: int = 20
    report_item_limit: int = 5
    pages: List[str] = DEFAULT_PAGES
    pipeline_stages: List[List[str]] = DEFAULT_PIPELINE_STAGES
    completed_task_statuses: List[str] = ["הושלמה", "הושלם", "completed", "done"]
