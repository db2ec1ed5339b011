"""Report composition — pure functions over already fetched records."""

from datetime import datetime
from typing import List

from directive_kernel.models.config import EngineConfig
from directive_kernel.models.reports import ClientReport, ProjectReport

_BODY_PREVIEW = 200


def _is_open(task: dict, config: EngineConfig) -> bool:
    return task.get("status") not in config.completed_task_statuses


def _task_summary(task: dict) -> dict:
    return {
        "id": task.get("id"),
        "title": task.get("title"),
        "status": task.get("status"),
        "priority": task.get("priority"),
        "due_date": task.get("due_date"),
    }


def _meeting_summary(meeting: dict) -> dict:
    return {
        "id": meeting.get("id"),
        "title": meeting.get("title"),
        "meeting_date": meeting.get("meeting_date"),
        "meeting_type": meeting.get("meeting_type"),
    }


def open_tasks(tasks: List[dict], config: EngineConfig) -> List[dict]:
    """Open tasks, earliest due date first, undated last."""
    pending = [t for t in tasks if _is_open(t, config)]
    pending.sort(key=lambda t: (not t.get("due_date"), t.get("due_date") or ""))
    return [_task_summary(t) for t in pending[: config.report_item_limit]]


def upcoming_meetings(
    meetings: List[dict], now: datetime, config: EngineConfig
) -> List[dict]:
    cutoff = now.isoformat()
    ahead = [m for m in meetings if (m.get("meeting_date") or "") >= cutoff]
    ahead.sort(key=lambda m: m.get("meeting_date") or "")
    return [_meeting_summary(m) for m in ahead[: config.report_item_limit]]


def recent(records: List[dict], limit: int) -> List[dict]:
    newest = sorted(records, key=lambda r: r.get("created_date") or "", reverse=True)
    return newest[:limit]


def completion_percentage(tasks: List[dict], config: EngineConfig) -> int:
    if not tasks:
        return 0
    done = sum(1 for t in tasks if not _is_open(t, config))
    return round(100 * done / len(tasks))


def build_client_report(
    client: dict,
    projects: List[dict],
    tasks: List[dict],
    meetings: List[dict],
    communications: List[dict],
    now: datetime,
    config: EngineConfig,
) -> ClientReport:
    return ClientReport(
        client_id=client["id"],
        client_name=client.get("name") or "",
        stage=client.get("stage"),
        status=client.get("status"),
        project_count=len(projects),
        task_count=len(tasks),
        open_task_count=sum(1 for t in tasks if _is_open(t, config)),
        meeting_count=len(meetings),
        communication_count=len(communications),
        projects=[
            {"id": p.get("id"), "name": p.get("name"), "status": p.get("status")}
            for p in projects
        ],
        open_tasks=open_tasks(tasks, config),
        upcoming_meetings=upcoming_meetings(meetings, now, config),
        recent_communications=[
            {
                "subject": c.get("subject"),
                "body": (c.get("body") or "")[:_BODY_PREVIEW],
                "created_date": c.get("created_date"),
            }
            for c in recent(communications, config.report_item_limit)
        ],
        generated_at=now,
    )


def build_project_report(
    project: dict,
    tasks: List[dict],
    meetings: List[dict],
    decisions: List[dict],
    now: datetime,
    config: EngineConfig,
) -> ProjectReport:
    completed = sum(1 for t in tasks if not _is_open(t, config))
    return ProjectReport(
        project_id=project["id"],
        project_name=project.get("name") or "",
        client_name=project.get("client_name"),
        status=project.get("status"),
        task_count=len(tasks),
        completed_task_count=completed,
        completion_percentage=completion_percentage(tasks, config),
        open_tasks=open_tasks(tasks, config),
        meeting_count=len(meetings),
        upcoming_meetings=upcoming_meetings(meetings, now, config),
        recent_decisions=[
            {
                "title": d.get("title"),
                "description": d.get("description"),
                "created_date": d.get("created_date"),
            }
            for d in recent(decisions, config.report_item_limit)
        ],
        generated_at=now,
    )
