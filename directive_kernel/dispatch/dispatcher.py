"""
Action Dispatcher — routes each Directive to its typed handler.

Receives tokenized directives one at a time and performs their side effects
through the collaborators in the EngineContext.

Behavioral Contract:
- Every directive type in DirectiveType has exactly one handler; construction
  fails otherwise
- Params are validated once against the type's schema before the handler runs
- Candidate lists for fuzzy resolution are fetched fresh for every directive
- A handler never raises past dispatch(): every error becomes a failure
  ActionResult for that directive alone
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from pydantic import BaseModel, ValidationError

from directive_kernel.dispatch import reports
from directive_kernel.engine.session import EngineContext
from directive_kernel.errors import (
    DirectiveError,
    ExternalServiceError,
    ParamValidationError,
    ResolutionError,
    UnsupportedDirectiveError,
)
from directive_kernel.integrations.protocols import (
    CLIENT,
    COMMUNICATION,
    DECISION,
    MEETING,
    PROJECT,
    TASK,
)
from directive_kernel.models.directive import Directive, DirectiveType
from directive_kernel.models.params import (
    PARAM_SCHEMAS,
    BulkStageParams,
    ClientReportParams,
    CreateTaskParams,
    NavigateParams,
    ProjectReportParams,
    ScheduleMeetingParams,
    SendEmailParams,
    SentimentParams,
    UpdateClientParams,
)
from directive_kernel.models.result import ActionResult, ErrorKind
from directive_kernel.resolution.matcher import resolve
from directive_kernel.temporal.normalizer import format_date, format_timestamp

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[ActionResult]]


def _describe_validation_error(error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        field = ".".join(str(part) for part in item.get("loc", ()))
        message = item.get("msg", "invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        problems.append(f"{field}: {message}" if field else message)
    return "; ".join(problems)


class ActionDispatcher:
    """Dispatch table from DirectiveType to async handler."""

    def __init__(self, context: EngineContext):
        self.context = context
        self._handlers: Dict[DirectiveType, Handler] = {}
        self._register_default_handlers()
        self._check_complete()

    def _register_default_handlers(self) -> None:
        self._handlers[DirectiveType.NAVIGATE_TO_PAGE] = self._navigate
        self._handlers[DirectiveType.GENERATE_CLIENT_REPORT] = self._client_report
        self._handlers[DirectiveType.GENERATE_PROJECT_REPORT] = self._project_report
        self._handlers[DirectiveType.ANALYZE_CLIENT_SENTIMENT] = self._analyze_sentiment
        self._handlers[DirectiveType.SEND_EMAIL] = self._send_email
        self._handlers[DirectiveType.CREATE_TASK] = self._create_task
        self._handlers[DirectiveType.SCHEDULE_MEETING] = self._schedule_meeting
        self._handlers[DirectiveType.BULK_UPDATE_CLIENT_STAGE] = self._bulk_update_stage
        self._handlers[DirectiveType.UPDATE_CLIENT] = self._update_client

    def _check_complete(self) -> None:
        missing = [t.value for t in DirectiveType if t not in self._handlers]
        if missing:
            raise RuntimeError(f"No handler registered for: {', '.join(missing)}")

    def register_handler(self, directive_type: DirectiveType, handler: Handler) -> None:
        """Replace the handler for a known directive type."""
        self._handlers[DirectiveType(directive_type)] = handler

    @property
    def supported_types(self) -> List[str]:
        return [t.value for t in DirectiveType]

    async def dispatch(self, directive: Directive) -> ActionResult:
        """Run one directive. Always returns exactly one ActionResult."""
        type_name = directive.type
        try:
            directive_type = directive.directive_type
            if directive_type is None:
                raise UnsupportedDirectiveError(f"Unsupported action type: {type_name}")
            params = self._validate(directive_type, directive.params)
            result = await self._handlers[directive_type](params)
        except DirectiveError as e:
            logger.warning("%s failed (%s): %s", type_name, e.error_kind.value, e)
            result = ActionResult.failure(type_name, str(e), e.error_kind)
        except Exception as e:
            logger.exception("%s raised an unexpected error", type_name)
            result = ActionResult.failure(
                type_name, f"{type_name} failed: {e}", ErrorKind.EXTERNAL
            )
        else:
            logger.info("%s -> %s: %s", type_name, result.status.value, result.message)
        return result

    def _validate(self, directive_type: DirectiveType, params: Dict[str, str]) -> BaseModel:
        schema = PARAM_SCHEMAS[directive_type]
        try:
            return schema.model_validate(dict(params))
        except ValidationError as e:
            raise ParamValidationError(
                f"Invalid params for {directive_type.value}: {_describe_validation_error(e)}"
            )

    # --- Resolution helpers ---

    async def _resolve_record(
        self, kind: str, label: str, record_id: Optional[str], name: Optional[str]
    ) -> dict:
        store = self.context.store
        if record_id:
            found = await store.filter(kind, {"id": record_id}, limit=1)
            if not found:
                raise ResolutionError(label, record_id)
            return found[0]

        candidates = await store.list(kind)
        match = resolve(name, candidates, threshold=self.context.config.match_threshold)
        if match is None:
            raise ResolutionError(label, name or "")
        logger.debug("Resolved %s '%s' to %s (%.2f)", label, name, match.entity.get("id"), match.score)
        return match.entity

    async def _resolve_client(self, client_id: Optional[str], name: Optional[str]) -> dict:
        return await self._resolve_record(CLIENT, "client", client_id, name)

    def _resolve_stage(self, stage: str) -> str:
        """Map a stage value or label onto its canonical stage value."""
        entries = []
        for pair in self.context.config.pipeline_stages:
            value = pair[0]
            entries.extend((value, alias) for alias in pair)
        match = resolve(
            stage, entries, key=lambda e: e[1], threshold=self.context.config.match_threshold
        )
        if match is None:
            raise ParamValidationError(f"Unknown pipeline stage '{stage}'")
        return match.entity[0]

    def _stamp(self, data: dict) -> dict:
        if self.context.current_user:
            data["created_by"] = self.context.current_user
        return data

    # --- Handlers ---

    async def _navigate(self, params: NavigateParams) -> ActionResult:
        navigator = self.context.navigator
        if navigator is None:
            raise ExternalServiceError("Navigation is not available in this session")
        pages = self.context.config.pages
        match = resolve(
            params.page, pages, key=str, threshold=self.context.config.match_threshold
        )
        if match is None:
            raise ResolutionError("page", params.page)
        page = match.entity
        await navigator.navigate(page)
        return ActionResult.success(
            DirectiveType.NAVIGATE_TO_PAGE.value,
            f"Navigating to {page}",
            payload={"page": page},
        )

    async def _client_report(self, params: ClientReportParams) -> ActionResult:
        store = self.context.store
        client = await self._resolve_client(params.client_id, params.client_name)
        query = {"client_id": client["id"]}
        projects = await store.filter(PROJECT, query)
        tasks = await store.filter(TASK, query)
        meetings = await store.filter(MEETING, query)
        communications = await store.filter(COMMUNICATION, query, sort="-created_date")

        report = reports.build_client_report(
            client, projects, tasks, meetings, communications,
            now=self.context.now(), config=self.context.config,
        )
        return ActionResult.success(
            DirectiveType.GENERATE_CLIENT_REPORT.value,
            f"Report ready for {report.client_name}: {report.project_count} projects, "
            f"{report.open_task_count} open tasks, {report.meeting_count} meetings",
            payload=report.model_dump(mode="json"),
        )

    async def _project_report(self, params: ProjectReportParams) -> ActionResult:
        store = self.context.store
        project = await self._resolve_record(
            PROJECT, "project", params.project_id, params.project_name
        )
        query = {"project_id": project["id"]}
        tasks = await store.filter(TASK, query)
        meetings = await store.filter(MEETING, query)
        decisions = await store.filter(DECISION, query, sort="-created_date")

        report = reports.build_project_report(
            project, tasks, meetings, decisions,
            now=self.context.now(), config=self.context.config,
        )
        return ActionResult.success(
            DirectiveType.GENERATE_PROJECT_REPORT.value,
            f"Report ready for {report.project_name}: "
            f"{report.completion_percentage}% complete "
            f"({report.completed_task_count}/{report.task_count} tasks)",
            payload=report.model_dump(mode="json"),
        )

    async def _analyze_sentiment(self, params: SentimentParams) -> ActionResult:
        generator = self.context.text_generator
        if generator is None:
            raise ExternalServiceError("Text generation service is not configured")

        client = await self._resolve_client(params.client_id, params.client_name)
        limit = params.limit or self.context.config.sentiment_message_limit
        messages = await self.context.store.filter(
            COMMUNICATION, {"client_id": client["id"]}, sort="-created_date", limit=limit
        )
        bodies = [m.get("body") or m.get("content") or "" for m in messages]
        bodies = [b.strip() for b in bodies if b and b.strip()]
        if not bodies:
            return ActionResult.failure(
                DirectiveType.ANALYZE_CLIENT_SENTIMENT.value,
                f"No communications to analyze for {client.get('name')}",
                ErrorKind.VALIDATION,
            )

        prompt = (
            f"Analyze the sentiment of the recent communications with client "
            f"{client.get('name')}. Describe the overall tone, any signs of "
            f"dissatisfaction or risk, and recommend a next step. Answer in Hebrew.\n\n"
            + "\n---\n".join(bodies)
        )
        analysis = await generator.generate(prompt)
        if not analysis or not str(analysis).strip():
            raise ExternalServiceError("Text generation service returned an empty reply")

        return ActionResult.success(
            DirectiveType.ANALYZE_CLIENT_SENTIMENT.value,
            f"Sentiment analysis ready for {client.get('name')} ({len(bodies)} messages)",
            payload={
                "client_id": client["id"],
                "client_name": client.get("name"),
                "message_count": len(bodies),
                "analysis": str(analysis).strip(),
            },
        )

    async def _send_email(self, params: SendEmailParams) -> ActionResult:
        sender = self.context.email_sender
        if sender is None:
            raise ExternalServiceError("Email integration is not configured")
        response = await sender.send(to=params.to, subject=params.subject, body=params.body)
        reference = response.get("id") if isinstance(response, dict) else None
        return ActionResult.success(
            DirectiveType.SEND_EMAIL.value,
            f"Email '{params.subject}' sent to {params.to}",
            produced_reference=reference,
        )

    async def _create_task(self, params: CreateTaskParams) -> ActionResult:
        config = self.context.config
        data = {
            "title": params.title,
            "description": params.description or "",
            "priority": params.priority or config.default_task_priority,
            "status": params.status or config.default_task_status,
        }
        if params.due_date:
            data["due_date"] = format_date(self.context.temporal.resolve_date(params.due_date))

        if params.client_id:
            data["client_id"] = params.client_id
        elif params.client_name:
            clients = await self.context.store.list(CLIENT)
            match = resolve(params.client_name, clients, threshold=config.match_threshold)
            if match is not None:
                data["client_id"] = match.entity["id"]
                data["client_name"] = match.entity.get("name")
            else:
                logger.warning("Task client '%s' not found, keeping name only", params.client_name)
                data["client_name"] = params.client_name

        task = await self.context.store.create(TASK, self._stamp(data))
        message = f"Task '{params.title}' created"
        if data.get("due_date"):
            message += f", due {data['due_date']}"
        return ActionResult.success(
            DirectiveType.CREATE_TASK.value, message, produced_reference=task.get("id")
        )

    async def _schedule_meeting(self, params: ScheduleMeetingParams) -> ActionResult:
        config = self.context.config
        client = None
        if params.client_id or params.client_name:
            client = await self._resolve_client(params.client_id, params.client_name)

        starts_at = self.context.temporal.resolve_datetime(
            {
                "datetime": params.datetime,
                "date": params.date,
                "time": params.time,
                "when": params.when,
            },
            required=True,
        )
        if params.title:
            title = params.title
        elif client is not None:
            title = f"פגישה עם {client.get('name')}"
        else:
            title = "פגישה"

        reminder = (
            params.reminder_minutes
            if params.reminder_minutes is not None
            else config.default_reminder_minutes
        )
        data = {
            "title": title,
            "meeting_date": format_timestamp(starts_at),
            "duration_minutes": params.duration_minutes or config.default_meeting_duration_minutes,
            "meeting_type": params.meeting_type or config.default_meeting_type,
            "location": params.location or "",
            "status": config.default_meeting_status,
            "participants": [],
            "reminder_enabled": reminder > 0,
            "reminder_before_minutes": reminder,
            "reminders": [{"minutes_before": reminder, "method": "in-app"}] if reminder > 0 else [],
        }
        if client is not None:
            data["client_id"] = client["id"]
            data["client_name"] = client.get("name")

        meeting = await self.context.store.create(MEETING, self._stamp(data))
        return ActionResult.success(
            DirectiveType.SCHEDULE_MEETING.value,
            f"Meeting '{title}' scheduled for {data['meeting_date']}",
            produced_reference=meeting.get("id"),
        )

    async def _bulk_update_stage(self, params: BulkStageParams) -> ActionResult:
        stage = self._resolve_stage(params.stage)
        tokens = [t.strip() for t in params.clients.split(";") if t.strip()]
        if not tokens:
            raise ParamValidationError("No clients listed")

        store = self.context.store
        clients = await store.list(CLIENT)
        by_id = {c.get("id"): c for c in clients}

        updated: List[str] = []
        unresolved: List[str] = []
        failed: List[dict] = []
        seen = set()
        for token in tokens:
            client = by_id.get(token)
            if client is None:
                match = resolve(token, clients, threshold=self.context.config.match_threshold)
                client = match.entity if match else None
            if client is None:
                unresolved.append(token)
                continue
            if client["id"] in seen:
                continue
            seen.add(client["id"])
            try:
                await store.update(CLIENT, client["id"], {"stage": stage})
                updated.append(client.get("name") or client["id"])
            except Exception as e:
                logger.warning("Stage update failed for %s: %s", client["id"], e)
                failed.append({"client": client.get("name") or client["id"], "error": str(e)})

        total = len(seen) + len(unresolved)
        parts = [f"Moved {len(updated)} of {total} clients to {stage}"]
        if updated:
            parts.append("updated: " + ", ".join(updated))
        if unresolved:
            parts.append("not found: " + ", ".join(unresolved))
        if failed:
            parts.append("failed: " + ", ".join(f["client"] for f in failed))
        message = "; ".join(parts)
        payload = {
            "stage": stage,
            "updated": updated,
            "unresolved": unresolved,
            "failed": failed,
        }

        if unresolved or failed:
            logger.warning("Partial stage update: %s", message)
        if not updated:
            kind = ErrorKind.EXTERNAL if failed else ErrorKind.RESOLUTION
            return ActionResult.failure(
                DirectiveType.BULK_UPDATE_CLIENT_STAGE.value, message, kind, payload=payload
            )
        return ActionResult.success(
            DirectiveType.BULK_UPDATE_CLIENT_STAGE.value, message, payload=payload
        )

    async def _update_client(self, params: UpdateClientParams) -> ActionResult:
        client = await self._resolve_client(params.client_id, params.client_name)
        updates = params.updates()
        if "stage" in updates:
            updates["stage"] = self._resolve_stage(updates["stage"])
        await self.context.store.update(CLIENT, client["id"], updates)
        return ActionResult.success(
            DirectiveType.UPDATE_CLIENT.value,
            f"Client {client.get('name')} updated: {', '.join(updates)}",
            payload={"client_id": client["id"], "updates": updates},
        )
