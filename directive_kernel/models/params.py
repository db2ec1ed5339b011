"""
Per-directive param schemas.

Each directive type validates its raw string params once, at the
tokenizer → dispatcher boundary, into one of these models. Handlers only
ever see typed params.
"""

from typing import Dict, Optional, Type

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from directive_kernel.models.directive import DirectiveType


class _Params(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)


class _ClientRef(_Params):
    client_id: Optional[str] = None
    client_name: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("client_name", "client")
    )

    @model_validator(mode="after")
    def require_client(self):
        if not (self.client_id or self.client_name):
            raise ValueError("client_name or client_id is required")
        return self


class NavigateParams(_Params):
    page: str = Field(min_length=1)


class ClientReportParams(_ClientRef):
    pass


class ProjectReportParams(_Params):
    project_id: Optional[str] = None
    project_name: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("project_name", "project")
    )

    @model_validator(mode="after")
    def require_project(self):
        if not (self.project_id or self.project_name):
            raise ValueError("project_name or project_id is required")
        return self


class SentimentParams(_ClientRef):
    limit: Optional[int] = Field(default=None, ge=1)


class SendEmailParams(_Params):
    to: str = Field(min_length=1)
    subject: str = Field(min_length=1)
    body: str = Field(min_length=1)

    @model_validator(mode="after")
    def check_recipient(self):
        if "@" not in self.to:
            raise ValueError(f"'{self.to}' is not an email address")
        return self


class CreateTaskParams(_Params):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    due_date: Optional[str] = None
    client_id: Optional[str] = None
    client_name: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("client_name", "client")
    )


class ScheduleMeetingParams(_Params):
    title: Optional[str] = None
    client_id: Optional[str] = None
    client_name: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("client_name", "client")
    )
    datetime: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    when: Optional[str] = None
    duration_minutes: Optional[int] = Field(
        default=None, ge=1, validation_alias=AliasChoices("duration_minutes", "duration")
    )
    meeting_type: Optional[str] = None
    location: Optional[str] = None
    reminder_minutes: Optional[int] = Field(
        default=None, ge=0, validation_alias=AliasChoices("reminder_minutes", "reminder")
    )


class BulkStageParams(_Params):
    clients: str = Field(min_length=1)
    stage: str = Field(min_length=1)


CLIENT_FIELDS = ("email", "phone", "address", "notes", "stage", "status")


class UpdateClientParams(_ClientRef):
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    stage: Optional[str] = None
    status: Optional[str] = None

    @model_validator(mode="after")
    def require_field(self):
        if not self.updates():
            raise ValueError(
                "at least one of " + ", ".join(CLIENT_FIELDS) + " is required"
            )
        return self

    def updates(self) -> Dict[str, str]:
        return {
            name: getattr(self, name)
            for name in CLIENT_FIELDS
            if getattr(self, name)
        }


PARAM_SCHEMAS: Dict[DirectiveType, Type[_Params]] = {
    DirectiveType.NAVIGATE_TO_PAGE: NavigateParams,
    DirectiveType.GENERATE_CLIENT_REPORT: ClientReportParams,
    DirectiveType.GENERATE_PROJECT_REPORT: ProjectReportParams,
    DirectiveType.ANALYZE_CLIENT_SENTIMENT: SentimentParams,
    DirectiveType.SEND_EMAIL: SendEmailParams,
    DirectiveType.CREATE_TASK: CreateTaskParams,
    DirectiveType.SCHEDULE_MEETING: ScheduleMeetingParams,
    DirectiveType.BULK_UPDATE_CLIENT_STAGE: BulkStageParams,
    DirectiveType.UPDATE_CLIENT: UpdateClientParams,
}
