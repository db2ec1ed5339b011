"""Directive Kernel data models."""

from directive_kernel.models.config import EngineConfig
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
from directive_kernel.models.reports import ClientReport, ProjectReport
from directive_kernel.models.result import (
    ActionResult,
    ActionStatus,
    BatchReport,
    ErrorKind,
    MatchCandidate,
)

__all__ = [
    "PARAM_SCHEMAS",
    "ActionResult",
    "ActionStatus",
    "BatchReport",
    "BulkStageParams",
    "ClientReport",
    "ClientReportParams",
    "CreateTaskParams",
    "Directive",
    "DirectiveType",
    "EngineConfig",
    "ErrorKind",
    "MatchCandidate",
    "NavigateParams",
    "ProjectReport",
    "ProjectReportParams",
    "ScheduleMeetingParams",
    "SendEmailParams",
    "SentimentParams",
    "UpdateClientParams",
]
