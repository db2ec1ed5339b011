"""
Directive Kernel API — FastAPI endpoints.

Exposes the engine to a chat host:
- Processing assistant replies (strip + execute directives)
- Executing a single directive on demand
- Side-effect-free parsing preview
- Engine configuration
"""

from datetime import datetime
from typing import Callable, List, Optional

from fastapi import FastAPI
from pydantic import BaseModel

from directive_kernel.engine.pipeline import ActionEngine
from directive_kernel.engine.session import EngineContext
from directive_kernel.integrations.memory_store import (
    InMemoryDataStore,
    OutboxEmailSender,
    RecordingNavigator,
)
from directive_kernel.integrations.protocols import (
    DataStore,
    EmailSender,
    Navigator,
    TextGenerator,
)
from directive_kernel.models.config import EngineConfig
from directive_kernel.models.result import ActionResult, BatchReport
from directive_kernel.parsing.extractor import strip_directives


# --- Request/Response Models ---

class ReplyRequest(BaseModel):
    text: str
    user: Optional[str] = None


class ExecuteRequest(BaseModel):
    directive: str
    user: Optional[str] = None


class ParseResponse(BaseModel):
    display_text: str
    directives: List[dict]


class BatchResponse(BaseModel):
    display_text: str
    results: List[ActionResult]
    succeeded: int
    failed: int


# --- Application Factory ---

def create_app(
    store: Optional[DataStore] = None,
    text_generator: Optional[TextGenerator] = None,
    email_sender: Optional[EmailSender] = None,
    navigator: Optional[Navigator] = None,
    config: Optional[EngineConfig] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Directive Kernel API",
        description="Directive parsing and action dispatch for the business assistant",
        version="0.1.0",
    )

    context = EngineContext(
        store=store or InMemoryDataStore(),
        text_generator=text_generator,
        email_sender=email_sender or OutboxEmailSender(),
        navigator=navigator or RecordingNavigator(),
        config=config,
        clock=clock,
    )
    engine = ActionEngine(context)

    # Store components on app state for access in endpoints
    app.state.context = context
    app.state.engine = engine

    def _engine_for(user: Optional[str]) -> ActionEngine:
        # One context per request; the shared one is never stamped with a user
        return ActionEngine(context.for_user(user))

    # === REPLIES ===

    @app.post("/assistant/replies", response_model=BatchResponse)
    async def process_reply(req: ReplyRequest):
        """Strip directives from an assistant reply and execute them in order."""
        batch: BatchReport = await _engine_for(req.user).process_reply(req.text)
        return BatchResponse(
            display_text=batch.display_text,
            results=batch.results,
            succeeded=batch.succeeded,
            failed=batch.failed,
        )

    @app.post("/directives/parse", response_model=ParseResponse)
    def parse_reply(req: ReplyRequest):
        """Preview the directives in a reply without executing them."""
        directives = engine.parse(req.text)
        return ParseResponse(
            display_text=strip_directives(req.text),
            directives=[d.model_dump() for d in directives],
        )

    # === ACTIONS ===

    @app.post("/actions/execute", response_model=ActionResult)
    async def execute_action(req: ExecuteRequest):
        """Execute one directive body."""
        return await _engine_for(req.user).execute(req.directive)

    @app.get("/actions/types")
    def list_action_types():
        """Supported directive types."""
        return engine.dispatcher.supported_types

    # === CONFIG ===

    @app.get("/engine/config")
    def get_engine_config():
        """Current engine configuration."""
        return context.config.model_dump()

    @app.put("/engine/config")
    def update_engine_config(new_config: EngineConfig):
        """Update engine configuration."""
        context.config = new_config
        return new_config.model_dump()

    return app


# Default application instance
app = create_app()
