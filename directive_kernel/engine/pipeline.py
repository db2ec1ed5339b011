"""
Action Engine — the end-to-end path for one assistant reply.

  text → extract → tokenize → dispatch (sequential) → report

Directives run one after another, never concurrently: a later directive may
fuzzy-resolve against records an earlier one just created or changed.
"""

import logging
from typing import List, Optional

from directive_kernel.dispatch.dispatcher import ActionDispatcher
from directive_kernel.engine.session import EngineContext
from directive_kernel.errors import ParseError
from directive_kernel.models.directive import Directive
from directive_kernel.models.result import ActionResult, BatchReport, ErrorKind
from directive_kernel.parsing.extractor import extract_directives, strip_directives
from directive_kernel.parsing.tokenizer import tokenize
from directive_kernel.reporting.reporter import ExecutionReporter, Reporter

logger = logging.getLogger(__name__)


class ActionEngine:
    """Parses assistant replies and executes the directives they carry."""

    def __init__(self, context: EngineContext):
        self.context = context
        self.dispatcher = ActionDispatcher(context)

    def parse(self, text: str) -> List[Directive]:
        """Tokenize every directive in `text`, dropping malformed bodies."""
        directives = []
        for body in extract_directives(text):
            try:
                directives.append(tokenize(body))
            except ParseError as e:
                logger.debug("Dropping directive %r: %s", body, e)
        return directives

    async def process_reply(
        self, text: str, reporter: Optional[Reporter] = None
    ) -> BatchReport:
        """
        Execute every directive in an assistant reply.

        Returns the display text and one result per parsed directive, in
        order. A failure never stops the directives after it. When a host
        reporter is given it receives each result as it is produced.
        """
        collector = ExecutionReporter(sink=reporter.report if reporter else None)
        directives = self.parse(text)
        logger.info("Processing reply with %d directive(s)", len(directives))

        for directive in directives:
            result = await self.dispatcher.dispatch(directive)
            collector.report(result)

        batch = collector.to_batch(strip_directives(text))
        if batch.failed:
            logger.warning("%d of %d directive(s) failed", batch.failed, len(batch.results))
        return batch

    async def execute(self, body: str) -> ActionResult:
        """Run a single directive body, e.g. when the user presses "execute"."""
        text = (body or "").strip()
        extracted = extract_directives(text)
        if extracted:
            text = extracted[0]
        try:
            directive = tokenize(text)
        except ParseError as e:
            return ActionResult.failure(
                text.split("|")[0].strip() or "UNKNOWN", str(e), ErrorKind.VALIDATION
            )
        return await self.dispatcher.dispatch(directive)
