"""
Execution Reporter — collects one ActionResult per directive of a batch.

The engine only talks to the Reporter protocol, so hosts can surface results
however they like (toasts, chat lines, HTTP responses).
"""

import logging
from typing import Callable, List, Optional, Protocol

from directive_kernel.models.result import ActionResult, BatchReport

logger = logging.getLogger(__name__)


class Reporter(Protocol):
    def report(self, result: ActionResult) -> None: ...


class ExecutionReporter:
    """
    Accumulates results in dispatch order and optionally forwards each one
    to a host sink as soon as it is available.
    """

    def __init__(self, sink: Optional[Callable[[ActionResult], None]] = None):
        self._sink = sink
        self._results: List[ActionResult] = []

    def report(self, result: ActionResult) -> None:
        self._results.append(result)
        if self._sink is None:
            return
        try:
            self._sink(result)
        except Exception:
            logger.exception("Result sink failed for %s", result.directive_type)

    @property
    def results(self) -> List[ActionResult]:
        return list(self._results)

    @property
    def succeeded(self) -> List[ActionResult]:
        return [r for r in self._results if r.ok]

    @property
    def failed(self) -> List[ActionResult]:
        return [r for r in self._results if not r.ok]

    def to_batch(self, display_text: str) -> BatchReport:
        return BatchReport(display_text=display_text, results=self.results)
