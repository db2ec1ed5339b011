"""
Engine Context — the explicit session value handed to the dispatcher.

Carries the current user, collaborator handles, configuration and clock, so
that no handler reaches into ambient state.
"""

from datetime import datetime
from typing import Callable, Optional

from directive_kernel.integrations.protocols import (
    DataStore,
    EmailSender,
    Navigator,
    TextGenerator,
)
from directive_kernel.models.config import EngineConfig
from directive_kernel.temporal.normalizer import TemporalNormalizer


class EngineContext:
    """Everything a directive handler is allowed to touch."""

    def __init__(
        self,
        store: DataStore,
        text_generator: Optional[TextGenerator] = None,
        email_sender: Optional[EmailSender] = None,
        navigator: Optional[Navigator] = None,
        config: Optional[EngineConfig] = None,
        current_user: Optional[str] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.text_generator = text_generator
        self.email_sender = email_sender
        self.navigator = navigator
        self.config = config or EngineConfig()
        self.current_user = current_user
        self.clock = clock or datetime.now

    @property
    def temporal(self) -> TemporalNormalizer:
        # Built per access so config changes apply to the next directive
        return TemporalNormalizer(
            now=self.clock,
            default_hour=self.config.default_hour,
            default_minute=self.config.default_minute,
        )

    def now(self) -> datetime:
        return self.clock()

    def for_user(self, user: Optional[str]) -> "EngineContext":
        """A copy of this context acting on behalf of `user`."""
        return EngineContext(
            store=self.store,
            text_generator=self.text_generator,
            email_sender=self.email_sender,
            navigator=self.navigator,
            config=self.config,
            current_user=user,
            clock=self.clock,
        )
