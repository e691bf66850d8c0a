"""Application shell composing the session gate and the search orchestrator.

The shell decides which view is live.  The search orchestrator exists for the
whole life of the app, but it is only reachable through :attr:`search` while
the gate reports a signed-in user.  A search already in flight when the user
signs out still completes and updates the orchestrator's state; it is simply
no longer shown.

Usage::

    async with TargetFinderApp(provider, service) as app:
        if app.view is View.HOME_PAGE:
            app.search.update_field("industry", "Healthcare")
            await app.search.submit_search()
        app.render()
"""

from __future__ import annotations

import logging
from typing import Any

from pe_target_finder.domain.enums import View
from pe_target_finder.domain.exceptions import SessionRequiredError
from pe_target_finder.infrastructure.config import AppConfig
from pe_target_finder.infrastructure.event_bus import EventBus
from pe_target_finder.infrastructure.generative import (
    ChatModelGenerativeService,
    GenerativeService,
    create_chat_model,
)
from pe_target_finder.infrastructure.identity import IdentityProvider, InMemoryIdentityProvider
from pe_target_finder.presentation.console import ConsoleView
from pe_target_finder.services.search import SearchOrchestrator
from pe_target_finder.services.session_gate import SessionGate

logger = logging.getLogger(__name__)


class TargetFinderApp:
    """Top-level application object.

    Parameters
    ----------
    identity_provider:
        Provider followed by the session gate.
    service:
        Generative service used by the search orchestrator.
    config:
        Effective configuration (kept for introspection and the request kind).
    console:
        Console view used by :meth:`render`.
    """

    def __init__(
        self,
        identity_provider: IdentityProvider,
        service: GenerativeService,
        config: AppConfig | None = None,
        console: ConsoleView | None = None,
    ) -> None:
        self.config = config or AppConfig()
        self.bus = EventBus()
        self.identity_provider = identity_provider
        self.session_gate = SessionGate(identity_provider, bus=self.bus)
        self._search = SearchOrchestrator(
            service,
            bus=self.bus,
            request_kind=self.config.generative.request_kind,
        )
        self._console = console

    @classmethod
    def from_config(cls, config: AppConfig, **kwargs: Any) -> TargetFinderApp:
        """Build the app with the adapters named by *config*."""
        config.validate()
        provider: IdentityProvider
        if config.identity.provider == "supabase":
            from pe_target_finder.infrastructure.supabase_identity import (
                SupabaseIdentityProvider,
            )

            provider = SupabaseIdentityProvider.from_config(config.identity)
        else:
            provider = InMemoryIdentityProvider()

        service = ChatModelGenerativeService(
            create_chat_model(config.generative),
            kinds=(config.generative.request_kind,),
        )
        return cls(provider, service, config=config, **kwargs)

    # -- lifecycle ----------------------------------------------------------

    async def start(self) -> View:
        await self.session_gate.start()
        logger.info("TargetFinderApp: showing %s", self.view.value)
        return self.view

    async def close(self) -> None:
        self.session_gate.teardown()

    async def __aenter__(self) -> TargetFinderApp:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # -- surface ------------------------------------------------------------

    @property
    def view(self) -> View:
        return self.session_gate.view

    @property
    def search(self) -> SearchOrchestrator:
        """The search orchestrator, reachable only while signed in."""
        if not self.session_gate.is_authenticated:
            raise SessionRequiredError("Sign in to search for target companies")
        return self._search

    async def sign_out(self) -> None:
        await self.session_gate.sign_out()

    def render(self) -> None:
        console = self._console or ConsoleView()
        if self.view is View.LOGIN:
            console.render(View.LOGIN)
            return
        console.render(
            View.HOME_PAGE,
            criteria=self._search.criteria,
            lifecycle=self._search.lifecycle,
            identity=self.session_gate.identity,
        )

    def __repr__(self) -> str:
        return f"TargetFinderApp(view={self.view.value})"
