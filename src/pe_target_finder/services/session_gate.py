"""Session gate: the single owner of authentication state.

The gate resolves the current identity once at startup, then follows the
identity provider's change notifications.  Its status is exposed read-only;
nothing outside the gate assigns it.  Even ``sign_out()`` only asks the
provider to end the session and waits for the resulting notification, so the
view always reflects the provider's notion of truth.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from pe_target_finder.domain.enums import AuthEvent, SessionStatus, View
from pe_target_finder.domain.events import AuthStateChanged, SessionStatusChanged
from pe_target_finder.domain.values import AuthSession, Identity
from pe_target_finder.infrastructure.event_bus import EventBus, Subscription
from pe_target_finder.infrastructure.identity import AuthChangeHandler, IdentityProvider

logger = logging.getLogger(__name__)


def reduce_session(status: SessionStatus, session: AuthSession | None) -> SessionStatus:
    """Next session status after a notification carrying *session*.

    Only the presence of a user matters; the previous *status* is accepted so
    every transition goes through the same function.
    """
    if session is not None and session.user is not None:
        return SessionStatus.AUTHENTICATED
    return SessionStatus.UNAUTHENTICATED


class SessionGate:
    """Tracks whether a user is signed in and selects the top-level view.

    Parameters
    ----------
    provider:
        The identity provider to follow.
    bus:
        Event bus on which :class:`SessionStatusChanged` (and the raw
        :class:`AuthStateChanged`) events are published.
    """

    def __init__(
        self,
        provider: IdentityProvider,
        bus: EventBus | None = None,
        source_id: str = "session-gate",
    ) -> None:
        self._provider = provider
        self._bus = bus or EventBus()
        self._source_id = source_id
        self._status = SessionStatus.UNAUTHENTICATED
        self._identity: Identity | None = None
        self._subscription: Subscription | None = None
        self._notified = False
        self._started = False
        self._closed = False

    # -- read-only surface --------------------------------------------------

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def identity(self) -> Identity | None:
        return self._identity

    @property
    def is_authenticated(self) -> bool:
        return self._status is SessionStatus.AUTHENTICATED

    @property
    def view(self) -> View:
        return View.HOME_PAGE if self.is_authenticated else View.LOGIN

    @property
    def bus(self) -> EventBus:
        return self._bus

    def on_change(self, handler: Callable[[SessionStatusChanged], None]) -> Subscription:
        """Subscribe *handler* to status changes."""
        return self._bus.subscribe(SessionStatusChanged, handler)  # type: ignore[arg-type]

    # -- lifecycle ----------------------------------------------------------

    async def start(self) -> SessionStatus:
        """Subscribe to identity changes and resolve the initial identity.

        The subscription is taken first; if a notification arrives while the
        initial lookup is suspended, the notification wins.
        """
        if self._started or self._closed:
            return self._status
        self._started = True
        self._subscription = self.subscribe_to_identity_changes(self._handle_auth_change)

        identity = await self.resolve_current_identity()
        if self._closed:
            return self._status
        if self._notified:
            logger.debug("SessionGate: initial lookup superseded by a notification")
        else:
            session = AuthSession(user=identity) if identity is not None else None
            self._apply(session)
        logger.info("SessionGate: started in %s", self._status.value)
        return self._status

    def teardown(self) -> None:
        """Release the identity subscription. Safe to call more than once."""
        self._closed = True
        if self._subscription is not None:
            if self._subscription.unsubscribe():
                logger.debug("SessionGate: subscription released")

    # -- operations ---------------------------------------------------------

    async def resolve_current_identity(self) -> Identity | None:
        """Ask the provider for the current user; any failure reads as none."""
        try:
            return await self._provider.get_current_user()
        except Exception as exc:
            logger.warning(
                "SessionGate: identity check via %s failed, treating as signed out: %s",
                self._provider.provider_name,
                exc,
            )
            return None

    def subscribe_to_identity_changes(self, handler: AuthChangeHandler) -> Subscription:
        """Register *handler* with the provider and return its release handle."""
        return self._provider.on_auth_state_change(handler)

    async def sign_out(self) -> None:
        """Ask the provider to end the session.

        Local state is left alone; it changes when the provider's
        ``SIGNED_OUT`` notification arrives.
        """
        try:
            await self._provider.sign_out()
        except Exception as exc:
            logger.warning("SessionGate: sign-out request failed: %s", exc)

    # -- internals ----------------------------------------------------------

    def _handle_auth_change(self, event: AuthEvent, session: AuthSession | None) -> None:
        if self._closed:
            logger.debug("SessionGate: ignoring %s after teardown", event.value)
            return
        self._notified = True
        self._bus.publish(
            AuthStateChanged(source_id=self._source_id, event=event, session=session)
        )
        self._apply(session)

    def _apply(self, session: AuthSession | None) -> None:
        previous = self._status
        previous_identity = self._identity
        self._status = reduce_session(previous, session)
        self._identity = session.user if self.is_authenticated and session else None

        if self._status is previous and self._identity == previous_identity:
            return
        logger.info(
            "SessionGate: %s -> %s (view=%s)",
            previous.value,
            self._status.value,
            self.view.value,
        )
        self._bus.publish(
            SessionStatusChanged(
                source_id=self._source_id,
                previous=previous,
                current=self._status,
                identity=self._identity,
            )
        )

    def __repr__(self) -> str:
        return f"SessionGate(status={self._status.value}, provider={self._provider!r})"
