"""Identity provider interface and the in-process implementation.

The session gate only needs three things from an identity provider: the
current user (or none), a change notification stream and a way to end the
session.  :class:`IdentityProvider` captures exactly that; concrete adapters
live next to it (:class:`InMemoryIdentityProvider` here, the Supabase
adapter in :mod:`pe_target_finder.infrastructure.supabase_identity`).
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import cast

from pe_target_finder.domain.enums import AuthEvent
from pe_target_finder.domain.events import AuthStateChanged, DomainEvent
from pe_target_finder.domain.values import AuthSession, Identity
from pe_target_finder.infrastructure.event_bus import EventBus, Subscription

logger = logging.getLogger(__name__)

AuthChangeHandler = Callable[[AuthEvent, AuthSession | None], None]


class IdentityProvider(ABC):
    """Abstract identity provider consumed by the session gate."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Human-readable provider identifier (e.g. ``"supabase"``)."""
        ...

    @abstractmethod
    async def get_current_user(self) -> Identity | None:
        """Return the signed-in identity, or ``None``.

        Raises
        ------
        IdentityCheckError
            When the provider cannot be reached.
        """
        ...

    @abstractmethod
    def on_auth_state_change(self, handler: AuthChangeHandler) -> Subscription:
        """Register *handler* for identity changes and return its release handle."""
        ...

    @abstractmethod
    async def sign_out(self) -> None:
        """Request termination of the current session.

        The local effect arrives later as a ``SIGNED_OUT`` notification.
        """
        ...


class InMemoryIdentityProvider(IdentityProvider):
    """Identity provider that keeps the session in process memory.

    Notifications are delivered synchronously through an :class:`EventBus`,
    in the order they are emitted.  Used for local runs and tests::

        provider = InMemoryIdentityProvider()
        provider.sign_in(Identity(user_id="u-1", email="ana@example.com"))
    """

    def __init__(
        self,
        identity: Identity | None = None,
        bus: EventBus | None = None,
    ) -> None:
        self._bus = bus or EventBus()
        self._session: AuthSession | None = (
            AuthSession(user=identity) if identity is not None else None
        )

    @property
    def provider_name(self) -> str:
        return "memory"

    @property
    def session(self) -> AuthSession | None:
        return self._session

    async def get_current_user(self) -> Identity | None:
        return self._session.user if self._session is not None else None

    def on_auth_state_change(self, handler: AuthChangeHandler) -> Subscription:
        def _deliver(event: DomainEvent) -> None:
            notification = cast(AuthStateChanged, event)
            # The bus may be shared with subscribers that re-publish.
            if notification.source_id != self.provider_name:
                return
            handler(notification.event, notification.session)

        return self._bus.subscribe(AuthStateChanged, _deliver)

    async def sign_out(self) -> None:
        self._session = None
        self.emit(AuthEvent.SIGNED_OUT, None)

    # -- driving helpers ----------------------------------------------------

    def sign_in(self, identity: Identity, access_token: str = "") -> AuthSession:
        """Start a session for *identity* and notify subscribers."""
        self._session = AuthSession(user=identity, access_token=access_token)
        self.emit(AuthEvent.SIGNED_IN, self._session)
        return self._session

    def expire_session(self) -> None:
        """Drop the session without a sign-out request."""
        self._session = None
        self.emit(AuthEvent.SIGNED_OUT, None)

    def emit(self, event: AuthEvent, session: AuthSession | None) -> None:
        """Publish a raw notification to every subscriber."""
        logger.debug("InMemoryIdentityProvider: emitting %s", event.value)
        self._bus.publish(
            AuthStateChanged(source_id=self.provider_name, event=event, session=session)
        )

    def __repr__(self) -> str:
        return f"InMemoryIdentityProvider(signed_in={self._session is not None})"
