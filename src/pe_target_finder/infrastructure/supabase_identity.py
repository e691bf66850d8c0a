"""Supabase identity provider.

Wraps a ``supabase.Client`` to implement :class:`IdentityProvider`.  The
Supabase SDK is synchronous, so blocking auth calls run in a worker thread
via ``asyncio.to_thread``.  Auth-state callbacks fired from that worker
thread are marshalled back onto the event loop that registered them, so the
session gate only ever runs on one thread.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any

from supabase import Client, create_client

from pe_target_finder.domain.enums import AuthEvent
from pe_target_finder.domain.exceptions import IdentityCheckError
from pe_target_finder.domain.values import AuthSession, Identity
from pe_target_finder.infrastructure.config import IdentityConfig
from pe_target_finder.infrastructure.event_bus import Subscription
from pe_target_finder.infrastructure.identity import AuthChangeHandler, IdentityProvider

logger = logging.getLogger(__name__)


def _to_identity(user: Any) -> Identity | None:
    if user is None or not getattr(user, "id", None):
        return None
    return Identity(
        user_id=str(user.id),
        email=getattr(user, "email", None) or "",
        metadata=dict(getattr(user, "user_metadata", None) or {}),
    )


def _to_session(session: Any) -> AuthSession | None:
    if session is None:
        return None
    return AuthSession(
        user=_to_identity(getattr(session, "user", None)),
        access_token=getattr(session, "access_token", "") or "",
    )


class SupabaseIdentityProvider(IdentityProvider):
    """Identity provider backed by Supabase Auth.

    Parameters
    ----------
    client:
        A configured ``supabase.Client``.
    """

    def __init__(self, client: Client) -> None:
        self._client = client

    @classmethod
    def from_config(cls, config: IdentityConfig) -> SupabaseIdentityProvider:
        config.validate()
        return cls(create_client(config.url, config.key))

    @property
    def provider_name(self) -> str:
        return "supabase"

    async def get_current_user(self) -> Identity | None:
        try:
            response = await asyncio.to_thread(self._client.auth.get_user)
        except Exception as exc:
            raise IdentityCheckError(
                f"Supabase user lookup failed: {exc}",
                provider=self.provider_name,
            ) from exc
        if response is None:
            return None
        return _to_identity(getattr(response, "user", None))

    def on_auth_state_change(self, handler: AuthChangeHandler) -> Subscription:
        try:
            loop: asyncio.AbstractEventLoop | None = asyncio.get_running_loop()
            loop_thread = threading.get_ident()
        except RuntimeError:
            loop, loop_thread = None, None

        def _deliver(raw_event: Any, raw_session: Any) -> None:
            try:
                event = AuthEvent.parse(raw_event)
            except ValueError:
                logger.warning(
                    "SupabaseIdentityProvider: unknown auth event %r", raw_event
                )
                event = AuthEvent.USER_UPDATED
            session = _to_session(raw_session)
            if loop is not None and threading.get_ident() != loop_thread:
                if loop.is_closed():
                    logger.debug("SupabaseIdentityProvider: loop closed, dropping %s", event)
                    return
                loop.call_soon_threadsafe(handler, event, session)
            else:
                handler(event, session)

        subscription = self._client.auth.on_auth_state_change(_deliver)
        return Subscription(subscription.unsubscribe)

    async def sign_out(self) -> None:
        await asyncio.to_thread(self._client.auth.sign_out)

    async def sign_in_with_password(self, email: str, password: str) -> Identity | None:
        """Sign in with email and password (used by the CLI)."""
        response = await asyncio.to_thread(
            self._client.auth.sign_in_with_password,
            {"email": email, "password": password},
        )
        return _to_identity(getattr(response, "user", None))

    def __repr__(self) -> str:
        return "SupabaseIdentityProvider()"
