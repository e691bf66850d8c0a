"""Domain events for PE Target Finder.

Every event is a frozen dataclass inheriting from ``DomainEvent``.  The
session gate and the search orchestrator publish events on an ``EventBus``;
presentation and tests subscribe to them instead of polling state.

All events carry a ``timestamp`` and a ``source_id`` identifying the
originating component.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from .enums import AuthEvent, SessionStatus, View
from .values import AuthSession, CompanyCandidate, Identity, SearchCriteria

# ---------------------------------------------------------------------------
# Base event
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DomainEvent:
    """Base class for all domain events."""

    timestamp: float = field(default_factory=time.time)
    source_id: str = ""


# ---------------------------------------------------------------------------
# Identity events
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AuthStateChanged(DomainEvent):
    """Raw notification from an identity provider."""

    event: AuthEvent = AuthEvent.INITIAL_SESSION
    session: AuthSession | None = None


@dataclass(frozen=True)
class SessionStatusChanged(DomainEvent):
    """The session gate switched status (and therefore view)."""

    previous: SessionStatus = SessionStatus.UNAUTHENTICATED
    current: SessionStatus = SessionStatus.UNAUTHENTICATED
    identity: Identity | None = None

    @property
    def view(self) -> View:
        if self.current is SessionStatus.AUTHENTICATED:
            return View.HOME_PAGE
        return View.LOGIN


# ---------------------------------------------------------------------------
# Search events
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SearchStarted(DomainEvent):
    """A search moved to in-flight."""

    criteria: SearchCriteria = field(default_factory=SearchCriteria)
    prompt: str = ""


@dataclass(frozen=True)
class SearchResolved(DomainEvent):
    """A search resolved with the given candidates."""

    results: tuple[CompanyCandidate, ...] = ()
    elapsed_ms: float = 0.0


@dataclass(frozen=True)
class SearchFailed(DomainEvent):
    """A search failed; results were cleared."""

    error: str = ""
    error_type: str = ""
    elapsed_ms: float = 0.0
