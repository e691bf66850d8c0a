"""Domain layer for PE Target Finder.

Re-exports all public domain types so that consumers can write::

    from pe_target_finder.domain import SearchCriteria, CompanyCandidate
"""

# -- Enumerations -------------------------------------------------------------
from .enums import (
    AuthEvent,
    LifecycleStatus,
    SearchField,
    SessionStatus,
    View,
)

# -- Value Objects ------------------------------------------------------------
from .values import (
    RECORD_KEYS,
    AuthSession,
    CompanyCandidate,
    Failed,
    Identity,
    Idle,
    InFlight,
    Resolved,
    SearchCriteria,
    SearchLifecycle,
)

# -- Domain Events ------------------------------------------------------------
from .events import (
    AuthStateChanged,
    DomainEvent,
    SearchFailed,
    SearchResolved,
    SearchStarted,
    SessionStatusChanged,
)

# -- Exceptions ---------------------------------------------------------------
from .exceptions import (
    ConfigError,
    IdentityCheckError,
    LifecycleTransitionError,
    ResponseFormatError,
    SearchDispatchError,
    SessionRequiredError,
    TargetFinderError,
    UnknownFieldError,
)

__all__ = [
    # Enums
    "AuthEvent",
    "LifecycleStatus",
    "SearchField",
    "SessionStatus",
    "View",
    # Values
    "RECORD_KEYS",
    "AuthSession",
    "CompanyCandidate",
    "Failed",
    "Identity",
    "Idle",
    "InFlight",
    "Resolved",
    "SearchCriteria",
    "SearchLifecycle",
    # Events
    "AuthStateChanged",
    "DomainEvent",
    "SearchFailed",
    "SearchResolved",
    "SearchStarted",
    "SessionStatusChanged",
    # Exceptions
    "ConfigError",
    "IdentityCheckError",
    "LifecycleTransitionError",
    "ResponseFormatError",
    "SearchDispatchError",
    "SessionRequiredError",
    "TargetFinderError",
    "UnknownFieldError",
]
