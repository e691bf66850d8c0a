"""Domain enumerations for PE Target Finder.

These enums capture the fixed vocabularies used across the domain layer:
session status, top-level views, identity-provider events, search form
fields and the search lifecycle tags.
"""

from enum import Enum


class SessionStatus(Enum):
    """Two-state machine owned by the session gate."""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


class View(Enum):
    """Top-level view selected by the session gate."""

    LOGIN = "login"
    HOME_PAGE = "homePage"


class AuthEvent(Enum):
    """Change notifications emitted by an identity provider."""

    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"
    PASSWORD_RECOVERY = "PASSWORD_RECOVERY"
    USER_DELETED = "USER_DELETED"
    MFA_CHALLENGE_VERIFIED = "MFA_CHALLENGE_VERIFIED"

    @classmethod
    def parse(cls, value: object) -> "AuthEvent":
        """Coerce a provider event (enum member, name or value) to ``AuthEvent``."""
        if isinstance(value, cls):
            return value
        raw = getattr(value, "value", value)
        return cls(str(raw).upper())


class SearchField(Enum):
    """The five fields of the search form."""

    MINIMUM_PRICE = "minimum_price"
    MAXIMUM_PRICE = "maximum_price"
    LOCATION = "location"
    GROWTH_TARGET_PERCENT = "growth_target_percent"
    INDUSTRY = "industry"


class LifecycleStatus(Enum):
    """Tags of the search lifecycle state machine."""

    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    RESOLVED = "resolved"
    FAILED = "failed"
