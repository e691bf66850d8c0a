"""Domain exceptions for PE Target Finder.

All domain-specific exceptions inherit from ``TargetFinderError`` so callers
can catch the full family with a single ``except`` clause when needed.
"""

from __future__ import annotations

from typing import Any


class TargetFinderError(Exception):
    """Base exception for all PE Target Finder errors."""

    def __init__(self, message: str = "", details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details: dict[str, Any] = details or {}


class IdentityCheckError(TargetFinderError):
    """Raised by identity adapters when the current user cannot be resolved.

    The session gate never lets this escape: a failed check is
    indistinguishable from "nobody is signed in".
    """

    def __init__(
        self,
        message: str = "Identity check failed",
        provider: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.provider = provider


class SearchDispatchError(TargetFinderError):
    """Raised when the generative service call fails.

    Covers transport failures, service-side errors and requests the service
    refuses (unknown kind, unsupported response type).
    """

    def __init__(
        self,
        message: str = "Search dispatch failed",
        kind: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.kind = kind


class ResponseFormatError(SearchDispatchError):
    """Raised when a service payload cannot be read as an array of records."""

    def __init__(
        self,
        message: str = "Malformed service response",
        payload_type: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details)
        self.payload_type = payload_type


class LifecycleTransitionError(TargetFinderError):
    """Raised when the lifecycle reducer is handed an illegal transition."""

    def __init__(
        self,
        message: str = "Illegal lifecycle transition",
        state: str = "",
        action: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.state = state
        self.action = action


class UnknownFieldError(TargetFinderError, KeyError):
    """Raised when ``update_field`` names a field the form does not have."""

    def __init__(self, field_name: str = "") -> None:
        super().__init__(f"Unknown search field {field_name!r}")
        self.field_name = field_name

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class SessionRequiredError(TargetFinderError):
    """Raised when the search view is requested without a signed-in user."""


class ConfigError(TargetFinderError, ValueError):
    """Raised when a configuration object fails validation."""
