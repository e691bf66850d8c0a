"""Value objects for PE Target Finder.

All types here are frozen dataclasses -- immutable, compared by value.
The search lifecycle is modelled as tagged variants (``Idle``, ``InFlight``,
``Resolved``, ``Failed``) so transition rules can be audited in isolation
from any rendering layer.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Union

from .enums import LifecycleStatus, SearchField
from .exceptions import ResponseFormatError, UnknownFieldError

# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Identity:
    """Opaque handle for the signed-in principal.

    Only the presence of an ``Identity`` matters to the search side; the
    fields exist for display and logging.
    """

    user_id: str
    email: str = ""
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.user_id:
            raise ValueError("Identity.user_id must not be empty")


@dataclass(frozen=True)
class AuthSession:
    """Session attached to an identity-change notification."""

    user: Identity | None = None
    access_token: str = ""


# ---------------------------------------------------------------------------
# SearchCriteria
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SearchCriteria:
    """The five raw-text inputs of the search form.

    Every field is independently optional (``""`` means unset) and no
    cross-field validation is applied: a minimum above the maximum is passed
    through as entered.
    """

    minimum_price: str = ""
    maximum_price: str = ""
    location: str = ""
    growth_target_percent: str = ""
    industry: str = ""

    def with_field(self, name: SearchField | str, value: str) -> SearchCriteria:
        """Return a copy with *name* set to *value*."""
        search_field = _coerce_field(name)
        if not isinstance(value, str):
            raise TypeError(
                f"{search_field.value} expects a str, got {type(value).__name__}"
            )
        return replace(self, **{search_field.value: value})

    def get(self, name: SearchField | str) -> str:
        return getattr(self, _coerce_field(name).value)

    def to_dict(self) -> dict[str, str]:
        return {f.value: getattr(self, f.value) for f in SearchField}

    @property
    def is_empty(self) -> bool:
        return not any(self.to_dict().values())


def _coerce_field(name: SearchField | str) -> SearchField:
    if isinstance(name, SearchField):
        return name
    try:
        return SearchField(name)
    except ValueError:
        raise UnknownFieldError(str(name)) from None


# ---------------------------------------------------------------------------
# CompanyCandidate
# ---------------------------------------------------------------------------

RECORD_KEYS: tuple[str, ...] = (
    "company_name",
    "purchase_price",
    "location",
    "expected_growth",
    "industry",
)


@dataclass(frozen=True)
class CompanyCandidate:
    """One acquisition target returned by the generative service."""

    name: str = ""
    purchase_price: str = ""
    location: str = ""
    expected_growth: str = ""
    industry: str = ""

    @classmethod
    def from_record(cls, record: Any) -> CompanyCandidate:
        """Build a candidate from one service record.

        Missing keys read as ``""`` and scalar values are stringified; the
        record itself must be a mapping.
        """
        if not isinstance(record, Mapping):
            raise ResponseFormatError(
                f"Expected a JSON object per company, got {type(record).__name__}",
                payload_type=type(record).__name__,
            )
        values = [_as_text(record.get(key)) for key in RECORD_KEYS]
        return cls(*values)

    def to_record(self) -> dict[str, str]:
        """Inverse of :meth:`from_record`, keyed the way the service answers."""
        return dict(
            zip(
                RECORD_KEYS,
                (
                    self.name,
                    self.purchase_price,
                    self.location,
                    self.expected_growth,
                    self.industry,
                ),
            )
        )


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (Mapping, list, tuple)):
        raise ResponseFormatError(
            f"Expected a scalar field value, got {type(value).__name__}",
            payload_type=type(value).__name__,
        )
    return str(value)


# ---------------------------------------------------------------------------
# SearchLifecycle
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Idle:
    """No search has been submitted yet."""

    status = LifecycleStatus.IDLE

    @property
    def results(self) -> tuple[CompanyCandidate, ...]:
        return ()


@dataclass(frozen=True)
class InFlight:
    """A request is outstanding; results are always empty here."""

    status = LifecycleStatus.IN_FLIGHT

    @property
    def results(self) -> tuple[CompanyCandidate, ...]:
        return ()


@dataclass(frozen=True)
class Resolved:
    """The last request succeeded; *results* keep the service's order."""

    results: tuple[CompanyCandidate, ...] = ()
    status = LifecycleStatus.RESOLVED


@dataclass(frozen=True)
class Failed:
    """The last request failed; results are cleared."""

    error: str = ""
    error_type: str = ""
    status = LifecycleStatus.FAILED

    @property
    def results(self) -> tuple[CompanyCandidate, ...]:
        return ()


SearchLifecycle = Union[Idle, InFlight, Resolved, Failed]
