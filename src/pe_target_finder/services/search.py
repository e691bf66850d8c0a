"""Search orchestrator: form state, request lifecycle and result set.

The lifecycle is an explicit state machine driven by :func:`reduce_lifecycle`::

    Idle ──Submit──▶ InFlight ──Succeed──▶ Resolved(results)
      ▲                 │
      │                 └────Fail──────▶ Failed
      └── Resolved / Failed ──Submit──▶ InFlight

At most one request is in flight: ``submit_search`` while ``InFlight`` is a
no-op.  Every submission leaves ``InFlight`` once the service call returns or
raises, and failures never propagate to the caller.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass

from pe_target_finder.domain.enums import SearchField
from pe_target_finder.domain.events import SearchFailed, SearchResolved, SearchStarted
from pe_target_finder.domain.exceptions import LifecycleTransitionError
from pe_target_finder.domain.values import (
    CompanyCandidate,
    Failed,
    Idle,
    InFlight,
    Resolved,
    SearchCriteria,
    SearchLifecycle,
)
from pe_target_finder.infrastructure.event_bus import EventBus
from pe_target_finder.infrastructure.generative import DEFAULT_REQUEST_KIND, GenerativeService
from pe_target_finder.services.prompts import build_search_prompt, parse_candidates

logger = logging.getLogger(__name__)


# -- Lifecycle actions -------------------------------------------------------


@dataclass(frozen=True)
class Submit:
    """A search was submitted."""


@dataclass(frozen=True)
class Succeed:
    """The service answered with *results*."""

    results: tuple[CompanyCandidate, ...] = ()


@dataclass(frozen=True)
class Fail:
    """The service call failed."""

    error: str = ""
    error_type: str = ""


LifecycleAction = Submit | Succeed | Fail


def reduce_lifecycle(state: SearchLifecycle, action: LifecycleAction) -> SearchLifecycle:
    """Return the lifecycle state after *action*.

    Raises
    ------
    LifecycleTransitionError
        For ``Submit`` while in flight, or ``Succeed``/``Fail`` while not.
    """
    in_flight = isinstance(state, InFlight)
    if isinstance(action, Submit):
        if in_flight:
            raise LifecycleTransitionError(
                "A search is already in flight",
                state=state.status.value,
                action="submit",
            )
        return InFlight()
    if not in_flight:
        raise LifecycleTransitionError(
            f"No search in flight to {type(action).__name__.lower()}",
            state=state.status.value,
            action=type(action).__name__.lower(),
        )
    if isinstance(action, Succeed):
        return Resolved(results=tuple(action.results))
    if isinstance(action, Fail):
        return Failed(error=action.error, error_type=action.error_type)
    raise LifecycleTransitionError(
        f"Unknown lifecycle action {action!r}", state=state.status.value
    )


# -- SearchOrchestrator ------------------------------------------------------


class SearchOrchestrator:
    """Owns the search form, the request lifecycle and the rendered results.

    Parameters
    ----------
    service:
        The generative service that answers search prompts.
    bus:
        Event bus on which :class:`SearchStarted`, :class:`SearchResolved` and
        :class:`SearchFailed` are published.
    request_kind:
        Request kind passed to the service.
    """

    def __init__(
        self,
        service: GenerativeService,
        bus: EventBus | None = None,
        request_kind: str = DEFAULT_REQUEST_KIND,
        source_id: str = "search",
    ) -> None:
        self._service = service
        self._bus = bus or EventBus()
        self._request_kind = request_kind
        self._source_id = source_id
        self._criteria = SearchCriteria()
        self._lifecycle: SearchLifecycle = Idle()
        self._last_prompt = ""
        self._dispatch_count = 0

    # -- read-only surface --------------------------------------------------

    @property
    def criteria(self) -> SearchCriteria:
        return self._criteria

    @property
    def lifecycle(self) -> SearchLifecycle:
        return self._lifecycle

    @property
    def results(self) -> tuple[CompanyCandidate, ...]:
        return self._lifecycle.results

    @property
    def is_loading(self) -> bool:
        return isinstance(self._lifecycle, InFlight)

    @property
    def last_prompt(self) -> str:
        return self._last_prompt

    @property
    def dispatch_count(self) -> int:
        return self._dispatch_count

    @property
    def bus(self) -> EventBus:
        return self._bus

    # -- operations ---------------------------------------------------------

    def update_field(self, field: SearchField | str, value: str) -> SearchCriteria:
        """Assign *value* to *field*; ``""`` unsets it. No validation."""
        self._criteria = self._criteria.with_field(field, value)
        return self._criteria

    def update_fields(self, values: dict[str, str]) -> SearchCriteria:
        for name, value in values.items():
            self.update_field(name, value)
        return self._criteria

    async def submit_search(self) -> SearchLifecycle:
        """Run one search and return the terminal lifecycle state.

        While a search is already in flight this returns immediately without
        dispatching.
        """
        if isinstance(self._lifecycle, InFlight):
            logger.warning("SearchOrchestrator: search already in flight, ignoring submit")
            return self._lifecycle

        self._lifecycle = reduce_lifecycle(self._lifecycle, Submit())
        criteria = self._criteria
        started = time.perf_counter()
        try:
            prompt = build_search_prompt(criteria)
            self._last_prompt = prompt
            logger.info("SearchOrchestrator: search in flight")
            logger.debug("SearchOrchestrator: prompt=%r", prompt)
            self._bus.publish(
                SearchStarted(source_id=self._source_id, criteria=criteria, prompt=prompt)
            )

            self._dispatch_count += 1
            payload = await self._service.request(
                self._request_kind, {"prompt": prompt, "response_type": "json"}
            )
            results = parse_candidates(payload)
        except Exception as exc:
            logger.exception("SearchOrchestrator: error fetching companies")
            self._finish_failed(str(exc), type(exc).__name__, started)
        else:
            self._lifecycle = reduce_lifecycle(self._lifecycle, Succeed(results))
            elapsed_ms = (time.perf_counter() - started) * 1000.0
            logger.info(
                "SearchOrchestrator: resolved with %d companies in %.0f ms",
                len(results),
                elapsed_ms,
            )
            self._bus.publish(
                SearchResolved(
                    source_id=self._source_id, results=results, elapsed_ms=elapsed_ms
                )
            )
        finally:
            if isinstance(self._lifecycle, InFlight):
                # Cancellation or another BaseException escaped the call.
                self._finish_failed("search interrupted", "CancelledError", started)
        return self._lifecycle

    def _finish_failed(self, error: str, error_type: str, started: float) -> None:
        self._lifecycle = reduce_lifecycle(self._lifecycle, Fail(error, error_type))
        self._bus.publish(
            SearchFailed(
                source_id=self._source_id,
                error=error,
                error_type=error_type,
                elapsed_ms=(time.perf_counter() - started) * 1000.0,
            )
        )

    def __repr__(self) -> str:
        return (
            f"SearchOrchestrator(lifecycle={self._lifecycle.status.value}, "
            f"results={len(self.results)})"
        )


def candidates_to_records(candidates: Sequence[CompanyCandidate]) -> list[dict[str, str]]:
    """Serialize candidates back into service-shaped records."""
    return [candidate.to_record() for candidate in candidates]
