"""Tests for the search orchestrator and its lifecycle reducer."""

from __future__ import annotations

import asyncio

import pytest

from pe_target_finder.domain.enums import LifecycleStatus, SearchField
from pe_target_finder.domain.events import (
    DomainEvent,
    SearchFailed,
    SearchResolved,
    SearchStarted,
)
from pe_target_finder.domain.exceptions import (
    LifecycleTransitionError,
    SearchDispatchError,
    UnknownFieldError,
)
from pe_target_finder.domain.values import (
    CompanyCandidate,
    Failed,
    Idle,
    InFlight,
    Resolved,
    SearchCriteria,
)
from pe_target_finder.infrastructure.event_bus import EventBus
from pe_target_finder.infrastructure.generative import ChatModelGenerativeService
from pe_target_finder.services.search import (
    Fail,
    SearchOrchestrator,
    Submit,
    Succeed,
    candidates_to_records,
    reduce_lifecycle,
)
from tests.helpers.fake_services import ScriptedService
from tests.helpers.mock_llm import MockJsonChatModel


def _fill(orchestrator: SearchOrchestrator, criteria: SearchCriteria) -> None:
    orchestrator.update_fields(criteria.to_dict())


# ---------------------------------------------------------------------------
# reduce_lifecycle
# ---------------------------------------------------------------------------


class TestReduceLifecycle:

    def test_submit_from_any_settled_state(self) -> None:
        for state in (Idle(), Resolved(), Failed(error="x")):
            assert isinstance(reduce_lifecycle(state, Submit()), InFlight)

    def test_submit_while_in_flight_rejected(self) -> None:
        with pytest.raises(LifecycleTransitionError) as info:
            reduce_lifecycle(InFlight(), Submit())
        assert info.value.state == "in_flight"
        assert info.value.action == "submit"

    def test_succeed_and_fail(self) -> None:
        candidate = CompanyCandidate(name="Acme")
        resolved = reduce_lifecycle(InFlight(), Succeed((candidate,)))
        failed = reduce_lifecycle(InFlight(), Fail("down", "ConnectionError"))

        assert resolved == Resolved(results=(candidate,))
        assert failed == Failed(error="down", error_type="ConnectionError")
        assert failed.results == ()

    @pytest.mark.parametrize("state", [Idle(), Resolved(), Failed()])
    def test_outcome_without_request_rejected(self, state: object) -> None:
        with pytest.raises(LifecycleTransitionError):
            reduce_lifecycle(state, Succeed())  # type: ignore[arg-type]
        with pytest.raises(LifecycleTransitionError):
            reduce_lifecycle(state, Fail())  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Form state
# ---------------------------------------------------------------------------


class TestFormState:

    def test_initial_state(self, scripted_service: ScriptedService) -> None:
        orchestrator = SearchOrchestrator(scripted_service)
        assert orchestrator.criteria == SearchCriteria()
        assert isinstance(orchestrator.lifecycle, Idle)
        assert orchestrator.results == ()
        assert not orchestrator.is_loading

    def test_update_field_accepts_names_and_enums(
        self, scripted_service: ScriptedService
    ) -> None:
        orchestrator = SearchOrchestrator(scripted_service)
        orchestrator.update_field("location", "Texas")
        orchestrator.update_field(SearchField.INDUSTRY, "Healthcare")
        orchestrator.update_field("location", "")

        assert orchestrator.criteria == SearchCriteria(industry="Healthcare")

    def test_unknown_field_rejected(self, scripted_service: ScriptedService) -> None:
        orchestrator = SearchOrchestrator(scripted_service)
        with pytest.raises(UnknownFieldError):
            orchestrator.update_field("revenue", "10")

    def test_no_validation(self, scripted_service: ScriptedService) -> None:
        orchestrator = SearchOrchestrator(scripted_service)
        orchestrator.update_fields({"minimum_price": "9000000", "maximum_price": "1"})
        assert orchestrator.criteria.minimum_price == "9000000"


# ---------------------------------------------------------------------------
# submit_search
# ---------------------------------------------------------------------------


class TestSubmitSearch:

    @pytest.mark.asyncio
    async def test_successful_search(
        self,
        texas_criteria: SearchCriteria,
        records: list[dict[str, str]],
    ) -> None:
        service = ScriptedService(response=records)
        bus = EventBus()
        events: list[DomainEvent] = []
        bus.subscribe_all(events.append)
        orchestrator = SearchOrchestrator(service, bus=bus)
        _fill(orchestrator, texas_criteria)

        lifecycle = await orchestrator.submit_search()

        assert isinstance(lifecycle, Resolved)
        assert [c.name for c in orchestrator.results] == [
            "Lone Star Home Health",
            "Gulf Coast Imaging Partners",
            "Panhandle Physical Therapy",
        ]
        assert orchestrator.results[0].expected_growth == "12"

        kind, payload = service.calls[0]
        assert kind == "chatgpt_request"
        assert payload["response_type"] == "json"
        assert "Location: Texas" in payload["prompt"]
        assert payload["prompt"] == orchestrator.last_prompt

        assert [type(e) for e in events] == [SearchStarted, SearchResolved]
        assert events[0].criteria == texas_criteria  # type: ignore[attr-defined]
        assert events[1].elapsed_ms >= 0  # type: ignore[attr-defined]

    @pytest.mark.asyncio
    async def test_in_flight_state_observable(self, records: list[dict[str, str]]) -> None:
        release = asyncio.Event()
        orchestrator = SearchOrchestrator(ScriptedService(response=records, release=release))

        task = asyncio.create_task(orchestrator.submit_search())
        await asyncio.sleep(0)

        assert orchestrator.is_loading
        assert orchestrator.lifecycle.status is LifecycleStatus.IN_FLIGHT
        assert orchestrator.results == ()

        release.set()
        await task
        assert not orchestrator.is_loading
        assert len(orchestrator.results) == 3

    @pytest.mark.asyncio
    async def test_second_submit_while_in_flight_ignored(
        self, records: list[dict[str, str]]
    ) -> None:
        release = asyncio.Event()
        service = ScriptedService(response=records, release=release)
        orchestrator = SearchOrchestrator(service)
        orchestrator.update_field("industry", "Healthcare")

        first = asyncio.create_task(orchestrator.submit_search())
        await asyncio.sleep(0)
        criteria_before = orchestrator.criteria

        second = await orchestrator.submit_search()

        assert isinstance(second, InFlight)
        assert len(service.calls) == 1
        assert orchestrator.dispatch_count == 1
        assert orchestrator.criteria == criteria_before

        release.set()
        assert isinstance(await first, Resolved)

    @pytest.mark.asyncio
    async def test_service_failure_clears_results(
        self, records: list[dict[str, str]]
    ) -> None:
        service = ScriptedService(response=records)
        bus = EventBus()
        failures: list[DomainEvent] = []
        bus.subscribe(SearchFailed, failures.append)
        orchestrator = SearchOrchestrator(service, bus=bus)

        await orchestrator.submit_search()
        assert len(orchestrator.results) == 3

        service.error = SearchDispatchError("service unavailable")
        lifecycle = await orchestrator.submit_search()

        assert isinstance(lifecycle, Failed)
        assert lifecycle.error_type == "SearchDispatchError"
        assert orchestrator.results == ()
        assert not orchestrator.is_loading
        assert len(failures) == 1

    @pytest.mark.asyncio
    async def test_malformed_payload_fails(self) -> None:
        orchestrator = SearchOrchestrator(ScriptedService(response={"error": "quota"}))
        lifecycle = await orchestrator.submit_search()
        assert isinstance(lifecycle, Failed)
        assert lifecycle.error_type == "ResponseFormatError"

    @pytest.mark.asyncio
    async def test_resubmit_after_failure(self, records: list[dict[str, str]]) -> None:
        service = ScriptedService(error=ConnectionError("offline"))
        orchestrator = SearchOrchestrator(service)

        assert isinstance(await orchestrator.submit_search(), Failed)
        service.error = None
        service.response = records
        assert isinstance(await orchestrator.submit_search(), Resolved)
        assert orchestrator.dispatch_count == 2

    @pytest.mark.asyncio
    async def test_extra_results_kept_in_order(
        self, records: list[dict[str, str]]
    ) -> None:
        five = records + [
            {"company_name": "Fourth"},
            {"company_name": "Fifth"},
        ]
        orchestrator = SearchOrchestrator(ScriptedService(response=five))
        await orchestrator.submit_search()
        assert [c.name for c in orchestrator.results][-2:] == ["Fourth", "Fifth"]
        assert len(orchestrator.results) == 5

    @pytest.mark.asyncio
    async def test_empty_criteria_still_dispatched(self) -> None:
        service = ScriptedService(response=[])
        orchestrator = SearchOrchestrator(service)
        lifecycle = await orchestrator.submit_search()
        assert isinstance(lifecycle, Resolved)
        assert lifecycle.results == ()
        assert "Industry: " in service.prompts[0]

    @pytest.mark.asyncio
    async def test_cancellation_leaves_failed(self) -> None:
        release = asyncio.Event()
        orchestrator = SearchOrchestrator(ScriptedService(release=release))

        task = asyncio.create_task(orchestrator.submit_search())
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert isinstance(orchestrator.lifecycle, Failed)
        assert orchestrator.lifecycle.error_type == "CancelledError"
        assert not orchestrator.is_loading

    @pytest.mark.asyncio
    async def test_edits_during_flight_do_not_change_prompt(
        self, records: list[dict[str, str]]
    ) -> None:
        release = asyncio.Event()
        service = ScriptedService(response=records, release=release)
        orchestrator = SearchOrchestrator(service)
        orchestrator.update_field("location", "Texas")

        task = asyncio.create_task(orchestrator.submit_search())
        await asyncio.sleep(0)
        orchestrator.update_field("location", "Ohio")
        release.set()
        await task

        assert "Location: Texas" in service.prompts[0]
        assert orchestrator.criteria.location == "Ohio"

    @pytest.mark.asyncio
    async def test_with_mock_chat_model(
        self, texas_criteria: SearchCriteria, records: list[dict[str, str]]
    ) -> None:
        model = MockJsonChatModel(responses=[{"companies": records}])
        orchestrator = SearchOrchestrator(ChatModelGenerativeService(model))
        _fill(orchestrator, texas_criteria)

        await orchestrator.submit_search()

        assert candidates_to_records(orchestrator.results) == records
        assert model.prompts == [orchestrator.last_prompt]
