"""Shared fixtures for the PE Target Finder test suite."""

from __future__ import annotations

import pytest

from pe_target_finder.domain.values import Identity, SearchCriteria
from pe_target_finder.infrastructure.event_bus import EventBus
from pe_target_finder.infrastructure.identity import InMemoryIdentityProvider
from pe_target_finder.testing.mock_llm import sample_records
from tests.helpers.fake_services import ScriptedService

# ---------------------------------------------------------------------------
# Value-object fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def identity() -> Identity:
    """A signed-in analyst."""
    return Identity(user_id="user-1", email="analyst@example.com")


@pytest.fixture
def texas_criteria() -> SearchCriteria:
    """The Texas healthcare search."""
    return SearchCriteria(
        minimum_price="1000000",
        maximum_price="5000000",
        location="Texas",
        growth_target_percent="10",
        industry="Healthcare",
    )


@pytest.fixture
def records() -> list[dict[str, str]]:
    """Three well-formed service records."""
    return sample_records()


# ---------------------------------------------------------------------------
# Infrastructure fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def signed_out_provider() -> InMemoryIdentityProvider:
    return InMemoryIdentityProvider()


@pytest.fixture
def signed_in_provider(identity: Identity) -> InMemoryIdentityProvider:
    return InMemoryIdentityProvider(identity=identity)


@pytest.fixture
def scripted_service(records: list[dict[str, str]]) -> ScriptedService:
    return ScriptedService(response=records)
