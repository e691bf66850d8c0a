"""Tests for domain value objects."""

from __future__ import annotations

import dataclasses

import pytest

from pe_target_finder.domain.enums import AuthEvent, LifecycleStatus, SearchField
from pe_target_finder.domain.exceptions import ResponseFormatError, UnknownFieldError
from pe_target_finder.domain.values import (
    CompanyCandidate,
    Failed,
    Identity,
    Idle,
    InFlight,
    Resolved,
    SearchCriteria,
)


class TestIdentity:

    def test_requires_user_id(self) -> None:
        with pytest.raises(ValueError, match="user_id"):
            Identity(user_id="")

    def test_frozen(self, identity: Identity) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            identity.email = "other@example.com"  # type: ignore[misc]


class TestSearchCriteria:

    def test_defaults_are_empty(self) -> None:
        criteria = SearchCriteria()
        assert criteria.is_empty
        assert criteria.to_dict() == {f.value: "" for f in SearchField}

    def test_with_field_accepts_enum_and_name(self) -> None:
        criteria = SearchCriteria().with_field(SearchField.LOCATION, "Texas")
        criteria = criteria.with_field("industry", "Healthcare")
        assert criteria.location == "Texas"
        assert criteria.industry == "Healthcare"
        assert criteria.get("location") == "Texas"

    def test_with_field_returns_copy(self) -> None:
        original = SearchCriteria()
        updated = original.with_field("location", "Ohio")
        assert original.location == ""
        assert updated.location == "Ohio"

    def test_empty_string_unsets(self) -> None:
        criteria = SearchCriteria(location="Texas").with_field("location", "")
        assert criteria.location == ""

    def test_unknown_field(self) -> None:
        with pytest.raises(UnknownFieldError, match="revenue"):
            SearchCriteria().with_field("revenue", "10")

    def test_non_string_value_rejected(self) -> None:
        with pytest.raises(TypeError):
            SearchCriteria().with_field("minimum_price", 100)  # type: ignore[arg-type]

    def test_min_above_max_is_kept(self) -> None:
        criteria = SearchCriteria(minimum_price="9000000", maximum_price="100")
        assert criteria.minimum_price == "9000000"
        assert criteria.maximum_price == "100"


class TestCompanyCandidate:

    def test_from_record(self, records: list[dict[str, str]]) -> None:
        candidate = CompanyCandidate.from_record(records[0])
        assert candidate.name == "Lone Star Home Health"
        assert candidate.purchase_price == "$3,200,000"
        assert candidate.expected_growth == "12"
        assert candidate.to_record() == records[0]

    def test_missing_keys_read_as_empty(self) -> None:
        candidate = CompanyCandidate.from_record({"company_name": "Acme"})
        assert candidate.name == "Acme"
        assert candidate.location == ""
        assert candidate.industry == ""

    def test_scalars_are_stringified(self) -> None:
        candidate = CompanyCandidate.from_record(
            {"company_name": "Acme", "purchase_price": 2500000, "expected_growth": 12.5}
        )
        assert candidate.purchase_price == "2500000"
        assert candidate.expected_growth == "12.5"

    def test_non_mapping_record(self) -> None:
        with pytest.raises(ResponseFormatError):
            CompanyCandidate.from_record(["Acme", "$1"])

    def test_nested_value_rejected(self) -> None:
        with pytest.raises(ResponseFormatError):
            CompanyCandidate.from_record({"company_name": {"legal": "Acme LLC"}})


class TestLifecycleVariants:

    def test_status_tags(self) -> None:
        assert Idle().status is LifecycleStatus.IDLE
        assert InFlight().status is LifecycleStatus.IN_FLIGHT
        assert Resolved().status is LifecycleStatus.RESOLVED
        assert Failed().status is LifecycleStatus.FAILED

    def test_only_resolved_carries_results(self) -> None:
        candidate = CompanyCandidate(name="Acme")
        assert Resolved(results=(candidate,)).results == (candidate,)
        assert Idle().results == ()
        assert InFlight().results == ()
        assert Failed(error="boom").results == ()


class TestAuthEventParse:

    def test_parse_member_name_and_value(self) -> None:
        assert AuthEvent.parse(AuthEvent.SIGNED_IN) is AuthEvent.SIGNED_IN
        assert AuthEvent.parse("SIGNED_OUT") is AuthEvent.SIGNED_OUT
        assert AuthEvent.parse("token_refreshed") is AuthEvent.TOKEN_REFRESHED

    def test_parse_unknown(self) -> None:
        with pytest.raises(ValueError):
            AuthEvent.parse("SOMETHING_ELSE")
