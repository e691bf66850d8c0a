"""Prompt construction and result interpretation for company searches.

``build_search_prompt`` is deterministic: the same criteria always yield the
same text, and every field is embedded verbatim, including empty ones.
``parse_candidates`` turns whatever the generative service returned into an
ordered tuple of :class:`CompanyCandidate`, or raises
:class:`ResponseFormatError`.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from pe_target_finder.domain.exceptions import ResponseFormatError
from pe_target_finder.domain.values import RECORD_KEYS, CompanyCandidate, SearchCriteria

logger = logging.getLogger(__name__)

TARGET_COUNT = 3

_SEARCH_PROMPT = (
    "Provide the top {count} target companies to buy based on the following criteria:\n"
    "- Purchase Price Range: ${minimum_price} to ${maximum_price}\n"
    "- Location: {location}\n"
    "- Growth Target Percentage: {growth_target_percent}%\n"
    "- Industry: {industry}\n"
    "Return the response as a JSON array of exactly {count} objects "
    "with the following structure:\n"
    "{structure}"
)


def _record_structure() -> str:
    return json.dumps({key: "" for key in RECORD_KEYS}, indent=2)


def build_search_prompt(criteria: SearchCriteria) -> str:
    """Render the natural-language search prompt for *criteria*."""
    return _SEARCH_PROMPT.format(
        count=TARGET_COUNT,
        structure=_record_structure(),
        **criteria.to_dict(),
    )


def parse_candidates(payload: Any) -> tuple[CompanyCandidate, ...]:
    """Interpret a service payload as an ordered sequence of candidates.

    Accepted shapes: a list of objects; an object wrapping that list under a
    single list-valued key (what JSON-mode models tend to return); or a JSON
    string holding either.  Order is preserved and nothing is truncated.
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise ResponseFormatError(
                f"Service reply is not valid JSON: {exc}", payload_type="text"
            ) from exc

    if isinstance(payload, Mapping):
        lists = [value for value in payload.values() if isinstance(value, list)]
        if len(lists) != 1:
            raise ResponseFormatError(
                "Expected a JSON array of companies, got an object",
                payload_type="object",
                details={"keys": sorted(str(k) for k in payload)},
            )
        payload = lists[0]

    if not isinstance(payload, list):
        raise ResponseFormatError(
            f"Expected a JSON array of companies, got {type(payload).__name__}",
            payload_type=type(payload).__name__,
        )

    candidates = tuple(CompanyCandidate.from_record(record) for record in payload)
    if len(candidates) != TARGET_COUNT:
        logger.info(
            "parse_candidates: service returned %d companies (asked for %d)",
            len(candidates),
            TARGET_COUNT,
        )
    return candidates
