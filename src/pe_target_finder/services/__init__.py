"""Application services: the session gate, the search orchestrator and the
prompt contract between them and the generative service."""

from pe_target_finder.services.prompts import (
    TARGET_COUNT,
    build_search_prompt,
    parse_candidates,
)
from pe_target_finder.services.search import (
    Fail,
    SearchOrchestrator,
    Submit,
    Succeed,
    candidates_to_records,
    reduce_lifecycle,
)
from pe_target_finder.services.session_gate import SessionGate, reduce_session

__all__ = [
    "TARGET_COUNT",
    "Fail",
    "SearchOrchestrator",
    "SessionGate",
    "Submit",
    "Succeed",
    "build_search_prompt",
    "candidates_to_records",
    "parse_candidates",
    "reduce_lifecycle",
    "reduce_session",
]
