"""PE Target Finder.

An authenticated client that turns a structured private-equity search
(price range, location, growth target, industry) into a prompt for a
generative model and renders the companies it proposes.
"""

__version__ = "0.1.0"

from pe_target_finder.app import TargetFinderApp
from pe_target_finder.services import SearchOrchestrator, SessionGate

__all__ = [
    "SearchOrchestrator",
    "SessionGate",
    "TargetFinderApp",
]
