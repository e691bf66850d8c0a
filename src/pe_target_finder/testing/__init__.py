"""Public testing utilities for PE Target Finder.

Provides a mock chat model for writing self-contained examples and tests
without requiring API keys.
"""

from pe_target_finder.testing.mock_llm import MockJsonChatModel, sample_records

__all__ = ["MockJsonChatModel", "sample_records"]
