"""Presentation layer: console rendering of the login and search views."""

from pe_target_finder.presentation.console import ConsoleView, submit_label

__all__ = ["ConsoleView", "submit_label"]
