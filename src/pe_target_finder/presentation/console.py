"""Rich-based console rendering of the two top-level views.

:class:`ConsoleView` draws either the login panel or the search page: the
five labelled form fields, the submit action (``Loading...`` while a search
is in flight), the result cards when there is at least one candidate, and the
sign-out action.  A failed search shows no banner, only the absence of
results.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from pe_target_finder.domain.enums import SearchField, View
from pe_target_finder.domain.values import (
    CompanyCandidate,
    Identity,
    InFlight,
    SearchCriteria,
    SearchLifecycle,
)
from pe_target_finder.services.prompts import TARGET_COUNT

APP_TITLE = "Private Equity Target Finder"

FIELD_LABELS: dict[SearchField, str] = {
    SearchField.MINIMUM_PRICE: "Minimum Purchase Price ($)",
    SearchField.MAXIMUM_PRICE: "Maximum Purchase Price ($)",
    SearchField.LOCATION: "Location",
    SearchField.GROWTH_TARGET_PERCENT: "Growth Target Percentage (%)",
    SearchField.INDUSTRY: "Industry",
}


def submit_label(lifecycle: SearchLifecycle) -> str:
    """Label of the submit action for *lifecycle*."""
    return "Loading..." if isinstance(lifecycle, InFlight) else "Find Target Companies"


class ConsoleView:
    """Console presentation of the application views.

    Parameters
    ----------
    file:
        Output stream.  Defaults to ``sys.stdout``.
    width:
        Fixed console width; ``None`` lets rich detect it.
    """

    def __init__(self, file: Any = None, width: int | None = None) -> None:
        self._file = file or sys.stdout
        self._console = Console(file=self._file, width=width, highlight=False)

    @property
    def console(self) -> Console:
        return self._console

    # -- public API --------------------------------------------------------

    def render(
        self,
        view: View,
        criteria: SearchCriteria | None = None,
        lifecycle: SearchLifecycle | None = None,
        identity: Identity | None = None,
    ) -> None:
        """Render *view*; the search arguments are only read for ``HOME_PAGE``."""
        if view is View.LOGIN:
            self.render_login()
            return
        self.render_header(identity)
        self.render_form(criteria or SearchCriteria(), lifecycle)
        if lifecycle is not None:
            self.render_results(lifecycle.results)

    def render_login(self) -> None:
        self._console.print(
            Panel(
                "You are signed out.\n"
                "Sign in with your identity provider to search for target companies.",
                title="Sign in",
                expand=False,
            )
        )

    def render_header(self, identity: Identity | None = None) -> None:
        who = f"  [dim]{escape(identity.email)}[/dim]" if identity and identity.email else ""
        self._console.print(f"[bold]{APP_TITLE}[/bold]{who}")
        self._console.print("[red]\\[Sign Out][/red]")

    def render_form(
        self,
        criteria: SearchCriteria,
        lifecycle: SearchLifecycle | None = None,
    ) -> None:
        table = Table(show_header=False, box=None, pad_edge=False)
        table.add_column("Field", style="bold")
        table.add_column("Value")
        for search_field, label in FIELD_LABELS.items():
            table.add_row(label, escape(criteria.get(search_field)))
        self._console.print(table)

        label = submit_label(lifecycle) if lifecycle is not None else "Find Target Companies"
        style = "dim" if label == "Loading..." else "bold blue"
        self._console.print(f"[{style}]\\[{label}][/{style}]")

    def render_results(self, results: Sequence[CompanyCandidate]) -> None:
        """Render the result cards; renders nothing for an empty sequence."""
        if not results:
            return
        self._console.print()
        self._console.print(f"[bold]Top {TARGET_COUNT} Target Companies[/bold]")
        for company in results:
            self._console.print(self._company_panel(company))

    # -- helpers -----------------------------------------------------------

    @staticmethod
    def _company_panel(company: CompanyCandidate) -> Panel:
        body = "\n".join(
            [
                f"[bold]Purchase Price:[/bold] {escape(company.purchase_price)}",
                f"[bold]Location:[/bold] {escape(company.location)}",
                f"[bold]Expected Growth:[/bold] {escape(company.expected_growth)}%",
                f"[bold]Industry:[/bold] {escape(company.industry)}",
            ]
        )
        return Panel(body, title=escape(company.name), title_align="left")
