"""The networth command: a table of holdings, or a history stored on disk."""

from __future__ import annotations

from datetime import date
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ledger.date import today
from ledger.money import Currency, Money, RateSource
from ledger.networth import Networth
from ledger.records import Entry, Line, Mode, write_lines
from ledger.resource import Resource
from ledger.util import money_cell, percentage_cell


def _recolor(cell: Text, color: str) -> Text:
    return Text(cell.plain, style=f"bold {color}", justify=cell.justify)


class NetworthReport:
    """Networth of the ledger expressed in one currency."""

    def __init__(self, config: Any, exchange: RateSource, currency: Currency) -> None:
        self.config = config
        self.exchange = exchange
        self.networth = Networth.load(config, exchange, currency)

    def save(self) -> None:
        """Recompute every entry of the networth file and add today's one."""
        with Resource.from_config(self.config, Mode.NETWORTH) as resource:
            entries = self.entries(resource)
            with resource.editing() as path:
                with open(path, "w", newline="", encoding="utf-8") as handle:
                    write_lines(handle, entries.values())

    def entries(self, resource: Resource) -> dict[date, Line]:
        """One entry per date, the existing ones updated, ordered by date."""
        result: dict[date, Line] = {}
        for record in resource.lines():
            exchanged = record.exchange(self.networth.currency, self.exchange)
            if isinstance(exchanged, Entry):
                exchanged.invested = self.networth.invested_on(exchanged.date)
                exchanged.amount = (
                    self.networth.current_on(exchanged.date) + exchanged.investment
                )
            result.setdefault(exchanged.date, exchanged)

        current = self.networth.current()
        result.setdefault(current.date, current)
        return dict(sorted(result.items()))

    def display(self) -> None:
        """Print the holdings, the cash and the total."""
        total = self.networth.total()
        table = Table(
            title="Networth",
            title_style="bold cyan",
            show_header=False,
            box=None,
            padding=(0, 3, 0, 0),
        )
        table.add_row(
            *(Text(name, style="bold bright_blue", justify="center")
              for name in ("# Shares", "Description", "Amount", "(%)"))
        )

        white = "bright_white"
        for _, investment in sorted(self.networth.investments.items()):
            value = investment.value()
            if value.is_zero:
                continue
            table.add_row(
                Text(str(investment.quantity), style=f"bold {white}", justify="right"),
                Text(investment.name(), style=f"bold {white}"),
                _recolor(money_cell(value, True, False, "left"), white),
                _recolor(percentage_cell(value, total, "left"), white),
            )

        cyan = "bright_cyan"
        cash = self.networth.current_on(today())
        table.add_row(
            Text(""),
            Text("Cash", style=f"bold {cyan}"),
            _recolor(money_cell(cash, True, False, "left"), cyan),
            _recolor(percentage_cell(cash, total, "left"), cyan),
        )

        yellow = "bright_yellow"
        unit = Money(1, self.networth.currency)
        table.add_row(
            Text(""),
            Text("Total", style=f"bold {yellow}"),
            _recolor(money_cell(total, True, False, "left"), yellow),
            _recolor(percentage_cell(unit, unit, "left"), yellow),
        )

        Console().print(table)