"""The check report: the ledger grouped by account, day and venue."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ledger.date import format_date
from ledger.filter import Filter
from ledger.money import Money
from ledger.records import Line, Mode
from ledger.resource import Resource


@dataclass
class CheckItem:
    """Amount spent on one account, on one day, at one venue or category."""

    account: str
    date: date
    identifier: str
    amount: Money = field(compare=False)

    @classmethod
    def from_line(cls, line: Line) -> CheckItem:
        """Identify the line by its venue, or by its category when it has none."""
        identifier = line.venue if line.venue else line.category
        return cls(
            account=line.account,
            date=line.date,
            identifier=identifier,
            amount=line.amount,
        )


@dataclass
class CheckReport:
    """Consecutive lines sharing account, day and identifier, summed together."""

    items: list[CheckItem] = field(default_factory=list)

    @classmethod
    def build(cls, config: Any, filter: Filter) -> CheckReport:
        """Group the ledger lines within ``filter`` and order them by account."""
        report = cls()
        current: CheckItem | None = None
        with Resource.from_config(config, Mode.LEDGER) as resource:
            for record in resource.lines():
                if not filter.within(record.date):
                    continue
                item = CheckItem.from_line(record)
                if current is not None and current == item:
                    current.amount = current.amount + item.amount
                    continue
                if current is not None:
                    report.items.append(current)
                current = item
        if current is not None:
            report.items.append(current)
        report.items.sort(key=lambda entry: entry.account)
        return report

    def display(self) -> None:
        """Print the grouped lines."""
        table = Table(
            title="Report",
            title_style="bold cyan",
            show_header=False,
            box=None,
            padding=(0, 3, 0, 2),
        )
        table.add_row(
            Text("Account", style="bold bright_blue", justify="center"),
            Text("Date", style="bold bright_blue", justify="center"),
            Text("Identifier", style="bold bright_blue", justify="center"),
            Text("Amount", style="bold bright_blue"),
        )
        for item in self.items:
            table.add_row(
                Text(item.account, style="bold bright_white"),
                Text(format_date(item.date), style="bold bright_white"),
                Text(item.identifier, style="bold bright_white"),
                Text(str(item.amount), style="bold bright_white"),
            )
        Console().print(table)