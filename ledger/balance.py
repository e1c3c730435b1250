"""The balance command: current balance of every account."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ledger.exchange import Exchange
from ledger.filter import Filter
from ledger.money import Money, RateSource
from ledger.records import Mode
from ledger.resource import Resource
from ledger.total import Total
from ledger.util import money_cell


@dataclass(frozen=True)
class BalanceItem:
    """Balance of one account."""

    account: str
    value: Money

    def __add__(self, other: BalanceItem) -> BalanceItem:
        return BalanceItem(self.account, self.value + other.value)


@dataclass
class BalanceReport:
    """Balances of every account, keyed by account name."""

    items: dict[str, BalanceItem] = field(default_factory=dict)

    @classmethod
    def build(
        cls, total: Total, config: Any, exchange: RateSource, filter: Filter
    ) -> BalanceReport:
        """Sum the ledger per account within ``filter``, feeding ``total`` with every line."""
        report = cls()
        with Resource.from_config(config, Mode.LEDGER) as resource:
            for record in resource.lines():
                total.sum(record, exchange)
                if filter.within(record.date):
                    report.add(BalanceItem(record.account, record.amount))
        return report

    def add(self, item: BalanceItem) -> None:
        existing = self.items.get(item.account)
        self.items[item.account] = item if existing is None else existing + item

    def display(self, show_all: bool) -> None:
        """Print the balances, leaving out empty accounts unless ``show_all``."""
        table = Table(
            title="Balance",
            title_style="bold cyan",
            show_header=False,
            box=None,
            padding=(0, 5, 0, 3),
        )
        table.add_row(
            Text("Account", style="bold bright_blue", justify="right"),
            Text("Amount", style="bold bright_blue", justify="left"),
        )
        for account in sorted(self.items):
            item = self.items[account]
            if show_all or not item.value.is_zero:
                table.add_row(
                    Text(item.account, style="bold bright_white", justify="right"),
                    money_cell(item.value, False, False, "left"),
                )
        Console().print(table)


def display_summary(total: Total) -> None:
    """Print the overall total."""
    table = Table(
        title="Totals",
        title_style="bold cyan",
        show_header=False,
        box=None,
        padding=(0, 10, 0, 15),
    )
    table.add_row(Text(str(total.amount()), style="bold bright_blue", justify="right"))
    Console().print(table)


def show_balance(config: Any, date: date | None, show_all: bool) -> None:
    """Print the balance of every account as of ``date`` and the overall total."""
    exchange = Exchange.load(config)
    filter_ = Filter(end=date)
    total = Total(config.currency, config, filter_.end)
    report = BalanceReport.build(total, config, exchange, filter_)
    report.display(show_all)
    display_summary(total)