"""The general report: income and expenses per category over a period."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ledger.filter import Filter
from ledger.money import Currency, Money, RateSource
from ledger.records import Line, Mode
from ledger.resource import Resource
from ledger.total import Total
from ledger.util import currency as resolve_currency
from ledger.util import money_cell, percentage_cell


def _ratio(dividend: float, divisor: float) -> float:
    if divisor == 0:
        return math.nan if dividend == 0 else math.copysign(math.inf, dividend)
    return dividend / divisor


def _format_percentage(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return f"{value:.2f}"


@dataclass
class GeneralItem:
    """Sum of the amounts of one category."""

    category: str
    value: Money
    occurrences: int = 1

    def __add__(self, other: GeneralItem) -> GeneralItem:
        return GeneralItem(self.category, self.value + other.value, self.occurrences + 1)

    def percentage(self, report: GeneralReport) -> float:
        """Share of the report's income, or of its expenses for outgoing amounts."""
        if self.value.is_positive:
            return _ratio(self.value.cents, report.income) * 100.0
        return _ratio(self.value.cents, report.expense) * 100.0


@dataclass
class GeneralReport:
    """Income and expenses of a period, grouped by category."""

    currency: Currency
    expense: int = 0
    income: int = 0
    excluded: int = 0
    items: dict[str, GeneralItem] = field(default_factory=dict)
    occurrences: int = 0
    total_cents: int = 0
    previous: Line | None = None

    @classmethod
    def build(
        cls,
        currency: str | None,
        total: Total,
        config: Any,
        exchange: RateSource,
        filter: Filter,
    ) -> GeneralReport:
        """Read the ledger, feeding ``total`` with every line."""
        report = cls(currency=resolve_currency(currency, config))
        with Resource.from_config(config, Mode.LEDGER) as resource:
            for record in resource.lines():
                total.sum(record, exchange)
                if not filter.within(record.date):
                    continue
                if not filter.transfer(record.category):
                    report.process(record, record.category, filter, exchange)
                    continue
                if report.previous is None:
                    report.previous = record
                    continue
                other, report.previous = report.previous, None
                if filter.accountable(record.account) != filter.accountable(other.account):
                    # Transfers in or out of ignored accounts are shown under the
                    # name of the account on the other side.
                    report.process(record, other.account, filter, exchange)
                    report.process(other, record.account, filter, exchange)
        return report

    def process(
        self, record: Line, category: str, filter: Filter, exchange: RateSource
    ) -> None:
        """Count ``record`` under ``category`` unless its account or category is left out."""
        if not filter.accountable(record.account):
            return
        exchanged = record.exchange(self.currency, exchange)
        if filter.excluded(category):
            self.excluded += exchanged.amount.cents
            return
        self.add(GeneralItem(exchanged.amount, category))

    def add(self, item: GeneralItem) -> None:
        if item.value.is_positive:
            self.income += item.value.cents
        else:
            self.expense += item.value.cents
        self.total_cents += item.value.cents
        self.occurrences += 1
        existing = self.items.get(item.category)
        self.items[item.category] = item if existing is None else existing + item

    def sorted(self) -> list[GeneralItem]:
        """Categories from the largest absolute amount to the smallest."""
        return sorted(self.items.values(), key=lambda item: abs(item.value.cents), reverse=True)

    def total(self) -> Money:
        return Money(self.total_cents, self.currency)

    def percentage(self) -> float:
        """Difference between income and expenses, relative to the income."""
        expense = abs(self.expense)
        if self.income == 0:
            return 100.0
        if self.income > expense:
            return (self.income - expense) / self.income * 100.0
        return (expense - self.income) / self.income * 100.0

    def display(self) -> None:
        """Print one row per category and a total row."""
        table = Table(
            title="Report",
            title_style="bold cyan",
            show_header=False,
            box=None,
            padding=(0, 3, 0, 2),
        )
        table.add_row(
            Text(""),
            Text("Category", style="bold bright_blue", justify="center"),
            Text("Amount", style="bold bright_blue"),
            Text("(%)", style="bold bright_blue"),
        )
        white = "bold bright_white"
        for item in self.sorted():
            table.add_row(
                Text(f"({item.occurrences})", style=white),
                Text(item.category, style=white),
                Text(str(item.value), style=white),
                Text(_format_percentage(item.percentage(self)), style=white),
            )
        yellow = "bold bright_yellow"
        table.add_row(
            Text(f"({self.occurrences})", style=yellow),
            Text("Total", style=yellow),
            Text(str(self.total()), style=yellow),
            Text(_format_percentage(self.percentage()), style=yellow),
        )
        Console().print(table)


class Summary:
    """Income, expenses and their difference for a general report."""

    def __init__(self, report: GeneralReport, total: Total) -> None:
        self.currency = report.currency
        self.expense_cents = report.expense
        self.income_cents = report.income
        self.excluded = report.excluded
        self.total = total

    def income(self) -> Money:
        """Income, reduced by excluded outgoing amounts when it covers them."""
        value = self.income_cents
        if self.excluded < 0 and self.income_cents > abs(self.excluded):
            value = self.income_cents + self.excluded
        return Money(value, self.currency)

    def expense(self) -> Money:
        return Money(self.expense_cents, self.currency)

    def difference(self) -> Money:
        return self.income() - abs(self.expense())

    def display(self) -> None:
        """Print the income, expenses, difference and the overall total."""
        table = Table(
            title="Totals",
            title_style="bold cyan",
            show_header=False,
            box=None,
            padding=(0, 2, 0, 1),
        )
        difference = self.difference()
        income = self.income()
        table.add_row(
            money_cell(income, False, False, "right"),
            money_cell(self.expense(), False, False, "left"),
            money_cell(difference, False, True, "left"),
            percentage_cell(difference, income, "left"),
        )
        amount = self.total.amount()
        table.add_row(
            Text(str(amount), style="bold bright_blue", justify="center"),
            Text(""),
            Text(""),
            percentage_cell(difference, amount, "left"),
        )
        Console().print(table)