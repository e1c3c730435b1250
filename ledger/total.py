"""Running total of the accountable lines, in a single currency."""

from __future__ import annotations

from datetime import date
from typing import Any

from ledger.filter import Filter
from ledger.money import Money, RateSource
from ledger.records import Line
from ledger.util import currency as resolve_currency


class Total:
    """Sum of every accountable line up to an optional end date."""

    def __init__(self, currency: str | None, config: Any, end: date | None = None) -> None:
        self.currency = resolve_currency(currency, config)
        self.filter = Filter.total(config, end)
        self.value = 0

    def sum(self, record: Line, exchange: RateSource) -> None:
        """Add ``record`` if it counts; its conversion must succeed either way."""
        exchanged = record.exchange(self.currency, exchange)
        if self.filter.accountable(record.account) and self.filter.within(record.date):
            self.value += exchanged.amount.cents

    def amount(self) -> Money:
        return Money(self.value, self.currency)