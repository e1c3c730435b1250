"""Cash and investment holdings computed from the ledger."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any

from ledger.date import today
from ledger.filter import Filter
from ledger.justetf import Asset
from ledger.money import Currency, Money, RateSource
from ledger.records import Entry, Line, Mode
from ledger.resource import Resource

LOOKBACK_DAYS = 30

_INTEGER = re.compile(r"[+-]?[0-9]+")


def _parse_quantity(value: str) -> int:
    if not _INTEGER.fullmatch(value):
        raise ValueError(f"invalid quantity: {value!r}")
    return int(value)


@dataclass
class Investment:
    """Shares held in one fund, valued at its current quote."""

    code: str
    spent: Money
    quantity: int
    currency: Currency
    asset: Asset
    price: Money

    @classmethod
    def from_line(cls, record: Line, currency: Currency) -> Investment:
        """Start a holding from a purchase line, downloading the fund's quote."""
        asset = Asset.download(record.description, currency)
        quantity = _parse_quantity(record.quantity)
        return cls(
            code=record.description,
            spent=record.amount,
            quantity=quantity,
            currency=currency,
            asset=asset,
            price=asset.quote,
        )

    def add(self, record: Line) -> None:
        """Account for another purchase or sale of the same fund."""
        quantity = _parse_quantity(record.quantity)
        self.spent = self.spent + record.amount
        self.quantity += quantity

    def value(self) -> Money:
        return self.price * self.quantity

    def name(self) -> str:
        return self.asset.name


@dataclass
class Networth:
    """Daily cash balances, amounts invested and current holdings."""

    currency: Currency
    invested: dict[date, Money] = field(default_factory=dict)
    investments: dict[str, Investment] = field(default_factory=dict)
    current: dict[date, Money] = field(default_factory=dict)
    cash: Money = field(init=False)

    def __post_init__(self) -> None:
        self.cash = Money(0, self.currency)

    @classmethod
    def load(cls, config: Any, exchange: RateSource, currency: Currency) -> Networth:
        """Build the networth from every accountable line of the ledger."""
        networth = cls(currency)
        filter_ = Filter.networth(config)
        with Resource.from_config(config, Mode.LEDGER) as resource:
            for record in resource.lines():
                if filter_.accountable(record.account):
                    networth.add(record, filter_, exchange)
        return networth

    def add(self, record: Line, filter: Filter, exchange: RateSource) -> None:
        """Take one ledger line into account."""
        exchanged = record.exchange(self.currency, exchange)

        self.cash = self.cash + exchanged.amount
        self.current[exchanged.date] = self.cash

        if filter.investment(exchanged.category):
            holding = self.investments.get(exchanged.description)
            if holding is None:
                self.investments[exchanged.description] = Investment.from_line(
                    exchanged, self.currency
                )
            else:
                holding.add(exchanged)

            spent = exchanged.amount * -1
            previous = self.invested.get(exchanged.date)
            self.invested[exchanged.date] = spent if previous is None else previous + spent

    def total(self) -> Money:
        return self.current_on(today()) + self.investments_value()

    def invested_on(self, day: date) -> Money:
        return self.invested.get(day, Money(0, self.currency))

    def current_on(self, day: date) -> Money:
        """Cash on ``day``, or on the closest earlier day within the lookback window."""
        available = day
        while available not in self.current and (day - available).days < LOOKBACK_DAYS:
            available -= timedelta(days=1)
        return self.current.get(available, Money(0, self.currency))

    def current(self) -> Entry:
        """Today's networth as an entry of the networth file."""
        now = today()
        investment = self.investments_value()
        return Entry(
            date=now,
            invested=self.invested_on(now),
            investment=investment,
            amount=self.current_on(now) + investment,
            currency=self.currency,
            id="",
        )

    def investments_value(self) -> Money:
        total = Money(0, self.currency)
        for investment in self.investments.values():
            total = total + investment.value()
        return total