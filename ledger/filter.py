"""Selection of lines by period, category and account."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable

from ledger.date import end_of_month, today
from ledger.records import Line


def _contains(value: str, values: Iterable[str]) -> bool:
    wanted = value.upper()
    return any(item.upper() == wanted for item in values)


def _bounds(
    year: int | None, month: int | None, start: date | None, end: date | None
) -> tuple[date | None, date | None]:
    if (year is not None or month is not None) and start is None and end is None:
        now = today()
        first = date(year if year is not None else now.year, month or now.month, 1)
        return first, end_of_month(first)
    return start, end


@dataclass
class Filter:
    """Criteria deciding which lines a command takes into account."""

    start: date | None = None
    end: date | None = None
    categories: list[str] = field(default_factory=list)
    excluded_categories: list[str] = field(default_factory=list)
    transfer_category: str = ""
    ignored_accounts: list[str] = field(default_factory=list)
    investment_category: str = ""

    @classmethod
    def show(cls, args: Any) -> Filter:
        start, end = _bounds(args.year, args.month, args.from_date, args.till)
        return cls(start=start, end=end, categories=list(args.categories))

    @classmethod
    def balance(cls, args: Any) -> Filter:
        start, end = _bounds(None, None, None, args.date)
        return cls(start=start, end=end)

    @classmethod
    def report(cls, args: Any, config: Any) -> Filter:
        now = today()
        start, end = _bounds(
            args.year if args.year is not None else now.year,
            args.month if args.month is not None else now.month,
            args.from_date,
            args.till,
        )
        return cls(
            start=start,
            end=end,
            excluded_categories=list(args.exclude),
            transfer_category=config.transfer,
            ignored_accounts=list(config.ignored_accounts),
            investment_category=config.investments,
        )

    @classmethod
    def total(cls, config: Any, end: date | None) -> Filter:
        return cls(end=end, ignored_accounts=list(config.ignored_accounts))

    @classmethod
    def push(cls, config: Any) -> Filter:
        return cls(ignored_accounts=list(config.ignored_accounts))

    @classmethod
    def networth(cls, config: Any) -> Filter:
        return cls(
            ignored_accounts=list(config.ignored_accounts),
            investment_category=config.investments,
        )

    def excluded(self, value: str) -> bool:
        return _contains(value, self.excluded_categories)

    def accountable(self, value: str) -> bool:
        return not _contains(value, self.ignored_accounts)

    def transfer(self, value: str) -> bool:
        return value == self.transfer_category

    def investment(self, value: str) -> bool:
        return value == self.investment_category

    def within(self, day: date) -> bool:
        """Whether ``day`` lies in the inclusive period; missing bounds are open."""
        return (self.start is None or self.start <= day) and (self.end is None or day <= self.end)

    def display(self, line: Line) -> bool:
        return (not self.categories or _contains(line.category, self.categories)) and self.within(
            line.date
        )