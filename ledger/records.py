"""Ledger transactions and networth entries, and their CSV representation."""

from __future__ import annotations

import copy
import csv
import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from datetime import date
from typing import IO, ClassVar, Iterable, Iterator, Mapping, Sequence

from ledger.date import format_date, is_future, parse_date
from ledger.money import Currency, Money, RateSource

DEFAULT_ACCOUNT = "Investments"

TRANSACTION_FIELDS: tuple[str, ...] = (
    "Account",
    "Date",
    "Category",
    "Description",
    "Quantity",
    "Venue",
    "Amount",
    "Currency",
    "Trip",
    "Id",
)

ENTRY_FIELDS: tuple[str, ...] = ("Date", "Invested", "Investment", "Amount", "Currency", "Id")


class Mode(enum.Enum):
    """Which of the two files a line belongs to."""

    LEDGER = "ledger"
    NETWORTH = "networth"


def _expect(values: Sequence[str], fields: tuple[str, ...]) -> list[str]:
    values = list(values)
    if len(values) < len(fields):
        raise ValueError(f"Expected {len(fields)} values, got {len(values)}")
    return values


def _row_values(
    row: Mapping[str, str], fields: tuple[str, ...], checked_first: tuple[str, ...]
) -> dict[str, str]:
    for key in row:
        if key not in fields:
            raise ValueError(f"unknown field `{key}`, expected one of {', '.join(fields)}")
    for name in (*checked_first, *fields):
        if name not in row:
            raise ValueError(f"missing field `{name.lower()}`")
    return dict(row)


def _row_currency(code: str) -> Currency:
    try:
        return Currency.parse(code)
    except ValueError:
        raise ValueError(f"No matching currency for code: {code}") from None


class Line(ABC):
    """A single record of either file, ordered by its date."""

    FIELDS: ClassVar[tuple[str, ...]] = ()

    id: str
    date: date
    amount: Money
    currency: Currency

    def pushable(self) -> bool:
        """Whether the line has not been pushed yet and is not in the future."""
        return self.id == "" and not is_future(self.date)

    def pushed(self) -> tuple[str, list[Line]]:
        return self.id, [copy.copy(self)]

    @abstractmethod
    def to_row(self) -> list[str]:
        """The CSV cells of this line, in the order of ``FIELDS``."""

    @abstractmethod
    def exchange(self, to: Currency, exchange: RateSource) -> Line:
        """A copy of this line with every amount converted to ``to``."""

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Line):
            return NotImplemented
        return self.date < other.date


@dataclass
class Transaction(Line):
    """A movement of money on an account of the ledger."""

    account: str
    date: date
    category: str
    description: str
    quantity: str
    venue: str
    amount: Money
    currency: Currency
    trip: str
    id: str

    FIELDS: ClassVar[tuple[str, ...]] = TRANSACTION_FIELDS

    @property
    def investment(self) -> Money:
        return Money(0, self.currency)

    @classmethod
    def build(cls, values: Sequence[str]) -> Transaction:
        """Build a transaction from values given in the order of the fields."""
        values = _expect(values, TRANSACTION_FIELDS)
        currency = Currency.parse(values[7])
        return cls(
            account=values[0],
            date=parse_date(values[1]),
            category=values[2],
            description=values[3],
            quantity=values[4],
            venue=values[5],
            amount=Money.parse(values[6], currency),
            currency=currency,
            trip=values[8],
            id=values[9],
        )

    @classmethod
    def from_row(cls, row: Mapping[str, str]) -> Transaction:
        """Build a transaction from a CSV row keyed by header name."""
        data = _row_values(row, TRANSACTION_FIELDS, ("Amount", "Currency"))
        currency = _row_currency(data["Currency"])
        return cls(
            account=data["Account"],
            date=parse_date(data["Date"]),
            category=data["Category"],
            description=data["Description"],
            quantity=data["Quantity"],
            venue=data["Venue"],
            amount=Money.parse(data["Amount"], currency),
            currency=currency,
            trip=data["Trip"],
            id=data["Id"],
        )

    def to_row(self) -> list[str]:
        return [
            self.account,
            format_date(self.date),
            self.category,
            self.description,
            self.quantity,
            self.venue,
            self.amount.to_storage(),
            self.currency.code,
            self.trip,
            self.id,
        ]

    def exchange(self, to: Currency, exchange: RateSource) -> Transaction:
        money = self.amount.exchange(to, exchange)
        return replace(self, amount=money, currency=money.currency)


@dataclass
class Entry(Line):
    """A daily snapshot of the networth."""

    date: date
    invested: Money
    investment: Money
    amount: Money
    currency: Currency
    id: str

    FIELDS: ClassVar[tuple[str, ...]] = ENTRY_FIELDS

    @property
    def account(self) -> str:
        return DEFAULT_ACCOUNT

    @property
    def category(self) -> str:
        return "Investment"

    @property
    def description(self) -> str:
        return "Daily Update"

    @property
    def quantity(self) -> str:
        return ""

    @property
    def venue(self) -> str:
        return "Investments"

    @property
    def trip(self) -> str:
        return ""

    @classmethod
    def build(cls, values: Sequence[str]) -> Entry:
        """Build an entry from values given in the order of the fields."""
        values = _expect(values, ENTRY_FIELDS)
        currency = Currency.parse(values[4])
        return cls(
            date=parse_date(values[0]),
            invested=Money.parse(values[1], currency),
            investment=Money.parse(values[2], currency),
            amount=Money.parse(values[3], currency),
            currency=currency,
            id=values[5],
        )

    @classmethod
    def from_row(cls, row: Mapping[str, str]) -> Entry:
        """Build an entry from a CSV row keyed by header name."""
        data = _row_values(row, ENTRY_FIELDS, ("Invested", "Investment", "Amount", "Currency"))
        currency = _row_currency(data["Currency"])
        return cls(
            date=parse_date(data["Date"]),
            invested=Money.parse(data["Invested"], currency),
            investment=Money.parse(data["Investment"], currency),
            amount=Money.parse(data["Amount"], currency),
            currency=currency,
            id=data["Id"],
        )

    def to_row(self) -> list[str]:
        return [
            format_date(self.date),
            self.invested.to_storage(),
            self.investment.to_storage(),
            self.amount.to_storage(),
            self.currency.code,
            self.id,
        ]

    def exchange(self, to: Currency, exchange: RateSource) -> Entry:
        return replace(
            self,
            invested=self.invested.exchange(to, exchange),
            investment=self.investment.exchange(to, exchange),
            amount=self.amount.exchange(to, exchange),
            currency=to,
        )


_LINE_TYPES: dict[Mode, type[Transaction] | type[Entry]] = {
    Mode.LEDGER: Transaction,
    Mode.NETWORTH: Entry,
}


def fields_for(mode: Mode) -> list[str]:
    """The CSV header of the file used in ``mode``."""
    return list(_LINE_TYPES[mode].FIELDS)


def build_line(values: Sequence[str], mode: Mode) -> Line:
    """Build a transaction or an entry from positional values."""
    return _LINE_TYPES[mode].build(values)


def read_lines(stream: IO[str], mode: Mode) -> Iterator[Line]:
    """Yield the lines of a CSV stream (opened with ``newline=''``)."""
    line_type = _LINE_TYPES[mode]
    header: list[str] | None = None
    for row in csv.reader(stream):
        if not row:
            continue
        if header is None:
            if len(set(row)) != len(row):
                raise ValueError(f"duplicate field in header: {', '.join(row)}")
            header = row
            continue
        if len(row) != len(header):
            raise ValueError(
                f"found record with {len(row)} fields, "
                f"but the previous record has {len(header)} fields"
            )
        yield line_type.from_row(dict(zip(header, row)))


def write_lines(stream: IO[str], lines: Iterable[Line], header: bool = True) -> None:
    """Write lines as CSV; the header precedes the first line when asked for."""
    writer = csv.writer(stream, lineterminator="\n")
    pending_header = header
    for line in lines:
        if pending_header:
            writer.writerow(line.FIELDS)
            pending_header = False
        writer.writerow(line.to_row())