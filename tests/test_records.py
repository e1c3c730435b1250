import io
from datetime import date, timedelta

import pytest

from ledger.date import format_date, today
from ledger.money import Currency, Money
from ledger.records import (
    Entry,
    Mode,
    Transaction,
    build_line,
    fields_for,
    read_lines,
    write_lines,
)

EUR = Currency("EUR")
USD = Currency("USD")

TRANSACTION_VALUES = ["Bank", "2023-01-15", "Food", "Lunch", "1", "Cafe", "-12.5", "EUR", "work", ""]
ENTRY_VALUES = ["2023-02-01", "1000", "200.5", "1500.25", "EUR", "7"]


class FixedRate:
    def __init__(self, value):
        self.value = value

    def rate(self, from_currency, to_currency):
        return self.value


def transaction_on(day, identifier=""):
    values = list(TRANSACTION_VALUES)
    values[1] = format_date(day)
    values[9] = identifier
    return build_line(values, Mode.LEDGER)


def test_build_transaction():
    line = build_line(TRANSACTION_VALUES, Mode.LEDGER)
    assert isinstance(line, Transaction)
    assert line.account == "Bank"
    assert line.date == date(2023, 1, 15)
    assert line.category == "Food"
    assert line.amount == Money.parse("-12.5", EUR)
    assert line.currency == EUR
    assert line.trip == "work"
    assert line.id == ""


def test_build_entry():
    line = build_line(ENTRY_VALUES, Mode.NETWORTH)
    assert isinstance(line, Entry)
    assert line.date == date(2023, 2, 1)
    assert line.invested == Money.parse("1000", EUR)
    assert line.investment == Money.parse("200.5", EUR)
    assert line.amount == Money.parse("1500.25", EUR)
    assert line.id == "7"


def test_build_unknown_currency():
    values = list(TRANSACTION_VALUES)
    values[7] = "XYZ"
    with pytest.raises(ValueError, match="The currency code 'XYZ' does not exist"):
        Transaction.build(values)


def test_build_too_few_values():
    with pytest.raises(ValueError):
        Entry.build(ENTRY_VALUES[:4])


def test_build_invalid_date():
    values = list(ENTRY_VALUES)
    values[0] = "01/02/2023"
    with pytest.raises(ValueError, match="Invalid format for date"):
        Entry.build(values)


def test_transaction_to_row():
    line = build_line(TRANSACTION_VALUES, Mode.LEDGER)
    assert line.to_row() == [
        "Bank", "2023-01-15", "Food", "Lunch", "1", "Cafe", "-12.50", "EUR", "work", "",
    ]
    assert len(line.to_row()) == len(fields_for(Mode.LEDGER))


def test_entry_fixed_attributes():
    line = build_line(ENTRY_VALUES, Mode.NETWORTH)
    assert line.account == "Investments"
    assert line.category == "Investment"
    assert line.description == "Daily Update"
    assert line.venue == "Investments"
    assert line.quantity == ""
    assert line.trip == ""


def test_transaction_investment_is_zero():
    line = build_line(TRANSACTION_VALUES, Mode.LEDGER)
    assert line.investment == Money(0, EUR)


def test_ledger_header():
    buffer = io.StringIO()
    write_lines(buffer, [build_line(TRANSACTION_VALUES, Mode.LEDGER)])
    first = buffer.getvalue().splitlines()[0]
    assert first == "Account,Date,Category,Description,Quantity,Venue,Amount,Currency,Trip,Id"
    assert first.split(",") == fields_for(Mode.LEDGER)


def test_networth_header():
    buffer = io.StringIO()
    write_lines(buffer, [build_line(ENTRY_VALUES, Mode.NETWORTH)])
    assert buffer.getvalue().splitlines()[0] == "Date,Invested,Investment,Amount,Currency,Id"


def test_ledger_round_trip():
    lines = [
        build_line(TRANSACTION_VALUES, Mode.LEDGER),
        build_line(["Card", "2023-03-01", "Salary", "March, paid", "", "", "2500", "USD", "", "42"], Mode.LEDGER),
    ]
    buffer = io.StringIO()
    write_lines(buffer, lines)
    buffer.seek(0)
    assert list(read_lines(buffer, Mode.LEDGER)) == lines


def test_networth_round_trip():
    lines = [build_line(ENTRY_VALUES, Mode.NETWORTH)]
    buffer = io.StringIO()
    write_lines(buffer, lines, True)
    buffer.seek(0)
    assert list(read_lines(buffer, Mode.NETWORTH)) == lines


def test_write_without_header():
    line = build_line(TRANSACTION_VALUES, Mode.LEDGER)
    buffer = io.StringIO()
    write_lines(buffer, [line], header=False)
    assert buffer.getvalue().splitlines() == [",".join(line.to_row())]


def test_write_nothing():
    buffer = io.StringIO()
    write_lines(buffer, [])
    assert buffer.getvalue() == ""


def test_read_skips_blank_lines():
    text = "Date,Invested,Investment,Amount,Currency,Id\n\n2023-02-01,1000,200.5,1500.25,EUR,7\n\n"
    lines = list(read_lines(io.StringIO(text), Mode.NETWORTH))
    assert lines == [build_line(ENTRY_VALUES, Mode.NETWORTH)]


def test_read_mismatched_row_length():
    text = "Date,Invested,Investment,Amount,Currency,Id\n2023-02-01,1000\n"
    with pytest.raises(ValueError, match="fields"):
        list(read_lines(io.StringIO(text), Mode.NETWORTH))


def test_from_row_missing_field():
    row = dict(zip(fields_for(Mode.LEDGER), TRANSACTION_VALUES))
    del row["Amount"]
    with pytest.raises(ValueError, match="missing field `amount`"):
        Transaction.from_row(row)


def test_from_row_unknown_field():
    row = dict(zip(fields_for(Mode.NETWORTH), ENTRY_VALUES))
    row["Extra"] = "x"
    with pytest.raises(ValueError, match="unknown field `Extra`"):
        Entry.from_row(row)


def test_from_row_unknown_currency():
    row = dict(zip(fields_for(Mode.NETWORTH), ENTRY_VALUES))
    row["Currency"] = "ABC"
    with pytest.raises(ValueError, match="No matching currency for code: ABC"):
        Entry.from_row(row)


def test_from_row_empty_date_is_today():
    row = dict(zip(fields_for(Mode.NETWORTH), ENTRY_VALUES))
    row["Date"] = ""
    assert Entry.from_row(row).date == today()


def test_pushable():
    past = today() - timedelta(days=10)
    assert transaction_on(past).pushable() is True
    assert transaction_on(past, "12").pushable() is False
    assert transaction_on(today() + timedelta(days=2)).pushable() is False


def test_pushed_returns_copy():
    line = transaction_on(date(2023, 1, 1), "9")
    identifier, lines = line.pushed()
    assert identifier == "9"
    assert lines == [line]
    assert lines[0] is not line
    lines[0].id = "10"
    assert line.id == "9"


def test_transaction_exchange():
    line = build_line(TRANSACTION_VALUES, Mode.LEDGER)
    rates = FixedRate(2.0)
    exchanged = line.exchange(USD, rates)
    assert exchanged.currency == USD
    assert exchanged.amount == line.amount.exchange(USD, rates)
    assert exchanged.account == line.account
    assert line.currency == EUR


def test_exchange_same_currency():
    line = build_line(TRANSACTION_VALUES, Mode.LEDGER)
    assert line.exchange(EUR, FixedRate(3.0)) == line


def test_entry_exchange():
    line = build_line(ENTRY_VALUES, Mode.NETWORTH)
    rates = FixedRate(0.5)
    exchanged = line.exchange(USD, rates)
    assert exchanged.currency == USD
    assert exchanged.invested == line.invested.exchange(USD, rates)
    assert exchanged.investment == line.investment.exchange(USD, rates)
    assert exchanged.amount == line.amount.exchange(USD, rates)
    assert exchanged.id == line.id


def test_lines_sort_by_date():
    later = transaction_on(date(2023, 5, 1), "a")
    earlier = transaction_on(date(2023, 1, 1), "b")
    same_day = transaction_on(date(2023, 5, 1), "c")
    assert sorted([later, earlier, same_day]) == [earlier, later, same_day]