from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from ledger.exchange import Exchange
from ledger.filter import Filter
from ledger.money import Currency, Money
from ledger.records import Transaction, write_lines
from ledger.report_general import GeneralItem, GeneralReport, Summary
from ledger.total import Total

EUR = Currency("EUR")


@dataclass
class FakeConfig:
    ledger: str
    encryption: str | None = None
    currency: str = "EUR"
    transfer: str = "Transfer"
    investments: str = "Investment"
    ignored_accounts: list = field(default_factory=lambda: ["Personal"])

    def filepath(self, mode):
        return self.ledger


def tx(account, day, category, amount):
    return Transaction.build([account, day, category, "desc", "", "", amount, "EUR", "", ""])


def eur(value):
    return Money.parse(value, EUR)


@pytest.fixture
def exchange():
    return Exchange(timestamp=0, base="USD", rates={"EUR": 1.0, "USD": 2.0})


@pytest.fixture
def make_config(tmp_path):
    def _make(lines):
        path = tmp_path / "ledger.csv"
        with open(path, "w", newline="", encoding="utf-8") as handle:
            write_lines(handle, lines)
        return FakeConfig(str(path))

    return _make


def test_add_accumulates_by_category():
    report = GeneralReport(currency=EUR)
    report.add(GeneralItem(eur("100.00"), "Salary"))
    report.add(GeneralItem(eur("-20.00"), "Food"))
    report.add(GeneralItem(eur("-5.00"), "Food"))
    assert report.income == eur("100.00").cents
    assert report.expense == eur("-20.00").cents + eur("-5.00").cents
    assert report.total() == eur("100.00") + eur("-20.00") + eur("-5.00")
    assert report.occurrences == 3
    assert report.items["Food"].occurrences == 2
    assert report.items["Food"].value == eur("-20.00") + eur("-5.00")


def test_sorted_by_absolute_value_descending():
    report = GeneralReport(currency=EUR)
    report.add(GeneralItem(eur("-5.00"), "Food"))
    report.add(GeneralItem(eur("100.00"), "Salary"))
    report.add(GeneralItem(eur("-500.00"), "Rent"))
    assert [item.category for item in report.sorted()] == ["Rent", "Salary", "Food"]


def test_percentage_without_income_is_hundred():
    report = GeneralReport(currency=EUR)
    report.add(GeneralItem(eur("-5.00"), "Food"))
    assert report.percentage() == 100.0


def test_percentage_with_savings():
    report = GeneralReport(currency=EUR)
    report.add(GeneralItem(eur("1000.00"), "Salary"))
    report.add(GeneralItem(eur("-250.00"), "Rent"))
    assert report.percentage() == pytest.approx(75.0)


def test_item_percentage_of_income_and_expense():
    report = GeneralReport(currency=EUR)
    report.add(GeneralItem(eur("100.00"), "Salary"))
    report.add(GeneralItem(eur("-40.00"), "Food"))
    assert report.items["Salary"].percentage(report) == pytest.approx(100.0)
    assert report.items["Food"].percentage(report) == pytest.approx(100.0)


def test_zero_item_without_expenses_is_nan():
    report = GeneralReport(currency=EUR)
    item = GeneralItem(eur("0.00"), "Nothing")
    assert str(item.percentage(report)) == "nan"


def test_process_skips_ignored_accounts_and_excludes_categories(exchange):
    report = GeneralReport(currency=EUR)
    filter_ = Filter(ignored_accounts=["Personal"], excluded_categories=["rent"])
    report.process(tx("Personal", "2023-01-01", "Food", "-10.00"), "Food", filter_, exchange)
    report.process(tx("Bank", "2023-01-01", "Rent", "-300.00"), "Rent", filter_, exchange)
    assert report.items == {}
    assert report.excluded == eur("-300.00").cents


def test_process_converts_into_report_currency(exchange):
    usd = Currency("USD")
    report = GeneralReport(currency=usd)
    report.process(tx("Bank", "2023-01-01", "Food", "-10.00"), "Food", Filter(), exchange)
    item = report.items["Food"]
    assert item.value.currency == usd
    assert item.value.is_negative


def test_build_transfer_with_ignored_account(make_config, exchange):
    config = make_config(
        [
            tx("Bank", "2023-01-05", "Transfer", "-50.00"),
            tx("Personal", "2023-01-05", "Transfer", "50.00"),
            tx("Bank", "2023-01-06", "Food", "-10.00"),
        ]
    )
    filter_ = Filter(transfer_category="Transfer", ignored_accounts=["Personal"])
    total = Total(None, config, None)
    report = GeneralReport.build(None, total, config, exchange, filter_)
    assert set(report.items) == {"Personal", "Food"}
    assert report.items["Personal"].value == eur("-50.00")
    assert total.amount() == eur("-50.00") + eur("-10.00")


def test_build_transfer_between_counted_accounts_is_hidden(make_config, exchange):
    config = make_config(
        [
            tx("Bank", "2023-01-05", "Transfer", "-50.00"),
            tx("Savings", "2023-01-05", "Transfer", "50.00"),
        ]
    )
    filter_ = Filter(transfer_category="Transfer", ignored_accounts=["Personal"])
    total = Total(None, config, None)
    report = GeneralReport.build(None, total, config, exchange, filter_)
    assert report.items == {}
    assert report.previous is None
    assert total.amount().is_zero


def test_build_skips_lines_outside_period(make_config, exchange):
    config = make_config(
        [
            tx("Bank", "2022-12-31", "Food", "-10.00"),
            tx("Bank", "2023-01-02", "Fuel", "-20.00"),
        ]
    )
    filter_ = Filter(start=Filter(end=None).end or None)
    filter_.start = tx("Bank", "2023-01-01", "X", "0").date
    total = Total(None, config, None)
    report = GeneralReport.build("eur", total, config, exchange, filter_)
    assert list(report.items) == ["Fuel"]
    assert total.amount() == eur("-10.00") + eur("-20.00")


def test_summary_income_reduced_by_excluded_expenses():
    report = GeneralReport(currency=EUR)
    report.add(GeneralItem(eur("1000.00"), "Salary"))
    report.add(GeneralItem(eur("-100.00"), "Food"))
    report.excluded = eur("-300.00").cents
    config = FakeConfig("unused")
    summary = Summary(report, Total(None, config, None))
    assert summary.income() == eur("1000.00") + eur("-300.00")
    assert summary.expense() == eur("-100.00")
    assert summary.difference() == summary.income() - abs(summary.expense())


def test_summary_income_kept_when_excluded_exceeds_it():
    report = GeneralReport(currency=EUR)
    report.add(GeneralItem(eur("100.00"), "Salary"))
    report.excluded = eur("-300.00").cents
    summary = Summary(report, Total(None, FakeConfig("unused"), None))
    assert summary.income() == eur("100.00")


def test_display_prints_categories_and_totals(capsys):
    report = GeneralReport(currency=EUR)
    report.add(GeneralItem(eur("100.00"), "Salary"))
    report.add(GeneralItem(eur("-40.00"), "Food"))
    report.display()
    Summary(report, Total(None, FakeConfig("unused"), None)).display()
    output = capsys.readouterr().out
    assert "Salary" in output
    assert "Food" in output
    assert "Total" in output
    assert "Totals" in output