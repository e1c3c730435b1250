"""Command line interface of the ledger."""

from __future__ import annotations

import argparse
import logging
import os
import subprocess
import sys
from importlib.metadata import PackageNotFoundError, version
from typing import Any, Callable, Sequence

from ledger import util
from ledger.balance import show_balance
from ledger.config import Config
from ledger.date import parse_date
from ledger.exchange import Exchange
from ledger.filter import Filter
from ledger.records import Line, Mode, build_line, write_lines
from ledger.report_check import CheckReport
from ledger.report_general import GeneralReport, Summary
from ledger.report_networth import NetworthReport
from ledger.resource import Resource
from ledger.total import Total

# A single space stands for an empty value given on the command line.
DEFAULT_EMPTY = " "
VIM = "vim"
STDOUT = "/dev/stdout"

CONFIGURE_SUCCESS = "Generated default configuration file on"
CREATE_SUCCESS = "Generated default file on"


def _version() -> str:
    try:
        return version("ledger")
    except PackageNotFoundError:
        return "unknown"


def _date_arg(value: str):
    try:
        return parse_date(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def _mode(args: argparse.Namespace) -> Mode:
    return Mode.NETWORTH if args.networth else Mode.LEDGER


def _add_networth_flag(parser: argparse.ArgumentParser, help_text: str) -> None:
    parser.add_argument("-n", "--networth", action="store_true", help=help_text)


def _add_period(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-y", "--year", type=int, help="Select entries that occurred on the year")
    parser.add_argument(
        "-m", "--month", type=int, help="Select entries that occurred on the month"
    )
    parser.add_argument(
        "-f",
        "--from",
        dest="from_date",
        type=_date_arg,
        help="Select entries that occurred after the date",
    )
    parser.add_argument(
        "-t", "--till", type=_date_arg, help="Select entries that occurred before the date"
    )


def _run_balance(args: argparse.Namespace, config: Config) -> None:
    show_balance(config, args.date, args.show_all)


def _collect_attributes(headers: Sequence[str]) -> list[str]:
    values = []
    for name in headers:
        sys.stdout.write(f"{name}: ")
        sys.stdout.flush()
        value = sys.stdin.readline()
        if value.endswith("\n"):
            value = value[:-1]
        if value.endswith("\r"):
            value = value[:-1]
        values.append(value)
    return values


def run_book(args: argparse.Namespace, config: Config) -> None:
    """Append one line, from the arguments or asked for field by field."""
    mode = _mode(args)
    with Resource.from_config(config, mode) as resource:
        if args.attributes:
            values = ["" if value == DEFAULT_EMPTY else value for value in args.attributes]
        else:
            values = _collect_attributes(resource.headers())
        line = build_line(values, mode)
        resource.book([line])


def run_configure(args: argparse.Namespace) -> None:
    """Write the default configuration file."""
    path = Config.path()
    if os.path.exists(path) and not args.force:
        raise FileExistsError("Configuration file already exists, use --force to overwrite it")
    Config.write_default(path)
    print(f"{CONFIGURE_SUCCESS} {path}")


def run_convert(args: argparse.Namespace, config: Config) -> None:
    """Convert every line to the currency of the first line of its account."""
    with Resource.from_config(config, _mode(args)) as resource:
        exchange = Exchange.load(config)
        currencies: dict[str, str] = {}

        def convert(record: Line) -> list[Line]:
            code = currencies.setdefault(record.account, record.currency.code)
            return [record.exchange(util.currency(code, config), exchange)]

        resource.rewrite(convert)


def run_create(args: argparse.Namespace, config: Config) -> None:
    """Create the file holding only its header."""
    with Resource.from_config(config, _mode(args)) as resource:
        if os.path.exists(resource.filepath) and not args.force:
            raise FileExistsError(
                f"File {resource.filepath} already exists, use --force to overwrite it"
            )
        resource.create()
        print(f"{CREATE_SUCCESS} {resource.filepath}")


def editor_arguments(editor: str, filepath: str, bottom: bool) -> list[str]:
    """Arguments for the editor; vim variants can start at the last line."""
    if bottom and VIM in editor:
        return ["+", filepath]
    return [filepath]


def run_edit(args: argparse.Namespace, config: Config) -> None:
    """Open the file in ``$EDITOR`` and validate it once saved."""
    editor = util.editor()
    with Resource.from_config(config, _mode(args)) as resource:
        with resource.editing() as path:
            subprocess.run([editor, *editor_arguments(editor, path, args.bottom)], check=False)
        # Validate after saving so that mistakes can be fixed without losing the edit.
        list(resource.lines())


def run_networth(args: argparse.Namespace, config: Config) -> None:
    """Print the networth, or store it in the networth file."""
    exchange = Exchange.load(config)
    currency = util.currency(args.currency, config)
    report = NetworthReport(config, exchange, currency)
    if args.save:
        report.save()
    else:
        report.display()


def run_report(args: argparse.Namespace, config: Config) -> None:
    """Print the report of a period."""
    exchange = Exchange.load(config)
    filter_ = Filter.report(args, config)
    if args.check:
        CheckReport.build(config, filter_).display()
        return
    total = Total(args.currency, config, filter_.end)
    report = GeneralReport.build(args.currency, total, config, exchange, filter_)
    summary = Summary(report, total)
    report.display()
    summary.display()


def run_show(args: argparse.Namespace, config: Config) -> None:
    """Write the selected lines as CSV, converted to one currency."""
    with Resource.from_config(config, _mode(args)) as resource:
        filter_ = Filter.show(args)
        currency = util.currency(args.currency, config)
        exchange = Exchange.load(config)
        selected = (
            record.exchange(currency, exchange)
            for record in resource.lines()
            if filter_.display(record)
        )
        if args.output == STDOUT:
            write_lines(sys.stdout, selected)
            sys.stdout.flush()
        else:
            with open(args.output, "w", newline="", encoding="utf-8") as handle:
                write_lines(handle, selected)


def run_sort(args: argparse.Namespace, config: Config) -> None:
    """Rewrite the file ordered by date, keeping the order of lines of the same day."""
    with Resource.from_config(config, _mode(args)) as resource:
        lines = sorted(resource.lines(), key=lambda line: line.date)
        resource.create_with(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ledger", description="A command line ledger.")
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {_version()}")
    commands = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    def command(
        name: str, help_text: str, run: Callable[..., None], needs_config: bool = True
    ) -> argparse.ArgumentParser:
        sub = commands.add_parser(name, help=help_text, description=help_text)
        sub.set_defaults(run=run, needs_config=needs_config)
        return sub

    balance = command(
        "balance", "Calculate the current balances for each account", _run_balance
    )
    balance.add_argument(
        "-a", "--all", dest="show_all", action="store_true", help="Display all accounts"
    )
    balance.add_argument(
        "-d", "--date", type=_date_arg, help="Calculate the current balance at a given date"
    )

    book = command("book", "Add a line to the ledger or networth", run_book)
    book.add_argument(
        "-a",
        "--attributes",
        action="append",
        default=[],
        help="Define the list of values that compose an transaction/entry",
    )
    _add_networth_flag(book, "Create an entry for networth CSV instead of for ledger CSV")

    configure = command(
        "configure",
        "Copy default configuration file to the default location",
        run_configure,
        needs_config=False,
    )
    configure.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Copy the default configuration file, overriding existing file",
    )

    convert = command(
        "convert", "Convert other currencies to main currency of the account", run_convert
    )
    _add_networth_flag(convert, "Convert entries from networth CSV instead of ledger CSV")

    create = command("create", "Create a new ledger/networth file", run_create)
    _add_networth_flag(create, "Create networth CSV instead of ledger CSV")
    create.add_argument(
        "-f", "--force", action="store_true", help="Create the initial file, overriding existing one"
    )

    edit = command("edit", "Open ledger/networth file in your editor", run_edit)
    edit.add_argument(
        "-b",
        "--bottom",
        action="store_true",
        help="Open file with cursor in the last line (Only supported for vim and variants)",
    )
    _add_networth_flag(edit, "Open networth CSV instead of ledger CSV")

    networth = command("networth", "Calculate current networth", run_networth)
    networth.add_argument(
        "-c", "--currency", help="Display entries on the same currency (format ISO 4217)"
    )
    networth.add_argument(
        "-s", "--save", action="store_true", help="Save the total networth to the networth CSV"
    )

    report = command(
        "report", "Create a report about the transactions on the ledger", run_report
    )
    _add_period(report)
    report.add_argument(
        "-e",
        "--exclude",
        action="append",
        default=[],
        help="Exclude entries that match the categories",
    )
    report.add_argument(
        "-C", "--currency", help="Display entries on the same currency (format ISO 4217)"
    )
    report.add_argument(
        "-c", "--check", action="store_true", help="Display report with aggregated information"
    )

    show = command("show", "Display all transactions", run_show)
    _add_period(show)
    show.add_argument(
        "-c",
        "--categories",
        action="append",
        default=[],
        help="Select entries that match the categories",
    )
    show.add_argument(
        "-C", "--currency", help="Display entries on the same currency (format ISO 4217)"
    )
    show.add_argument(
        "-o", "--output", default=STDOUT, help="Print selected entries to the output"
    )
    _add_networth_flag(show, "Select entries from networth CSV instead of ledger CSV")

    sort = command("sort", "Sort the entries in the ledger", run_sort)
    _add_networth_flag(sort, "Sort entries from networth CSV instead of ledger CSV")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run one command; the exit status is 0 on success and 1 on error."""
    if "DEBUG" in os.environ:
        logging.basicConfig(level=logging.DEBUG)
    args = build_parser().parse_args(argv)
    run: Callable[..., Any] = args.run
    try:
        if args.needs_config:
            run(args, Config.load())
        else:
            run(args)
    except Exception as err:  # every failure of a command is reported the same way
        print(err, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())