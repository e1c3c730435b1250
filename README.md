# ledger

A command line ledger. Transactions and net-worth entries are kept in plain
CSV files, optionally encrypted with a password, and the `ledger` command
books, edits, sorts, converts and reports on them.

## Installation

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## Files

Two CSV files are used:

- the **ledger**, holding transactions with the columns
  `Account, Date, Category, Description, Quantity, Venue, Amount, Currency, Trip, Id`;
- the **networth** file, holding daily entries with the columns
  `Date, Invested, Investment, Amount, Currency, Id`.

Dates are written as `YYYY-MM-DD` (RFC 3339 timestamps are also accepted when
reading); amounts are stored with an explicit sign, such as `+12.50` or
`-3.99`, and currencies as ISO 4217 codes.

Only one instance may work on a file at a time: a `.lock` file is created next
to it while it is in use, and a second instance fails with
`Another instance already loaded '<file>'`.

## Configuration

The configuration is a YAML file named `config` in the `ledger` directory
under your XDG configuration home (usually `~/.config/ledger/config`). It is
created with defaults the first time any command needs it, or on request:

```
ledger configure
ledger configure --force     # overwrite an existing file
```

A configuration looks like this:

```yaml
encryption: password
files:
  ledger: ~/.config/ledger/ledger.csv
  networth: ~/.config/ledger/networth.csv
exchange_key: placeholder
transfer: Transfer
ignored_accounts:
  - Personal
investments: Investment
currency: EUR
```

- `encryption` – the password used to encrypt the CSV files. A random
  32-character one is generated for a new configuration; remove the key to
  keep files in plain text. A file that cannot be decrypted is read as plain
  text and written back as plain text.
- `files` – where the ledger and networth files live. `~` is expanded. The
  `LEDGER_PATH` environment variable, when set, overrides both.
- `exchange_key` – the Open Exchange Rates app id used to download exchange
  rates. Rates are cached for twelve hours in `exchange.yml` under the XDG
  cache directory; if a download fails, the cached rates are used.
- `transfer` – the category marking transfers between accounts.
- `ignored_accounts` – accounts left out of totals and net worth
  (compared case-insensitively).
- `investments` – the category marking the purchase of investment assets:
  the description holds the fund's ISIN, the quantity the whole number of
  shares.
- `currency` – the default currency for reports.

## Usage

```
ledger --version
ledger COMMAND --help
```

Most commands act on the ledger; add `-n`/`--networth` to act on the networth
file instead.

Create a new file holding only its header (an existing file is kept unless
`--force` is given):

```
ledger create
ledger create --networth --force
```

Book a line, either interactively (every column is asked for in turn) or
from `-a` arguments given in column order:

```
ledger book
ledger book -a Bank -a 2024-01-31 -a Groceries -a Market -a " " -a Shop -a -12.50 -a EUR -a " " -a " "
```

A value of a single space stands for an empty value; an empty date means today.

Open the file in `$EDITOR`. Decryption and encryption happen around the edit
and every line is validated afterwards. With `--bottom`, editors whose name
contains `vim` open at the last line:

```
ledger edit --bottom
```

Sort the lines by date, keeping the order of lines of the same day:

```
ledger sort
```

Convert every line of an account to the currency of that account's first line:

```
ledger convert
```

Write the lines of a period as CSV, optionally converted to another currency,
restricted to some categories (repeat `--categories`), or written to a file
instead of standard output:

```
ledger show --year 2024 --month 3
ledger show --from 2024-01-01 --till 2024-06-30 --categories Groceries -C USD
ledger show --output selection.csv
```

When `--year` or `--month` is given without `--from`/`--till`, a single month
is selected; the missing one of the two defaults to the current year or month.

Display the balance of each account, optionally as of a given date. Accounts
with a zero balance are hidden unless `--all` is given; the total below leaves
out the ignored accounts:

```
ledger balance
ledger balance --all --date 2023-12-31
```

Display the report for a period (the current month by default), per category,
with income, expenses and their difference. `--exclude` (repeatable) leaves
categories out, `-C` picks the currency, and `--check` instead groups
consecutive lines by account, date and venue:

```
ledger report
ledger report --year 2024 --month 2 --exclude Rent -C USD
ledger report --check
```

Display the current net worth, per investment and cash, or, with `--save`,
recompute the networth file and add today's entry to it. Investment quotes are
downloaded from justETF:

```
ledger networth
ledger networth --currency USD
ledger networth --save
```

Errors are printed to standard error and the command exits with status 1.
Setting the `DEBUG` environment variable turns on debug logging.

## Using the modules

The building blocks can be used from Python as well, for example:

```python
from ledger.money import Currency, Money

amount = Money.parse("1234.5", Currency("EUR"))
amount.to_display()   # '+1,234.50'
str(amount)           # '+1,234.50€'
```

`ledger.records` reads and writes the CSV files (`read_lines`, `write_lines`,
`build_line`), `ledger.crypto` encrypts and decrypts file streams with a
password (`encrypt`, `decrypt`), and `ledger.resource.Resource` gives locked
access to a file.

## What is not included

The configuration may hold a `firefly` section (`base_path`, `token`,
`opening_balance`); it is read and validated, but the package has no command
that pulls transactions from or pushes them to a remote accounting server.