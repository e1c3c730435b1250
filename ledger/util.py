"""Small helpers shared by the commands."""

from __future__ import annotations

import os
import secrets
import string
from typing import Any

from rich.text import Text

from ledger.money import Currency, Money

_ALPHANUMERIC = string.ascii_letters + string.digits


def editor() -> str:
    """The editor named by ``$EDITOR``."""
    try:
        return os.environ["EDITOR"]
    except KeyError:
        raise RuntimeError("EDITOR variable is not set") from None


def random_pass() -> str:
    """A random 32-character alphanumeric password."""
    return "".join(secrets.choice(_ALPHANUMERIC) for _ in range(32))


def currency(value: str | None, config: Any) -> Currency:
    """The currency for ``value``, or the configured one, case-insensitively."""
    code = (value if value is not None else config.currency).upper()
    return Currency.parse(code)


def _color(value: float) -> str:
    if value > 0:
        return "bright_green"
    if value < 0:
        return "bright_red"
    return "bright_black"


def money_cell(value: Money, with_sign: bool, with_brackets: bool, justify: str) -> Text:
    """A bold amount coloured by its sign."""
    rep = str(value)
    if not value.is_zero and not with_sign:
        rep = rep[1:]
    if with_brackets:
        rep = f"({rep})"
    return Text(rep, style=f"bold {_color(value.cents)}", justify=justify)


def percentage_cell(dividend: Money, divisor: Money, justify: str) -> Text:
    """``dividend`` as a percentage of ``divisor``, without its sign."""
    if divisor.is_zero:
        value = -100.0
    else:
        value = dividend.cents / divisor.cents * 100.0
    return Text(f"{value:+.2f}%"[1:], style=f"bold {_color(value)}", justify=justify)