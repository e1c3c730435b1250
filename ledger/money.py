"""Currencies and exact money amounts stored as minor units."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Protocol

DIFFERENT_CURRENCIES = "Cannot perform operations between different currencies"

_CODES = """
AED AFN ALL AMD ANG AOA ARS AUD AWG AZN BAM BBD BDT BGN BHD BIF BMD BND BOB BOV
BRL BSD BTN BWP BYN BZD CAD CDF CHE CHF CHW CLF CLP CNY COP COU CRC CUC CUP CVE
CZK DJF DKK DOP DZD EGP ERN ETB EUR FJD FKP GBP GEL GHS GIP GMD GNF GTQ GYD HKD
HNL HRK HTG HUF IDR ILS INR IQD IRR ISK JMD JOD JPY KES KGS KHR KMF KPW KRW KWD
KYD KZT LAK LBP LKR LRD LSL LYD MAD MDL MGA MKD MMK MNT MOP MRU MUR MVR MWK MXN
MXV MYR MZN NAD NGN NIO NOK NPR NZD OMR PAB PEN PGK PHP PKR PLN PYG QAR RON RSD
RUB RWF SAR SBD SCR SDG SEK SGD SHP SLE SLL SOS SRD SSP STN SVC SYP SZL THB TJS
TMT TND TOP TRY TTD TWD TZS UAH UGX USD USN UYI UYU UYW UZS VED VES VND VUV WST
XAF XAG XAU XBA XBB XBC XBD XCD XDR XOF XPD XPF XPT XSU XTS XUA XXX YER ZAR ZMW
ZWL
""".split()

_NO_MINOR_UNITS = """
BIF CLP DJF GNF ISK JPY KMF KRW PYG RWF UGX UYI VND VUV XAF XOF XPF
XAG XAU XBA XBB XBC XBD XDR XPD XPT XSU XTS XUA XXX
""".split()

_DECIMAL_PLACES: dict[str, int] = {
    **{code: 2 for code in _CODES},
    **{code: 0 for code in _NO_MINOR_UNITS},
    **{code: 3 for code in ("BHD", "IQD", "JOD", "KWD", "LYD", "OMR", "TND")},
    **{code: 4 for code in ("CLF", "UYW")},
}

_SYMBOLS: dict[str, str] = {
    "EUR": "€",
    "USD": "$",
    "AUD": "$",
    "CAD": "$",
    "NZD": "$",
    "HKD": "$",
    "SGD": "$",
    "MXN": "$",
    "ARS": "$",
    "CLP": "$",
    "COP": "$",
    "GBP": "£",
    "EGP": "£",
    "JPY": "¥",
    "CNY": "¥",
    "INR": "₹",
    "KRW": "₩",
    "RUB": "₽",
    "UAH": "₴",
    "ILS": "₪",
    "NGN": "₦",
    "PHP": "₱",
    "THB": "฿",
    "TRY": "₺",
    "VND": "₫",
    "PLN": "zł",
    "BRL": "R$",
    "ZAR": "R",
    "SEK": "kr",
    "NOK": "kr",
    "DKK": "kr",
    "ISK": "kr",
    "CZK": "Kč",
    "HUF": "Ft",
}


@dataclass(frozen=True)
class Currency:
    """An ISO 4217 currency identified by its three-letter code."""

    code: str = "EUR"

    def __post_init__(self) -> None:
        if self.code not in _DECIMAL_PLACES:
            raise ValueError(f"The currency code '{self.code}' does not exist")

    @classmethod
    def parse(cls, code: str) -> Currency:
        """Return the currency for an exact ISO 4217 code."""
        return cls(code)

    @property
    def decimal_places(self) -> int:
        return _DECIMAL_PLACES[self.code]

    @property
    def symbol(self) -> str:
        return _SYMBOLS.get(self.code, self.code)

    def __str__(self) -> str:
        return self.code


class CurrencyMismatchError(ValueError):
    """Raised when arithmetic mixes amounts of different currencies."""


class RateSource(Protocol):
    def rate(self, from_currency: Currency, to_currency: Currency) -> float: ...


def _round_half_away(value: float) -> int:
    if not math.isfinite(value):
        raise ValueError(f"Cannot represent {value} as an amount")
    whole = math.trunc(value)
    if abs(value - whole) >= 0.5:
        whole += 1 if value > 0 else -1
    return int(whole)


def _plain_number(value: float) -> str:
    """Shortest round-tripping decimal text, without exponent or trailing '.0'."""
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


@dataclass(frozen=True)
class Money:
    """An amount in minor units (cents) of a currency."""

    cents: int = 0
    currency: Currency = field(default_factory=Currency)

    @classmethod
    def parse(cls, value: str, currency: Currency) -> Money:
        """Parse a decimal number into an amount, rounding half away from zero."""
        if value != value.strip() or "_" in value:
            raise ValueError(f"invalid float literal: {value!r}")
        try:
            number = float(value)
        except ValueError:
            raise ValueError(f"invalid float literal: {value!r}") from None
        return cls(_round_half_away(number * 10**currency.decimal_places), currency)

    @property
    def is_zero(self) -> bool:
        return self.cents == 0

    @property
    def is_positive(self) -> bool:
        return self.cents > 0

    @property
    def is_negative(self) -> bool:
        return self.cents < 0

    def to_number(self) -> float:
        return self.cents / 10**self.currency.decimal_places

    def to_display(self) -> str:
        """Signed amount with thousands separators, e.g. ``+1,234.50``."""
        text = _plain_number(abs(self.to_number()))
        if "." in text:
            index = text.rindex(".")
            major, minor = text[:index], text[index:]
        else:
            major, minor = text, ".00"
        sign = "+" if self.is_positive else "-" if self.is_negative else ""
        return f"{sign}{int(major):,}{minor.ljust(3, '0')}"

    def to_storage(self) -> str:
        return self.to_display().replace(",", "")

    def exchange(self, to: Currency, exchange: RateSource) -> Money:
        """Convert into another currency using the rates of ``exchange``."""
        if self.currency == to:
            return self
        rate = float(exchange.rate(self.currency, to))
        adjust = 10.0 ** (to.decimal_places - self.currency.decimal_places)
        return Money(_round_half_away(self.cents * rate * adjust), to)

    def _same_currency(self, operator: str, other: Money) -> None:
        if self.currency != other.currency:
            raise CurrencyMismatchError(f"{self} {operator} {other}: {DIFFERENT_CURRENCIES}")

    def __add__(self, other: object) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        self._same_currency("+", other)
        return Money(self.cents + other.cents, self.currency)

    def __sub__(self, other: object) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        self._same_currency("-", other)
        return Money(self.cents - other.cents, self.currency)

    def __mul__(self, factor: object) -> Money:
        if not isinstance(factor, int) or isinstance(factor, bool):
            return NotImplemented
        return Money(self.cents * factor, self.currency)

    __rmul__ = __mul__

    def __neg__(self) -> Money:
        return Money(-self.cents, self.currency)

    def __abs__(self) -> Money:
        return Money(abs(self.cents), self.currency)

    def __str__(self) -> str:
        return f"{self.to_display()}{self.currency.symbol}"