"""Currency exchange rates, downloaded and cached on disk for half a day."""

from __future__ import annotations

import math
import os
import struct
import time
from dataclasses import dataclass, field
from typing import Any, Mapping

import requests
import yaml

from ledger.money import Currency
from ledger.paths import cache_path

EXCHANGE_CACHE_FILENAME = "exchange.yml"
EXCHANGE_CACHE_TTL = 43200  # 12 hours
LATEST_URL = "https://openexchangerates.org/api/latest.json"
_TIMEOUT = 30


class MissingRateError(LookupError):
    """Raised when no rate is known for a currency."""


def _single(value: float) -> float:
    """Round to single precision, the precision rates are kept in."""
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _require(data: Mapping[str, Any], name: str) -> Any:
    if name not in data:
        raise ValueError(f"missing field `{name}`")
    return data[name]


@dataclass(frozen=True)
class ExchangeCache:
    """The on-disk copy of the latest rates."""

    filepath: str = field(default_factory=lambda: cache_path(EXCHANGE_CACHE_FILENAME))

    def valid(self) -> bool:
        """Whether the cache exists and is younger than the time to live."""
        try:
            mtime = os.stat(self.filepath).st_mtime
        except OSError:
            return False
        elapsed = time.time() - mtime
        if elapsed < 0:
            elapsed = EXCHANGE_CACHE_TTL
        return int(elapsed) < EXCHANGE_CACHE_TTL


@dataclass
class Exchange:
    """Rates of every currency against a common base."""

    timestamp: int
    base: str
    rates: dict[str, float]

    def __post_init__(self) -> None:
        self.rates = {code: _single(float(value)) for code, value in sorted(self.rates.items())}

    @classmethod
    def load(cls, config: Any) -> Exchange:
        """Use the cached rates while fresh, otherwise download and cache them."""
        cache = ExchangeCache()
        if cache.valid():
            return cls._read(cache)
        try:
            exchange = fetch_latest(config.exchange_key)
        except (requests.RequestException, ValueError, KeyError, TypeError):
            return cls._read(cache)
        exchange._store(cache)
        return exchange

    def rate(self, from_currency: Currency, to_currency: Currency) -> float:
        """How many units of ``to_currency`` one unit of ``from_currency`` buys."""
        dividend = self._lookup(to_currency)
        divisor = self._lookup(from_currency)
        if divisor == 0.0:
            if dividend == 0.0 or math.isnan(dividend):
                return math.nan
            return math.copysign(math.inf, dividend) * math.copysign(1.0, divisor)
        return _single(dividend / divisor)

    def _lookup(self, currency: Currency) -> float:
        try:
            return self.rates[currency.code]
        except KeyError:
            raise MissingRateError(
                f"There is no exchange currency for '{currency.code}'"
            ) from None

    @classmethod
    def _from_mapping(cls, data: Any) -> Exchange:
        if not isinstance(data, Mapping):
            raise ValueError("Exchange rates must be a mapping")
        timestamp = _require(data, "timestamp")
        base = _require(data, "base")
        rates = _require(data, "rates")
        if not isinstance(timestamp, int) or isinstance(timestamp, bool):
            raise ValueError("invalid type for `timestamp`, expected an integer")
        if not isinstance(base, str):
            raise ValueError("invalid type for `base`, expected a string")
        if not isinstance(rates, Mapping) or not all(
            isinstance(code, str)
            and isinstance(value, (int, float))
            and not isinstance(value, bool)
            for code, value in rates.items()
        ):
            raise ValueError("invalid type for `rates`, expected a map of numbers")
        return cls(timestamp=timestamp, base=base, rates=dict(rates))

    @classmethod
    def _read(cls, cache: ExchangeCache) -> Exchange:
        with open(cache.filepath, encoding="utf-8") as handle:
            return cls._from_mapping(yaml.safe_load(handle))

    def _store(self, cache: ExchangeCache) -> None:
        document = {"timestamp": self.timestamp, "base": self.base, "rates": dict(self.rates)}
        with open(cache.filepath, "w", encoding="utf-8") as handle:
            yaml.safe_dump(document, handle, sort_keys=False)


def fetch_latest(app_id: str) -> Exchange:
    """Download the latest rates from Open Exchange Rates."""
    response = requests.get(f"{LATEST_URL}?app_id={app_id}", timeout=_TIMEOUT)
    data = response.json()
    if not isinstance(data, Mapping):
        raise ValueError("Unexpected response from the exchange rates service")
    for name in ("disclaimer", "license"):
        if not isinstance(_require(data, name), str):
            raise ValueError(f"invalid type for `{name}`, expected a string")
    return Exchange._from_mapping(data)