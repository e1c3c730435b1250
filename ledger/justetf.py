"""Quotes of exchange traded funds from the justETF service."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

import requests

from ledger.money import Currency, Money

URL = "https://www.justetf.com/api/etfs/cards"
_TIMEOUT = 30
_MISSING = object()


def _pointer(data: Any, *path: str | int) -> Any:
    """Follow ``path`` through nested lists and objects, or return ``_MISSING``."""
    for key in path:
        if isinstance(data, list) and isinstance(key, int):
            if not 0 <= key < len(data):
                return _MISSING
            data = data[key]
        elif isinstance(data, dict):
            name = str(key)
            if name not in data:
                return _MISSING
            data = data[name]
        else:
            return _MISSING
    return data


def _fetch(isin: str, currency: Currency) -> Any:
    response = requests.get(
        URL,
        params={"locale": "en", "currency": currency.code, "isin": isin},
        timeout=_TIMEOUT,
    )
    return response.json()


@dataclass(frozen=True)
class Asset:
    """A fund identified by its ISIN, with its name and current quote."""

    isin: str
    name: str
    quote: Money

    @classmethod
    def download(cls, isin: str, currency: Currency) -> Asset:
        """Fetch the name and the quote of ``isin`` in ``currency``."""
        data = _fetch(isin, currency)

        name = _pointer(data, "etfs", 0, "name")
        if not isinstance(name, str):
            raise ValueError("Asset name could not be found")

        raw = _pointer(data, "etfs", 0, "quote", "raw")
        if raw is _MISSING:
            raise ValueError("Asset value could not be found")

        quote = Money.parse(json.dumps(raw), currency)
        return cls(isin=isin, name=name, quote=quote)