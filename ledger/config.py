"""User configuration stored as YAML in the XDG configuration directory."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Mapping

import yaml

from ledger.paths import config_path
from ledger.records import Mode
from ledger.resource import Resource
from ledger.util import random_pass

CONFIGURATION_FILENAME = "config"
DEFAULT_EXCHANGE_KEY = "your app id from the Open Exchange Rates signup page"


def _require(data: Mapping[str, Any], name: str) -> Any:
    if name not in data:
        raise ValueError(f"missing field `{name}`")
    return data[name]


def _string(data: Mapping[str, Any], name: str) -> str:
    value = _require(data, name)
    if not isinstance(value, str):
        raise ValueError(f"invalid type for `{name}`, expected a string")
    return value


def _mapping(value: Any, name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValueError(f"invalid type for `{name}`, expected a mapping")
    return value


@dataclass
class FireflyOptions:
    """Connection settings for a Firefly III server."""

    base_path: str
    token: str
    opening_balance: str
    currency: str = ""
    transfer: str = ""


@dataclass
class Config:
    """Settings of the application."""

    encryption: str | None
    ledger_file: str
    networth_file: str
    exchange_key: str
    transfer: str
    ignored_accounts: list[str]
    investments: str
    currency: str
    firefly: FireflyOptions | None = field(default=None)

    @classmethod
    def path(cls) -> str:
        return config_path(CONFIGURATION_FILENAME)

    @classmethod
    def load(cls) -> Config:
        """Read the configuration, writing the default one first if there is none."""
        path = cls.path()
        if not os.path.exists(path):
            return cls.write_default(path)
        with open(path, encoding="utf-8") as handle:
            return cls._from_mapping(yaml.safe_load(handle))

    @classmethod
    def write_default(cls, path: str) -> Config:
        """Write a fresh default configuration to ``path`` and return it."""
        config = cls(
            encryption=random_pass(),
            ledger_file=config_path("ledger.csv"),
            networth_file=config_path("networth.csv"),
            exchange_key=DEFAULT_EXCHANGE_KEY,
            transfer="Transfer",
            ignored_accounts=["Personal"],
            investments="Investment",
            currency="EUR",
        )
        with open(path, "w", encoding="utf-8") as handle:
            yaml.safe_dump(config._to_mapping(), handle, sort_keys=False, allow_unicode=True)
        return config

    def filepath(self, mode: Mode) -> str:
        """The file for ``mode``; ``LEDGER_PATH`` overrides both."""
        path = os.environ.get("LEDGER_PATH")
        if path is None:
            path = self.ledger_file if mode is Mode.LEDGER else self.networth_file
        return os.path.expanduser(path)

    def total_pushable_lines(self) -> int:
        """Number of lines of both files not yet pushed."""
        total = 0
        for mode in (Mode.LEDGER, Mode.NETWORTH):
            with Resource.from_config(self, mode) as resource:
                total += sum(1 for line in resource.lines() if line.pushable())
        return total

    def _to_mapping(self) -> dict[str, Any]:
        firefly = None
        if self.firefly is not None:
            firefly = {
                "base_path": self.firefly.base_path,
                "token": self.firefly.token,
                "opening_balance": self.firefly.opening_balance,
            }
        return {
            "encryption": self.encryption,
            "files": {"ledger": self.ledger_file, "networth": self.networth_file},
            "exchange_key": self.exchange_key,
            "transfer": self.transfer,
            "ignored_accounts": list(self.ignored_accounts),
            "investments": self.investments,
            "currency": self.currency,
            "firefly": firefly,
        }

    @classmethod
    def _from_mapping(cls, data: Any) -> Config:
        data = _mapping(data, "config")
        encryption = data.get("encryption")
        if encryption is not None and not isinstance(encryption, str):
            raise ValueError("invalid type for `encryption`, expected a string")
        files = _mapping(_require(data, "files"), "files")
        ignored = _require(data, "ignored_accounts")
        if not isinstance(ignored, list) or not all(isinstance(v, str) for v in ignored):
            raise ValueError("invalid type for `ignored_accounts`, expected a list of strings")
        firefly_data = data.get("firefly")
        firefly = None
        if firefly_data is not None:
            firefly_data = _mapping(firefly_data, "firefly")
            firefly = FireflyOptions(
                base_path=_string(firefly_data, "base_path"),
                token=_string(firefly_data, "token"),
                opening_balance=_string(firefly_data, "opening_balance"),
            )
        return cls(
            encryption=encryption,
            ledger_file=_string(files, "ledger"),
            networth_file=_string(files, "networth"),
            exchange_key=_string(data, "exchange_key"),
            transfer=_string(data, "transfer"),
            ignored_accounts=list(ignored),
            investments=_string(data, "investments"),
            currency=_string(data, "currency"),
            firefly=firefly,
        )