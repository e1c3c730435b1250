"""Access to the ledger and networth files through a private working copy."""

from __future__ import annotations

import contextlib
import csv
import os
import shutil
import weakref
from tempfile import mkstemp
from typing import Any, Callable, Iterable, Iterator

from ledger.crypto import decrypt, encrypt
from ledger.records import Line, Mode, fields_for, read_lines, write_lines


class ResourceLockedError(RuntimeError):
    """Raised when another instance holds the lock of a file."""


def _cleanup(lock_path: str, working_copy: str) -> None:
    for path in (working_copy, lock_path):
        with contextlib.suppress(FileNotFoundError):
            os.remove(path)


@contextlib.contextmanager
def _scratch() -> Iterator[str]:
    handle, path = mkstemp(suffix=".csv")
    os.close(handle)
    try:
        yield path
    finally:
        with contextlib.suppress(FileNotFoundError):
            os.remove(path)


class Resource:
    """A locked ledger or networth file, decrypted into a temporary copy while in use."""

    def __init__(self, filepath: str, mode: Mode, password: str | None = None) -> None:
        self.filepath = filepath
        self.mode = mode
        self._password = password
        lock_path = f"{filepath}.lock"
        try:
            handle = os.open(lock_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
        except OSError as exc:
            raise ResourceLockedError(f"Another instance already loaded '{filepath}'") from exc
        os.close(handle)
        try:
            handle, self.tempfile = mkstemp(suffix=".csv")
        except OSError:
            os.remove(lock_path)
            raise
        os.close(handle)
        self._finalizer = weakref.finalize(self, _cleanup, lock_path, self.tempfile)

    @classmethod
    def from_config(cls, config: Any, mode: Mode) -> Resource:
        """Open the file that ``config`` assigns to ``mode``."""
        return cls(config.filepath(mode), mode, config.encryption)

    def __enter__(self) -> Resource:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Release the lock and remove the working copy."""
        self._finalizer()

    def headers(self) -> list[str]:
        return fields_for(self.mode)

    def create(self) -> None:
        """Replace the file with one holding only the header."""
        with open(self.tempfile, "w", newline="", encoding="utf-8") as handle:
            csv.writer(handle, lineterminator="\n").writerow(self.headers())
        self._save(self.tempfile)

    def create_with(self, lines: Iterable[Line]) -> None:
        """Replace the file with ``lines``, headed by the header when there are any."""
        with _scratch() as path:
            with open(path, "w", newline="", encoding="utf-8") as handle:
                write_lines(handle, lines)
            self._save(path)

    def book(self, lines: Iterable[Line]) -> None:
        """Append ``lines`` to the end of the file."""
        self._load()
        with open(self.tempfile, "a", newline="", encoding="utf-8") as handle:
            write_lines(handle, lines, header=False)
        self._save(self.tempfile)

    @contextlib.contextmanager
    def editing(self) -> Iterator[str]:
        """Yield the path of the decrypted copy; it is stored back if the block succeeds."""
        self._load()
        yield self.tempfile
        self._save(self.tempfile)

    def rewrite(self, action: Callable[[Line], Iterable[Line]]) -> None:
        """Replace every line by the lines ``action`` returns for it."""
        with _scratch() as path:
            with open(path, "w", newline="", encoding="utf-8") as handle:
                write_lines(handle, (new for record in self.lines() for new in action(record)))
            self._save(path)

    def lines(self) -> Iterator[Line]:
        """Yield every line of the file."""
        self._load()
        with open(self.tempfile, newline="", encoding="utf-8") as handle:
            yield from read_lines(handle, self.mode)

    def _load(self) -> None:
        if self._password is not None:
            with open(self.filepath, "rb") as source:
                try:
                    with open(self.tempfile, "wb") as target:
                        decrypt(source, target, self._password)
                    return
                except ValueError:
                    # Not encrypted: keep working with the plain file from now on.
                    self._password = None
        shutil.copyfile(self.filepath, self.tempfile)

    def _save(self, path: str) -> None:
        if self._password is not None:
            with open(path, "rb") as source, open(self.filepath, "wb") as target:
                encrypt(source, target, self._password)
        else:
            shutil.copyfile(path, self.filepath)