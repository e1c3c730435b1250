"""Password-based encryption of whole files with a libsodium secret stream."""

from __future__ import annotations

import os
from typing import BinaryIO, Iterator

import nacl.exceptions
import nacl.utils
from nacl import bindings
from nacl.pwhash import argon2id

CHUNK_SIZE = 4096
SIGNATURE = bytes([0xC1, 0x0A, 0x4B, 0xED])

_HEADER_BYTES = bindings.crypto_secretstream_xchacha20poly1305_HEADERBYTES
_AUTH_BYTES = bindings.crypto_secretstream_xchacha20poly1305_ABYTES
_KEY_BYTES = bindings.crypto_secretstream_xchacha20poly1305_KEYBYTES
_TAG_MESSAGE = bindings.crypto_secretstream_xchacha20poly1305_TAG_MESSAGE
_TAG_FINAL = bindings.crypto_secretstream_xchacha20poly1305_TAG_FINAL
_SALT_BYTES = argon2id.SALTBYTES


class DecryptionError(ValueError):
    """Raised when a file cannot be decrypted."""


def _derive_key(password: str, salt: bytes) -> bytes:
    try:
        return argon2id.kdf(
            _KEY_BYTES,
            password.encode("utf-8"),
            salt,
            opslimit=argon2id.OPSLIMIT_INTERACTIVE,
            memlimit=argon2id.MEMLIMIT_INTERACTIVE,
        )
    except nacl.exceptions.CryptoError as exc:
        raise ValueError("Deriving key failed") from exc


def _chunks(source: BinaryIO, size: int) -> Iterator[bytes]:
    return iter(lambda: source.read(size), b"")


def encrypt(source: BinaryIO, target: BinaryIO, password: str) -> None:
    """Encrypt everything readable from ``source`` into ``target``."""
    target.write(SIGNATURE)
    salt = nacl.utils.random(_SALT_BYTES)
    target.write(salt)

    key = _derive_key(password, salt)
    state = bindings.crypto_secretstream_xchacha20poly1305_state()
    target.write(bindings.crypto_secretstream_xchacha20poly1305_init_push(state, key))

    chunks = _chunks(source, CHUNK_SIZE)
    current = next(chunks, None)
    while current is not None:
        following = next(chunks, None)
        tag = _TAG_FINAL if following is None else _TAG_MESSAGE
        target.write(bindings.crypto_secretstream_xchacha20poly1305_push(state, current, None, tag))
        current = following


def decrypt(source: BinaryIO, target: BinaryIO, password: str) -> None:
    """Decrypt a seekable ``source`` written by :func:`encrypt` into ``target``."""
    start = source.tell()
    size = source.seek(0, os.SEEK_END) - start
    source.seek(start)
    if size <= _SALT_BYTES + _HEADER_BYTES + len(SIGNATURE):
        raise DecryptionError("File not big enough to have been encrypted")

    signature = source.read(len(SIGNATURE))
    if signature == SIGNATURE:
        salt = source.read(_SALT_BYTES)
    else:
        # Files without a signature start directly with the salt.
        salt = signature + source.read(_SALT_BYTES - len(signature))
    header = source.read(_HEADER_BYTES)

    key = _derive_key(password, salt)
    state = bindings.crypto_secretstream_xchacha20poly1305_state()
    try:
        bindings.crypto_secretstream_xchacha20poly1305_init_pull(state, header, key)
    except nacl.exceptions.CryptoError as exc:
        raise DecryptionError("init_pull failed") from exc

    for chunk in _chunks(source, CHUNK_SIZE + _AUTH_BYTES):
        try:
            message, tag = bindings.crypto_secretstream_xchacha20poly1305_pull(state, chunk, None)
        except nacl.exceptions.CryptoError as exc:
            raise DecryptionError("Incorrect password") from exc
        target.write(message)
        if tag == _TAG_FINAL:
            return
    raise DecryptionError("Decrypting file failed")