import base64
import binascii
import hashlib
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from medreport.storage.exceptions import FileStoreError

NONCE_SIZE = 12


def derive_key(secret: str) -> bytes:
    """Return a 256-bit key.

    A base64 value decoding to 32 bytes is used as is; any other secret is
    hashed with SHA-256.
    """
    try:
        decoded = base64.b64decode(secret, validate=True)
    except (binascii.Error, ValueError):
        decoded = b""
    if len(decoded) == 32:
        return decoded
    return hashlib.sha256(secret.encode("utf-8")).digest()


class FileCipher:
    """AES-256-GCM; the stored blob is nonce followed by ciphertext and tag."""

    def __init__(self, secret: str) -> None:
        if not secret:
            raise FileStoreError("Encryption is enabled but no encryption key is configured")
        self._aead = AESGCM(derive_key(secret))

    def encrypt(self, data: bytes) -> bytes:
        nonce = os.urandom(NONCE_SIZE)
        return nonce + self._aead.encrypt(nonce, data, None)

    def decrypt(self, blob: bytes) -> bytes:
        if len(blob) <= NONCE_SIZE:
            raise FileStoreError("Encrypted file is truncated")
        try:
            return self._aead.decrypt(blob[:NONCE_SIZE], blob[NONCE_SIZE:], None)
        except InvalidTag as exc:
            raise FileStoreError("Failed to decrypt file: authentication failed") from exc
