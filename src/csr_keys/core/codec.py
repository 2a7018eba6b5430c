"""Cache blob codec for RSA key pairs."""

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from .crypto import KeyHandle, private_key_to_der
from .errors import DecodeError
from .models import RECORD_VERSION, RSA_ALGORITHM, KeyPairRecord


class KeyCodec:
    """Serializes key handles to and from opaque cache blobs.

    The codec keeps no state between calls.
    """

    def encode(self, handle: KeyHandle) -> bytes:
        """Encode a key handle.

        Args:
            handle: Live key pair

        Returns:
            Cache blob bytes
        """
        record = KeyPairRecord(
            key_size=handle.key_size,
            key=private_key_to_der(handle.private_key),
        )
        return record.to_blob()

    def decode(self, blob: bytes) -> KeyHandle:
        """Decode a cache blob.

        Args:
            blob: Cache blob produced by encode()

        Returns:
            Live key pair

        Raises:
            DecodeError: If the blob is empty, malformed, truncated, not an
                RSA key, or its recorded size does not match the key
        """
        if not blob:
            raise DecodeError("Cache blob is empty")

        try:
            record = KeyPairRecord.from_blob(blob)
        except ValueError as e:
            raise DecodeError(f"Malformed cache blob: {e}") from e

        if record.version != RECORD_VERSION:
            raise DecodeError(f"Unsupported cache blob version: {record.version}")
        if record.algorithm != RSA_ALGORITHM:
            raise DecodeError(f"Unexpected key algorithm: {record.algorithm}")

        try:
            private_key = serialization.load_der_private_key(record.key, password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise DecodeError(f"Unreadable private key in cache blob: {e}") from e

        if not isinstance(private_key, rsa.RSAPrivateKey):
            raise DecodeError("Cache blob does not hold an RSA private key")
        if private_key.key_size != record.key_size:
            raise DecodeError(
                f"Key size mismatch: record says {record.key_size}, "
                f"key is {private_key.key_size}"
            )

        return KeyHandle(private_key)
