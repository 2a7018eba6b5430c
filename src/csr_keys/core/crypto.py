"""RSA key generation and the live key handle."""

import logging

from cryptography.exceptions import InternalError, InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from .errors import KeyGenerationError

logger = logging.getLogger(__name__)

PUBLIC_EXPONENT = 65537


class KeyHandle:
    """Live RSA key pair held in memory for one issuance operation."""

    def __init__(self, private_key: rsa.RSAPrivateKey):
        """Wrap an RSA private key.

        Args:
            private_key: RSA private key

        Raises:
            TypeError: If the key is not an RSA private key
        """
        if not isinstance(private_key, rsa.RSAPrivateKey):
            raise TypeError(
                f"Expected an RSA private key, got {type(private_key).__name__}"
            )
        self._private_key = private_key

    @property
    def private_key(self) -> rsa.RSAPrivateKey:
        return self._private_key

    @property
    def key_size(self) -> int:
        return self._private_key.key_size

    def public_key(self) -> rsa.RSAPublicKey:
        return self._private_key.public_key()

    def public_numbers(self) -> rsa.RSAPublicNumbers:
        return self._private_key.public_key().public_numbers()

    def private_numbers(self) -> rsa.RSAPrivateNumbers:
        return self._private_key.private_numbers()

    def public_key_bytes(self) -> bytes:
        """DER encoded SubjectPublicKeyInfo."""
        return public_key_to_der(self.public_key())

    def sign(self, message: bytes) -> bytes:
        """Sign a message with SHA-256 and PKCS#1 v1.5 padding.

        Args:
            message: Message to sign

        Returns:
            Signature bytes
        """
        return self._private_key.sign(message, padding.PKCS1v15(), hashes.SHA256())

    def matches(self, other: "KeyHandle") -> bool:
        """Check whether two handles hold the same key pair."""
        return self.public_numbers() == other.public_numbers()

    def __repr__(self) -> str:
        return f"KeyHandle(rsa, key_size={self.key_size})"


def generate_rsa_key(
    key_size: int, public_exponent: int = PUBLIC_EXPONENT
) -> rsa.RSAPrivateKey:
    """Generate a new RSA private key.

    Args:
        key_size: Modulus length in bits
        public_exponent: Public exponent (default 65537)

    Returns:
        RSA private key

    Raises:
        KeyGenerationError: If the backend refuses to generate the key
    """
    logger.debug("Generating %d bit RSA key", key_size)
    try:
        return rsa.generate_private_key(
            public_exponent=public_exponent, key_size=key_size
        )
    except (ValueError, TypeError, UnsupportedAlgorithm, InternalError) as e:
        raise KeyGenerationError(f"Unable to generate RSA key: {e}") from e


def verify(public_key: rsa.RSAPublicKey, message: bytes, signature: bytes) -> bool:
    """Verify a SHA-256 PKCS#1 v1.5 signature.

    Args:
        public_key: RSA public key
        message: Original message
        signature: Signature to verify

    Returns:
        True if signature is valid, False otherwise
    """
    try:
        public_key.verify(signature, message, padding.PKCS1v15(), hashes.SHA256())
        return True
    except InvalidSignature:
        return False


def private_key_to_der(private_key: rsa.RSAPrivateKey) -> bytes:
    """Serialize a private key to unencrypted PKCS#8 DER."""
    return private_key.private_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


def public_key_to_der(public_key: rsa.RSAPublicKey) -> bytes:
    return public_key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
