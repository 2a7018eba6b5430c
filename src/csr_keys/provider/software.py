"""In-process provider backed by the cryptography OpenSSL bindings."""

import logging

from cryptography.exceptions import UnsupportedAlgorithm

from ..core.crypto import KeyHandle
from ..core.errors import KeyNotConvertibleError
from .base import ProviderAdapter, ProviderKeyHandle

logger = logging.getLogger(__name__)

# Limits of the legacy RSA SChannel provider
SCHANNEL_MIN_KEY_SIZE = 384
SCHANNEL_MAX_KEY_SIZE = 16384


class SoftwareProvider(ProviderAdapter):
    """Copies RSA parameters into an independent key under a provider policy."""

    name = "software"

    def __init__(
        self,
        min_key_size: int = SCHANNEL_MIN_KEY_SIZE,
        max_key_size: int = SCHANNEL_MAX_KEY_SIZE,
        allowed_public_exponents: tuple[int, ...] = (3, 65537),
    ):
        """Initialize software provider.

        Args:
            min_key_size: Smallest accepted modulus in bits
            max_key_size: Largest accepted modulus in bits
            allowed_public_exponents: Accepted public exponents
        """
        self.min_key_size = min_key_size
        self.max_key_size = max_key_size
        self.allowed_public_exponents = allowed_public_exponents

    def convert(self, key_handle: KeyHandle) -> ProviderKeyHandle:
        container_name = self.new_container_name()
        key_size = key_handle.key_size

        if not self.min_key_size <= key_size <= self.max_key_size:
            raise KeyNotConvertibleError(
                f"Key size {key_size} outside provider range "
                f"{self.min_key_size}-{self.max_key_size}",
                provider=self.name,
            )

        try:
            numbers = key_handle.private_numbers()
            if numbers.public_numbers.e not in self.allowed_public_exponents:
                raise KeyNotConvertibleError(
                    f"Public exponent {numbers.public_numbers.e} not supported",
                    provider=self.name,
                )
            private_key = numbers.private_key()
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise KeyNotConvertibleError(
                f"Unable to import key parameters: {e}", provider=self.name
            ) from e

        if private_key.public_key().public_numbers() != numbers.public_numbers:
            raise KeyNotConvertibleError(
                "Imported key does not match source key", provider=self.name
            )

        logger.debug("Converted %d bit key into container %s", key_size, container_name)
        return ProviderKeyHandle(
            provider=self.name,
            container_name=container_name,
            key_size=key_size,
            native=private_key,
        )
