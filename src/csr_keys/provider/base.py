"""Provider conversion interface."""

import uuid
from abc import ABC, abstractmethod
from typing import Any, Optional

from ..core.crypto import KeyHandle


class ProviderKeyHandle:
    """Key material bound to a specific cryptographic provider.

    The handle owns a copy of the key parameters; it does not alias the
    KeyHandle it was converted from.
    """

    def __init__(
        self,
        provider: str,
        container_name: str,
        key_size: int,
        native: Optional[Any] = None,
    ):
        """Initialize provider key handle.

        Args:
            provider: Name of the provider holding the key
            container_name: Provider-scoped container identity of the key
            key_size: Modulus length in bits
            native: Provider-native key object, when one outlives conversion
        """
        self.provider = provider
        self.container_name = container_name
        self.key_size = key_size
        self.native = native

    def __repr__(self) -> str:
        return (
            f"ProviderKeyHandle(provider={self.provider!r}, "
            f"container_name={self.container_name!r}, key_size={self.key_size})"
        )


class ProviderAdapter(ABC):
    """Converts generic key handles into provider-backed handles."""

    name: str = "provider"

    @abstractmethod
    def convert(self, key_handle: KeyHandle) -> ProviderKeyHandle:
        """Convert a key into the provider's format.

        Args:
            key_handle: Key pair to convert (never modified)

        Returns:
            Provider-backed key handle

        Raises:
            ProviderUnavailableError: If the provider is missing on this host
            KeyNotConvertibleError: If the provider rejects the key
        """

    def can_convert(self) -> bool:
        """Whether this provider can be used on this host."""
        return True

    @staticmethod
    def new_container_name() -> str:
        """Fresh container identity, never reused across conversions."""
        return str(uuid.uuid4())
