"""Lazy, self-healing RSA key provisioning."""

import logging
from enum import Enum
from typing import Callable, Optional

from cryptography.hazmat.primitives.asymmetric import rsa

from ..core.codec import KeyCodec
from ..core.crypto import KeyHandle, generate_rsa_key
from ..core.errors import (
    DecodeError,
    FatalProvisioningError,
    KeyGenerationError,
    NotInitializedError,
)
from ..core.models import MIN_KEY_BITS, PrivateKeyParams, RsaOptions

logger = logging.getLogger(__name__)

# One initial attempt plus exactly one regeneration
MAX_GENERATION_ATTEMPTS = 2

KeyGenerator = Callable[[int], rsa.RSAPrivateKey]


class KeyMaterialState(str, Enum):
    """Provisioning states of a KeyMaterial instance."""

    EMPTY = "empty"
    CACHED = "cached"
    REGENERATING = "regenerating"
    LIVE = "live"


class KeyMaterial:
    """Provisions exactly one RSA key pair for one issuance operation.

    A supplied cache blob is reused when it decodes. Otherwise a fresh key
    is generated and encoded into a new blob, which the caller should
    persist via export_cache_blob(). Not thread-safe.
    """

    def __init__(
        self,
        options: Optional[RsaOptions] = None,
        cache_blob: Optional[bytes] = None,
        codec: Optional[KeyCodec] = None,
        key_generator: Optional[KeyGenerator] = None,
    ):
        """Initialize key material.

        Args:
            options: Key size policy (default: 2048 bits)
            cache_blob: Previously exported cache blob, if any
            codec: Cache blob codec
            key_generator: Callable taking a bit length and returning an RSA
                private key (default: generate_rsa_key)
        """
        self.options = options or RsaOptions()
        self.codec = codec or KeyCodec()
        self.key_generator = key_generator or generate_rsa_key

        self._cache_blob = cache_blob
        self._handle: Optional[KeyHandle] = None
        self._state = (
            KeyMaterialState.CACHED if cache_blob else KeyMaterialState.EMPTY
        )
        self.transitions: list[tuple[KeyMaterialState, KeyMaterialState]] = []

    @property
    def state(self) -> KeyMaterialState:
        return self._state

    @property
    def key_bits(self) -> int:
        """Effective key size for newly generated keys."""
        return self.options.min_key_bits

    def get_key_handle(self) -> KeyHandle:
        """Return the live key pair, provisioning it on first call.

        Returns:
            The memoized key handle

        Raises:
            FatalProvisioningError: If two consecutive generation attempts fail
        """
        if self._state is KeyMaterialState.LIVE and self._handle is not None:
            return self._handle

        if self._state is KeyMaterialState.CACHED:
            try:
                handle = self.codec.decode(self._cache_blob)
                if handle.key_size < MIN_KEY_BITS:
                    raise DecodeError(
                        f"Cached key has {handle.key_size} bits, below the "
                        f"{MIN_KEY_BITS} bit floor"
                    )
            except DecodeError as e:
                logger.warning("Unable to read cache data, creating new key: %s", e)
                self._cache_blob = None
                self._transition(KeyMaterialState.REGENERATING)
            else:
                return self._go_live(handle, self._cache_blob)

        handle, blob = self._generate()
        return self._go_live(handle, blob)

    def get_private_key_parameters(self) -> PrivateKeyParams:
        """Export the private key parameters of the live key.

        Raises:
            NotInitializedError: If get_key_handle() has not succeeded yet
        """
        handle = self._require_live()
        return PrivateKeyParams.from_private_numbers(
            handle.private_numbers(), handle.key_size
        )

    def export_cache_blob(self) -> bytes:
        """Return the cache blob of the live key for persistence.

        Raises:
            NotInitializedError: If get_key_handle() has not succeeded yet
        """
        self._require_live()
        return self._cache_blob

    def invalidate(self) -> None:
        """Discard the live key and its blob so the next access regenerates.

        Used when a downstream provider rejected the key.
        """
        logger.debug("Invalidating cached RSA key material")
        self._handle = None
        self._cache_blob = None
        self._transition(KeyMaterialState.EMPTY)

    def _generate(self) -> tuple[KeyHandle, bytes]:
        key_bits = self.key_bits
        logger.debug("RSAKeyBits: %d", key_bits)

        last_error: Optional[Exception] = None
        for attempt in range(1, MAX_GENERATION_ATTEMPTS + 1):
            try:
                handle = self._new_handle(key_bits)
                blob = self.codec.encode(handle)
                # The fresh blob must decode before it is handed out
                return self.codec.decode(blob), blob
            except (KeyGenerationError, DecodeError) as e:
                last_error = e
                logger.warning(
                    "RSA key generation attempt %d/%d failed: %s",
                    attempt,
                    MAX_GENERATION_ATTEMPTS,
                    e,
                )
                if self._state is not KeyMaterialState.REGENERATING:
                    self._transition(KeyMaterialState.REGENERATING)

        raise FatalProvisioningError(
            f"Unable to provision RSA key after {MAX_GENERATION_ATTEMPTS} attempts"
        ) from last_error

    def _new_handle(self, key_bits: int) -> KeyHandle:
        try:
            handle = KeyHandle(self.key_generator(key_bits))
        except KeyGenerationError:
            raise
        except Exception as e:
            # Entropy, backend or injected generator failures count as an attempt
            raise KeyGenerationError(f"Unable to generate RSA key: {e}") from e
        if handle.key_size < key_bits:
            raise KeyGenerationError(
                f"Generated key has {handle.key_size} bits, "
                f"expected at least {key_bits}"
            )
        return handle

    def _go_live(self, handle: KeyHandle, blob: bytes) -> KeyHandle:
        self._handle = handle
        self._cache_blob = blob
        self._transition(KeyMaterialState.LIVE)
        return handle

    def _require_live(self) -> KeyHandle:
        if self._state is not KeyMaterialState.LIVE or self._handle is None:
            raise NotInitializedError("No key has been provisioned yet")
        return self._handle

    def _transition(self, new_state: KeyMaterialState) -> None:
        self.transitions.append((self._state, new_state))
        self._state = new_state
