"""RSA CSR plugin tying key material, CSR building and conversion together."""

import logging
from typing import Optional

from cryptography.hazmat.primitives.asymmetric import rsa

from .core.crypto import KeyHandle
from .core.errors import ProviderConversionError
from .core.models import RsaOptions
from .csr.builder import Csr, CsrBuilder, SubjectName
from .material.key_material import KeyMaterial
from .provider.base import ProviderAdapter, ProviderKeyHandle
from .provider.software import SoftwareProvider

logger = logging.getLogger(__name__)


class RsaCsrPlugin:
    """Generates RSA backed CSRs for one issuance operation."""

    def __init__(
        self,
        options: Optional[RsaOptions] = None,
        cache_data: Optional[bytes] = None,
        provider: Optional[ProviderAdapter] = None,
        key_material: Optional[KeyMaterial] = None,
    ):
        """Initialize plugin.

        Args:
            options: Key size policy
            cache_data: Cache blob from a previous run
            provider: Provider for converted keys (default: SoftwareProvider)
            key_material: Preconfigured key material (overrides options and
                cache_data)
        """
        self.key_material = key_material or KeyMaterial(
            options=options, cache_blob=cache_data
        )
        self.provider = provider or SoftwareProvider()
        self.csr_builder = CsrBuilder()

    @property
    def cache_data(self) -> bytes:
        """Cache blob of the current key, for the persistence layer."""
        return self.key_material.export_cache_blob()

    def generate_csr(
        self, subject_name: SubjectName, dns_names: Optional[list[str]] = None
    ) -> Csr:
        """Generate a CSR for the subject, provisioning the key if needed."""
        return self.csr_builder.build(
            subject_name, self.key_material.get_key_handle(), dns_names=dns_names
        )

    def get_private_key(self) -> rsa.RSAPrivateKey:
        """Independent copy of the private key of the provisioned key pair.

        Raises:
            NotInitializedError: If no key has been provisioned yet
        """
        params = self.key_material.get_private_key_parameters()
        return params.to_private_numbers().private_key()

    def can_convert(self) -> bool:
        return self.provider.can_convert()

    def convert(self, key_handle: Optional[KeyHandle] = None) -> ProviderKeyHandle:
        """Convert a key for the configured provider.

        Args:
            key_handle: Key to convert (default: the provisioned key)

        Raises:
            ProviderConversionError: If the provider cannot take the key. The
                caller should invalidate the cache so the next run
                regenerates.
        """
        if key_handle is None:
            key_handle = self.key_material.get_key_handle()
        try:
            return self.provider.convert(key_handle)
        except ProviderConversionError as e:
            logger.warning(
                "Error converting private key to %s provider, which means it "
                "might not be usable for the consuming service",
                self.provider.name,
            )
            logger.debug("Conversion failure: %s", e)
            raise
