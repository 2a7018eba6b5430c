"""csr-keys - RSA key material lifecycle for certificate signing requests."""

from .core import (
    CsrKeysConfig,
    KeyCodec,
    KeyHandle,
    PrivateKeyParams,
    RsaOptions,
)
from .csr import Csr, CsrBuilder
from .material import KeyMaterial, KeyMaterialState
from .plugin import RsaCsrPlugin
from .provider import (
    Pkcs11Provider,
    ProviderAdapter,
    ProviderKeyHandle,
    SoftwareProvider,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "CsrKeysConfig",
    "KeyCodec",
    "KeyHandle",
    "PrivateKeyParams",
    "RsaOptions",
    # CSR
    "Csr",
    "CsrBuilder",
    # Key material
    "KeyMaterial",
    "KeyMaterialState",
    # Plugin
    "RsaCsrPlugin",
    # Providers
    "Pkcs11Provider",
    "ProviderAdapter",
    "ProviderKeyHandle",
    "SoftwareProvider",
]
