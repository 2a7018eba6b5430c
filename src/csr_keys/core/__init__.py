"""Core functionality for csr-keys."""

from .codec import KeyCodec
from .crypto import (
    KeyHandle,
    generate_rsa_key,
    verify,
    private_key_to_der,
    public_key_to_der,
)
from .errors import (
    CsrKeysError,
    KeyMaterialError,
    DecodeError,
    KeyGenerationError,
    FatalProvisioningError,
    NotInitializedError,
    CsrError,
    InvalidSubjectError,
    ProviderConversionError,
    ProviderUnavailableError,
    KeyNotConvertibleError,
    ConfigurationError,
)
from .models import (
    CsrKeysConfig,
    KeyPairRecord,
    Pkcs11Settings,
    PrivateKeyParams,
    RsaOptions,
)

__all__ = [
    # Codec
    "KeyCodec",
    # Crypto
    "KeyHandle",
    "generate_rsa_key",
    "verify",
    "private_key_to_der",
    "public_key_to_der",
    # Errors
    "CsrKeysError",
    "KeyMaterialError",
    "DecodeError",
    "KeyGenerationError",
    "FatalProvisioningError",
    "NotInitializedError",
    "CsrError",
    "InvalidSubjectError",
    "ProviderConversionError",
    "ProviderUnavailableError",
    "KeyNotConvertibleError",
    "ConfigurationError",
    # Models
    "CsrKeysConfig",
    "KeyPairRecord",
    "Pkcs11Settings",
    "PrivateKeyParams",
    "RsaOptions",
]
