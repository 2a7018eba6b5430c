"""Exception hierarchy for csr-keys."""


class CsrKeysError(Exception):
    """Base exception for all csr-keys errors."""

    pass


# Key material errors
class KeyMaterialError(CsrKeysError):
    """Base exception for key provisioning errors."""

    pass


class DecodeError(KeyMaterialError):
    """Cache blob could not be decoded into a usable RSA key."""

    pass


class KeyGenerationError(KeyMaterialError):
    """A single key generation attempt failed."""

    pass


class FatalProvisioningError(KeyMaterialError):
    """Key material could not be provisioned after regeneration."""

    pass


class NotInitializedError(KeyMaterialError):
    """Key material was requested before it was provisioned."""

    pass


# CSR errors
class CsrError(CsrKeysError):
    """Base exception for CSR construction errors."""

    pass


class InvalidSubjectError(CsrError):
    """Subject name is empty or malformed."""

    pass


# Provider errors
class ProviderConversionError(CsrKeysError):
    """Key could not be converted for the mandated provider.

    Callers should treat this as a signal to invalidate the cached key so
    the next issuance attempt generates a fresh one.
    """

    def __init__(self, message: str, provider: str = "unknown"):
        super().__init__(message)
        self.provider = provider


class ProviderUnavailableError(ProviderConversionError):
    """The mandated provider is not present on this host."""

    pass


class KeyNotConvertibleError(ProviderConversionError):
    """The provider is present but rejected the key."""

    pass


# Configuration errors
class ConfigurationError(CsrKeysError):
    """Invalid or unreadable configuration."""

    pass
