"""Provider conversion back-ends."""

from .base import ProviderAdapter, ProviderKeyHandle
from .pkcs11_provider import Pkcs11Provider
from .software import SoftwareProvider

__all__ = [
    "ProviderAdapter",
    "ProviderKeyHandle",
    "Pkcs11Provider",
    "SoftwareProvider",
]
