"""PKCS#11 token provider."""

import logging
from pathlib import Path
from typing import Optional

import pkcs11
from pkcs11 import Attribute, KeyType, ObjectClass
from pkcs11.exceptions import PKCS11Error
from pkcs11.util import biginteger

from ..core.crypto import KeyHandle
from ..core.errors import KeyNotConvertibleError, ProviderUnavailableError
from ..core.models import Pkcs11Settings
from .base import ProviderAdapter, ProviderKeyHandle

logger = logging.getLogger(__name__)


def _format_exception(exc: Exception) -> str:
    details = str(exc).strip()
    if details:
        return f"{type(exc).__name__}: {details}"
    return type(exc).__name__


class Pkcs11Provider(ProviderAdapter):
    """Imports RSA keys into a PKCS#11 token as extractable private keys."""

    name = "pkcs11"

    def __init__(
        self,
        module: str | Path,
        token_label: str,
        user_pin: Optional[str] = None,
    ):
        """Initialize PKCS#11 provider.

        Args:
            module: Path to the PKCS#11 shared library
            token_label: Label of the target token
            user_pin: User PIN for the token
        """
        self.module = Path(module)
        self.token_label = token_label
        self.user_pin = user_pin

    @classmethod
    def from_settings(cls, settings: Pkcs11Settings) -> "Pkcs11Provider":
        return cls(
            module=settings.module,
            token_label=settings.token_label,
            user_pin=settings.user_pin,
        )

    def can_convert(self) -> bool:
        return self.module.is_file()

    def convert(self, key_handle: KeyHandle) -> ProviderKeyHandle:
        token = self._open_token()
        container_name = self.new_container_name()
        try:
            template = self._key_template(key_handle, container_name)
        except (TypeError, ValueError, OverflowError) as e:
            raise KeyNotConvertibleError(
                f"Unable to export key parameters: {_format_exception(e)}",
                provider=self.name,
            ) from e

        try:
            session = token.open(rw=True, user_pin=self.user_pin)
        except (PKCS11Error, RuntimeError) as e:
            raise ProviderUnavailableError(
                f"Unable to open session on token {self.token_label!r}: "
                f"{_format_exception(e)}",
                provider=self.name,
            ) from e

        try:
            with session:
                session.create_object(template)
        except (PKCS11Error, TypeError, ValueError, RuntimeError) as e:
            raise KeyNotConvertibleError(
                f"Token {self.token_label!r} rejected key: {_format_exception(e)}",
                provider=self.name,
            ) from e

        logger.debug(
            "Imported %d bit key into token %s as %s",
            key_handle.key_size,
            self.token_label,
            container_name,
        )
        return ProviderKeyHandle(
            provider=self.name,
            container_name=container_name,
            key_size=key_handle.key_size,
        )

    @staticmethod
    def _key_template(key_handle: KeyHandle, container_name: str) -> dict:
        numbers = key_handle.private_numbers()
        return {
            Attribute.CLASS: ObjectClass.PRIVATE_KEY,
            Attribute.KEY_TYPE: KeyType.RSA,
            Attribute.TOKEN: True,
            Attribute.PRIVATE: True,
            Attribute.SENSITIVE: False,
            Attribute.EXTRACTABLE: True,
            Attribute.SIGN: True,
            Attribute.DECRYPT: True,
            Attribute.LABEL: container_name,
            Attribute.ID: container_name.encode("ascii"),
            Attribute.MODULUS: biginteger(numbers.public_numbers.n),
            Attribute.PUBLIC_EXPONENT: biginteger(numbers.public_numbers.e),
            Attribute.PRIVATE_EXPONENT: biginteger(numbers.d),
            Attribute.PRIME_1: biginteger(numbers.p),
            Attribute.PRIME_2: biginteger(numbers.q),
            Attribute.EXPONENT_1: biginteger(numbers.dmp1),
            Attribute.EXPONENT_2: biginteger(numbers.dmq1),
            Attribute.COEFFICIENT: biginteger(numbers.iqmp),
        }

    def _open_token(self) -> "pkcs11.Token":
        if not self.can_convert():
            raise ProviderUnavailableError(
                f"PKCS#11 module not found: {self.module}", provider=self.name
            )
        try:
            lib = pkcs11.lib(str(self.module))
            return lib.get_token(token_label=self.token_label)
        except (OSError, RuntimeError, PKCS11Error) as e:
            raise ProviderUnavailableError(
                f"PKCS#11 token {self.token_label!r} unavailable: {_format_exception(e)}",
                provider=self.name,
            ) from e
