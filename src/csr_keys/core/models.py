"""Core data models for csr-keys."""

import base64
import logging
from pathlib import Path
from typing import Any, Optional

import yaml
from cryptography.hazmat.primitives.asymmetric import rsa
from pydantic import BaseModel, Field, field_serializer, field_validator

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

MIN_KEY_BITS = 2048
RECORD_VERSION = "1.0"
RSA_ALGORITHM = "RSA"


class RsaOptions(BaseModel):
    """Key size policy for RSA key generation."""

    min_key_bits: int = Field(
        default=MIN_KEY_BITS,
        alias="minKeyBits",
        description="RSA modulus length in bits (floor 2048)",
    )

    model_config = {"populate_by_name": True}

    @field_validator("min_key_bits", mode="before")
    @classmethod
    def enforce_key_floor(cls, v: Any) -> int:
        """Clamp insecure or unreadable key sizes to the 2048 bit floor."""
        if v is None:
            return MIN_KEY_BITS
        try:
            bits = int(v)
        except (TypeError, ValueError):
            logger.warning(
                "Unable to read RSA key bits from %r, using %d", v, MIN_KEY_BITS
            )
            return MIN_KEY_BITS
        if bits < MIN_KEY_BITS:
            logger.warning(
                "RSA key bits less than %d is not secure (configured %d), using %d",
                MIN_KEY_BITS,
                bits,
                MIN_KEY_BITS,
            )
            return MIN_KEY_BITS
        return bits


class Pkcs11Settings(BaseModel):
    """Location and credentials of a PKCS#11 token."""

    module: str = Field(description="Path to the PKCS#11 shared library")
    token_label: str = Field(description="Label of the token to import keys into")
    user_pin: Optional[str] = Field(default=None, description="User PIN")


class CsrKeysConfig(BaseModel):
    """csr-keys configuration."""

    version: str = Field(default="1.0")
    rsa: RsaOptions = Field(default_factory=RsaOptions)
    pkcs11: Optional[Pkcs11Settings] = Field(default=None)

    @classmethod
    def from_config(cls, config_path: str | Path) -> "CsrKeysConfig":
        """Load configuration from a YAML file.

        Args:
            config_path: Path to YAML config file

        Returns:
            CsrKeysConfig instance

        Raises:
            ConfigurationError: If config file cannot be loaded or parsed
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")

        try:
            with open(config_path, "r") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to read config: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError("Config root must be a mapping")

        # Allow a bare top-level minKeyBits as shorthand for the rsa section
        if "minKeyBits" in data and "rsa" not in data:
            data = dict(data)
            data["rsa"] = {"minKeyBits": data.pop("minKeyBits")}

        try:
            return cls.model_validate(data)
        except ValueError as e:
            raise ConfigurationError(f"Invalid config: {e}") from e


class KeyPairRecord(BaseModel):
    """Persisted form of an RSA key pair (the cache blob)."""

    version: str = Field(default=RECORD_VERSION, description="Record format version")
    algorithm: str = Field(default=RSA_ALGORITHM, description="Key algorithm")
    key_size: int = Field(description="Modulus length in bits")
    key: bytes = Field(description="PKCS#8 DER private key")

    @field_validator("key", mode="before")
    @classmethod
    def decode_base64_bytes(cls, v: Any) -> bytes:
        """Decode base64 strings to bytes if needed."""
        if isinstance(v, str):
            return base64.b64decode(v, validate=True)
        return v

    @field_serializer("key", when_used="json")
    def encode_base64_bytes(self, v: bytes) -> str:
        return base64.b64encode(v).decode("utf-8")

    def to_blob(self) -> bytes:
        """Serialize the record to an opaque cache blob."""
        return self.model_dump_json().encode("utf-8")

    @classmethod
    def from_blob(cls, blob: bytes) -> "KeyPairRecord":
        """Parse a cache blob.

        Raises:
            pydantic.ValidationError: If the blob is not a valid record
        """
        return cls.model_validate_json(blob)


class PrivateKeyParams(BaseModel):
    """RSA private key parameters in CRT form."""

    key_size: int
    n: int = Field(description="Modulus")
    e: int = Field(description="Public exponent")
    d: int = Field(description="Private exponent")
    p: int = Field(description="First prime")
    q: int = Field(description="Second prime")
    dmp1: int = Field(description="d mod (p - 1)")
    dmq1: int = Field(description="d mod (q - 1)")
    iqmp: int = Field(description="q^-1 mod p")

    @classmethod
    def from_private_numbers(
        cls, numbers: rsa.RSAPrivateNumbers, key_size: int
    ) -> "PrivateKeyParams":
        return cls(
            key_size=key_size,
            n=numbers.public_numbers.n,
            e=numbers.public_numbers.e,
            d=numbers.d,
            p=numbers.p,
            q=numbers.q,
            dmp1=numbers.dmp1,
            dmq1=numbers.dmq1,
            iqmp=numbers.iqmp,
        )

    def to_private_numbers(self) -> rsa.RSAPrivateNumbers:
        return rsa.RSAPrivateNumbers(
            p=self.p,
            q=self.q,
            d=self.d,
            dmp1=self.dmp1,
            dmq1=self.dmq1,
            iqmp=self.iqmp,
            public_numbers=rsa.RSAPublicNumbers(e=self.e, n=self.n),
        )
