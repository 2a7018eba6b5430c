"""Certificate signing request construction."""

import logging
from typing import Optional, Union

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from ..core.crypto import KeyHandle
from ..core.errors import InvalidSubjectError

logger = logging.getLogger(__name__)

SubjectName = Union[x509.Name, str]


class Csr:
    """Signed certificate signing request."""

    def __init__(self, request: x509.CertificateSigningRequest):
        self._request = request

    @property
    def request(self) -> x509.CertificateSigningRequest:
        return self._request

    @property
    def subject(self) -> x509.Name:
        return self._request.subject

    @property
    def is_signature_valid(self) -> bool:
        return self._request.is_signature_valid

    def public_key(self) -> rsa.RSAPublicKey:
        return self._request.public_key()

    def dns_names(self) -> list[str]:
        """DNS names from the SubjectAlternativeName extension, if present."""
        try:
            san = self._request.extensions.get_extension_for_class(
                x509.SubjectAlternativeName
            )
        except x509.ExtensionNotFound:
            return []
        return san.value.get_values_for_type(x509.DNSName)

    def to_der(self) -> bytes:
        return self._request.public_bytes(serialization.Encoding.DER)

    def to_pem(self) -> bytes:
        return self._request.public_bytes(serialization.Encoding.PEM)


def parse_subject_name(subject_name: SubjectName) -> x509.Name:
    """Normalize a subject name to an x509.Name.

    Args:
        subject_name: x509.Name or RFC 4514 string (e.g. "CN=example.com")

    Returns:
        Parsed name

    Raises:
        InvalidSubjectError: If the name is empty or cannot be parsed
    """
    if isinstance(subject_name, x509.Name):
        name = subject_name
    elif isinstance(subject_name, str):
        if not subject_name.strip():
            raise InvalidSubjectError("Subject name is empty")
        try:
            name = x509.Name.from_rfc4514_string(subject_name)
        except ValueError as e:
            raise InvalidSubjectError(f"Malformed subject name: {subject_name!r}") from e
    else:
        raise InvalidSubjectError(
            f"Unsupported subject name type: {type(subject_name).__name__}"
        )

    if len(name) == 0:
        raise InvalidSubjectError("Subject name is empty")
    return name


class CsrBuilder:
    """Builds CSRs signed with SHA-256 and PKCS#1 v1.5 padding."""

    def build(
        self,
        subject_name: SubjectName,
        key_handle: KeyHandle,
        dns_names: Optional[list[str]] = None,
    ) -> Csr:
        """Build and sign a CSR.

        Args:
            subject_name: Distinguished name of the subject
            key_handle: Key pair whose public key the CSR carries
            dns_names: Optional DNS identifiers for a SubjectAlternativeName
                extension

        Returns:
            Signed CSR

        Raises:
            InvalidSubjectError: If the subject name is empty or malformed
        """
        name = parse_subject_name(subject_name)

        builder = x509.CertificateSigningRequestBuilder().subject_name(name)
        if dns_names:
            # Deduplicate, preserve order
            unique = list(dict.fromkeys(dns_names))
            builder = builder.add_extension(
                x509.SubjectAlternativeName([x509.DNSName(d) for d in unique]),
                critical=False,
            )

        request = builder.sign(
            key_handle.private_key, hashes.SHA256(), rsa_padding=padding.PKCS1v15()
        )
        logger.debug("Built CSR for %s", name.rfc4514_string())
        return Csr(request)
