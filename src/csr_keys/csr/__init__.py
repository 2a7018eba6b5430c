"""CSR construction."""

from .builder import Csr, CsrBuilder, parse_subject_name

__all__ = ["Csr", "CsrBuilder", "parse_subject_name"]
