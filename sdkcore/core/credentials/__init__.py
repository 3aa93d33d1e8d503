"""
Typed credentials and the factory that validates account records into them.
"""

from .exceptions import CredentialError, MissingCredentialException, InvalidCredentialException
from .models import BaseCredential, Credential, CredentialType, SignatureCredential, CertificateCredential
from .factory import build_credential

__all__ = [
    "CredentialError",
    "MissingCredentialException",
    "InvalidCredentialException",
    "BaseCredential",
    "Credential",
    "CredentialType",
    "SignatureCredential",
    "CertificateCredential",
    "build_credential",
]
