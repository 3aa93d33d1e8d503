"""
Credential variants produced by account resolution.

Each variant carries a `credential_type` tag; callers branch on the tag to
build outbound authentication headers.
"""
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class CredentialType(str, Enum):
    """Authentication scheme of a resolved credential."""
    SIGNATURE = "signature"
    CERTIFICATE = "certificate"


class BaseCredential(BaseModel):
    """Fields shared by every credential variant."""
    model_config = ConfigDict(frozen=True)

    account_id: str = Field(min_length=1, description="Account the credential was built from")
    username: str = Field(min_length=1, description="API username")
    password: str = Field(min_length=1, repr=False, description="API password")
    subject: str = Field(default="", description="Third-party authorization subject")


class SignatureCredential(BaseCredential):
    """
    Password + API signature credential.

    Built when an account supplies both Signature and Subject.
    """
    credential_type: Literal[CredentialType.SIGNATURE] = CredentialType.SIGNATURE
    signature: str = Field(min_length=1, repr=False, description="API signature")


class CertificateCredential(BaseCredential):
    """
    Password + client certificate credential.

    Built when an account supplies CertPath and CertKey. Subject is optional.
    """
    credential_type: Literal[CredentialType.CERTIFICATE] = CredentialType.CERTIFICATE
    cert_path: str = Field(min_length=1, description="Path to the client certificate")
    cert_key: str = Field(min_length=1, repr=False, description="Certificate key/passphrase")


Credential = Annotated[
    Union[SignatureCredential, CertificateCredential],
    Field(discriminator="credential_type"),
]
