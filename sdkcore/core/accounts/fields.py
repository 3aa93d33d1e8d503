"""
Recognized per-account configuration fields.

Keys take the form "<accountId>.<FieldName>"; names are case-sensitive.
"""
from enum import Enum
from typing import Optional


class AccountField(str, Enum):
    """Field names an account record may carry."""
    USERNAME = "UserName"
    PASSWORD = "Password"
    SIGNATURE = "Signature"
    SUBJECT = "Subject"
    CERT_PATH = "CertPath"
    CERT_KEY = "CertKey"

    @classmethod
    def parse(cls, name: str) -> Optional["AccountField"]:
        """Return the field for an exact name, or None if unrecognized."""
        try:
            return cls(name)
        except ValueError:
            return None
