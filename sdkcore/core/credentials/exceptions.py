"""
Credential resolution errors.

MissingCredentialException: no account could be selected.
InvalidCredentialException: an account was selected but cannot produce a credential.
"""
from typing import Optional


class CredentialError(Exception):
    """Base class for credential resolution failures."""
    pass


class MissingCredentialException(CredentialError):
    """
    Raised when no account record can be selected.

    Attributes:
        identity: The requested UserName, or None for a default lookup
    """

    def __init__(self, identity: Optional[str] = None, detail: Optional[str] = None):
        self.identity = identity
        self.detail = detail
        if identity is None:
            message = "No default credential configured"
        else:
            message = f"No account configured with UserName '{identity}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class InvalidCredentialException(CredentialError):
    """
    Raised when a selected account's fields cannot build a valid credential.

    Attributes:
        account_id: Account whose record was rejected
        reason: Human-readable description of what is missing
    """

    def __init__(self, account_id: str, reason: str):
        self.account_id = account_id
        self.reason = reason
        super().__init__(f"Invalid credential for account '{account_id}': {reason}")
