"""
Credential Factory

Validates one account record and builds the matching credential variant.

Scheme precedence (first match wins):
1. Signature + Subject  -> SignatureCredential
2. CertPath + CertKey   -> CertificateCredential (Subject optional)

A record that satisfies both shapes resolves to a SignatureCredential.
"""
import logging

from pydantic import ValidationError

from sdkcore.core.accounts.fields import AccountField
from sdkcore.core.accounts.indexer import AccountRecord
from sdkcore.core.credentials.exceptions import InvalidCredentialException
from sdkcore.core.credentials.models import (
    CertificateCredential,
    Credential,
    SignatureCredential,
)

logger = logging.getLogger(__name__)


def build_credential(record: AccountRecord) -> Credential:
    """
    Build the credential for a single account record.

    Args:
        record: Pre-filtered fields of one account

    Returns:
        SignatureCredential or CertificateCredential

    Raises:
        InvalidCredentialException: If UserName/Password are missing or no
            credential scheme can be determined
    """
    account_id = record.account_id

    missing = [
        f.value for f in (AccountField.USERNAME, AccountField.PASSWORD)
        if not record.has(f)
    ]
    if missing:
        raise InvalidCredentialException(
            account_id,
            f"account record incomplete, missing {' and '.join(missing)}"
        )

    username = record.get(AccountField.USERNAME)
    password = record.get(AccountField.PASSWORD)
    subject = record.get(AccountField.SUBJECT) or ""

    try:
        if record.has(AccountField.SIGNATURE) and record.has(AccountField.SUBJECT):
            if record.has(AccountField.CERT_PATH) or record.has(AccountField.CERT_KEY):
                logger.warning(f"Account '{account_id}' declares signature and certificate fields; using signature")
            credential = SignatureCredential(
                account_id=account_id,
                username=username,
                password=password,
                signature=record.get(AccountField.SIGNATURE),
                subject=subject,
            )
        elif record.has(AccountField.CERT_PATH) and record.has(AccountField.CERT_KEY):
            credential = CertificateCredential(
                account_id=account_id,
                username=username,
                password=password,
                cert_path=record.get(AccountField.CERT_PATH),
                cert_key=record.get(AccountField.CERT_KEY),
                subject=subject,
            )
        else:
            raise InvalidCredentialException(
                account_id,
                "account record has username/password but no determinable credential scheme "
                "- must supply Signature+Subject or CertPath+CertKey"
            )
    except ValidationError as e:
        raise InvalidCredentialException(account_id, str(e)) from e

    logger.debug(f"Built {credential.credential_type.value} credential for account '{account_id}'")
    return credential
