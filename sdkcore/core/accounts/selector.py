"""
Account Selector

Picks the account a resolution should use: an explicit UserName lookup, or
the default account when no identity is given.

Default policy:
1. Exactly one declared account -> that account
2. Otherwise the unprefixed default-account marker key must name an existing account
3. Anything else -> MissingCredentialException("no default")

There is no fallback from a failed explicit lookup to the default account.
"""
from typing import Mapping, Optional
import logging

from sdkcore.core.accounts.indexer import AccountRecord
from sdkcore.core.credentials.exceptions import MissingCredentialException

logger = logging.getLogger(__name__)

DEFAULT_ACCOUNT_KEY = "DefaultAccount"


def find_by_username(accounts: Mapping[str, AccountRecord], identity: str) -> Optional[str]:
    """
    Return the id of the account whose UserName equals `identity` exactly.

    Accounts are scanned in account id order so duplicates resolve
    deterministically to the lexicographically first account.
    """
    if not identity:
        return None
    matches = [
        account_id
        for account_id in sorted(accounts)
        if accounts[account_id].username == identity
    ]
    if len(matches) > 1:
        logger.warning(f"UserName '{identity}' is declared by several accounts {matches}; using '{matches[0]}'")
    return matches[0] if matches else None


def select_default(
    accounts: Mapping[str, AccountRecord],
    config: Mapping[str, str],
    default_account_key: str = DEFAULT_ACCOUNT_KEY,
) -> str:
    """
    Pick the default account id.

    Raises:
        MissingCredentialException: If no default can be determined
    """
    if len(accounts) == 1:
        account_id = next(iter(accounts))
        logger.debug(f"Single account '{account_id}' used as default")
        return account_id

    if not accounts:
        raise MissingCredentialException(None, "no accounts declared")

    marker = config.get(default_account_key)
    if not marker:
        raise MissingCredentialException(
            None,
            f"{len(accounts)} accounts declared and '{default_account_key}' is not set"
        )
    if marker not in accounts:
        raise MissingCredentialException(
            None,
            f"'{default_account_key}' names unknown account '{marker}'"
        )

    logger.debug(f"Default account '{marker}' selected via '{default_account_key}'")
    return marker


def select_account(
    accounts: Mapping[str, AccountRecord],
    identity: Optional[str] = None,
    config: Optional[Mapping[str, str]] = None,
    default_account_key: str = DEFAULT_ACCOUNT_KEY,
) -> str:
    """
    Select the account id to build a credential from.

    Args:
        accounts: Indexed accounts of the current snapshot
        identity: UserName to look up; None for the default account
        config: Snapshot the accounts came from (holds the default marker)
        default_account_key: Name of the default-account marker key

    Returns:
        Selected account id

    Raises:
        MissingCredentialException: If no account matches or no default exists
    """
    if identity is not None:
        account_id = find_by_username(accounts, identity)
        if account_id is None:
            raise MissingCredentialException(identity)
        logger.debug(f"Identity '{identity}' matched account '{account_id}'")
        return account_id

    return select_default(accounts, config or {}, default_account_key)
