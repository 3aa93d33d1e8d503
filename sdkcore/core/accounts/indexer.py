"""
Account Indexer

Groups the flat configuration key space into per-account records using the
"<accountId>.<FieldName>" naming convention. Validation is left to the
credential factory; a record exists as soon as one recognized key names it.
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional
import logging

from sdkcore.core.accounts.fields import AccountField

logger = logging.getLogger(__name__)

ACCOUNT_SEPARATOR = "."


@dataclass(frozen=True)
class AccountRecord:
    """
    One logical account and the recognized fields declared for it.

    Attributes:
        account_id: Key prefix before the first dot (never empty)
        fields: Read-only mapping of recognized field -> raw value
    """
    account_id: str
    fields: Mapping[AccountField, str] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self):
        if not self.account_id:
            raise ValueError("AccountRecord requires a non-empty account_id")
        if not isinstance(self.fields, MappingProxyType):
            object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def get(self, account_field: AccountField) -> Optional[str]:
        return self.fields.get(account_field)

    def has(self, account_field: AccountField) -> bool:
        """True when the field is present with a non-empty value."""
        return bool(self.fields.get(account_field))

    @property
    def username(self) -> Optional[str]:
        return self.fields.get(AccountField.USERNAME)


def split_account_key(key: str):
    """
    Split "acct1.UserName" into ("acct1", AccountField.USERNAME).

    Returns None for keys without a dot, with an empty account id or field
    name, or with a field name that is not recognized.
    """
    account_id, sep, field_name = key.partition(ACCOUNT_SEPARATOR)
    if not sep or not account_id or not field_name:
        return None
    account_field = AccountField.parse(field_name)
    if account_field is None:
        return None
    return account_id, account_field


def index_accounts(config: Mapping[str, str]) -> Dict[str, AccountRecord]:
    """
    Build one AccountRecord per account id declared in `config`.

    Args:
        config: Flat string -> string configuration snapshot

    Returns:
        Mapping of account id -> AccountRecord, ordered by account id
    """
    grouped: Dict[str, Dict[AccountField, str]] = {}
    ignored = 0

    for key, value in config.items():
        parsed = split_account_key(key)
        if parsed is None:
            ignored += 1
            continue
        account_id, account_field = parsed
        grouped.setdefault(account_id, {})[account_field] = value

    accounts = {
        account_id: AccountRecord(account_id=account_id, fields=grouped[account_id])
        for account_id in sorted(grouped)
    }
    logger.debug(f"Indexed {len(accounts)} account(s) from {len(config)} key(s), {ignored} non-account key(s) ignored")
    return accounts
