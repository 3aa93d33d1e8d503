"""
Credential Manager - Account Credential Resolution

Composes indexer -> selector -> factory over the current config snapshot.
Holds no credential state; the only cache is the indexed account map of the
latest snapshot, invalidated as soon as the store publishes a new one.

Usage:
    manager = CredentialManager(config_store=store)
    credential = manager.get_credential_object("jb_us_seller")
    default = manager.get_credential_object()

    # Shared instance for the process
    manager = get_credential_manager()
"""
from typing import Dict, List, Mapping, Optional, Tuple
import logging
import threading

from sdkcore.core.accounts.indexer import AccountRecord, index_accounts
from sdkcore.core.accounts.selector import select_account
from sdkcore.core.config import Settings, get_settings
from sdkcore.core.config_store import ConfigSnapshot, ConfigStore, get_config_store
from sdkcore.core.context import APIContext
from sdkcore.core.credentials.factory import build_credential
from sdkcore.core.credentials.models import Credential

logger = logging.getLogger(__name__)


class CredentialManager:
    """
    Resolves typed credentials for configured accounts.

    Pass one instance to every call site that authenticates outbound calls;
    get_credential_manager() provides a shared one for the process.
    """

    def __init__(self, config_store: Optional[ConfigStore] = None, settings: Optional[Settings] = None):
        """
        Initialize credential manager.

        Args:
            config_store: Source of config snapshots. Defaults to the process-wide store.
            settings: Settings to read the default-account key and cache flag from.
        """
        self._config_store = config_store
        self._settings = settings or get_settings()
        self._cache_lock = threading.Lock()
        self._cache: Optional[Tuple[ConfigSnapshot, Dict[str, AccountRecord]]] = None

    @property
    def config_store(self) -> ConfigStore:
        if self._config_store is None:
            self._config_store = get_config_store()
        return self._config_store

    def _accounts_for(self, snapshot: ConfigSnapshot) -> Dict[str, AccountRecord]:
        """Indexed accounts of `snapshot`, reusing the cache only for that exact snapshot."""
        if not self._settings.account_cache_enabled:
            return index_accounts(snapshot)

        cached = self._cache
        if cached is not None and cached[0] is snapshot:
            return cached[1]

        accounts = index_accounts(snapshot)
        with self._cache_lock:
            current = self._cache
            # Never replace a newer snapshot's entry with an older one
            if current is None or current[0].version <= snapshot.version:
                self._cache = (snapshot, accounts)
        logger.debug(f"Indexed accounts for config snapshot v{snapshot.version}: {sorted(accounts)}")
        return accounts

    def _resolve(self, config: Mapping[str, str], accounts: Mapping[str, AccountRecord],
                 identity: Optional[str]) -> Credential:
        account_id = select_account(
            accounts,
            identity=identity,
            config=config,
            default_account_key=self._settings.default_account_key,
        )
        return build_credential(accounts[account_id])

    def get_credential_object(self, identity: Optional[str] = None,
                              configuration: Optional[Mapping[str, str]] = None) -> Credential:
        """
        Resolve the credential for `identity` (a UserName) or the default account.

        Args:
            identity: UserName to look up. None selects the default account.
            configuration: Explicit flat config to resolve against instead of
                the store's current snapshot. Never cached.

        Returns:
            SignatureCredential or CertificateCredential

        Raises:
            MissingCredentialException: If no account matches / no default exists
            InvalidCredentialException: If the selected account is malformed
        """
        if configuration is not None:
            return self._resolve(configuration, index_accounts(configuration), identity)

        snapshot = self.config_store.current_snapshot()
        return self._resolve(snapshot, self._accounts_for(snapshot), identity)

    resolve = get_credential_object

    def resolve_for_context(self, context: APIContext, identity: Optional[str] = None) -> Credential:
        """Resolve using the context's per-request configuration when it has one."""
        return self.get_credential_object(identity, configuration=context.configuration or None)

    def list_accounts(self) -> List[str]:
        """Get sorted account ids declared in the current snapshot"""
        snapshot = self.config_store.current_snapshot()
        return list(self._accounts_for(snapshot))

    def invalidate_cache(self):
        """Drop the cached account map; the next call re-indexes."""
        with self._cache_lock:
            self._cache = None


# Shared instance
_manager: Optional[CredentialManager] = None
_manager_lock = threading.Lock()


def get_credential_manager() -> CredentialManager:
    """
    Get the shared credential manager (singleton).

    Exactly one instance is constructed even under concurrent first access.
    """
    global _manager
    if _manager is None:
        with _manager_lock:
            if _manager is None:
                _manager = CredentialManager()
    return _manager


def reset_credential_manager():
    """Drop the shared manager (useful for testing)."""
    global _manager
    with _manager_lock:
        _manager = None
