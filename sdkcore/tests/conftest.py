"""
Shared fixtures for credential resolution tests.
"""
from pathlib import Path

import pytest

from sdkcore.core.accounts.manager import CredentialManager, reset_credential_manager
from sdkcore.core import config as config_module
from sdkcore.core.config import Settings
from sdkcore.core.config_store import ConfigStore, reset_config_store

RESOURCES_DIR = Path(__file__).parent / "resources"


@pytest.fixture
def resources_dir():
    """Directory holding the .properties / .yaml test configs"""
    return RESOURCES_DIR


@pytest.fixture
def settings():
    """Settings isolated from any local .env file"""
    return Settings(_env_file=None)


@pytest.fixture
def signature_fields():
    return {
        "acct1.UserName": "jb_us_seller",
        "acct1.Password": "password1",
        "acct1.Signature": "signature1",
        "acct1.Subject": "subject1",
    }


@pytest.fixture
def certificate_fields():
    return {
        "acct2.UserName": "cert_user",
        "acct2.Password": "password2",
        "acct2.CertPath": "certs/cert2.p12",
        "acct2.CertKey": "certKey2",
    }


@pytest.fixture
def store():
    """Empty config store"""
    return ConfigStore()


@pytest.fixture
def loaded_store(resources_dir):
    """Store loaded from the two-account test config with a DefaultAccount marker"""
    store = ConfigStore()
    store.load(resources_dir / "sdk_config.properties")
    return store


@pytest.fixture
def manager(loaded_store, settings):
    return CredentialManager(config_store=loaded_store, settings=settings)


@pytest.fixture(autouse=True)
def reset_singletons():
    """Make sure no test sees another test's shared settings, store or manager"""
    reset_config_store()
    reset_credential_manager()
    yield
    config_module._settings = None
    reset_config_store()
    reset_credential_manager()
